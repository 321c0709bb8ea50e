"""Date token parsing.

Work logs carry dates as ``mon-dd-yyyy`` tokens (e.g. ``nov-23-2025`` or
``sept-07-2025``). They are converted to plain calendar dates; no timezone is
involved.
"""

from __future__ import annotations

import re
from datetime import date

from .errors import DateParseError

DATE_TOKEN_RE = re.compile(r"^(?P<m>[A-Za-z]+)-(?P<d>\d{1,2})-(?P<y>\d{4})$")

MONTHS: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}


def is_date_token(token: str) -> bool:
    """Return True if the token has the lexical shape ``<month>-<day>-<year>``."""
    return bool(DATE_TOKEN_RE.match(token.strip()))


def parse_date_token(token: str) -> date:
    """Parse a ``mon-dd-yyyy`` token into a date."""
    parts = token.strip().lower().split("-")
    if len(parts) != 3:
        raise DateParseError(f"Invalid date format: {token}. Expected mon-dd-yyyy")

    month_s, day_s, year_s = parts
    month = MONTHS.get(month_s)
    if month is None:
        raise DateParseError(f"Invalid month: {month_s}")

    if not (day_s.isdigit() and year_s.isdigit()):
        raise DateParseError(f"Invalid date: {token}")

    try:
        return date(int(year_s), month, int(day_s))
    except ValueError as e:
        raise DateParseError(f"Invalid date: {token}") from e


def to_iso_date(token: str) -> str:
    """Return the ISO ``yyyy-mm-dd`` form of a date token."""
    return parse_date_token(token).isoformat()
