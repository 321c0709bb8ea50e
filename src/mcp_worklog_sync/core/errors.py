"""Exceptions raised by the core."""

from __future__ import annotations


class DateParseError(ValueError):
    """A date token could not be turned into a calendar date."""


class RemoteError(RuntimeError):
    """The remote project-tracking service reported a failure."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
