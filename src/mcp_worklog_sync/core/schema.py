"""JSON schema of the work-log input document (published to MCP clients)."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WorkEntryDocument(BaseModel):
    project: str = Field(description="Project name (see the projects mapping).")
    subject: str = Field(description="Work package subject; unique per date.")
    duration_hours: float = Field(gt=0, description="Hours spent.")
    activity: str = Field(description="Activity name (see the activities mapping).")
    is_scrum: bool = Field(description="SCRUM entries are pinned to 10:00.")
    break_hours: float | None = Field(
        default=None, ge=0, description="Pause before this entry (ignored for the first one)."
    )
    work_package_id: int | None = Field(
        default=None, gt=0, description="Existing work package to log against."
    )


class DailyLogDocument(BaseModel):
    date: str = Field(
        pattern=r"^[A-Za-z]+-\d{1,2}-\d{4}$",
        description="Date token mon-dd-yyyy, e.g. nov-23-2025.",
    )
    entries: list[WorkEntryDocument]


class WorkLogDocument(BaseModel):
    logs: list[DailyLogDocument] = Field(min_length=1)


SAMPLE_WORKLOG = """{
  "logs": [
    {
      "date": "nov-23-2025",
      "entries": [
        {
          "project": "GENERAL-PROJECT-TASKS-MEETING-AND-SCRUM",
          "subject": "Daily standup",
          "duration_hours": 0.5,
          "activity": "Meeting",
          "is_scrum": true,
          "break_hours": null,
          "work_package_id": null
        },
        {
          "project": "IDCOL",
          "subject": "Fix login redirect bug",
          "duration_hours": 2,
          "activity": "Development",
          "is_scrum": false,
          "break_hours": null,
          "work_package_id": null
        },
        {
          "project": "HRIS",
          "subject": "Review leave approval flow",
          "duration_hours": 1.5,
          "activity": "Support",
          "is_scrum": false,
          "break_hours": 1,
          "work_package_id": null
        }
      ]
    }
  ]
}
"""
