"""Time entry model definitions."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator


def to_api_timestamp(value: datetime) -> str:
    """Render a timestamp the way the API expects: UTC with a Z suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ProjectRef(BaseModel):
    """Project summary embedded in hydrated time entries."""

    id: str
    name: str


class TaskRef(BaseModel):
    """Task summary embedded in hydrated time entries."""

    id: str
    name: str


class TimeInterval(BaseModel):
    """Start and optional end of a time entry."""

    start: datetime
    end: Optional[datetime] = None
    duration: Optional[str] = None

    @model_validator(mode="after")
    def check_order(self):
        if self.end is not None and self.end < self.start:
            raise ValueError("Time interval end must not be before start")
        return self


class TimeEntry(BaseModel):
    """Time entry as returned by the Clockify API."""

    id: str
    user_id: str = Field(alias="userId")
    workspace_id: Optional[str] = Field(default=None, alias="workspaceId")
    description: str = ""
    billable: bool = False
    project_id: Optional[str] = Field(default=None, alias="projectId")
    task_id: Optional[str] = Field(default=None, alias="taskId")
    tag_ids: list[str] = Field(default_factory=list, alias="tagIds")
    project: Optional[ProjectRef] = None
    task: Optional[TaskRef] = None
    time_interval: TimeInterval = Field(alias="timeInterval")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def derive_tag_ids(cls, data):
        # Hydrated responses carry tag objects instead of ids
        if isinstance(data, dict) and not data.get("tagIds") and data.get("tags"):
            data = {**data, "tagIds": [tag["id"] for tag in data["tags"]]}
        return data

    @field_validator("description", mode="before")
    @classmethod
    def none_description(cls, value):
        return value or ""

    @field_validator("tag_ids", mode="before")
    @classmethod
    def none_tag_ids(cls, value):
        return value or []

    @property
    def start(self) -> datetime:
        return self.time_interval.start

    @property
    def end(self) -> Optional[datetime]:
        return self.time_interval.end

    @property
    def is_running(self) -> bool:
        """An entry is open while its interval has no end."""
        return self.time_interval.end is None

    @property
    def project_name(self) -> Optional[str]:
        return self.project.name if self.project else None


class TimeEntryRequest(BaseModel):
    """
    Write-side time entry used for create and update.

    Updates are full-field merges: the server replaces every field, so the
    request is always seeded from the existing entry.
    """

    start: datetime
    end: Optional[datetime] = None
    description: str = ""
    billable: bool = False
    project_id: Optional[str] = Field(default=None, alias="projectId")
    task_id: Optional[str] = Field(default=None, alias="taskId")
    tag_ids: Optional[list[str]] = Field(default=None, alias="tagIds")

    model_config = {"populate_by_name": True}

    @field_serializer("start", "end")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        return to_api_timestamp(value)

    def to_payload(self) -> dict:
        """JSON body with camelCase keys; absent optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EntryOverrides(BaseModel):
    """
    Optional field overrides for editing an entry.

    Presence is tracked through ``model_fields_set``: a field counts as an
    override only when it was passed explicitly.
    """

    description: Optional[str] = None
    billable: Optional[bool] = None
    project: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    def is_set(self, name: str) -> bool:
        return name in self.model_fields_set

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set
