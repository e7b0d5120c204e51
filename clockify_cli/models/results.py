"""Command result models handed to the presentation layer."""
from typing import Optional

from pydantic import BaseModel, Field

from clockify_cli.models.project import Project
from clockify_cli.models.time_entry import TimeEntry


class StartResult(BaseModel):
    """Outcome of starting a timer."""

    entry: TimeEntry
    project: Optional[Project] = None
    created_project: bool = False
    warnings: list[str] = Field(default_factory=list)


class StopResult(BaseModel):
    """Outcome of stopping a timer; ``entry`` is None when nothing was running."""

    entry: Optional[TimeEntry] = None
    duration_minutes: Optional[int] = None

    @property
    def stopped(self) -> bool:
        return self.entry is not None


class StatusResult(BaseModel):
    """Running timer with elapsed minutes, or today's summary when idle."""

    active: Optional[TimeEntry] = None
    elapsed_minutes: Optional[int] = None
    today_entries: int = 0
    today_minutes: int = 0

    @property
    def running(self) -> bool:
        return self.active is not None


class AddResult(BaseModel):
    """Outcome of adding a manual entry."""

    entry: TimeEntry
    duration_minutes: int
    project: Optional[Project] = None
    warnings: list[str] = Field(default_factory=list)


class EditResult(BaseModel):
    """Outcome of editing an entry."""

    entry: TimeEntry
    changes: list[str]
    duration_minutes: Optional[int] = None
    warnings: list[str] = Field(default_factory=list)
