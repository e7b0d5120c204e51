"""Build full-field update requests for editing time entries."""
from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, Field

from clockify_cli.errors import InvalidTimeFormat, NoChangesRequested
from clockify_cli.models.project import Project
from clockify_cli.models.time_entry import EntryOverrides, TimeEntry, TimeEntryRequest
from clockify_cli.services.project_service import match_project
from clockify_cli.utils.anchor import resolve_anchor
from clockify_cli.utils.sanitize import sanitize_input


class MutationPlan(BaseModel):
    """Update request plus the human-readable list of what it changes."""

    payload: TimeEntryRequest
    changes: list[str]
    warnings: list[str] = Field(default_factory=list)


def seed_request(existing: TimeEntry) -> TimeEntryRequest:
    """
    Copy every writable field of an entry into a request.

    End, project and task are only carried when the entry has them, so they
    are omitted from the payload rather than sent as null.
    """
    return TimeEntryRequest(
        start=existing.start,
        end=existing.end,
        description=existing.description,
        billable=existing.billable,
        project_id=existing.project_id,
        task_id=existing.task_id,
        tag_ids=list(existing.tag_ids),
    )


def build_update(
    existing: TimeEntry,
    overrides: EntryOverrides,
    *,
    now: datetime,
    projects: Iterable[Project] = (),
) -> MutationPlan:
    """
    Merge overrides onto an existing entry.

    Overrides are applied in a fixed order (description, billable, project,
    start time, end time) and each applied one adds a label to the change
    log. An unknown project keeps the current one and adds a warning.

    Args:
        existing: Entry being edited
        overrides: Explicitly supplied fields
        now: Current time; anchors an end clock time when the entry has no end
        projects: Workspace projects, needed only for a project override

    Returns:
        MutationPlan with the full request, change log and warnings

    Raises:
        NoChangesRequested: If no override results in a change
        InvalidTimeFormat: If a time text cannot be parsed or end ends up before start
    """
    if overrides.is_empty:
        raise NoChangesRequested()

    payload = seed_request(existing)
    changes: list[str] = []
    warnings: list[str] = []

    if overrides.is_set("description") and overrides.description is not None:
        payload.description = sanitize_input(overrides.description)
        changes.append("description")

    if overrides.is_set("billable") and overrides.billable is not None:
        payload.billable = overrides.billable
        changes.append("marked billable" if overrides.billable else "marked non-billable")

    if overrides.is_set("project") and overrides.project:
        project = match_project(projects, overrides.project)
        if project:
            payload.project_id = project.id
            changes.append(f"project → {project.name}")
        else:
            warnings.append(f'Project "{overrides.project}" not found. Keeping current project.')

    if overrides.is_set("start_time") and overrides.start_time:
        payload.start = resolve_anchor(overrides.start_time, existing.start)
        changes.append("start time")

    if overrides.is_set("end_time") and overrides.end_time:
        payload.end = resolve_anchor(overrides.end_time, existing.end or now)
        changes.append("end time")

    if not changes:
        raise NoChangesRequested(warnings=warnings)

    if payload.end is not None and payload.end < payload.start:
        raise InvalidTimeFormat(
            overrides.end_time or overrides.start_time or "",
            "End time cannot be before start time",
        )

    return MutationPlan(payload=payload, changes=changes, warnings=warnings)
