"""Timer service - business logic for time tracking."""
import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from clockify_cli.errors import EntryNotFound, ProjectCreationFailed, TimerAlreadyRunning
from clockify_cli.models.project import Project
from clockify_cli.models.results import AddResult, EditResult, StartResult, StatusResult, StopResult
from clockify_cli.models.time_entry import EntryOverrides, TimeEntry, TimeEntryRequest
from clockify_cli.services.entry_mutation import build_update
from clockify_cli.services.project_service import ProjectService
from clockify_cli.utils.anchor import resolve_anchor
from clockify_cli.utils.duration import elapsed_minutes, parse_duration
from clockify_cli.utils.sanitize import sanitize_input


logger = logging.getLogger(__name__)

LAST_ENTRY = "last"


def find_active(entries: Iterable[TimeEntry]) -> Optional[TimeEntry]:
    """
    Find the open entry (no end timestamp), if any.

    Entries are scanned in server order, most recent first. Only the first
    open entry counts; any further open entries are logged and ignored.
    """
    open_entries = [entry for entry in entries if entry.is_running]
    if not open_entries:
        return None

    if len(open_entries) > 1:
        logger.warning(
            "Found %d open time entries; using the most recent (%s)",
            len(open_entries),
            open_entries[0].id,
        )
    return open_entries[0]


def find_last_completed(entries: Iterable[TimeEntry]) -> Optional[TimeEntry]:
    """Most recent entry that has an end timestamp."""
    for entry in entries:
        if not entry.is_running:
            return entry
    return None


class TimerService:
    """
    Service for handling the single active timer and manual entries.

    Every operation takes workspace, user and current time explicitly and
    re-fetches entries from the API; nothing is cached between calls.
    """

    def __init__(self, client, project_service: Optional[ProjectService] = None):
        """Initialize service with a Clockify API client."""
        self.client = client
        self.project_service = project_service or ProjectService(client)

    async def start_timer(
        self,
        workspace_id: str,
        user_id: str,
        now: datetime,
        description: Optional[str] = None,
        project: Optional[str] = None,
        billable: bool = False,
    ) -> StartResult:
        """
        Start a new timer.

        Args:
            workspace_id: Workspace ID
            user_id: User ID
            now: Start time of the new entry
            description: Optional description
            project: Optional project name fragment or id; created when missing
            billable: Billable flag for the entry and for a created project

        Returns:
            StartResult with the open entry and any warnings

        Raises:
            TimerAlreadyRunning: If an entry is already open
        """
        # Check if timer is already running
        entries = await self.client.get_time_entries(workspace_id, user_id)
        running = find_active(entries)
        if running:
            raise TimerAlreadyRunning(running)

        request = TimeEntryRequest(
            start=now,
            description=sanitize_input(description) if description else "",
            billable=billable,
        )

        resolved: Optional[Project] = None
        created = False
        warnings: list[str] = []

        if project:
            try:
                resolved, created = await self.project_service.resolve_or_create(
                    workspace_id,
                    project,
                    billable=billable,
                )
                request.project_id = resolved.id
            except ProjectCreationFailed as e:
                warnings.append(
                    f'Failed to create project "{project}". Starting without project. '
                    f"Error: {e.reason}"
                )

        entry = await self.client.start_timer(workspace_id, request)
        logger.debug("Started time entry %s", entry.id)

        return StartResult(entry=entry, project=resolved, created_project=created, warnings=warnings)

    async def stop_timer(
        self,
        workspace_id: str,
        user_id: str,
        now: datetime,
    ) -> StopResult:
        """
        Stop the currently running timer.

        Args:
            workspace_id: Workspace ID
            user_id: User ID
            now: End time for the running entry

        Returns:
            StopResult; without an entry when nothing was running
        """
        entries = await self.client.get_time_entries(workspace_id, user_id)
        running = find_active(entries)
        if not running:
            return StopResult()

        stopped = await self.client.stop_timer(workspace_id, user_id, end=now)
        duration = elapsed_minutes(stopped.start, stopped.end or now)

        return StopResult(entry=stopped, duration_minutes=duration)

    async def get_status(
        self,
        workspace_id: str,
        user_id: str,
        now: datetime,
    ) -> StatusResult:
        """
        Report the running timer, or today's totals when idle.

        Args:
            workspace_id: Workspace ID
            user_id: User ID
            now: Current time; "today" is its local calendar day

        Returns:
            StatusResult
        """
        entries = await self.client.get_time_entries(workspace_id, user_id)
        running = find_active(entries)

        if running:
            # Clamp clock skew between local machine and server
            elapsed = max(0, elapsed_minutes(running.start, now))
            return StatusResult(active=running, elapsed_minutes=elapsed)

        today = now.astimezone().date()
        closed_today = [
            entry for entry in entries
            if entry.end is not None and entry.start.astimezone().date() == today
        ]
        total = sum(elapsed_minutes(entry.start, entry.end) for entry in closed_today)

        return StatusResult(today_entries=len(closed_today), today_minutes=total)

    async def add_entry(
        self,
        workspace_id: str,
        duration: str,
        now: datetime,
        description: Optional[str] = None,
        project: Optional[str] = None,
        billable: bool = False,
        start_time: Optional[str] = None,
    ) -> AddResult:
        """
        Create a closed entry from a duration.

        Without a start time the entry ends now; with one it starts there.

        Args:
            workspace_id: Workspace ID
            duration: Duration text such as "1h30m"
            now: Current time
            description: Optional description
            project: Optional project name fragment or id; never created
            billable: Billable flag
            start_time: Optional "HH:MM" (today) or ISO-8601 datetime

        Returns:
            AddResult with the created entry and any warnings

        Raises:
            InvalidDurationFormat: If the duration cannot be parsed
            InvalidTimeFormat: If the start time cannot be parsed
        """
        minutes = parse_duration(duration)

        if start_time:
            start = resolve_anchor(start_time, now)
            end = start + timedelta(minutes=minutes)
        else:
            end = now
            start = now - timedelta(minutes=minutes)

        request = TimeEntryRequest(
            start=start,
            end=end,
            description=sanitize_input(description) if description else "",
            billable=billable,
        )

        resolved: Optional[Project] = None
        warnings: list[str] = []

        if project:
            resolved = await self.project_service.find_project(workspace_id, project)
            if resolved:
                request.project_id = resolved.id
            else:
                warnings.append(f'Project "{project}" not found. Adding without project.')

        entry = await self.client.create_time_entry(workspace_id, request)

        return AddResult(entry=entry, duration_minutes=minutes, project=resolved, warnings=warnings)

    async def edit_entry(
        self,
        workspace_id: str,
        user_id: str,
        entry_ref: str,
        overrides: EntryOverrides,
        now: datetime,
    ) -> EditResult:
        """
        Update an entry with the supplied overrides.

        Args:
            workspace_id: Workspace ID
            user_id: User ID
            entry_ref: Entry id, or "last" for the most recent completed entry
            overrides: Fields to change
            now: Current time

        Returns:
            EditResult with the updated entry and change log

        Raises:
            EntryNotFound: If no entry matches
            NoChangesRequested: If nothing would change; no write is made
        """
        entries = await self.client.get_time_entries(workspace_id, user_id)

        if entry_ref.lower() == LAST_ENTRY:
            target = find_last_completed(entries)
        else:
            target = next((entry for entry in entries if entry.id == entry_ref), None)

        if not target:
            raise EntryNotFound(entry_ref)

        projects = []
        if overrides.is_set("project") and overrides.project:
            projects = await self.client.get_projects(workspace_id)

        plan = build_update(target, overrides, now=now, projects=projects)

        updated = await self.client.update_time_entry(workspace_id, target.id, plan.payload)
        duration = elapsed_minutes(updated.start, updated.end) if updated.end else None

        return EditResult(
            entry=updated,
            changes=plan.changes,
            duration_minutes=duration,
            warnings=plan.warnings,
        )
