"""Error kinds raised by the Clockify CLI."""
from typing import Optional


class ClockifyError(Exception):
    """Base class for all CLI errors."""

    hint: Optional[str] = None


class NotAuthenticated(ClockifyError):
    """No API key is stored or provided."""

    hint = 'Run: clockify auth login --api-key <KEY>'

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NoWorkspaceConfigured(ClockifyError):
    """No workspace id is stored."""

    hint = "Run: clockify auth status"

    def __init__(self, message: str = "No workspace configured"):
        super().__init__(message)


class InvalidDurationFormat(ClockifyError, ValueError):
    """Duration text matches none of the accepted shapes."""

    hint = 'Use formats like "1h30m", "45m", "2h" or "90"'

    def __init__(self, text: str):
        self.text = text
        super().__init__(f'Invalid duration format: "{text}"')


class InvalidTimeFormat(ClockifyError, ValueError):
    """Time text is neither HH:MM nor an ISO-8601 datetime."""

    hint = 'Use "HH:MM" or a full datetime like "2024-05-01T09:30"'

    def __init__(self, text: str, message: Optional[str] = None):
        self.text = text
        super().__init__(message or f'Invalid time format: "{text}"')


class EntryNotFound(ClockifyError):
    """No time entry matches the requested id."""

    hint = 'Use "last" to edit the most recent entry'

    def __init__(self, entry_ref: str):
        self.entry_ref = entry_ref
        super().__init__(f"Time entry not found: {entry_ref}")


class NoChangesRequested(ClockifyError):
    """An edit was requested without any effective override."""

    hint = "Use options like --description, --billable, --project, --start-time, --end-time"

    def __init__(self, message: str = "No changes specified", warnings: Optional[list[str]] = None):
        self.warnings = warnings or []
        super().__init__(message)


class TimerAlreadyRunning(ClockifyError):
    """A start was requested while an entry is still open."""

    hint = 'Use "clockify stop" first or "clockify status" to see details'

    def __init__(self, entry):
        self.entry = entry
        super().__init__("Timer already running")


class TransportError(ClockifyError):
    """Any failure talking to the remote service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProjectCreationFailed(ClockifyError):
    """Creating a missing project failed; callers continue without one."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f'Failed to create project "{name}": {reason}')
