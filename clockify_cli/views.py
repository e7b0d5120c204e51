"""Console rendering of command results using rich."""
from rich.console import Console
from rich.markup import escape

from clockify_cli.errors import ClockifyError
from clockify_cli.models.results import AddResult, EditResult, StartResult, StatusResult, StopResult
from clockify_cli.models.time_entry import TimeEntry
from clockify_cli.services.auth_service import AuthStatus
from clockify_cli.utils.duration import format_duration


RULE = "━" * 50
NO_DESCRIPTION = "No description"


def _field(console: Console, label: str, value: str, style: str = "white") -> None:
    console.print(f"[bold]{label}:[/bold] [{style}]{escape(value)}[/{style}]", highlight=False)


def _billable(console: Console, entry: TimeEntry) -> None:
    if entry.billable:
        _field(console, "Billable", "Yes", "green")
    else:
        _field(console, "Billable", "No", "dim")


def _local(entry_time, fmt: str = "%Y-%m-%d %H:%M") -> str:
    return entry_time.astimezone().strftime(fmt)


def info(console: Console, message: str) -> None:
    console.print(f"[blue]{escape(message)}[/blue]", highlight=False)


def hint(console: Console, message: str) -> None:
    console.print(f"[dim]💡 {escape(message)}[/dim]", highlight=False)


def warning(console: Console, message: str) -> None:
    console.print(f"[yellow]⚠️  {escape(message)}[/yellow]", highlight=False)


def success(console: Console, message: str) -> None:
    console.print(f"[green]✅ {escape(message)}[/green]", highlight=False)


def error(console: Console, err: Exception, prefix: str = "") -> None:
    message = f"{prefix}{err}" if prefix else str(err)
    console.print(f"[red]❌ {escape(message)}[/red]", highlight=False)
    if isinstance(err, ClockifyError) and err.hint:
        hint(console, err.hint)


def render_started(console: Console, result: StartResult) -> None:
    entry = result.entry
    if result.created_project and result.project:
        success(console, f'Project "{result.project.name}" created successfully!')
    for message in result.warnings:
        warning(console, message)

    success(console, "Timer started successfully!")
    console.print(RULE, style="dim")
    project_name = entry.project_name or (result.project.name if result.project else None)
    if project_name:
        _field(console, "Project", project_name)
    if entry.task:
        _field(console, "Task", entry.task.name)
    _field(console, "Description", entry.description or NO_DESCRIPTION)
    _billable(console, entry)
    _field(console, "Started", _local(entry.start, "%H:%M:%S"))
    console.print(RULE, style="dim")
    hint(console, 'Use "clockify status" to check progress or "clockify stop" to finish')


def render_already_running(console: Console, entry: TimeEntry) -> None:
    warning(console, "Timer already running!")
    console.print(f"[dim]Current: {escape(entry.description or NO_DESCRIPTION)}[/dim]", highlight=False)
    hint(console, 'Use "clockify stop" first or "clockify status" to see details')


def render_stopped(console: Console, result: StopResult) -> None:
    if not result.stopped:
        warning(console, "No timer currently running")
        hint(console, 'Use "clockify start" to begin tracking time')
        return

    entry = result.entry
    success(console, "Timer stopped successfully!")
    console.print(RULE, style="dim")
    if entry.project_name:
        _field(console, "Project", entry.project_name)
    _field(console, "Description", entry.description or NO_DESCRIPTION)
    _field(console, "Duration", format_duration(max(0, result.duration_minutes)))
    _billable(console, entry)
    console.print(RULE, style="dim")


def render_status(console: Console, result: StatusResult) -> None:
    if not result.running:
        console.print("[dim]⏸️  No timer currently running[/dim]")
        hint(console, 'Use "clockify start" to begin tracking time')
        if result.today_entries:
            console.print("\n[dim]📈 Today's Summary:[/dim]")
            console.print(
                f"   {result.today_entries} entries • {format_duration(result.today_minutes)} total",
                highlight=False,
            )
        return

    entry = result.active
    console.print("[green]⏱️  Timer is running[/green]")
    console.print(RULE, style="dim")
    if entry.project_name:
        _field(console, "Project", entry.project_name)
    else:
        _field(console, "Project", "No project", "dim")
    if entry.task:
        _field(console, "Task", entry.task.name)
    _field(console, "Description", entry.description or NO_DESCRIPTION)
    _field(console, "Started", _local(entry.start, "%H:%M:%S"))
    _field(console, "Elapsed", format_duration(result.elapsed_minutes), "yellow")
    _billable(console, entry)
    console.print(RULE, style="dim")
    hint(console, 'Use "clockify stop" to finish')


def render_added(console: Console, result: AddResult) -> None:
    for message in result.warnings:
        warning(console, message)

    entry = result.entry
    success(console, "Time entry added successfully!")
    console.print(RULE, style="dim")
    project_name = entry.project_name or (result.project.name if result.project else None)
    if project_name:
        _field(console, "Project", project_name)
    _field(console, "Description", entry.description or NO_DESCRIPTION)
    _field(console, "Start", _local(entry.start))
    if entry.end:
        _field(console, "End", _local(entry.end))
    _field(console, "Duration", format_duration(result.duration_minutes))
    _billable(console, entry)
    console.print(RULE, style="dim")


def render_edited(console: Console, result: EditResult) -> None:
    for message in result.warnings:
        warning(console, message)

    entry = result.entry
    success(console, "Time entry updated successfully!")
    console.print(RULE, style="dim")
    _field(console, "Changes", ", ".join(result.changes), "cyan")
    console.print(RULE, style="dim")
    if entry.project_name:
        _field(console, "Project", entry.project_name)
    _field(console, "Description", entry.description or NO_DESCRIPTION)
    _field(console, "Start", _local(entry.start))
    if entry.end and result.duration_minutes is not None:
        _field(console, "End", _local(entry.end))
        _field(console, "Duration", format_duration(result.duration_minutes))
    _billable(console, entry)
    console.print(RULE, style="dim")


def render_auth_status(console: Console, status: AuthStatus) -> None:
    if not status.authenticated:
        warning(console, "Not authenticated")
        hint(console, "Run: clockify auth login --api-key <KEY>")
        return

    success(console, "Authenticated")
    if status.user:
        _field(console, "User", f"{status.user.name} <{status.user.email}>")
    if status.workspace_id:
        names = {workspace.id: workspace.name for workspace in status.workspaces}
        label = names.get(status.workspace_id, status.workspace_id)
        _field(console, "Workspace", label)
    else:
        warning(console, "No workspace configured")
    if status.workspaces:
        console.print("[bold]Available workspaces:[/bold]")
        for workspace in status.workspaces:
            console.print(f"   {workspace.id}  {escape(workspace.name)}", highlight=False)
