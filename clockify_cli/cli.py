"""Command-line entry point.

Usage:
    clockify start -d "Fix login bug" -p client --billable yes
    clockify status
    clockify stop
    clockify add 1h30m -d "Code review" --start-time 09:00
    clockify edit last --end-time 17:30
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from clockify_cli import views
from clockify_cli.client import ClockifyClient
from clockify_cli.config import ConfigStore, Settings, settings
from clockify_cli.errors import (
    ClockifyError,
    NoChangesRequested,
    NoWorkspaceConfigured,
    NotAuthenticated,
    TimerAlreadyRunning,
)
from clockify_cli.models.time_entry import EntryOverrides
from clockify_cli.services.auth_service import AuthService
from clockify_cli.services.timer_service import TimerService


logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "yes", "y", "1", "on"}
FALSE_VALUES = {"false", "no", "n", "0", "off"}

# Config keys accepted by "config set", mapped to stored field names
CONFIG_KEYS = {
    "workspace-id": "workspace_id",
    "billable-by-default": "billable_by_default",
}

FAILURE_PREFIXES = {
    "start": "Failed to start timer: ",
    "stop": "Failed to stop timer: ",
    "status": "Failed to get timer status: ",
    "add": "Failed to add time entry: ",
    "edit": "Failed to edit time entry: ",
}

ClientFactory = Callable[[str], ClockifyClient]
Clock = Callable[[], datetime]


def parse_bool(value: str) -> bool:
    """argparse type for yes/no style flags."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(prog="clockify", description="Clockify time tracking from the terminal")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    start = commands.add_parser("start", help="Start a timer")
    start.add_argument("-d", "--description", help="Entry description")
    start.add_argument("-p", "--project", help="Project name or id (created if missing)")
    start.add_argument("--billable", type=parse_bool, help="Mark entry billable (true/false)")

    commands.add_parser("stop", help="Stop the running timer")
    commands.add_parser("status", help="Show the running timer or today's summary")
    commands.add_parser("pause", help="Pause the running timer (not yet available)")
    commands.add_parser("resume", help="Resume a paused timer (not yet available)")

    add = commands.add_parser("add", help="Add a completed time entry")
    add.add_argument("duration", help='Duration such as "1h30m", "45m", "2h" or "90"')
    add.add_argument("-d", "--description", help="Entry description")
    add.add_argument("-p", "--project", help="Project name or id")
    add.add_argument("--billable", type=parse_bool, help="Mark entry billable (true/false)")
    add.add_argument("--start-time", help='Start as "HH:MM" today or a full datetime')

    edit = commands.add_parser("edit", help="Edit a time entry")
    edit.add_argument("entry_id", help='Entry id, or "last" for the most recent completed entry')
    edit.add_argument("-d", "--description", help="New description")
    edit.add_argument("--billable", type=parse_bool, help="Billable flag (true/false)")
    edit.add_argument("-p", "--project", help="Project name or id")
    edit.add_argument("--start-time", help='New start as "HH:MM" or a full datetime')
    edit.add_argument("--end-time", help='New end as "HH:MM" or a full datetime')

    delete = commands.add_parser("delete", help="Delete a time entry (not yet available)")
    delete.add_argument("entry_id", help="Entry id")

    auth = commands.add_parser("auth", help="Manage the API key")
    auth_commands = auth.add_subparsers(dest="auth_command", required=True)
    login = auth_commands.add_parser("login", help="Store and verify an API key")
    login.add_argument("--api-key", required=True, help="Clockify API key")
    login.add_argument("--workspace", help="Workspace id (defaults to your active workspace)")
    auth_commands.add_parser("status", help="Show login state and workspaces")
    auth_commands.add_parser("logout", help="Forget the stored API key")

    config = commands.add_parser("config", help="Show or change local settings")
    config_commands = config.add_subparsers(dest="config_command", required=True)
    config_commands.add_parser("show", help="Print the stored settings")
    config_set = config_commands.add_parser("set", help="Change a stored setting")
    config_set.add_argument("key", choices=sorted(CONFIG_KEYS))
    config_set.add_argument("value")

    return parser


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _overrides_from_args(args: argparse.Namespace) -> EntryOverrides:
    """Only options given on the command line become overrides."""
    supplied = {
        name: getattr(args, name)
        for name in ("description", "billable", "project", "start_time", "end_time")
        if getattr(args, name) is not None
    }
    return EntryOverrides(**supplied)


class CommandRunner:
    """Runs one parsed command against the API and renders the outcome."""

    def __init__(
        self,
        settings: Settings,
        console: Console,
        store: Optional[ConfigStore] = None,
        client_factory: Optional[ClientFactory] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings
        self.console = console
        self.store = store or ConfigStore.from_settings(settings)
        self.client_factory = client_factory or self._default_client
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.auth = AuthService(self.store)

    def _default_client(self, api_key: str) -> ClockifyClient:
        return ClockifyClient(
            api_key,
            base_url=self.settings.api_url,
            timeout=self.settings.timeout,
            page_size=self.settings.page_size,
        )

    async def run(self, args: argparse.Namespace) -> int:
        """
        Execute a command.

        Returns:
            Process exit code
        """
        command = args.command
        try:
            if command in ("pause", "resume", "delete"):
                return self.placeholder(args)
            if command == "auth":
                return await self.run_auth(args)
            if command == "config":
                return self.run_config(args)
            return await self.run_timer(args)
        except TimerAlreadyRunning as e:
            views.render_already_running(self.console, e.entry)
            return 0
        except NoChangesRequested as e:
            for message in e.warnings:
                views.warning(self.console, message)
            views.warning(self.console, str(e))
            views.hint(self.console, e.hint)
            return 0
        except (NotAuthenticated, NoWorkspaceConfigured) as e:
            views.error(self.console, e)
            return 1
        except ClockifyError as e:
            views.error(self.console, e, prefix=FAILURE_PREFIXES.get(command, ""))
            return 1
        except ValidationError as e:
            logger.debug("Unexpected API response", exc_info=True)
            views.error(
                self.console,
                ClockifyError(f"Unexpected response from Clockify: {e.error_count()} invalid field(s)"),
                prefix=FAILURE_PREFIXES.get(command, ""),
            )
            return 1

    async def run_timer(self, args: argparse.Namespace) -> int:
        session = self.auth.require_session()
        workspace_id = session.workspace_id

        async with self.client_factory(session.api_key) as client:
            service = TimerService(client)

            if args.command == "add":
                views.info(self.console, f"➕ Adding manual time entry: {args.duration}")
                result = await service.add_entry(
                    workspace_id,
                    args.duration,
                    now=self.clock(),
                    description=args.description,
                    project=args.project,
                    billable=self._billable(args.billable),
                    start_time=args.start_time,
                )
                views.render_added(self.console, result)
                return 0

            user = await client.get_current_user()

            if args.command == "start":
                views.info(self.console, "⏱️  Starting timer...")
                result = await service.start_timer(
                    workspace_id,
                    user.id,
                    now=self.clock(),
                    description=args.description,
                    project=args.project,
                    billable=self._billable(args.billable),
                )
                views.render_started(self.console, result)
            elif args.command == "stop":
                views.info(self.console, "⏹️  Stopping timer...")
                result = await service.stop_timer(workspace_id, user.id, now=self.clock())
                views.render_stopped(self.console, result)
            elif args.command == "status":
                views.info(self.console, "📊 Checking timer status...\n")
                result = await service.get_status(workspace_id, user.id, now=self.clock())
                views.render_status(self.console, result)
            elif args.command == "edit":
                views.info(self.console, "✏️  Editing time entry...")
                result = await service.edit_entry(
                    workspace_id,
                    user.id,
                    args.entry_id,
                    _overrides_from_args(args),
                    now=self.clock(),
                )
                views.render_edited(self.console, result)

        return 0

    async def run_auth(self, args: argparse.Namespace) -> int:
        if args.auth_command == "login":
            async with self.client_factory(args.api_key) as client:
                user = await self.auth.login(client, args.api_key, workspace_id=args.workspace)
            views.success(self.console, f"Logged in as {user.name or user.email}")
            if not self.store.workspace_id:
                views.warning(self.console, "No workspace configured")
                views.hint(self.console, "Run: clockify config set workspace-id <ID>")
            return 0

        if args.auth_command == "logout":
            self.auth.logout()
            views.success(self.console, "Logged out")
            return 0

        if not self.store.has_api_key():
            views.render_auth_status(self.console, await self.auth.status())
            return 0
        async with self.client_factory(self.store.api_key) as client:
            status = await self.auth.status(client)
        views.render_auth_status(self.console, status)
        return 0

    def run_config(self, args: argparse.Namespace) -> int:
        if args.config_command == "show":
            views.info(self.console, f"Config file: {self.store.path}")
            self.console.print(f"workspace-id: {self.store.workspace_id or '-'}", highlight=False)
            self.console.print(f"billable-by-default: {self.store.billable_by_default}", highlight=False)
            self.console.print(f"api-key: {'set' if self.store.has_api_key() else 'not set'}", highlight=False)
            return 0

        key = CONFIG_KEYS[args.key]
        value = args.value
        if key == "billable_by_default":
            try:
                value = parse_bool(value)
            except argparse.ArgumentTypeError as e:
                views.error(self.console, e)
                return 1
        self.store.set(key, value)
        views.success(self.console, f"{args.key} set to {value}")
        return 0

    def placeholder(self, args: argparse.Namespace) -> int:
        if args.command == "pause":
            views.warning(self.console, "Pause functionality coming soon!")
            views.hint(self.console, 'For now, use "clockify stop" then "clockify start" to achieve the same effect')
        elif args.command == "resume":
            views.warning(self.console, "Resume functionality coming soon!")
            views.hint(self.console, 'For now, use "clockify start" to begin a new timer')
        else:
            views.warning(self.console, "Delete functionality coming soon!")
            self.console.print(f"[dim]Entry ID:[/dim] {args.entry_id}", highlight=False)
        return 0

    def _billable(self, flag: Optional[bool]) -> bool:
        return flag if flag is not None else self.store.billable_by_default


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    console = Console()
    try:
        runner = CommandRunner(settings=settings, console=console)
    except ClockifyError as e:
        views.error(console, e)
        return 1

    try:
        return asyncio.run(runner.run(args))
    except KeyboardInterrupt:
        return 130


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
