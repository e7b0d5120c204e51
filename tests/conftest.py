"""Pytest configuration and fixtures."""
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest


FIXED_NOW = datetime(2024, 5, 14, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed clock used by every service call."""
    return FIXED_NOW


@pytest.fixture
def entry_factory():
    """
    Build TimeEntry models from keyword arguments.

    Times default to a closed one-hour entry ending at FIXED_NOW; pass
    ``end=None`` for an open entry.
    """
    from clockify_cli.models.time_entry import TimeEntry

    def make(
        entry_id="entry-1",
        start=FIXED_NOW - timedelta(hours=1),
        end=FIXED_NOW,
        **fields,
    ):
        data = {
            "id": entry_id,
            "userId": "user-1",
            "workspaceId": "ws-1",
            "description": "",
            "billable": False,
            "tagIds": [],
            "timeInterval": {
                "start": start.isoformat(),
                "end": end.isoformat() if end else None,
            },
        }
        data.update(fields)
        return TimeEntry.model_validate(data)

    return make


@pytest.fixture
def project_factory():
    from clockify_cli.models.project import Project

    def make(project_id="proj-1", name="Client Work", **fields):
        return Project(id=project_id, name=name, **fields)

    return make


@pytest.fixture
def mock_client():
    """Stand-in for ClockifyClient with every API call as an AsyncMock."""
    client = AsyncMock()
    client.get_time_entries.return_value = []
    client.get_projects.return_value = []
    return client


@pytest.fixture
def config_store(tmp_path):
    """ConfigStore backed by a temporary file."""
    from clockify_cli.config import ConfigStore

    return ConfigStore(tmp_path / "config.json")


@pytest.fixture
def berlin_time(monkeypatch):
    """Run the test with the process timezone set to Europe/Berlin."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
