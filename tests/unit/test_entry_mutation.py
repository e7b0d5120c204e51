"""Tests for building edit payloads."""
from datetime import datetime, timedelta, timezone

import pytest


def closed_entry(entry_factory, **fields):
    return entry_factory(
        entry_id="entry-1",
        start=datetime(2024, 5, 14, 9, 0, tzinfo=timezone.utc),
        end=datetime(2024, 5, 14, 10, 0, tzinfo=timezone.utc),
        description="Original",
        billable=False,
        projectId="proj-1",
        taskId="task-1",
        tagIds=["tag-1", "tag-2"],
        **fields,
    )


class TestSeedRequest:
    """Tests for copying an entry into a request."""

    def test_copies_all_fields(self, entry_factory):
        from clockify_cli.services.entry_mutation import seed_request

        existing = closed_entry(entry_factory)

        request = seed_request(existing)

        assert request.start == existing.start
        assert request.end == existing.end
        assert request.description == "Original"
        assert request.project_id == "proj-1"
        assert request.task_id == "task-1"
        assert request.tag_ids == ["tag-1", "tag-2"]

    def test_absent_fields_are_omitted(self, entry_factory, now):
        """Test that end, project and task are left out when the entry lacks them."""
        from clockify_cli.services.entry_mutation import seed_request

        existing = entry_factory(end=None)

        payload = seed_request(existing).to_payload()

        assert "end" not in payload
        assert "projectId" not in payload
        assert "taskId" not in payload
        assert payload["tagIds"] == []


class TestBuildUpdate:
    """Tests for build_update."""

    def test_no_overrides(self, entry_factory, now):
        """Test that an empty override set signals NoChangesRequested."""
        from clockify_cli.errors import NoChangesRequested
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        with pytest.raises(NoChangesRequested):
            build_update(closed_entry(entry_factory), EntryOverrides(), now=now)

    def test_description_only(self, entry_factory, now):
        """Test that only the description changes and the log says so."""
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update, seed_request

        existing = closed_entry(entry_factory)

        plan = build_update(existing, EntryOverrides(description="x"), now=now)

        assert plan.payload.description == "x"
        assert plan.changes == ["description"]
        assert plan.warnings == []
        untouched = seed_request(existing).model_dump(exclude={"description"})
        assert plan.payload.model_dump(exclude={"description"}) == untouched

    def test_description_is_sanitized(self, entry_factory, now):
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        plan = build_update(
            closed_entry(entry_factory),
            EntryOverrides(description="  Review\x07 PR\n"),
            now=now,
        )

        assert plan.payload.description == "Review PR"

    def test_billable_labels(self, entry_factory, now):
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        existing = closed_entry(entry_factory)

        on = build_update(existing, EntryOverrides(billable=True), now=now)
        off = build_update(existing, EntryOverrides(billable=False), now=now)

        assert on.payload.billable is True
        assert on.changes == ["marked billable"]
        assert off.payload.billable is False
        assert off.changes == ["marked non-billable"]

    def test_project_matched_by_name_substring(self, entry_factory, project_factory, now):
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        projects = [
            project_factory("proj-2", "Internal Tooling"),
            project_factory("proj-3", "Client Work"),
        ]

        plan = build_update(
            closed_entry(entry_factory),
            EntryOverrides(project="client"),
            now=now,
            projects=projects,
        )

        assert plan.payload.project_id == "proj-3"
        assert plan.changes == ["project → Client Work"]

    def test_project_matched_by_id(self, entry_factory, project_factory, now):
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        plan = build_update(
            closed_entry(entry_factory),
            EntryOverrides(project="proj-9"),
            now=now,
            projects=[project_factory("proj-9", "Ops")],
        )

        assert plan.payload.project_id == "proj-9"

    def test_unknown_project_keeps_current(self, entry_factory, project_factory, now):
        """Test that a missing project warns and leaves the project untouched."""
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        plan = build_update(
            closed_entry(entry_factory),
            EntryOverrides(project="nope", description="New"),
            now=now,
            projects=[project_factory("proj-2", "Internal")],
        )

        assert plan.payload.project_id == "proj-1"
        assert plan.changes == ["description"]
        assert plan.warnings == ['Project "nope" not found. Keeping current project.']

    def test_unknown_project_alone_is_no_change(self, entry_factory, now):
        """Test that a failed project lookup on its own yields NoChangesRequested."""
        from clockify_cli.errors import NoChangesRequested
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        with pytest.raises(NoChangesRequested) as exc_info:
            build_update(closed_entry(entry_factory), EntryOverrides(project="nope"), now=now)

        assert exc_info.value.warnings == ['Project "nope" not found. Keeping current project.']

    def test_clock_times_anchor_to_existing_days(self, entry_factory, now):
        """Test that HH:MM edits keep the entry's own start and end days."""
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        existing = closed_entry(entry_factory)

        plan = build_update(
            existing,
            EntryOverrides(start_time="08:15", end_time="23:45"),
            now=now,
        )

        start = plan.payload.start
        end = plan.payload.end
        assert start.date() == existing.start.astimezone().date()
        assert (start.hour, start.minute) == (8, 15)
        assert end.date() == existing.end.astimezone().date()
        assert (end.hour, end.minute) == (23, 45)
        assert plan.changes == ["start time", "end time"]

    def test_start_edit_on_daylight_saving_day(self, entry_factory, now, berlin_time):
        """Test that an edited start uses the offset in force at the new wall time."""
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        # Starts 01:30 CET, ends 10:00 CEST on 2024-03-31
        existing = entry_factory(
            start=datetime(2024, 3, 31, 0, 30, tzinfo=timezone.utc),
            end=datetime(2024, 3, 31, 8, 0, tzinfo=timezone.utc),
        )

        plan = build_update(existing, EntryOverrides(start_time="09:00"), now=now)

        assert plan.payload.start == datetime(2024, 3, 31, 7, 0, tzinfo=timezone.utc)
        assert plan.payload.end == existing.end

    def test_end_time_on_open_entry_uses_now(self, entry_factory, now):
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        existing = entry_factory(start=now - timedelta(days=3), end=None)

        plan = build_update(existing, EntryOverrides(end_time="23:59"), now=now)

        assert plan.payload.end.date() == now.astimezone().date()

    def test_absolute_times(self, entry_factory, now):
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        plan = build_update(
            closed_entry(entry_factory),
            EntryOverrides(start_time="2024-05-13T08:00:00Z", end_time="2024-05-13T12:00:00Z"),
            now=now,
        )

        assert plan.payload.start == datetime(2024, 5, 13, 8, 0, tzinfo=timezone.utc)
        assert plan.payload.end == datetime(2024, 5, 13, 12, 0, tzinfo=timezone.utc)

    def test_change_log_order_is_fixed(self, entry_factory, project_factory, now):
        """Test labels follow description, billable, project, start, end."""
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        overrides = EntryOverrides(
            end_time="2024-05-14T11:00:00Z",
            start_time="2024-05-14T08:00:00Z",
            project="ops",
            billable=True,
            description="All of it",
        )

        plan = build_update(
            closed_entry(entry_factory),
            overrides,
            now=now,
            projects=[project_factory("proj-4", "Ops")],
        )

        assert plan.changes == [
            "description",
            "marked billable",
            "project → Ops",
            "start time",
            "end time",
        ]

    def test_end_before_start_rejected(self, entry_factory, now):
        from clockify_cli.errors import InvalidTimeFormat
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        with pytest.raises(InvalidTimeFormat, match="before start"):
            build_update(
                closed_entry(entry_factory),
                EntryOverrides(end_time="2024-05-14T08:00:00Z"),
                now=now,
            )

    def test_invalid_time_text(self, entry_factory, now):
        from clockify_cli.errors import InvalidTimeFormat
        from clockify_cli.models.time_entry import EntryOverrides
        from clockify_cli.services.entry_mutation import build_update

        with pytest.raises(InvalidTimeFormat):
            build_update(closed_entry(entry_factory), EntryOverrides(start_time="half past nine"), now=now)
