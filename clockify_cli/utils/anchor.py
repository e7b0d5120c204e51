"""Resolve human-entered clock times and datetimes into timestamps."""
import re
from datetime import datetime, time, timedelta

from dateutil import parser as dtparser

from clockify_cli.errors import InvalidTimeFormat


CLOCK_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def _local_midnight(reference: datetime) -> datetime:
    """Naive midnight of the reference's local calendar day."""
    return datetime.combine(reference.astimezone().date(), time())


def resolve_anchor(text: str, reference: datetime) -> datetime:
    """
    Turn a clock time or absolute datetime into a timezone-aware timestamp.

    A bare "HH:MM" is placed on the reference's local calendar day with
    seconds zeroed. The offset is the one in force at that wall time, not
    the reference's. Hours and minutes are not range-checked: "25:00" rolls
    over to 01:00 on the following day. Anything else is parsed as a
    free-form datetime ("2024-05-01T09:30", "May 1, 2024 09:30",
    "2024/05/01 09:30"); naive values are taken as local time and missing
    date parts come from the reference day.

    Args:
        text: "HH:MM" clock time or datetime string
        reference: Timestamp whose day anchors a bare clock time

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimeFormat: If the text cannot be parsed
    """
    value = text.strip()

    match = CLOCK_TIME_PATTERN.match(value)
    if match:
        wall_time = _local_midnight(reference) + timedelta(
            hours=int(match.group(1)),
            minutes=int(match.group(2)),
        )
        return wall_time.astimezone()

    try:
        parsed = dtparser.parse(value, default=_local_midnight(reference))
    except (TypeError, ValueError, OverflowError, dtparser.ParserError):
        raise InvalidTimeFormat(text)

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed
