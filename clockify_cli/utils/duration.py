"""Duration parsing and formatting utilities."""
import re
from datetime import datetime

from clockify_cli.errors import InvalidDurationFormat


_DURATION_PATTERN = re.compile(
    r"^(?:(?P<hours>\d+)h(?:\s*(?P<minutes>\d+)m)?|(?P<only_minutes>\d+)m?)$",
    re.IGNORECASE,
)


def parse_duration(text: str) -> int:
    """
    Convert a human-entered duration into minutes.

    Args:
        text: Duration such as "1h30m", "1h 30m", "2h", "45m" or a bare "90"

    Returns:
        Duration in whole minutes

    Raises:
        InvalidDurationFormat: If the text matches none of the accepted shapes

    Examples:
        >>> parse_duration("1h30m")
        90
        >>> parse_duration(" 2H ")
        120
        >>> parse_duration("90")
        90
    """
    match = _DURATION_PATTERN.match(text.strip())
    if not match:
        raise InvalidDurationFormat(text)

    if match.group("only_minutes") is not None:
        return int(match.group("only_minutes"))

    hours = int(match.group("hours"))
    minutes = int(match.group("minutes") or 0)
    return hours * 60 + minutes


def format_duration(minutes: int) -> str:
    """
    Render minutes as "Xh Ym", or "Ym" below one hour.

    Examples:
        >>> format_duration(90)
        '1h 30m'
        >>> format_duration(0)
        '0m'
    """
    if minutes < 0:
        raise ValueError("Duration cannot be negative")

    hours, rest = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {rest}m"
    return f"{rest}m"


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps, rounded to nearest."""
    delta = end - start
    return round(delta.total_seconds() / 60)
