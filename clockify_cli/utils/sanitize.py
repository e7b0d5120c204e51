"""Input sanitizing utilities."""
import re


_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_input(text: str) -> str:
    """
    Strip control characters and surrounding whitespace from free text.

    Examples:
        >>> sanitize_input("  Fix bug\\n")
        'Fix bug'
        >>> sanitize_input("a\\x1b[31mb")
        'a[31mb'
    """
    return _CONTROL_CHARACTERS.sub("", text).strip()
