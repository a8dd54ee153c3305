"""Validation of user-supplied names (cache name, state-file name)."""

import re

from swgen.errors import InvalidNameError

CACHE_NAME_CHARS = r"0-9a-z_\-"
STATE_FILE_CHARS = r"0-9a-z_\-./"

DEFAULT_CACHE_NAME = "__swgen__"


def sanitize_name(value: str, label: str, allowed: str = CACHE_NAME_CHARS) -> str:
    """Trim value and check it only uses the allowed characters.

    Args:
        value: Name to validate
        label: What the name is, for the error message
        allowed: Character class body (case-insensitive)

    Returns:
        The trimmed name

    Raises:
        InvalidNameError: If the name is empty or has disallowed characters

    Example:
        >>> sanitize_name("  v2 ", "cache name")
        'v2'
    """
    trimmed = value.strip()
    if not trimmed:
        raise InvalidNameError(f"{label} can't be empty")

    if not re.fullmatch(f"[{allowed}]+", trimmed, flags=re.IGNORECASE):
        raise InvalidNameError(f"{label} '{trimmed}' can only contain the characters [{allowed}]")
    return trimmed
