"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC. Soft-delete timestamps and audit fields are
    stamped with this value.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )
