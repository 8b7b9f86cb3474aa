"""Environment variable parsing utilities."""

from __future__ import annotations


def parse_bool_env(value: str | None) -> bool | None:
    """Parse a boolean from an environment variable string.

    Returns True for "1", "true", "yes", "on" (case-insensitive).
    Returns None if value is None.
    """
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_int_env(value: str | None, base: int = 10) -> int | None:
    """Parse an integer from an environment variable string.

    Returns None if value is None or cannot be parsed.
    """
    if value is None:
        return None
    try:
        return int(value.strip(), base)
    except (TypeError, ValueError):
        return None


def parse_file_mode_env(value: str | None) -> int | None:
    """Parse an octal file mode such as "600" or "0o644"."""
    if value is None:
        return None
    cleaned = value.strip().lower()
    if cleaned.startswith("0o"):
        cleaned = cleaned[2:]
    mode = parse_int_env(cleaned, base=8)
    if mode is None or not 0 <= mode <= 0o777:
        return None
    return mode
