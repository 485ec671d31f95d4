"""Human-readable ages, sizes and identifiers."""

from __future__ import annotations

from datetime import datetime

_KIB = 1024
_MIB = _KIB * 1024
_GIB = _MIB * 1024


def format_age(created: datetime | None, now: datetime | None = None) -> str:
    """Return the time elapsed since created, such as "45s", "12m", "3h7m" or "9d"."""
    if created is None:
        return "-"
    if now is None:
        now = datetime.now(created.tzinfo)
    seconds = (now - created).total_seconds()

    if seconds < 60:
        return f"{int(seconds)}s"
    if seconds < 3600:
        return f"{int(seconds / 60)}m"
    if seconds < 86400:
        return f"{int(seconds / 3600)}h{int(seconds / 60) % 60}m"
    return f"{int(seconds / 3600 / 24)}d"


def format_bytes(size: int) -> str:
    """Format a byte count with binary units and two decimals."""
    if size >= _GIB:
        return f"{size / _GIB:.2f} GiB"
    if size >= _MIB:
        return f"{size / _MIB:.2f} MiB"
    if size >= _KIB:
        return f"{size / _KIB:.2f} KiB"
    return f"{size} B"


def format_size(size: int) -> str:
    """Format a byte count with one decimal, as shown in the image list."""
    if size >= _GIB:
        return f"{size / _GIB:.1f} GB"
    if size >= _MIB:
        return f"{size / _MIB:.1f} MB"
    if size >= _KIB:
        return f"{size / _KIB:.1f} KB"
    return f"{size} B"


def short_id(value: str) -> str:
    """Return the first 12 characters of an identifier, or "unknown" when empty."""
    if not value:
        return "unknown"
    return value[:12]


def truncate_for_card(value: str, width: int) -> str:
    """Shorten value to width characters, ending in "..." when there is room."""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return value[: width - 3] + "..."


def fallback_value(value: str, fallback: str) -> str:
    """Return value, or fallback when value is empty."""
    return value if value else fallback