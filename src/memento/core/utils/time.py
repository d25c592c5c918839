"""Timezone-aware time helpers."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp(dt: datetime | None = None) -> str:
    """Return an ISO 8601 UTC timestamp with millisecond precision and ``Z`` suffix."""
    dt = dt or utc_now()
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def filesystem_stamp(dt: datetime | None = None) -> str:
    """Return :func:`utc_timestamp` with ``:`` and ``.`` replaced by ``-``.

    Used to name backup directories, which must be valid on every platform.
    """
    return utc_timestamp(dt).replace(":", "-").replace(".", "-")


__all__ = ["utc_now", "utc_timestamp", "filesystem_stamp"]
