"""Timestamp helpers for the order ledger.

All stored timestamps share one ISO-8601 UTC format with millisecond
precision so that string comparison orders them chronologically.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def now_iso() -> str:
    return iso(utcnow())


def local_day_bounds(tz_name: str, moment: datetime | None = None) -> tuple[str, str]:
    """Return ``(start, end)`` of the local calendar day in ``tz_name``.

    Both bounds are UTC ISO strings; ``start`` is inclusive and ``end`` is
    exclusive.
    """

    tz = ZoneInfo(tz_name)
    local = (moment or utcnow()).astimezone(tz)
    start = datetime.combine(local.date(), time.min, tzinfo=tz)
    end = datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=tz)
    return iso(start), iso(end)


def local_date_stamp(tz_name: str, moment: datetime | None = None) -> str:
    """Return the local date in ``tz_name`` as ``yyyyMMdd``."""

    return (moment or utcnow()).astimezone(ZoneInfo(tz_name)).strftime("%Y%m%d")
