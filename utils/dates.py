# utils/dates.py
"""Local-day date helpers shared by the rollup stages.

Stored dates are calendar days with no timezone. Everything here treats a
bare ``YYYY-MM-DD`` value as local midnight of that day, so comparisons never
shift a day across a UTC offset.
"""
from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Iterable, Optional, Union

from dateutil import parser, tz

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str, None]

_BARE_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]")


def parse_local_date(value: DateLike) -> Optional[date]:
    """Return the calendar day of ``value`` or None when it cannot be read.

    Accepts dates, datetimes, bare ``YYYY-MM-DD`` strings and full ISO-8601
    timestamps. Bad input yields None instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    s = value.strip()
    if _BARE_DAY.match(s):
        try:
            return datetime.strptime(s, "%Y-%m-%d").date()
        except ValueError:
            return None
    if _ISO_PREFIX.match(s):
        try:
            return parser.isoparse(s).date()
        except (ValueError, OverflowError):
            return None
    return None


def min_date(values: Iterable[DateLike]) -> Optional[date]:
    days = [d for d in (parse_local_date(v) for v in values) if d is not None]
    return min(days) if days else None


def max_date(values: Iterable[DateLike]) -> Optional[date]:
    days = [d for d in (parse_local_date(v) for v in values) if d is not None]
    return max(days) if days else None


def earliest(*values: DateLike) -> Optional[date]:
    return min_date(values)


def days_between(start: date, end: date) -> int:
    """Signed whole days from ``start`` to ``end``."""
    return (end - start).days


def local_midnight(d: date) -> datetime:
    return datetime.combine(d, time.min)


def _as_naive_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return local_midnight(value)


def time_ratio(now: Union[date, datetime], start: DateLike, end: DateLike) -> float:
    """Fraction of the planned window [start, end] elapsed at ``now``.

    0 before start, 1 at or after end, linear in between. A window that is
    missing or has ``end <= start`` is not time-boxed yet and yields 0.
    """
    start_day = parse_local_date(start)
    end_day = parse_local_date(end)
    if start_day is None or end_day is None or end_day <= start_day:
        return 0.0

    current = _as_naive_datetime(now)
    t0 = local_midnight(start_day)
    t1 = local_midnight(end_day)
    if current >= t1:
        return 1.0
    if current <= t0:
        return 0.0
    return (current - t0).total_seconds() / (t1 - t0).total_seconds()


def local_now(tz_name: str = "UTC") -> datetime:
    """Naive wall-clock time in ``tz_name``; unknown zones fall back to UTC."""
    zone = tz.gettz(tz_name)
    if zone is None:
        logger.warning("Unknown timezone %r; using UTC", tz_name)
        zone = tz.UTC
    return datetime.now(zone).replace(tzinfo=None)
