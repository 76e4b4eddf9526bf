# rollup/lifecycle.py
"""Lifecycle Guard.

Completion is granted only by an explicit Complete action and may be revoked
by any rollup whose children are no longer all complete. Nothing here ever
turns an open entity into a completed one.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from utils.dates import earliest, parse_local_date

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"


def derive_status(actual_start: Any, actual_end: Any) -> str:
    if parse_local_date(actual_end):
        return COMPLETED
    if parse_local_date(actual_start):
        return IN_PROGRESS
    return PENDING


def all_subtasks_done(subtasks: Iterable[Any]) -> bool:
    subs = list(subtasks)
    return bool(subs) and all(bool(s.is_done) for s in subs)


def all_children_complete(children: Iterable[Any]) -> bool:
    kids = list(children)
    return bool(kids) and all(parse_local_date(c.actual_end) is not None for c in kids)


def guard_actual_end(existing: Any, children_complete: bool) -> Optional[date]:
    """Keep a stored completion date only while every child is still complete."""
    current = parse_local_date(existing)
    if current is not None and not children_complete:
        return None
    return current


def non_regressing_start(existing: Any, candidate: Any) -> Optional[date]:
    """An actual start may move earlier but never later or back to empty."""
    return earliest(existing, candidate)
