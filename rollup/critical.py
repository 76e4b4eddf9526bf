# rollup/critical.py
"""Schedule-risk flags for the tasks of one milestone.

A heuristic, not a critical-path computation: there is no dependency graph
and no float. An open task is critical when it is overdue, or when it is the
long pole (latest planned end among open tasks). Ties on the latest end are
all flagged.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from utils.dates import days_between, parse_local_date

OVERDUE = "overdue"
LONG_POLE = "long_pole"

OVERDUE_REASON = "This task is overdue and is delaying milestone completion"
LONG_POLE_REASON = "This task determines milestone completion"


@dataclass(frozen=True)
class CriticalFlag:
    task_id: Any
    is_critical: bool
    kind: Optional[str] = None
    reason: Optional[str] = None
    days_overdue: int = 0


def _is_open(task: Any) -> bool:
    return parse_local_date(task.actual_end) is None


def detect_critical(tasks: Iterable[Any], today: Union[date, datetime, str]) -> List[CriticalFlag]:
    """One flag per task, in input order. Reads only; nothing is persisted."""
    tasks = list(tasks)
    today_day = parse_local_date(today)

    open_ends = [parse_local_date(t.planned_end) for t in tasks if _is_open(t)]
    open_ends = [d for d in open_ends if d is not None]
    latest_end = max(open_ends) if open_ends else None

    flags: List[CriticalFlag] = []
    for t in tasks:
        planned_end = parse_local_date(t.planned_end)
        if not _is_open(t) or planned_end is None:
            flags.append(CriticalFlag(task_id=t.id, is_critical=False))
            continue

        overdue = today_day is not None and planned_end < today_day
        long_pole = planned_end == latest_end

        if overdue:
            flags.append(CriticalFlag(t.id, True, OVERDUE, OVERDUE_REASON,
                                      days_between(planned_end, today_day)))
        elif long_pole:
            flags.append(CriticalFlag(t.id, True, LONG_POLE, LONG_POLE_REASON))
        else:
            flags.append(CriticalFlag(task_id=t.id, is_critical=False))
    return flags


def flags_by_task(flags: Iterable[CriticalFlag]) -> Dict[Any, CriticalFlag]:
    return {f.task_id: f for f in flags}
