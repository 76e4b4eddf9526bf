# rollup/task.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from rollup.cascade import AsOf, CascadeResult, commit_stage, resolve_now
from rollup.lifecycle import all_subtasks_done, derive_status, guard_actual_end
from rollup.milestone import recalc_milestone
from rollup.store import SUBTASKS, TASKS, EntityStore
from utils.dates import max_date, min_date, time_ratio
from utils.progress import as_number, clamp_percent, sum_costs, weighted_average

logger = logging.getLogger(__name__)


@dataclass
class TaskRollup:
    planned_start: Optional[date]
    planned_end: Optional[date]
    budgeted_cost: float
    actual_cost: float
    planned_progress: float
    progress: float
    actual_end: Optional[date]
    status: str

    def fields(self) -> Dict[str, Any]:
        return asdict(self)


def planned_progress_for(subtasks: Sequence[Any], now: AsOf) -> float:
    """Earned schedule in weight points: Σ time_ratio · weight, not normalized.

    Only subtasks with both planned dates and a positive weight contribute.
    """
    earned = 0.0
    for s in subtasks:
        weight = as_number(s.weight)
        if weight <= 0 or not s.planned_start or not s.planned_end:
            continue
        earned += time_ratio(now, s.planned_start, s.planned_end) * weight
    return clamp_percent(earned)


def actual_progress_for(subtasks: Sequence[Any]) -> float:
    return weighted_average(subtasks, lambda s: s.weight, lambda s: 100.0 if s.is_done else 0.0)


def rollup_task(task: Any, subtasks: Sequence[Any], now: AsOf) -> TaskRollup:
    """Recompute a task from its subtasks without touching the store.

    ``task.actual_start`` is read, never written. ``actual_end`` can only be
    kept or cleared here.
    """
    actual_end = guard_actual_end(task.actual_end, all_subtasks_done(subtasks))
    return TaskRollup(
        planned_start=min_date(s.planned_start for s in subtasks),
        planned_end=max_date(s.planned_end for s in subtasks),
        budgeted_cost=sum_costs(subtasks, "budgeted_cost"),
        actual_cost=sum_costs(subtasks, "actual_cost"),
        planned_progress=planned_progress_for(subtasks, now),
        progress=actual_progress_for(subtasks),
        actual_end=actual_end,
        status=derive_status(task.actual_start, actual_end),
    )


def recalc_task(store: EntityStore, task_id: int, now: Optional[AsOf] = None,
                result: Optional[CascadeResult] = None) -> CascadeResult:
    """Recompute one task, then its milestone and project."""
    result = CascadeResult() if result is None else result
    now = resolve_now(now)

    task = store.get_by_id(TASKS, task_id)
    if task is None:
        return result.not_found(TASKS, task_id)
    subtasks: List[Any] = store.list_by_parent(SUBTASKS, task_id)

    rolled = rollup_task(task, subtasks, now)
    if task.actual_end and rolled.actual_end is None:
        logger.info("Task %s reopened: not every deliverable is done", task_id)

    if not commit_stage(store, result, TASKS, task_id, rolled.fields()):
        return result
    return recalc_milestone(store, task.milestone_id, now=now, result=result)
