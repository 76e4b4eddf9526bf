# rollup/milestone.py
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from rollup.cascade import AsOf, CascadeResult, commit_stage, resolve_now
from rollup.lifecycle import (
    all_children_complete, derive_status, guard_actual_end, non_regressing_start,
)
from rollup.parent import ParentRollup
from rollup.project import recalc_project
from rollup.store import MILESTONES, TASKS, EntityStore
from utils.dates import max_date, min_date
from utils.progress import sum_costs, weighted_average

logger = logging.getLogger(__name__)


def rollup_milestone(milestone: Any, tasks: Sequence[Any]) -> ParentRollup:
    """Recompute a milestone from its tasks.

    An empty milestone resets to the identity values whatever it held before.
    A stored actual_end survives only while every task is complete.
    """
    if not tasks:
        return ParentRollup()

    actual_start = non_regressing_start(
        milestone.actual_start, min_date(t.actual_start for t in tasks))
    actual_end = guard_actual_end(milestone.actual_end, all_children_complete(tasks))

    return ParentRollup(
        planned_start=min_date(t.planned_start for t in tasks),
        planned_end=max_date(t.planned_end for t in tasks),
        actual_start=actual_start,
        actual_end=actual_end,
        budgeted_cost=sum_costs(tasks, "budgeted_cost"),
        actual_cost=sum_costs(tasks, "actual_cost"),
        planned_progress=weighted_average(tasks, lambda t: t.weight, lambda t: t.planned_progress),
        actual_progress=weighted_average(tasks, lambda t: t.weight, lambda t: t.progress),
        status=derive_status(actual_start, actual_end),
    )


def recalc_milestone(store: EntityStore, milestone_id: int, now: Optional[AsOf] = None,
                     result: Optional[CascadeResult] = None) -> CascadeResult:
    """Recompute one milestone, then its project."""
    result = CascadeResult() if result is None else result
    now = resolve_now(now)

    milestone = store.get_by_id(MILESTONES, milestone_id)
    if milestone is None:
        return result.not_found(MILESTONES, milestone_id)
    tasks = store.list_by_parent(TASKS, milestone_id)

    rolled = rollup_milestone(milestone, tasks)
    if milestone.actual_end and rolled.actual_end is None:
        logger.info("Milestone %s reopened: a task is no longer complete", milestone_id)

    if not commit_stage(store, result, MILESTONES, milestone_id, rolled.fields()):
        return result
    return recalc_project(store, milestone.project_id, now=now, result=result)
