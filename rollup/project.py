# rollup/project.py
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from rollup.cascade import AsOf, CascadeResult, commit_stage
from rollup.lifecycle import all_children_complete, derive_status, non_regressing_start
from rollup.parent import ParentRollup
from rollup.store import MILESTONES, PROJECTS, EntityStore
from utils.dates import max_date, min_date
from utils.progress import sum_costs, weighted_average

logger = logging.getLogger(__name__)


def rollup_project(project: Any, milestones: Sequence[Any]) -> ParentRollup:
    """Recompute a project from its milestones.

    actual_end is the latest milestone completion, and only once every
    milestone is complete.
    """
    if not milestones:
        return ParentRollup()

    actual_start = non_regressing_start(
        project.actual_start, min_date(m.actual_start for m in milestones))
    actual_end = None
    if all_children_complete(milestones):
        actual_end = max_date(m.actual_end for m in milestones)

    return ParentRollup(
        planned_start=min_date(m.planned_start for m in milestones),
        planned_end=max_date(m.planned_end for m in milestones),
        actual_start=actual_start,
        actual_end=actual_end,
        budgeted_cost=sum_costs(milestones, "budgeted_cost"),
        actual_cost=sum_costs(milestones, "actual_cost"),
        planned_progress=weighted_average(milestones, lambda m: m.weight, lambda m: m.planned_progress),
        actual_progress=weighted_average(milestones, lambda m: m.weight, lambda m: m.actual_progress),
        status=derive_status(actual_start, actual_end),
    )


def recalc_project(store: EntityStore, project_id: int, now: Optional[AsOf] = None,
                   result: Optional[CascadeResult] = None) -> CascadeResult:
    """Recompute one project. Last stage of the cascade."""
    result = CascadeResult() if result is None else result

    project = store.get_by_id(PROJECTS, project_id)
    if project is None:
        return result.not_found(PROJECTS, project_id)
    milestones = store.list_by_parent(MILESTONES, project_id)

    rolled = rollup_project(project, milestones)
    if project.actual_end and rolled.actual_end is None:
        logger.info("Project %s reopened: a milestone is no longer complete", project_id)

    commit_stage(store, result, PROJECTS, project_id, rolled.fields())
    return result
