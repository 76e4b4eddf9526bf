# rollup/actions.py
"""User-initiated mutations. Each one writes the leaf and then runs the cascade.

Start and Complete are the only writers of ``actual_start`` / ``actual_end``
on tasks and milestones; the rollups themselves never grant completion.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from rollup.cascade import AsOf, CascadeResult, resolve_now
from rollup.errors import LifecycleError
from rollup.lanes import next_sequence_group
from rollup.lifecycle import COMPLETED, IN_PROGRESS, all_children_complete, all_subtasks_done
from rollup.milestone import recalc_milestone
from rollup.project import recalc_project
from rollup.store import MILESTONES, SUBTASKS, TASKS, EntityStore
from rollup.task import recalc_task
from utils.dates import local_midnight, parse_local_date
from utils.progress import as_number

logger = logging.getLogger(__name__)

SUBTASK_EDITABLE = ("name", "weight", "planned_start", "planned_end",
                    "budgeted_cost", "actual_cost", "is_done")
TASK_EDITABLE = ("name", "weight", "sequence_group")
MILESTONE_EDITABLE = ("name", "weight")
_DATE_FIELDS = ("planned_start", "planned_end")
_NON_NEGATIVE = ("weight", "budgeted_cost", "actual_cost")


def _today(now: Optional[AsOf]) -> date:
    return parse_local_date(resolve_now(now))


def _timestamp(now: Optional[AsOf]) -> datetime:
    current = resolve_now(now)
    return current if isinstance(current, datetime) else local_midnight(current)


def clean_subtask_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate editable subtask fields at the store boundary."""
    unknown = set(fields) - set(SUBTASK_EDITABLE)
    if unknown:
        raise ValueError(f"Not editable on a subtask: {', '.join(sorted(unknown))}")
    cleaned: Dict[str, Any] = {}
    for k, v in fields.items():
        if k in _DATE_FIELDS:
            cleaned[k] = parse_local_date(v)
        elif k in _NON_NEGATIVE:
            cleaned[k] = max(0.0, as_number(v))
        elif k == "is_done":
            cleaned[k] = bool(v)
        else:
            cleaned[k] = v
    return cleaned


# ---- Task lifecycle ----
def start_task(store: EntityStore, task_id: int, now: Optional[AsOf] = None) -> CascadeResult:
    task = store.get_by_id(TASKS, task_id)
    if task is None:
        return CascadeResult().not_found(TASKS, task_id)
    if task.actual_start is None:
        store.update(TASKS, task_id, {"actual_start": _today(now), "status": IN_PROGRESS})
        logger.info("Task %s started", task_id)
    return recalc_task(store, task_id, now=now)


def complete_task(store: EntityStore, task_id: int, now: Optional[AsOf] = None) -> CascadeResult:
    task = store.get_by_id(TASKS, task_id)
    if task is None:
        return CascadeResult().not_found(TASKS, task_id)
    if task.actual_end is None:
        if task.actual_start is None:
            raise LifecycleError(f"Task {task_id} has not been started")
        if not all_subtasks_done(store.list_by_parent(SUBTASKS, task_id)):
            raise LifecycleError(f"Task {task_id} still has open deliverables")
        store.update(TASKS, task_id, {"actual_end": _today(now), "status": COMPLETED})
        logger.info("Task %s completed", task_id)
    return recalc_task(store, task_id, now=now)


def complete_milestone(store: EntityStore, milestone_id: int,
                       now: Optional[AsOf] = None) -> CascadeResult:
    milestone = store.get_by_id(MILESTONES, milestone_id)
    if milestone is None:
        return CascadeResult().not_found(MILESTONES, milestone_id)
    if milestone.actual_end is None:
        if not all_children_complete(store.list_by_parent(TASKS, milestone_id)):
            raise LifecycleError(f"Milestone {milestone_id} has tasks that are not complete")
        store.update(MILESTONES, milestone_id, {"actual_end": _today(now), "status": COMPLETED})
        logger.info("Milestone %s completed", milestone_id)
    return recalc_milestone(store, milestone_id, now=now)


# ---- Leaf mutations ----
def set_subtask_done(store: EntityStore, subtask_id: int, done: bool,
                     now: Optional[AsOf] = None) -> CascadeResult:
    return update_subtask(store, subtask_id, now=now, is_done=done)


def add_subtask(store: EntityStore, task_id: int, name: str, now: Optional[AsOf] = None,
                **fields) -> Tuple[Optional[Any], CascadeResult]:
    if store.get_by_id(TASKS, task_id) is None:
        return None, CascadeResult().not_found(TASKS, task_id)
    values = clean_subtask_fields({"name": name, **fields})
    values.update(task_id=task_id, is_done=False, completed_at=None)
    row = store.insert(SUBTASKS, values)
    return row, recalc_task(store, task_id, now=now)


def update_subtask(store: EntityStore, subtask_id: int, now: Optional[AsOf] = None,
                   **fields) -> CascadeResult:
    sub = store.get_by_id(SUBTASKS, subtask_id)
    if sub is None:
        return CascadeResult().not_found(SUBTASKS, subtask_id)
    values = clean_subtask_fields(fields)
    if "is_done" in values:
        if values["is_done"]:
            # keep the first completion time when re-saving a done deliverable
            values["completed_at"] = sub.completed_at or _timestamp(now)
        else:
            values["completed_at"] = None
    store.update(SUBTASKS, subtask_id, values)
    return recalc_task(store, sub.task_id, now=now)


def delete_subtask(store: EntityStore, subtask_id: int, now: Optional[AsOf] = None) -> CascadeResult:
    sub = store.get_by_id(SUBTASKS, subtask_id)
    if sub is None:
        return CascadeResult().not_found(SUBTASKS, subtask_id)
    store.delete(SUBTASKS, subtask_id)
    return recalc_task(store, sub.task_id, now=now)


def add_task(store: EntityStore, milestone_id: int, name: str, weight: float = 0.0,
             sequence_group: Optional[int] = None,
             now: Optional[AsOf] = None) -> Tuple[Optional[Any], CascadeResult]:
    """Create a pending task. Without a group it opens a new lane after the others."""
    if store.get_by_id(MILESTONES, milestone_id) is None:
        return None, CascadeResult().not_found(MILESTONES, milestone_id)
    if sequence_group is None:
        sequence_group = next_sequence_group(store.list_by_parent(TASKS, milestone_id))
    row = store.insert(TASKS, {
        "milestone_id": milestone_id,
        "name": name,
        "weight": max(0.0, as_number(weight)),
        "sequence_group": sequence_group,
    })
    return row, recalc_task(store, row.id, now=now)


def delete_task(store: EntityStore, task_id: int, now: Optional[AsOf] = None) -> CascadeResult:
    """Remove a task with its deliverables, then roll up the milestone."""
    task = store.get_by_id(TASKS, task_id)
    if task is None:
        return CascadeResult().not_found(TASKS, task_id)
    store.delete(TASKS, task_id)
    return recalc_milestone(store, task.milestone_id, now=now)


def _clean_name_weight(kind: str, allowed, fields: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - set(allowed)
    if unknown:
        raise ValueError(f"Not editable on a {kind}: {', '.join(sorted(unknown))}")
    cleaned = dict(fields)
    if "name" in cleaned:
        name = (cleaned["name"] or "").strip()
        if not name:
            raise ValueError(f"{kind.capitalize()} name is required")
        cleaned["name"] = name
    if "weight" in cleaned:
        cleaned["weight"] = max(0.0, as_number(cleaned["weight"]))
    if cleaned.get("sequence_group") is not None:
        cleaned["sequence_group"] = int(cleaned["sequence_group"])
    return cleaned


def update_task(store: EntityStore, task_id: int, now: Optional[AsOf] = None,
                **fields) -> CascadeResult:
    """Edit a task's name, weight or lane. A weight change reaches the milestone."""
    if store.get_by_id(TASKS, task_id) is None:
        return CascadeResult().not_found(TASKS, task_id)
    store.update(TASKS, task_id, _clean_name_weight("task", TASK_EDITABLE, fields))
    return recalc_task(store, task_id, now=now)


# ---- Milestone mutations ----
def update_milestone(store: EntityStore, milestone_id: int, now: Optional[AsOf] = None,
                     **fields) -> CascadeResult:
    if store.get_by_id(MILESTONES, milestone_id) is None:
        return CascadeResult().not_found(MILESTONES, milestone_id)
    store.update(MILESTONES, milestone_id,
                 _clean_name_weight("milestone", MILESTONE_EDITABLE, fields))
    return recalc_milestone(store, milestone_id, now=now)


def delete_milestone(store: EntityStore, milestone_id: int,
                     now: Optional[AsOf] = None) -> CascadeResult:
    """Remove a milestone with its tasks and deliverables, then roll up the project."""
    milestone = store.get_by_id(MILESTONES, milestone_id)
    if milestone is None:
        return CascadeResult().not_found(MILESTONES, milestone_id)
    store.delete(MILESTONES, milestone_id)
    logger.info("Milestone %s deleted from project %s", milestone_id, milestone.project_id)
    return recalc_project(store, milestone.project_id, now=now)
