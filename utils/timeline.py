# utils/timeline.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

import pandas as pd

from rollup.critical import detect_critical, flags_by_task
from rollup.lanes import order_tasks
from rollup.store import MILESTONES, SUBTASKS, TASKS, EntityStore
from utils.progress import cost_variance, schedule_variance

COLUMNS = ["Item", "Start", "Finish", "Status", "Type", "Planned %", "Actual %",
           "Critical", "Reason"]


def timeline_df_for_project(store: EntityStore, project_id: int, today: date) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for m in store.list_by_parent(MILESTONES, project_id):
        rows.append({
            "Item": f"Milestone: {m.name}",
            "Start": m.planned_start,
            "Finish": m.planned_end,
            "Status": m.status,
            "Type": "Milestone",
            "Planned %": m.planned_progress,
            "Actual %": m.actual_progress,
            "Critical": False,
            "Reason": None,
        })
        tasks = order_tasks(store.list_by_parent(TASKS, m.id))
        flags = flags_by_task(detect_critical(tasks, today))
        for t in tasks:
            flag = flags[t.id]
            rows.append({
                "Item": f"  Task: {t.name}",
                "Start": t.planned_start,
                "Finish": t.planned_end,
                "Status": t.status,
                "Type": "Task",
                "Planned %": t.planned_progress,
                "Actual %": t.progress,
                "Critical": flag.is_critical,
                "Reason": flag.reason,
            })
            for st_ in store.list_by_parent(SUBTASKS, t.id):
                rows.append({
                    "Item": f"    ↳ {st_.name}",
                    "Start": st_.planned_start,
                    "Finish": st_.planned_end,
                    "Status": "completed" if st_.is_done else "open",
                    "Type": "Deliverable",
                    "Planned %": None,
                    "Actual %": 100.0 if st_.is_done else 0.0,
                    "Critical": False,
                    "Reason": None,
                })
    df = pd.DataFrame(rows, columns=COLUMNS)
    if not df.empty:
        df = df.dropna(subset=["Start", "Finish"], how="any").reset_index(drop=True)
    return df


def progress_summary(entity: Any) -> Dict[str, float]:
    """Headline numbers for a rolled-up milestone or project."""
    return {
        "planned_progress": entity.planned_progress,
        "actual_progress": entity.actual_progress,
        "schedule_variance": schedule_variance(entity.actual_progress, entity.planned_progress),
        "budgeted_cost": entity.budgeted_cost,
        "actual_cost": entity.actual_cost,
        "cost_variance": cost_variance(entity.budgeted_cost, entity.actual_cost),
    }
