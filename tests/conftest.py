# tests/conftest.py
from datetime import date, datetime

import pytest

import db
from rollup.errors import StoreWriteError
from rollup.store import MILESTONES, PROJECTS, SUBTASKS, TASKS


@pytest.fixture()
def engine():
    eng = db.make_engine("sqlite://")
    db.init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def store(engine):
    return db.SQLModelStore(engine)


class FailingStore(db.SQLModelStore):
    """Real store whose writes to one table blow up, like a dropped connection."""

    def __init__(self, bind, fail_table):
        super().__init__(bind)
        self.fail_table = fail_table
        self.attempts = []

    def update(self, table, entity_id, fields):
        self.attempts.append(table)
        if table == self.fail_table:
            raise StoreWriteError(f"simulated failure writing {table} {entity_id}")
        return super().update(table, entity_id, fields)


@pytest.fixture()
def failing_store(engine):
    def make(fail_table):
        return FailingStore(engine, fail_table)
    return make


@pytest.fixture()
def tree(store):
    """Project → Milestone → Task (started) → [A done w60, B open w40]."""
    p = store.insert(PROJECTS, {"name": "Plant upgrade"})
    m = store.insert(MILESTONES, {"project_id": p.id, "name": "Design", "weight": 100})
    t = store.insert(TASKS, {"milestone_id": m.id, "name": "Drawings", "weight": 100,
                             "sequence_group": 1, "actual_start": date(2024, 1, 2),
                             "status": "in_progress"})
    a = store.insert(SUBTASKS, {"task_id": t.id, "name": "A", "weight": 60,
                                "planned_start": date(2024, 1, 1), "planned_end": date(2024, 1, 10),
                                "budgeted_cost": 1000, "actual_cost": 800,
                                "is_done": True, "completed_at": datetime(2024, 1, 9, 16, 0)})
    b = store.insert(SUBTASKS, {"task_id": t.id, "name": "B", "weight": 40,
                                "planned_start": date(2024, 1, 5), "planned_end": date(2024, 1, 20),
                                "budgeted_cost": 500, "actual_cost": 100})
    return {"project": p, "milestone": m, "task": t, "a": a, "b": b}
