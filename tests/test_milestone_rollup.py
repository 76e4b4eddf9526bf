from datetime import date

from models.milestone import Milestone
from models.task import Task
from rollup.milestone import rollup_milestone


def _task(weight, progress=0.0, planned=0.0, start=None, end=None,
          actual_start=None, actual_end=None, budget=0.0, actual=0.0):
    return Task(milestone_id=1, name="t", weight=weight, progress=progress,
                planned_progress=planned, planned_start=start, planned_end=end,
                actual_start=actual_start, actual_end=actual_end,
                budgeted_cost=budget, actual_cost=actual)


def test_weighted_actual_and_planned_progress():
    m = Milestone(id=1, project_id=1, name="m")
    tasks = [_task(30, progress=50, planned=40), _task(70, progress=100, planned=80)]
    rolled = rollup_milestone(m, tasks)
    assert rolled.actual_progress == 85.00
    assert rolled.planned_progress == 68.00


def test_dates_and_costs_roll_up():
    m = Milestone(id=1, project_id=1, name="m")
    tasks = [_task(1, start=date(2024, 1, 3), end=date(2024, 1, 9), budget=100, actual=40),
             _task(1, start=None, end=date(2024, 2, 1), budget=50, actual=60)]
    rolled = rollup_milestone(m, tasks)
    assert (rolled.planned_start, rolled.planned_end) == (date(2024, 1, 3), date(2024, 2, 1))
    assert (rolled.budgeted_cost, rolled.actual_cost) == (150, 100)


def test_actual_start_is_earliest_started_task():
    m = Milestone(id=1, project_id=1, name="m")
    tasks = [_task(1, actual_start=date(2024, 1, 8)), _task(1, actual_start=date(2024, 1, 4)), _task(1)]
    rolled = rollup_milestone(m, tasks)
    assert rolled.actual_start == date(2024, 1, 4)
    assert rolled.status == "in_progress"


def test_actual_start_never_moves_later():
    m = Milestone(id=1, project_id=1, name="m", actual_start=date(2024, 1, 2))
    rolled = rollup_milestone(m, [_task(1, actual_start=date(2024, 1, 6))])
    assert rolled.actual_start == date(2024, 1, 2)

    m.actual_start = date(2024, 1, 10)
    rolled = rollup_milestone(m, [_task(1, actual_start=date(2024, 1, 6))])
    assert rolled.actual_start == date(2024, 1, 6)


def test_actual_start_kept_when_no_task_reports_one():
    m = Milestone(id=1, project_id=1, name="m", actual_start=date(2024, 1, 2))
    assert rollup_milestone(m, [_task(1)]).actual_start == date(2024, 1, 2)


def test_incomplete_task_clears_stored_completion():
    m = Milestone(id=1, project_id=1, name="m", actual_start=date(2024, 1, 2),
                  actual_end=date(2024, 1, 20))
    tasks = [_task(1, actual_start=date(2024, 1, 2), actual_end=date(2024, 1, 12)),
             _task(1, actual_start=date(2024, 1, 3))]
    rolled = rollup_milestone(m, tasks)
    assert rolled.actual_end is None
    assert rolled.status == "in_progress"


def test_completion_kept_when_every_task_complete():
    m = Milestone(id=1, project_id=1, name="m", actual_start=date(2024, 1, 2),
                  actual_end=date(2024, 1, 20))
    tasks = [_task(1, actual_start=date(2024, 1, 2), actual_end=date(2024, 1, 12))]
    rolled = rollup_milestone(m, tasks)
    assert rolled.actual_end == date(2024, 1, 20)
    assert rolled.status == "completed"


def test_rollup_never_completes_milestone_on_its_own():
    m = Milestone(id=1, project_id=1, name="m")
    tasks = [_task(1, actual_start=date(2024, 1, 2), actual_end=date(2024, 1, 12))]
    assert rollup_milestone(m, tasks).actual_end is None


def test_empty_milestone_resets_everything():
    m = Milestone(id=1, project_id=1, name="m", planned_start=date(2024, 1, 1),
                  planned_end=date(2024, 1, 9), actual_start=date(2024, 1, 2),
                  actual_end=date(2024, 1, 9), planned_progress=70, actual_progress=90,
                  budgeted_cost=10, actual_cost=5, status="completed")
    assert rollup_milestone(m, []).fields() == {
        "planned_start": None, "planned_end": None,
        "actual_start": None, "actual_end": None,
        "budgeted_cost": 0.0, "actual_cost": 0.0,
        "planned_progress": 0.0, "actual_progress": 0.0,
        "status": "pending",
    }
