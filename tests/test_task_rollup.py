from datetime import date, datetime

from models.subtask import Subtask
from models.task import Task
from rollup.task import rollup_task

NOW = datetime(2024, 1, 15, 12, 0)


def _sub(weight, done=False, start=None, end=None, budget=0.0, actual=0.0):
    return Subtask(task_id=1, name="d", weight=weight, is_done=done,
                   planned_start=start, planned_end=end,
                   budgeted_cost=budget, actual_cost=actual)


def test_planned_dates_are_min_start_and_max_end():
    task = Task(id=1, milestone_id=1, name="t")
    subs = [_sub(50, start=date(2024, 1, 1), end=date(2024, 1, 10)),
            _sub(50, start=date(2024, 1, 5), end=date(2024, 1, 20))]
    rolled = rollup_task(task, subs, NOW)
    assert rolled.planned_start == date(2024, 1, 1)
    assert rolled.planned_end == date(2024, 1, 20)


def test_costs_are_summed():
    task = Task(id=1, milestone_id=1, name="t")
    subs = [_sub(10, budget=1000, actual=250.5), _sub(10, budget=500, actual=0)]
    rolled = rollup_task(task, subs, NOW)
    assert rolled.budgeted_cost == 1500
    assert rolled.actual_cost == 250.5


def test_progress_is_done_weight_over_total_weight():
    task = Task(id=1, milestone_id=1, name="t", actual_start=date(2024, 1, 2))
    subs = [_sub(60, done=True), _sub(40)]
    assert rollup_task(task, subs, NOW).progress == 60.0
    subs[1].is_done = True
    assert rollup_task(task, subs, NOW).progress == 100.0


def test_zero_weights_fall_back_to_done_count():
    task = Task(id=1, milestone_id=1, name="t")
    subs = [_sub(0, done=True), _sub(0), _sub(0), _sub(0)]
    assert rollup_task(task, subs, NOW).progress == 25.0


def test_planned_progress_is_time_based_weight_points():
    task = Task(id=1, milestone_id=1, name="t")
    subs = [
        # finished window: full weight
        _sub(30, start=date(2024, 1, 1), end=date(2024, 1, 10)),
        # 14.5 of 29 days elapsed: half the weight
        _sub(40, start=date(2024, 1, 1), end=date(2024, 1, 30)),
        # not started yet
        _sub(20, start=date(2024, 2, 1), end=date(2024, 2, 10)),
        # no dates, or weight 0, or reversed window: nothing
        _sub(10),
        _sub(0, start=date(2024, 1, 1), end=date(2024, 1, 2)),
        _sub(5, start=date(2024, 1, 10), end=date(2024, 1, 1)),
    ]
    assert rollup_task(task, subs, NOW).planned_progress == 50.0


def test_rollup_never_grants_completion():
    task = Task(id=1, milestone_id=1, name="t", actual_start=date(2024, 1, 2))
    rolled = rollup_task(task, [_sub(100, done=True)], NOW)
    assert rolled.actual_end is None
    assert rolled.status == "in_progress"


def test_explicit_completion_is_kept_while_all_done():
    task = Task(id=1, milestone_id=1, name="t", actual_start=date(2024, 1, 2),
                actual_end=date(2024, 1, 14))
    rolled = rollup_task(task, [_sub(50, done=True), _sub(50, done=True)], NOW)
    assert rolled.actual_end == date(2024, 1, 14)
    assert rolled.status == "completed"


def test_unchecked_deliverable_reopens_task():
    task = Task(id=1, milestone_id=1, name="t", actual_start=date(2024, 1, 2),
                actual_end=date(2024, 1, 14))
    rolled = rollup_task(task, [_sub(50, done=True), _sub(50)], NOW)
    assert rolled.actual_end is None
    assert rolled.status == "in_progress"


def test_task_without_subtasks():
    task = Task(id=1, milestone_id=1, name="t", actual_end=date(2024, 1, 14))
    rolled = rollup_task(task, [], NOW)
    assert rolled.fields() == {
        "planned_start": None, "planned_end": None,
        "budgeted_cost": 0, "actual_cost": 0,
        "planned_progress": 0.0, "progress": 0.0,
        "actual_end": None, "status": "pending",
    }


def test_rollup_does_not_write_actual_start():
    task = Task(id=1, milestone_id=1, name="t")
    rolled = rollup_task(task, [_sub(100, done=True)], NOW)
    assert "actual_start" not in rolled.fields()
    assert task.actual_start is None
