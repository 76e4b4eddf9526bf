from datetime import date
from types import SimpleNamespace

from rollup.critical import LONG_POLE, OVERDUE, detect_critical
from rollup.lanes import group_lanes, next_sequence_group, order_tasks


def _task(id, planned_end=None, actual_end=None, sequence_group=None):
    return SimpleNamespace(id=id, planned_end=planned_end, actual_end=actual_end,
                           sequence_group=sequence_group)


def test_overdue_and_long_pole_are_flagged():
    tasks = [_task(1, date(2024, 3, 1)), _task(2, date(2024, 4, 1)), _task(3, date(2024, 3, 20))]
    flags = detect_critical(tasks, today=date(2024, 3, 10))

    assert [f.task_id for f in flags] == [1, 2, 3]
    assert (flags[0].is_critical, flags[0].kind, flags[0].days_overdue) == (True, OVERDUE, 9)
    assert (flags[1].is_critical, flags[1].kind) == (True, LONG_POLE)
    assert flags[0].reason != flags[1].reason
    assert not flags[2].is_critical
    assert flags[2].reason is None


def test_overdue_wins_when_both_apply():
    flags = detect_critical([_task(1, date(2024, 3, 1))], today=date(2024, 3, 10))
    assert flags[0].kind == OVERDUE


def test_ties_on_latest_end_are_all_flagged():
    tasks = [_task(1, "2024-04-01"), _task(2, "2024-04-01"), _task(3, "2024-03-20")]
    flags = detect_critical(tasks, today="2024-03-10")
    assert [f.kind for f in flags] == [LONG_POLE, LONG_POLE, None]


def test_completed_and_undated_tasks_are_ignored():
    tasks = [_task(1, date(2024, 5, 1), actual_end=date(2024, 3, 1)),
             _task(2, None),
             _task(3, date(2024, 4, 1))]
    flags = detect_critical(tasks, today=date(2024, 3, 10))
    assert [f.is_critical for f in flags] == [False, False, True]
    assert flags[2].kind == LONG_POLE


def test_due_today_is_not_overdue():
    tasks = [_task(1, date(2024, 3, 10)), _task(2, date(2024, 3, 12))]
    flags = detect_critical(tasks, today=date(2024, 3, 10))
    assert [f.kind for f in flags] == [None, LONG_POLE]


def test_empty_input():
    assert detect_critical([], today=date(2024, 3, 10)) == []


def test_lanes_follow_sequence_group_then_id():
    tasks = [_task(5, sequence_group=2), _task(1, sequence_group=1), _task(9),
             _task(3, sequence_group=2), _task(2, sequence_group=1)]
    assert [t.id for t in order_tasks(tasks)] == [1, 2, 3, 5, 9]
    lanes = group_lanes(tasks)
    assert [(g, [t.id for t in ts]) for g, ts in lanes] == [(1, [1, 2]), (2, [3, 5]), (None, [9])]
    assert next_sequence_group(tasks) == 3
    assert next_sequence_group([]) == 1
