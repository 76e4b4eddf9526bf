# rollup/lanes.py
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

Lane = Tuple[Optional[int], List[Any]]


def order_tasks(tasks: Iterable[Any]) -> List[Any]:
    """Board order: sequence_group ascending, then id. Ungrouped tasks go last."""
    def key(t):
        group = t.sequence_group
        return (group is None, group if group is not None else 0, t.id or 0)
    return sorted(tasks, key=key)


def group_lanes(tasks: Iterable[Any]) -> List[Lane]:
    """Split ordered tasks into lanes; tasks sharing a group run in parallel.

    A task without a sequence_group gets a lane of its own, keyed None.
    """
    lanes: List[Lane] = []
    for t in order_tasks(tasks):
        group = t.sequence_group
        if group is not None and lanes and lanes[-1][0] == group:
            lanes[-1][1].append(t)
        else:
            lanes.append((group, [t]))
    return lanes


def next_sequence_group(tasks: Iterable[Any]) -> int:
    """Group number for a task appended after every existing lane."""
    groups = [t.sequence_group for t in tasks if t.sequence_group is not None]
    return max(groups) + 1 if groups else 1
