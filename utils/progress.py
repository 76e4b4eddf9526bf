# utils/progress.py
from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


def as_number(x: Any) -> float:
    """Coerce a stored number (possibly None or NaN) to a float, 0 if unusable."""
    if x is None:
        return 0.0
    try:
        val = float(x)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(val) or math.isinf(val) else val


def clamp_percent(x: Any) -> float:
    return round(min(100.0, max(0.0, as_number(x))), 2)


def weighted_average(items: Iterable[T],
                     weight_of: Callable[[T], Any],
                     value_of: Callable[[T], Any]) -> float:
    """Σ(weight·value) / Σweight over ``items``, clamped to [0, 100].

    When every weight is zero the plain mean of the values is used instead.
    Negative weights count as zero. An empty input gives 0.
    """
    rows = [(max(0.0, as_number(weight_of(i))), as_number(value_of(i))) for i in items]
    if not rows:
        return 0.0
    total_weight = sum(w for w, _ in rows)
    if total_weight > 0:
        avg = sum(w * v for w, v in rows) / total_weight
    else:
        avg = sum(v for _, v in rows) / len(rows)
    return clamp_percent(avg)


def sum_costs(items: Iterable[Any], field: str) -> float:
    return round(sum(as_number(getattr(i, field, 0)) for i in items), 2)


def schedule_variance(actual_progress: Optional[float], planned_progress: Optional[float]) -> float:
    """Progress points ahead (+) or behind (-) the time-based plan."""
    return round(as_number(actual_progress) - as_number(planned_progress), 2)


def cost_variance(budgeted_cost: Optional[float], actual_cost: Optional[float]) -> float:
    """Budget left (+) or overrun (-)."""
    return round(as_number(budgeted_cost) - as_number(actual_cost), 2)
