# rollup/parent.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

from rollup.lifecycle import PENDING


@dataclass
class ParentRollup:
    """Derived fields shared by milestones and projects."""

    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None
    budgeted_cost: float = 0.0
    actual_cost: float = 0.0
    planned_progress: float = 0.0
    actual_progress: float = 0.0
    status: str = PENDING

    def fields(self) -> Dict[str, Any]:
        return asdict(self)
