# rollup/cascade.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Union

from rollup.errors import EntityNotFound, StoreWriteError
from rollup.store import MILESTONES, PROJECTS, SUBTASKS, TASKS, EntityStore
from utils.config import timezone_name
from utils.dates import local_now

logger = logging.getLogger(__name__)

AsOf = Union[date, datetime]

_LABELS = {PROJECTS: "project", MILESTONES: "milestone", TASKS: "task", SUBTASKS: "subtask"}


def stage_label(table: str, entity_id) -> str:
    return f"{_LABELS.get(table, table)}:{entity_id}"


@dataclass
class CascadeResult:
    """What one Task → Milestone → Project cascade actually recomputed."""

    stages: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings

    def not_found(self, table: str, entity_id) -> "CascadeResult":
        msg = f"{stage_label(table, entity_id)} not found; cascade stopped"
        logger.warning(msg)
        self.warnings.append(msg)
        return self


def resolve_now(now: Optional[AsOf]) -> AsOf:
    return now if now is not None else local_now(timezone_name())


def commit_stage(store: EntityStore, result: CascadeResult, table: str,
                 entity_id: int, fields: Mapping[str, Any]) -> bool:
    """Persist one stage. False means the row vanished and the cascade stops."""
    try:
        store.update(table, entity_id, fields)
    except EntityNotFound as e:
        result.not_found(e.table, e.entity_id)
        return False
    except StoreWriteError:
        logger.error("Cascade stopped at %s; ancestors left stale", stage_label(table, entity_id))
        raise
    result.stages.append(stage_label(table, entity_id))
    logger.debug("Recalculated %s: %s", stage_label(table, entity_id), dict(fields))
    return True
