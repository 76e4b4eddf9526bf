# rollup/errors.py
from __future__ import annotations


class RollupError(Exception):
    """Base class for failures raised by the rollup engine."""


class EntityNotFound(RollupError, LookupError):
    """The target row (or its parent) no longer exists."""

    def __init__(self, table: str, entity_id):
        super().__init__(f"{table} row {entity_id} not found")
        self.table = table
        self.entity_id = entity_id


class StoreWriteError(RollupError):
    """A store read/write failed; the cascade stops at this stage."""


class LifecycleError(RollupError):
    """An explicit Start/Complete action was refused by its precondition."""
