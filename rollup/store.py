# rollup/store.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

PROJECTS = "projects"
MILESTONES = "milestones"
TASKS = "tasks"
SUBTASKS = "subtasks"

# table -> column linking a row to its parent
PARENT_KEYS: Dict[str, Optional[str]] = {
    PROJECTS: None,
    MILESTONES: "project_id",
    TASKS: "milestone_id",
    SUBTASKS: "task_id",
}


class EntityStore(ABC):
    """Row access the rollup engine needs. Each call commits on its own."""

    @abstractmethod
    def get_by_id(self, table: str, entity_id: int) -> Optional[Any]:
        pass

    @abstractmethod
    def list_by_parent(self, table: str, parent_id: int) -> List[Any]:
        """Children of ``parent_id`` in ``table``, in stable order."""
        pass

    @abstractmethod
    def update(self, table: str, entity_id: int, fields: Mapping[str, Any]) -> Any:
        """Apply ``fields`` to one row and return it.

        Raises EntityNotFound when the row is gone, StoreWriteError when the
        write itself fails.
        """
        pass

    @abstractmethod
    def insert(self, table: str, fields: Mapping[str, Any]) -> Any:
        pass

    @abstractmethod
    def delete(self, table: str, entity_id: int) -> bool:
        """Remove one row and its descendants in a single transaction."""
        pass
