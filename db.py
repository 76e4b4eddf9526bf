# db.py

#============================================================#
#                      Strivio Tracker                       #
#============================================================#
# Purpose     : Project → Milestone → Task → Deliverable     #
#               tracker with cascading progress, cost and    #
#               date rollups (SQLite/Postgres powered)       #
#============================================================#


from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from models import Milestone, Project, Subtask, Task
from rollup.errors import EntityNotFound, StoreWriteError
from rollup.store import (
    MILESTONES, PARENT_KEYS, PROJECTS, SUBTASKS, TASKS, EntityStore,
)
from utils.config import database_url

logger = logging.getLogger(__name__)


DATABASE_URL = database_url()


# ---- Engine / Session ----
def make_engine(url: str):
    if url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)

MODELS: Dict[str, Type[SQLModel]] = {
    PROJECTS: Project,
    MILESTONES: Milestone,
    TASKS: Task,
    SUBTASKS: Subtask,
}


def init_db(bind=None) -> None:
    SQLModel.metadata.create_all(bind or engine)


@contextmanager
def get_session(bind=None) -> Iterator[Session]:
    with Session(bind or engine, expire_on_commit=False) as s:
        yield s


# ---- Entity store ----
class SQLModelStore(EntityStore):
    """EntityStore over SQLModel tables; one committed transaction per call."""

    def __init__(self, bind=None):
        self._engine = bind or engine

    def _model(self, table: str) -> Type[SQLModel]:
        try:
            return MODELS[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}") from None

    def get_by_id(self, table: str, entity_id: int):
        model = self._model(table)
        try:
            with get_session(self._engine) as s:
                return s.get(model, entity_id)
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Reading {table} {entity_id} failed: {e}") from e

    def list_by_parent(self, table: str, parent_id: int) -> List[Any]:
        model = self._model(table)
        parent_key = PARENT_KEYS[table]
        if parent_key is None:
            raise ValueError(f"{table} has no parent")
        stmt = select(model).where(getattr(model, parent_key) == parent_id)
        if table == TASKS:
            stmt = stmt.order_by(Task.sequence_group, Task.id)
        else:
            stmt = stmt.order_by(model.id)
        try:
            with get_session(self._engine) as s:
                return list(s.exec(stmt).all())
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Listing {table} for parent {parent_id} failed: {e}") from e

    def update(self, table: str, entity_id: int, fields: Mapping[str, Any]):
        model = self._model(table)
        try:
            with get_session(self._engine) as s:
                row = s.get(model, entity_id)
                if row is None:
                    raise EntityNotFound(table, entity_id)
                for k, v in fields.items():
                    if not hasattr(row, k):
                        raise ValueError(f"{table} has no column {k!r}")
                    setattr(row, k, v)
                s.add(row)
                s.commit()
                s.refresh(row)
                return row
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Updating {table} {entity_id} failed: {e}") from e

    def insert(self, table: str, fields: Mapping[str, Any]):
        model = self._model(table)
        try:
            with get_session(self._engine) as s:
                row = model(**dict(fields))
                s.add(row)
                s.commit()
                s.refresh(row)
                return row
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Inserting into {table} failed: {e}") from e

    def delete(self, table: str, entity_id: int) -> bool:
        model = self._model(table)
        try:
            with get_session(self._engine) as s:
                row = s.get(model, entity_id)
                if not row:
                    return False
                s.delete(row)
                s.commit()
                return True
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Deleting {table} {entity_id} failed: {e}") from e


def get_projects(bind=None) -> List[Project]:
    with get_session(bind) as s:
        return list(s.exec(select(Project).order_by(Project.id)).all())
