# models/subtask.py
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import date, datetime

if TYPE_CHECKING:
    from models.task import Task

class Subtask(SQLModel, table=True):
    __tablename__ = "subtasks"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", index=True)
    name: str
    weight: float = Field(default=0.0, ge=0)

    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    budgeted_cost: float = Field(default=0.0)
    actual_cost: float = Field(default=0.0)

    is_done: bool = Field(default=False)
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )  # naive local time, set iff is_done

    task: "Task" = Relationship(back_populates="subtasks")
