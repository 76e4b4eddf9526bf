# models/task.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import date

if TYPE_CHECKING:
    from models.milestone import Milestone
    from models.subtask import Subtask

class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    milestone_id: int = Field(foreign_key="milestones.id", index=True)
    name: str
    weight: float = Field(default=0.0, ge=0)
    sequence_group: Optional[int] = None  # board lane, not a rollup input

    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    actual_start: Optional[date] = None  # written only by the Start action
    actual_end: Optional[date] = None    # written by Complete, cleared by rollup

    planned_progress: float = Field(default=0.0)
    progress: float = Field(default=0.0)  # actual progress, 0..100
    budgeted_cost: float = Field(default=0.0)
    actual_cost: float = Field(default=0.0)
    status: str = Field(default="pending")

    milestone: "Milestone" = Relationship(back_populates="tasks")
    subtasks: List["Subtask"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
