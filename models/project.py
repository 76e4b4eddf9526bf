# models/project.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import date

if TYPE_CHECKING:
    from models.milestone import Milestone

class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None

    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None

    planned_progress: float = Field(default=0.0)  # 0..100
    actual_progress: float = Field(default=0.0)   # 0..100
    budgeted_cost: float = Field(default=0.0)
    actual_cost: float = Field(default=0.0)
    status: str = Field(default="pending")

    milestones: List["Milestone"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
