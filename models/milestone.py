# models/milestone.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import date

if TYPE_CHECKING:
    from models.project import Project
    from models.task import Task

class Milestone(SQLModel, table=True):
    __tablename__ = "milestones"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    name: str
    weight: float = Field(default=0.0, ge=0)  # share within the project

    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None

    planned_progress: float = Field(default=0.0)
    actual_progress: float = Field(default=0.0)
    budgeted_cost: float = Field(default=0.0)
    actual_cost: float = Field(default=0.0)
    status: str = Field(default="pending")

    project: "Project" = Relationship(back_populates="milestones")
    tasks: List["Task"] = Relationship(
        back_populates="milestone",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
