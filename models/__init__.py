# models/__init__.py
from .project import Project
from .milestone import Milestone
from .task import Task
from .subtask import Subtask
