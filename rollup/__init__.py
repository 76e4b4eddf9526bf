# rollup/__init__.py
from .cascade import CascadeResult
from .critical import CriticalFlag, detect_critical
from .errors import EntityNotFound, LifecycleError, RollupError, StoreWriteError
from .milestone import recalc_milestone, rollup_milestone
from .project import recalc_project, rollup_project
from .store import EntityStore
from .task import recalc_task, rollup_task
