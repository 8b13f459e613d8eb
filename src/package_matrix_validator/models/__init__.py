"""
Package matrix validator models.

This subpackage contains Pydantic models for configuration, task
descriptors, outcomes, and summary data used throughout the application.

Key models:
    - Config: Application configuration loaded from environment
    - RunParams: Parameters for a validation run
    - ValidationTask: One (distro, arch) unit of work
    - TaskOutcome: Decoded result of one task
    - ImageCatalog: Distribution/architecture image lookup
"""

from .task import (
    Arch,
    DEFAULT_ARCHITECTURES,
    PackageKind,
    ValidationTask,
    SkipReason,
    SkipRecord,
)
from .outcome import (
    ContainerResult,
    OutcomeKind,
    TaskOutcome,
    interpret_exit_code,
)
from .catalog import DistroEntry, ImageCatalog
from .config import Config, load_env
from .run_params import RunParams
from .summary import (
    Phase,
    RowStatus,
    PhaseTally,
    TaskStatusRow,
    PhaseSummary,
    SummaryData,
    build_summary_data,
)
from .run_outcome import RunOutcome, SchedulerStats

__all__ = [
    "Arch",
    "DEFAULT_ARCHITECTURES",
    "PackageKind",
    "ValidationTask",
    "SkipReason",
    "SkipRecord",
    "ContainerResult",
    "OutcomeKind",
    "TaskOutcome",
    "interpret_exit_code",
    "DistroEntry",
    "ImageCatalog",
    "Config",
    "load_env",
    "RunParams",
    "Phase",
    "RowStatus",
    "PhaseTally",
    "TaskStatusRow",
    "PhaseSummary",
    "SummaryData",
    "build_summary_data",
    "RunOutcome",
    "SchedulerStats",
]
