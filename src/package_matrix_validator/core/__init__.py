"""Core validation logic.

Key modules:
    - packages: Package artifact lookup and version selection
    - enumerator: (arch, distro) task enumeration
    - script: In-container validation script rendering
    - container: docker/podman container runner
    - scheduler: Bounded parallel task scheduler
    - results: Outcome store and per-phase tallies
    - runner: Main orchestration via run_all()
"""

from package_matrix_validator.core.packages import (
    find_package,
    package_lookup,
    select_version,
)
from package_matrix_validator.core.enumerator import Enumeration, enumerate_tasks
from package_matrix_validator.core.script import render_validation_script
from package_matrix_validator.core.container import (
    ContainerRunError,
    ContainerRunner,
)
from package_matrix_validator.core.results import RunResults
from package_matrix_validator.core.scheduler import Scheduler
from package_matrix_validator.core.runner import (
    PreconditionError,
    check_preconditions,
    run_all,
)

__all__ = [
    # packages
    "find_package",
    "package_lookup",
    "select_version",
    # enumerator
    "Enumeration",
    "enumerate_tasks",
    # script
    "render_validation_script",
    # container
    "ContainerRunError",
    "ContainerRunner",
    # results
    "RunResults",
    # scheduler
    "Scheduler",
    # runner
    "PreconditionError",
    "check_preconditions",
    "run_all",
]
