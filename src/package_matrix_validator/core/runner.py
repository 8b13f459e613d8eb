"""
Main orchestrator for a validation run.

Checks environment preconditions, enumerates tasks, drives the
scheduler and returns the aggregated outcome.
"""

from __future__ import annotations

import os
import shutil

from rich.console import Console

from package_matrix_validator.core.container import ContainerRunner
from package_matrix_validator.core.enumerator import enumerate_tasks
from package_matrix_validator.core.packages import package_lookup
from package_matrix_validator.core.results import RunResults
from package_matrix_validator.core.scheduler import ProgressCallback, Scheduler
from package_matrix_validator.loaders.catalog import load_catalog
from package_matrix_validator.models.config import Config
from package_matrix_validator.models.run_outcome import RunOutcome
from package_matrix_validator.models.run_params import RunParams
from package_matrix_validator.ui.task_logs import clear_task_logs
from package_matrix_validator.utils.logging import get_logger
from package_matrix_validator.utils.protocols import ContainerRunnerProtocol

logger = get_logger(__name__)


class PreconditionError(Exception):
	"""Raised when the environment cannot run any validation."""


def check_preconditions(config: Config, *, check_runtime: bool = True) -> None:
	"""
	Verify the environment before any task is enumerated.

	Parameters:
		config: Application configuration.
		check_runtime: Whether the container runtime binary must exist.

	Raises:
		PreconditionError: If the runtime, the packages path or the
			requested secondary test is missing.
	"""
	if check_runtime and shutil.which(config.container_runtime) is None:
		raise PreconditionError(
		    f"container runtime '{config.container_runtime}' not found on PATH")
	if not config.packages_path.is_dir():
		raise PreconditionError(
		    f"packages path {config.packages_path} is not a directory")
	if not config.runs_secondary_test:
		return
	secondary = config.secondary_test_path
	if secondary is None:
		raise PreconditionError(
		    f"secondary test version {config.secondary_test_version} "
		    "requested without a secondary test path")
	if not secondary.is_dir():
		raise PreconditionError(
		    f"secondary test path {secondary} is not a directory")
	run_script = secondary / "run.sh"
	if not run_script.is_file() or not os.access(run_script, os.X_OK):
		raise PreconditionError(f"{run_script} is missing or not executable")


async def run_all(
    config: Config,
    run_params: RunParams,
    runner: ContainerRunnerProtocol | None = None,
    progress_cb: ProgressCallback | None = None,
    console: Console | None = None,
) -> RunOutcome:
	"""
	Validate the package on every requested (distro, arch) pair.

	Parameters:
		config: Application configuration with CLI overrides applied.
		run_params: Validated run parameters.
		runner: Container runner; a docker/podman runner is created from
			config when omitted.
		progress_cb: Optional per-task progress callback.
		console: Console for status lines.

	Returns:
		RunOutcome with tasks, skips, summary data and scheduler stats.
	"""
	check_preconditions(config, check_runtime=runner is None)
	catalog = load_catalog(config.image_catalog_file)
	architectures = run_params.architectures
	distros = run_params.distros(catalog)

	secondary_version = (config.secondary_test_version
	                     if config.runs_secondary_test else None)

	logger.info(
	    "run_all start arches=%s distros=%s version=%s secondary=%s",
	    ",".join(a.value for a in architectures),
	    ",".join(distros),
	    run_params.package_version or "latest",
	    secondary_version or "disabled",
	)

	log_dir = config.log_path
	clear_task_logs(log_dir)

	enumeration = enumerate_tasks(
	    architectures,
	    distros,
	    catalog,
	    package_lookup(config.packages_path),
	    target_version=run_params.package_version,
	    secondary_test_version=secondary_version,
	)

	results = RunResults(secondary_requested=secondary_version is not None)
	for skip in enumeration.skips:
		results.record_skip(skip)

	scheduler = Scheduler(
	    runner or ContainerRunner(config.container_runtime),
	    results,
	    max_parallel=config.max_parallel_jobs,
	    log_dir=log_dir,
	    secondary_test_mount=config.secondary_test_path,
	    task_timeout=config.task_timeout_seconds,
	    poll_interval=config.poll_interval_seconds,
	    progress_cb=progress_cb,
	    console=console,
	)
	stats = await scheduler.run(enumeration.tasks)

	logger.info("run_all done completed=%d faulted=%d failures=%d",
	            stats.completed, stats.faulted, results.failure_count)
	return RunOutcome(
	    tasks=enumeration.tasks,
	    skips=enumeration.skips,
	    summary=results.summary(log_dir=str(log_dir)),
	    stats=stats,
	)


__all__ = ["run_all", "check_preconditions", "PreconditionError"]
