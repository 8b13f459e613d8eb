"""
Per-task log artifacts.

Each task owns one ``<distro>_<arch>.log`` file holding a header with
the task identity and timing, followed by the captured container output.
"""

from __future__ import annotations

from pathlib import Path

from package_matrix_validator.models.outcome import TaskOutcome
from package_matrix_validator.models.summary import describe_outcome
from package_matrix_validator.models.task import ValidationTask
from package_matrix_validator.utils.logging import get_logger
from package_matrix_validator.utils.paths import ensure_within

logger = get_logger(__name__)

_RULE = "-" * 72


def task_log_path(log_dir: Path, key: str) -> Path:
	"""Return the log file path for a task key inside log_dir."""
	return ensure_within(log_dir, log_dir / f"{key}.log")


def clear_task_logs(log_dir: Path) -> int:
	"""
	Remove log files left by a previous run.

	Parameters:
		log_dir: Log directory; created when missing.

	Returns:
		Number of files removed.
	"""
	log_dir.mkdir(parents=True, exist_ok=True)
	removed = 0
	for path in log_dir.glob("*.log"):
		if path.is_file():
			path.unlink()
			removed += 1
	if removed:
		logger.info("removed %d log file(s) from %s", removed, log_dir)
	return removed


def render_task_log(task: ValidationTask, outcome: TaskOutcome) -> str:
	"""Render the full log artifact text for one task."""
	result = outcome.kind.value
	detail = describe_outcome(outcome)
	if detail:
		result = f"{result}: {detail}"
	header = [
	    f"Task:       {task.key}",
	    f"Distro:     {task.distro}",
	    f"Arch:       {task.arch.value}",
	    f"Image:      {task.image}",
	    f"Platform:   {task.platform}",
	    f"Package:    {task.package_path}",
	    f"Secondary:  {task.secondary_test_version or 'disabled'}",
	    f"Started:    {outcome.started_at.isoformat()}",
	    f"Finished:   {outcome.finished_at.isoformat()}",
	    f"Duration:   {outcome.duration_seconds:.1f}s",
	    f"Result:     {result}",
	    _RULE,
	]
	return "\n".join(header + outcome.log) + "\n"


def write_task_log(log_dir: Path, task: ValidationTask,
                   outcome: TaskOutcome) -> Path:
	"""
	Write a task's log artifact.

	Parameters:
		log_dir: Destination directory.
		task: Task that produced the outcome.
		outcome: Recorded outcome with captured output.

	Returns:
		Path of the written file.
	"""
	path = task_log_path(log_dir, task.key)
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(render_task_log(task, outcome), encoding="utf-8")
	return path


__all__ = [
    "task_log_path",
    "clear_task_logs",
    "render_task_log",
    "write_task_log",
]
