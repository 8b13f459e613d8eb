"""
Parallel validation scheduler.

Runs up to ``max_parallel`` container invocations at once, admitting
tasks in enumeration order as slots free up. Completions are handled
on the scheduler loop itself, which is the only writer of RunResults,
the task logs and the status output.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from rich.console import Console

from package_matrix_validator.core.container import ContainerRunError
from package_matrix_validator.core.results import RunResults
from package_matrix_validator.core.script import render_validation_script
from package_matrix_validator.models.outcome import TaskOutcome
from package_matrix_validator.models.run_outcome import SchedulerStats
from package_matrix_validator.models.task import ValidationTask
from package_matrix_validator.ui.reporting import print_status_line
from package_matrix_validator.ui.task_logs import write_task_log
from package_matrix_validator.utils.logging import get_logger
from package_matrix_validator.utils.protocols import ContainerRunnerProtocol

logger = get_logger(__name__)

ProgressCallback = Callable[[str, str], None]

DEFAULT_MAX_PARALLEL = 8


def _now() -> datetime:
	return datetime.now(timezone.utc)


def container_name(task: ValidationTask) -> str:
	"""Unique container name for one task invocation."""
	return f"pmv-{task.key}-{uuid.uuid4().hex[:8]}"


class Scheduler:
	"""
	Bounded-concurrency runner for validation tasks.

	Each task moves Pending → Running → Completed or Faulted. A task's
	failure never affects the others and there is no cancellation of
	individual tasks.
	"""

	def __init__(
	    self,
	    runner: ContainerRunnerProtocol,
	    results: RunResults,
	    *,
	    max_parallel: int = DEFAULT_MAX_PARALLEL,
	    log_dir: Path | None = None,
	    secondary_test_mount: Path | None = None,
	    task_timeout: float | None = None,
	    poll_interval: float = 1.0,
	    progress_cb: ProgressCallback | None = None,
	    console: Console | None = None,
	):
		if max_parallel <= 0:
			raise ValueError("max_parallel must be > 0")
		self.runner = runner
		self.results = results
		self.max_parallel = max_parallel
		self.log_dir = log_dir
		self.secondary_test_mount = secondary_test_mount
		self.task_timeout = task_timeout
		self.poll_interval = poll_interval
		self.progress_cb = progress_cb
		self.console = console or Console()
		self.stats = SchedulerStats()

	def _notify(self, key: str, msg: str) -> None:
		if self.progress_cb:
			self.progress_cb(key, msg)

	async def _invoke(self, task: ValidationTask) -> TaskOutcome:
		started = _now()
		secondary = (self.secondary_test_mount
		             if task.wants_secondary_test else None)
		try:
			call = self.runner.run(
			    task.image,
			    task.platform,
			    task.package_path.parent,
			    secondary,
			    render_validation_script(task),
			    name=container_name(task),
			)
			if self.task_timeout is not None:
				result = await asyncio.wait_for(call, self.task_timeout)
			else:
				result = await call
		except asyncio.TimeoutError:
			logger.warning("task %s timed out after %ss", task.key,
			               self.task_timeout)
			return TaskOutcome.faulted(
			    task, f"timed out after {self.task_timeout}s", started,
			    _now())
		except ContainerRunError as exc:
			logger.warning("task %s faulted: %s", task.key, exc)
			return TaskOutcome.faulted(task, str(exc), started, _now(),
			                           log=exc.output)
		except Exception as exc:
			logger.warning("task %s faulted with unexpected error", task.key,
			               exc_info=True)
			return TaskOutcome.faulted(task, f"{type(exc).__name__}: {exc}",
			                           started, _now())
		return TaskOutcome.from_exit_code(task, result.exit_code,
		                                  result.output, started, _now())

	def _admit(self, task: ValidationTask,
	           in_flight: dict[asyncio.Task, ValidationTask]) -> None:
		handle = asyncio.create_task(self._invoke(task), name=task.key)
		in_flight[handle] = task
		self.stats.admitted += 1
		self.stats.peak_in_flight = max(self.stats.peak_in_flight,
		                                len(in_flight))
		logger.info("started %s (%d/%d slots)", task.key, len(in_flight),
		            self.max_parallel)
		self._notify(task.key, "task_started")

	def _complete(self, task: ValidationTask, outcome: TaskOutcome,
	              total: int) -> None:
		if self.log_dir is not None:
			try:
				write_task_log(self.log_dir, task, outcome)
			except OSError:
				logger.error("failed to write log for %s", task.key,
				             exc_info=True)
		self.results.record_outcome(outcome)
		self.stats.completed += 1
		if outcome.is_faulted:
			self.stats.faulted += 1
		logger.info("finished %s: %s", task.key, outcome.kind.value)
		print_status_line(self.console, outcome, self.stats.completed, total)
		self._notify(task.key,
		             "task_faulted" if outcome.is_faulted else "task_completed")

	async def run(self, tasks: Sequence[ValidationTask]) -> SchedulerStats:
		"""
		Run all tasks to completion.

		Returns only once every task has a recorded outcome.

		Parameters:
			tasks: Tasks in admission order.

		Returns:
			SchedulerStats for the run.
		"""
		pending: deque[ValidationTask] = deque(tasks)
		in_flight: dict[asyncio.Task, ValidationTask] = {}
		total = len(pending)
		logger.info("scheduling %d task(s) with max_parallel=%d", total,
		            self.max_parallel)

		try:
			while pending or in_flight:
				while pending and len(in_flight) < self.max_parallel:
					self._admit(pending.popleft(), in_flight)

				done, _ = await asyncio.wait(
				    in_flight,
				    timeout=self.poll_interval,
				    return_when=asyncio.FIRST_COMPLETED,
				)
				if not done:
					logger.debug("waiting on %d running task(s)",
					             len(in_flight))
					continue

				# Stable order when several tasks finish together
				for handle in sorted(done, key=lambda h: h.get_name()):
					task = in_flight.pop(handle)
					self._complete(task, handle.result(), total)
		except asyncio.CancelledError:
			logger.warning("scheduler cancelled, stopping %d running task(s)",
			               len(in_flight))
			for handle in in_flight:
				handle.cancel()
			await asyncio.gather(*in_flight, return_exceptions=True)
			raise

		return self.stats


__all__ = [
    "Scheduler",
    "ProgressCallback",
    "DEFAULT_MAX_PARALLEL",
    "container_name",
]
