"""
Result aggregation.

RunResults is the single store for per-task outcomes, skip records and
the per-phase counters. It only grows during a run, and every mutation
goes through ``record_outcome`` / ``record_skip``.
"""

from __future__ import annotations

import threading

from package_matrix_validator.models.outcome import TaskOutcome
from package_matrix_validator.models.summary import (
    Entry,
    Phase,
    PhaseTally,
    SummaryData,
    build_summary_data,
)
from package_matrix_validator.models.task import SkipRecord


class RunResults:
	"""Task key → outcome or skip record, plus pass/fail/skip tallies."""

	def __init__(self, secondary_requested: bool = False):
		self.secondary_requested = secondary_requested
		self._entries: dict[str, Entry] = {}
		self._tallies: dict[Phase, PhaseTally] = {
		    Phase.PACKAGE: PhaseTally(),
		    Phase.SECONDARY: PhaseTally(),
		}
		self._lock = threading.Lock()

	def _insert(self, key: str, entry: Entry) -> None:
		if key in self._entries:
			raise ValueError(f"result for {key} already recorded")
		self._entries[key] = entry

	def record_skip(self, skip: SkipRecord) -> None:
		"""Record a task excluded before scheduling."""
		with self._lock:
			self._insert(skip.key, skip)
			for tally in self._tallies.values():
				tally.skipped += 1

	def record_outcome(self, outcome: TaskOutcome) -> None:
		"""Record the outcome of an executed task.

		The secondary phase is counted only when it was requested and
		the package phase passed.

		Raises:
			ValueError: If the task key already has a recorded entry.
		"""
		with self._lock:
			self._insert(outcome.key, outcome)
			package = self._tallies[Phase.PACKAGE]
			if outcome.package_passed:
				package.passed += 1
			else:
				package.failed += 1

			if outcome.secondary_requested and outcome.package_passed:
				secondary = self._tallies[Phase.SECONDARY]
				if outcome.secondary_passed:
					secondary.passed += 1
				else:
					secondary.failed += 1

	def get(self, key: str) -> Entry | None:
		return self._entries.get(key)

	def __len__(self) -> int:
		return len(self._entries)

	def tally(self, phase: Phase) -> PhaseTally:
		"""Return a copy of the counters for one phase."""
		with self._lock:
			return self._tallies[phase].model_copy()

	@property
	def failure_count(self) -> int:
		return (self.tally(Phase.PACKAGE).failed +
		        self.tally(Phase.SECONDARY).failed)

	@property
	def run_failed(self) -> bool:
		"""True when any package or secondary test failure was recorded."""
		return self.failure_count > 0

	@property
	def exit_code(self) -> int:
		return 1 if self.run_failed else 0

	def summary(self, log_dir: str | None = None) -> SummaryData:
		"""Build the display summary for the recorded entries."""
		with self._lock:
			entries = dict(self._entries)
			tallies = {p: t.model_copy() for p, t in self._tallies.items()}
		return build_summary_data(
		    entries,
		    tallies,
		    secondary_requested=self.secondary_requested,
		    exit_code=self.exit_code,
		    log_dir=log_dir,
		)


__all__ = ["RunResults"]
