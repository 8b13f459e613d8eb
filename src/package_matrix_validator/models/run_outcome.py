"""
Run outcome model.

Defines the aggregate outcome of a validation run.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .summary import SummaryData
from .task import SkipRecord, ValidationTask


class SchedulerStats(BaseModel):
	"""Counters observed by the scheduler during one run."""

	admitted: int = 0
	completed: int = 0
	faulted: int = 0
	peak_in_flight: int = 0


class RunOutcome(BaseModel):
	"""
	Aggregate outcome of a validation run.

	Combines the enumerated tasks and skips with the rendered summary
	data and the process exit code.
	"""

	tasks: list[ValidationTask] = Field(default_factory=list)
	skips: list[SkipRecord] = Field(default_factory=list)
	summary: SummaryData
	stats: SchedulerStats = Field(default_factory=SchedulerStats)

	@property
	def exit_code(self) -> int:
		return self.summary.exit_code


__all__ = ["RunOutcome", "SchedulerStats"]
