"""
Summary data model for report rendering.

Pure data extraction for the final summary display,
separating data logic from Rich rendering.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Union

from pydantic import BaseModel, Field

from .outcome import OutcomeKind, TaskOutcome
from .task import SkipRecord


class Phase(str, Enum):
	"""Test phase within a task."""

	PACKAGE = "package"
	SECONDARY = "secondary"


class RowStatus(str, Enum):
	PASS = "PASS"
	FAIL = "FAIL"
	SKIP = "SKIP"
	NOT_RUN = "N/A"


class PhaseTally(BaseModel):
	"""Pass/fail/skip counts for one phase."""

	passed: int = 0
	failed: int = 0
	skipped: int = 0

	@property
	def total(self) -> int:
		return self.passed + self.failed + self.skipped


class TaskStatusRow(BaseModel):
	"""One line of the per-task status listing."""

	distro: str
	arch: str
	status: RowStatus
	detail: str = ""
	duration_seconds: float | None = None


class PhaseSummary(BaseModel):
	"""Rows and tallies for a single phase."""

	phase: Phase
	rows: list[TaskStatusRow] = Field(default_factory=list)
	tally: PhaseTally = Field(default_factory=PhaseTally)


class SummaryData(BaseModel):
	"""All data needed to render the final summary.

	Populated by `build_summary_data()` and consumed by the reporting
	renderer.
	"""

	package: PhaseSummary
	secondary: PhaseSummary | None = None
	log_dir: str | None = None
	failed: bool = False
	exit_code: int = 0


Entry = Union[TaskOutcome, SkipRecord]

_KIND_DETAIL = {
    OutcomeKind.PASSED: "",
    OutcomeKind.SECONDARY_FAILED: "secondary test failed",
    OutcomeKind.SECONDARY_UNAVAILABLE: "secondary test runtime unavailable",
    OutcomeKind.PACKAGE_NOT_FOUND: "no package for this architecture",
    OutcomeKind.INSTALL_FAILED: "package installation failed",
    OutcomeKind.UNEXPECTED_EXIT: "unexpected exit code",
    OutcomeKind.FAULTED: "container run faulted",
}


def describe_outcome(outcome: TaskOutcome) -> str:
	"""Short human-readable description of an outcome."""
	detail = _KIND_DETAIL[outcome.kind]
	if outcome.is_faulted and outcome.error:
		return f"{detail}: {outcome.error}"
	if outcome.exit_code is not None and outcome.exit_code != 0:
		return f"{detail} (exit {outcome.exit_code})"
	return detail


def phase_row(entry: Entry, phase: Phase) -> TaskStatusRow:
	"""Build the status row of one entry for the given phase.

	The secondary phase is only meaningful once the package installed;
	for package failures it reports ``N/A``.
	"""
	if isinstance(entry, SkipRecord):
		return TaskStatusRow(distro=entry.distro, arch=entry.arch.value,
		                     status=RowStatus.SKIP, detail=entry.reason.value)

	if phase == Phase.PACKAGE:
		status = RowStatus.PASS if entry.package_passed else RowStatus.FAIL
		detail = "" if entry.package_passed else describe_outcome(entry)
	elif not entry.package_passed:
		status = RowStatus.NOT_RUN
		detail = "package phase failed"
	else:
		status = RowStatus.PASS if entry.secondary_passed else RowStatus.FAIL
		detail = describe_outcome(entry)
	return TaskStatusRow(
	    distro=entry.distro,
	    arch=entry.arch.value,
	    status=status,
	    detail=detail,
	    duration_seconds=entry.duration_seconds,
	)


def build_summary_data(
    entries: Mapping[str, Entry],
    tallies: Mapping[Phase, PhaseTally],
    secondary_requested: bool,
    exit_code: int,
    log_dir: str | None = None,
) -> SummaryData:
	"""Extract display data from recorded run entries.

	Pure function with no rendering side effects. Rows are sorted by
	(distro, arch) so the report does not depend on completion order.

	Parameters:
		entries: Task key → outcome or skip record.
		tallies: Per-phase counters.
		secondary_requested: Whether the secondary phase ran.
		exit_code: Process exit code for the run.
		log_dir: Directory holding per-task logs.

	Returns:
		Populated SummaryData model.
	"""
	ordered = sorted(entries.values(), key=lambda e: (e.distro, e.arch.value))

	def summarize(phase: Phase) -> PhaseSummary:
		return PhaseSummary(
		    phase=phase,
		    rows=[phase_row(e, phase) for e in ordered],
		    tally=tallies[phase].model_copy(),
		)

	return SummaryData(
	    package=summarize(Phase.PACKAGE),
	    secondary=summarize(Phase.SECONDARY) if secondary_requested else None,
	    log_dir=log_dir,
	    failed=exit_code != 0,
	    exit_code=exit_code,
	)


__all__ = [
    "Phase",
    "RowStatus",
    "PhaseTally",
    "TaskStatusRow",
    "PhaseSummary",
    "SummaryData",
    "build_summary_data",
    "describe_outcome",
    "phase_row",
]
