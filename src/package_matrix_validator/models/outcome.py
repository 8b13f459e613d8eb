"""
Task outcome models.

The container exit code folds the package-install result and the
secondary-test result into one integer. ``interpret_exit_code`` is the
only place that integer is decoded; everything downstream works with
``OutcomeKind`` and the two phase booleans on ``TaskOutcome``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .task import Arch, ValidationTask

EXIT_PASSED = 0
EXIT_SECONDARY_FAILED = 1
EXIT_SECONDARY_UNAVAILABLE = 2
EXIT_PACKAGE_NOT_FOUND = 100
EXIT_INSTALL_FAILED = 101


class ContainerResult(BaseModel):
	"""Raw result of one container invocation."""

	exit_code: int
	output: list[str] = Field(default_factory=list)


class OutcomeKind(str, Enum):
	"""
	Decoded task outcome.

	PASSED: both phases passed.
	SECONDARY_FAILED: package installed, secondary test failed.
	SECONDARY_UNAVAILABLE: package installed, test runtime missing
	    (not counted as a failure).
	PACKAGE_NOT_FOUND: no artifact for this architecture in the container.
	INSTALL_FAILED: package installation failed.
	UNEXPECTED_EXIT: exit code outside the known table.
	FAULTED: no exit code was obtained at all.
	"""

	PASSED = "passed"
	SECONDARY_FAILED = "secondary_failed"
	SECONDARY_UNAVAILABLE = "secondary_unavailable"
	PACKAGE_NOT_FOUND = "package_not_found"
	INSTALL_FAILED = "install_failed"
	UNEXPECTED_EXIT = "unexpected_exit"
	FAULTED = "faulted"


_PACKAGE_PASSED = {
    OutcomeKind.PASSED,
    OutcomeKind.SECONDARY_FAILED,
    OutcomeKind.SECONDARY_UNAVAILABLE,
}
_SECONDARY_PASSED = {OutcomeKind.PASSED, OutcomeKind.SECONDARY_UNAVAILABLE}


def interpret_exit_code(exit_code: int) -> OutcomeKind:
	"""Map a container exit code onto an outcome kind.

	Parameters:
		exit_code: Raw process exit status of the container.

	Returns:
		The decoded OutcomeKind.
	"""
	if exit_code == EXIT_PASSED:
		return OutcomeKind.PASSED
	if exit_code == EXIT_SECONDARY_FAILED:
		return OutcomeKind.SECONDARY_FAILED
	if exit_code == EXIT_SECONDARY_UNAVAILABLE:
		return OutcomeKind.SECONDARY_UNAVAILABLE
	if exit_code == EXIT_PACKAGE_NOT_FOUND:
		return OutcomeKind.PACKAGE_NOT_FOUND
	if exit_code > EXIT_PACKAGE_NOT_FOUND:
		return OutcomeKind.INSTALL_FAILED
	return OutcomeKind.UNEXPECTED_EXIT


class TaskOutcome(BaseModel):
	"""
	Result of one admitted task.

	Produced exactly once per task, either from a container exit code
	or as a faulted outcome when the invocation itself failed.
	"""

	model_config = ConfigDict(frozen=True)

	key: str
	distro: str
	arch: Arch
	image: str
	kind: OutcomeKind
	exit_code: int | None = None
	secondary_requested: bool = True
	log: list[str] = Field(default_factory=list)
	error: str | None = None
	started_at: datetime
	finished_at: datetime

	@classmethod
	def from_exit_code(
	    cls,
	    task: ValidationTask,
	    exit_code: int,
	    log: list[str],
	    started_at: datetime,
	    finished_at: datetime,
	) -> TaskOutcome:
		return cls(
		    key=task.key,
		    distro=task.distro,
		    arch=task.arch,
		    image=task.image,
		    kind=interpret_exit_code(exit_code),
		    exit_code=exit_code,
		    secondary_requested=task.wants_secondary_test,
		    log=list(log),
		    started_at=started_at,
		    finished_at=finished_at,
		)

	@classmethod
	def faulted(
	    cls,
	    task: ValidationTask,
	    error: str,
	    started_at: datetime,
	    finished_at: datetime,
	    log: list[str] | None = None,
	) -> TaskOutcome:
		return cls(
		    key=task.key,
		    distro=task.distro,
		    arch=task.arch,
		    image=task.image,
		    kind=OutcomeKind.FAULTED,
		    secondary_requested=task.wants_secondary_test,
		    log=list(log or []),
		    error=error,
		    started_at=started_at,
		    finished_at=finished_at,
		)

	@property
	def package_passed(self) -> bool:
		return self.kind in _PACKAGE_PASSED

	@property
	def secondary_passed(self) -> bool:
		"""Secondary phase result; always True when it was not requested."""
		if not self.secondary_requested:
			return True
		return self.kind in _SECONDARY_PASSED

	@property
	def is_faulted(self) -> bool:
		return self.kind == OutcomeKind.FAULTED

	@property
	def duration_seconds(self) -> float:
		return (self.finished_at - self.started_at).total_seconds()


__all__ = [
    "ContainerResult",
    "OutcomeKind",
    "TaskOutcome",
    "interpret_exit_code",
    "EXIT_PASSED",
    "EXIT_SECONDARY_FAILED",
    "EXIT_SECONDARY_UNAVAILABLE",
    "EXIT_PACKAGE_NOT_FOUND",
    "EXIT_INSTALL_FAILED",
]
