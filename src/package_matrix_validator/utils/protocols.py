"""
Protocol definitions for dependency injection.

Defines the Container Runner interface consumed by the scheduler so
tests can substitute fake runners for a real container runtime.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from package_matrix_validator.models.outcome import ContainerResult


class ContainerRunnerProtocol(Protocol):
	"""
	Protocol for the container runner interface.

	One call runs one container to completion. Implementations raise
	when no exit code could be obtained (for example a failed pull).
	"""

	async def run(
	    self,
	    image: str,
	    platform: str,
	    package_mount: Path,
	    secondary_test_mount: Path | None,
	    script: str,
	    *,
	    name: str | None = None,
	) -> ContainerResult:
		"""Run a container and return its exit code and output."""
		...


__all__ = ["ContainerRunnerProtocol"]
