"""
Container runner backed by the docker or podman CLI.

Each invocation pulls the image for the requested platform, runs the
validation script in a fresh container with the package directory
mounted read-only, and captures the merged output line by line.
"""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path

from package_matrix_validator.core.script import (
    PACKAGE_MOUNT,
    SECONDARY_TEST_MOUNT,
)
from package_matrix_validator.models.outcome import ContainerResult
from package_matrix_validator.utils.logging import get_logger

logger = get_logger(__name__)

# docker/podman report their own failures (bad flags, daemon errors)
# with this status instead of the container's.
RUNTIME_ERROR_EXIT = 125


class ContainerRunError(Exception):
	"""Raised when a container invocation produced no exit code."""

	def __init__(self, message: str, output: list[str] | None = None):
		super().__init__(message)
		self.output = output or []


def _decode(raw: bytes) -> str:
	return raw.decode(errors="replace").rstrip("\r\n")


class ContainerRunner:
	"""
	Run validation containers through a container runtime CLI.

	Containers are started with ``--rm`` and a unique name so they can
	be killed when the invocation is cancelled.
	"""

	def __init__(self, runtime: str = "docker", *, pull: bool = True):
		self.runtime = runtime
		self.pull_images = pull

	async def _exec(self, *args: str) -> asyncio.subprocess.Process:
		try:
			return await asyncio.create_subprocess_exec(
			    self.runtime,
			    *args,
			    stdout=asyncio.subprocess.PIPE,
			    stderr=asyncio.subprocess.STDOUT,
			)
		except OSError as exc:
			raise ContainerRunError(
			    f"failed to start {self.runtime}: {exc}") from exc

	@staticmethod
	async def _collect(proc: asyncio.subprocess.Process) -> list[str]:
		lines: list[str] = []
		if proc.stdout is not None:
			async for raw in proc.stdout:
				lines.append(_decode(raw))
		await proc.wait()
		return lines

	@staticmethod
	def _terminate(proc: asyncio.subprocess.Process) -> None:
		if proc.returncode is None:
			try:
				proc.kill()
			except ProcessLookupError:
				pass

	async def pull(self, image: str, platform: str) -> list[str]:
		"""
		Pull an image for a platform.

		Returns:
			Captured pull output.

		Raises:
			ContainerRunError: If the pull fails.
		"""
		logger.info("pulling %s (%s)", image, platform)
		proc = await self._exec("pull", "--platform", platform, image)
		try:
			lines = await self._collect(proc)
		except asyncio.CancelledError:
			self._terminate(proc)
			raise
		if proc.returncode != 0:
			raise ContainerRunError(
			    f"image pull failed for {image} ({platform}), "
			    f"rc={proc.returncode}", output=lines)
		return lines

	async def kill(self, name: str) -> None:
		"""Kill a running container by name, ignoring failures."""
		try:
			proc = await self._exec("kill", name)
			await proc.communicate()
		except Exception:
			logger.debug("failed to kill container %s", name, exc_info=True)

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
		"""
		Run the validation script in a new container.

		Parameters:
			image: Image reference.
			platform: Container platform, e.g. ``linux/arm64``.
			package_mount: Host directory mounted read-only at /packages.
			secondary_test_mount: Optional host directory mounted
				read-only at /secondary-test.
			script: Shell script passed to ``sh -c``.
			name: Container name; generated when omitted.

		Returns:
			ContainerResult with the container exit code and output.

		Raises:
			ContainerRunError: If no container exit code was obtained.
		"""
		output: list[str] = []
		if self.pull_images:
			output.extend(await self.pull(image, platform))

		name = name or f"pmv-{uuid.uuid4().hex[:12]}"
		cmd = [
		    "run",
		    "--rm",
		    "--name",
		    name,
		    "--platform",
		    platform,
		    "-v",
		    f"{package_mount.resolve()}:{PACKAGE_MOUNT}:ro",
		]
		if secondary_test_mount is not None:
			cmd += [
			    "-v", f"{secondary_test_mount.resolve()}:{SECONDARY_TEST_MOUNT}:ro"
			]
		cmd += [image, "sh", "-c", script]

		logger.debug("starting container %s from %s", name, image)
		proc = await self._exec(*cmd)
		try:
			output.extend(await self._collect(proc))
		except asyncio.CancelledError:
			logger.warning("cancelled, killing container %s", name)
			await self.kill(name)
			self._terminate(proc)
			raise

		exit_code = proc.returncode
		if exit_code is None or exit_code == RUNTIME_ERROR_EXIT:
			raise ContainerRunError(
			    f"{self.runtime} could not run {image} ({platform}), "
			    f"rc={exit_code}", output=output)
		return ContainerResult(exit_code=exit_code, output=output)


__all__ = ["ContainerRunner", "ContainerRunError", "RUNTIME_ERROR_EXIT"]
