"""
Task descriptor models.

Defines the supported architectures and package kinds, the immutable
per-(distro, arch) validation task, and the skip record emitted for
pairs that cannot be scheduled.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Arch(str, Enum):
	"""CPU architectures a package can be validated on."""

	X64 = "x64"
	ARM64 = "arm64"
	ARM32 = "arm32"
	PPC64LE = "ppc64le"
	S390X = "s390x"

	@property
	def platform(self) -> str:
		"""Container platform string for this architecture."""
		return _PLATFORMS[self]


_PLATFORMS: dict[Arch, str] = {
    Arch.X64: "linux/amd64",
    Arch.ARM64: "linux/arm64",
    Arch.ARM32: "linux/arm/v7",
    Arch.PPC64LE: "linux/ppc64le",
    Arch.S390X: "linux/s390x",
}

# ppc64le and s390x require explicit opt-in
DEFAULT_ARCHITECTURES: tuple[Arch, ...] = (Arch.X64, Arch.ARM64, Arch.ARM32)


class PackageKind(str, Enum):
	"""Package format; decides the install script shape."""

	DEB = "deb"
	RPM = "rpm"


class ValidationTask(BaseModel):
	"""
	One (distribution, architecture) validation unit.

	Created by the task enumerator and consumed exactly once by the
	scheduler.
	"""

	model_config = ConfigDict(frozen=True)

	distro: str
	arch: Arch
	image: str = Field(description="Container image reference")
	package_kind: PackageKind
	package_path: Path = Field(description="Selected package artifact")
	secondary_test_version: str | None = Field(
	    default=None,
	    description="Runtime version for the secondary functional test",
	)

	@property
	def key(self) -> str:
		return f"{self.distro}_{self.arch.value}"

	@property
	def platform(self) -> str:
		return self.arch.platform

	@property
	def wants_secondary_test(self) -> bool:
		return self.secondary_test_version is not None


class SkipReason(str, Enum):
	"""Why a (distro, arch) pair was excluded before scheduling."""

	NO_IMAGE = "no image available"
	PACKAGE_NOT_FOUND = "package not found"


class SkipRecord(BaseModel):
	"""A (distro, arch) pair that was never executed."""

	model_config = ConfigDict(frozen=True)

	distro: str
	arch: Arch
	reason: SkipReason

	@property
	def key(self) -> str:
		return f"{self.distro}_{self.arch.value}"


__all__ = [
    "Arch",
    "DEFAULT_ARCHITECTURES",
    "PackageKind",
    "ValidationTask",
    "SkipReason",
    "SkipRecord",
]
