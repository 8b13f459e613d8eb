"""
Run parameters model.

Defines validated run parameters for CLI invocation and runner
orchestration, including expansion of the ``All`` selectors.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core.core_schema import ValidationInfo

from .catalog import ImageCatalog
from .task import Arch, DEFAULT_ARCHITECTURES

ALL = "All"
SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?$")


class RunParams(BaseModel):
	"""Validated run parameters for CLI/runner."""

	arch: list[str] = Field(default_factory=lambda: [ALL],
	                        description="Architectures or All")
	distro: list[str] = Field(default_factory=lambda: [ALL],
	                          description="Distributions or All")
	package_version: Optional[str] = Field(default=None,
	                                       description="Pinned version")
	max_parallel_jobs: Optional[int] = Field(default=None,
	                                         description="Concurrency bound")
	packages_path: Optional[str] = Field(default=None,
	                                     description="Package tree root")
	log_path: Optional[str] = Field(default=None,
	                                description="Log directory")
	skip_secondary_test: Optional[bool] = Field(
	    default=None, description="Disable secondary test")
	secondary_test_version: Optional[str] = Field(
	    default=None, description="Secondary test runtime version")
	secondary_test_path: Optional[str] = Field(
	    default=None, description="Secondary test directory")
	timeout: Optional[int] = Field(default=None,
	                               description="Per-task timeout")
	catalog: Optional[str] = Field(default=None,
	                               description="Image catalog file")
	runtime: Optional[str] = Field(default=None,
	                               description="Container runtime")

	@field_validator('arch', 'distro', mode="before")
	@classmethod
	def split_selection(cls, v: Any) -> list[str]:
		"""Accept repeated values, comma-separated strings, or both."""
		if v is None or v == "":
			return []
		items = [v] if isinstance(v, str) else list(v)
		out: list[str] = []
		for item in items:
			out.extend(p.strip() for p in str(item).split(",") if p.strip())
		return out

	@field_validator('arch')
	@classmethod
	def validate_arch(cls, v: list[str]) -> list[str]:
		if not v:
			return [ALL]
		known = {a.value for a in Arch}
		for item in v:
			if item != ALL and item not in known:
				raise ValueError(
				    f"unknown architecture {item!r}; expected one of "
				    f"{', '.join(sorted(known))} or {ALL}")
		return v

	@field_validator('distro')
	@classmethod
	def validate_distro(cls, v: list[str]) -> list[str]:
		return v or [ALL]

	@field_validator('package_version')
	@classmethod
	def validate_package_version(cls, v: Optional[str]) -> Optional[str]:
		if v is None:
			return v
		if not SEMVER_RE.match(v):
			raise ValueError("package_version must look like MAJOR.MINOR.PATCH")
		return v

	@field_validator('max_parallel_jobs', 'timeout')
	@classmethod
	def validate_positive(cls, v: Optional[int],
	                      info: ValidationInfo) -> Optional[int]:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@field_validator('runtime')
	@classmethod
	def validate_runtime(cls, v: Optional[str]) -> Optional[str]:
		if v is not None and v not in ("docker", "podman"):
			raise ValueError("runtime must be docker or podman")
		return v

	@property
	def architectures(self) -> list[Arch]:
		"""Requested architectures in order, with All expanded."""
		out: list[Arch] = []
		for item in self.arch:
			expanded = DEFAULT_ARCHITECTURES if item == ALL else (Arch(item),)
			for arch in expanded:
				if arch not in out:
					out.append(arch)
		return out

	def distros(self, catalog: ImageCatalog) -> list[str]:
		"""Requested distributions in order, with All expanded.

		Raises:
			ValueError: If a named distribution is not in the catalog.
		"""
		out: list[str] = []
		for item in self.distro:
			if item == ALL:
				expanded = catalog.distro_names()
			elif catalog.has_distro(item):
				expanded = [item]
			else:
				raise ValueError(
				    f"unknown distribution {item!r}; see list-images")
			for name in expanded:
				if name not in out:
					out.append(name)
		return out


__all__ = ["RunParams", "ALL"]
