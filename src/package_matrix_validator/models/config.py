from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


def load_env(env_file: str | Path | None = None) -> None:
	"""Load environment variables from an `.env` file if present."""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)


class Config(BaseSettings):
	"""Runtime configuration loaded from environment variables."""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

	max_parallel_jobs: int = Field(
	    8,
	    alias="MAX_PARALLEL_JOBS",
	    description="Maximum number of containers running at once",
	)
	packages_dir: str = Field(
	    "packages",
	    alias="PACKAGES_PATH",
	    description="Root of the package artifact tree",
	)
	log_dir: str = Field("logs", alias="LOG_PATH",
	                     description="Directory for per-task log files")
	container_runtime: Literal["docker", "podman"] = Field(
	    "docker",
	    alias="CONTAINER_RUNTIME",
	    description="Container runtime binary",
	)
	image_catalog_file: str | None = Field(
	    default=None,
	    alias="IMAGE_CATALOG_FILE",
	    description="YAML image catalog replacing the built-in one",
	)
	secondary_test_dir: str | None = Field(
	    default=None,
	    alias="SECONDARY_TEST_PATH",
	    description="Directory holding the secondary functional test",
	)
	secondary_test_version: str | None = Field(
	    default=None,
	    alias="SECONDARY_TEST_VERSION",
	    description="Runtime version used by the secondary test",
	)
	skip_secondary_test: bool = Field(
	    False,
	    alias="SKIP_SECONDARY_TEST",
	    description="Disable the secondary test phase for all tasks",
	)
	task_timeout_seconds: int | None = Field(
	    default=None,
	    alias="TASK_TIMEOUT_SECONDS",
	    description="Per-task timeout; unset means no timeout",
	)
	poll_interval_seconds: float = Field(
	    1.0,
	    alias="POLL_INTERVAL_SECONDS",
	    description="Idle wait between scheduler completion checks",
	)
	log_level: str = Field("info", alias="LOG_LEVEL",
	                       description="Log level")

	@field_validator("max_parallel_jobs", "task_timeout_seconds",
	                 "poll_interval_seconds")
	@classmethod
	def validate_positive(cls, v: Any, info: ValidationInfo) -> Any:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@property
	def packages_path(self) -> Path:
		"""Return packages_dir as Path."""
		return Path(self.packages_dir)

	@property
	def log_path(self) -> Path:
		"""Return log_dir as Path."""
		return Path(self.log_dir)

	@property
	def secondary_test_path(self) -> Path | None:
		return Path(self.secondary_test_dir) if self.secondary_test_dir else None

	@property
	def runs_secondary_test(self) -> bool:
		"""True when the secondary test phase is requested for this run."""
		return (not self.skip_secondary_test
		        and self.secondary_test_version is not None)

	def apply_overrides(self, run_params: "RunParams") -> None:
		"""Apply CLI overrides from RunParams onto this config.

		Only non-None fields in run_params are applied, preserving
		environment-based defaults for anything the user didn't explicitly set.

		Parameters:
			run_params: Validated run parameters with optional overrides.
		"""
		_OVERRIDES: list[tuple[str, str]] = [
		    ("max_parallel_jobs", "max_parallel_jobs"),
		    ("packages_path", "packages_dir"),
		    ("log_path", "log_dir"),
		    ("runtime", "container_runtime"),
		    ("catalog", "image_catalog_file"),
		    ("secondary_test_path", "secondary_test_dir"),
		    ("secondary_test_version", "secondary_test_version"),
		    ("skip_secondary_test", "skip_secondary_test"),
		    ("timeout", "task_timeout_seconds"),
		]
		for param_field, config_field in _OVERRIDES:
			value = getattr(run_params, param_field)
			if value is not None:
				setattr(self, config_field, value)


__all__ = ["Config", "load_env"]
