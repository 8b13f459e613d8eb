import asyncio
import io
from pathlib import Path

import pytest
from rich.console import Console

from package_matrix_validator.core.runner import (
    PreconditionError,
    check_preconditions,
    run_all,
)
from package_matrix_validator.models.config import Config
from package_matrix_validator.models.outcome import ContainerResult
from package_matrix_validator.models.run_params import RunParams

CATALOG = """\
ubuntu-22.04:
  package_kind: deb
  images:
    x64: ubuntu:22.04
    arm64: ubuntu:22.04
fedora-40:
  package_kind: rpm
  images:
    x64: fedora:40
"""


class ScriptedRunner:
	"""Returns a fixed exit code per image/platform pair."""

	def __init__(self, codes: dict[tuple[str, str], int] | None = None):
		self.codes = codes or {}
		self.calls: list[tuple[str, str, Path, Path | None, str]] = []

	async def run(self, image, platform, package_mount, secondary_test_mount,
	              script, *, name=None):
		self.calls.append(
		    (image, platform, package_mount, secondary_test_mount, script))
		await asyncio.sleep(0)
		code = self.codes.get((image, platform), 0)
		return ContainerResult(exit_code=code, output=[f"exit {code}"])


@pytest.fixture
def workspace(tmp_path) -> dict[str, Path]:
	packages = tmp_path / "packages"
	(packages / "deb").mkdir(parents=True)
	(packages / "rpm").mkdir()
	(packages / "deb" / "libfoo_1.2.0_amd64.deb").write_bytes(b"")
	(packages / "deb" / "libfoo_1.2.0_arm64.deb").write_bytes(b"")
	(packages / "rpm" / "libfoo-1.2.0-1.x86_64.rpm").write_bytes(b"")
	catalog = tmp_path / "catalog.yml"
	catalog.write_text(CATALOG, encoding="utf-8")
	secondary = tmp_path / "secondary"
	secondary.mkdir()
	run_script = secondary / "run.sh"
	run_script.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
	run_script.chmod(0o755)
	logs = tmp_path / "logs"
	logs.mkdir()
	(logs / "stale_x64.log").write_text("old", encoding="utf-8")
	return {
	    "packages": packages,
	    "catalog": catalog,
	    "secondary": secondary,
	    "logs": logs,
	}


def _config(ws: dict[str, Path], **extra) -> Config:
	values = {
	    "PACKAGES_PATH": str(ws["packages"]),
	    "LOG_PATH": str(ws["logs"]),
	    "IMAGE_CATALOG_FILE": str(ws["catalog"]),
	    "POLL_INTERVAL_SECONDS": 0.05,
	}
	values.update(extra)
	return Config(**values)


def _console() -> Console:
	return Console(file=io.StringIO(), width=200)


@pytest.mark.asyncio
async def test_run_all_all_pass(workspace):
	runner = ScriptedRunner()
	outcome = await run_all(_config(workspace),
	                        RunParams(arch=["x64", "arm64"]), runner=runner,
	                        console=_console())

	assert [t.key for t in outcome.tasks] == [
	    "ubuntu-22.04_x64",
	    "fedora-40_x64",
	    "ubuntu-22.04_arm64",
	]
	assert [s.key for s in outcome.skips] == ["fedora-40_arm64"]
	assert outcome.stats.completed == 3
	assert outcome.exit_code == 0
	assert outcome.summary.package.tally.passed == 3
	assert outcome.summary.package.tally.skipped == 1
	assert outcome.summary.secondary is None
	assert not (workspace["logs"] / "stale_x64.log").exists()
	assert (workspace["logs"] / "fedora-40_x64.log").exists()


@pytest.mark.asyncio
async def test_run_all_secondary_and_failures(workspace):
	runner = ScriptedRunner(codes={
	    ("ubuntu:22.04", "linux/amd64"): 1,
	    ("fedora:40", "linux/amd64"): 101,
	})
	config = _config(
	    workspace,
	    SECONDARY_TEST_PATH=str(workspace["secondary"]),
	    SECONDARY_TEST_VERSION="8.0",
	)
	outcome = await run_all(config, RunParams(arch="x64"), runner=runner,
	                        console=_console())

	assert outcome.exit_code == 1
	package = outcome.summary.package.tally
	secondary = outcome.summary.secondary.tally
	assert (package.passed, package.failed) == (1, 1)
	assert (secondary.passed, secondary.failed) == (0, 1)
	for _, _, _, mount, script in runner.calls:
		assert mount == workspace["secondary"]
		assert "8.0" in script


@pytest.mark.asyncio
async def test_run_all_skip_secondary_flag(workspace):
	runner = ScriptedRunner()
	config = _config(
	    workspace,
	    SECONDARY_TEST_PATH=str(workspace["secondary"]),
	    SECONDARY_TEST_VERSION="8.0",
	    SKIP_SECONDARY_TEST=True,
	)
	outcome = await run_all(config, RunParams(arch="x64"), runner=runner,
	                        console=_console())
	assert outcome.summary.secondary is None
	assert all(call[3] is None for call in runner.calls)


@pytest.mark.asyncio
async def test_run_all_no_image_for_any_pair(workspace):
	runner = ScriptedRunner()
	outcome = await run_all(_config(workspace),
	                        RunParams(arch="s390x", distro="fedora-40"),
	                        runner=runner, console=_console())
	assert outcome.tasks == []
	assert runner.calls == []
	assert outcome.summary.package.tally.skipped == 1
	assert outcome.exit_code == 0


@pytest.mark.asyncio
async def test_run_all_unknown_distro(workspace):
	with pytest.raises(ValueError):
		await run_all(_config(workspace), RunParams(distro="plan9"),
		              runner=ScriptedRunner(), console=_console())


@pytest.mark.asyncio
async def test_run_all_missing_packages_dir(workspace, tmp_path):
	config = _config(workspace, PACKAGES_PATH=str(tmp_path / "missing"))
	with pytest.raises(PreconditionError):
		await run_all(config, RunParams(), runner=ScriptedRunner(),
		              console=_console())


def test_check_preconditions_missing_runtime(workspace, monkeypatch):
	monkeypatch.setattr("shutil.which", lambda name: None)
	with pytest.raises(PreconditionError, match="not found"):
		check_preconditions(_config(workspace))


def test_check_preconditions_missing_secondary_dir(workspace, tmp_path):
	config = _config(
	    workspace,
	    SECONDARY_TEST_PATH=str(tmp_path / "nope"),
	    SECONDARY_TEST_VERSION="8.0",
	)
	with pytest.raises(PreconditionError, match="secondary"):
		check_preconditions(config, check_runtime=False)


@pytest.mark.asyncio
async def test_run_all_secondary_version_without_path(workspace):
	runner = ScriptedRunner(codes={("ubuntu:22.04", "linux/amd64"): 2})
	config = _config(workspace, SECONDARY_TEST_VERSION="8.0")
	with pytest.raises(PreconditionError, match="without a secondary test"):
		await run_all(config, RunParams(arch="x64"), runner=runner,
		              console=_console())
	assert runner.calls == []


def test_check_preconditions_secondary_dir_without_run_script(
        workspace, tmp_path):
	empty = tmp_path / "empty-secondary"
	empty.mkdir()
	config = _config(workspace, SECONDARY_TEST_PATH=str(empty),
	                 SECONDARY_TEST_VERSION="8.0")
	with pytest.raises(PreconditionError, match="run.sh"):
		check_preconditions(config, check_runtime=False)


def test_check_preconditions_run_script_not_executable(workspace):
	(workspace["secondary"] / "run.sh").chmod(0o644)
	config = _config(workspace,
	                 SECONDARY_TEST_PATH=str(workspace["secondary"]),
	                 SECONDARY_TEST_VERSION="8.0")
	with pytest.raises(PreconditionError, match="not executable"):
		check_preconditions(config, check_runtime=False)


def test_check_preconditions_skipped_secondary_needs_no_path(workspace):
	config = _config(workspace, SECONDARY_TEST_VERSION="8.0",
	                 SKIP_SECONDARY_TEST=True)
	check_preconditions(config, check_runtime=False)
