from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from package_matrix_validator.models.outcome import TaskOutcome
from package_matrix_validator.models.task import (
    Arch,
    PackageKind,
    ValidationTask,
)
from package_matrix_validator.ui.task_logs import (
    clear_task_logs,
    render_task_log,
    task_log_path,
    write_task_log,
)

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _task() -> ValidationTask:
	return ValidationTask(
	    distro="debian-12",
	    arch=Arch.ARM32,
	    image="debian:12",
	    package_kind=PackageKind.DEB,
	    package_path=Path("/pkgs/deb/libfoo_1.0.0_armhf.deb"),
	)


def test_render_task_log_header_and_output():
	task = _task()
	outcome = TaskOutcome.from_exit_code(task, 101, ["E: broken deps"], T0,
	                                     T0 + timedelta(seconds=12.5))
	text = render_task_log(task, outcome)
	assert "Task:       debian-12_arm32" in text
	assert "Platform:   linux/arm/v7" in text
	assert "Secondary:  disabled" in text
	assert "Duration:   12.5s" in text
	assert "Result:     install_failed" in text
	assert text.rstrip().endswith("E: broken deps")


def test_write_task_log(tmp_path):
	task = _task()
	outcome = TaskOutcome.faulted(task, "image pull failed", T0, T0)
	path = write_task_log(tmp_path, task, outcome)
	assert path == tmp_path / "debian-12_arm32.log"
	assert "image pull failed" in path.read_text(encoding="utf-8")


def test_clear_task_logs(tmp_path):
	logs = tmp_path / "logs"
	assert clear_task_logs(logs) == 0
	assert logs.is_dir()
	(logs / "a_x64.log").write_text("x", encoding="utf-8")
	(logs / "notes.txt").write_text("keep", encoding="utf-8")
	assert clear_task_logs(logs) == 1
	assert (logs / "notes.txt").exists()


def test_task_log_path_stays_inside_log_dir(tmp_path):
	with pytest.raises(ValueError):
		task_log_path(tmp_path, "../escape")
