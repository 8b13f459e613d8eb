from pathlib import Path

import pytest

from package_matrix_validator.core.enumerator import enumerate_tasks
from package_matrix_validator.models.catalog import ImageCatalog
from package_matrix_validator.models.task import (
    Arch,
    PackageKind,
    SkipReason,
)


def _catalog() -> ImageCatalog:
	return ImageCatalog.model_validate({
	    "distros": {
	        "ubuntu-22.04": {
	            "package_kind": "deb",
	            "images": {
	                "x64": "ubuntu:22.04",
	                "arm64": "ubuntu:22.04",
	                "arm32": "ubuntu:22.04",
	            },
	        },
	        "fedora-40": {
	            "package_kind": "rpm",
	            "images": {
	                "x64": "fedora:40",
	                "arm64": "fedora:40",
	            },
	        },
	    }
	})


class RecordingLookup:
	"""Package lookup returning a path unless the pair is listed missing."""

	def __init__(self, missing: set[tuple[str, Arch]] | None = None):
		self.missing = missing or set()
		self.calls: list[tuple[str, Arch, PackageKind, str | None]] = []

	def __call__(self, distro, arch, kind, version):
		self.calls.append((distro, arch, kind, version))
		if (distro, arch) in self.missing:
			return None
		return Path(f"/pkgs/{kind.value}/libfoo_{arch.value}.{kind.value}")


def test_outer_arch_inner_distro_order():
	result = enumerate_tasks(
	    [Arch.ARM64, Arch.X64],
	    ["fedora-40", "ubuntu-22.04"],
	    _catalog(),
	    RecordingLookup(),
	)
	assert [t.key for t in result.tasks] == [
	    "fedora-40_arm64",
	    "ubuntu-22.04_arm64",
	    "fedora-40_x64",
	    "ubuntu-22.04_x64",
	]
	assert result.skips == []


def test_missing_image_skips_without_package_lookup():
	lookup = RecordingLookup()
	result = enumerate_tasks([Arch.ARM32], ["fedora-40", "ubuntu-22.04"],
	                         _catalog(), lookup)
	assert [t.key for t in result.tasks] == ["ubuntu-22.04_arm32"]
	assert len(result.skips) == 1
	skip = result.skips[0]
	assert (skip.distro, skip.arch, skip.reason) == ("fedora-40", Arch.ARM32,
	                                                 SkipReason.NO_IMAGE)
	assert [c[0] for c in lookup.calls] == ["ubuntu-22.04"]


def test_missing_package_is_skipped():
	lookup = RecordingLookup(missing={("ubuntu-22.04", Arch.X64)})
	result = enumerate_tasks([Arch.X64], ["ubuntu-22.04", "fedora-40"],
	                         _catalog(), lookup, target_version="1.2.3")
	assert [t.key for t in result.tasks] == ["fedora-40_x64"]
	assert result.skips[0].reason == SkipReason.PACKAGE_NOT_FOUND
	assert lookup.calls[0] == ("ubuntu-22.04", Arch.X64, PackageKind.DEB,
	                           "1.2.3")


def test_unknown_distro_skipped_as_no_image():
	result = enumerate_tasks([Arch.X64], ["plan9"], _catalog(),
	                         RecordingLookup())
	assert result.tasks == []
	assert result.skips[0].reason == SkipReason.NO_IMAGE


def test_task_fields_are_resolved():
	result = enumerate_tasks([Arch.X64], ["fedora-40"], _catalog(),
	                         RecordingLookup(),
	                         secondary_test_version="8.0")
	task = result.tasks[0]
	assert task.image == "fedora:40"
	assert task.package_kind == PackageKind.RPM
	assert task.package_path == Path("/pkgs/rpm/libfoo_x64.rpm")
	assert task.secondary_test_version == "8.0"
	assert task.platform == "linux/amd64"


def test_keys_are_unique_and_duplicates_rejected():
	result = enumerate_tasks([Arch.X64, Arch.ARM64],
	                         ["ubuntu-22.04", "fedora-40"], _catalog(),
	                         RecordingLookup())
	keys = [t.key for t in result.tasks] + [s.key for s in result.skips]
	assert len(keys) == len(set(keys))

	with pytest.raises(ValueError):
		enumerate_tasks([Arch.X64, Arch.X64], ["ubuntu-22.04"], _catalog(),
		                RecordingLookup())


def test_no_image_scenario_yields_single_skip():
	catalog = ImageCatalog.model_validate(
	    {"distros": {"bare": {"package_kind": "deb", "images": {}}}})
	result = enumerate_tasks([Arch.X64], ["bare"], catalog, RecordingLookup())
	assert result.tasks == []
	assert [s.reason for s in result.skips] == [SkipReason.NO_IMAGE]
