from pathlib import Path

import pytest

from package_matrix_validator.core.packages import (
    candidate_files,
    find_package,
    package_lookup,
    parse_version,
    select_version,
    version_key,
)
from package_matrix_validator.models.task import Arch, PackageKind


def _touch(root: Path, kind: str, *names: str) -> None:
	d = root / kind
	d.mkdir(parents=True, exist_ok=True)
	for name in names:
		(d / name).write_bytes(b"")


@pytest.mark.parametrize(
    "filename,version",
    [
        ("libfoo_2.4.5_amd64.deb", "2.4.5"),
        ("libfoo_2.4.5-1_arm64.deb", "2.4.5"),
        ("libfoo-2.4.5-1.x86_64.rpm", "2.4.5"),
        ("libfoo-3.0.0-rc.1.aarch64.rpm", "3.0.0-rc.1"),
        ("libfoo_3.0.0~preview2_amd64.deb", "3.0.0-preview2"),
        ("libfoo_amd64.deb", None),
    ],
)
def test_parse_version(filename, version):
	assert parse_version(filename) == version


def test_version_key_orders_semver():
	versions = ["1.10.0", "1.2.0", "2.0.0-rc.1", "2.0.0", "2.0.0-beta",
	            "2.0.0-rc.2"]
	assert sorted(versions, key=version_key) == [
	    "1.2.0", "1.10.0", "2.0.0-beta", "2.0.0-rc.1", "2.0.0-rc.2", "2.0.0"
	]


def test_select_highest_when_unpinned():
	names = ["libfoo_2.3.9_amd64.deb", "libfoo_2.10.0_amd64.deb",
	         "libfoo_2.4.0_amd64.deb"]
	assert select_version(names) == "libfoo_2.10.0_amd64.deb"


def test_release_beats_prerelease():
	names = ["libfoo_3.0.0~rc1_amd64.deb", "libfoo_3.0.0_amd64.deb"]
	assert select_version(names) == "libfoo_3.0.0_amd64.deb"


def test_select_pinned_version():
	names = ["libfoo_2.3.9_amd64.deb", "libfoo_2.10.0_amd64.deb"]
	assert select_version(names, "2.3.9") == "libfoo_2.3.9_amd64.deb"
	assert select_version(names, "9.9.9") is None


def test_select_from_nothing():
	assert select_version([]) is None
	assert select_version(["README.txt"]) is None


def test_candidate_files_filters_kind_and_arch(tmp_path):
	_touch(tmp_path, "deb", "libfoo_1.0.0_amd64.deb", "libfoo_1.0.0_arm64.deb",
	       "libfoo_1.0.0_armhf.deb", "libfoo_1.0.0_amd64.txt")
	_touch(tmp_path, "rpm", "libfoo-1.0.0-1.x86_64.rpm")
	assert candidate_files(tmp_path, PackageKind.DEB, Arch.X64) == [
	    "libfoo_1.0.0_amd64.deb"
	]
	assert candidate_files(tmp_path, PackageKind.DEB, Arch.ARM32) == [
	    "libfoo_1.0.0_armhf.deb"
	]
	assert candidate_files(tmp_path, PackageKind.RPM, Arch.X64) == [
	    "libfoo-1.0.0-1.x86_64.rpm"
	]
	assert candidate_files(tmp_path, PackageKind.RPM, Arch.ARM64) == []


def test_candidate_files_missing_kind_dir(tmp_path):
	assert candidate_files(tmp_path, PackageKind.RPM, Arch.X64) == []


def test_find_package_resolves_path(tmp_path):
	_touch(tmp_path, "rpm", "libfoo-1.0.0-1.aarch64.rpm",
	       "libfoo-1.1.0-1.aarch64.rpm")
	path = find_package(tmp_path, "fedora-40", Arch.ARM64, PackageKind.RPM)
	assert path == (tmp_path / "rpm" / "libfoo-1.1.0-1.aarch64.rpm").resolve()
	assert find_package(tmp_path, "fedora-40", Arch.X64,
	                    PackageKind.RPM) is None


def test_package_lookup_binds_directory(tmp_path):
	_touch(tmp_path, "deb", "libfoo_1.0.0_s390x.deb")
	lookup = package_lookup(tmp_path)
	assert lookup("debian-12", Arch.S390X, PackageKind.DEB, "1.0.0") is not None
	assert lookup("debian-12", Arch.S390X, PackageKind.DEB, "2.0.0") is None
