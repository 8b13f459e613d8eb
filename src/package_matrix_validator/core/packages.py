"""
Package artifact selection.

Locates the package file for a (package kind, architecture) pair under
the packages tree and picks the requested version, or the highest
semantic version when none is pinned.
"""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Optional

from package_matrix_validator.models.task import Arch, PackageKind
from package_matrix_validator.utils.logging import get_logger

logger = get_logger(__name__)

# Architecture names as they appear in package filenames
ARCH_TOKENS: dict[PackageKind, dict[Arch, str]] = {
    PackageKind.DEB: {
        Arch.X64: "amd64",
        Arch.ARM64: "arm64",
        Arch.ARM32: "armhf",
        Arch.PPC64LE: "ppc64el",
        Arch.S390X: "s390x",
    },
    PackageKind.RPM: {
        Arch.X64: "x86_64",
        Arch.ARM64: "aarch64",
        Arch.ARM32: "armv7hl",
        Arch.PPC64LE: "ppc64le",
        Arch.S390X: "s390x",
    },
}

# Prerelease tags start with a letter so distro revisions (-1, _1) and
# architecture suffixes are not mistaken for them.
VERSION_RE = re.compile(r"(?<![\d.])(\d+)\.(\d+)\.(\d+)"
                        r"(?:[-~]([A-Za-z][0-9A-Za-z]*(?:\.\d+)*))?")

PackageLookup = Callable[[str, Arch, PackageKind, Optional[str]],
                         Optional[Path]]


def parse_version(filename: str) -> str | None:
	"""Extract the semantic version string from a package filename."""
	m = VERSION_RE.search(filename)
	if not m:
		return None
	major, minor, patch, pre = m.groups()
	base = f"{int(major)}.{int(minor)}.{int(patch)}"
	return f"{base}-{pre}" if pre else base


def version_key(version: str) -> tuple:
	"""Sort key implementing semantic version precedence.

	A release sorts above all of its prereleases; numeric prerelease
	identifiers sort below alphanumeric ones.
	"""
	core, _, pre = version.partition("-")
	major, minor, patch = (int(p) for p in core.split("."))
	if not pre:
		return (major, minor, patch, 1, ())
	idents = tuple((0, int(p), "") if p.isdigit() else (1, 0, p)
	               for p in pre.split("."))
	return (major, minor, patch, 0, idents)


def select_version(filenames: Iterable[str],
                   target_version: str | None = None) -> str | None:
	"""
	Pick the package filename matching a version.

	Parameters:
		filenames: Candidate package filenames.
		target_version: Exact version to select; None selects the
			highest semantic version.

	Returns:
		The selected filename, or None when nothing matches.
	"""
	versioned: list[tuple[str, str]] = []
	for name in sorted(filenames):
		version = parse_version(name)
		if version is None:
			logger.debug("ignoring unversioned package file %s", name)
			continue
		versioned.append((version, name))

	if target_version is not None:
		for version, name in versioned:
			if version == target_version:
				return name
		return None

	if not versioned:
		return None
	return max(versioned, key=lambda vn: version_key(vn[0]))[1]


def _has_arch_token(filename: str, token: str) -> bool:
	pattern = rf"(?<![A-Za-z0-9]){re.escape(token)}(?![A-Za-z0-9])"
	return re.search(pattern, filename) is not None


def candidate_files(packages_dir: Path, kind: PackageKind,
                    arch: Arch) -> list[str]:
	"""List package filenames of the given kind built for arch."""
	kind_dir = packages_dir / kind.value
	if not kind_dir.is_dir():
		return []
	token = ARCH_TOKENS[kind][arch]
	return sorted(
	    p.name for p in kind_dir.iterdir()
	    if p.is_file() and p.suffix == f".{kind.value}"
	    and _has_arch_token(p.name, token))


def find_package(
    packages_dir: Path,
    distro: str,
    arch: Arch,
    kind: PackageKind,
    target_version: str | None = None,
) -> Path | None:
	"""
	Resolve the package artifact for one (distro, arch) pair.

	Parameters:
		packages_dir: Root of the package tree (``deb/`` and ``rpm/``).
		distro: Distribution name, used for logging only.
		arch: Target architecture.
		kind: Package format for the distribution.
		target_version: Optional pinned version.

	Returns:
		Resolved path of the selected package, or None.
	"""
	names = candidate_files(packages_dir, kind, arch)
	selected = select_version(names, target_version)
	if selected is None:
		logger.info("no %s package for %s/%s (version=%s)", kind.value,
		            distro, arch.value, target_version or "latest")
		return None
	return (packages_dir / kind.value / selected).resolve()


def package_lookup(packages_dir: Path) -> PackageLookup:
	"""Bind find_package to a packages directory."""
	return partial(find_package, packages_dir)


__all__ = [
    "ARCH_TOKENS",
    "PackageLookup",
    "parse_version",
    "version_key",
    "select_version",
    "candidate_files",
    "find_package",
    "package_lookup",
]
