"""
Image catalog loading.

Provides the built-in distribution/architecture image catalog and
loading of a replacement catalog from a YAML file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from package_matrix_validator.models.catalog import ImageCatalog


class CatalogError(Exception):
	"""Raised when an image catalog file cannot be used."""


_ALL_ARCHES = ("x64", "arm64", "arm32", "ppc64le", "s390x")
_NO_ARM32 = ("x64", "arm64", "ppc64le", "s390x")


def _images(image: str, arches: tuple[str, ...]) -> dict[str, str]:
	return {arch: image for arch in arches}


DEFAULT_CATALOG: dict[str, dict[str, Any]] = {
    "ubuntu-20.04": {
        "package_kind": "deb",
        "images": _images("ubuntu:20.04", _ALL_ARCHES),
    },
    "ubuntu-22.04": {
        "package_kind": "deb",
        "images": _images("ubuntu:22.04", _ALL_ARCHES),
    },
    "ubuntu-24.04": {
        "package_kind": "deb",
        "images": _images("ubuntu:24.04", _ALL_ARCHES),
    },
    "debian-11": {
        "package_kind": "deb",
        "images": _images("debian:11", _ALL_ARCHES),
    },
    "debian-12": {
        "package_kind": "deb",
        "images": _images("debian:12", _ALL_ARCHES),
    },
    "fedora-39": {
        "package_kind": "rpm",
        "images": _images("fedora:39", _NO_ARM32),
    },
    "fedora-40": {
        "package_kind": "rpm",
        "images": _images("fedora:40", _NO_ARM32),
    },
    "centos-stream-9": {
        "package_kind": "rpm",
        "images": _images("quay.io/centos/centos:stream9", _NO_ARM32),
    },
    "rockylinux-9": {
        "package_kind": "rpm",
        "images": _images("rockylinux:9", _NO_ARM32),
    },
    "almalinux-9": {
        "package_kind": "rpm",
        "images": _images("almalinux:9", _NO_ARM32),
    },
    "opensuse-leap-15.5": {
        "package_kind": "rpm",
        "images": _images("opensuse/leap:15.5", _NO_ARM32),
    },
    "azurelinux-3.0": {
        "package_kind": "rpm",
        "images": _images("mcr.microsoft.com/azurelinux/base/core:3.0",
                          ("x64", "arm64")),
    },
}


def default_catalog() -> ImageCatalog:
	"""Return the built-in image catalog."""
	return ImageCatalog.model_validate({"distros": DEFAULT_CATALOG})


def load_catalog(path: str | Path | None = None) -> ImageCatalog:
	"""
	Load an image catalog.

	The YAML file maps distribution names to ``package_kind`` and an
	``images`` mapping of architecture to image reference.

	Parameters:
		path: YAML catalog path, or None for the built-in catalog.

	Returns:
		Validated ImageCatalog.

	Raises:
		CatalogError: If the file is missing, unparsable or malformed.
	"""
	if path is None:
		return default_catalog()

	p = Path(path).expanduser()
	if not p.is_file():
		raise CatalogError(f"Image catalog not found: {p}")

	try:
		raw = yaml.safe_load(p.read_text(encoding="utf-8"))
	except yaml.YAMLError as exc:
		raise CatalogError(f"{p}: invalid YAML") from exc

	if not isinstance(raw, Mapping):
		raise CatalogError(
		    f"{p}: top-level value must be a mapping of distributions, "
		    f"got {type(raw).__name__}")

	try:
		return ImageCatalog.model_validate({"distros": dict(raw)})
	except ValidationError as exc:
		raise CatalogError(f"{p}: {exc}") from exc


__all__ = ["CatalogError", "DEFAULT_CATALOG", "default_catalog", "load_catalog"]
