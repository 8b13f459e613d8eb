"""
Image catalog model.

Maps each supported distribution to its package kind and to the
container image available for every architecture it supports.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .task import Arch, PackageKind


class DistroEntry(BaseModel):
	"""Catalog entry for a single distribution."""

	package_kind: PackageKind
	images: dict[Arch, str] = Field(default_factory=dict)


class ImageCatalog(BaseModel):
	"""Distribution → architecture → image reference lookup."""

	distros: dict[str, DistroEntry] = Field(default_factory=dict)

	def has_distro(self, distro: str) -> bool:
		return distro in self.distros

	def distro_names(self) -> list[str]:
		"""Distribution names in catalog order."""
		return list(self.distros)

	def package_kind(self, distro: str) -> PackageKind:
		if not self.has_distro(distro):
			raise KeyError(distro)
		return self.distros[distro].package_kind

	def image_for(self, distro: str, arch: Arch) -> str | None:
		"""Return the image for (distro, arch), or None if absent."""
		entry = self.distros.get(distro)
		if entry is None:
			return None
		return entry.images.get(arch)

	def entries(self) -> list[tuple[str, Arch, str]]:
		"""Flatten the catalog to (distro, arch, image) rows."""
		rows = []
		for distro, entry in self.distros.items():
			for arch, image in entry.images.items():
				rows.append((distro, arch, image))
		return rows


__all__ = ["DistroEntry", "ImageCatalog"]
