"""
Task enumeration.

Builds the ordered list of validation tasks from the cross product of
requested architectures and distributions, recording a skip for every
pair that lacks an image or a package artifact.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field

from package_matrix_validator.core.packages import PackageLookup
from package_matrix_validator.models.catalog import ImageCatalog
from package_matrix_validator.models.task import (
    Arch,
    SkipReason,
    SkipRecord,
    ValidationTask,
)
from package_matrix_validator.utils.logging import get_logger

logger = get_logger(__name__)


class Enumeration(BaseModel):
	"""Tasks to schedule plus the pairs excluded up front."""

	tasks: list[ValidationTask] = Field(default_factory=list)
	skips: list[SkipRecord] = Field(default_factory=list)


def enumerate_tasks(
    architectures: Sequence[Arch],
    distros: Sequence[str],
    catalog: ImageCatalog,
    find_package: PackageLookup,
    target_version: str | None = None,
    secondary_test_version: str | None = None,
) -> Enumeration:
	"""
	Enumerate validation tasks, outer loop architecture, inner distro.

	The order of the returned tasks is the admission order used by the
	scheduler.

	Parameters:
		architectures: Requested architectures, in order.
		distros: Requested distributions, in order.
		catalog: Image catalog used to resolve images.
		find_package: Package presence check / version selector.
		target_version: Optional pinned package version.
		secondary_test_version: Runtime version for the secondary test,
			or None when the secondary phase is disabled.

	Returns:
		Enumeration with ordered tasks and skip records.

	Raises:
		ValueError: If the same (distro, arch) pair is requested twice.
	"""
	result = Enumeration()
	seen: set[str] = set()

	for arch in architectures:
		for distro in distros:
			key = f"{distro}_{arch.value}"
			if key in seen:
				raise ValueError(f"duplicate task {key}")
			seen.add(key)

			image = catalog.image_for(distro, arch)
			if image is None:
				logger.info("skip %s: %s", key, SkipReason.NO_IMAGE.value)
				result.skips.append(
				    SkipRecord(distro=distro, arch=arch,
				               reason=SkipReason.NO_IMAGE))
				continue

			kind = catalog.package_kind(distro)
			package_path = find_package(distro, arch, kind, target_version)
			if package_path is None:
				logger.info("skip %s: %s", key,
				            SkipReason.PACKAGE_NOT_FOUND.value)
				result.skips.append(
				    SkipRecord(distro=distro, arch=arch,
				               reason=SkipReason.PACKAGE_NOT_FOUND))
				continue

			result.tasks.append(
			    ValidationTask(
			        distro=distro,
			        arch=arch,
			        image=image,
			        package_kind=kind,
			        package_path=package_path,
			        secondary_test_version=secondary_test_version,
			    ))

	logger.info("enumerated %d task(s), %d skip(s)", len(result.tasks),
	            len(result.skips))
	return result


__all__ = ["Enumeration", "enumerate_tasks"]
