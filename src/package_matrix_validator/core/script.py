"""
In-container validation script rendering.

The script installs the mounted package with the distribution's package
manager and optionally runs the secondary functional test. Its exit
code follows the contract decoded by ``interpret_exit_code``.
"""

from __future__ import annotations

import shlex
from string import Template

from package_matrix_validator.models.outcome import (
    EXIT_INSTALL_FAILED,
    EXIT_PACKAGE_NOT_FOUND,
    EXIT_SECONDARY_FAILED,
    EXIT_SECONDARY_UNAVAILABLE,
)
from package_matrix_validator.models.task import PackageKind, ValidationTask

PACKAGE_MOUNT = "/packages"
SECONDARY_TEST_MOUNT = "/secondary-test"

DEB_INSTALL = ('export DEBIAN_FRONTEND=noninteractive\n'
               'apt-get update -qq && apt-get install -y -qq "$$PKG"')

RPM_INSTALL = """if command -v dnf >/dev/null 2>&1; then
  dnf install -y "$$PKG"
elif command -v tdnf >/dev/null 2>&1; then
  tdnf install -y "$$PKG"
elif command -v zypper >/dev/null 2>&1; then
  zypper --non-interactive install --allow-unsigned-rpm "$$PKG"
elif command -v yum >/dev/null 2>&1; then
  yum install -y "$$PKG"
else
  echo "==> no rpm package manager found"
  false
fi"""

INSTALL_TEMPLATE = Template("""#!/bin/sh
set -u
echo "==> validating ${key} on ${image}"
PKG=${package}
if [ ! -f "$$PKG" ]; then
  echo "==> package not found: $$PKG"
  exit ${exit_not_found}
fi
echo "==> installing $$PKG"
if ! {
${install}
}; then
  echo "==> package installation failed"
  exit ${exit_install_failed}
fi
echo "==> package installed"
""")

SECONDARY_TEMPLATE = Template("""VERSION=${version}
if [ ! -x ${mount}/run.sh ]; then
  echo "==> secondary test ${mount}/run.sh missing"
  exit ${exit_failed}
fi
if [ -x ${mount}/setup.sh ]; then
  if ! ${mount}/setup.sh "$$VERSION"; then
    echo "==> runtime $$VERSION unavailable"
    exit ${exit_unavailable}
  fi
fi
if ! ${mount}/run.sh "$$VERSION"; then
  echo "==> secondary test failed"
  exit ${exit_failed}
fi
echo "==> secondary test passed"
""")


def render_validation_script(task: ValidationTask) -> str:
	"""
	Render the shell script executed inside the task's container.

	Parameters:
		task: The task being validated. Its secondary test version
			decides whether the secondary phase is included.

	Returns:
		POSIX shell script text.
	"""
	install = DEB_INSTALL if task.package_kind == PackageKind.DEB else RPM_INSTALL
	script = INSTALL_TEMPLATE.substitute(
	    key=task.key,
	    image=task.image,
	    package=shlex.quote(f"{PACKAGE_MOUNT}/{task.package_path.name}"),
	    install=Template(install).substitute(),
	    exit_not_found=EXIT_PACKAGE_NOT_FOUND,
	    exit_install_failed=EXIT_INSTALL_FAILED,
	)
	if task.wants_secondary_test:
		script += SECONDARY_TEMPLATE.substitute(
		    version=shlex.quote(task.secondary_test_version),
		    mount=SECONDARY_TEST_MOUNT,
		    exit_unavailable=EXIT_SECONDARY_UNAVAILABLE,
		    exit_failed=EXIT_SECONDARY_FAILED,
		)
	return script + "exit 0\n"


__all__ = ["render_validation_script", "PACKAGE_MOUNT", "SECONDARY_TEST_MOUNT"]
