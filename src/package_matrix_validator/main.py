from __future__ import annotations

import asyncio
import sys
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from typer.main import get_command

from package_matrix_validator.core.runner import PreconditionError, run_all
from package_matrix_validator.loaders.catalog import CatalogError, load_catalog
from package_matrix_validator.models.config import Config, load_env
from package_matrix_validator.models.run_params import RunParams
from package_matrix_validator.ui.reporting import render_catalog, render_summary
from package_matrix_validator.utils.logging import configure_logging

cli = typer.Typer(add_completion=False, no_args_is_help=False)

EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


@cli.callback()
def root() -> None:
	"""
	Validate a native package across Linux distributions and CPU
	architectures using disposable containers.
	"""
	return None


def run_impl(
    arch: list[str] | None = None,
    distro: list[str] | None = None,
    max_parallel_jobs: int | None = None,
    packages_path: str | None = None,
    package_version: str | None = None,
    log_path: str | None = None,
    skip_secondary_test: bool | None = None,
    secondary_test_version: str | None = None,
    secondary_test_path: str | None = None,
    timeout: int | None = None,
    catalog: str | None = None,
    runtime: str | None = None,
    log_level: str | None = None,
) -> int:
	"""
	Run the validation matrix and print the summary.

	Returns:
		Process exit code: 0 when nothing failed, 1 on any package or
		secondary test failure, 2 for usage and environment errors.
	"""
	load_env()
	console = Console()
	try:
		params = RunParams(
		    arch=arch or [],
		    distro=distro or [],
		    max_parallel_jobs=max_parallel_jobs,
		    packages_path=packages_path,
		    package_version=package_version,
		    log_path=log_path,
		    skip_secondary_test=skip_secondary_test,
		    secondary_test_version=secondary_test_version,
		    secondary_test_path=secondary_test_path,
		    timeout=timeout,
		    catalog=catalog,
		    runtime=runtime,
		)
		config = Config()
		config.apply_overrides(params)
		configure_logging(log_level or config.log_level)
		typer.echo(
		    f"Running with arch={','.join(a.value for a in params.architectures)}, "
		    f"distro={','.join(params.distro)}, "
		    f"max_parallel_jobs={config.max_parallel_jobs}, "
		    f"packages={config.packages_path}, logs={config.log_path}, "
		    f"secondary_test={config.secondary_test_version if config.runs_secondary_test else 'disabled'}"
		)
		outcome = asyncio.run(run_all(config, params, console=console))
	except (ValidationError, CatalogError, PreconditionError,
	        ValueError) as exc:
		typer.echo(f"error: {exc}", err=True)
		return EXIT_USAGE
	except KeyboardInterrupt:
		typer.echo("interrupted", err=True)
		return EXIT_INTERRUPTED

	render_summary(console, outcome.summary)
	return outcome.exit_code


@cli.command()
def run(
    arch: Optional[List[str]] = typer.Option(
        None,
        "--arch",
        help="x64, arm64, arm32, ppc64le, s390x or All (repeatable)",
    ),
    distro: Optional[List[str]] = typer.Option(
        None,
        "--distro",
        help="Distribution name or All (repeatable)",
    ),
    max_parallel_jobs: int = typer.Option(
        None, "--max-parallel-jobs", help="Maximum concurrent containers"),
    packages_path: str = typer.Option(None, "--packages-path",
                                      help="Root of the package tree"),
    package_version: str = typer.Option(None, "--package-version",
                                        help="Package version to validate"),
    log_path: str = typer.Option(None, "--log-path",
                                 help="Directory for per-task logs"),
    skip_secondary_test: bool = typer.Option(
        False,
        "--skip-secondary-test",
        help="Disable the secondary functional test",
    ),
    secondary_test_version: str = typer.Option(
        None,
        "--secondary-test-version",
        help="Runtime version for the secondary test",
    ),
    secondary_test_path: str = typer.Option(
        None,
        "--secondary-test-path",
        help="Directory with the secondary test (run.sh, setup.sh)",
    ),
    timeout: int = typer.Option(
        None,
        "--timeout",
        help="Per-task timeout in seconds (default: none)",
    ),
    catalog: str = typer.Option(None, "--catalog",
                                help="YAML image catalog file"),
    runtime: str = typer.Option(None, "--runtime",
                                help="Container runtime: docker or podman"),
    log_level: str = typer.Option(None, "--log-level", help="Log level"),
) -> None:
	"""Validate the package on every requested (distro, arch) pair."""
	code = run_impl(arch, distro, max_parallel_jobs, packages_path,
	                package_version, log_path, skip_secondary_test or None,
	                secondary_test_version, secondary_test_path, timeout,
	                catalog, runtime, log_level)
	raise typer.Exit(code=code)


@cli.command("list-images")
def list_images(
    catalog: str = typer.Option(None, "--catalog",
                                help="YAML image catalog file"),
) -> None:
	"""Show the distribution/architecture image catalog."""
	load_env()
	try:
		image_catalog = load_catalog(catalog or Config().image_catalog_file)
	except CatalogError as exc:
		typer.echo(f"error: {exc}", err=True)
		raise typer.Exit(code=EXIT_USAGE)
	render_catalog(Console(), image_catalog)


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `run` when appropriate.

	Allows calling 'package-matrix-validator --arch x64' without
	explicitly specifying the 'run' subcommand.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	commands = getattr(_click_app, "commands", {}).keys()
	# default to run unless a subcommand or top-level help was requested
	if not args or (args[0] not in commands and args[0] not in ("--help",
	                                                             "-h")):
		args = ["run"] + args
	return _click_app.main(
	    args=args,
	    prog_name="package-matrix-validator",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()
