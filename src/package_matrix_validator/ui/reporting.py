"""
Console reporting.

Renders per-task status lines while the run progresses and the final
per-phase summary once it completes.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from package_matrix_validator.models.catalog import ImageCatalog
from package_matrix_validator.models.outcome import TaskOutcome
from package_matrix_validator.models.summary import (
    Phase,
    PhaseSummary,
    RowStatus,
    SummaryData,
    describe_outcome,
)

_STATUS_STYLES = {
    RowStatus.PASS: "green",
    RowStatus.FAIL: "red",
    RowStatus.SKIP: "yellow",
    RowStatus.NOT_RUN: "dim",
}

_PHASE_TITLES = {
    Phase.PACKAGE: "Package installation",
    Phase.SECONDARY: "Secondary test",
}


def format_status_line(outcome: TaskOutcome, done: int, total: int) -> Text:
	"""
	Build the one-line status printed when a task completes.

	Parameters:
		outcome: Outcome of the completed task.
		done: Number of tasks completed so far, including this one.
		total: Number of tasks scheduled.

	Returns:
		Styled rich Text.
	"""
	ok = outcome.package_passed and outcome.secondary_passed
	label = "PASS" if ok else "FAIL"
	text = Text()
	text.append(f"[{done}/{total}] ", style="dim")
	text.append(f"{label:<4} ", style="bold green" if ok else "bold red")
	text.append(f"{outcome.distro} {outcome.arch.value}")
	text.append(f" ({outcome.duration_seconds:.1f}s)", style="dim")
	detail = describe_outcome(outcome)
	if detail:
		text.append(f" {detail}", style="yellow" if ok else "red")
	return text


def print_status_line(console: Console, outcome: TaskOutcome, done: int,
                      total: int) -> None:
	console.print(format_status_line(outcome, done, total))


def _phase_table(summary: PhaseSummary) -> Table:
	table = Table(
	    title=_PHASE_TITLES[summary.phase],
	    box=box.ROUNDED,
	    expand=True,
	    title_style="bold",
	)
	table.add_column("Distro")
	table.add_column("Arch")
	table.add_column("Status")
	table.add_column("Duration", justify="right")
	table.add_column("Detail")
	for row in summary.rows:
		duration = (f"{row.duration_seconds:.1f}s"
		            if row.duration_seconds is not None else "-")
		table.add_row(
		    row.distro,
		    row.arch,
		    Text(row.status.value, style=_STATUS_STYLES[row.status]),
		    duration,
		    row.detail,
		)
	return table


def _tally_line(summary: PhaseSummary) -> Text:
	t = summary.tally
	text = Text(f"{_PHASE_TITLES[summary.phase]}: ")
	text.append(f"{t.passed} passed", style="green")
	text.append(", ")
	text.append(f"{t.failed} failed", style="red" if t.failed else None)
	text.append(", ")
	text.append(f"{t.skipped} skipped", style="yellow" if t.skipped else None)
	return text


def render_summary(console: Console, data: SummaryData) -> None:
	"""Print the final summary tables, tallies and verdict."""
	phases = [data.package]
	if data.secondary is not None:
		phases.append(data.secondary)

	for summary in phases:
		console.print()
		if summary.rows:
			console.print(_phase_table(summary))
		console.print(_tally_line(summary))

	if data.log_dir:
		console.print(f"\n[dim]Logs: {data.log_dir}[/dim]")

	if data.failed:
		console.print("\n[bold red]Validation FAILED[/bold red]")
	else:
		console.print("\n[bold green]Validation PASSED[/bold green]")


def render_catalog(console: Console, catalog: ImageCatalog) -> None:
	"""Print the image catalog as a table."""
	table = Table(box=box.ROUNDED, expand=True, show_header=True)
	table.add_column("Distro")
	table.add_column("Kind")
	table.add_column("Arch")
	table.add_column("Image")
	for distro, arch, image in catalog.entries():
		table.add_row(distro, catalog.package_kind(distro).value, arch.value,
		              image)
	console.print(table)


__all__ = [
    "format_status_line",
    "print_status_line",
    "render_summary",
    "render_catalog",
]
