import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from reqcov._coverage import check_coverage
from reqcov._errors import CoverageError
from reqcov._io import export_report
from reqcov._models import TestPlanState, Verdict
from reqcov._query import DEFAULT_BATCH_SIZE
from reqcov._snapshot import SnapshotBackend

from .config import ConfigError, ReqcovConfig, get_config
from .render import render_coverage_summary, render_coverage_table, render_coverage_tree

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)

EXIT_ERROR = 3


class ReportFormat(StrEnum):
    TABLE = "table"
    TREE = "tree"


def exit_code_for(verdict: Verdict) -> int:
    """Map a requirement verdict to the process exit code."""
    match verdict:
        case Verdict.PASSED:
            return 0
        case Verdict.FAILED:
            return 1
        case Verdict.INCONCLUSIVE:
            return 2


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Check the test coverage of a requirement."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> ReqcovConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_ERROR) from e


def _require(value: str | Path | None, option: str, key: str) -> str | Path:
    if value is None:
        msg = f"No value given. Provide {option} or configure [tool.reqcov].{key} in pyproject.toml."
        raise typer.BadParameter(msg, param_hint=option)
    return value


def _first_given(*values: int | None, default: int) -> int:
    """Return the first value that is not None."""
    return next((value for value in values if value is not None), default)


@app.command()
def check(  # noqa: PLR0913
    *,
    work_item: Annotated[
        int,
        typer.Option("-w", "--work-item", help="Id of the requirement work item to check"),
    ],
    collection: Annotated[
        str | None,
        typer.Option("-c", "--collection", help="Project collection address"),
    ] = None,
    project: Annotated[
        str | None,
        typer.Option("-p", "--project", help="Project name inside the collection"),
    ] = None,
    snapshot: Annotated[
        Path | None,
        typer.Option("-s", "--snapshot", help="Path to the collection snapshot TOML file"),
    ] = None,
    batch_size: Annotated[
        int | None,
        typer.Option("--batch-size", help="Maximum test case ids per test point query"),
    ] = None,
    max_workers: Annotated[
        int | None,
        typer.Option("--max-workers", help="Number of test plans queried concurrently"),
    ] = None,
    report_format: Annotated[
        ReportFormat,
        typer.Option("--format", help="Report layout"),
    ] = ReportFormat.TABLE,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the report to a .toml or .json file"),
    ] = None,
) -> None:
    """Evaluate the test coverage of a requirement.

    Exit code is 0 when the requirement passed, 1 when it failed, 2 when it is
    inconclusive and 3 when the check itself could not be completed.
    """
    config = _load_config()
    collection_address = str(_require(collection or config.collection, "--collection", "collection"))
    project_name = str(_require(project or config.project, "--project", "project"))
    snapshot_path = Path(_require(snapshot or config.snapshot, "--snapshot", "snapshot"))

    err_console.print()
    err_console.print(f"[cyan]Loading snapshot from:[/cyan] {snapshot_path}")
    err_console.print(f"[cyan]Project:[/cyan] [bold]{escape(project_name)}[/bold] ({escape(collection_address)})")
    err_console.print(f"[cyan]Checking work item:[/cyan] {work_item}")
    err_console.print()

    try:
        backend = SnapshotBackend.from_toml(snapshot_path)
        report = check_coverage(
            backend,
            collection_address,
            project_name,
            work_item,
            batch_size=_first_given(batch_size, config.batch_size, default=DEFAULT_BATCH_SIZE),
            max_workers=_first_given(max_workers, config.max_workers, default=1),
        )
    except CoverageError as e:
        logger.debug("Coverage check failed", exc_info=e)
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_ERROR) from e
    except Exception as e:  # noqa: BLE001
        logger.debug("Backend failed", exc_info=e)
        err_console.print(f"[red]✗ Unexpected backend error:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_ERROR) from e

    match report_format:
        case ReportFormat.TABLE:
            render_coverage_table(report, err_console)
        case ReportFormat.TREE:
            render_coverage_tree(report, err_console)
    err_console.print()
    render_coverage_summary(report, err_console)

    if output is not None:
        try:
            export_report(report, output)
        except (OSError, ValueError) as e:
            err_console.print(f"[red]✗ Cannot export report:[/red] {escape(str(e))}")
            raise typer.Exit(code=EXIT_ERROR) from e
        err_console.print(f"[cyan]Exported report to:[/cyan] {output}")

    err_console.print()
    raise typer.Exit(code=exit_code_for(report.verdict))


@app.command("snapshot-info")
def snapshot_info(
    *,
    snapshot: Annotated[
        Path | None,
        typer.Option("-s", "--snapshot", help="Path to the collection snapshot TOML file"),
    ] = None,
) -> None:
    """Show the projects, test plans and configurations of a snapshot."""
    config = _load_config()
    snapshot_path = Path(_require(snapshot or config.snapshot, "--snapshot", "snapshot"))

    try:
        backend = SnapshotBackend.from_toml(snapshot_path)
    except CoverageError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_ERROR) from e

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Project", style="bold")
    table.add_column("Work Items", justify="right")
    table.add_column("Active Plans", justify="right", style="green")
    table.add_column("Inactive Plans", justify="right", style="dim")
    table.add_column("Configurations", justify="right", style="yellow")
    table.add_column("Test Points", justify="right")

    for project in backend.snapshot.projects:
        active = sum(1 for plan in project.test_plans if plan.state == TestPlanState.ACTIVE)
        table.add_row(
            escape(project.name),
            str(len(project.work_items)),
            str(active),
            str(len(project.test_plans) - active),
            str(len(project.configurations)),
            str(len(project.test_points)),
        )

    err_console.print(
        Panel(
            table,
            title=f"[bold]{escape(backend.snapshot.collection)}[/bold]",
            subtitle=f"[dim]{len(backend.snapshot.projects)} projects[/dim]",
            border_style="cyan",
        ),
    )


def main() -> None:
    app()
