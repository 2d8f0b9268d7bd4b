"""Rendering utilities for coverage reports.

Presentation only: nothing here changes a verdict.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from reqcov._models import Outcome, Verdict
from reqcov._verdict import FAILING_OUTCOMES

if TYPE_CHECKING:
    from rich.console import Console

    from reqcov._coverage import CoverageReport


def _verdict_style(verdict: Verdict) -> str:
    """Get Rich style for a verdict."""
    match verdict:
        case Verdict.PASSED:
            return "green"
        case Verdict.INCONCLUSIVE:
            return "yellow"
        case Verdict.FAILED:
            return "red"


def _verdict_symbol(verdict: Verdict) -> str:
    match verdict:
        case Verdict.PASSED:
            return "✓"
        case Verdict.INCONCLUSIVE:
            return "?"
        case Verdict.FAILED:
            return "✗"


def format_verdict(verdict: Verdict) -> str:
    """Format verdict with color and symbol."""
    style = _verdict_style(verdict)
    return f"[{style}]{_verdict_symbol(verdict)} {verdict.upper()}[/{style}]"


def _format_outcome(outcome: Outcome) -> str:
    if outcome == Outcome.PASSED:
        return f"[green]{outcome}[/green]"
    if outcome in FAILING_OUTCOMES:
        return f"[red]{outcome}[/red]"
    return f"[yellow]{outcome}[/yellow]"


def render_coverage_table(report: CoverageReport, console: Console) -> None:
    """Render one row per (test case, plan, configuration).

    Linked test cases without points in an active plan get a single dimmed row.

    Args:
        report: The coverage report to render.
        console: Rich console to print to.

    """
    if not report.matrix:
        console.print("[yellow]No linked test case has test points in an active test plan[/yellow]")
        if not report.uncovered_test_cases:
            return

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Test Case", style="dim")
    table.add_column("Test Plan")
    table.add_column("Configuration")
    table.add_column("Outcome")
    table.add_column("Verdict")

    for test_case, plans in report.matrix.items():
        first_row = True
        for plan, configurations in plans.items():
            for config, outcome in configurations.items():
                table.add_row(
                    f"{test_case.id}: {escape(test_case.title)}" if first_row else "",
                    escape(plan.name) or str(plan.id),
                    escape(config.name) or str(config.id),
                    _format_outcome(outcome),
                    format_verdict(report.test_case_verdicts[test_case]) if first_row else "",
                )
                first_row = False

    for test_case in report.uncovered_test_cases:
        table.add_row(
            f"{test_case.id}: {escape(test_case.title)}",
            "[dim]-[/dim]",
            "[dim]-[/dim]",
            "[dim]-[/dim]",
            "[dim]- UNCOVERED[/dim]",
        )

    console.print(table)


def render_coverage_tree(report: CoverageReport, console: Console) -> None:
    """Render the outcome matrix as requirement -> test case -> plan -> configuration."""
    tree = Tree(
        f"[bold]{report.work_item.id}: {escape(report.work_item.title)}[/bold] {format_verdict(report.verdict)}",
    )
    for test_case, plans in report.matrix.items():
        case_node = tree.add(
            f"{format_verdict(report.test_case_verdicts[test_case])} {test_case.id}: {escape(test_case.title)}",
        )
        for plan, configurations in plans.items():
            plan_node = case_node.add(f"[cyan]{escape(plan.name) or plan.id}[/cyan]")
            for config, outcome in configurations.items():
                plan_node.add(f"{escape(config.name) or config.id}: {_format_outcome(outcome)}")

    for test_case in report.uncovered_test_cases:
        tree.add(f"[dim]- {test_case.id}: {escape(test_case.title)} (not in any active test plan)[/dim]")

    console.print(tree)


def render_coverage_summary(report: CoverageReport, console: Console) -> None:
    """Render summary statistics panel with the requirement verdict."""
    summary_lines = [
        f"Requirement: {report.work_item.id} {escape(report.work_item.title)}",
        f"Linked test cases: {report.linked_count}",
        f"Active test plans: {len(report.active_test_plans)}",
        f"[green]✓ Passed:[/green] {report.count(Verdict.PASSED)}",
        f"[yellow]? Inconclusive:[/yellow] {report.count(Verdict.INCONCLUSIVE)}",
        f"[red]✗ Failed:[/red] {report.count(Verdict.FAILED)}",
        f"[dim]- Not in an active plan:[/dim] {len(report.uncovered_test_cases)}",
        "",
        f"Coverage verdict: {format_verdict(report.verdict)}",
    ]
    console.print(Panel("\n".join(summary_lines), title="Summary", border_style=_verdict_style(report.verdict)))
