"""stats command: rule and file breakdown of a diff, printed to the terminal."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from lintdiff_cli.commands.diff import build_source, check_paths_exist, load_command_config
from lintdiff_core.engine import rule_breakdown, run_diff, short_rule_name
from lintdiff_core.errors import LintDiffError

console = Console()


@click.command("stats")
@click.option("--base-report", required=True, help="Base checkstyle-result.xml, or the directory holding it.")
@click.option("--patch-report", required=True, help="Patch checkstyle-result.xml, or the directory holding it.")
@click.option("--top", default=10, show_default=True, help="Number of top entries to show per category.")
@click.pass_context
def stats_cmd(ctx, base_report: str, patch_report: str, top: int):
    """Show which rules and files changed the most between two reports.

    Nothing is written to disk, which is useful in CI logs to see at a glance
    whether a patch introduced new violations.
    """
    config = load_command_config(ctx, {})
    check_paths_exist(base_report=base_report, patch_report=patch_report)

    try:
        report = run_diff(
            build_source(config, base_report, patch_report),
            max_distance=config["max_line_distance"],
            workers=config["workers"],
        )
    except LintDiffError as e:
        raise click.ClickException(str(e))

    summary = report.summary
    console.print("\n[bold]Diff stats[/bold]")
    console.print(f"  Files:     {summary.files}")
    console.print(f"  Added:     {summary.added}")
    console.print(f"  Removed:   {summary.removed}")
    console.print(f"  Unchanged: {summary.unchanged}")

    rules = [r for r in rule_breakdown(report) if r.changed]
    if rules:
        rule_table = Table(title=f"Top {top} Changed Rules", show_header=True)
        rule_table.add_column("Rule", style="bold")
        rule_table.add_column("Added", justify="right")
        rule_table.add_column("Removed", justify="right")
        rule_table.add_column("Unchanged", justify="right")
        for rule in rules[:top]:
            rule_table.add_row(
                short_rule_name(rule.rule_id),
                f"[red]{rule.added}[/red]" if rule.added else "—",
                f"[green]{rule.removed}[/green]" if rule.removed else "—",
                str(rule.unchanged),
            )
        console.print(rule_table)

    files = sorted((fd for fd in report if fd.changed), key=lambda fd: (-fd.changed, fd.file_path))
    if files:
        file_table = Table(title=f"Top {top} Changed Files", show_header=True)
        file_table.add_column("File")
        file_table.add_column("Added", justify="right")
        file_table.add_column("Removed", justify="right")
        for fd in files[:top]:
            file_table.add_row(fd.file_path, str(fd.added), str(fd.removed))
        console.print(file_table)

    if not rules:
        console.print("[green]No added or removed violations.[/green]")
