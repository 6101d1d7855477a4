"""diff command: diff two checkstyle reports and render the result."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from lintdiff_core.engine import print_summary, run_diff
from lintdiff_core.errors import LintDiffError
from lintdiff_core.ingest.checkstyle import CheckstyleReportSource
from lintdiff_core.ingest.checkstyle_config import CheckstyleConfigSource

console = Console()

_EVENT_STYLE = {"info": "dim", "warning": "yellow"}


def load_command_config(ctx: click.Context, overrides: dict) -> dict:
    from lintdiff_core.config import load_config

    config_path = ctx.obj.get("config_path", ".lintdiff.yml") if ctx.obj else ".lintdiff.yml"
    try:
        return load_config(config_path, cli_overrides=overrides)
    except ValueError as e:
        raise click.UsageError(str(e))


def check_paths_exist(**paths: str | None) -> None:
    """Raise UsageError for the first given path that does not exist."""
    for option, value in paths.items():
        if value is not None and not Path(value).exists():
            raise click.UsageError(f"--{option.replace('_', '-')} path does not exist: {value}")


def build_source(config: dict, base_report: str, patch_report: str) -> CheckstyleReportSource:
    return CheckstyleReportSource(
        base_report,
        patch_report,
        source_root=config.get("source_root"),
        batch_size=config["batch_size"],
        exclude=config["exclude"],
    )


@click.command("diff")
@click.option("--base-report", required=True, help="Base checkstyle-result.xml, or the directory holding it.")
@click.option("--patch-report", required=True, help="Patch checkstyle-result.xml, or the directory holding it.")
@click.option(
    "--source-root",
    default=None,
    help="Source tree the reports were produced from. File paths are made relative to it "
    "and the site shows source lines. Overrides config file.",
)
@click.option(
    "--output",
    default=None,
    help="Directory for the result. Existing content is purged. Defaults to ~/lintdiff_report_<timestamp>.",
)
@click.option("--base-config", default=None, help="Checkstyle configuration of the base run.")
@click.option("--patch-config", default=None, help="Checkstyle configuration of the patch run.")
@click.option(
    "--max-distance",
    type=click.IntRange(min=0),
    default=None,
    help="Largest line shift still matched as the same violation. Unbounded by default.",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Files matched in parallel.")
@click.option(
    "--format",
    "report_format",
    type=click.Choice(["html", "json"]),
    default=None,
    help="Output format. Overrides config file.",
)
@click.pass_context
def diff_cmd(
    ctx,
    base_report: str,
    patch_report: str,
    source_root: str | None,
    output: str | None,
    base_config: str | None,
    patch_config: str | None,
    max_distance: int | None,
    workers: int | None,
    report_format: str | None,
):
    """Diff a base and a patch checkstyle report.

    Every violation is classified as added, removed or unchanged, matching
    violations of the same rule even when their line moved. The result is
    written as an HTML site (or JSON) to the output directory.
    """
    from lintdiff_cli.cli import _build_renderer
    from lintdiff_core.config import default_output_path

    if (base_config is None) != (patch_config is None):
        raise click.UsageError("--base-config and --patch-config must be given together.")

    config = load_command_config(
        ctx,
        {
            "source_root": source_root,
            "output": output,
            "max_line_distance": max_distance,
            "workers": workers,
            "format": report_format,
        },
    )
    check_paths_exist(
        base_report=base_report,
        patch_report=patch_report,
        source_root=config.get("source_root"),
        base_config=base_config,
        patch_config=patch_config,
    )

    violations = build_source(config, base_report, patch_report)
    config_source = CheckstyleConfigSource(base_config, patch_config) if base_config is not None else None
    output_dir = Path(config["output"]) if config.get("output") else default_output_path()

    try:
        report = run_diff(
            violations,
            config_source,
            max_distance=config["max_line_distance"],
            workers=config["workers"],
        )
        console.print(f"Creation of diff {config['format']} report is started.")
        renderer = _build_renderer(config, output_dir, source_root=config.get("source_root"))
        result = renderer.render(report)
    except (LintDiffError, OSError) as e:
        raise click.ClickException(str(e))

    for event in result.events:
        style = _EVENT_STYLE.get(event.level, "white")
        console.print(f"[{style}]{event.message}[/{style}]")
    if result.warnings:
        console.print(f"[yellow]{len(result.warnings)} warning(s) while rendering.[/yellow]")

    print_summary(report)
    console.print(f"[green]Result written to {result.output_path}[/green]")
