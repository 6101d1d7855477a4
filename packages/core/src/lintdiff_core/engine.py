"""Core diff orchestration."""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass

from rich.console import Console

from lintdiff_core.aggregator import build_report
from lintdiff_core.config_differ import diff_configs
from lintdiff_core.ingest.base import BaseConfigSource, BaseViolationSource
from lintdiff_core.models import ConfigStatus, DiffStatus, ReportModel, RunSide

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class RuleStats:
    """Per-rule counts across every file of a report."""

    rule_id: str
    added: int = 0
    removed: int = 0
    unchanged: int = 0

    @property
    def changed(self) -> int:
        return self.added + self.removed


def run_diff(
    violations: BaseViolationSource,
    config: BaseConfigSource | None = None,
    *,
    max_distance: int | None = None,
    workers: int = 1,
) -> ReportModel:
    """Run the full diff pipeline and return the finished ReportModel.

    Both runs are fully materialized before any file is matched. The
    configuration diff is optional; without a config source the violation
    diff runs exactly the same.
    """
    start = time.monotonic()

    console.print("Report parsing is started.")
    base = violations.provide_violations(RunSide.BASE)
    patch = violations.provide_violations(RunSide.PATCH)
    console.print(f"  Base: {len(base)} file(s). Patch: {len(patch)} file(s).")
    if not base or not patch:
        # One empty side is a legitimate run; everything becomes ADDED or REMOVED.
        logger.info("One side of the diff is empty (base=%d, patch=%d files)", len(base), len(patch))

    config_diff = None
    if config is not None:
        console.print("Creation of configuration diff is started.")
        config_diff = diff_configs(config.provide_config(RunSide.BASE), config.provide_config(RunSide.PATCH))
    else:
        console.print("[dim]Configuration processing skipped: no configuration paths provided.[/dim]")

    console.print("Violation matching is started.")
    report = build_report(base, patch, max_distance=max_distance, workers=workers, config_diff=config_diff)
    logger.debug("Diff run took %.2fs", time.monotonic() - start)
    return report


def rule_breakdown(report: ReportModel) -> list[RuleStats]:
    """Aggregate entry counts per rule, most changed rules first."""
    stats: dict[str, RuleStats] = {}
    for file_diff in report:
        for entry in file_diff.entries:
            rule_id = entry.record.rule_id
            rule = stats.setdefault(rule_id, RuleStats(rule_id=rule_id))
            if entry.status is DiffStatus.ADDED:
                rule.added += 1
            elif entry.status is DiffStatus.REMOVED:
                rule.removed += 1
            else:
                rule.unchanged += 1
    return sorted(stats.values(), key=lambda r: (-r.changed, r.rule_id))


def short_rule_name(rule_id: str) -> str:
    """com.puppycrawl.tools.checkstyle.checks.javadoc.JavadocMethodCheck → JavadocMethodCheck"""
    return rule_id.rsplit(".", 1)[-1]


def print_summary(report: ReportModel, top: int = 5) -> None:
    """Print a short summary of the diff to the terminal."""
    summary = report.summary
    if summary.added == 0 and summary.removed == 0:
        console.print(
            f"[green]No differences: {summary.unchanged} unchanged violation(s) "
            f"across {summary.files} file(s).[/green]"
        )
    else:
        console.print(
            f"[bold]{summary.files}[/bold] file(s) · "
            f"[red]+{summary.added} added[/red] · "
            f"[green]-{summary.removed} removed[/green] · "
            f"{summary.unchanged} unchanged"
        )
        counts = Counter({fd.file_path: fd.changed for fd in report if fd.changed})
        for path, changed in counts.most_common(top):
            console.print(f"  [cyan]{path}[/cyan]  {changed} change(s)")

    cd = report.config_diff
    if cd is not None and not cd.has_changes:
        console.print("Configuration: no rule changes.")
    elif cd is not None:
        console.print(
            "Configuration: "
            f"{cd.count(ConfigStatus.ADDED)} added, "
            f"{cd.count(ConfigStatus.REMOVED)} removed, "
            f"{cd.count(ConfigStatus.CHANGED)} changed rule(s)."
        )
