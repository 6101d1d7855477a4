"""Builds the ReportModel from the base and patch violation sets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor

from lintdiff_core.matcher import match_file
from lintdiff_core.models import ConfigDiff, DiffSummary, FileDiff, FileViolationSet, ReportModel, ViolationRecord

logger = logging.getLogger(__name__)

ViolationsByFile = Mapping[str, FileViolationSet | Iterable[ViolationRecord]]


def _as_sets(violations: ViolationsByFile) -> dict[str, FileViolationSet]:
    sets: dict[str, FileViolationSet] = {}
    for path, records in violations.items():
        if isinstance(records, FileViolationSet):
            if records.file_path != path:
                # Re-keying validates every record against the mapping key.
                records = FileViolationSet.of(path, records.violations)
            sets[path] = records
        else:
            sets[path] = FileViolationSet.of(path, records)
    return sets


def diff_file(
    file_path: str,
    base: FileViolationSet | None,
    patch: FileViolationSet | None,
    max_distance: int | None = None,
) -> FileDiff:
    return FileDiff(file_path=file_path, entries=match_file(base, patch, max_distance))


def build_report(
    base: ViolationsByFile,
    patch: ViolationsByFile,
    *,
    max_distance: int | None = None,
    workers: int = 1,
    config_diff: ConfigDiff | None = None,
) -> ReportModel:
    """Match every file in either run and return the finished report.

    Files are processed in sorted path order. Files with no violations on
    either side are left out. With ``workers > 1`` the per-file matching runs
    on a thread pool; every task owns a single file, and results are merged
    in path order so the report is identical to a sequential run.

    Raises MalformedInputError if any record breaks a model invariant; no
    partial report is returned.
    """
    base_sets = _as_sets(base)
    patch_sets = _as_sets(patch)

    paths = [
        path
        for path in sorted(base_sets.keys() | patch_sets.keys())
        if len(base_sets.get(path, ())) or len(patch_sets.get(path, ()))
    ]
    logger.debug("Matching %d file(s) with %d worker(s)", len(paths), workers)

    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="match") as pool:
            futures = {
                path: pool.submit(diff_file, path, base_sets.get(path), patch_sets.get(path), max_distance)
                for path in paths
            }
            file_diffs = {path: futures[path].result() for path in paths}
    else:
        file_diffs = {
            path: diff_file(path, base_sets.get(path), patch_sets.get(path), max_distance) for path in paths
        }

    summary = DiffSummary.of(file_diffs.values())
    logger.info(
        "Diff complete: %d file(s), %d added, %d removed, %d unchanged",
        summary.files,
        summary.added,
        summary.removed,
        summary.unchanged,
    )
    return ReportModel(files=file_diffs, summary=summary, config_diff=config_diff)
