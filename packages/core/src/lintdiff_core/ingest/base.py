"""Ingestion interfaces.

A violation source hands the engine one fully materialized mapping per run:

    provide_violations(side) → {file_path: FileViolationSet}

Concrete sources implement a single method, ``_load``, which returns the
raw records for one run. Merging repeated files, applying exclude patterns
and building the ordered FileViolationSets lives here so every report
format gets it identically.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from lintdiff_core.models import FileViolationSet, RunSide, ViolationRecord
from lintdiff_core.utils.paths import is_excluded

logger = logging.getLogger(__name__)


class BaseViolationSource(ABC):
    def __init__(self, exclude: Iterable[str] = ()):
        self.exclude = list(exclude)

    def provide_violations(self, side: RunSide) -> dict[str, FileViolationSet]:
        grouped: dict[str, list[ViolationRecord]] = {}
        skipped = 0
        for file_path, records in self._load(side):
            if is_excluded(file_path, self.exclude):
                skipped += 1
                continue
            # Some linters emit a <file> element more than once for the same path.
            grouped.setdefault(file_path, []).extend(records)
        if skipped:
            logger.info("Excluded %d file element(s) from the %s report", skipped, side.value)
        return {path: FileViolationSet.of(path, records) for path, records in grouped.items()}

    @abstractmethod
    def _load(self, side: RunSide) -> Iterable[tuple[str, list[ViolationRecord]]]:
        """Yield (file_path, records) pairs for one run.

        Should raise ReportParseError when the run's report cannot be read.
        """


class BaseConfigSource(ABC):
    @abstractmethod
    def provide_config(self, side: RunSide) -> dict[str, dict[str, str]]:
        """Return rule id → {attribute name: value} for one run."""
