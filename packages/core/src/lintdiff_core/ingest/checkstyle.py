"""Checkstyle XML report ingestion.

A checkstyle-result.xml looks like::

    <checkstyle version="8.0">
      <file name="/src/Foo.java">
        <error line="10" column="5" severity="warning"
               message="Missing a Javadoc comment."
               source="com.puppycrawl.tools.checkstyle.checks.javadoc.JavadocMethodCheck"/>
      </file>
    </checkstyle>

The ``source`` attribute is the rule id. Reports for large code bases run to
hundreds of megabytes, so <file> elements are streamed with iterparse and
handed out in batches, each parsed element cleared once consumed.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator
from pathlib import Path

from lintdiff_core.errors import MalformedInputError, ReportParseError
from lintdiff_core.ingest.base import BaseViolationSource
from lintdiff_core.models import RunSide, ViolationRecord
from lintdiff_core.utils.paths import relativize, resolve_report_path

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

# Checkstyle writes suppressed findings with this severity when asked to.
_IGNORED_SEVERITY = "ignore"


def _int_attr(error: ET.Element, name: str, report: Path) -> int:
    raw = error.get(name)
    if raw is None or raw == "":
        return 0
    try:
        return int(raw)
    except ValueError:
        raise ReportParseError(f"{report}: non-numeric {name} {raw!r}") from None


def _to_record(file_path: str, error: ET.Element, report: Path) -> ViolationRecord | None:
    severity = (error.get("severity") or "").strip().lower()
    if severity == _IGNORED_SEVERITY:
        return None
    try:
        return ViolationRecord(
            file_path=file_path,
            line=_int_attr(error, "line", report),
            column=_int_attr(error, "column", report),
            rule_id=(error.get("source") or "").strip(),
            severity=severity,
            message=error.get("message") or "",
        )
    except MalformedInputError as e:
        raise ReportParseError(f"{report}: {e}") from e


def iter_report_batches(
    path: str | Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
    source_root: str | Path | None = None,
) -> Iterator[list[tuple[str, list[ViolationRecord]]]]:
    """Stream a checkstyle report as batches of at most ``batch_size`` files.

    ``path`` may be the report itself or a directory containing
    checkstyle-result.xml. File names are made relative to ``source_root``
    when they lie under it.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1.")
    report = resolve_report_path(path)
    batch: list[tuple[str, list[ViolationRecord]]] = []
    try:
        root = None
        for event, elem in ET.iterparse(report, events=("start", "end")):
            if root is None:
                root = elem
            if event != "end" or elem.tag != "file":
                continue
            name = elem.get("name")
            if not name:
                raise ReportParseError(f"{report}: <file> element without a name")
            file_path = relativize(name, source_root)
            records = [_to_record(file_path, error, report) for error in elem.iter("error")]
            batch.append((file_path, [r for r in records if r is not None]))
            # Processed <file> elements are detached so the tree never grows past one of them.
            root.clear()
            if len(batch) >= batch_size:
                yield batch
                batch = []
    except ET.ParseError as e:
        raise ReportParseError(f"Unable to parse XML {report}: {e}") from e
    except OSError as e:
        raise ReportParseError(f"Unable to read report {report}: {e}") from e
    if batch:
        yield batch


def parse_report(
    path: str | Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
    source_root: str | Path | None = None,
) -> list[tuple[str, list[ViolationRecord]]]:
    """Parse a whole report into (file_path, records) pairs."""
    return [item for batch in iter_report_batches(path, batch_size, source_root) for item in batch]


class CheckstyleReportSource(BaseViolationSource):
    """Reads the base and patch checkstyle-result.xml reports."""

    def __init__(
        self,
        base_path: str | Path,
        patch_path: str | Path,
        source_root: str | Path | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        exclude: Iterable[str] = (),
    ):
        super().__init__(exclude=exclude)
        self.paths = {RunSide.BASE: Path(base_path), RunSide.PATCH: Path(patch_path)}
        self.source_root = source_root
        self.batch_size = batch_size

    def _load(self, side: RunSide) -> Iterator[tuple[str, list[ViolationRecord]]]:
        count = 0
        for batch in iter_report_batches(self.paths[side], self.batch_size, self.source_root):
            count += len(batch)
            logger.debug("Parsed %d file element(s) from the %s report", count, side.value)
            yield from batch
