"""HtmlSiteRenderer: a small static site for browsing the diff.

Layout of the output directory:
  index.html          totals and one row per file with its counts
  files/NNNN.html     one page per file, entries in top-to-bottom order
  configuration.html  rule configuration diff, only when one was computed

When a source root is given, entries that have a patch position are shown
next to the source line they point at. Source that cannot be read is
reported as a warning event; the page is still written without it.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from lintdiff_core.models import ConfigStatus, DiffEntry, DiffStatus, FileDiff
from lintdiff_site.base import BaseRenderer
from lintdiff_site.models import RenderResult

if TYPE_CHECKING:
    from lintdiff_core.models import ConfigDiff, ReportModel

logger = logging.getLogger(__name__)

CONFIG_PAGE = "configuration.html"
INDEX_PAGE = "index.html"

_STYLE = """
body { font-family: sans-serif; margin: 2em; }
table { border-collapse: collapse; }
th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; vertical-align: top; }
td.num { text-align: right; }
tr.added { background: #fdd; }
tr.removed { background: #dfd; }
tr.changed { background: #ffd; }
code { white-space: pre; }
"""


def _e(value) -> str:
    return html.escape(str(value), quote=True)


def _page(title: str, body: str, root: str = "") -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f"<title>{_e(title)}</title><style>{_STYLE}</style></head>\n"
        f'<body><p><a href="{root}{INDEX_PAGE}">Summary</a></p>\n<h1>{_e(title)}</h1>\n{body}\n</body></html>\n'
    )


def _position(record) -> str:
    return f"{record.line}:{record.column}" if record is not None else ""


def file_page_name(index: int) -> str:
    return f"files/{index:04d}.html"


class HtmlSiteRenderer(BaseRenderer):
    def __init__(self, output_dir: str | Path, source_root: str | Path | None = None):
        super().__init__(output_dir)
        self.source_root = Path(source_root) if source_root is not None else None

    def render(self, report: ReportModel) -> RenderResult:
        self._prepare_output_dir()
        (self.output_dir / "files").mkdir()
        result = RenderResult(output_path=self.output_dir)

        pages: dict[str, str] = {}
        for i, file_diff in enumerate(report, 1):
            name = file_page_name(i)
            pages[file_diff.file_path] = name
            self._write(result, name, self._file_page(file_diff, result))

        if report.config_diff is not None:
            self._write(result, CONFIG_PAGE, self._config_page(report.config_diff))

        self._write(result, INDEX_PAGE, self._index_page(report, pages))
        result.info(f"Site written to {self.output_dir} ({len(result.files)} page(s)).")
        return result

    def _write(self, result: RenderResult, name: str, content: str) -> None:
        (self.output_dir / name).write_text(content, encoding="utf-8")
        result.files.append(name)

    # ------------------------------------------------------------------ #
    # Pages                                                                #
    # ------------------------------------------------------------------ #

    def _index_page(self, report: ReportModel, pages: dict[str, str]) -> str:
        s = report.summary
        parts = [
            "<table><tr><th>Files</th><th>Added</th><th>Removed</th><th>Unchanged</th></tr>",
            f'<tr><td class="num">{s.files}</td><td class="num">{s.added}</td>'
            f'<td class="num">{s.removed}</td><td class="num">{s.unchanged}</td></tr></table>',
        ]
        if report.config_diff is not None:
            parts.append(f'<p><a href="{CONFIG_PAGE}">Configuration changes</a></p>')
        if not len(report):
            parts.append("<p>No violations in either report.</p>")
        else:
            parts.append("<h2>Files</h2>")
            parts.append("<table><tr><th>File</th><th>Added</th><th>Removed</th><th>Unchanged</th></tr>")
            for fd in report:
                parts.append(
                    f'<tr><td><a href="{pages[fd.file_path]}">{_e(fd.file_path)}</a></td>'
                    f'<td class="num">{fd.added or "—"}</td><td class="num">{fd.removed or "—"}</td>'
                    f'<td class="num">{fd.unchanged or "—"}</td></tr>'
                )
            parts.append("</table>")
        return _page("Violation diff", "\n".join(parts))

    def _file_page(self, file_diff: FileDiff, result: RenderResult) -> str:
        source = self._source_lines(file_diff.file_path, result)
        rows = [
            "<table><tr><th>Status</th><th>Rule</th><th>Severity</th><th>Base</th><th>Patch</th>"
            "<th>Message</th>" + ("<th>Source</th>" if source is not None else "") + "</tr>"
        ]
        for entry in file_diff.entries:
            rows.append(self._entry_row(entry, source))
        rows.append("</table>")
        counts = (
            f"<p>{file_diff.added} added · {file_diff.removed} removed · {file_diff.unchanged} unchanged</p>"
        )
        return _page(file_diff.file_path, counts + "\n".join(rows), root="../")

    def _entry_row(self, entry: DiffEntry, source: list[str] | None) -> str:
        record = entry.record
        cells = [
            _e(entry.status.value),
            f'<span title="{_e(record.rule_id)}">{_e(record.rule_id.rsplit(".", 1)[-1])}</span>',
            _e(record.severity.value),
            _position(entry.base_record),
            _position(entry.patch_record),
            _e(record.message),
        ]
        if source is not None:
            text = ""
            # Source on disk is the patch tree, so removed entries have no line to show.
            if entry.patch_record is not None and 1 <= entry.patch_record.line <= len(source):
                text = source[entry.patch_record.line - 1]
            cells.append(f"<code>{_e(text)}</code>")
        row_class = {DiffStatus.ADDED: "added", DiffStatus.REMOVED: "removed"}.get(entry.status, "")
        return f'<tr class="{row_class}">' + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"

    def _config_page(self, config_diff: ConfigDiff) -> str:
        counts = ", ".join(f"{config_diff.count(status)} {status.value}" for status in ConfigStatus)
        rows = ["<table><tr><th>Rule</th><th>Status</th><th>Attribute</th><th>Base</th><th>Patch</th></tr>"]
        for rule in config_diff.entries:
            if rule.status is ConfigStatus.UNCHANGED:
                continue
            if rule.status is ConfigStatus.CHANGED:
                names = rule.changed_attributes
            else:
                names = tuple(sorted((rule.base_attributes or rule.patch_attributes or {}).keys())) or ("",)
            for name in names:
                base = (rule.base_attributes or {}).get(name, "")
                patch = (rule.patch_attributes or {}).get(name, "")
                rows.append(
                    f'<tr class="{rule.status.value}"><td>{_e(rule.rule_id)}</td><td>{_e(rule.status.value)}</td>'
                    f"<td>{_e(name)}</td><td>{_e(base)}</td><td>{_e(patch)}</td></tr>"
                )
        rows.append("</table>")
        return _page("Configuration diff", f"<p>{_e(counts)}</p>\n" + "\n".join(rows))

    def _source_lines(self, file_path: str, result: RenderResult) -> list[str] | None:
        if self.source_root is None:
            return None
        path = Path(file_path)
        if not path.is_absolute():
            path = self.source_root / path
        try:
            return path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            logger.debug("Could not read source %s: %s", path, e)
            result.warning(f"Source not available for {file_path}: {e.strerror or e}")
            return []
