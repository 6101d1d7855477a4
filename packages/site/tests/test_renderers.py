"""Tests for lintdiff-site renderers."""

from __future__ import annotations

import json

import pytest

from lintdiff_core.aggregator import build_report
from lintdiff_core.config_differ import diff_configs
from lintdiff_core.models import ViolationRecord
from lintdiff_site.html_site import CONFIG_PAGE, INDEX_PAGE, HtmlSiteRenderer, file_page_name
from lintdiff_site.json_report import JsonRenderer
from lintdiff_site.models import RenderEvent, RenderResult


def v(path, line, rule="com.example.LineLengthCheck", message="Line is longer than 100 characters."):
    return ViolationRecord(file_path=path, line=line, column=1, rule_id=rule, severity="warning", message=message)


def _make_report(config_diff=None):
    return build_report(
        {"src/A.java": [v("src/A.java", 2)], "src/Gone.java": [v("src/Gone.java", 1, message="<old> & gone")]},
        {"src/A.java": [v("src/A.java", 3), v("src/A.java", 1, rule="com.example.TodoCommentCheck")]},
        config_diff=config_diff,
    )


# ---------------------------------------------------------------------------
# RenderResult
# ---------------------------------------------------------------------------


class TestRenderResult:
    def test_events_recorded_in_order(self, tmp_path):
        result = RenderResult(output_path=tmp_path)
        result.info("one")
        result.warning("two")
        assert result.events == [RenderEvent("info", "one"), RenderEvent("warning", "two")]
        assert result.warnings == [RenderEvent("warning", "two")]


# ---------------------------------------------------------------------------
# HtmlSiteRenderer
# ---------------------------------------------------------------------------


class TestHtmlSiteRenderer:
    def test_writes_index_and_file_pages(self, tmp_path):
        out = tmp_path / "site"
        result = HtmlSiteRenderer(out).render(_make_report())
        assert result.files == [file_page_name(1), file_page_name(2), INDEX_PAGE]
        index = (out / INDEX_PAGE).read_text()
        assert "src/A.java" in index
        assert 'href="files/0001.html"' in index

    def test_file_page_lists_entries_escaped(self, tmp_path):
        out = tmp_path / "site"
        HtmlSiteRenderer(out).render(_make_report())
        page = (out / file_page_name(2)).read_text()
        assert "&lt;old&gt; &amp; gone" in page
        assert "<old>" not in page
        assert "removed" in page

    def test_existing_output_is_purged(self, tmp_path):
        out = tmp_path / "site"
        out.mkdir()
        (out / "stale.html").write_text("old")
        HtmlSiteRenderer(out).render(_make_report())
        assert not (out / "stale.html").exists()

    def test_output_path_that_is_a_file_rejected(self, tmp_path):
        out = tmp_path / "site"
        out.write_text("not a dir")
        with pytest.raises(NotADirectoryError):
            HtmlSiteRenderer(out).render(_make_report())

    def test_configuration_page_written_when_present(self, tmp_path):
        out = tmp_path / "site"
        cd = diff_configs({"Checker/LineLength": {"max": "100"}}, {"Checker/LineLength": {"max": "120"}})
        result = HtmlSiteRenderer(out).render(_make_report(cd))
        assert CONFIG_PAGE in result.files
        page = (out / CONFIG_PAGE).read_text()
        assert "Checker/LineLength" in page
        assert "120" in page
        assert CONFIG_PAGE in (out / INDEX_PAGE).read_text()

    def test_no_configuration_page_without_config_diff(self, tmp_path):
        result = HtmlSiteRenderer(tmp_path / "site").render(_make_report())
        assert CONFIG_PAGE not in result.files

    def test_source_lines_shown_when_source_root_given(self, tmp_path):
        root = tmp_path / "project"
        (root / "src").mkdir(parents=True)
        (root / "src" / "A.java").write_text("// TODO fix\nclass A {\n    String veryLongLine;\n}\n")
        out = tmp_path / "site"
        result = HtmlSiteRenderer(out, source_root=root).render(_make_report())
        page = (out / file_page_name(1)).read_text()
        assert "// TODO fix" in page
        assert "String veryLongLine;" in page
        # src/Gone.java no longer exists in the patch tree.
        assert any("src/Gone.java" in e.message for e in result.warnings)

    def test_empty_report(self, tmp_path):
        out = tmp_path / "site"
        result = HtmlSiteRenderer(out).render(build_report({}, {}))
        assert result.files == [INDEX_PAGE]
        assert "No violations" in (out / INDEX_PAGE).read_text()

    def test_report_not_mutated(self, tmp_path):
        report = _make_report()
        before = report.to_dict()
        HtmlSiteRenderer(tmp_path / "site").render(report)
        assert report.to_dict() == before


# ---------------------------------------------------------------------------
# JsonRenderer
# ---------------------------------------------------------------------------


class TestJsonRenderer:
    def test_writes_report_json(self, tmp_path):
        out = tmp_path / "json"
        result = JsonRenderer(out).render(_make_report())
        assert result.files == ["report.json"]
        data = json.loads((out / "report.json").read_text())
        assert data["summary"] == {"files": 2, "added": 1, "removed": 1, "unchanged": 1}
        assert [f["file"] for f in data["files"]] == ["src/A.java", "src/Gone.java"]
        assert data["configuration"] is None

    def test_output_is_deterministic(self, tmp_path):
        JsonRenderer(tmp_path / "one").render(_make_report())
        JsonRenderer(tmp_path / "two").render(_make_report())
        assert (tmp_path / "one" / "report.json").read_bytes() == (tmp_path / "two" / "report.json").read_bytes()

    def test_includes_configuration(self, tmp_path):
        cd = diff_configs({"r": {"a": "1"}}, {})
        JsonRenderer(tmp_path / "out").render(_make_report(cd))
        data = json.loads((tmp_path / "out" / "report.json").read_text())
        assert data["configuration"]["counts"]["removed"] == 1
