"""Tests for report aggregation across files."""

import json

import pytest

from lintdiff_core.aggregator import build_report
from lintdiff_core.config_differ import diff_configs
from lintdiff_core.errors import MalformedInputError
from lintdiff_core.models import DiffStatus, FileViolationSet, ViolationRecord


def v(path, line, rule="ruleX", column=1):
    return ViolationRecord(file_path=path, line=line, column=column, rule_id=rule, severity="warning", message="m")


def _inputs():
    base = {
        "b.java": [v("b.java", 10), v("b.java", 20, "ruleY")],
        "a.java": [v("a.java", 5)],
        "gone.java": [v("gone.java", 1), v("gone.java", 2)],
    }
    patch = {
        "b.java": [v("b.java", 12), v("b.java", 40, "ruleZ")],
        "a.java": [v("a.java", 5)],
        "new.java": [v("new.java", 7)],
    }
    return base, patch


class TestBuildReport:
    def test_covers_union_of_files_in_path_order(self):
        base, patch = _inputs()
        report = build_report(base, patch)
        assert list(report.files) == ["a.java", "b.java", "gone.java", "new.java"]

    def test_one_sided_files(self):
        base, patch = _inputs()
        report = build_report(base, patch)
        assert report.files["gone.java"].removed == 2
        assert report.files["gone.java"].added == 0
        assert report.files["new.java"].added == 1

    def test_files_without_violations_omitted(self):
        report = build_report({"empty.java": [], "x.java": [v("x.java", 1)]}, {"empty.java": []})
        assert list(report.files) == ["x.java"]

    def test_summary_is_sum_of_file_counts(self):
        base, patch = _inputs()
        report = build_report(base, patch)
        assert report.summary.added == sum(fd.added for fd in report)
        assert report.summary.removed == sum(fd.removed for fd in report)
        assert report.summary.unchanged == sum(fd.unchanged for fd in report)
        assert report.summary.files == len(report)

    def test_count_invariant_over_whole_report(self):
        base, patch = _inputs()
        report = build_report(base, patch)
        total_base = sum(len(r) for r in base.values())
        total_patch = sum(len(r) for r in patch.values())
        s = report.summary
        assert s.unchanged * 2 + s.added + s.removed == total_base + total_patch

    def test_accepts_file_violation_sets(self):
        base = {"a.java": FileViolationSet.of("a.java", [v("a.java", 3)])}
        report = build_report(base, {})
        assert report.files["a.java"].removed == 1

    def test_empty_runs(self):
        report = build_report({}, {})
        assert len(report) == 0
        assert report.summary.files == 0

    def test_config_diff_attached(self):
        cd = diff_configs({"r": {"a": "1"}}, {"r": {"a": "2"}})
        report = build_report({}, {}, config_diff=cd)
        assert report.config_diff is cd

    def test_files_mapping_is_read_only(self):
        base, patch = _inputs()
        report = build_report(base, patch)
        with pytest.raises(TypeError):
            report.files["other.java"] = report.files["a.java"]


class TestProperties:
    def test_deterministic_output(self):
        base, patch = _inputs()
        first = json.dumps(build_report(base, patch).to_dict())
        reordered_base = dict(reversed(list(base.items())))
        reordered_patch = {k: list(reversed(r)) for k, r in reversed(list(patch.items()))}
        second = json.dumps(build_report(reordered_base, reordered_patch).to_dict())
        assert first == second

    def test_parallel_matches_sequential(self):
        base, patch = _inputs()
        sequential = build_report(base, patch)
        parallel = build_report(base, patch, workers=4)
        assert sequential.to_dict() == parallel.to_dict()

    def test_symmetry_swaps_added_and_removed(self):
        base, patch = _inputs()
        forward = build_report(base, patch).summary
        backward = build_report(patch, base).summary
        assert forward.added == backward.removed
        assert forward.removed == backward.added
        assert forward.unchanged == backward.unchanged

    def test_no_entry_pairs_different_rules(self):
        base, patch = _inputs()
        for fd in build_report(base, patch):
            for entry in fd.entries:
                if entry.status is DiffStatus.UNCHANGED:
                    assert entry.base_record.rule_id == entry.patch_record.rule_id


class TestMalformedInput:
    def test_record_under_wrong_file_key_rejected(self):
        with pytest.raises(MalformedInputError):
            build_report({"a.java": [v("b.java", 1)]}, {})

    def test_rejected_even_when_workers_enabled(self):
        with pytest.raises(MalformedInputError):
            build_report({"a.java": [v("a.java", 1)], "c.java": [v("b.java", 1)]}, {}, workers=2)

    def test_rekeyed_set_is_validated(self):
        wrong = FileViolationSet.of("b.java", [v("b.java", 1)])
        with pytest.raises(MalformedInputError):
            build_report({"a.java": wrong}, {})
