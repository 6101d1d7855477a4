"""Exceptions raised by lintdiff.

Every failure aborts the diff run that raised it. There is no best-effort
mode: a ReportModel is either fully produced or not produced at all.
"""

from __future__ import annotations


class LintDiffError(Exception):
    """Base class for all lintdiff failures."""


class MalformedInputError(LintDiffError, ValueError):
    """A violation record or diff entry breaks a model invariant.

    Ingestion is expected to validate records before they reach the matcher,
    so seeing this means the input is garbage and the run must stop.
    """


class ReportParseError(LintDiffError):
    """A report or configuration file could not be read or parsed."""
