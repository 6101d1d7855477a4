"""Diff data models.

Everything here is constructed once during a single diff run and is
read-only afterwards. Renderers receive a ReportModel and walk it; they never
mutate it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from lintdiff_core.errors import MalformedInputError


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise MalformedInputError(f"Unknown severity: {value!r}") from None


class RunSide(str, Enum):
    """Which of the two runs a report or configuration belongs to."""

    BASE = "base"
    PATCH = "patch"


class DiffStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class ConfigStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


# Rendering order for entries sharing a position.
_STATUS_RANK = {DiffStatus.REMOVED: 0, DiffStatus.UNCHANGED: 1, DiffStatus.ADDED: 2}


@dataclass(frozen=True)
class ViolationRecord:
    """A single linter finding at a file/line/column.

    ``message`` is for display only; matching never looks at it.
    """

    file_path: str
    line: int
    column: int
    rule_id: str
    severity: Severity
    message: str = ""

    def __post_init__(self):
        if self.line < 0 or self.column < 0:
            raise MalformedInputError(
                f"Negative position {self.line}:{self.column} for {self.rule_id!r} in {self.file_path}"
            )
        if not self.rule_id:
            raise MalformedInputError(f"Empty rule id at {self.file_path}:{self.line}")
        object.__setattr__(self, "severity", Severity.parse(self.severity))

    def sort_key(self) -> tuple:
        return (self.line, self.column, self.rule_id, self.message, self.severity.value)

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "column": self.column,
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class FileViolationSet:
    """All violations reported for one file in one run, in line/column/rule order."""

    file_path: str
    violations: tuple[ViolationRecord, ...] = ()

    def __post_init__(self):
        for record in self.violations:
            if record.file_path != self.file_path:
                raise MalformedInputError(
                    f"Record for {record.file_path!r} filed under {self.file_path!r}"
                )
        object.__setattr__(self, "violations", tuple(sorted(self.violations, key=ViolationRecord.sort_key)))

    @classmethod
    def of(cls, file_path: str, records: Iterable[ViolationRecord]) -> FileViolationSet:
        return cls(file_path=file_path, violations=tuple(records))

    def __len__(self) -> int:
        return len(self.violations)

    def __iter__(self) -> Iterator[ViolationRecord]:
        return iter(self.violations)

    def by_rule(self) -> dict[str, list[ViolationRecord]]:
        """Group violations by rule id, keeping the set's order inside each group."""
        groups: dict[str, list[ViolationRecord]] = {}
        for record in self.violations:
            groups.setdefault(record.rule_id, []).append(record)
        return groups


@dataclass(frozen=True)
class DiffEntry:
    """One classified violation.

    ADDED carries only a patch record, REMOVED only a base record, and
    UNCHANGED carries both (always of the same rule).
    """

    status: DiffStatus
    base_record: ViolationRecord | None = None
    patch_record: ViolationRecord | None = None

    def __post_init__(self):
        has_base = self.base_record is not None
        has_patch = self.patch_record is not None
        expected = {
            DiffStatus.ADDED: (False, True),
            DiffStatus.REMOVED: (True, False),
            DiffStatus.UNCHANGED: (True, True),
        }[self.status]
        if (has_base, has_patch) != expected:
            raise MalformedInputError(f"{self.status.value} entry with base={has_base} patch={has_patch}")
        if has_base and has_patch and self.base_record.rule_id != self.patch_record.rule_id:
            raise MalformedInputError(
                f"Cannot pair {self.base_record.rule_id!r} with {self.patch_record.rule_id!r}"
            )

    @property
    def record(self) -> ViolationRecord:
        """The record to display: patch side when present, else base side."""
        return self.patch_record if self.patch_record is not None else self.base_record

    @property
    def line(self) -> int:
        return self.record.line

    def sort_key(self) -> tuple:
        base_line = self.base_record.line if self.base_record is not None else -1
        patch_line = self.patch_record.line if self.patch_record is not None else -1
        return (
            self.line,
            self.record.column,
            self.record.rule_id,
            _STATUS_RANK[self.status],
            base_line,
            patch_line,
            self.record.message,
        )

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "base": self.base_record.to_dict() if self.base_record is not None else None,
            "patch": self.patch_record.to_dict() if self.patch_record is not None else None,
        }


@dataclass(frozen=True)
class FileDiff:
    file_path: str
    entries: tuple[DiffEntry, ...] = ()
    added: int = field(init=False, default=0)
    removed: int = field(init=False, default=0)
    unchanged: int = field(init=False, default=0)

    def __post_init__(self):
        counts = {status: 0 for status in DiffStatus}
        for entry in self.entries:
            counts[entry.status] += 1
        object.__setattr__(self, "added", counts[DiffStatus.ADDED])
        object.__setattr__(self, "removed", counts[DiffStatus.REMOVED])
        object.__setattr__(self, "unchanged", counts[DiffStatus.UNCHANGED])

    @property
    def changed(self) -> int:
        return self.added + self.removed

    def to_dict(self) -> dict:
        return {
            "file": self.file_path,
            "added": self.added,
            "removed": self.removed,
            "unchanged": self.unchanged,
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class DiffSummary:
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    files: int = 0

    @classmethod
    def of(cls, file_diffs: Iterable[FileDiff]) -> DiffSummary:
        added = removed = unchanged = files = 0
        for fd in file_diffs:
            added += fd.added
            removed += fd.removed
            unchanged += fd.unchanged
            files += 1
        return cls(added=added, removed=removed, unchanged=unchanged, files=files)

    def to_dict(self) -> dict:
        return {"files": self.files, "added": self.added, "removed": self.removed, "unchanged": self.unchanged}


@dataclass(frozen=True)
class RuleConfigDiff:
    """How one rule's configuration differs between base and patch."""

    rule_id: str
    status: ConfigStatus
    base_attributes: Mapping[str, str] | None = None
    patch_attributes: Mapping[str, str] | None = None
    changed_attributes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "status": self.status.value,
            "base": dict(sorted(self.base_attributes.items())) if self.base_attributes is not None else None,
            "patch": dict(sorted(self.patch_attributes.items())) if self.patch_attributes is not None else None,
            "changed_attributes": list(self.changed_attributes),
        }


@dataclass(frozen=True)
class ConfigDiff:
    entries: tuple[RuleConfigDiff, ...] = ()

    def count(self, status: ConfigStatus) -> int:
        return sum(1 for e in self.entries if e.status is status)

    @property
    def has_changes(self) -> bool:
        return any(e.status is not ConfigStatus.UNCHANGED for e in self.entries)

    def to_dict(self) -> dict:
        return {
            "counts": {status.value: self.count(status) for status in ConfigStatus},
            "rules": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class ReportModel:
    """The finished diff: one FileDiff per file, in path order, plus totals."""

    files: Mapping[str, FileDiff]
    summary: DiffSummary
    config_diff: ConfigDiff | None = None

    def __post_init__(self):
        ordered = {path: self.files[path] for path in sorted(self.files)}
        object.__setattr__(self, "files", MappingProxyType(ordered))

    def __iter__(self) -> Iterator[FileDiff]:
        return iter(self.files.values())

    def __len__(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "files": [fd.to_dict() for fd in self.files.values()],
            "configuration": self.config_diff.to_dict() if self.config_diff is not None else None,
        }
