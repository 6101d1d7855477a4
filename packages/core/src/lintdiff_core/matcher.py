"""Per-file violation matching.

Pairs the base and patch violations of one file and classifies each as
ADDED, REMOVED or UNCHANGED. A violation is only ever "the same violation"
as one with the same rule id, so matching runs independently per rule:

1. Exact pass: identical line and column pair first. This is the common
   case when nothing near the violation changed.
2. Nearest pass: what remains pairs greedily by smallest line distance,
   ties broken by smaller patch line, then smaller base line. Each violation
   is consumed at most once. Greedy, not an optimal bipartite matching.
3. Leftover base violations are REMOVED, leftover patch violations ADDED.
"""

from __future__ import annotations

import logging

from lintdiff_core.models import DiffEntry, DiffStatus, FileViolationSet, ViolationRecord

logger = logging.getLogger(__name__)


def _match_exact(
    base: list[ViolationRecord],
    patch: list[ViolationRecord],
) -> tuple[list[DiffEntry], list[ViolationRecord], list[ViolationRecord]]:
    by_position: dict[tuple[int, int], list[ViolationRecord]] = {}
    for record in patch:
        by_position.setdefault((record.line, record.column), []).append(record)

    matched: list[DiffEntry] = []
    base_left: list[ViolationRecord] = []
    for record in base:
        candidates = by_position.get((record.line, record.column))
        if candidates:
            matched.append(DiffEntry(DiffStatus.UNCHANGED, base_record=record, patch_record=candidates.pop(0)))
        else:
            base_left.append(record)

    patch_left = [r for candidates in by_position.values() for r in candidates]
    patch_left.sort(key=ViolationRecord.sort_key)
    return matched, base_left, patch_left


def _match_nearest(
    base: list[ViolationRecord],
    patch: list[ViolationRecord],
    max_distance: int | None,
) -> tuple[list[DiffEntry], list[ViolationRecord], list[ViolationRecord]]:
    candidates = []
    for bi, b in enumerate(base):
        for pi, p in enumerate(patch):
            distance = abs(b.line - p.line)
            if max_distance is not None and distance > max_distance:
                continue
            # Indices keep the order total when lines tie on both sides.
            candidates.append((distance, p.line, b.line, pi, bi))
    candidates.sort()

    used_base: set[int] = set()
    used_patch: set[int] = set()
    matched: list[DiffEntry] = []
    for distance, _, _, pi, bi in candidates:
        if bi in used_base or pi in used_patch:
            continue
        used_base.add(bi)
        used_patch.add(pi)
        logger.debug(
            "Paired %s line %d with line %d (distance %d)", base[bi].rule_id, base[bi].line, patch[pi].line, distance
        )
        matched.append(DiffEntry(DiffStatus.UNCHANGED, base_record=base[bi], patch_record=patch[pi]))

    base_left = [b for i, b in enumerate(base) if i not in used_base]
    patch_left = [p for i, p in enumerate(patch) if i not in used_patch]
    return matched, base_left, patch_left


def match_rule(
    base: list[ViolationRecord],
    patch: list[ViolationRecord],
    max_distance: int | None = None,
) -> list[DiffEntry]:
    """Match the violations of a single rule. Callers guarantee one rule id per call."""
    exact, base_left, patch_left = _match_exact(base, patch)
    nearest, base_left, patch_left = _match_nearest(base_left, patch_left, max_distance)
    entries = exact + nearest
    entries.extend(DiffEntry(DiffStatus.REMOVED, base_record=b) for b in base_left)
    entries.extend(DiffEntry(DiffStatus.ADDED, patch_record=p) for p in patch_left)
    return entries


def match_file(
    base: FileViolationSet | None,
    patch: FileViolationSet | None,
    max_distance: int | None = None,
) -> tuple[DiffEntry, ...]:
    """Return the classified entries for one file, ordered top to bottom.

    Either side may be None (file present in one run only), which yields an
    all-ADDED or all-REMOVED sequence.
    """
    base_groups = base.by_rule() if base is not None else {}
    patch_groups = patch.by_rule() if patch is not None else {}

    entries: list[DiffEntry] = []
    for rule_id in sorted(base_groups.keys() | patch_groups.keys()):
        entries.extend(match_rule(base_groups.get(rule_id, []), patch_groups.get(rule_id, []), max_distance))

    entries.sort(key=DiffEntry.sort_key)
    return tuple(entries)
