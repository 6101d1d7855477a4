"""Structural diff of two rule configurations.

Independent of violation matching: a run without configurations still
produces a full violation diff.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from lintdiff_core.models import ConfigDiff, ConfigStatus, RuleConfigDiff

RuleConfig = Mapping[str, Mapping[str, str]]


def changed_attributes(base: Mapping[str, str], patch: Mapping[str, str]) -> tuple[str, ...]:
    """Names of attributes whose values differ; an attribute missing on one side differs."""
    return tuple(sorted(name for name in base.keys() | patch.keys() if base.get(name) != patch.get(name)))


def diff_rule(rule_id: str, base: Mapping[str, str] | None, patch: Mapping[str, str] | None) -> RuleConfigDiff:
    base_attrs = MappingProxyType(dict(base)) if base is not None else None
    patch_attrs = MappingProxyType(dict(patch)) if patch is not None else None

    if base_attrs is None:
        return RuleConfigDiff(rule_id, ConfigStatus.ADDED, patch_attributes=patch_attrs)
    if patch_attrs is None:
        return RuleConfigDiff(rule_id, ConfigStatus.REMOVED, base_attributes=base_attrs)

    changed = changed_attributes(base_attrs, patch_attrs)
    status = ConfigStatus.CHANGED if changed else ConfigStatus.UNCHANGED
    return RuleConfigDiff(rule_id, status, base_attrs, patch_attrs, changed)


def diff_configs(base: RuleConfig, patch: RuleConfig) -> ConfigDiff:
    """Classify every rule in either configuration, in rule id order."""
    return ConfigDiff(
        entries=tuple(
            diff_rule(rule_id, base.get(rule_id), patch.get(rule_id)) for rule_id in sorted(base.keys() | patch.keys())
        )
    )
