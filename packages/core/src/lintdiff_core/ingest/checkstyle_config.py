"""Checkstyle configuration ingestion.

Flattens the nested <module> tree of a checkstyle configuration into
rule id → attributes. A module's rule id is its slash-joined path from the
root (``Checker/TreeWalker/JavadocMethod``); when the module declares an
``id`` property, the id replaces the module name in the last segment.
Repeated siblings with the same key get ``#2``, ``#3``… suffixes so both
survive.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from lintdiff_core.errors import ReportParseError
from lintdiff_core.ingest.base import BaseConfigSource
from lintdiff_core.models import RunSide

logger = logging.getLogger(__name__)


def _module_attributes(module: ET.Element) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for child in module:
        if child.tag == "property" and child.get("name"):
            attrs[child.get("name")] = child.get("value", "")
        elif child.tag == "message" and child.get("key"):
            attrs[f"message.{child.get('key')}"] = child.get("value", "")
    return attrs


def _flatten(module: ET.Element, parent: str, rules: dict[str, dict[str, str]]) -> None:
    name = module.get("name")
    if not name:
        raise ReportParseError("<module> element without a name")
    attrs = _module_attributes(module)
    segment = attrs.get("id") or name
    rule_id = f"{parent}/{segment}" if parent else segment
    if rule_id in rules:
        n = 2
        while f"{rule_id}#{n}" in rules:
            n += 1
        rule_id = f"{rule_id}#{n}"
    rules[rule_id] = attrs
    for child in module:
        if child.tag == "module":
            _flatten(child, rule_id, rules)


def parse_config(path: str | Path) -> dict[str, dict[str, str]]:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ReportParseError(f"Unable to parse configuration {path}: {e}") from e
    except OSError as e:
        raise ReportParseError(f"Unable to read configuration {path}: {e}") from e
    if root.tag != "module":
        raise ReportParseError(f"{path}: expected a <module> root element, found <{root.tag}>")
    rules: dict[str, dict[str, str]] = {}
    _flatten(root, "", rules)
    logger.debug("Read %d module(s) from %s", len(rules), path)
    return rules


class CheckstyleConfigSource(BaseConfigSource):
    def __init__(self, base_path: str | Path, patch_path: str | Path):
        self.paths = {RunSide.BASE: Path(base_path), RunSide.PATCH: Path(patch_path)}

    def provide_config(self, side: RunSide) -> dict[str, dict[str, str]]:
        return parse_config(self.paths[side])
