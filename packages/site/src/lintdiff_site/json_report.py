"""JsonRenderer: the whole report as one machine-readable file.

Data format: ``report.json`` holding ReportModel.to_dict(): a summary
object, a ``files`` array in path order with every entry's base and patch
record, and the configuration diff (or null).
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from lintdiff_site.base import BaseRenderer
from lintdiff_site.models import RenderResult

if TYPE_CHECKING:
    from lintdiff_core.models import ReportModel

logger = logging.getLogger(__name__)

_JSON_FILENAME = "report.json"


class JsonRenderer(BaseRenderer):
    def render(self, report: ReportModel) -> RenderResult:
        self._prepare_output_dir()
        result = RenderResult(output_path=self.output_dir)
        (self.output_dir / _JSON_FILENAME).write_text(
            json.dumps(report.to_dict(), indent=2) + "\n", encoding="utf-8"
        )
        result.files.append(_JSON_FILENAME)
        result.info(f"Wrote {len(report)} file diff(s) to {_JSON_FILENAME}.")
        logger.debug("JSON report written to %s", self.output_dir / _JSON_FILENAME)
        return result
