"""Abstract renderer interface.

Every output format (HTML site, JSON) implements this interface. The CLI
depends on BaseRenderer, not on a concrete format, so formats are swappable
without touching CLI code.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lintdiff_core.models import ReportModel
    from lintdiff_site.models import RenderResult


class BaseRenderer(ABC):
    """Turns a finished ReportModel into output files.

    Implementations must treat the report as read-only.
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)

    @abstractmethod
    def render(self, report: ReportModel) -> RenderResult:
        """Write the report and return what was produced."""

    def _prepare_output_dir(self) -> None:
        """Create the output directory, purging anything already in it."""
        if self.output_dir.exists():
            if not self.output_dir.is_dir():
                raise NotADirectoryError(f"Output path is not a directory: {self.output_dir}")
            shutil.rmtree(self.output_dir)
        self.output_dir.mkdir(parents=True)
