"""Render result models.

Renderers report what they wrote and anything worth telling the user by
returning these, rather than logging into shared state. The CLI decides how
to print the events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RenderEvent:
    """A single message produced while rendering."""

    level: str  # "info" | "warning"
    message: str


@dataclass
class RenderResult:
    """What a renderer produced.

    ``files`` holds paths relative to ``output_path``, in write order.
    """

    output_path: Path
    files: list[str] = field(default_factory=list)
    events: list[RenderEvent] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.events.append(RenderEvent("info", message))

    def warning(self, message: str) -> None:
        self.events.append(RenderEvent("warning", message))

    @property
    def warnings(self) -> list[RenderEvent]:
        return [e for e in self.events if e.level == "warning"]
