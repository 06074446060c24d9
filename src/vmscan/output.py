"""Line-oriented output sinks used by the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import click

# Emphasis name → click.style keyword arguments.
EMPHASIS_STYLES: dict[str, dict[str, Any]] = {
    "header": {"fg": "cyan", "bold": True},
    "rule": {"fg": "bright_black"},
    "root": {"fg": "green", "bold": True},
    "clone": {"fg": "blue"},
    "stripe": {"dim": True},
    "warning": {"fg": "yellow"},
    "error": {"fg": "red", "bold": True},
}


class LineSink(Protocol):
    """Anything that accepts rendered lines with an optional emphasis hint."""

    def emit(self, text: str, emphasis: str | None = None) -> None: ...


@dataclass(frozen=True)
class OutputConfig:
    """Terminal output options, fixed when the sink is created."""

    color: bool = True
    err: bool = False


class ClickSink:
    """Writes lines to the terminal through click."""

    def __init__(self, config: OutputConfig | None = None) -> None:
        self.config = config or OutputConfig()

    def emit(self, text: str, emphasis: str | None = None) -> None:
        if self.config.color and emphasis and text:
            text = click.style(text, **EMPHASIS_STYLES.get(emphasis, {}))
        click.echo(text, err=self.config.err)


@dataclass
class MemorySink:
    """Collects ``(text, emphasis)`` pairs in memory."""

    lines: list[tuple[str, str | None]] = field(default_factory=list)

    def emit(self, text: str, emphasis: str | None = None) -> None:
        self.lines.append((text, emphasis))

    @property
    def text(self) -> list[str]:
        return [line for line, _ in self.lines]
