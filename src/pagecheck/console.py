"""Console styles and the tester's printing helpers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import typer

if TYPE_CHECKING:
    from pagecheck.automation.base import BaseAutomation

# Style name -> typer.style keyword arguments.
STYLES: dict[str, dict[str, Any]] = {
    "ERROR": {"fg": "white", "bg": "red", "bold": True},
    "INFO": {"fg": "green", "bold": True},
    "TRACE": {"fg": "green"},
    "PARAMETER": {"fg": "cyan"},
    "COMMENT": {"fg": "yellow"},
    "WARNING": {"fg": "red", "bold": True},
    "GREEN_BAR": {"fg": "white", "bg": "green"},
    "RED_BAR": {"fg": "white", "bg": "red", "bold": True},
    "INFO_BAR": {"fg": "cyan"},
    "WARN_BAR": {"fg": "white", "bg": "yellow"},
}

_CALL_PREFIX = re.compile(r"^([a-z0-9_.]+\(\))(.*)", re.IGNORECASE)


class Colorizer:
    """Wraps text in ANSI styles through ``typer.style``."""

    def colorize(self, text: Any, style: str | None = None) -> str:
        text = str(text)
        if not style or style not in STYLES:
            return text
        return typer.style(text, **STYLES[style])


class PlainColorizer(Colorizer):
    """Leaves text untouched; used when output is not a terminal."""

    def colorize(self, text: Any, style: str | None = None) -> str:
        return str(text)


def pad_text(text: str, pad: int | None) -> str:
    if pad and len(text) < pad:
        return text + " " * (pad - len(text))
    return text


class Console:
    """Printing helpers shared by the aggregator, scheduler and reporter."""

    def __init__(self, automation: BaseAutomation, pad: int = 80):
        self.automation = automation
        self.pad = pad

    def echo(self, text: str, style: str | None = None, pad: int | None = None) -> None:
        self.automation.echo(text, style, pad)

    def colorize(self, text: Any, style: str | None = None) -> str:
        return self.automation.colorize(text, style)

    def bar(self, text: str, style: str) -> None:
        """Print a full-width colored bar."""
        self.automation.echo(text, style, self.pad)

    def comment(self, text: str) -> None:
        self.automation.echo("# " + text, "COMMENT")

    def info(self, text: str) -> None:
        self.automation.echo(text, "PARAMETER")

    def error(self, text: str) -> None:
        self.automation.echo(text, "ERROR")

    def format_message(self, message: str | None, style: str | None = None) -> str:
        """Highlight a leading call expression such as ``foo.bar()``."""
        if message is None:
            return ""
        parts = _CALL_PREFIX.match(message)
        if not parts:
            return message
        return self.colorize(parts.group(1), "PARAMETER") + self.colorize(
            parts.group(2), style
        )
