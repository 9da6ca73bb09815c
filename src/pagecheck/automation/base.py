from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import typer

from pagecheck.console import Colorizer, PlainColorizer, pad_text
from pagecheck.events import EventBus


class AutomationError(Exception):
    """A page primitive could not be served."""


class BaseAutomation(ABC):
    """Page introspection and console output consumed by the tester.

    Implementations report failures of their own asynchronous steps by
    emitting ``step.error`` on ``events``.
    """

    def __init__(
        self, events: EventBus | None = None, colorizer: Colorizer | None = None
    ):
        self.events = events or EventBus()
        if colorizer is None:
            colorizer = Colorizer() if sys.stdout.isatty() else PlainColorizer()
        self.colorizer = colorizer

    @abstractmethod
    def evaluate(self, fn: Callable[..., Any], params: dict[str, Any] | None = None) -> Any:
        """Run *fn* in the page context and return its result."""
        ...

    @abstractmethod
    def exists(self, selector: str) -> bool:
        """Whether an element matches *selector*."""
        ...

    @abstractmethod
    def resource_exists(self, test: Callable[[str], bool] | str) -> bool:
        """Whether a loaded resource matches a predicate or a URL substring."""
        ...

    @abstractmethod
    def get_title(self) -> str: ...

    @abstractmethod
    def get_current_url(self) -> str: ...

    @abstractmethod
    def get_body_text(self) -> str:
        """Text content of the document body."""
        ...

    @property
    @abstractmethod
    def current_http_status(self) -> int | None: ...

    def colorize(self, text: Any, style: str | None = None) -> str:
        return self.colorizer.colorize(text, style)

    def echo(self, text: str, style: str | None = None, pad: int | None = None) -> None:
        if style:
            text = self.colorize(pad_text(text, pad), style)
        typer.echo(text)

    def exit(self, code: int = 0) -> None:
        sys.exit(code)
