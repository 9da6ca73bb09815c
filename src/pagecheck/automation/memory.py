"""In-process automation serving a fixed page snapshot."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pagecheck.automation.base import AutomationError, BaseAutomation
from pagecheck.console import Colorizer, PlainColorizer
from pagecheck.events import EventBus


@dataclass
class Page:
    """Snapshot of a loaded page."""

    url: str = "about:blank"
    title: str = ""
    http_status: int | None = None
    body_text: str = ""
    selectors: set[str] = field(default_factory=set)
    resources: list[str] = field(default_factory=list)


class InMemoryAutomation(BaseAutomation):
    """Automation backed by a ``Page`` snapshot instead of a browser.

    Everything echoed is also kept, uncolored, in ``output``.
    """

    def __init__(
        self,
        page: Page | None = None,
        events: EventBus | None = None,
        colorizer: Colorizer | None = None,
        quiet: bool = False,
    ):
        super().__init__(events=events, colorizer=colorizer or PlainColorizer())
        self.page = page
        self.quiet = quiet
        self.output: list[str] = []

    def _require_page(self) -> Page:
        if self.page is None:
            raise AutomationError("no page is loaded")
        return self.page

    def evaluate(self, fn: Callable[..., Any], params: dict[str, Any] | None = None) -> Any:
        return fn(self._require_page(), **(params or {}))

    def exists(self, selector: str) -> bool:
        return selector in self._require_page().selectors

    def resource_exists(self, test: Callable[[str], bool] | str) -> bool:
        resources = self._require_page().resources
        if callable(test):
            return any(test(url) for url in resources)
        return any(test in url for url in resources)

    def get_title(self) -> str:
        return self._require_page().title

    def get_current_url(self) -> str:
        return self._require_page().url

    def get_body_text(self) -> str:
        return self._require_page().body_text

    @property
    def current_http_status(self) -> int | None:
        return self._require_page().http_status

    def echo(self, text: str, style: str | None = None, pad: int | None = None) -> None:
        self.output.append(text)
        if not self.quiet:
            super().echo(text, style, pad)
