"""Synchronous event bus shared by the tester, its scheduler and the automation layer."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Events emitted by the tester.
SUCCESS = "success"
FAIL = "fail"
TEST_DONE = "test.done"
TESTS_COMPLETE = "tests.complete"

# Events emitted by the automation layer or the scheduler's harness.
ERROR = "error"
STEP_ERROR = "step.error"

Handler = Callable[..., Any]


class EventBus:
    """Calls registered handlers in subscription order.

    Handlers run synchronously inside ``emit``; an exception raised by a
    handler propagates to the emitter.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> None:
        """Register *handler* for *event*."""
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        try:
            self._handlers[event].remove(handler)
        except ValueError:
            pass

    def listeners(self, event: str) -> list[Handler]:
        return list(self._handlers.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """Call every handler of *event*; return whether any was registered."""
        handlers = self.listeners(event)
        logger.debug("emit %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            handler(*args)
        return bool(handlers)
