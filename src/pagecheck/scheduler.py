"""Discovers test files and runs them one at a time."""

from __future__ import annotations

import asyncio
import importlib.util
import inspect
import logging
import re
import traceback
from collections.abc import Iterable, Sequence
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

from pagecheck.console import Console
from pagecheck.errors import TesterError
from pagecheck.events import ERROR, TEST_DONE, TESTS_COMPLETE, EventBus

if TYPE_CHECKING:
    from pagecheck.automation.base import BaseAutomation
    from pagecheck.tester import Tester

logger = logging.getLogger(__name__)

TEST_FILE_SUFFIXES = (".py",)


def is_test_file(path: Path) -> bool:
    return path.suffix in TEST_FILE_SUFFIXES and path.name != "__init__.py"


def find_test_files(directory: Path) -> list[Path]:
    """Recursively list test files below *directory*, sorted by path."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    files: list[Path] = []
    for entry in directory.iterdir():
        entry = entry.absolute()
        if entry.is_dir():
            files.extend(find_test_files(entry))
        elif is_test_file(entry):
            files.append(entry)
    return sorted(files, key=str)


def load_module(path: Path) -> ModuleType:
    """Import a file as a fresh module, outside ``sys.modules``."""
    name = "pagecheck_suite_" + re.sub(r"\W", "_", str(path))
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise TesterError(f"Cannot load {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def line_from_frames(
    frames: Sequence[traceback.FrameSummary] | None, file: str | None
) -> int | None:
    """Innermost traceback line inside *file*, else the innermost line at all."""
    if not frames:
        return None
    for frame in reversed(frames):
        if frame.filename == file:
            return frame.lineno
    return frames[-1].lineno


class SuiteScheduler:
    """Runs queued test files strictly one after another.

    A file is running from dispatch until ``test.done`` is emitted, either by
    the file calling ``tester.done()`` or by the tester after it recorded an
    uncaught error. There is no timeout.
    """

    def __init__(
        self,
        tester: Tester,
        automation: BaseAutomation,
        console: Console,
        events: EventBus,
        includes: Iterable[str] = (),
    ):
        self.tester = tester
        self.automation = automation
        self.console = console
        self.events = events
        self.includes = list(includes)
        self.running = False
        self._done: asyncio.Future | None = None
        self._tasks: set[asyncio.Task] = set()
        events.on(TEST_DONE, self._on_done)

    async def run_suites(self, *paths: str | Path) -> None:
        """Discover, validate, then run every test file under *paths*."""
        if not paths:
            raise TesterError("run_suites() needs at least one path argument")
        self.load_includes()
        queue = self.discover(paths)
        if not self.validate(queue, paths):
            return
        await self.schedule(queue)

    def load_includes(self) -> None:
        for include in self.includes:
            logger.debug("loading include %s", include)
            module = load_module(Path(include))
            setup = getattr(module, "setup", None)
            if callable(setup):
                setup(self.tester)

    def discover(self, paths: Iterable[str | Path]) -> list[Path]:
        queue: list[Path] = []
        for raw in paths:
            path = Path(raw)
            if not path.exists():
                logger.warning("Skipping missing path %s", raw)
                self.console.bar(f"Path {raw} doesn't exist", "RED_BAR")
                continue
            if path.is_dir():
                queue.extend(find_test_files(path))
            elif path.is_file():
                queue.append(path.absolute())
        logger.debug("discovered %d test file(s)", len(queue))
        return queue

    def validate(self, queue: Sequence[Path], paths: Sequence[str | Path]) -> bool:
        """Abort the process when discovery found nothing to run."""
        if queue:
            return True
        joined = ", ".join(str(p) for p in paths)
        self.console.bar(f"No test file found in {joined}, aborting.", "RED_BAR")
        self.automation.exit(1)
        return False

    async def schedule(self, queue: Sequence[Path]) -> None:
        loop = asyncio.get_running_loop()
        previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._on_loop_exception)
        try:
            for path in queue:
                self._done = loop.create_future()
                self.run_test(path)
                await self._done
        finally:
            self._done = None
            loop.set_exception_handler(previous_handler)
        logger.debug("all test files done")
        self.events.emit(TESTS_COMPLETE)

    def run_test(self, path: Path) -> None:
        """Dispatch one file; errors are reported instead of raised."""
        self.console.bar(f"Test file: {path}", "INFO_BAR")
        self.running = True
        self.tester.current_file = str(path)
        logger.debug("dispatching %s", path)
        try:
            outcome = self.exec_file(path)
        except Exception as exc:
            self.report_error(exc)
            return
        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def exec_file(self, path: str | Path) -> Any:
        """Load a test file and call its ``run(tester)`` entry point."""
        path = Path(path)
        if not path.is_file() or not is_test_file(path):
            raise TesterError(
                f"Cannot exec {path}: can only exec() files with "
                f"{', '.join(TEST_FILE_SUFFIXES)} extensions"
            )
        self.tester.current_file = str(path)
        module = load_module(path)
        entry = getattr(module, "run", None)
        if not callable(entry):
            raise TesterError(f"{path} does not define a run(tester) entry point")
        return entry(self.tester)

    def report_error(self, exc: BaseException) -> None:
        logger.error("Uncaught error in %s: %s", self.tester.current_file, exc)
        self.events.emit(ERROR, exc, traceback.extract_tb(exc.__traceback__))

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.report_error(exc)

    def _on_loop_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        """Report errors raised in loop callbacks and orphan tasks of a test file."""
        exc = context.get("exception")
        if exc is None:
            loop.default_exception_handler(context)
            return
        self.report_error(exc)

    def _on_done(self) -> None:
        self.running = False
        if self._done is not None and not self._done.done():
            self._done.set_result(None)
