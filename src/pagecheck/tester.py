"""The handle passed to test files."""

from __future__ import annotations

import traceback
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pagecheck.aggregator import ResultAggregator
from pagecheck.assertions.base import AssertionResult, CaseData, TestResults
from pagecheck.assertions.engine import AssertionEngine
from pagecheck.automation.base import BaseAutomation
from pagecheck.config import TesterConfig
from pagecheck.console import Console
from pagecheck.events import ERROR, STEP_ERROR, TEST_DONE, EventBus, Handler
from pagecheck.reporting.junit import JUnitExporter
from pagecheck.reporting.summary import Reporter
from pagecheck.scheduler import SuiteScheduler, find_test_files, line_from_frames


class Tester(AssertionEngine):
    """Makes assertions, stores their results and runs test suites.

    Test files receive this object in their ``run(tester)`` entry point and
    must call ``tester.done()`` once they are finished.

    Example::

        def run(tester):
            tester.assert_title("Home")
            tester.assert_exists("#login")
            tester.done()
    """

    __test__ = False

    def __init__(
        self,
        automation: BaseAutomation,
        config: TesterConfig | None = None,
        events: EventBus | None = None,
        exporter: JUnitExporter | None = None,
    ):
        self.config = config or TesterConfig()
        self.events = events or automation.events
        self.exporter = exporter or JUnitExporter()
        console = Console(automation, pad=self.config.pad)
        self.aggregator = ResultAggregator(
            console, self.events, self.exporter, self.config
        )
        super().__init__(self.aggregator, automation, console)
        self.scheduler = SuiteScheduler(
            self, automation, console, self.events, includes=self.config.includes
        )
        self.reporter = Reporter(
            console, self.aggregator, self.exporter, automation, self.config
        )
        self.events.on(ERROR, self._on_error)
        self.events.on(STEP_ERROR, self._on_step_error)

    # results

    @property
    def test_results(self) -> TestResults:
        return self.aggregator.test_results

    def process_assertion_result(self, result: AssertionResult) -> AssertionResult:
        return self.aggregator.process_assertion_result(result)

    def get_failures(self) -> CaseData:
        return self.aggregator.get_failures()

    def get_passes(self) -> CaseData:
        return self.aggregator.get_passes()

    def render_results(
        self,
        exit: bool = False,
        status: int | None = None,
        save: str | Path | None = None,
    ) -> None:
        self.reporter.render_results(exit=exit, status=status, save=save)

    # suites

    @property
    def running(self) -> bool:
        return self.scheduler.running

    async def run_suites(self, *paths: str | Path) -> None:
        await self.scheduler.run_suites(*paths)

    def exec_file(self, path: str | Path) -> Any:
        return self.scheduler.exec_file(path)

    def find_test_files(self, directory: str | Path) -> list[Path]:
        return find_test_files(Path(directory))

    def done(self) -> None:
        """Declare the current test file finished."""
        self.events.emit(TEST_DONE)

    def on(self, event: str, handler: Handler) -> None:
        self.events.on(event, handler)

    def _on_error(
        self,
        error: BaseException | str,
        frames: Sequence[traceback.FrameSummary] | None = None,
    ) -> None:
        if isinstance(error, SyntaxError) and error.filename == self.current_file:
            line = error.lineno
        else:
            line = line_from_frames(frames, self.current_file)
        self.uncaught_error(error, self.current_file, line)
        self.done()

    def _on_step_error(self, error: BaseException | str) -> None:
        self.uncaught_error(error, self.current_file)
        self.done()

    # console

    def bar(self, text: str, style: str) -> None:
        self.console.bar(text, style)

    def colorize(self, text: Any, style: str | None = None) -> str:
        return self.console.colorize(text, style)

    def comment(self, text: str) -> None:
        self.console.comment(text)

    def error(self, text: str) -> None:
        self.console.error(text)

    def info(self, text: str) -> None:
        self.console.info(text)

    def format_message(self, message: str | None, style: str | None = None) -> str:
        return self.console.format_message(message, style)

    # aliases

    assert_true = AssertionEngine.assert_
    assert_equal = AssertionEngine.assert_equals
    assert_evaluate = AssertionEngine.assert_eval
    assert_eval_equal = AssertionEngine.assert_eval_equals
    assert_exist = AssertionEngine.assert_exists
    assert_selector_exists = AssertionEngine.assert_exists
    assert_selector_exist = AssertionEngine.assert_exists
    assert_not_exists = AssertionEngine.assert_doesnt_exist
    assert_matches = AssertionEngine.assert_match
    assert_raise = AssertionEngine.assert_raises
    assert_throws = AssertionEngine.assert_raises
    assert_resource_exist = AssertionEngine.assert_resource_exists
    assert_text_exist = AssertionEngine.assert_text_exists
    assert_title_matches = AssertionEngine.assert_title_match
    assert_url_matches = AssertionEngine.assert_url_match
