"""End-of-run summary, failure details and report export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pagecheck.assertions.base import AssertionResult, coerce_line
from pagecheck.config import TesterConfig
from pagecheck.console import Console
from pagecheck.reporting.junit import JUnitExporter

if TYPE_CHECKING:
    from pagecheck.aggregator import ResultAggregator
    from pagecheck.automation.base import BaseAutomation

logger = logging.getLogger(__name__)


class Reporter:
    def __init__(
        self,
        console: Console,
        aggregator: ResultAggregator,
        exporter: JUnitExporter,
        automation: BaseAutomation,
        config: TesterConfig,
    ):
        self.console = console
        self.aggregator = aggregator
        self.exporter = exporter
        self.automation = automation
        self.config = config

    def exit_status(self, status: int | None = None) -> int:
        """Explicit *status* if given, else 1 when anything failed, else 0."""
        if status is not None:
            return int(status)
        return 1 if self.aggregator.test_results.failed > 0 else 0

    def render_results(
        self,
        exit: bool = False,
        status: int | None = None,
        save: str | Path | None = None,
    ) -> None:
        """Print the summary, save the XML report and optionally exit."""
        results = self.aggregator.test_results
        save = save if isinstance(save, (str, Path)) else self.config.save
        total = results.total
        if total == 0:
            style = "RED_BAR"
            text = f"{self.config.fail_text} Looks like you didn't run any test."
        else:
            if results.failed > 0:
                label, style = self.config.fail_text, "RED_BAR"
            else:
                label, style = self.config.pass_text, "GREEN_BAR"
            text = (
                f"{label} {total} tests executed, {results.passed} passed, "
                f"{results.failed} failed."
            )
        self.console.echo(text, style, self.config.pad)
        if results.failed > 0:
            self.render_failure_details(results.failures)
        if save:
            self.save(Path(save))
        if exit is True:
            self.automation.exit(self.exit_status(status))

    def render_failure_details(self, failures: list[AssertionResult]) -> None:
        if not failures:
            return
        count = len(failures)
        self.console.echo(
            f"\nDetails for the {count} failed test{'s' if count > 1 else ''}:\n",
            "PARAMETER",
        )
        for failure in failures:
            self.console.echo(f"In {failure.file}:{coerce_line(failure.line)}")
            message = failure.description or "(no message was entered)"
            self.console.echo(
                f"   {failure.type or 'unknown'}: {message}", "COMMENT"
            )

    def save(self, path: Path) -> None:
        try:
            path.write_text(self.exporter.get_xml(), encoding="utf-8")
        except OSError as e:
            logger.error("Unable to write results to %s: %s", path, e)
            self.console.echo(f"Unable to write results to {path}: {e}", "ERROR", 80)
            return
        self.console.echo(f"Result log stored in {path}", "INFO", 80)
