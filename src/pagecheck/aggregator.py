"""Records assertion results, prints them and forwards them to the exporter."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pagecheck.assertions.base import AssertionResult, CaseData, TestResults
from pagecheck.config import TesterConfig
from pagecheck.console import Console
from pagecheck.events import FAIL, SUCCESS, EventBus
from pagecheck.reporting.junit import JUnitExporter

logger = logging.getLogger(__name__)

UNSERIALIZABLE = "(unserializable value)"


def serialize(value: Any) -> str:
    return json.dumps(value, indent=2)


def describe_value(value: Any) -> str:
    """Serialize *value*, then its string form, then give up with a placeholder."""
    try:
        return serialize(value)
    except Exception:
        try:
            return serialize(str(value))
        except Exception:
            return UNSERIALIZABLE


def absolute(file: str | None) -> str:
    if not file:
        return "unknown"
    return str(Path(file).absolute())


class ResultAggregator:
    def __init__(
        self,
        console: Console,
        events: EventBus,
        exporter: JUnitExporter,
        config: TesterConfig,
    ):
        self.console = console
        self.events = events
        self.exporter = exporter
        self.config = config
        self.test_results = TestResults()
        events.on(SUCCESS, self.on_success)
        events.on(FAIL, self.on_fail)

    def process_assertion_result(self, result: AssertionResult) -> AssertionResult:
        """Count, print and broadcast *result*, then hand it back unchanged."""
        if result.success is True:
            event, style, status = SUCCESS, "INFO", self.config.pass_text
            self.test_results.passed += 1
        else:
            event, style, status = FAIL, "RED_BAR", self.config.fail_text
            self.test_results.failed += 1
        self.console.echo(
            " ".join(
                [
                    self.console.colorize(status, style),
                    self.console.format_message(result.description),
                ]
            )
        )
        self.events.emit(event, result)
        return result

    def on_success(self, result: AssertionResult) -> None:
        self.test_results.passes.append(result)
        self.exporter.add_success(absolute(result.file), result.description)

    def on_fail(self, result: AssertionResult) -> None:
        self.exporter.add_failure(
            absolute(result.file),
            result.description,
            result.standard or "test failed",
            result.type or "unknown",
        )
        self.test_results.failures.append(result)
        if result.type:
            self.console.comment("   type: " + result.type)
        for name, value in (result.values or {}).items():
            self.console.comment(f"   {name}: {describe_value(value)}")
        logger.debug("failure recorded: %s (%s)", result.description, result.type)

    def get_failures(self) -> CaseData:
        return CaseData(
            length=self.test_results.failed, cases=self.test_results.failures
        )

    def get_passes(self) -> CaseData:
        return CaseData(length=self.test_results.passed, cases=self.test_results.passes)

    def clear(self) -> None:
        self.test_results.clear()
