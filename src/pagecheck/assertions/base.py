"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

UNKNOWN_LINE: Literal["unknown"] = "unknown"


def coerce_line(line: Any) -> int | Literal["unknown"]:
    """Coerce a line number to a positive int, or ``"unknown"``."""
    try:
        number = int(line)
    except (TypeError, ValueError):
        return UNKNOWN_LINE
    return number or UNKNOWN_LINE


@dataclass(frozen=True)
class AssertionResult:
    """Result of evaluating a single assertion.

    Attributes:
        success: Whether the condition held.
        type: Assertion kind (e.g. "assertEquals", "uncaughtError").
        standard: Built-in description of what the assertion checks, used
            when no custom message was supplied.
        message: Custom message given by the test author, if any.
        file: Test file the assertion was made from.
        line: Line number in that file, or "unknown".
        values: Subject/expected/auxiliary data printed on failure.
    """

    success: bool
    type: str | None = None
    standard: str | None = None
    message: str | None = None
    file: str | None = None
    line: int | Literal["unknown"] = UNKNOWN_LINE
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def description(self) -> str | None:
        return self.message or self.standard


@dataclass
class TestResults:
    """Pass/fail counters and the results behind them."""

    __test__ = False

    passed: int = 0
    failed: int = 0
    passes: list[AssertionResult] = field(default_factory=list)
    failures: list[AssertionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def clear(self) -> None:
        self.passed = 0
        self.failed = 0
        self.passes.clear()
        self.failures.clear()


@dataclass(frozen=True)
class CaseData:
    """Count and cases returned by ``get_passes()`` / ``get_failures()``."""

    length: int
    cases: list[AssertionResult]
