"""Assertion primitives: every check builds a result through ``assert_``."""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from pagecheck.assertions.base import (
    UNKNOWN_LINE,
    AssertionResult,
    coerce_line,
)
from pagecheck.equality import equals, type_of

if TYPE_CHECKING:
    from pagecheck.aggregator import ResultAggregator
    from pagecheck.automation.base import BaseAutomation
    from pagecheck.console import Console

Pattern = str | re.Pattern


def _compile(pattern: Pattern) -> re.Pattern:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


class AssertionEngine:
    """Builds assertion results and feeds them to the aggregator.

    ``current_file`` is set by the scheduler to the test file being run; the
    file and the calling line within it are recorded on every result.
    """

    def __init__(
        self,
        aggregator: ResultAggregator,
        automation: BaseAutomation,
        console: Console,
    ):
        self.aggregator = aggregator
        self.automation = automation
        self.console = console
        self.current_file: str | None = None

    def _caller_line(self) -> int | str:
        if not self.current_file:
            return UNKNOWN_LINE
        frame = inspect.currentframe()
        try:
            while frame is not None:
                if frame.f_code.co_filename == self.current_file:
                    return frame.f_lineno
                frame = frame.f_back
        finally:
            del frame
        return UNKNOWN_LINE

    def assert_(
        self,
        subject: Any,
        message: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> AssertionResult:
        """Assert that *subject* is strictly ``True``.

        Base of all the other assertions, which describe themselves through
        *context* (``type``, ``standard`` and ``values``).
        """
        context = dict(context or {})
        values = context.pop("values", None) or {}
        fields: dict[str, Any] = {
            "success": subject is True,
            "type": "assert",
            "standard": "Subject is strictly true",
            "message": message,
            "file": self.current_file,
            "line": self._caller_line(),
        }
        fields.update(context)
        fields["values"] = {"subject": subject, **values}
        return self.aggregator.process_assertion_result(AssertionResult(**fields))

    def assert_equals(
        self, subject: Any, expected: Any, message: str | None = None
    ) -> AssertionResult:
        return self.assert_(
            equals(subject, expected),
            message,
            {
                "type": "assertEquals",
                "standard": "Subject equals the expected value",
                "values": {"subject": subject, "expected": expected},
            },
        )

    def assert_not_equals(
        self, subject: Any, shouldnt: Any, message: str | None = None
    ) -> AssertionResult:
        return self.assert_(
            not equals(subject, shouldnt),
            message,
            {
                "type": "assertNotEquals",
                "standard": "Subject doesn't equal what it shouldn't be",
                "values": {"subject": subject, "shouldnt": shouldnt},
            },
        )

    def assert_eval(
        self,
        fn: Callable[..., Any],
        message: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> AssertionResult:
        """Assert that *fn* evaluated in the page returns ``True``."""
        return self.assert_(
            self.automation.evaluate(fn, params),
            message,
            {
                "type": "assertEval",
                "standard": "Evaluated function returns true",
                "values": {"fn": fn, "params": params},
            },
        )

    def assert_eval_equals(
        self,
        fn: Callable[..., Any],
        expected: Any,
        message: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> AssertionResult:
        subject = self.automation.evaluate(fn, params)
        return self.assert_(
            equals(subject, expected),
            message,
            {
                "type": "assertEvalEquals",
                "standard": "Evaluated function returns the expected value",
                "values": {
                    "fn": fn,
                    "params": params,
                    "subject": subject,
                    "expected": expected,
                },
            },
        )

    def assert_exists(self, selector: str, message: str | None = None) -> AssertionResult:
        return self.assert_(
            self.automation.exists(selector),
            message,
            {
                "type": "assertExists",
                "standard": "Found an element matching "
                + self.console.colorize(selector, "COMMENT"),
                "values": {"selector": selector},
            },
        )

    def assert_doesnt_exist(
        self, selector: str, message: str | None = None
    ) -> AssertionResult:
        return self.assert_(
            not self.automation.exists(selector),
            message,
            {
                "type": "assertDoesntExist",
                "standard": "No element matching selector "
                + self.console.colorize(selector, "COMMENT")
                + " is found",
                "values": {"selector": selector},
            },
        )

    def assert_http_status(self, status: int, message: str | None = None) -> AssertionResult:
        current = self.automation.current_http_status
        return self.assert_(
            equals(current, status),
            message,
            {
                "type": "assertHttpStatus",
                "standard": "HTTP status code is "
                + self.console.colorize(status, "COMMENT"),
                "values": {"current": current, "expected": status},
            },
        )

    def assert_match(
        self, subject: str, pattern: Pattern, message: str | None = None
    ) -> AssertionResult:
        regex = _compile(pattern)
        return self.assert_(
            regex.search(subject) is not None,
            message,
            {
                "type": "assertMatch",
                "standard": "Subject matches the provided pattern",
                "values": {"subject": subject, "pattern": regex.pattern},
            },
        )

    def assert_not(self, condition: Any, message: str | None = None) -> AssertionResult:
        return self.assert_(
            not condition,
            message,
            {
                "type": "assertNot",
                "standard": "Subject is falsy",
                "values": {"condition": condition},
            },
        )

    def assert_raises(
        self,
        fn: Callable[..., Any],
        args: Sequence[Any] = (),
        message: str | None = None,
    ) -> AssertionResult:
        """Assert that calling ``fn(*args)`` raises.

        The exception is the success signal here: it is caught and attached
        to the result as ``values["error"]``. A normal return is a failure.
        """
        context: dict[str, Any] = {
            "type": "assertRaises",
            "standard": "Function raises an error",
        }
        try:
            fn(*args)
        except Exception as error:
            return self.assert_(True, message, {**context, "values": {"error": error}})
        return self.assert_(False, message, context)

    def assert_resource_exists(
        self, test: Callable[[str], bool] | str, message: str | None = None
    ) -> AssertionResult:
        return self.assert_(
            self.automation.resource_exists(test),
            message,
            {
                "type": "assertResourceExists",
                "standard": "Expected resource has been found",
                "values": {"test": test},
            },
        )

    def assert_text_exists(self, text: str, message: str | None = None) -> AssertionResult:
        return self.assert_(
            text in self.automation.get_body_text(),
            message,
            {
                "type": "assertTextExists",
                "standard": "Found expected text within the document body",
                "values": {"text": text},
            },
        )

    def assert_title(self, expected: str, message: str | None = None) -> AssertionResult:
        title = self.automation.get_title()
        return self.assert_(
            equals(title, expected),
            message,
            {
                "type": "assertTitle",
                "standard": 'Page title is "%s"'
                % self.console.colorize(expected, "COMMENT"),
                "values": {"subject": title, "expected": expected},
            },
        )

    def assert_title_match(
        self, pattern: Pattern, message: str | None = None
    ) -> AssertionResult:
        regex = _compile(pattern)
        title = self.automation.get_title()
        return self.assert_(
            regex.search(title) is not None,
            message,
            {
                "type": "assertTitleMatch",
                "standard": "Page title matches the provided pattern",
                "values": {"subject": title, "pattern": regex.pattern},
            },
        )

    def assert_type(
        self, subject: Any, type_name: str, message: str | None = None
    ) -> AssertionResult:
        actual = type_of(subject)
        return self.assert_(
            equals(actual, type_name),
            message,
            {
                "type": "assertType",
                "standard": 'Subject type is "%s"'
                % self.console.colorize(type_name, "COMMENT"),
                "values": {"subject": subject, "type": type_name, "actual": actual},
            },
        )

    def assert_url_match(self, pattern: Pattern, message: str | None = None) -> AssertionResult:
        regex = _compile(pattern)
        url = self.automation.get_current_url()
        return self.assert_(
            regex.search(url) is not None,
            message,
            {
                "type": "assertUrlMatch",
                "standard": "Current url matches the provided pattern",
                "values": {"currentUrl": url, "pattern": regex.pattern},
            },
        )

    def pass_(self, message: str | None = None) -> AssertionResult:
        return self.assert_(
            True, message, {"type": "pass", "standard": "explicit call to pass()"}
        )

    def fail(self, message: str | None = None) -> AssertionResult:
        return self.assert_(
            False, message, {"type": "fail", "standard": "explicit call to fail()"}
        )

    def uncaught_error(
        self, error: BaseException | str, file: str | None, line: Any = None
    ) -> AssertionResult:
        """Record an error that escaped a test file as a failed assertion."""
        if isinstance(error, BaseException):
            message = str(error) or type(error).__name__
        else:
            message = error
        return self.aggregator.process_assertion_result(
            AssertionResult(
                success=False,
                type="uncaughtError",
                file=file,
                line=coerce_line(line),
                message=message,
                values={"error": error},
            )
        )
