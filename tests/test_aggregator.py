"""Tests for result aggregation, console lines and exporter forwarding."""

from pathlib import Path

import pytest

from pagecheck.aggregator import UNSERIALIZABLE, describe_value
from pagecheck.assertions.base import AssertionResult
from pagecheck.automation import InMemoryAutomation
from pagecheck.config import TesterConfig
from pagecheck.console import Colorizer, Console
from pagecheck.reporting.junit import JUnitExporter
from pagecheck.tester import Tester


class _StrOnly:
    def __str__(self) -> str:
        return "custom repr"


class _Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("cannot stringify")


@pytest.fixture
def exporter(mocker):
    return mocker.Mock(spec=JUnitExporter)


@pytest.fixture
def mocked_tester(automation, exporter):
    return Tester(automation, exporter=exporter)


# --- describe_value fallback tiers ---


def test_describe_value_serializes_plain_values():
    assert describe_value({"a": 1}) == '{\n  "a": 1\n}'


def test_describe_value_falls_back_to_string_conversion():
    assert describe_value(_StrOnly()) == '"custom repr"'


def test_describe_value_falls_back_to_placeholder():
    assert describe_value(_Unprintable()) == UNSERIALIZABLE


# --- process_assertion_result ---


def test_pass_line_uses_message(tester, automation):
    result = AssertionResult(success=True, standard="std", message="custom")
    returned = tester.process_assertion_result(result)
    assert returned is result
    assert automation.output[-1] == "PASS custom"
    assert tester.test_results.passed == 1


def test_fail_line_falls_back_to_standard(tester, automation):
    tester.process_assertion_result(AssertionResult(success=False, standard="std"))
    assert "FAIL std" in automation.output
    assert tester.test_results.failed == 1


def test_custom_labels(automation):
    tester = Tester(automation, config=TesterConfig(pass_text="OK", fail_text="KO"))
    tester.pass_("yes")
    tester.fail("no")
    assert "OK yes" in automation.output
    assert "KO no" in automation.output


def test_fail_prints_type_and_values(tester, automation):
    tester.assert_equals(1, 2)
    assert automation.output == [
        "FAIL Subject equals the expected value",
        "#    type: assertEquals",
        "#    subject: 1",
        "#    expected: 2",
    ]


def test_fail_values_use_every_fallback_tier(tester, automation):
    tester.process_assertion_result(
        AssertionResult(
            success=False,
            message="doubles",
            values={"plain": [1], "str_only": _StrOnly(), "broken": _Unprintable()},
        )
    )
    assert "#    plain: [\n  1\n]" in automation.output
    assert '#    str_only: "custom repr"' in automation.output
    assert f"#    broken: {UNSERIALIZABLE}" in automation.output


def test_fail_without_type_or_values_prints_no_comments(tester, automation):
    tester.process_assertion_result(AssertionResult(success=False, message="bare"))
    assert automation.output == ["FAIL bare"]


# --- events ---


def test_success_and_fail_events_carry_the_result(tester, mocker):
    on_success = mocker.Mock()
    on_fail = mocker.Mock()
    tester.on("success", on_success)
    tester.on("fail", on_fail)

    passed = tester.pass_()
    failed = tester.fail()

    on_success.assert_called_once_with(passed)
    on_fail.assert_called_once_with(failed)


# --- exporter forwarding ---


def test_success_forwarded_with_absolute_path(mocked_tester, exporter):
    mocked_tester.process_assertion_result(
        AssertionResult(success=True, standard="std", file="suites/a.py")
    )
    exporter.add_success.assert_called_once_with(
        str(Path("suites/a.py").absolute()), "std"
    )


def test_failure_forwarded_with_fallbacks(mocked_tester, exporter):
    mocked_tester.process_assertion_result(
        AssertionResult(success=False, file="suites/a.py")
    )
    exporter.add_failure.assert_called_once_with(
        str(Path("suites/a.py").absolute()), None, "test failed", "unknown"
    )


def test_failure_forwarded_with_all_fields(mocked_tester, exporter):
    mocked_tester.process_assertion_result(
        AssertionResult(
            success=False,
            type="assertTitle",
            standard="Page title is x",
            message="title check",
            file="/abs/b.py",
        )
    )
    exporter.add_failure.assert_called_once_with(
        "/abs/b.py", "title check", "Page title is x", "assertTitle"
    )


# --- accessors ---


def test_get_failures_and_passes(tester):
    tester.pass_()
    tester.pass_()
    failed = tester.fail()
    failures = tester.get_failures()
    passes = tester.get_passes()
    assert failures.length == 1
    assert failures.cases == [failed]
    assert passes.length == 2


def test_clear_resets_results(tester):
    tester.pass_()
    tester.fail()
    tester.aggregator.clear()
    assert tester.test_results.total == 0
    assert tester.get_failures().cases == []


# --- format_message ---


def test_format_message_highlights_leading_call():
    console = Console(InMemoryAutomation(colorizer=Colorizer(), quiet=True))
    formatted = console.format_message("page.click() did nothing")
    assert formatted.startswith("\x1b[")
    assert "page.click()" in formatted
    assert formatted.endswith(" did nothing")


def test_format_message_leaves_plain_text_alone(tester):
    assert tester.format_message("nothing to highlight") == "nothing to highlight"


# --- console helpers ---


def test_console_helpers_write_through_automation(tester, automation):
    tester.bar("Suite", "INFO_BAR")
    tester.info("navigating")
    tester.comment("note")
    tester.error("broken")

    assert automation.output == ["Suite", "navigating", "# note", "broken"]


def test_plain_colorizer_leaves_text_untouched(tester):
    assert tester.colorize(42, "RED_BAR") == "42"


def test_colorizer_ignores_unknown_styles():
    assert Colorizer().colorize("x", "NOPE") == "x"
    assert Colorizer().colorize("x", "INFO") != "x"
