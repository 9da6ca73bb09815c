"""Assertion engine and serial test-suite runner for page automation tests."""

from pagecheck.assertions.base import AssertionResult, CaseData, TestResults
from pagecheck.config import TesterConfig, load_config
from pagecheck.equality import equals, type_of
from pagecheck.errors import TesterError
from pagecheck.tester import Tester

__all__ = [
    "AssertionResult",
    "CaseData",
    "TestResults",
    "Tester",
    "TesterConfig",
    "TesterError",
    "equals",
    "load_config",
    "type_of",
]
