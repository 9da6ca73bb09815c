"""Assertion system for page automation tests."""

from pagecheck.assertions.base import AssertionResult, CaseData, TestResults
from pagecheck.assertions.engine import AssertionEngine

__all__ = ["AssertionEngine", "AssertionResult", "CaseData", "TestResults"]
