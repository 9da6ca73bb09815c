from __future__ import annotations

import os
from pathlib import Path

from junitparser import Failure, JUnitXml, TestCase, TestSuite


def class_name(file: str, base_dir: Path | None = None) -> str:
    """Dotted class name for a test file: relative to *base_dir*, no extension."""
    path = Path(file)
    base = base_dir or Path.cwd()
    try:
        path = path.relative_to(base)
    except ValueError:
        pass
    return ".".join(part for part in path.with_suffix("").parts if part != os.sep)


class JUnitExporter:
    """Accumulates assertion outcomes as JUnit XML, one testsuite per test file."""

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir
        self._xml = JUnitXml()
        self._suites: dict[str, TestSuite] = {}

    def _suite(self, file: str) -> TestSuite:
        suite = self._suites.get(file)
        if suite is None:
            suite = TestSuite(file)
            self._suites[file] = suite
            self._xml.add_testsuite(suite)
        return suite

    def _case(self, file: str, name: str) -> TestCase:
        case = TestCase(name)
        case.classname = class_name(file, self.base_dir)
        return case

    def add_success(self, file: str, message: str | None) -> None:
        self._suite(file).add_testcase(self._case(file, message or ""))

    def add_failure(
        self, file: str, message: str | None, standard: str, type_: str
    ) -> None:
        case = self._case(file, message or "")
        failure = Failure(standard, type_)
        failure.text = standard
        case.result = [failure]
        self._suite(file).add_testcase(case)

    def to_xml(self) -> JUnitXml:
        self._xml.update_statistics()
        return self._xml

    def get_xml(self) -> str:
        """Serialized report."""
        return self.to_xml().tostring().decode("utf-8")
