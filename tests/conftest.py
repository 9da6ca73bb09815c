"""Pytest configuration and fixtures."""

import logging
import textwrap
from pathlib import Path

import pytest

from pagecheck.automation import InMemoryAutomation, Page
from pagecheck.tester import Tester


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Reset the pagecheck logger after each test so handlers do not leak."""
    yield

    logger = logging.getLogger("pagecheck")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def page() -> Page:
    return Page(
        url="https://example.com/login?next=/home",
        title="Sign in - Example",
        http_status=200,
        body_text="Welcome back. Please sign in to continue.",
        selectors={"#login", "form input[name=user]"},
        resources=[
            "https://example.com/static/app.js",
            "https://example.com/static/site.css",
        ],
    )


@pytest.fixture
def automation(page) -> InMemoryAutomation:
    return InMemoryAutomation(page=page, quiet=True)


@pytest.fixture
def tester(automation) -> Tester:
    return Tester(automation)


@pytest.fixture
def write_suite(tmp_path):
    """Write a test file following the run(tester) contract and return its path."""

    def _write(relpath: str, body: str) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(body))
        return path

    return _write
