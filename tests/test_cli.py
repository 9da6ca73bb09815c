import textwrap
from pathlib import Path

from junitparser import JUnitXml
from typer.testing import CliRunner

from pagecheck.cli import app

runner = CliRunner()

PASSING_SUITE = """\
from pagecheck.automation import Page


def run(tester):
    tester.automation.page = Page(title="Home", selectors={"#main"})
    tester.assert_title("Home")
    tester.assert_exists("#main")
    tester.done()
"""

FAILING_SUITE = """\
from pagecheck.automation import Page


def run(tester):
    tester.automation.page = Page(title="Home")
    tester.assert_title("Elsewhere", "wrong page")
    tester.done()
"""


def _suite(tmp_path: Path, name: str, body: str) -> Path:
    path = tmp_path / "suites" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    return path


def test_init_creates_example_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert (tmp_path / "pagecheck" / "pagecheck.yaml").exists()
    assert (tmp_path / "pagecheck" / "suites" / "example_suite.py").exists()


def test_init_with_custom_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["init", "--dir", "my-checks"])
    assert result.exit_code == 0
    assert (tmp_path / "my-checks" / "pagecheck.yaml").exists()


def test_init_skips_existing_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "pagecheck").mkdir()
    (tmp_path / "pagecheck" / "pagecheck.yaml").write_text("pad: 40\n")
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert "skipping" in result.output
    assert (tmp_path / "pagecheck" / "pagecheck.yaml").read_text() == "pad: 40\n"
    assert not (tmp_path / "pagecheck" / "suites").exists()


def test_initialized_project_runs_green(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert runner.invoke(app, ["init"]).exit_code == 0

    result = runner.invoke(
        app,
        ["test", "pagecheck/suites", "--config", "pagecheck/pagecheck.yaml"],
    )

    assert result.exit_code == 0, result.output
    assert "5 tests executed, 5 passed, 0 failed." in result.output
    assert (tmp_path / "pagecheck" / "junit.xml").exists()


def test_passing_suite_exits_zero(tmp_path):
    _suite(tmp_path, "home.py", PASSING_SUITE)
    result = runner.invoke(app, ["test", str(tmp_path / "suites")])
    assert result.exit_code == 0, result.output
    assert "Test file: " in result.output
    assert "PASS 2 tests executed, 2 passed, 0 failed." in result.output


def test_failing_suite_exits_one(tmp_path):
    _suite(tmp_path, "home.py", FAILING_SUITE)
    result = runner.invoke(app, ["test", str(tmp_path / "suites")])
    assert result.exit_code == 1
    assert "FAIL wrong page" in result.output
    assert "Details for the 1 failed test:" in result.output


def test_custom_labels(tmp_path):
    _suite(tmp_path, "home.py", PASSING_SUITE)
    result = runner.invoke(
        app,
        ["test", str(tmp_path / "suites"), "--pass-text", "OK", "--fail-text", "KO"],
    )
    assert result.exit_code == 0
    assert "OK 2 tests executed" in result.output


def test_save_writes_junit_report(tmp_path):
    _suite(tmp_path, "home.py", PASSING_SUITE)
    _suite(tmp_path, "broken.py", FAILING_SUITE)
    report = tmp_path / "report.xml"

    result = runner.invoke(
        app, ["test", str(tmp_path / "suites"), "--save", str(report)]
    )

    assert result.exit_code == 1
    xml = JUnitXml.fromfile(str(report))
    assert sum(suite.tests for suite in xml) == 3
    assert sum(suite.failures for suite in xml) == 1


def test_include_is_loaded_before_suites(tmp_path):
    include = tmp_path / "setup_page.py"
    include.write_text(
        textwrap.dedent(
            """\
            from pagecheck.automation import Page


            def setup(tester):
                tester.automation.page = Page(title="Shared")
            """
        )
    )
    _suite(
        tmp_path,
        "shared.py",
        "def run(tester):\n    tester.assert_title('Shared')\n    tester.done()\n",
    )

    result = runner.invoke(
        app, ["test", str(tmp_path / "suites"), "--include", str(include)]
    )

    assert result.exit_code == 0, result.output


def test_empty_directory_exits_one(tmp_path):
    (tmp_path / "suites").mkdir()
    result = runner.invoke(app, ["test", str(tmp_path / "suites")])
    assert result.exit_code == 1
    assert "No test file found" in result.output


def test_missing_config():
    result = runner.invoke(app, ["test", ".", "--config", "nonexistent.yaml"])
    assert result.exit_code == 1
    assert "config file not found" in result.output


def test_invalid_config(tmp_path):
    config = tmp_path / "pagecheck.yaml"
    config.write_text("pad: 0\n")
    result = runner.invoke(app, ["test", ".", "--config", str(config)])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_debug_log_is_written(tmp_path):
    _suite(tmp_path, "home.py", PASSING_SUITE)
    log = tmp_path / "logs" / "debug.log"
    result = runner.invoke(
        app, ["test", str(tmp_path / "suites"), "--debug-log", str(log)]
    )
    assert result.exit_code == 0
    assert log.exists()
    assert "emit" in log.read_text()
