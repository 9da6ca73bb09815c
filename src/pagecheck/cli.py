from __future__ import annotations

import asyncio
from pathlib import Path

import typer

app = typer.Typer(name="pagecheck", help="Run page automation test suites")

EXAMPLE_CONFIG = """\
pass_text: PASS
fail_text: FAIL
pad: 80
save: junit.xml
includes: []
"""

EXAMPLE_SUITE = '''\
from pagecheck.automation import Page


def run(tester):
    tester.automation.page = Page(
        url="https://example.com/",
        title="Example Domain",
        http_status=200,
        body_text="This domain is for use in illustrative examples.",
        selectors={"h1", "p > a"},
    )
    tester.assert_title("Example Domain")
    tester.assert_http_status(200)
    tester.assert_exists("h1")
    tester.assert_text_exists("illustrative examples")
    tester.assert_url_match(r"^https://example\\.com/")
    tester.done()
'''


@app.command()
def test(
    paths: list[str] = typer.Argument(help="Test files or directories to run"),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to pagecheck YAML config"
    ),
    save: str | None = typer.Option(None, help="Write a JUnit XML report to this path"),
    include: list[str] = typer.Option(
        [], "--include", help="Script loaded once before the suites (repeatable)"
    ),
    pass_text: str | None = typer.Option(None, help="Label printed for passing results"),
    fail_text: str | None = typer.Option(None, help="Label printed for failing results"),
    pad: int | None = typer.Option(None, min=1, help="Width of result bars"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    debug_log: str | None = typer.Option(None, help="Append debug logging to this file"),
):
    """Run every test file found under PATHS, one at a time."""
    import yaml

    from pagecheck.automation import InMemoryAutomation
    from pagecheck.config import TesterConfig, load_config
    from pagecheck.console import Colorizer
    from pagecheck.errors import TesterError
    from pagecheck.tester import Tester
    from pagecheck.verbose import setup_logger

    tester_config = TesterConfig()
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            tester_config = load_config(config_path)
        except (ValueError, yaml.YAMLError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    overrides = {
        key: value
        for key, value in {
            "pass_text": pass_text,
            "fail_text": fail_text,
            "pad": pad,
            "save": save,
        }.items()
        if value is not None
    }
    if include:
        overrides["includes"] = [
            *tester_config.includes,
            *(str(Path(p).resolve()) for p in include),
        ]
    try:
        tester_config = TesterConfig(**{**tester_config.model_dump(), **overrides})
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    setup_logger(Path(debug_log) if debug_log else None, verbose=verbose)

    tester = Tester(InMemoryAutomation(colorizer=Colorizer()), config=tester_config)
    try:
        asyncio.run(tester.run_suites(*paths))
    except TesterError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    tester.render_results(exit=True)


@app.command()
def init(
    dir: str = typer.Option(
        "pagecheck", "--dir", help="Directory to initialize a test project in"
    ),
):
    """Initialize a test project with an example config and suite."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    config_file = project_dir / "pagecheck.yaml"
    if config_file.exists():
        typer.echo(f"pagecheck.yaml already exists in {dir}, skipping.")
        return

    config_file.write_text(EXAMPLE_CONFIG)
    suites = project_dir / "suites"
    suites.mkdir(parents=True, exist_ok=True)
    (suites / "example_suite.py").write_text(EXAMPLE_SUITE)

    typer.echo(f"Initialized test project in {dir}:")
    typer.echo("  pagecheck.yaml            - example config")
    typer.echo("  suites/example_suite.py   - example test file")
