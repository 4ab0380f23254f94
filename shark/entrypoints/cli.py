import asyncio
import json
import platform

import typer

from shark.adapters.manifest.toml_manifest import TomlManifestLoader
from shark.adapters.runner.subprocess_runner import (
    DEFAULT_GRACE_PERIOD,
    SubprocessCommandRunner,
)
from shark.application.check_manifest import check_manifest
from shark.application.result_serialization import serialize_batch_result
from shark.application.run_batch import BatchDriver
from shark.domain.batch import EXIT_CONFIG_ERROR, BatchResult
from shark.domain.errors import ConfigError
from shark.entrypoints.logging_setup import setup_logger

VERSION = "v0.0.1"
DEFAULT_TIMEOUT = 10.0

app = typer.Typer(add_completion=False)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"shark version {VERSION}; Python {platform.python_version()}", err=True)
        raise typer.Exit()


def _relay_failures(result: BatchResult) -> None:
    for failure in result.failures:
        outcome = failure.outcome
        if outcome is not None:
            if outcome.stdout:
                typer.echo(outcome.stdout.decode("utf-8", errors="replace"), nl=False)
            if outcome.stderr:
                typer.echo(outcome.stderr.decode("utf-8", errors="replace"), nl=False, err=True)
    error = result.error
    if error is not None:
        typer.echo(str(error), err=True)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print version information and quit",
    ),
) -> None:
    """Run monitoring plugin commands with a per-command timeout."""


@app.command()
def run(
    config_path: str = typer.Option("", "--config-path", envvar="SHARK_CONFIG_PATH"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Seconds before SIGTERM"),
    grace_period: float = typer.Option(
        DEFAULT_GRACE_PERIOD, "--grace-period", help="Seconds between SIGTERM and SIGKILL"
    ),
    json_output: bool = typer.Option(False, "--json"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    log = setup_logger(verbose)
    try:
        entries = TomlManifestLoader().load(config_path)
        runner = SubprocessCommandRunner(grace_period=grace_period, logger=log)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    driver = BatchDriver(runner, logger=log)
    result = asyncio.run(driver.run_all(entries, timeout))
    if json_output:
        data = serialize_batch_result(result, command="run", args=[config_path])
        typer.echo(json.dumps(data))
    else:
        _relay_failures(result)
    raise typer.Exit(result.exit_code)


@app.command()
def check(
    config_path: str = typer.Option("", "--config-path", envvar="SHARK_CONFIG_PATH"),
):
    """Validate plugin commands without running them."""
    try:
        entries = TomlManifestLoader().load(config_path)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    report = check_manifest(entries)
    for error in report.errors:
        typer.echo(str(error), err=True)
    typer.echo(
        f"{len(report.runnable)} runnable, {len(report.skipped)} skipped, "
        f"{len(report.errors)} invalid"
    )
    raise typer.Exit(report.exit_code)
