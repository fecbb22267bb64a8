"""FreezeForge CLI - Main application entry point.

Running ``freezeforge`` with no arguments builds the project in the current
directory. Sub-commands:

    build      Run the full pipeline (same as no sub-command)
    platform   Print the normalized <os>-<arch> tag of this host
    check      Run only the preflight tool checks

Every failure exits with status 1 unless --distinct-exit-codes is given,
in which case each error category has its own code (see
freezeforge.core.exceptions).
"""

from __future__ import annotations

import json
import os
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from freezeforge.cli.console import (
    ConsoleReporter,
    ErrorRenderer,
    detail,
    ok,
    print_build_result,
    set_verbose_mode,
)
from freezeforge.core.config import BuildConfig, load_config
from freezeforge.core.exceptions import GENERIC_EXIT_CODE, FreezeForgeError
from freezeforge.core.logging import configure_logging, get_logger
from freezeforge.core.platform import detect
from freezeforge.pipeline.pipeline import BuildPipeline
from freezeforge.pipeline.preflight import PreflightValidator
from freezeforge.pipeline.result import PipelineResult

logger = get_logger(__name__)


def _report_error(error: BaseException, operation_name: str, json_output: bool) -> None:
    if json_output:
        if not isinstance(error, FreezeForgeError):
            error = FreezeForgeError(str(error))
        result = PipelineResult.failure(error.stage, error)
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        ErrorRenderer.render(error, context=f"While running {operation_name}")


def safe_cli_command(
    operation_name: str,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Wrap a CLI command so errors outside the pipeline are rendered, not dumped.

    With --json the error is printed as a failed result object instead of a
    panel.

    Args:
        operation_name: Human-readable operation name for error context

    Returns:
        Decorator function that wraps the command with error handling
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except FreezeForgeError as e:
                _report_error(e, operation_name, kwargs.get("json_output", False))
                logger.debug(f"[{operation_name}] {type(e).__name__}: {e}")
                distinct = kwargs.get("distinct_exit_codes", False)
                raise typer.Exit(code=e.exit_code if distinct else GENERIC_EXIT_CODE)
            except OSError as e:
                _report_error(e, operation_name, kwargs.get("json_output", False))
                logger.debug(f"[{operation_name}] {type(e).__name__}: {e}")
                raise typer.Exit(code=GENERIC_EXIT_CODE)

        return wrapper

    return decorator


app = typer.Typer(
    name="freezeforge",
    help="Build a tagged single-file binary for this platform",
    add_completion=False,
    pretty_exceptions_enable=False,
)


def _setup_logging(verbose: bool, log_file: Optional[Path]) -> None:
    """Configure logging once per invocation.

    FREEZEFORGE_LOG_LEVEL overrides the default WARNING level; --verbose
    forces DEBUG.
    """
    level = "DEBUG" if verbose else os.environ.get("FREEZEFORGE_LOG_LEVEL", "WARNING")
    configure_logging(level=level, log_file=log_file, console=True)
    set_verbose_mode(verbose)


def _load(
    root: Optional[Path], config_path: Optional[Path], app_name: Optional[str]
) -> BuildConfig:
    config = load_config(config_path=config_path, base_path=root)
    if app_name:
        # Re-validate through the dataclass so a bad name fails here
        data = config.to_dict()
        data["app_name"] = app_name
        data.pop("repo_root")
        config = BuildConfig.from_dict(data, config.repo_root)
    return config


def _run_build(
    root: Optional[Path] = None,
    config_path: Optional[Path] = None,
    app_name: Optional[str] = None,
    json_output: bool = False,
    distinct_exit_codes: bool = False,
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    _setup_logging(verbose, log_file)
    config = _load(root, config_path, app_name)

    reporter = None if json_output else ConsoleReporter()
    result = BuildPipeline(config, reporter=reporter).run()

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_build_result(result)

    exit_code = result.exit_code(distinct=distinct_exit_codes)
    if exit_code:
        raise typer.Exit(code=exit_code)


# Shared option declarations
ROOT_OPTION = typer.Option(
    None,
    "--root",
    "-r",
    help="Project root (default: current directory)",
    file_okay=False,
)
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Config file (default: <root>/freezeforge.yaml)"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """FreezeForge - reproducible build-and-package pipeline."""
    if version:
        from freezeforge import __version__

        typer.echo(f"FreezeForge {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        safe_cli_command("build")(_run_build)()


@app.command("build")
@safe_cli_command("build")
def build_command(
    root: Optional[Path] = ROOT_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    app_name: Optional[str] = typer.Option(
        None, "--app-name", "-n", help="Override the application name"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the result as JSON instead of a summary"
    ),
    distinct_exit_codes: bool = typer.Option(
        False,
        "--distinct-exit-codes",
        help="Exit with a per-category code instead of 1 on failure",
    ),
    verbose: bool = VERBOSE_OPTION,
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also write logs to this file"
    ),
) -> None:
    """Create the sandbox, install dependencies, freeze and tag the binary."""
    _run_build(
        root=root,
        config_path=config_path,
        app_name=app_name,
        json_output=json_output,
        distinct_exit_codes=distinct_exit_codes,
        verbose=verbose,
        log_file=log_file,
    )


@app.command("platform")
def platform_command(
    app_name: Optional[str] = typer.Option(
        None, "--app-name", "-n", help="Print the full tagged artifact name"
    ),
) -> None:
    """Print the normalized platform tag of this host."""
    tag = detect()
    if app_name:
        typer.echo(f"{app_name}-{tag}")
    else:
        typer.echo(str(tag))


@app.command("check")
@safe_cli_command("check")
def check_command(
    root: Optional[Path] = ROOT_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    distinct_exit_codes: bool = typer.Option(
        False,
        "--distinct-exit-codes",
        help="Exit with a per-category code instead of 1 on failure",
    ),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Verify that every required tool is on PATH."""
    _setup_logging(verbose, None)
    config = _load(root, config_path, None)

    found = PreflightValidator().check_all(config.required_tools)
    for name, path in found.items():
        detail(f"  {name:<12} {path}")
    ok("All required tools found.")


def cli_main() -> None:
    """Entry point for console_scripts."""
    app()


if __name__ == "__main__":
    cli_main()
