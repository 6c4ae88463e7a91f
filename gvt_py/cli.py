"""
Command-line interface for GVT.

This module provides the command-line entry point. Each command hands its
raw arguments to the versioning engine and turns the result into printed
text and a process exit code.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Dict, List, Optional

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from gvt_py import __version__
from gvt_py.config import GvtConfig
from gvt_py.engine import OperationResult, VersioningEngine
from gvt_py.errors import ResultStatus
from gvt_py.store.filesystem import FileSystemVersionStore

# Set up the consoles and logger; logs go to stderr so stdout carries only results
console = Console()
err_console = Console(stderr=True)
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
)
logger = logging.getLogger("gvt")

app = typer.Typer(
    help="Minimal local version control for individual files.",
    add_completion=False,
)

# Keep "-m", "-last" and negative version numbers as plain arguments
PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}

EXIT_CODES: Dict[ResultStatus, int] = {
    ResultStatus.SUCCESS: 0,
    ResultStatus.UNCHANGED: 0,
    ResultStatus.NOT_INITIALIZED: -2,
    ResultStatus.SYSTEM_IO: -3,
    ResultStatus.CORRUPT_REPOSITORY: -4,
    ResultStatus.ALREADY_INITIALIZED: 10,
    ResultStatus.INVALID_VERSION: 60,
}

OPERATION_EXIT_CODES: Dict[str, Dict[ResultStatus, int]] = {
    "add": {
        ResultStatus.NO_FILE_SPECIFIED: 20,
        ResultStatus.FILE_NOT_FOUND: 21,
        ResultStatus.SYSTEM_IO: 22,
    },
    "detach": {
        ResultStatus.NO_FILE_SPECIFIED: 30,
        ResultStatus.SYSTEM_IO: 31,
    },
    "commit": {
        ResultStatus.NO_FILE_SPECIFIED: 50,
        ResultStatus.FILE_NOT_FOUND: 51,
        ResultStatus.SYSTEM_IO: 52,
    },
}


@dataclass
class Settings:
    """Per-invocation settings resolved from flags, env vars and the config file."""

    working_dir: Path
    storage_name: str
    history_last: Optional[int] = None


def exit_code_for(op: str, status: ResultStatus) -> int:
    """Return the process exit code for an operation's result status."""
    code = OPERATION_EXIT_CODES.get(op, {}).get(status)
    if code is not None:
        return code
    return EXIT_CODES.get(status, 1)


def resolve_working_directory(directory: Optional[Path], config: GvtConfig) -> Path:
    """
    Pick the working directory.

    The order of precedence is:
    1. Command-line argument
    2. GVT_DIR environment variable
    3. Configuration file
    4. Current directory
    """
    if directory:
        return directory.expanduser()
    env_dir = os.environ.get("GVT_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    if config.working_dir:
        return config.working_dir
    return Path.cwd()


def build_engine(settings: Settings) -> VersioningEngine:
    store = FileSystemVersionStore(settings.working_dir, settings.storage_name)
    return VersioningEngine(store, settings.working_dir)


def render(op: str, result: OperationResult, json_output: bool = False) -> None:
    """Print a result and exit with its code when it is not zero."""
    if result.ok and json_output:
        typer.echo(orjson.dumps(result.data, option=orjson.OPT_INDENT_2).decode())
    elif result.ok:
        if result.message:
            typer.echo(result.message, nl=not result.message.endswith("\n"))
    else:
        typer.echo(result.message, err=True)

    code = exit_code_for(op, result.status)
    if code != 0:
        raise typer.Exit(code)


def run(
    ctx: typer.Context,
    op: str,
    args: Optional[List[str]],
    json_output: bool = False,
) -> OperationResult:
    settings: Settings = ctx.obj
    engine = build_engine(settings)
    result = engine.execute(op, list(args or []))
    logger.debug(f"{op} finished with {result.status.value}")
    render(op, result, json_output=json_output)
    return result


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output."
    ),
    json_logs: bool = typer.Option(
        False, "--json", help="Output logs in JSON format."
    ),
    directory: Optional[Path] = typer.Option(
        None,
        "--directory",
        "-C",
        help="Working directory. Uses GVT_DIR env var if not specified.",
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="Path to the configuration file."
    ),
    version: bool = typer.Option(
        False, "--version", help="Show the application version and exit."
    ),
) -> None:
    """
    GVT: snapshot tracked files into numbered versions and check them out again.
    """
    if version:
        typer.echo(f"GVT version: {__version__}")
        raise typer.Exit()

    config = GvtConfig.load(config_file)
    verbose = verbose or config.verbose

    # Configure logging level based on verbosity
    logger.setLevel(logging.DEBUG if verbose else logging.NOTSET)
    logger.debug("Verbose logging enabled")

    # Configure JSON logging if requested
    if json_logs:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        logging.basicConfig(
            level=logging.INFO if not verbose else logging.DEBUG,
            format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"message": "%(message)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S",
            stream=sys.stderr,
        )
        logger.debug("JSON logging enabled")

    ctx.obj = Settings(
        working_dir=resolve_working_directory(directory, config),
        storage_name=config.storage_dir,
        history_last=config.history_last,
    )

    if ctx.invoked_subcommand is None:
        typer.echo("Please specify command.", err=True)
        raise typer.Exit(1)


@app.command()
def init(ctx: typer.Context) -> None:
    """
    Initialize a repository in the working directory.
    """
    run(ctx, "init", [])


@app.command(context_settings=PASSTHROUGH)
def add(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="<file> [-m <message>]"),
    ] = None,
) -> None:
    """
    Start tracking a file in a new version.
    """
    run(ctx, "add", args)


@app.command(context_settings=PASSTHROUGH)
def detach(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="<file> [-m <message>]"),
    ] = None,
) -> None:
    """
    Stop tracking a file in a new version.
    """
    run(ctx, "detach", args)


@app.command(context_settings=PASSTHROUGH)
def commit(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="<file> [-m <message>]"),
    ] = None,
) -> None:
    """
    Record the working copy of a tracked file in a new version.
    """
    run(ctx, "commit", args)


@app.command(context_settings=PASSTHROUGH)
def checkout(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="<version>"),
    ] = None,
) -> None:
    """
    Replace the tracked files in the working directory with a version's.
    """
    run(ctx, "checkout", args)


@app.command(context_settings=PASSTHROUGH)
def history(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="[-last <k>]"),
    ] = None,
    json_output: bool = typer.Option(
        False, "--json", help="Output history in JSON format."
    ),
) -> None:
    """
    List versions, newest first.
    """
    args = list(args or [])
    settings: Settings = ctx.obj
    if settings.history_last is not None and not args:
        args = ["-last", str(settings.history_last)]
    run(ctx, "history", args, json_output=json_output)


@app.command(context_settings=PASSTHROUGH)
def version(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="[<version>]"),
    ] = None,
    json_output: bool = typer.Option(
        False, "--json", help="Output the version in JSON format."
    ),
) -> None:
    """
    Show a version's number and full message (default: the active version).
    """
    run(ctx, "version", args, json_output=json_output)


@app.command(name="files", context_settings=PASSTHROUGH)
def list_files(
    ctx: typer.Context,
    args: Annotated[
        Optional[List[str]],
        typer.Argument(help="[<version>]"),
    ] = None,
    plain: bool = typer.Option(False, "--plain", help="Print one name per line."),
) -> None:
    """
    List the files tracked by a version (default: the active version).
    """
    settings: Settings = ctx.obj
    result = build_engine(settings).execute("files", list(args or []))
    if not result.ok or plain:
        render("files", result)
        return

    table = Table(title="Tracked Files")
    table.add_column("File")
    for name in result.data or []:
        table.add_row(Text(name))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
