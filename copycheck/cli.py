"""
copycheck - CLI Interface.

A command-line interface for verifying that every file of a "copy" tree is
present in a "source" tree, comparing files by content digest, name and
timestamps. Scan results are cached so later checks are fast.

Usage Examples:
    # Build the cache for a tree
    copycheck build /data/photos

    # Build incrementally, warming subdirectories two levels deep first
    copycheck build /data/photos --incremental --dig 2

    # Check that a backup is fully contained in the source
    copycheck check /backup/photos /data/photos

    # Compare by content only, ignoring names and dates
    copycheck check /backup/photos /data/photos --no-name --no-date

    # Write the report to a log file
    copycheck check /backup/photos /data/photos --log-file check.log
"""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from copycheck import __version__
from copycheck.caching import CACHE_DIR_ENV
from copycheck.models import ComparisonKey, CopyCheckError, ScanOptions
from copycheck.orchestration import CheckOrchestrator
from copycheck.scheduling import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Initialize Typer app
app = typer.Typer(
    name="copycheck",
    help="copycheck - Verify that a copy of a file tree is fully present in its source.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"copycheck v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send copycheck log records to stderr through a RichHandler.

    Args:
        verbose: If True, log at DEBUG level, otherwise INFO.
    """
    package_logger = logging.getLogger("copycheck")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def validate_root_path(root: Path) -> None:
    """
    Validate that the provided root path exists and is a readable directory.

    Args:
        root: Path to validate.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not root.exists():
        console.print(f"[red]Error:[/red] Path does not exist: {root}")
        raise typer.Exit(1)

    if not root.is_dir():
        console.print(f"[red]Error:[/red] Path is not a directory: {root}")
        raise typer.Exit(1)

    if not os.access(root, os.R_OK):
        console.print(f"[red]Error:[/red] Permission denied - cannot read: {root}")
        raise typer.Exit(1)


def validate_capacity(value: int) -> int:
    """Validate the pool capacity is at least 1."""
    if value < 1:
        raise typer.BadParameter("Capacity must be at least 1")
    return value


def validate_dig(value: int) -> int:
    """Validate the pre-scan depth is not negative."""
    if value < 0:
        raise typer.BadParameter("Dig depth must be 0 or more")
    return value


def _run_guarded(action: Callable[[], T], description: str) -> T:
    """Run a workflow, turning failures into logged errors and exit codes."""
    try:
        return action()

    except KeyboardInterrupt:
        console.print(f"\n[yellow]{description} interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except CopyCheckError as e:
        logger.error("%s aborted", description, exc_info=e)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except OSError as e:
        logger.error("%s aborted", description, exc_info=e)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """copycheck - Verify that a copy of a file tree is fully present in its source."""
    pass


@app.command()
def build(
    roots: List[Path] = typer.Argument(
        ...,
        help="Directories to build the cache for.",
        exists=False,  # We do our own validation
    ),
    incremental: bool = typer.Option(
        False,
        "--incremental",
        "-i",
        help="Rebuild the cache, reusing hashes that are already known.",
    ),
    no_fail: bool = typer.Option(
        False,
        "--no-fail",
        help="Skip entries that fail while traversing instead of aborting.",
    ),
    dig: int = typer.Option(
        0,
        "--dig",
        help="Scan subdirectories this many levels deep first, deepest first.",
        callback=validate_dig,
    ),
    cache_dir: Optional[Path] = typer.Option(
        None,
        "--cache-dir",
        envvar=CACHE_DIR_ENV,
        help="Directory holding cached scan results.",
    ),
    capacity: int = typer.Option(
        DEFAULT_CAPACITY,
        "--capacity",
        help="Maximum number of files hashed concurrently.",
        callback=validate_capacity,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Build the cache of one or more directory trees.

    Every regular file is hashed and the results are stored so that later
    checks of the same trees do not need to read the files again.
    """
    for root in roots:
        validate_root_path(root)
    configure_logging(verbose)

    options = ScanOptions(
        with_hash=True,
        is_incremental=incremental,
        continue_on_failure=no_fail,
    )
    orchestrator = CheckOrchestrator(cache_dir=cache_dir, capacity=capacity)
    _run_guarded(
        lambda: orchestrator.run_build_workflow([str(root) for root in roots], options, dig),
        "Build",
    )


@app.command()
def check(
    copy_path: Path = typer.Argument(
        ...,
        help="Tree whose content must be present in the source.",
        exists=False,  # We do our own validation
    ),
    source_path: Path = typer.Argument(
        ...,
        help="Tree expected to contain the copy.",
        exists=False,
    ),
    incremental: bool = typer.Option(
        False,
        "--incremental",
        "-i",
        help="Rescan both trees, reusing hashes that are already known.",
    ),
    no_hash: bool = typer.Option(
        False,
        "--no-hash",
        help="Do not use file hashes to compare files (and do not compute them).",
    ),
    no_name: bool = typer.Option(
        False,
        "--no-name",
        help="Do not use file names to compare files.",
    ),
    no_fail: bool = typer.Option(
        False,
        "--no-fail",
        help="Skip entries that fail while traversing instead of aborting.",
    ),
    no_create: bool = typer.Option(
        False,
        "--no-create",
        help="Do not use creation times to compare files.",
    ),
    no_change: bool = typer.Option(
        False,
        "--no-change",
        help="Do not use change times to compare files.",
    ),
    no_modify: bool = typer.Option(
        False,
        "--no-modify",
        help="Do not use modification times to compare files.",
    ),
    no_date: bool = typer.Option(
        False,
        "--no-date",
        help="Do not use any timestamp to compare files.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for the check report log file.",
    ),
    cache_dir: Optional[Path] = typer.Option(
        None,
        "--cache-dir",
        envvar=CACHE_DIR_ENV,
        help="Directory holding cached scan results.",
    ),
    capacity: int = typer.Option(
        DEFAULT_CAPACITY,
        "--capacity",
        help="Maximum number of files hashed concurrently.",
        callback=validate_capacity,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Detect content of COPY_PATH that is missing in SOURCE_PATH.

    Files are matched on a key made of their hash, name and timestamps;
    each --no-* flag removes one part of that key. Missing files whose
    content exists in the source under another name are flagged.
    """
    validate_root_path(copy_path)
    validate_root_path(source_path)
    configure_logging(verbose)

    key = ComparisonKey(
        use_hash=not no_hash,
        use_name=not no_name,
        use_creation=not (no_create or no_date),
        use_change=not (no_change or no_date),
        use_modify=not (no_modify or no_date),
    )
    options = ScanOptions(
        with_hash=key.use_hash,
        is_incremental=incremental,
        continue_on_failure=no_fail,
    )
    orchestrator = CheckOrchestrator(
        cache_dir=cache_dir,
        capacity=capacity,
        log_file_path=log_file,
    )
    _run_guarded(
        lambda: orchestrator.run_check_workflow(str(copy_path), str(source_path), options, key),
        "Check",
    )

    if orchestrator.written_log_path is not None:
        console.print(f"[dim]Log written to: {orchestrator.written_log_path}[/dim]")


if __name__ == "__main__":
    app()
