"""copycheck - Verify that a copy of a file tree is fully present in its source.

Every file is content-addressed with a SHA-1 digest. Scans run concurrently
under a bounded, priority-weighted hashing pool, and their results are cached
so that later checks can reuse them.
"""

__version__ = "0.1.0"

from .models import (
    BuildSummary,
    CheckReport,
    ComparisonKey,
    FileDescriptor,
    MissingEntry,
    ScanOptions,
)

__all__ = [
    "__version__",
    "BuildSummary",
    "CheckReport",
    "ComparisonKey",
    "FileDescriptor",
    "MissingEntry",
    "ScanOptions",
]


def main() -> None:
    """Entry point for the copycheck CLI application.

    This function is called when the `copycheck` command is invoked after
    package installation via pip. It imports and runs the Typer app
    from the copycheck.cli module.
    """
    from copycheck.cli import app
    app()
