"""Terminal output for copycheck.

This module provides the CheckTUI class, a Rich-based display for check
reports and cache build summaries.

Example:
    from copycheck.ui import CheckTUI

    tui = CheckTUI()
    tui.display_check_report(report)
    tui.display_build_summary(summary)
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from copycheck.models import BuildSummary, CheckReport


class CheckTUI:
    """Rich-based terminal display for check and build results.

    Args:
        console: Optional Rich Console instance for output. If None, creates
            a new Console. Pass a custom Console for testing (e.g., with
            StringIO file for output capture).

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_check_report(self, report: CheckReport) -> None:
        """Display the result of a check.

        Shows a header panel with both roots, the key fields in use and the
        entry counts, then a table of missing entries, sorted by path, with
        their same-content hints.

        Args:
            report: CheckReport produced by the comparison.
        """
        enabled = set(report.key.enabled_fields())
        key_text = ", ".join(
            f"{name}: {'ON' if name in enabled else 'OFF'}"
            for name in ("hash", "name", "creation", "change", "modify")
        )
        header_text = (
            f"Copy: {report.copy_root} ({report.copy_count:,} files)\n"
            f"Source: {report.source_root} ({report.source_count:,} files)\n"
            f"Key: {key_text}\n"
            f"Duration: {self._format_duration(report.duration)}"
        )
        self.console.print(Panel(header_text, title="Check Results", border_style="blue"))

        if report.is_complete:
            self.console.print(
                "[green]Every element known in copy is available in source.[/green]"
            )
            return

        table = Table(title="Missing From Source")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Path", style="white")
        table.add_column("Hint", style="magenta")

        ordered = sorted(report.missing, key=lambda entry: entry.descriptor.path)
        for idx, entry in enumerate(ordered, start=1):
            table.add_row(
                str(idx),
                self._truncate_name(entry.descriptor.path, max_length=80),
                entry.hint or "",
            )

        self.console.print(table)
        self.console.print(
            f"[yellow]Found {len(report.missing):,} element(s) in copy "
            f"that cannot match anything in source.[/yellow]"
        )

    def display_build_summary(self, summary: BuildSummary) -> None:
        """Display final statistics after a cache build.

        Args:
            summary: BuildSummary with aggregated statistics.
        """
        self.console.print(Panel("Build Summary", border_style="green"))

        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Roots", f"{len(summary.roots):,}")
        table.add_row("Scans", f"{summary.scans:,}")
        table.add_row("Files", f"{summary.files:,}")
        table.add_row("Duration", self._format_duration(summary.duration))

        self.console.print(table)

    def _format_duration(self, seconds: float) -> str:
        """Convert seconds to human-readable duration (e.g., "5m 23s")."""
        if seconds < 0:
            seconds = 0
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        """Truncate long paths with a leading ellipsis, keeping the file name."""
        if len(name) > max_length:
            return "..." + name[-(max_length - 3):]
        return name
