"""Plain-text report file for a check.

A report file has three sections, each framed by SEPARATOR lines: a header
with the roots and comparison key, the entries missing from source, and a
summary.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from copycheck.models import CheckReport

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 65

# Key fields in header order
KEY_FIELDS = ("hash", "name", "creation", "change", "modify")


def format_duration(seconds: float) -> str:
    """Render a duration as "45s", "5m 23s" or "1h 5m 30s"."""
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


class CheckLogger:
    """Writes the sections of a check report to `path`.

    Usage:
        with CheckLogger(Path("check.log")) as check_log:
            check_log.log_header(report)
            check_log.log_missing_entries(report)
            check_log.log_summary(report)

    Raises:
        OSError: From the constructor when the parent of `path` is missing
            or not a directory, and from any open, write or close failure.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        parent = self.path.parent
        if not parent.exists():
            raise FileNotFoundError(f"Log directory does not exist: {parent}")
        if not parent.is_dir():
            raise NotADirectoryError(f"Log directory is not a directory: {parent}")
        self._started = datetime.now()
        self._file: Optional[TextIO] = None

    def __enter__(self) -> "CheckLogger":
        self._file = self.path.open("w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        file, self._file = self._file, None
        if file is not None:
            file.close()

    def log_header(self, report: CheckReport) -> None:
        """Write the run timestamp, both roots and which key fields are on."""
        enabled = set(report.key.enabled_fields())
        body = [
            f"Timestamp: {self._started:%Y-%m-%d %H:%M:%S}",
            f"Copy: {report.copy_root}",
            f"Source: {report.source_root}",
        ]
        body += [f"  With {name}: {'ON' if name in enabled else 'OFF'}" for name in KEY_FIELDS]
        self._write_section("copycheck - Check Log", body + [""])

    def log_missing_entries(self, report: CheckReport) -> None:
        """Write each missing entry sorted by path, followed by its hint if any."""
        body: List[str] = [] if report.missing else ["None"]
        for entry in sorted(report.missing, key=lambda item: item.descriptor.path):
            body.append(f"- {entry.descriptor.path}")
            if entry.hint:
                body.append(f"    ! {entry.hint}")
        self._write_section("MISSING IN SOURCE", body + [""])

    def log_summary(self, report: CheckReport) -> None:
        renamed = sum(1 for entry in report.missing if entry.identical_in_source is not None)
        self._write_section("SUMMARY", [
            f"Files in copy: {report.copy_count:,}",
            f"Files in source: {report.source_count:,}",
            f"Missing in source: {len(report.missing):,}",
            f"  of which identical content found: {renamed:,}",
            f"Duration: {format_duration(report.duration)}",
            "",
            f"Log file: {self.path}",
            SEPARATOR,
        ])

    def _write_section(self, title: str, body: List[str]) -> None:
        if self._file is None:
            logger.warning("Log file %s is not open, dropping section %s", self.path, title)
            return
        self._file.writelines(f"{line}\n" for line in [SEPARATOR, title, SEPARATOR, *body])
