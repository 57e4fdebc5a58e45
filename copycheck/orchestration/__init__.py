"""Workflow orchestration package for copycheck.

This package contains orchestration components for the build and check
workflows:
- CheckLogger: Structured report of a check written to a log file.
- CheckOrchestrator: Central coordinator for build and check workflows.
"""

from copycheck.orchestration.check_logger import CheckLogger
from copycheck.orchestration.check_orchestrator import CheckOrchestrator

__all__ = ["CheckLogger", "CheckOrchestrator"]
