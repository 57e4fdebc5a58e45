"""Terminal UI package for copycheck."""

from .check_tui import CheckTUI

__all__ = ["CheckTUI"]
