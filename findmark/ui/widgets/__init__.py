"""Widgets used by the FindMark window."""

from .find_all_results import FindAllResultsWidget
from .find_bar import FindAllBar

__all__ = ["FindAllBar", "FindAllResultsWidget"]
