"""Qt-aware controllers used by the main window."""

from .find_all_controller import FindAllController

__all__ = ["FindAllController"]
