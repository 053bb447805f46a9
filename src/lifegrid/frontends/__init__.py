"""Frontend interfaces for the grid engine."""

from .cli import CLIGameOfLife
from .tui import GameApp

__all__ = ["CLIGameOfLife", "GameApp"]
