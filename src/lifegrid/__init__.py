"""Bounded-grid Conway's Game of Life engine."""

__version__ = "0.1.0"

from .core.grid import Cell, CellOutOfRangeError, Grid
from .core.game import GameOfLife
from .core.patterns import Pattern, PatternLibrary

__all__ = ["Cell", "CellOutOfRangeError", "Grid", "GameOfLife", "Pattern", "PatternLibrary"]
