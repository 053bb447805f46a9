"""Core cellular automaton logic."""

from .grid import Cell, CellOutOfRangeError, Grid, next_state
from .game import GameOfLife
from .patterns import Pattern, PatternLibrary

__all__ = ["Cell", "CellOutOfRangeError", "Grid", "next_state", "GameOfLife", "Pattern", "PatternLibrary"]
