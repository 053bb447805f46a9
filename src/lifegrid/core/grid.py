"""Bounded grid engine for Conway's Game of Life."""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import torch
import torch.nn.functional as F

logger = logging.getLogger(__name__)

ALIVE_GLYPH = "█"
DEAD_GLYPH = "▒"

# Moore neighbourhood without the centre cell
_NEIGHBOUR_KERNEL = torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)


class CellOutOfRangeError(IndexError):
    """Raised when coordinates do not address an existing cell."""

    def __init__(self, row: int, col: int, rows: int, cols: int) -> None:
        super().__init__(f"Cell ({row}, {col}) out of range for {rows}x{cols} grid")
        self.row = row
        self.col = col
        self.rows = rows
        self.cols = cols


def next_state(alive: bool, neighbours_alive: int) -> bool:
    """Apply the B3/S23 rule to one cell.

    Args:
        alive: Current state of the cell
        neighbours_alive: Number of living neighbours (0-8)

    Returns:
        State of the cell in the next generation
    """
    if alive:
        return neighbours_alive in (2, 3)
    return neighbours_alive == 3


class Cell:
    """One grid position and its state for the current generation."""

    __slots__ = ("alive", "row", "col", "neighbours_alive")

    def __init__(self, row: int, col: int, alive: bool = False) -> None:
        self.alive = alive
        self.row = row
        self.col = col
        # Only meaningful between the two passes of Grid.advance()
        self.neighbours_alive = 0

    def update_status(self) -> None:
        """Move to the next generation using the stored neighbour count."""
        self.alive = next_state(self.alive, self.neighbours_alive)

    def __repr__(self) -> str:
        return f"Cell(row={self.row}, col={self.col}, alive={self.alive})"


class Grid:
    """A fixed-size rectangle of cells with bounded (non-wrapping) edges.

    Cells are stored row-major. Every cell knows its own coordinates, and
    the grid keeps those coordinates in step with the cell's position
    through resizes.
    """

    def __init__(self, rows: int = 0, cols: int = 0) -> None:
        """Initialize a grid with every cell dead.

        Args:
            rows: Number of rows
            cols: Number of columns

        Raises:
            ValueError: If either dimension is negative
        """
        _check_dimensions(rows, cols)
        self.rows = rows
        self.cols = cols
        self.cells: List[List[Cell]] = [[Cell(r, c) for c in range(cols)] for r in range(rows)]

        # Neighbour convolution runs on tiny tensors; avoid thread pool overhead
        torch.set_num_threads(1)

    @classmethod
    def with_size(cls, rows: int, cols: int) -> "Grid":
        """Create a grid of the given size with all cells dead."""
        return cls(rows, cols)

    @classmethod
    def from_pattern(cls, pattern: Sequence[Sequence[bool]]) -> "Grid":
        """Create a grid whose size and cell states mirror a pattern.

        Args:
            pattern: Rectangular sequence of rows; each entry is truthy for a
                living cell. Nested lists and 2D numpy arrays both work.

        Returns:
            New Grid instance

        Raises:
            ValueError: If the rows of the pattern differ in length
        """
        rows = len(pattern)
        cols = len(pattern[0]) if rows > 0 else 0

        for r, line in enumerate(pattern):
            if len(line) != cols:
                raise ValueError(f"Pattern row {r} has {len(line)} cells, expected {cols}")

        grid = cls(rows, cols)
        for r, line in enumerate(pattern):
            for c, value in enumerate(line):
                grid.cells[r][c].alive = bool(value)
        return grid

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (rows, cols)."""
        return (self.rows, self.cols)

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return sum(1 for cell in self if cell.alive)

    def __iter__(self) -> Iterator[Cell]:
        """Iterate over cells row by row."""
        for line in self.cells:
            yield from line

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise CellOutOfRangeError(row, col, self.rows, self.cols)

    def cell(self, row: int, col: int) -> Cell:
        """Get the cell at the given coordinates.

        Raises:
            CellOutOfRangeError: If the coordinates are outside the grid
        """
        self._check_bounds(row, col)
        return self.cells[row][col]

    def get_cell(self, row: int, col: int) -> bool:
        """Get the state of a cell.

        Args:
            row: Row coordinate
            col: Column coordinate

        Returns:
            True if cell is alive, False if dead

        Raises:
            CellOutOfRangeError: If the coordinates are outside the grid
        """
        return self.cell(row, col).alive

    def set_cell(self, row: int, col: int, alive: bool) -> None:
        """Set the state of a cell.

        Args:
            row: Row coordinate
            col: Column coordinate
            alive: Whether the cell should be alive

        Raises:
            CellOutOfRangeError: If the coordinates are outside the grid; the
                grid is left unchanged
        """
        try:
            self._check_bounds(row, col)
        except CellOutOfRangeError:
            logger.debug("Rejected edit at (%d, %d) on %dx%d grid", row, col, self.rows, self.cols)
            raise
        self.cells[row][col].alive = bool(alive)

    def toggle_cell(self, row: int, col: int) -> bool:
        """Toggle the state of a cell.

        Returns:
            New state of the cell
        """
        new_state = not self.get_cell(row, col)
        self.set_cell(row, col, new_state)
        return new_state

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        for cell in self:
            cell.alive = False

    def randomize(self, probability: float = 0.1, seed: Optional[int] = None) -> None:
        """Randomly populate the grid.

        Args:
            probability: Chance each cell will be alive (0.0 to 1.0)
            seed: Optional seed for a reproducible fill
        """
        rng = np.random.default_rng(seed)
        mask = rng.random((self.rows, self.cols)) < probability
        for cell in self:
            cell.alive = bool(mask[cell.row, cell.col])

    def resize(self, new_rows: int, new_cols: int) -> None:
        """Grow or shrink the grid, keeping cells anchored at the top-left.

        A cell keeps its state when its coordinates are still valid in the
        new size. Added cells are dead.

        Args:
            new_rows: New number of rows
            new_cols: New number of columns

        Raises:
            ValueError: If either dimension is negative
        """
        _check_dimensions(new_rows, new_cols)
        if (new_rows, new_cols) == self.shape:
            return

        logger.debug("Resizing grid from %dx%d to %dx%d", self.rows, self.cols, new_rows, new_cols)

        # Columns first on the rows that survive, then add or drop whole rows
        kept = self.cells[:new_rows]
        for r, line in enumerate(kept):
            if new_cols < self.cols:
                del line[new_cols:]
            else:
                line.extend(Cell(r, c) for c in range(self.cols, new_cols))
        for r in range(len(kept), new_rows):
            kept.append([Cell(r, c) for c in range(new_cols)])

        self.cells = kept
        self.rows = new_rows
        self.cols = new_cols

    def neighbours(self, row: int, col: int) -> List[Cell]:
        """Get the cells around a position, clipped to the grid.

        The neighbourhood is the 3x3 block centred on (row, col) with the
        centre cell itself left out, so corners have 3 neighbours and edges
        have 5.

        Raises:
            CellOutOfRangeError: If the coordinates are outside the grid
        """
        centre = self.cell(row, col)
        result = []
        for r in range(max(0, row - 1), min(self.rows, row + 2)):
            for c in range(max(0, col - 1), min(self.cols, col + 2)):
                candidate = self.cells[r][c]
                if candidate is not centre:
                    result.append(candidate)
        return result

    def count_living_neighbours(self, cell: Cell) -> int:
        """Count living neighbours of a cell.

        Args:
            cell: A cell owned by this grid

        Returns:
            Number of living neighbours (0-8)
        """
        return sum(1 for neighbour in self.neighbours(cell.row, cell.col) if neighbour.alive)

    def count_all_neighbours(self) -> np.ndarray:
        """Count neighbours for all cells using PyTorch convolution.

        Zero padding keeps the edges bounded: positions outside the grid
        count as dead.

        Returns:
            Integer array of shape (rows, cols) with neighbour counts
        """
        if self.rows == 0 or self.cols == 0:
            return np.zeros((self.rows, self.cols), dtype=np.int8)

        snapshot = torch.from_numpy(self.to_array().astype(np.float32)).unsqueeze(0).unsqueeze(0)
        counts = F.conv2d(snapshot, _NEIGHBOUR_KERNEL, padding=1)
        return counts[0, 0].round().numpy().astype(np.int8)

    def advance(self) -> None:
        """Advance the grid one generation in place.

        Every neighbour count is taken from the current generation before
        any cell changes state.
        """
        counts = self.count_all_neighbours()
        for cell in self:
            cell.neighbours_alive = int(counts[cell.row, cell.col])

        for cell in self:
            cell.update_status()

    def to_list(self) -> List[List[bool]]:
        """Convert grid to nested list of booleans, rows outer."""
        return [[cell.alive for cell in line] for line in self.cells]

    def to_array(self) -> np.ndarray:
        """Convert grid to a boolean numpy array of shape (rows, cols)."""
        return np.array(self.to_list(), dtype=bool).reshape(self.rows, self.cols)

    def render(self, alive_glyph: str = ALIVE_GLYPH, dead_glyph: str = DEAD_GLYPH) -> str:
        """Render the grid as text, one glyph per cell and one line per row.

        Every row, including the last, ends with a newline.
        """
        return "".join(
            "".join(alive_glyph if cell.alive else dead_glyph for cell in line) + "\n" for line in self.cells
        )

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and self.to_list() == other.to_list()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols}, population={self.population})"


def _check_dimensions(rows: int, cols: int) -> None:
    if rows < 0 or cols < 0:
        raise ValueError(f"Grid dimensions must be non-negative, got {rows}x{cols}")
