"""Generation bookkeeping around the grid engine."""

from typing import Any, Deque, Dict, Optional, Tuple
from collections import deque
import numpy as np

from .grid import Grid


class GameOfLife:
    """Conway's Game of Life simulation driver.

    The grid applies the rules; this class counts generations, keeps a
    short population history and detects repeated states (cycles).
    """

    def __init__(self, grid: Grid) -> None:
        """Initialize the game with a grid.

        Args:
            grid: The cellular grid to simulate
        """
        self.grid = grid
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque(maxlen=1000)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()
        self._check_for_cycles()

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self.grid.advance()

        self._generation += 1
        self._update_population_history()
        self._check_for_cycles()

    def _update_population_history(self) -> None:
        self._population_history.append(self.population)

    def _state_key(self) -> bytes:
        return np.packbits(self.grid.to_array()).tobytes()

    def _check_for_cycles(self) -> None:
        """Record the current state, flagging a cycle if it was seen before."""
        if self._cycle_detected:
            return

        current_state = self._state_key()

        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            return

        self._seen_states[current_state] = self._generation
        self._state_history.append(current_state)

        # Forget the oldest states so long runs stay bounded in memory
        if len(self._state_history) > 900:
            old_state = self._state_history[0]
            if self._seen_states.get(old_state) == self._generation - len(self._state_history) + 1:
                del self._seen_states[old_state]

    def reset(self, clear_grid: bool = True) -> None:
        """Reset the simulation.

        Args:
            clear_grid: Whether to clear the grid as well
        """
        if clear_grid:
            self.grid.clear()

        self._generation = 0
        self._population_history.clear()
        self._update_population_history()
        self.clear_cycle_detection()

    def clear_cycle_detection(self) -> None:
        """Forget recorded states and start tracking from the current one.

        Call this after editing or resizing the grid by hand, since earlier
        states no longer describe the same evolution.
        """
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._seen_states.clear()
        self._state_history.clear()
        self._check_for_cycles()

    def resize(self, rows: int, cols: int) -> None:
        """Resize the grid and restart cycle detection."""
        self.grid.resize(rows, cols)
        self.clear_cycle_detection()

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run simulation until it becomes stable or cycles.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self.population == 0:
                return self._generation, "extinction"

            if self._cycle_detected:
                return self._generation, "cycle"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Calculate recent population change rate.

        Args:
            window_size: Number of recent generations to consider

        Returns:
            Average population change per generation
        """
        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        return float(np.mean(np.diff(recent_history)))

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_row, min_col, max_row, max_col) or None if no living cells
        """
        living_rows, living_cols = np.nonzero(self.grid.to_array())
        if len(living_rows) == 0:
            return None

        return (int(living_rows.min()), int(living_cols.min()), int(living_rows.max()), int(living_cols.max()))

    def get_statistics(self) -> Dict[str, Any]:
        """Get simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        area = self.grid.rows * self.grid.cols
        bbox = self.get_bounding_box()

        stats: Dict[str, Any] = {
            "generation": self._generation,
            "population": self.population,
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
            "population_density": self.population / area if area else 0.0,
            "bounding_box": bbox,
        }

        if bbox:
            stats["bounding_box_size"] = (bbox[2] - bbox[0] + 1, bbox[3] - bbox[1] + 1)
        else:
            stats["bounding_box_size"] = (0, 0)

        return stats
