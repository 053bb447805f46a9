"""Curses terminal frontend for Conway's Game of Life."""

import argparse
import curses
import logging
import sys
from typing import List, Optional, Tuple

from ..core.grid import Grid
from ..core.game import GameOfLife
from ..core.patterns import PatternLibrary

logger = logging.getLogger(__name__)

TITLE = "Game Of Life"
INSTRUCTIONS = "Advance: <space>/<enter>  Edit: <e>  Toggle: <x>  Random: <r>  Clear: <c>  Quit: <q>"

# Title on the first line, instructions on the last
CHROME_ROWS = 2

ENTER_KEYS = (ord("\n"), ord("\r"), curses.KEY_ENTER)


class GameApp:
    """Presentation state for the terminal frontend.

    Holds the game, the cursor, the edit-mode flag and the exit flag. All
    simulation work is delegated to the game and its grid.
    """

    def __init__(self, game: GameOfLife, fit_to_terminal: bool = False) -> None:
        """Initialize the app.

        Args:
            game: Game to display and drive
            fit_to_terminal: Resize the grid whenever the terminal changes size
        """
        self.game = game
        self.fit_to_terminal = fit_to_terminal
        self.cursor: Tuple[int, int] = (0, 0)
        self.editing = False
        self.exit = False

    @property
    def grid(self) -> Grid:
        return self.game.grid

    def move_cursor(self, d_row: int, d_col: int) -> None:
        """Move the cursor, keeping it on the grid."""
        row = min(max(self.cursor[0] + d_row, 0), max(self.grid.rows - 1, 0))
        col = min(max(self.cursor[1] + d_col, 0), max(self.grid.cols - 1, 0))
        self.cursor = (row, col)

    def toggle_editing(self) -> None:
        if not self.editing:
            self.cursor = (0, 0)
        self.editing = not self.editing

    def toggle_cursor_cell(self) -> None:
        """Flip the cell under the cursor while editing."""
        if not self.editing or self.grid.rows == 0 or self.grid.cols == 0:
            return
        self.grid.toggle_cell(*self.cursor)
        self.game.clear_cycle_detection()

    def handle_key(self, key: int) -> None:
        """Apply one key press to the app state."""
        if key == curses.KEY_UP:
            self.move_cursor(-1, 0)
        elif key == curses.KEY_DOWN:
            self.move_cursor(1, 0)
        elif key == curses.KEY_LEFT:
            self.move_cursor(0, -1)
        elif key == curses.KEY_RIGHT:
            self.move_cursor(0, 1)
        elif key == ord("e"):
            self.toggle_editing()
        elif key == ord("x"):
            self.toggle_cursor_cell()
        elif key == ord(" ") or key in ENTER_KEYS:
            self.game.step()
        elif key == ord("r"):
            self.grid.randomize(0.25)
            self.game.clear_cycle_detection()
        elif key == ord("c"):
            self.grid.clear()
            self.game.clear_cycle_detection()
        elif key in (ord("q"), ord("Q")):
            self.exit = True

    def fit(self, screen_rows: int, screen_cols: int) -> None:
        """Resize the grid to the drawable part of a screen."""
        # The bottom-right screen cell cannot be written without a curses error
        rows = max(screen_rows - CHROME_ROWS, 0)
        cols = max(screen_cols - 1, 0)
        self.game.resize(rows, cols)
        self.move_cursor(0, 0)

    def status_line(self) -> str:
        mode = " [editing]" if self.editing else ""
        return f"{TITLE} - generation {self.game.generation}, population {self.game.population}{mode}"

    def frame_lines(self) -> List[str]:
        """Text lines for one frame: title, grid rows, instructions."""
        return [self.status_line()] + self.grid.render().splitlines() + [INSTRUCTIONS]

    def render(self, stdscr: "curses.window") -> None:
        """Draw the current frame."""
        stdscr.erase()
        max_y, max_x = stdscr.getmaxyx()
        lines = self.frame_lines()
        for y, line in enumerate(lines[:max_y]):
            try:
                stdscr.addstr(y, 0, line[: max_x - 1])
            except curses.error:
                pass

        if self.editing:
            curses.curs_set(1)
            cursor_y, cursor_x = self.cursor[0] + 1, self.cursor[1]
            if cursor_y < max_y and cursor_x < max_x:
                stdscr.move(cursor_y, cursor_x)
        else:
            curses.curs_set(0)

        stdscr.refresh()

    def run(self, stdscr: "curses.window") -> None:
        """Event loop: draw, wait for a key, apply it."""
        if self.fit_to_terminal:
            self.fit(*stdscr.getmaxyx())

        while not self.exit:
            self.render(stdscr)
            key = stdscr.getch()
            if key == curses.KEY_RESIZE:
                if self.fit_to_terminal:
                    self.fit(*stdscr.getmaxyx())
                continue
            self.handle_key(key)


def make_grid(pattern_name: str, rows: Optional[int], cols: Optional[int]) -> Grid:
    """Build the starting grid from a library pattern.

    Without explicit dimensions the grid is exactly the pattern's size.
    """
    pattern = PatternLibrary().get_pattern(pattern_name)
    if pattern is None:
        raise ValueError(f"Pattern '{pattern_name}' not found")

    grid = pattern.to_grid()
    if rows is not None or cols is not None:
        grid.resize(rows if rows is not None else grid.rows, cols if cols is not None else grid.cols)
    return grid


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(description="Step through Conway's Game of Life in the terminal")
    parser.add_argument("--pattern", type=str, default="Toad", help="Starting pattern (default: Toad)")
    parser.add_argument("-R", "--rows", type=int, help="Grid height (default: pattern height)")
    parser.add_argument("-C", "--cols", type=int, help="Grid width (default: pattern width)")
    parser.add_argument(
        "-f",
        "--fit",
        action="store_true",
        help="Size the grid to the terminal and follow terminal resizes",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the terminal frontend.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = create_parser().parse_args(argv)

    try:
        grid = make_grid(args.pattern, args.rows, args.cols)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    app = GameApp(GameOfLife(grid), fit_to_terminal=args.fit)
    try:
        curses.wrapper(app.run)
    except KeyboardInterrupt:
        pass

    logger.debug("Exited after %d generations", app.game.generation)
    return 0


if __name__ == "__main__":
    sys.exit(main())
