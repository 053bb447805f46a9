"""Command-line interface for Conway's Game of Life."""

import argparse
import logging
import sys
import time
from typing import List, Optional, TextIO, Tuple

from ..core.grid import CellOutOfRangeError, Grid
from ..core.game import GameOfLife
from ..core.patterns import Pattern, PatternLibrary

INTERACTIVE_HELP = """Commands:
  step [N]              Advance N generations (default 1)
  set ROW COL 0|1       Set a cell dead (0) or alive (1)
  toggle ROW COL        Flip a cell
  resize ROWS COLS      Resize the grid, keeping the top-left corner
  clear                 Kill every cell
  reset                 Kill every cell and restart at generation 0
  load NAME [ROW COL]   Place a library pattern and restart at generation 0
  capture NAME          Store the living cells as a library pattern
  show                  Print the grid
  stats                 Print generation and population
  help                  Show this message
  quit                  Leave the command loop"""


class CLIGameOfLife:
    """Command-line interface for running Game of Life simulations."""

    def __init__(self) -> None:
        self.pattern_library = PatternLibrary()

    def build_grid(
        self,
        rows: int,
        cols: int,
        population_rate: float = 0.0,
        pattern: Optional[str] = None,
        pattern_row: Optional[int] = None,
        pattern_col: Optional[int] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> Grid:
        """Create the starting grid from a named pattern or a random fill.

        Args:
            rows: Grid height
            cols: Grid width
            population_rate: Random population rate (0.0-1.0) when no pattern is given
            pattern: Optional pattern name to load
            pattern_row: Row offset for the pattern (centred when omitted)
            pattern_col: Column offset for the pattern (centred when omitted)
            seed: Random seed for the fill
            verbose: Print progress updates

        Returns:
            Populated grid
        """
        grid = Grid.with_size(rows, cols)

        loaded_pattern = self.pattern_library.get_pattern(pattern) if pattern else None
        if pattern and not loaded_pattern:
            print(f"Warning: Pattern '{pattern}' not found, using random population")

        if loaded_pattern:
            pattern_rows, pattern_cols = loaded_pattern.get_size()
            if pattern_row is None:
                pattern_row = max(0, (rows - pattern_rows) // 2)
            if pattern_col is None:
                pattern_col = max(0, (cols - pattern_cols) // 2)
            if verbose:
                print(f"Loading pattern '{loaded_pattern.name}' at ({pattern_row}, {pattern_col})")
            loaded_pattern.apply_to_grid(grid, pattern_row, pattern_col)
        else:
            if verbose:
                print(f"Generating random population (rate: {population_rate:.2%})")
            grid.randomize(population_rate, seed=seed)

        return grid

    def run_simulation(
        self,
        rows: int,
        cols: int,
        population_rate: float,
        max_generations: int,
        pattern: Optional[str] = None,
        pattern_row: Optional[int] = None,
        pattern_col: Optional[int] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[int, str, dict]:
        """Run a Game of Life simulation until it stabilizes.

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        if verbose:
            print(f"Initializing {rows}x{cols} grid")

        grid = self.build_grid(rows, cols, population_rate, pattern, pattern_row, pattern_col, seed, verbose)
        game = GameOfLife(grid)
        initial_population = game.population

        if verbose:
            print(f"Initial population: {initial_population} cells")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(grid))

        start_time = time.time()

        if verbose:
            print(f"\nRunning simulation (max {max_generations} generations)...")

        final_generation, reason = game.run_until_stable(max_generations)

        duration = time.time() - start_time

        stats = game.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(grid))

        return final_generation, reason, stats

    def run_interactive(self, game: GameOfLife, stream: Optional[TextIO] = None) -> int:
        """Drive a game from line-based commands.

        Args:
            game: Game to drive
            stream: Command source (defaults to stdin)

        Returns:
            Exit code (0 for success)
        """
        stream = stream or sys.stdin
        print(self._format_grid(game.grid), end="")
        for line in stream:
            if not self.execute_command(game, line):
                break
        return 0

    def execute_command(self, game: GameOfLife, line: str) -> bool:
        """Run one interactive command.

        Args:
            game: Game to act on
            line: Raw command line

        Returns:
            False when the command loop should stop, True otherwise
        """
        parts = line.split()
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        grid = game.grid

        try:
            if command in ("quit", "exit", "q"):
                return False
            elif command == "step":
                count = int(args[0]) if args else 1
                if count < 0:
                    raise ValueError("Step count must be non-negative")
                for _ in range(count):
                    game.step()
                print(self._format_grid(grid), end="")
            elif command == "set":
                row, col, state = _parse_ints(args, 3, "set ROW COL 0|1")
                if state not in (0, 1):
                    raise ValueError("Usage: set ROW COL 0|1")
                grid.set_cell(row, col, state == 1)
                game.clear_cycle_detection()
            elif command == "toggle":
                row, col = _parse_ints(args, 2, "toggle ROW COL")
                grid.toggle_cell(row, col)
                game.clear_cycle_detection()
            elif command == "resize":
                new_rows, new_cols = _parse_ints(args, 2, "resize ROWS COLS")
                game.resize(new_rows, new_cols)
                print(self._format_grid(grid), end="")
            elif command == "clear":
                grid.clear()
                game.clear_cycle_detection()
            elif command == "reset":
                game.reset()
                print(self._format_grid(grid), end="")
            elif command == "load":
                self._load_pattern(grid, args)
                game.reset(clear_grid=False)
                print(self._format_grid(grid), end="")
            elif command == "capture":
                if len(args) != 1:
                    raise ValueError("Usage: capture NAME")
                pattern = Pattern.from_grid(grid, args[0], f"Captured at generation {game.generation}").normalize()
                self.pattern_library.add_pattern(pattern)
                print(f"Captured '{pattern.name}': {len(pattern.cells)} cells")
            elif command == "show":
                print(self._format_grid(grid), end="")
            elif command == "stats":
                print(
                    f"Generation {game.generation}, population {game.population}, "
                    f"grid {grid.rows}x{grid.cols}"
                )
            elif command == "help":
                print(INTERACTIVE_HELP)
            else:
                print(f"Error: Unknown command '{command}' (type 'help' for a list)")
        except (CellOutOfRangeError, ValueError) as e:
            print(f"Error: {e}")

        return True

    def _load_pattern(self, grid: Grid, args: List[str]) -> None:
        """Replace the grid contents with a library pattern.

        Cells that fall outside the grid are dropped.
        """
        if len(args) not in (1, 3):
            raise ValueError("Usage: load NAME [ROW COL]")
        pattern = self.pattern_library.get_pattern(args[0])
        if pattern is None:
            raise ValueError(f"Pattern '{args[0]}' not found")
        offset_row, offset_col = _parse_ints(args[1:], 2, "load NAME [ROW COL]") if len(args) == 3 else (0, 0)
        pattern.apply_to_grid(grid, offset_row, offset_col)

    def _format_grid(self, grid: Grid, max_size: int = 200) -> str:
        """Format grid for display, truncating if too large.

        Args:
            grid: Grid to format
            max_size: Maximum dimension to display

        Returns:
            Formatted grid string
        """
        if grid.rows > max_size or grid.cols > max_size:
            return f"Grid too large to display ({grid.rows}x{grid.cols})\n"

        return grid.render()

    def list_patterns(self) -> None:
        """List available patterns by category."""
        categories = self.pattern_library.get_patterns_by_category()

        print("Available patterns:")
        for category, pattern_names in categories.items():
            print(f"\n{category}:")
            for pattern_name in pattern_names:
                pattern = self.pattern_library.get_pattern(pattern_name)
                if pattern:
                    size = pattern.get_size()
                    print(f"  {pattern_name}: {size[0]}x{size[1]}, {len(pattern.cells)} cells")
                    if pattern.description:
                        print(f"    {pattern.description}")


def _parse_ints(args: List[str], count: int, usage: str) -> List[int]:
    if len(args) != count:
        raise ValueError(f"Usage: {usage}")
    try:
        return [int(arg) for arg in args]
    except ValueError:
        raise ValueError(f"Usage: {usage}") from None


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life on a bounded grid from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run random 20x40 simulation with 10% population
  lifegrid-cli --rows 20 --cols 40 --population 0.1

  # Run a glider and show the first and last grids
  lifegrid-cli -R 12 -C 12 --pattern Glider --show-grid

  # Step a toad by hand from stdin
  lifegrid-cli --pattern Toad -R 6 -C 6 --interactive

  # List available patterns
  lifegrid-cli --list-patterns
        """,
    )

    # Grid configuration
    parser.add_argument("-R", "--rows", type=int, default=20, help="Grid height (default: 20)")

    parser.add_argument("-C", "--cols", type=int, default=40, help="Grid width (default: 40)")

    parser.add_argument(
        "-p",
        "--population",
        type=float,
        default=0.1,
        help="Initial random population rate 0.0-1.0 (default: 0.1)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible initial population",
    )

    # Pattern configuration
    parser.add_argument(
        "--pattern",
        type=str,
        help="Load a specific pattern instead of random population",
    )

    parser.add_argument(
        "--pattern-row",
        type=int,
        help="Row offset for pattern placement (default: centred)",
    )

    parser.add_argument(
        "--pattern-col",
        type=int,
        help="Column offset for pattern placement (default: centred)",
    )

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=1000,
        help="Maximum generations to simulate (default: 1000)",
    )

    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Read commands (step, set, toggle, resize, ...) from stdin",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grid states",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List all available patterns and exit",
    )

    return parser


def format_finish_reason(reason: str, stats: dict) -> str:
    """Describe why a run stopped."""
    if reason == "extinction":
        return f"Extinction at generation {stats.get('generation', 0)}"
    if reason == "cycle":
        return (
            f"Repeating state, period {stats.get('cycle_length', 0)} "
            f"from generation {stats.get('cycle_start_generation', 0)}"
        )
    if reason == "max_generations":
        return f"Stopped at the generation limit ({stats.get('generation', 0)})"
    return f"Unknown reason: {reason}"


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print the summary of a batch run.

    Args:
        final_generation: Generation the run stopped at
        reason: Finish reason from GameOfLife.run_until_stable
        stats: Statistics from CLIGameOfLife.run_simulation
        verbose: Also list density, change rate, timing and the bounding box
    """
    rows, cols = stats["grid_size"]
    print(f"\n{rows}x{cols} grid stopped after {final_generation} generations: {format_finish_reason(reason, stats)}")
    print(
        f"Population: {stats['initial_population']} -> {stats['population']}, "
        f"Duration: {stats.get('duration_seconds', 0):.3f}s"
    )

    if not verbose:
        return

    print(f"  Density: {stats['population_density']:.2%}")
    print(f"  Change rate: {stats['population_change_rate']:.2f} cells/generation")
    if "generations_per_second" in stats:
        print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")

    bbox = stats["bounding_box"]
    if bbox:
        height, width = stats["bounding_box_size"]
        print(f"  Live area: rows {bbox[0]}-{bbox[2]}, cols {bbox[1]}-{bbox[3]} [{height}x{width}]")


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.rows < 0:
        errors.append("Rows must be non-negative")

    if args.cols < 0:
        errors.append("Columns must be non-negative")

    if not 0.0 <= args.population <= 1.0:
        errors.append("Population rate must be between 0.0 and 1.0")

    if args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if args.pattern_row is not None and args.pattern_row < 0:
        errors.append("Pattern row offset must be non-negative")

    if args.pattern_col is not None and args.pattern_col < 0:
        errors.append("Pattern column offset must be non-negative")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def configure_logging(verbose: bool) -> None:
    """Route library log records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    cli = CLIGameOfLife()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    if args.pattern and not cli.pattern_library.get_pattern(args.pattern):
        available = cli.pattern_library.list_patterns()
        print(f"Error: Pattern '{args.pattern}' not found")
        print(f"Available patterns: {', '.join(available)}")
        print("Use --list-patterns to see detailed information")
        return 1

    try:
        if args.interactive:
            grid = cli.build_grid(
                args.rows,
                args.cols,
                population_rate=args.population,
                pattern=args.pattern,
                pattern_row=args.pattern_row,
                pattern_col=args.pattern_col,
                seed=args.seed,
                verbose=args.verbose,
            )
            return cli.run_interactive(GameOfLife(grid))

        final_generation, reason, stats = cli.run_simulation(
            rows=args.rows,
            cols=args.cols,
            population_rate=args.population,
            max_generations=args.max_generations,
            pattern=args.pattern,
            pattern_row=args.pattern_row,
            pattern_col=args.pattern_col,
            seed=args.seed,
            verbose=args.verbose,
            show_grid=args.show_grid,
        )

        print_results(final_generation, reason, stats, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
