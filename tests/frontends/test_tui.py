"""Tests for the curses terminal frontend."""

import curses
from io import StringIO
from unittest.mock import Mock, call, patch

import pytest

from lifegrid.core.game import GameOfLife
from lifegrid.core.grid import Grid
from lifegrid.frontends.tui import INSTRUCTIONS, GameApp, create_parser, main, make_grid


@pytest.fixture
def app():
    """App showing a vertical blinker on a 3x3 grid."""
    return GameApp(GameOfLife(Grid.from_pattern([[False, True, False]] * 3)))


class TestGameApp:
    """Test cases for key handling and app state."""

    def test_initial_state(self, app):
        """The app starts outside edit mode at the origin."""
        assert app.cursor == (0, 0)
        assert app.editing is False
        assert app.exit is False
        assert app.grid is app.game.grid

    def test_cursor_moves_and_clamps(self, app):
        """Arrow keys move the cursor without leaving the grid."""
        app.handle_key(curses.KEY_UP)
        app.handle_key(curses.KEY_LEFT)
        assert app.cursor == (0, 0)

        for _ in range(5):
            app.handle_key(curses.KEY_DOWN)
            app.handle_key(curses.KEY_RIGHT)
        assert app.cursor == (2, 2)

    def test_edit_mode_resets_cursor(self, app):
        """Entering edit mode moves the cursor home; leaving keeps it."""
        app.handle_key(curses.KEY_DOWN)
        app.handle_key(ord("e"))
        assert app.editing is True
        assert app.cursor == (0, 0)

        app.handle_key(curses.KEY_RIGHT)
        app.handle_key(ord("e"))
        assert app.editing is False
        assert app.cursor == (0, 1)

    def test_toggle_only_while_editing(self, app):
        """The x key flips the cell under the cursor in edit mode."""
        app.handle_key(ord("x"))
        assert not app.grid.get_cell(0, 0)

        app.handle_key(ord("e"))
        app.handle_key(ord("x"))
        assert app.grid.get_cell(0, 0)

    @pytest.mark.parametrize("key", [ord(" "), ord("\n"), curses.KEY_ENTER])
    def test_advance_keys(self, app, key):
        """Space and enter advance one generation."""
        app.handle_key(key)

        assert app.game.generation == 1
        assert app.grid.to_list()[1] == [True, True, True]

    def test_clear_and_randomize(self, app):
        """The c key clears and r refills."""
        app.handle_key(ord("c"))
        assert app.grid.population == 0

        with patch.object(app.grid, "randomize") as mock_randomize:
            app.handle_key(ord("r"))
        mock_randomize.assert_called_once_with(0.25)

    @pytest.mark.parametrize("key", [ord("q"), ord("Q")])
    def test_quit(self, app, key):
        """Both q keys set the exit flag."""
        app.handle_key(key)
        assert app.exit is True

    def test_unknown_key(self, app):
        """Other keys do nothing."""
        app.handle_key(ord("z"))
        assert app.game.generation == 0
        assert app.exit is False

    def test_fit(self, app):
        """Fitting keeps the top-left cells and the cursor on the grid."""
        app.cursor = (2, 2)
        app.fit(4, 3)

        assert app.grid.shape == (2, 2)
        assert app.grid.get_cell(0, 1)
        assert app.grid.get_cell(1, 1)
        assert app.cursor == (1, 1)

    def test_fit_tiny_screen(self, app):
        """Screens smaller than the chrome give an empty grid."""
        app.fit(1, 0)

        assert app.grid.shape == (0, 0)
        app.handle_key(ord("e"))
        app.handle_key(ord("x"))
        assert app.cursor == (0, 0)

    def test_frame_lines(self, app):
        """Frames are title, grid rows and instructions."""
        app.handle_key(ord("e"))
        lines = app.frame_lines()

        assert lines[0] == "Game Of Life - generation 0, population 3 [editing]"
        assert lines[1:4] == ["▒█▒", "▒█▒", "▒█▒"]
        assert lines[4] == INSTRUCTIONS

    @patch("lifegrid.frontends.tui.curses")
    def test_render_fitted_frame(self, mock_curses):
        """A grid fitted to the screen still leaves the instructions visible."""
        mock_curses.error = curses.error
        stdscr = Mock()
        stdscr.getmaxyx.return_value = (24, 80)

        app = GameApp(GameOfLife(Grid.with_size(2, 2)), fit_to_terminal=True)
        app.fit(24, 80)
        app.render(stdscr)

        assert app.grid.shape == (22, 79)
        assert stdscr.addstr.call_count == 24
        assert stdscr.addstr.call_args_list[-1] == call(23, 0, INSTRUCTIONS[:79])

    @patch("lifegrid.frontends.tui.curses")
    def test_render_small_screen(self, mock_curses, app):
        """Lines beyond the screen height are not drawn."""
        mock_curses.error = curses.error
        stdscr = Mock()
        stdscr.getmaxyx.return_value = (3, 80)

        app.render(stdscr)

        assert stdscr.addstr.call_count == 3
        assert stdscr.addstr.call_args_list[-1] == call(2, 0, "▒█▒")

    @patch("lifegrid.frontends.tui.curses")
    def test_run_until_quit(self, mock_curses, app):
        """The loop draws, reads keys and stops on q."""
        mock_curses.KEY_RESIZE = curses.KEY_RESIZE
        mock_curses.error = curses.error
        stdscr = Mock()
        stdscr.getmaxyx.return_value = (24, 80)
        stdscr.getch.side_effect = [ord(" "), curses.KEY_RESIZE, ord("q")]

        app.run(stdscr)

        assert app.exit is True
        assert app.game.generation == 1
        assert app.grid.shape == (3, 3)
        assert stdscr.refresh.call_count == 3

    @patch("lifegrid.frontends.tui.curses")
    def test_run_fits_to_terminal(self, mock_curses):
        """Fitting apps follow the terminal size."""
        mock_curses.KEY_RESIZE = curses.KEY_RESIZE
        mock_curses.error = curses.error
        stdscr = Mock()
        stdscr.getmaxyx.side_effect = [(10, 20), (10, 20), (6, 8), (6, 8)]
        stdscr.getch.side_effect = [curses.KEY_RESIZE, ord("q")]

        app = GameApp(GameOfLife(Grid.with_size(2, 2)), fit_to_terminal=True)
        app.run(stdscr)

        assert app.grid.shape == (4, 7)


class TestEntryPoint:
    """Test grid setup and the main function."""

    def test_make_grid_default_size(self):
        """Without dimensions the grid is the pattern's size."""
        grid = make_grid("Toad", None, None)

        assert grid.shape == (4, 4)
        assert grid.population == 6

    def test_make_grid_resized(self):
        """Explicit dimensions resize around the top-left corner."""
        grid = make_grid("Toad", 6, None)

        assert grid.shape == (6, 4)
        assert grid.population == 6

    def test_make_grid_unknown(self):
        """Unknown patterns raise ValueError."""
        with pytest.raises(ValueError):
            make_grid("Nope", None, None)

    def test_parser_defaults(self):
        """The toad is the default pattern."""
        args = create_parser().parse_args([])

        assert args.pattern == "Toad"
        assert args.rows is None
        assert args.fit is False

    @patch("lifegrid.frontends.tui.curses.wrapper")
    def test_main(self, mock_wrapper):
        """Main hands the app loop to curses."""
        assert main(["--pattern", "Blinker"]) == 0
        mock_wrapper.assert_called_once()

    @patch("sys.stdout", new_callable=StringIO)
    def test_main_unknown_pattern(self, mock_stdout):
        """Unknown patterns exit with an error."""
        assert main(["--pattern", "Nope"]) == 1
        assert "Error: Pattern 'Nope' not found" in mock_stdout.getvalue()
