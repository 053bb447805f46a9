"""Basic tests for the lifegrid package."""

from lifegrid import CellOutOfRangeError, GameOfLife, Grid, PatternLibrary


def test_grid_creation():
    """Test basic grid creation and cell operations."""
    grid = Grid.with_size(10, 10)
    assert grid.rows == 10
    assert grid.cols == 10
    assert grid.get_cell(0, 0) is False

    grid.set_cell(5, 5, True)
    assert grid.get_cell(5, 5) is True


def test_out_of_range_is_index_error():
    """Out-of-range edits raise an IndexError subclass."""
    assert issubclass(CellOutOfRangeError, IndexError)


def test_game_creation():
    """Test basic game creation."""
    grid = Grid.with_size(5, 5)
    game = GameOfLife(grid)
    assert game.population == 0

    grid.set_cell(2, 2, True)
    assert game.population == 1


def test_pattern_library():
    """Test pattern library has some patterns."""
    library = PatternLibrary()
    patterns = library.list_patterns()
    assert len(patterns) > 0
    assert "Toad" in patterns


def test_blinker_pattern():
    """Test the blinker pattern oscillates correctly."""
    grid = Grid.from_pattern(
        [
            [False, True, False],
            [False, True, False],
            [False, True, False],
        ]
    )

    grid.advance()
    assert grid.to_list() == [
        [False, False, False],
        [True, True, True],
        [False, False, False],
    ]

    grid.advance()
    assert grid.get_cell(0, 1) is True
    assert grid.get_cell(1, 1) is True
    assert grid.get_cell(2, 1) is True
    assert grid.population == 3
