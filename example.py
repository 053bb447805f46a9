#!/usr/bin/env python3
"""
Example usage of the lifegrid package.
"""

from lifegrid import Grid, GameOfLife, PatternLibrary


def main():
    """Demonstrate programmatic usage of the lifegrid package."""
    library = PatternLibrary()
    toad = library.get_pattern("Toad")

    # Start from a grid exactly the toad's size, then give it some room
    grid = toad.to_grid()
    grid.resize(6, 8)
    game = GameOfLife(grid)

    print("Initial state:")
    print(grid.render(), end="")
    print(f"Population: {game.population}")
    print()

    for _ in range(4):
        game.step()
        print(f"Generation {game.generation}:")
        print(grid.render(), end="")
        print(f"Population: {game.population}")

        if game.cycle_detected:
            print(f"Cycle detected! Length: {game.cycle_length}")
            break

        print()

    # Edits outside the grid are rejected
    try:
        grid.set_cell(grid.rows, 0, True)
    except IndexError as e:
        print(f"Rejected edit: {e}")

    stats = game.get_statistics()
    print("Final statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
