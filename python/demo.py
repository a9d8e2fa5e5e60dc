"""
Demonstration script for the pipe maze solver.

Usage:
    python demo.py                 # solve every built-in layout
    python demo.py <layout name>   # solve one built-in layout
    python demo.py path/to/input   # solve a puzzle file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ascii_render import render, render_grid
from grid_parser import parse_grid_text
from grid_types import PipeMazeError
from pipemaze import solve_grid

LAYOUTS = dict(
    square="""
        .....
        .S-7.
        .|.|.
        .L-J.
        .....
    """,
    noisy="""
        -L|F7
        7S-7|
        L|7||
        -L-J|
        L|-JF
    """,
    bends="""
        7-F7-
        .FJ|7
        SJLL7
        |F--J
        LJ.LJ
    """,
    gap="""
        ...........
        .S-------7.
        .|F-----7|.
        .||.....||.
        .||.....||.
        .|L-7.F-J|.
        .|..|.|..|.
        .L--J.L--J.
        ...........
    """,
    squeeze="""
        ..........
        .S------7.
        .|F----7|.
        .||....||.
        .||....||.
        .|L-7F-J|.
        .|..||..|.
        .L--JL--J.
        ..........
    """,
)


def show(name: str, text: str) -> None:
    """Solve one maze and print the grid before and after classification."""
    print("=" * 40)
    print(f"{name}:")
    print("=" * 40)
    grid = parse_grid_text(text)
    print(render_grid(grid, box=True))
    print()

    try:
        solution = solve_grid(grid)
    except PipeMazeError as e:
        print(f"Failed: {type(e).__name__}: {e}")
        print()
        return

    print(render(solution.grid, solution.classification, color=True, box=True))
    print()
    print(f"Start shape:    {solution.start_shape.value}")
    print(f"Farthest step:  {solution.farthest}")
    print(f"Enclosed cells: {solution.enclosed}")
    print()


def main(argv: list[str]) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    if not argv:
        for name, text in LAYOUTS.items():
            show(name, text)
    elif argv[0] in LAYOUTS:
        show(argv[0], LAYOUTS[argv[0]])
    else:
        path = Path(argv[0])
        show(path.name, path.read_text())


if __name__ == "__main__":
    main(sys.argv[1:])
