"""
Closed-loop extraction and inside/outside classification for pipe mazes.
Pipeline: parse -> trace loop from start -> resolve start shape -> classify regions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from grid_parser import parse_grid
from grid_types import (
    CONNECTOR_TILES,
    AmbiguousStartShape,
    Classification,
    Coord,
    Direction,
    Label,
    NoClosedLoop,
    OddLengthLoop,
    PipeGrid,
    RuleSet,
    Tile,
    connects,
)

logger = logging.getLogger(__name__)

# Order in which the tracer tries to leave a tile
TRACE_ORDER = (Direction.N, Direction.S, Direction.W, Direction.E)


# =============================================================================
# Loop Tracing
# =============================================================================


def linked_neighbor(grid: PipeGrid, coord: Coord, direction: Direction) -> Coord | None:
    """
    The neighbor in `direction` if both tiles open toward each other.

    Returns None when either tile has no opening on the shared edge or the
    neighbor lies outside the grid.
    """
    if not connects(grid.at(coord), direction):
        return None
    neighbor = coord.step(direction)
    if not grid.contains(neighbor):
        return None
    if not connects(grid.at(neighbor), direction.opposite):
        return None
    return neighbor


@dataclass(frozen=True)
class _RouteStep:
    """Arena entry: one coordinate plus the index of the step before it."""

    coord: Coord
    parent: int | None
    length: int


def _unwind(arena: list[_RouteStep], index: int) -> tuple[Coord, ...]:
    route: list[Coord] = []
    current: int | None = index
    while current is not None:
        step = arena[current]
        route.append(step.coord)
        current = step.parent
    route.reverse()
    return tuple(route)


def trace_loop(grid: PipeGrid, start: Coord | None = None) -> tuple[Coord, ...]:
    """
    Find the closed loop through the start tile.

    Depth-first search over partial routes held in an explicit stack. Routes
    share prefixes through an arena of (coord, parent) steps, so pushing a
    route costs O(1). A route ends when the current tile links back to the
    start and the route is longer than two tiles.

    Args:
        grid: The maze
        start: Start coordinate; found with grid.find_start() if omitted

    Returns:
        The loop as an ordered cycle beginning at start, without the closing
        repeat of the start coordinate

    Raises:
        NoClosedLoop: If no route returns to the start
    """
    if start is None:
        start = grid.find_start()

    visited = [[False] * grid.cols for _ in range(grid.rows)]
    arena: list[_RouteStep] = [_RouteStep(start, None, 1)]
    stack: list[int] = [0]

    while stack:
        index = stack.pop()
        step = arena[index]
        current = step.coord
        visited[current.row][current.col] = True

        for direction in TRACE_ORDER:
            neighbor = linked_neighbor(grid, current, direction)
            if neighbor is None:
                continue
            if neighbor == start and step.length > 2:
                loop = _unwind(arena, index)
                logger.info("trace_loop: found loop of length %d from %s", len(loop), start)
                return loop
            if not visited[neighbor.row][neighbor.col]:
                arena.append(_RouteStep(neighbor, index, step.length + 1))
                stack.append(len(arena) - 1)

    raise NoClosedLoop(
        f"No closed loop through start tile at ({start.row}, {start.col})\n"
        f"  Explored {len(arena)} route steps before the search ran out"
    )


def farthest_step(loop: Sequence[Coord]) -> int:
    """Steps from the start to the farthest point along the loop."""
    if len(loop) % 2:
        raise OddLengthLoop(
            f"Loop has odd length {len(loop)}; a grid cycle must have even length"
        )
    return len(loop) // 2


# =============================================================================
# Start Resolution
# =============================================================================


def resolve_start(grid: PipeGrid, start: Coord | None = None) -> Tile:
    """
    Infer the connector shape hidden behind the start marker.

    A direction counts as open when the neighbor that way exists and opens
    back toward the start. Exactly one connector shape must match the four
    observations.

    Raises:
        AmbiguousStartShape: If no shape, or more than one, matches
    """
    if start is None:
        start = grid.find_start()

    observed: dict[Direction, bool] = {}
    for direction in Direction:
        neighbor = start.step(direction)
        observed[direction] = grid.contains(neighbor) and connects(
            grid.at(neighbor), direction.opposite
        )

    candidates = [
        tile
        for tile in CONNECTOR_TILES
        if all(connects(tile, d) == is_open for d, is_open in observed.items())
    ]
    if len(candidates) != 1:
        open_dirs = "".join(d.value for d, is_open in observed.items() if is_open) or "none"
        raise AmbiguousStartShape(
            f"Cannot resolve start tile at ({start.row}, {start.col})\n"
            f"  Neighbors opening toward it: {open_dirs}\n"
            f"  Matching shapes: {len(candidates)} (need exactly 1)"
        )

    logger.info("resolve_start: start at %s is %r", start, candidates[0].value)
    return candidates[0]


def isolate_loop(grid: PipeGrid, loop: Iterable[Coord]) -> PipeGrid:
    """Copy of grid where every tile not on the loop becomes ground."""
    on_loop = [[False] * grid.cols for _ in range(grid.rows)]
    for coord in loop:
        on_loop[coord.row][coord.col] = True
    return PipeGrid(
        tuple(
            tuple(tile if on_loop[r][c] else Tile.GROUND for c, tile in enumerate(row))
            for r, row in enumerate(grid.tiles)
        )
    )


# =============================================================================
# Region Classification
# =============================================================================


@dataclass(frozen=True)
class OpenCell:
    """Walker standing on a ground cell."""

    coord: Coord


@dataclass(frozen=True)
class Squeeze:
    """
    Walker squeezed into the gap between two edge-adjacent loop tiles.

    `first` is always the upper or left tile so each gap has one identity.
    """

    first: Coord
    second: Coord

    @staticmethod
    def between(a: Coord, b: Coord) -> Squeeze:
        return Squeeze(a, b) if a < b else Squeeze(b, a)


SearchState = OpenCell | Squeeze

# A lattice point where four cells meet; corner (r, c) is the top-left of cell (r, c)
Corner = tuple[int, int]


def corners_of(state: SearchState) -> tuple[Corner, ...]:
    """Lattice corners a state touches: 4 for a cell, the 2 ends for a gap."""
    match state:
        case OpenCell(coord=Coord(row=r, col=c)):
            return ((r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1))
        case Squeeze(first=a, second=b):
            if a.row == b.row:
                # Side by side: the gap runs vertically along b's west edge
                return ((a.row, b.col), (a.row + 1, b.col))
            # Stacked: the gap runs horizontally along b's north edge
            return ((b.row, a.col), (b.row, a.col + 1))
        case _:
            raise ValueError(f"Unknown search state: {state}")


def seals(grid: PipeGrid, a: Coord, b: Coord) -> bool:
    """Whether a pipe crosses the edge shared by a and b."""
    for direction in Direction:
        if a.step(direction) == b:
            return connects(grid.at(a), direction) and connects(grid.at(b), direction.opposite)
    raise ValueError(f"Tiles ({a.row}, {a.col}) and ({b.row}, {b.col}) do not share an edge")


class _Enclosure:
    """
    Walkable space of a loop-only grid.

    Pipes run from tile centers to edge midpoints, so lattice corners are
    never blocked. The walker moves between ground cells and unsealed gaps
    by passing through the corners they share; a corner on the grid
    perimeter opens onto the outside.
    """

    def __init__(self, grid: PipeGrid, rules: RuleSet) -> None:
        self.grid = grid
        self.rules = rules
        self.ground = [[tile is Tile.GROUND for tile in row] for row in grid.tiles]

    def on_perimeter(self, corner: Corner) -> bool:
        r, c = corner
        return r in (0, self.grid.rows) or c in (0, self.grid.cols)

    def _is_ground(self, coord: Coord) -> bool:
        return self.grid.contains(coord) and self.ground[coord.row][coord.col]

    def _is_wall(self, coord: Coord) -> bool:
        return self.grid.contains(coord) and not self.ground[coord.row][coord.col]

    def around(self, corner: Corner) -> list[SearchState]:
        """States reachable from a corner: surrounding ground and incident open gaps."""
        r, c = corner
        nw, ne = Coord(r - 1, c - 1), Coord(r - 1, c)
        sw, se = Coord(r, c - 1), Coord(r, c)

        states: list[SearchState] = [OpenCell(cell) for cell in (nw, ne, sw, se) if self._is_ground(cell)]
        if not self.rules.allow_squeeze:
            return states

        # The four edges meeting at this corner: above, below, left, right
        for a, b in ((nw, ne), (sw, se), (nw, sw), (ne, se)):
            if self._is_wall(a) and self._is_wall(b) and not seals(self.grid, a, b):
                states.append(Squeeze.between(a, b))
        return states

    def flood(self, origin: Coord) -> tuple[set[Coord], bool]:
        """
        Collect the ground cells connected to origin.

        Returns:
            (cells, escaped) where escaped is True if any corner reached lies
            on the grid perimeter
        """
        stack: list[SearchState] = [OpenCell(origin)]
        seen: set[SearchState] = {OpenCell(origin)}
        seen_corners: set[Corner] = set()
        cells: set[Coord] = set()
        escaped = False

        while stack:
            state = stack.pop()
            if isinstance(state, OpenCell):
                cells.add(state.coord)

            for corner in corners_of(state):
                if corner in seen_corners:
                    continue
                seen_corners.add(corner)
                if self.on_perimeter(corner):
                    escaped = True
                for nxt in self.around(corner):
                    if nxt not in seen:
                        seen.add(nxt)
                        stack.append(nxt)

        return cells, escaped


def classify_regions(
    grid: PipeGrid,
    loop: Iterable[Coord],
    rules: RuleSet | None = None,
    order: Iterable[Coord] | None = None,
) -> Classification:
    """
    Label every cell as loop, inside or outside.

    Tiles not on the loop count as ground. Each unlabeled ground cell seeds
    one flood over ground cells and squeeze gaps; the whole component gets
    OUTSIDE if the flood touched the grid perimeter and INSIDE otherwise.

    Args:
        grid: The maze with its start marker already replaced by the resolved shape
        loop: Coordinates of the loop tiles
        rules: Classification rules (default RuleSet())
        order: Scan order for seeding floods; row-major if omitted

    Returns:
        Classification covering every cell exactly once
    """
    if rules is None:
        rules = RuleSet()

    loop_grid = isolate_loop(grid, loop)
    enclosure = _Enclosure(loop_grid, rules)

    labels: list[list[Label | None]] = [
        [None if tile is Tile.GROUND else Label.LOOP for tile in row]
        for row in loop_grid.tiles
    ]

    components = 0
    for coord in order if order is not None else grid.coords():
        if labels[coord.row][coord.col] is not None:
            continue

        cells, escaped = enclosure.flood(coord)
        label = Label.OUTSIDE if escaped else Label.INSIDE
        for cell in cells:
            labels[cell.row][cell.col] = label
        components += 1
        logger.debug(
            "classify_regions: component at %s has %d cells -> %s", coord, len(cells), label.value
        )

    unlabeled = [(r, c) for r, row in enumerate(labels) for c, label in enumerate(row) if label is None]
    if unlabeled:
        raise ValueError(f"Scan order skipped {len(unlabeled)} cells, e.g. {unlabeled[0]}")

    result = Classification(tuple(tuple(row) for row in labels))  # type: ignore[arg-type]
    logger.info(
        "classify_regions: %d components, %d inside, %d outside",
        components,
        result.count(Label.INSIDE),
        result.count(Label.OUTSIDE),
    )
    return result


# =============================================================================
# Pipeline
# =============================================================================


@dataclass(frozen=True)
class MazeSolution:
    """Everything computed for one maze."""

    grid: PipeGrid  # Start marker replaced by its resolved shape
    start: Coord
    start_shape: Tile
    loop: tuple[Coord, ...]
    farthest: int
    classification: Classification

    @property
    def enclosed(self) -> int:
        return self.classification.count(Label.INSIDE)


def solve_grid(grid: PipeGrid, rules: RuleSet | None = None) -> MazeSolution:
    """Run tracing, start resolution and classification on a parsed grid."""
    start = grid.find_start()
    loop = trace_loop(grid, start)
    farthest = farthest_step(loop)
    shape = resolve_start(grid, start)
    resolved = grid.with_tile(start, shape)
    classification = classify_regions(resolved, loop, rules)
    return MazeSolution(resolved, start, shape, loop, farthest, classification)


def solve(rows: Sequence[str], rules: RuleSet | None = None) -> MazeSolution:
    """Parse raw rows and solve the maze."""
    return solve_grid(parse_grid(rows), rules)
