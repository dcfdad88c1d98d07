"""Connectivity checks and random obstacle generation on a GridMap."""

from __future__ import annotations

import random
from collections import deque
from collections.abc import Callable

from gridpathlab.grid import CellState, GridMap
from gridpathlab.settings import Connectivity, ObstacleSettings

Point = tuple[int, int]

_DIRECTIONS: tuple[Point, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


def _search(
    rows: int,
    cols: int,
    passable: Callable[[Point], bool],
    start: Point,
    end: Point,
) -> list[Point]:
    """Breadth-first search; returns the path from start to end or []."""
    if not (0 <= start[0] < cols and 0 <= start[1] < rows):
        return []
    parent: dict[Point, Point | None] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == end:
            path: list[Point] = []
            point: Point | None = current
            while point is not None:
                path.append(point)
                point = parent[point]
            path.reverse()
            return path
        x, y = current
        for dx, dy in _DIRECTIONS:
            nxt = (x + dx, y + dy)
            if 0 <= nxt[0] < cols and 0 <= nxt[1] < rows and nxt not in parent:
                if passable(nxt) or nxt in (start, end):
                    parent[nxt] = current
                    queue.append(nxt)
    return []


def _map_search(grid_map: GridMap, start: Point | None, end: Point | None) -> list[Point]:
    if start is None or end is None:
        return []
    return _search(
        grid_map.rows,
        grid_map.cols,
        lambda p: grid_map.cell(p) == CellState.EMPTY,
        tuple(start),
        tuple(end),
    )


def path_exists(grid_map: GridMap, start: Point | None, end: Point | None) -> bool:
    """True if end can be reached from start through empty cells."""
    return bool(_map_search(grid_map, start, end))


def find_path_bfs(grid_map: GridMap, start: Point | None, end: Point | None) -> list[Point]:
    """A shortest path from start to end through empty cells, or []."""
    return _map_search(grid_map, start, end)


def count_paths(grid_map: GridMap, start: Point | None, end: Point | None) -> int:
    """1 if a path exists, otherwise 0; distinct paths are not counted."""
    return 1 if path_exists(grid_map, start, end) else 0


def generate_obstacles(grid_map: GridMap, settings: ObstacleSettings) -> list[Point]:
    """Clear the map (keeping start and end) and scatter random obstacles.

    Does nothing without a grid, start and end. Subscribers are told of each
    cell that changes. Returns the obstacle positions placed, in order.
    """
    if grid_map.rows <= 0 or grid_map.cols <= 0:
        return []
    start, end = grid_map.start, grid_map.end
    if start is None or end is None:
        return []

    rng = random.Random(settings.seed) if settings.use_seed else random.Random()
    rows, cols = grid_map.rows, grid_map.cols
    endpoints = (start, end)
    cells = [(x, y) for y in range(rows) for x in range(cols)]

    for pos in cells:
        if pos not in endpoints and grid_map.cell(pos) != CellState.EMPTY:
            grid_map.set_cell(pos, CellState.EMPTY)

    target = int((rows * cols - 2) * settings.density)
    obstacles: set[Point] = set()
    placed: list[Point] = []

    def connected() -> bool:
        return bool(_search(rows, cols, lambda p: p not in obstacles, start, end))

    if settings.connectivity == Connectivity.NO_PATH:
        available = [p for p in cells if p not in endpoints]
        rng.shuffle(available)
        for pos in available:
            if len(placed) >= target:
                break
            obstacles.add(pos)
            placed.append(pos)
            if not connected():
                break
    elif settings.connectivity == Connectivity.ONE_PATH:
        protected = set(_search(rows, cols, lambda p: True, start, end))
        if protected:
            available = [p for p in cells if p not in protected]
            rng.shuffle(available)
            for pos in available:
                if len(placed) >= target:
                    break
                obstacles.add(pos)
                if connected():
                    placed.append(pos)
                else:
                    obstacles.discard(pos)
    else:
        available = [p for p in cells if p not in endpoints]
        rng.shuffle(available)
        for pos in available:
            if len(placed) >= target:
                break
            obstacles.add(pos)
            if (1 if connected() else 0) >= settings.path_count:
                placed.append(pos)
            else:
                obstacles.discard(pos)

    for pos in placed:
        grid_map.set_cell(pos, CellState.OBSTACLE)
    return placed