"""Built-in grid path-finding algorithms and the logic that picks one from source code.

Grids are sequences of rows; ``grid[y][x]`` is 0 for a free cell and anything
else for an obstacle. Points are ``(x, y)`` tuples. Moves are 4-connected.
"""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterator, Sequence

Point = tuple[int, int]
Grid = Sequence[Sequence[int]]

DIRECTIONS: tuple[Point, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

NO_PATH_MESSAGE = "No path was found from the start to the end."
NO_PATH_AFTER_CHANGE = "The obstacles changed and no passable path can be found."

_GRID_EMPTY = "The grid data is empty."
_BAD_COORDINATES = "The start or end coordinates are invalid."
_START_BLOCKED = "The start position is not passable."
_END_BLOCKED = "The end position is not passable."
_UNKNOWN_ALGORITHM = (
    "The algorithm type could not be recognised. "
    "Make sure the code contains a proper algorithm implementation."
)
_INTERNAL_ERROR = "An unknown error occurred while running the algorithm."
_UPDATE_ERROR = "An error occurred while computing the path."


class Algorithm(enum.Enum):
    """Path-finding algorithms the executor knows how to run."""

    ASTAR = "A*"
    DIJKSTRA = "Dijkstra"
    BFS = "BFS"
    DFS = "DFS"
    DSTAR = "D*"


class Language(enum.Enum):
    """Programming languages that source code can be recognised as."""

    CPP = "C++"
    JAVA = "Java"
    PYTHON = "Python"


class ExecutionError(Exception):
    """The code could not be run against the grid."""


class NoPathError(Exception):
    """The algorithm ran but found no path between start and end."""


def detect_algorithm(code: str) -> Algorithm | None:
    """Guess which algorithm the given code implements, or None."""
    text = code.lower()

    if "astar" in text or ("heuristic" in text and "priority" in text) or "a*" in text:
        return Algorithm.ASTAR
    if "dijkstra" in text or ("distance" in text and "priority" in text):
        return Algorithm.DIJKSTRA
    if "bfs" in text or "breadth" in text or ("queue" in text and "priority" not in text):
        return Algorithm.BFS
    if any(word in text for word in ("dfs", "depth", "recursive", "stack")):
        return Algorithm.DFS
    if (
        "dstar" in text
        or "d*" in text
        or "backpointer" in text
        or ("insert" in text and "processstate" in text)
    ):
        return Algorithm.DSTAR
    return None


def detect_language(code: str) -> Language | None:
    """Guess the language the given code is written in, or None."""
    text = code.lower()
    if "#include" in text or "std::" in text:
        return Language.CPP
    if "import java" in text or "public class" in text:
        return Language.JAVA
    if "import " in text or "def " in text or "class " in text:
        return Language.PYTHON
    return None


def is_walkable(grid: Grid, x: int, y: int) -> bool:
    """True if (x, y) lies inside the grid on a free cell."""
    if not grid:
        return False
    return 0 <= x < len(grid[0]) and 0 <= y < len(grid) and grid[y][x] == 0


def heuristic(a: Point, b: Point) -> int:
    """Manhattan distance between two points."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _neighbours(point: Point) -> Iterator[Point]:
    x, y = point
    for dx, dy in DIRECTIONS:
        yield (x + dx, y + dy)


def _reconstruct(came_from: dict[Point, Point], start: Point, end: Point) -> list[Point]:
    path: list[Point] = []
    current: Point | None = end
    while current is not None:
        path.append(current)
        if current == start:
            break
        current = came_from.get(current)
    path.reverse()
    return path


def astar(grid: Grid, start: Point, end: Point) -> list[Point]:
    """A* search with the Manhattan heuristic; returns [] if unreachable."""
    g = {start: 0}
    h = {start: heuristic(start, end)}
    f = {start: h[start]}
    came_from: dict[Point, Point] = {}
    open_list = [start]
    closed: set[Point] = set()

    while open_list:
        current = min(open_list, key=f.__getitem__)
        open_list.remove(current)
        closed.add(current)

        if current == end:
            return _reconstruct(came_from, start, end)

        for neighbour in _neighbours(current):
            if not is_walkable(grid, *neighbour) or neighbour in closed:
                continue
            tentative = g[current] + 1
            if neighbour not in g:
                g[neighbour] = tentative
                h[neighbour] = heuristic(neighbour, end)
                f[neighbour] = tentative + h[neighbour]
                came_from[neighbour] = current
                open_list.append(neighbour)
            elif tentative < g[neighbour]:
                g[neighbour] = tentative
                f[neighbour] = tentative + h[neighbour]
                came_from[neighbour] = current
                if neighbour not in open_list:
                    open_list.append(neighbour)
    return []


def dijkstra(grid: Grid, start: Point, end: Point) -> list[Point]:
    """Dijkstra's algorithm with unit step costs; returns [] if unreachable."""
    infinity = float("inf")
    dist: dict[Point, int] = {start: 0}
    came_from: dict[Point, Point] = {}
    queue = [start]

    while queue:
        current = min(queue, key=lambda p: dist.get(p, infinity))
        queue.remove(current)

        if current == end:
            return _reconstruct(came_from, start, end)

        for neighbour in _neighbours(current):
            if not is_walkable(grid, *neighbour):
                continue
            new_dist = dist[current] + 1
            if new_dist < dist.get(neighbour, infinity):
                dist[neighbour] = new_dist
                came_from[neighbour] = current
                if neighbour not in queue:
                    queue.append(neighbour)
    return []


def bfs(grid: Grid, start: Point, end: Point) -> list[Point]:
    """Breadth-first search; returns [] if unreachable."""
    queue = deque([start])
    visited = {start}
    came_from: dict[Point, Point] = {}

    while queue:
        current = queue.popleft()
        if current == end:
            return _reconstruct(came_from, start, end)
        for neighbour in _neighbours(current):
            if is_walkable(grid, *neighbour) and neighbour not in visited:
                visited.add(neighbour)
                came_from[neighbour] = current
                queue.append(neighbour)
    return []


def dfs(grid: Grid, start: Point, end: Point) -> list[Point]:
    """Depth-first search with backtracking; returns [] if unreachable.

    Explores neighbours in the fixed direction order, so the first path found
    is deterministic but not necessarily the shortest.
    """
    if start == end:
        return [start]
    if not is_walkable(grid, *start):
        return []

    visited = {start}
    path = [start]
    stack = [_neighbours(start)]

    while stack:
        nxt = next(stack[-1], None)
        if nxt is None:
            stack.pop()
            path.pop()
            continue
        if nxt == end:
            path.append(nxt)
            return path
        if not is_walkable(grid, *nxt) or nxt in visited:
            continue
        visited.add(nxt)
        path.append(nxt)
        stack.append(_neighbours(nxt))
    return []


def dstar(grid: Grid, start: Point, end: Point) -> list[Point]:
    """Static D*: a search from the goal back towards the start.

    In an unchanging grid this reduces to A* run backwards; the path is read
    off by following parent links from the start to the goal.
    """
    g = {end: 0}
    h = {end: 0}
    k = {end: 0}
    parent: dict[Point, Point] = {}
    open_list = [end]
    in_open = {end}
    closed: set[Point] = set()

    while open_list:
        current = min(open_list, key=k.__getitem__)
        open_list.remove(current)
        in_open.discard(current)
        closed.add(current)

        if current == start:
            break

        for neighbour in _neighbours(current):
            if not is_walkable(grid, *neighbour) or neighbour in closed:
                continue
            new_g = g[current] + 1
            if neighbour not in in_open:
                g[neighbour] = new_g
                h[neighbour] = heuristic(neighbour, start)
                k[neighbour] = new_g + h[neighbour]
                parent[neighbour] = current
                in_open.add(neighbour)
                open_list.append(neighbour)
            elif new_g < g[neighbour]:
                g[neighbour] = new_g
                k[neighbour] = new_g + h[neighbour]
                parent[neighbour] = current

    limit = len(grid) * len(grid[0])
    path: list[Point] = []
    current: Point | None = start
    while current is not None and current != end:
        path.append(current)
        current = parent.get(current)
        if len(path) > limit:
            break

    if current == end:
        path.append(end)
        return path
    return []


_SOLVERS = {
    Algorithm.ASTAR: astar,
    Algorithm.DIJKSTRA: dijkstra,
    Algorithm.BFS: bfs,
    Algorithm.DFS: dfs,
    Algorithm.DSTAR: dstar,
}


def solve(algorithm: Algorithm, grid: Grid, start: Point, end: Point) -> list[Point]:
    """Run the named built-in algorithm."""
    return _SOLVERS[algorithm](grid, start, end)


def _input_problem(grid: Grid, start: Point, end: Point) -> str | None:
    if not grid or not grid[0]:
        return _GRID_EMPTY
    if min(start[0], start[1], end[0], end[1]) < 0:
        return _BAD_COORDINATES
    if not is_walkable(grid, *start):
        return _START_BLOCKED
    if not is_walkable(grid, *end):
        return _END_BLOCKED
    return None


def run_code(code: str, grid: Grid, start: Point, end: Point) -> list[Point]:
    """Run the algorithm recognised in ``code`` on the grid.

    Raises ExecutionError for bad input or unrecognised code, and NoPathError
    when the algorithm finds no path.
    """
    problem = _input_problem(grid, start, end)
    if problem:
        raise ExecutionError(problem)
    algorithm = detect_algorithm(code)
    if algorithm is None:
        raise ExecutionError(_UNKNOWN_ALGORITHM)
    try:
        path = solve(algorithm, grid, start, end)
    except Exception as exc:
        raise ExecutionError(_INTERNAL_ERROR) from exc
    if not path:
        raise NoPathError(NO_PATH_MESSAGE)
    return path


def run_code_silently(code: str, grid: Grid, start: Point, end: Point) -> list[Point] | None:
    """Like run_code, but return None instead of raising on any failure."""
    if _input_problem(grid, start, end):
        return None
    algorithm = detect_algorithm(code)
    if algorithm is None:
        return None
    try:
        path = solve(algorithm, grid, start, end)
    except Exception:
        return None
    return path or None


def run_code_for_update(code: str, grid: Grid, start: Point, end: Point) -> list[Point] | None:
    """Recompute a path after the grid changed.

    Returns the path, or None when the code is not recognised. Raises
    NoPathError for bad input, when no path exists (with NO_PATH_AFTER_CHANGE)
    or when the computation fails.
    """
    problem = _input_problem(grid, start, end)
    if problem:
        raise NoPathError(problem)
    algorithm = detect_algorithm(code)
    if algorithm is None:
        return None
    try:
        path = solve(algorithm, grid, start, end)
    except Exception as exc:
        raise NoPathError(_UPDATE_ERROR) from exc
    if not path:
        raise NoPathError(NO_PATH_AFTER_CHANGE)
    return path