"""A code-driven path-finding session on a grid map, and a command-line front end."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from gridpathlab import obstacles
from gridpathlab.grid import CellState, GridEvent, GridMap, MapFormatError, PathValidationError
from gridpathlab.pathfinding import (
    NO_PATH_AFTER_CHANGE,
    ExecutionError,
    NoPathError,
    run_code_for_update,
)
from gridpathlab.pathfinding import run_code as _run_algorithm_code
from gridpathlab.settings import Connectivity, ObstacleSettings

Point = tuple[int, int]

DEFAULT_ALGORITHM_NAME = "Custom algorithm"
EMPTY_CODE_MESSAGE = "The code editor is empty. Enter code or choose an example."
NO_ENDPOINTS_MESSAGE = "Create a grid map and set the start and end first."
PATH_INTERRUPTED_MESSAGE = (
    "The current path was interrupted because the obstacles changed.\n"
    "Adjust the map layout and run again."
)
NO_GRID_MESSAGE = "Please create a grid map"

_CELL_CHARS = {
    CellState.EMPTY: ".",
    CellState.OBSTACLE: "#",
    CellState.START: "S",
    CellState.END: "E",
    CellState.PATH: "*",
    CellState.CURRENT: "C",
    CellState.VISITED_PATH: "+",
}
CAR_CHAR = "C"


class Session:
    """Runs path-finding code against a grid map and keeps the path up to date.

    While code is executing, every change to the grid recomputes the path.
    Warnings that the user should see are collected in ``notices``.
    """

    def __init__(self, grid_map: GridMap | None = None) -> None:
        self.grid_map = grid_map if grid_map is not None else GridMap()
        self.algorithm_name = DEFAULT_ALGORITHM_NAME
        self.code = ""
        self.running = False
        self.had_path_before_change = False
        self.notices: list[str] = []
        self._unsubscribe = self.grid_map.subscribe(self._on_grid_event)

    def _on_grid_event(self, event: GridEvent) -> None:
        if event is GridEvent.EXECUTION_FINISHED:
            self._leave_execution()
        elif event is GridEvent.PATH_CLEARED:
            if self.grid_map.code_execution_mode:
                self.notices.append(PATH_INTERRUPTED_MESSAGE)
        elif event is GridEvent.GRID_CHANGED:
            if self.grid_map.code_execution_mode and self.code.strip():
                self.update_path()

    def _leave_execution(self) -> None:
        self.grid_map.set_code_execution_mode(False)
        self.running = False

    def set_algorithm_title(self, title: str) -> str:
        """Set the algorithm name; a blank title falls back to the default."""
        self.algorithm_name = title.strip() or DEFAULT_ALGORITHM_NAME
        return self.algorithm_name

    def run_code(self, code: str) -> list[Point]:
        """Run the algorithm recognised in ``code`` and start path playback.

        Raises ExecutionError for empty code, a missing start or end, or code
        that cannot be run; NoPathError when no path exists; and
        PathValidationError when the path cannot be played on the map.
        """
        stripped = code.strip()
        if not stripped:
            raise ExecutionError(EMPTY_CODE_MESSAGE)
        if not self.grid_map.has_valid_start_and_end():
            raise ExecutionError(NO_ENDPOINTS_MESSAGE)

        self.code = stripped
        self.grid_map.stop_execution()
        self.grid_map.set_code_execution_mode(True)
        self.running = True

        grid = self.grid_map.grid_data()
        try:
            path = _run_algorithm_code(stripped, grid, self.grid_map.start, self.grid_map.end)
        except ExecutionError:
            self._leave_execution()
            raise
        except NoPathError as exc:
            self.notices.append(str(exc))
            self.grid_map.clear_path()
            self._leave_execution()
            raise

        self.grid_map.start_execution(path)
        return path

    def stop(self) -> None:
        """Stop playback and leave code execution mode."""
        self.grid_map.stop_execution()
        self._leave_execution()

    def update_path(self, code: str | None = None) -> list[Point] | None:
        """Recompute and replay the path after the grid changed.

        Returns the new path, or None when nothing could be run or no path
        exists; in the last case execution mode is left and a notice recorded.
        """
        if not self.grid_map.has_valid_start_and_end():
            return None
        text = (self.code if code is None else code).strip()
        if not text:
            return None

        self.had_path_before_change = self.grid_map.has_path()
        grid = self.grid_map.grid_data()
        try:
            path = run_code_for_update(text, grid, self.grid_map.start, self.grid_map.end)
        except NoPathError as exc:
            self.notices.append(str(exc))
            self.grid_map.clear_path()
            self._leave_execution()
            return None
        if path is None:
            return None

        try:
            self.grid_map.start_execution(path)
        except PathValidationError as exc:
            self.notices.append(str(exc))
            return None
        return path

    def generate_obstacles(self, settings: ObstacleSettings) -> str:
        """Scatter random obstacles and return a summary of what was done.

        Raises ValueError when the map has no start or end.
        """
        if not self.grid_map.has_valid_start_and_end():
            raise ValueError(NO_ENDPOINTS_MESSAGE)
        obstacles.generate_obstacles(self.grid_map, settings)

        if settings.connectivity == Connectivity.NO_PATH:
            message = "Generated random obstacles (no passable path)"
        elif settings.connectivity == Connectivity.ONE_PATH:
            message = "Generated random obstacles (one passable path)"
        else:
            message = f"Generated random obstacles ({settings.path_count} passable paths)"
        if settings.use_seed:
            message += f", seed: {settings.seed}"
        return message


def render_grid(grid_map: GridMap) -> str:
    """Draw the map as text, one line per row, with the moving car shown as C."""
    if grid_map.rows <= 0 or grid_map.cols <= 0:
        return NO_GRID_MESSAGE
    endpoints = (grid_map.start, grid_map.end)
    lines = []
    for y in range(grid_map.rows):
        chars = []
        for x in range(grid_map.cols):
            pos = (x, y)
            if pos == grid_map.start:
                chars.append(_CELL_CHARS[CellState.START])
            elif pos == grid_map.end:
                chars.append(_CELL_CHARS[CellState.END])
            elif grid_map.is_executing and pos == grid_map.car_position and pos not in endpoints:
                chars.append(CAR_CHAR)
            else:
                chars.append(_CELL_CHARS[grid_map.cell(pos)])
        lines.append("".join(chars))
    return "\n".join(lines)


def _format_path(path: Sequence[Point]) -> str:
    return " -> ".join(f"({x}, {y})" for x, y in path)


def main(argv: Sequence[str] | None = None) -> int:
    """Load a map, run a path-finding algorithm on it and print the result."""
    parser = argparse.ArgumentParser(
        prog="gridpathlab",
        description="Run a path-finding algorithm on a stored grid map.",
    )
    parser.add_argument("map", help="JSON map file")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--algorithm",
        choices=("astar", "dijkstra", "bfs", "dfs", "dstar"),
        default="astar",
        help="built-in algorithm to run (default: astar)",
    )
    source.add_argument("--code", help="source file whose algorithm is recognised and run")
    parser.add_argument("--steps", action="store_true", help="print every playback step")
    args = parser.parse_args(argv)

    grid_map = GridMap()
    try:
        grid_map.load_json(args.map)
    except (OSError, MapFormatError) as exc:
        print(f"Cannot read map: {exc}", file=sys.stderr)
        return 1

    if args.code:
        try:
            code = Path(args.code).read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Cannot read code: {exc}", file=sys.stderr)
            return 1
    else:
        code = args.algorithm

    session = Session(grid_map)
    try:
        path = session.run_code(code)
    except (ExecutionError, NoPathError, PathValidationError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(render_grid(grid_map))
    print(f"Path: {_format_path(path)}")
    if args.steps:
        while grid_map.advance():
            print()
            print(render_grid(grid_map))
    return 0