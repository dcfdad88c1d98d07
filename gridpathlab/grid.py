"""The editable grid map: cell states, start and end, file storage and path playback."""

from __future__ import annotations

import enum
import json
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any

Point = tuple[int, int]


class CellState(enum.IntEnum):
    """What a single grid cell holds. The values are those stored in map files."""

    EMPTY = 0
    OBSTACLE = 1
    START = 2
    END = 3
    PATH = 4
    CURRENT = 5
    VISITED_PATH = 6


_PATH_STATES = frozenset({CellState.PATH, CellState.CURRENT, CellState.VISITED_PATH})


class GridEvent(enum.Enum):
    """Notifications a GridMap sends to its subscribers."""

    GRID_CHANGED = "grid_changed"
    PATH_CLEARED = "path_cleared"
    EXECUTION_FINISHED = "execution_finished"


class MapFormatError(ValueError):
    """A stored map could not be read."""


class PathValidationError(ValueError):
    """A path cannot be played back on the current map."""


def _to_int(value: Any) -> int:
    """Read a JSON value as an integer the lenient way: anything else becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _read_point(value: Any, rows: int, cols: int) -> Point | None:
    if not isinstance(value, dict) or "x" not in value or "y" not in value:
        return None
    x, y = _to_int(value["x"]), _to_int(value["y"])
    if 0 <= x < cols and 0 <= y < rows:
        return (x, y)
    return None


class GridMap:
    """A rows x cols grid of cells addressed by (x, y) points.

    Holds at most one start and one end, and can play back a path step by
    step, marking cells as the car moves along it.
    """

    def __init__(self, rows: int = 0, cols: int = 0) -> None:
        self._subscribers: list[Callable[[GridEvent], None]] = []
        self.rows = 0
        self.cols = 0
        self._cells: list[list[CellState]] = []
        self._start: Point | None = None
        self._end: Point | None = None
        self._current_path: list[Point] = []
        self._current_step = 0
        self.car_position: Point | None = None
        self.is_executing = False
        self.code_execution_mode = False
        self.create(rows, cols)

    # -- events -----------------------------------------------------------

    def subscribe(self, callback: Callable[[GridEvent], None]) -> Callable[[], None]:
        """Register a callback for grid events; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, event: GridEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)

    # -- basic state ------------------------------------------------------

    @property
    def start(self) -> Point | None:
        return self._start

    @property
    def end(self) -> Point | None:
        return self._end

    def create(self, rows: int, cols: int) -> None:
        """Replace the map with an empty grid of the given size."""
        if rows < 0 or cols < 0:
            raise ValueError(f"grid size cannot be negative: {rows} x {cols}")
        self.rows = rows
        self.cols = cols
        self._cells = [[CellState.EMPTY] * cols for _ in range(rows)]
        self._start = None
        self._end = None

    def clear(self) -> None:
        """Empty every cell and forget the start and end."""
        self._cells = [[CellState.EMPTY] * self.cols for _ in range(self.rows)]
        self._start = None
        self._end = None

    def is_valid_pos(self, pos: Point) -> bool:
        x, y = pos
        return 0 <= x < self.cols and 0 <= y < self.rows

    def cell(self, pos: Point) -> CellState:
        """State of the cell at pos; outside the grid counts as empty."""
        if not self.is_valid_pos(pos):
            return CellState.EMPTY
        x, y = pos
        return self._cells[y][x]

    def _put(self, pos: Point, state: CellState) -> None:
        x, y = pos
        self._cells[y][x] = state

    def set_cell(self, pos: Point, state: CellState) -> bool:
        """Set a cell, keeping start and end unique.

        While code is executing only obstacles can be placed or removed, and
        the start and end cannot be touched. Returns True if the grid changed.
        """
        pos = (pos[0], pos[1])
        state = CellState(state)
        if not self.is_valid_pos(pos):
            return False

        old = self.cell(pos)
        if self.code_execution_mode:
            if state not in (CellState.OBSTACLE, CellState.EMPTY):
                return False
            if old in (CellState.START, CellState.END):
                return False

        if old == CellState.START:
            self._start = None
        elif old == CellState.END:
            self._end = None

        if state == CellState.START:
            if self._start is not None:
                self._put(self._start, CellState.EMPTY)
            self._start = pos
            self._put(pos, CellState.START)
            changed = True
        elif state == CellState.END:
            if self._end is not None:
                self._put(self._end, CellState.EMPTY)
            self._end = pos
            self._put(pos, CellState.END)
            changed = True
        else:
            if pos == self._start:
                self._start = None
            if pos == self._end:
                self._end = None
            self._put(pos, state)
            changed = old != state

        if changed:
            self._emit(GridEvent.GRID_CHANGED)
        return changed

    # -- storage ----------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """The map in its stored form."""
        data: dict[str, Any] = {
            "rows": self.rows,
            "cols": self.cols,
            "grid": [[int(state) for state in row] for row in self._cells],
        }
        if self._start is not None:
            data["startPos"] = {"x": self._start[0], "y": self._start[1]}
        if self._end is not None:
            data["endPos"] = {"x": self._end[0], "y": self._end[1]}
        return data

    def load_dict(self, data: Any) -> None:
        """Replace the map with one in stored form; raises MapFormatError if invalid."""
        if not isinstance(data, dict) or not all(k in data for k in ("rows", "cols", "grid")):
            raise MapFormatError("The JSON file is missing required fields (rows, cols, grid)")

        rows, cols = _to_int(data["rows"]), _to_int(data["cols"])
        if rows <= 0 or cols <= 0:
            raise MapFormatError(f"Invalid grid size (rows: {rows}, cols: {cols})")

        grid_data = data["grid"] if isinstance(data["grid"], list) else []
        if len(grid_data) != rows:
            raise MapFormatError("The number of grid rows does not match the declaration")

        cells: list[list[CellState]] = []
        for number, raw_row in enumerate(grid_data, start=1):
            row = raw_row if isinstance(raw_row, list) else []
            if len(row) != cols:
                raise MapFormatError(
                    f"Row {number} has a column count that does not match the declaration"
                )
            values = [_to_int(value) for value in row]
            for value in values:
                if not CellState.EMPTY <= value <= CellState.VISITED_PATH:
                    raise MapFormatError(f"The grid data contains an invalid value: {value}")
            cells.append([CellState(value) for value in values])

        self.create(rows, cols)
        self._cells = cells
        self._start = _read_point(data.get("startPos"), rows, cols)
        self._end = _read_point(data.get("endPos"), rows, cols)

    def save_json(self, filename: str | Path) -> None:
        """Write the map to a JSON file."""
        with open(filename, "w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=4)
            handle.write("\n")

    def load_json(self, filename: str | Path) -> None:
        """Read the map from a JSON file; raises MapFormatError if it is malformed."""
        with open(filename, "rb") as handle:
            raw = handle.read()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MapFormatError(f"Cannot parse the JSON file: {exc}") from exc
        self.load_dict(data)

    # -- path playback ----------------------------------------------------

    def _validate_path(self, path: Sequence[Point]) -> None:
        last = len(path) - 1
        previous: Point | None = None
        for index, pos in enumerate(path):
            x, y = pos
            if not self.is_valid_pos(pos):
                raise PathValidationError(f"The path contains an invalid coordinate: ({x}, {y})")
            if 0 < index < last and self.cell(pos) == CellState.OBSTACLE:
                raise PathValidationError(f"The path passes through an obstacle: ({x}, {y})")
            if previous is not None:
                px, py = previous
                if abs(x - px) + abs(y - py) != 1:
                    raise PathValidationError(
                        f"The path is not continuous: from ({px}, {py}) to ({x}, {y})"
                    )
            previous = pos

        if self._start is None or self._end is None:
            raise PathValidationError("Set the start and end first.")
        if path[0] != self._start:
            raise PathValidationError("The start of the path does not match the map start.")
        if path[-1] != self._end:
            raise PathValidationError("The end of the path does not match the map end.")

    def start_execution(self, path: Iterable[Point]) -> None:
        """Show a path and put the car at the start, ready for advance()."""
        points = [(p[0], p[1]) for p in path]
        if not points:
            raise PathValidationError("The path is empty.")
        if self.is_executing:
            self.stop_execution()

        self._validate_path(points)
        self.clear_path()
        for pos in points[1:-1]:
            if self.cell(pos) == CellState.EMPTY:
                self._put(pos, CellState.PATH)

        self._current_path = points
        self._current_step = 0
        self.car_position = self._start
        self.is_executing = True

    def _restore_endpoints(self) -> None:
        if self._start is not None:
            self._put(self._start, CellState.START)
        if self._end is not None:
            self._put(self._end, CellState.END)

    def advance(self) -> bool:
        """Move the car one step along the path.

        Returns True while the car moved. Once it has passed the end, playback
        stops quietly, EXECUTION_FINISHED is sent and False is returned.
        """
        if not self.is_executing:
            return False
        if self._current_step >= len(self._current_path):
            self.stop_execution(silent=True)
            self._emit(GridEvent.EXECUTION_FINISHED)
            return False

        if self._current_step > 0:
            previous = self._current_path[self._current_step - 1]
            if previous not in (self._start, self._end):
                self._put(previous, CellState.VISITED_PATH)
            self._restore_endpoints()

        self.car_position = self._current_path[self._current_step]
        self._current_step += 1
        return True

    def clear_path(self, silent: bool = False) -> bool:
        """Remove path markings, keeping start and end; returns True if any were removed."""
        cleared = False
        for y, row in enumerate(self._cells):
            for x, state in enumerate(row):
                if (x, y) in (self._start, self._end):
                    continue
                if state in _PATH_STATES:
                    row[x] = CellState.EMPTY
                    cleared = True
        self._restore_endpoints()
        if cleared and not silent:
            self._emit(GridEvent.PATH_CLEARED)
        return cleared

    def stop_execution(self, silent: bool = False) -> None:
        """Stop playback, return the car to the start and clear the path."""
        if not self.is_executing:
            return
        self.is_executing = False
        self.car_position = self._start
        self.clear_path(silent=silent)

    # -- queries ----------------------------------------------------------

    def grid_data(self) -> list[list[int]]:
        """The grid as algorithms see it: 1 for obstacles, 0 for everything else."""
        return [
            [1 if state == CellState.OBSTACLE else 0 for state in row] for row in self._cells
        ]

    def has_valid_start_and_end(self) -> bool:
        return self._start is not None and self._end is not None

    def has_path(self) -> bool:
        """True if any cell carries a path marking."""
        return any(state in _PATH_STATES for row in self._cells for state in row)

    def set_code_execution_mode(self, enabled: bool) -> None:
        """Enter or leave code execution mode; leaving it stops playback and clears the path."""
        self.code_execution_mode = enabled
        if not enabled:
            if self.is_executing:
                self.stop_execution()
            else:
                self.clear_path()