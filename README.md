# gridpathlab

gridpathlab works with rectangular grid maps. A map has obstacle cells, one
start cell and one end cell. The package finds a path across a map with one of
five search algorithms, steps a "car" along that path, and can scatter random
obstacles over a map. All moves are 4-connected (up, down, left, right).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
gridpathlab MAP [--algorithm {astar,dijkstra,bfs,dfs,dstar} | --code FILE] [--steps]
```

- `MAP` is a JSON map file in the format that `GridMap.save_json` writes. See
  below.
- `--algorithm` picks a built-in search. The default is `astar`.
- `--code FILE` reads a source file instead. The algorithm is guessed from its
  text with `detect_algorithm`, and the matching built-in search is run. The
  file itself is never executed.
- `--steps` prints the map again after every step of the car.

The command prints the map as text and then the path, in the form
`Path: (x, y) -> (x, y) -> ...`. Map cells are drawn with these characters:
`.` empty, `#` obstacle, `S` start, `E` end, `*` path, `+` visited path and
`C` the car. The command exits with status 1, and prints a message on
standard error, in any of these cases:

- the map or the code file cannot be read;
- no start or end is set;
- the algorithm cannot be recognised;
- no path exists.

## Library use

### Grid maps — `gridpathlab.grid`

`GridMap(rows, cols)` holds the cells, addressed by `(x, y)` points. Each cell
has a `CellState`: `EMPTY`, `OBSTACLE`, `START`, `END`, `PATH`, `CURRENT` or
`VISITED_PATH`.

- `set_cell(pos, state)` writes a cell and returns whether anything changed.
  A map has at most one start and one end. Setting a new one removes the old
  one. While `code_execution_mode` is on, only obstacles can be added or
  removed, and the start and end cannot be changed.
- `cell(pos)` reads a cell. A point outside the grid counts as empty.
- `create`, `clear`, `is_valid_pos`, `has_valid_start_and_end` and `has_path`
  do the obvious things. `start` and `end` are read-only properties.
- `grid_data()` returns rows of `1` for obstacles and `0` for every other cell.
- `to_dict` / `load_dict` and `save_json` / `load_json` store a map. The
  stored form holds `rows`, `cols` and `grid` (the integer cell states). It
  also holds `startPos` and `endPos`, each as `{"x": .., "y": ..}`, when they
  are set. Malformed data raises `MapFormatError`.
- `start_execution(path)` checks the path and marks it on the map. The path
  must be non-empty, stay inside the grid and avoid obstacles. Each step must
  move to a neighbouring cell, and the path must run from start to end. A path
  that fails any of these checks raises `PathValidationError`. Each call to
  `advance()` then moves `car_position` one step and marks the cells already
  passed as visited. `advance()` returns `False` once playback has finished.
- `clear_path(silent)`, `stop_execution(silent)` and
  `set_code_execution_mode(enabled)` end playback and remove path markings.
- `subscribe(callback)` registers a callback for `GridEvent` notifications:
  `GRID_CHANGED`, `PATH_CLEARED` and `EXECUTION_FINISHED`. It returns a
  function that unsubscribes the callback.

### Path finding — `gridpathlab.pathfinding`

The functions `astar`, `dijkstra`, `bfs`, `dfs` and `dstar` each take a 0/1
grid (`grid[y][x]`) and two `(x, y)` points. Each returns the path as a list
of points, or `[]` when the end cannot be reached. `dfs` returns the first
path it finds, which may be longer than the shortest path. `solve(algorithm,
...)` runs the search named by an `Algorithm` member.

```python
from gridpathlab.pathfinding import bfs

grid = [
    [0, 0, 0],
    [1, 1, 0],
    [0, 0, 0],
]
print(bfs(grid, (0, 0), (0, 2)))
```

`detect_algorithm(code)` guesses from keywords in a piece of source text which
algorithm the text implements. `detect_language(code)` guesses whether the
text is C++, Java or Python. Both return `None` when they cannot tell. The
text is only inspected, never run. The functions that use this guess differ
in how they report failure:

- `run_code(code, grid, start, end)` runs the matching built-in search. It
  raises `ExecutionError` for bad input or unrecognised code, and
  `NoPathError` when no path exists.
- `run_code_silently(...)` returns `None` on any failure.
- `run_code_for_update(...)` raises `NoPathError` for bad input or when no
  path exists. It returns `None` for unrecognised code.

`is_walkable` and `heuristic` (Manhattan distance) are also available.

### Sessions — `gridpathlab.app`

`Session(grid_map)` ties code and a map together. `run_code(code)` runs the
recognised algorithm and starts playback on the map. While the code is
running, every change to the grid recomputes the path with `update_path()`.
When no path is left, the session leaves execution mode and records a message
in `notices`. `stop()` ends playback. `set_algorithm_title(title)` stores a
name and falls back to "Custom algorithm" when the title is blank.
`generate_obstacles(settings)` returns a summary message. `render_grid(map)`
draws a map as the text shown by the command.

### Settings — `gridpathlab.settings`

- `GridSize(rows, cols)` accepts 1 to 100 of each. The default is 10 × 10.
- `ObstacleSettings` holds these fields. Values outside these ranges raise
  `ValueError`.
  - `density`: 0 to 1, default 0.30.
  - `connectivity`: a `Connectivity` value, default `ONE_PATH`.
  - `path_count`: 2 to 10, default 3.
  - `use_seed`: default off.
  - `seed`: 0 to 999999, default 12345.

### Random obstacles — `gridpathlab.obstacles`

`generate_obstacles(grid_map, settings)` does nothing unless the map has a
start and an end. Otherwise it clears every cell except the start and end. It
then places up to `int((rows * cols - 2) * density)` obstacles in random order
and returns their positions. With a seed, the same settings always give the
same layout. How obstacles are placed depends on `connectivity`:

- `NO_PATH` stops as soon as the start and end are cut off, or when the target
  number is reached. The target may be reached before the start and end are
  separated.
- `ONE_PATH` keeps one shortest route free and only places obstacles that
  leave the start and end connected.
- `MULTIPLE_PATHS` only places an obstacle if `count_paths` afterwards is at
  least `path_count`.

`path_exists` and `find_path_bfs` search through empty cells. `count_paths`
only reports 1 when a path exists and 0 otherwise. Because of this,
`MULTIPLE_PATHS` with the allowed `path_count` of 2 or more places no
obstacles.

### Syntax highlighting — `gridpathlab.highlighter`

`CodeHighlighter(theme)` has a `"light"` and a `"dark"` theme. It marks
these parts of C++, Java and Python text:

- keywords;
- `Q...` class names;
- `//` and `#` comments;
- strings;
- function names;
- numbers;
- `/* ... */` comments that span lines.

`highlight_block(text, previous_state)` returns the sorted `Span`s for one
line and the state to pass to the next line. `highlight(text)` does a whole
document. `line_number_digits(n)` gives the gutter width in digits.

## What it does not do

- There is no graphical editor. Maps are edited through `GridMap` or written
  as JSON files.
- Playback has no timer. The caller moves the car with `advance()`.
- Code given to `run_code` or `--code` is never compiled or executed. It only
  selects one of the five built-in searches.
- No catalogue of example programs is included.