import json

import pytest

from gridpathlab.grid import (
    CellState,
    GridEvent,
    GridMap,
    MapFormatError,
    PathValidationError,
)


def _line_map(length=3):
    grid = GridMap(1, length)
    grid.set_cell((0, 0), CellState.START)
    grid.set_cell((length - 1, 0), CellState.END)
    return grid


def _recorder(grid):
    events = []
    grid.subscribe(events.append)
    return events


def test_create_makes_empty_grid():
    grid = GridMap(2, 4)
    assert (grid.rows, grid.cols) == (2, 4)
    assert grid.grid_data() == [[0, 0, 0, 0], [0, 0, 0, 0]]
    assert grid.start is None and grid.end is None


def test_create_rejects_negative_size():
    with pytest.raises(ValueError):
        GridMap(-1, 3)


def test_cell_outside_grid_is_empty():
    grid = GridMap(2, 2)
    grid.set_cell((0, 0), CellState.OBSTACLE)
    assert grid.cell((5, 5)) == CellState.EMPTY
    assert grid.cell((0, 0)) == CellState.OBSTACLE


def test_is_valid_pos_uses_x_as_column():
    grid = GridMap(2, 3)
    assert grid.is_valid_pos((2, 1))
    assert not grid.is_valid_pos((1, 2))
    assert not grid.is_valid_pos((-1, 0))


def test_set_start_moves_previous_start():
    grid = GridMap(3, 3)
    grid.set_cell((0, 0), CellState.START)
    grid.set_cell((2, 1), CellState.START)
    assert grid.start == (2, 1)
    assert grid.cell((0, 0)) == CellState.EMPTY
    assert grid.cell((2, 1)) == CellState.START


def test_set_end_over_start_clears_start():
    grid = GridMap(3, 3)
    grid.set_cell((1, 1), CellState.START)
    grid.set_cell((1, 1), CellState.END)
    assert grid.start is None
    assert grid.end == (1, 1)


def test_obstacle_over_end_clears_end():
    grid = GridMap(3, 3)
    grid.set_cell((2, 2), CellState.END)
    grid.set_cell((2, 2), CellState.OBSTACLE)
    assert grid.end is None
    assert grid.cell((2, 2)) == CellState.OBSTACLE


def test_grid_changed_only_on_real_change():
    grid = GridMap(2, 2)
    events = _recorder(grid)
    assert grid.set_cell((0, 0), CellState.OBSTACLE) is True
    assert grid.set_cell((0, 0), CellState.OBSTACLE) is False
    assert events == [GridEvent.GRID_CHANGED]


def test_set_cell_outside_grid_changes_nothing():
    grid = GridMap(2, 2)
    events = _recorder(grid)
    assert grid.set_cell((3, 0), CellState.OBSTACLE) is False
    assert events == []


def test_unsubscribe_stops_events():
    grid = GridMap(2, 2)
    events = []
    unsubscribe = grid.subscribe(events.append)
    unsubscribe()
    grid.set_cell((1, 1), CellState.OBSTACLE)
    assert events == []


def test_execution_mode_restricts_edits():
    grid = _line_map(4)
    grid.set_code_execution_mode(True)
    assert grid.set_cell((1, 0), CellState.START) is False
    assert grid.set_cell((0, 0), CellState.OBSTACLE) is False
    assert grid.set_cell((1, 0), CellState.OBSTACLE) is True
    assert grid.start == (0, 0)
    assert grid.cell((1, 0)) == CellState.OBSTACLE


def test_clear_resets_cells_and_endpoints():
    grid = _line_map()
    grid.set_cell((1, 0), CellState.OBSTACLE)
    grid.clear()
    assert grid.grid_data() == [[0, 0, 0]]
    assert not grid.has_valid_start_and_end()


def test_grid_data_marks_only_obstacles():
    grid = _line_map()
    grid.set_cell((1, 0), CellState.OBSTACLE)
    assert grid.grid_data() == [[0, 1, 0]]


def test_to_dict_format():
    grid = GridMap(1, 2)
    grid.set_cell((0, 0), CellState.START)
    grid.set_cell((1, 0), CellState.END)
    assert grid.to_dict() == {
        "rows": 1,
        "cols": 2,
        "grid": [[2, 3]],
        "startPos": {"x": 0, "y": 0},
        "endPos": {"x": 1, "y": 0},
    }


def test_to_dict_omits_missing_endpoints():
    data = GridMap(1, 1).to_dict()
    assert "startPos" not in data and "endPos" not in data


def test_json_round_trip(tmp_path):
    grid = GridMap(3, 4)
    grid.set_cell((0, 0), CellState.START)
    grid.set_cell((3, 2), CellState.END)
    grid.set_cell((1, 1), CellState.OBSTACLE)
    target = tmp_path / "map.json"
    grid.save_json(target)

    loaded = GridMap()
    loaded.load_json(target)
    assert loaded.to_dict() == grid.to_dict()
    assert loaded.start == (0, 0)
    assert loaded.end == (3, 2)


def test_load_json_rejects_bad_json(tmp_path):
    target = tmp_path / "bad.json"
    target.write_text("{not json", encoding="utf-8")
    with pytest.raises(MapFormatError):
        GridMap().load_json(target)


def test_load_json_missing_file(tmp_path):
    with pytest.raises(OSError):
        GridMap().load_json(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "data",
    [
        {"rows": 1, "cols": 1},
        [1, 2],
        {"rows": 0, "cols": 2, "grid": []},
        {"rows": 2, "cols": 1, "grid": [[0]]},
        {"rows": 1, "cols": 2, "grid": [[0]]},
        {"rows": 1, "cols": 2, "grid": [[0, 7]]},
        {"rows": 1, "cols": 1, "grid": [[-1]]},
    ],
)
def test_load_dict_rejects_invalid(data):
    with pytest.raises(MapFormatError):
        GridMap().load_dict(data)


def test_failed_load_keeps_previous_map():
    grid = _line_map()
    with pytest.raises(MapFormatError):
        grid.load_dict({"rows": 1, "cols": 2, "grid": [[0, 9]]})
    assert grid.start == (0, 0)
    assert grid.cols == 3


def test_load_dict_ignores_out_of_range_endpoints():
    grid = GridMap()
    grid.load_dict(
        {
            "rows": 1,
            "cols": 2,
            "grid": [[0, 4]],
            "startPos": {"x": 5, "y": 0},
            "endPos": {"x": 1, "y": 0},
        }
    )
    assert grid.start is None
    assert grid.end == (1, 0)
    assert grid.cell((1, 0)) == CellState.PATH


def test_start_execution_marks_path():
    grid = _line_map()
    grid.start_execution([(0, 0), (1, 0), (2, 0)])
    assert grid.is_executing
    assert grid.car_position == (0, 0)
    assert grid.cell((1, 0)) == CellState.PATH
    assert grid.has_path()


def test_start_execution_rejects_empty_path():
    with pytest.raises(PathValidationError):
        _line_map().start_execution([])


def test_start_execution_rejects_invalid_coordinate():
    with pytest.raises(PathValidationError):
        _line_map().start_execution([(0, 0), (0, 1)])


def test_start_execution_rejects_obstacle():
    grid = _line_map()
    grid.set_cell((1, 0), CellState.OBSTACLE)
    with pytest.raises(PathValidationError):
        grid.start_execution([(0, 0), (1, 0), (2, 0)])


def test_start_execution_rejects_gap():
    with pytest.raises(PathValidationError):
        _line_map().start_execution([(0, 0), (2, 0)])


def test_start_execution_requires_endpoints():
    grid = GridMap(1, 3)
    with pytest.raises(PathValidationError):
        grid.start_execution([(0, 0), (1, 0)])


def test_start_execution_rejects_mismatched_ends():
    grid = _line_map()
    with pytest.raises(PathValidationError):
        grid.start_execution([(1, 0), (2, 0)])
    with pytest.raises(PathValidationError):
        grid.start_execution([(0, 0), (1, 0)])


def test_advance_plays_path_to_the_end():
    grid = _line_map()
    events = _recorder(grid)
    path = [(0, 0), (1, 0), (2, 0)]
    grid.start_execution(path)

    positions = []
    while grid.advance():
        positions.append(grid.car_position)
        if grid.car_position == (2, 0):
            assert grid.cell((1, 0)) == CellState.VISITED_PATH
    assert positions == path
    assert not grid.is_executing
    assert grid.car_position == grid.start
    assert not grid.has_path()
    assert grid.cell((0, 0)) == CellState.START
    assert grid.cell((2, 0)) == CellState.END
    assert events == [GridEvent.EXECUTION_FINISHED]


def test_advance_when_idle_returns_false():
    grid = _line_map()
    events = _recorder(grid)
    assert grid.advance() is False
    assert events == []


def test_stop_execution_clears_path_and_notifies():
    grid = _line_map()
    events = _recorder(grid)
    grid.start_execution([(0, 0), (1, 0), (2, 0)])
    grid.advance()
    grid.stop_execution()
    assert not grid.is_executing
    assert grid.car_position == (0, 0)
    assert grid.cell((1, 0)) == CellState.EMPTY
    assert events == [GridEvent.PATH_CLEARED]


def test_silent_clear_path_sends_nothing():
    grid = _line_map()
    grid.start_execution([(0, 0), (1, 0), (2, 0)])
    events = _recorder(grid)
    assert grid.clear_path(silent=True) is True
    assert events == []
    assert not grid.has_path()


def test_clear_path_without_markings():
    grid = _line_map()
    events = _recorder(grid)
    assert grid.clear_path() is False
    assert events == []


def test_leaving_execution_mode_stops_playback():
    grid = _line_map()
    grid.set_code_execution_mode(True)
    grid.start_execution([(0, 0), (1, 0), (2, 0)])
    grid.set_code_execution_mode(False)
    assert not grid.code_execution_mode
    assert not grid.is_executing
    assert not grid.has_path()


def test_restart_while_executing_replaces_path():
    grid = GridMap(2, 2)
    grid.set_cell((0, 0), CellState.START)
    grid.set_cell((1, 1), CellState.END)
    grid.start_execution([(0, 0), (1, 0), (1, 1)])
    grid.start_execution([(0, 0), (0, 1), (1, 1)])
    assert grid.cell((1, 0)) == CellState.EMPTY
    assert grid.cell((0, 1)) == CellState.PATH


def test_saved_file_is_json(tmp_path):
    grid = _line_map()
    target = tmp_path / "m.json"
    grid.save_json(target)
    assert json.loads(target.read_text(encoding="utf-8")) == grid.to_dict()