"""Parameters for creating a grid and for generating random obstacles."""

from __future__ import annotations

import enum
from dataclasses import dataclass

MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 100
DEFAULT_GRID_SIZE = 10

MIN_PATH_COUNT = 2
MAX_PATH_COUNT = 10
DEFAULT_PATH_COUNT = 3

MAX_SEED = 999999
DEFAULT_SEED = 12345
DEFAULT_DENSITY = 0.30


class Connectivity(enum.IntEnum):
    """How the start and end should be connected after obstacles are generated."""

    NO_PATH = 0
    ONE_PATH = 1
    MULTIPLE_PATHS = 2


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class GridSize:
    """Size of a new grid: 1 to 100 rows and columns, 10 x 10 by default."""

    rows: int = DEFAULT_GRID_SIZE
    cols: int = DEFAULT_GRID_SIZE

    def __post_init__(self) -> None:
        _check_range("rows", self.rows, MIN_GRID_SIZE, MAX_GRID_SIZE)
        _check_range("cols", self.cols, MIN_GRID_SIZE, MAX_GRID_SIZE)


@dataclass(frozen=True)
class ObstacleSettings:
    """Options for random obstacle generation."""

    density: float = DEFAULT_DENSITY
    connectivity: Connectivity = Connectivity.ONE_PATH
    path_count: int = DEFAULT_PATH_COUNT
    use_seed: bool = False
    seed: int = DEFAULT_SEED

    def __post_init__(self) -> None:
        _check_range("density", self.density, 0.0, 1.0)
        object.__setattr__(self, "connectivity", Connectivity(self.connectivity))
        _check_range("path_count", self.path_count, MIN_PATH_COUNT, MAX_PATH_COUNT)
        _check_range("seed", self.seed, 0, MAX_SEED)