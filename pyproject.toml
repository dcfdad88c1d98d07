[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridpathlab"
version = "0.1.0"
description = "Grid maps, random obstacle generation and path finding with A*, Dijkstra, BFS, DFS and D*"
requires-python = ">=3.10"
dependencies = []
keywords = ["pathfinding", "grid", "a-star", "dijkstra", "bfs", "dfs", "d-star", "maze"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gridpathlab = "gridpathlab.app:main"

[tool.hatch.build.targets.wheel]
packages = ["gridpathlab"]

[tool.pytest.ini_options]
addopts = "-ra"
