"""Grid maps, random obstacle generation, grid path-finding algorithms and a command line."""

__version__ = "0.1.0"
__all__ = ["app", "grid", "highlighter", "obstacles", "pathfinding", "settings"]