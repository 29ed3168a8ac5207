"""Grid path planning: A* and Dijkstra search, any-angle smoothing and a replanning loop."""

__version__ = "0.1.0"

__all__ = ["__version__"]