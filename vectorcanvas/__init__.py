"""2D canvas geometry: paths, fill and stroke triangulation, gradient stops and shadows."""

__version__ = "0.1.0"
__all__ = ["earcut", "geometry", "path2d", "triangulation", "stroke", "style"]