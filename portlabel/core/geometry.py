# portlabel/core/geometry.py
"""
Geometry helpers: point arrays, boundary bounds and edges, scene-bounds rectangle,
distance to boundary, NDC to canvas conversion.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from shapely.geometry import LinearRing, LineString, Point

from portlabel.core.types import Point2D


def as_point_array(points: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Return points as a float (N, 2) array. Raises ValueError on wrong shape
    or non-finite coordinates.
    """
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2))
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected a sequence of (x, y) pairs, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Point coordinates must be finite")
    return arr


def to_points(arr: np.ndarray) -> list[Point2D]:
    """Convert an (N, 2) array back to a list of (x, y) float tuples."""
    return [(float(x), float(y)) for x, y in arr]


def boundary_bounds(points: np.ndarray) -> tuple[float, float, float, float]:
    """Return (minx, miny, maxx, maxy) over all vertices."""
    if points.shape[0] == 0:
        return (0.0, 0.0, 0.0, 0.0)
    mins = points.min(axis=0)
    maxs = points.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def boundary_edges(points: np.ndarray) -> np.ndarray:
    """Edge vectors p[i+1] - p[i], including the closing edge from the last vertex to the first."""
    return np.roll(points, -1, axis=0) - points


def edge_segments(points: np.ndarray) -> list[LineString]:
    """Boundary edges as shapely segments, in vertex order (closing edge last)."""
    nxt = np.roll(points, -1, axis=0)
    return [LineString([tuple(a), tuple(b)]) for a, b in zip(points, nxt)]


def boundary_from_bounds(min_x: float, min_y: float, max_x: float, max_y: float) -> list[Point2D]:
    """Counter-clockwise rectangle around projected scene bounds."""
    return [
        (float(min_x), float(min_y)),
        (float(max_x), float(min_y)),
        (float(max_x), float(max_y)),
        (float(min_x), float(max_y)),
    ]


def distance_to_boundary(boundary: Sequence[Point2D], point: Point2D) -> float:
    """Euclidean distance from point to the closed boundary ring."""
    if len(boundary) < 3:
        return float("inf")
    ring = LinearRing(boundary)
    return float(ring.distance(Point(point)))


def ndc_to_canvas(point: Point2D, canvas_size: tuple[float, float]) -> Point2D:
    """Map a normalized-device coordinate to canvas units centered at the origin."""
    width, height = canvas_size
    return (point[0] * width * 0.5, point[1] * height * 0.5)
