# portlabel/core/hull.py
"""
Convex boundary check: an ordered, implicitly closed vertex loop is valid when every
pair of consecutive edges turns counter-clockwise (or runs straight).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from portlabel.core.config import CONVEXITY_TOLERANCE, MIN_BOUNDARY_POINTS
from portlabel.core.errors import InvalidBoundaryError
from portlabel.core.geometry import as_point_array, boundary_edges


def edge_turns(points: np.ndarray) -> np.ndarray:
    """z-component of edge_i x edge_{i+1 mod n}, one value per vertex turn."""
    edges = boundary_edges(points)
    nxt = np.roll(edges, -1, axis=0)
    return edges[:, 0] * nxt[:, 1] - edges[:, 1] * nxt[:, 0]


def is_convex_boundary(
    boundary: Sequence[Sequence[float]],
    tolerance: float = CONVEXITY_TOLERANCE,
) -> bool:
    """
    True if boundary is a counter-clockwise convex polygon.
    Fewer than 3 points, non-finite coordinates, or any negative turn -> False.
    """
    try:
        require_convex_boundary(boundary, tolerance=tolerance)
    except InvalidBoundaryError:
        return False
    return True


def require_convex_boundary(
    boundary: Sequence[Sequence[float]],
    tolerance: float = CONVEXITY_TOLERANCE,
) -> np.ndarray:
    """Return boundary as an (N, 2) array or raise InvalidBoundaryError."""
    if len(boundary) < MIN_BOUNDARY_POINTS:
        raise InvalidBoundaryError(
            f"Boundary needs at least {MIN_BOUNDARY_POINTS} points, got {len(boundary)}"
        )
    try:
        points = as_point_array(boundary)
    except ValueError as e:
        raise InvalidBoundaryError(str(e)) from e
    if not bool(np.all(edge_turns(points) >= -tolerance)):
        raise InvalidBoundaryError("Boundary is not a counter-clockwise convex polygon")
    return points
