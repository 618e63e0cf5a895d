# portlabel/core/ports.py
"""
Port generation: sample candidate label anchors on the left and right walls of a
convex boundary using evenly spaced horizontal scan-lines.
Output order is all left ports (bottom to top), then all right ports (bottom to top).
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from shapely.geometry import LineString
from shapely.geometry.base import BaseGeometry

from portlabel.core.config import SCANLINE_MARGIN
from portlabel.core.errors import MissingIntersectionError
from portlabel.core.geometry import boundary_bounds, edge_segments
from portlabel.core.hull import require_convex_boundary
from portlabel.core.types import Point2D, Port, PortSide

logger = logging.getLogger(__name__)


def split_port_count(count: int) -> tuple[int, int]:
    """(left_count, right_count) with left_count = ceil(count / 2)."""
    if count < 0:
        raise ValueError(f"Port count must be non-negative, got {count}")
    left = math.ceil(count / 2)
    return left, count - left


def scanline_heights(min_y: float, max_y: float, count: int) -> list[float]:
    """count heights centered in equal slices of [min_y, max_y]."""
    if count <= 0:
        return []
    spacing = (max_y - min_y) / count
    return [min_y + spacing * (i + 0.5) for i in range(count)]


def _geometry_coords(geom: BaseGeometry) -> list[Point2D]:
    """Point coordinates of an intersection result. Collinear overlaps contribute nothing."""
    if geom.is_empty:
        return []
    if geom.geom_type == "Point":
        return [(float(geom.x), float(geom.y))]
    if hasattr(geom, "geoms"):
        out: list[Point2D] = []
        for g in geom.geoms:
            out.extend(_geometry_coords(g))
        return out
    return []


def scanline_intersections(
    edges: list[LineString],
    y: float,
    min_x: float,
    max_x: float,
    margin: float = SCANLINE_MARGIN,
) -> list[Point2D]:
    """Intersections of the segment (min_x - margin, y)-(max_x + margin, y) with each edge, in edge order."""
    scan = LineString([(min_x - margin, y), (max_x + margin, y)])
    hits: list[Point2D] = []
    for edge in edges:
        hits.extend(_geometry_coords(scan.intersection(edge)))
    return hits


def _side_ports(
    edges: list[LineString],
    bounds: tuple[float, float, float, float],
    count: int,
    side: PortSide,
    margin: float,
) -> list[Port]:
    min_x, min_y, max_x, max_y = bounds
    ports: list[Port] = []
    for index, y in enumerate(scanline_heights(min_y, max_y, count)):
        hits = scanline_intersections(edges, y, min_x, max_x, margin=margin)
        if not hits:
            raise MissingIntersectionError(side, index, y)
        # min/max keep the first hit on ties
        if side == "left":
            x, py = min(hits, key=lambda p: p[0])
        else:
            x, py = max(hits, key=lambda p: p[0])
        ports.append(Port(x=x, y=py, side=side, index=index))
    return ports


def generate_ports(
    boundary: Sequence[Sequence[float]],
    count: int,
    margin: float = SCANLINE_MARGIN,
) -> list[Port]:
    """
    Place count ports on a convex boundary: ceil(count / 2) on the left wall,
    the rest on the right wall.
    Raises InvalidBoundaryError for a non-convex boundary and
    MissingIntersectionError when a scan-line crosses no edge.
    """
    points = require_convex_boundary(boundary)
    left_count, right_count = split_port_count(count)
    if count == 0:
        return []
    bounds = boundary_bounds(points)
    edges = edge_segments(points)
    ports = _side_ports(edges, bounds, left_count, "left", margin)
    ports.extend(_side_ports(edges, bounds, right_count, "right", margin))
    logger.debug("Generated %d ports (%d left, %d right)", len(ports), left_count, right_count)
    return ports


def port_array(ports: Sequence[Port]) -> np.ndarray:
    """Ports as an (M, 2) float array in generation order."""
    if not ports:
        return np.zeros((0, 2))
    return np.array([p.point for p in ports], dtype=np.float64)
