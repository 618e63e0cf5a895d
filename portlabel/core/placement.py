# portlabel/core/placement.py
"""
Label placement pipeline: validate boundary, generate one port per label,
build the distance cost matrix, solve the assignment, map labels to ports.
Every call is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from typing import Sequence

from portlabel.core.costs import build_cost_matrix
from portlabel.core.errors import AssignmentInvariantViolation
from portlabel.core.geometry import as_point_array, to_points
from portlabel.core.hull import require_convex_boundary
from portlabel.core.hungarian import assignment_cost, solve
from portlabel.core.ports import generate_ports, port_array
from portlabel.core.types import LabelLayout, Point2D, Port

logger = logging.getLogger(__name__)


def _positions_from_assignment(
    assignment: Sequence[tuple[int, int]],
    port_points: Sequence[Point2D],
    n_labels: int,
) -> list[Point2D]:
    """positions[label] = port point; every label must appear exactly once."""
    positions: list[Point2D | None] = [None] * n_labels
    for label_idx, port_idx in assignment:
        if not 0 <= label_idx < n_labels or positions[label_idx] is not None:
            raise AssignmentInvariantViolation(f"Label {label_idx} assigned twice or out of range")
        positions[label_idx] = port_points[port_idx]
    missing = [i for i, p in enumerate(positions) if p is None]
    if missing:
        raise AssignmentInvariantViolation(f"Labels without a port: {missing}")
    return positions  # type: ignore[return-value]


def overlapping_port_warnings(ports: Sequence[Port]) -> list[str]:
    """One warning per port that repeats the coordinates of an earlier port."""
    first_seen: dict[Port, int] = {}
    warnings: list[str] = []
    for j, port in enumerate(ports):
        i = first_seen.setdefault(port, j)
        if i != j:
            warnings.append(f"Ports {i} and {j} share coordinates ({port.x:.6g}, {port.y:.6g})")
    return warnings


def run_label_placement(
    boundary: Sequence[Sequence[float]],
    anchors: Sequence[Sequence[float]],
) -> LabelLayout:
    """
    Assign each anchor a distinct port on the convex boundary, minimizing the total
    anchor-to-port distance. Raises InvalidBoundaryError for a bad boundary and
    ValueError for non-finite anchors.
    """
    boundary_pts = require_convex_boundary(boundary)
    anchor_pts = as_point_array(anchors)
    n = anchor_pts.shape[0]

    ports = generate_ports(boundary_pts, n)
    matrix = build_cost_matrix(anchor_pts, port_array(ports))
    assignment = solve(matrix)
    port_points = [p.point for p in ports]
    positions = _positions_from_assignment(assignment, port_points, n)
    total = assignment_cost(matrix, assignment)
    logger.debug("Placed %d labels, total distance %.6g", n, total)
    warnings = overlapping_port_warnings(ports)
    for w in warnings:
        logger.warning("%s", w)

    return LabelLayout(
        boundary=to_points(boundary_pts),
        anchors=to_points(anchor_pts),
        ports=ports,
        assignment=list(assignment),
        positions=positions,
        total_cost=total,
        warnings=warnings,
    )


def place_labels(
    boundary: Sequence[Sequence[float]],
    anchors: Sequence[Sequence[float]],
) -> list[Point2D]:
    """Ordered label positions, index-aligned with anchors."""
    return run_label_placement(boundary, anchors).positions
