# portlabel/core/types.py
"""
Dataclasses and aliases for boundaries, ports and placement results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


Point2D = tuple[float, float]
"""(x, y) in the shared viewport / normalized-device space."""

PortSide = Literal["left", "right"]


@dataclass(frozen=True)
class Port:
    """
    Candidate anchor on the boundary. side and index record generation order only;
    two ports at the same coordinates compare equal.
    """
    x: float
    y: float
    side: PortSide = field(compare=False)
    index: int = field(compare=False)

    @property
    def point(self) -> Point2D:
        return (self.x, self.y)


@dataclass
class LabelLayout:
    """
    Output of one placement call.
    positions[i] is the port assigned to anchors[i]; assignment holds (label, port) index pairs.
    """
    boundary: list[Point2D]
    anchors: list[Point2D]
    ports: list[Port]
    assignment: list[tuple[int, int]]
    positions: list[Point2D]
    total_cost: float
    warnings: list[str] = field(default_factory=list)

    @property
    def n_labels(self) -> int:
        return len(self.anchors)
