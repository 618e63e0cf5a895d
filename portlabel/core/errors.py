# portlabel/core/errors.py
"""
Exceptions raised by the placement core, plus structured error keys for the CLI.
Only InvalidBoundaryError is a recoverable, input-driven failure.
"""

from __future__ import annotations


class InvalidBoundaryError(ValueError):
    """Boundary has fewer than 3 points, non-finite coordinates, or fails the convexity/winding check."""


class MissingIntersectionError(ValueError):
    """A port scan-line crossed no boundary edge; the boundary and its sampled geometry disagree."""

    def __init__(self, side: str, index: int, y: float) -> None:
        super().__init__(f"No boundary intersection for {side} port {index} at y={y!r}")
        self.side = side
        self.index = index
        self.y = y


class AssignmentInvariantViolation(AssertionError):
    """The solver produced a non-bijective or incomplete assignment. Always a bug."""


# Known error keys (returned by the CLI)
INVALID_BOUNDARY = "invalid_boundary"
INVALID_INPUT = "invalid_input"
MISSING_INTERSECTION = "missing_intersection"

USER_MESSAGES: dict[str, str] = {
    INVALID_BOUNDARY: "Boundary must be a counter-clockwise convex polygon with at least 3 points. Try --orient.",
    INVALID_INPUT: "Could not read inputs. Check the boundary and anchor files.",
    MISSING_INTERSECTION: "Boundary has no extent to place ports on. Check for a degenerate polygon.",
}


def error_key(exc: BaseException) -> str:
    """CLI error key for an input failure; anything not boundary-specific is INVALID_INPUT."""
    if isinstance(exc, InvalidBoundaryError):
        return INVALID_BOUNDARY
    if isinstance(exc, MissingIntersectionError):
        return MISSING_INTERSECTION
    return INVALID_INPUT


def user_message(exc: BaseException) -> str:
    return USER_MESSAGES[error_key(exc)]
