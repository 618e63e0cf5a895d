# portlabel/core/config.py
"""
Central configuration for label port assignment.
All tunable values live here; no magic numbers in other modules.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Convex boundary -----
CONVEXITY_TOLERANCE: float = 0.0
"""Cross products below -CONVEXITY_TOLERANCE mark a reflex vertex or clockwise winding."""

MIN_BOUNDARY_POINTS: int = 3
"""Fewer vertices than this never form a valid boundary."""

# ----- Port generation -----
SCANLINE_MARGIN: float = 1.0
"""Horizontal margin (epsilon) added on both sides of each scan-line segment."""

PORT_TOLERANCE: float = 1e-9
"""Max distance from a port to the boundary for it to count as lying on an edge."""

# ----- Assignment -----
DEFAULT_PAD_VALUE: float = 0.0
"""Value used to pad a rectangular cost matrix to square."""

# ----- Rendering -----
RENDER_WIDTH_PX: int = 800
RENDER_HEIGHT_PX: int = 600

# ----- Logging -----
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
"""Root log level for the CLI. Set env LOG_LEVEL=DEBUG to trace the solver."""
