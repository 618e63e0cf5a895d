# portlabel/core/io.py
"""
Load a boundary polygon from WKT and label anchors from JSON.
Boundaries are returned as open vertex loops (no repeated closing vertex).
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from shapely import wkt
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient

from portlabel.core.types import Point2D


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _read_text(path: str | Path, repo_root: Path | None, kind: str) -> str:
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"{kind} file not found: {resolved}")
    return resolved.read_text(encoding="utf-8").strip()


def parse_boundary_wkt(wkt_string: str, orient_ccw: bool = False) -> list[Point2D]:
    """
    Parse a WKT POLYGON and return its exterior ring without the closing vertex.
    orient_ccw reorients the ring counter-clockwise first; otherwise winding is kept
    so that a clockwise ring is rejected downstream.
    """
    geom = wkt.loads(wkt_string.strip())
    if not isinstance(geom, Polygon):
        raise ValueError(f"Boundary must be a POLYGON, got {geom.geom_type}")
    if geom.is_empty:
        raise ValueError("Boundary polygon is empty")
    if orient_ccw:
        geom = orient(geom, sign=1.0)
    coords = [(float(x), float(y)) for x, y, *_ in geom.exterior.coords]
    if len(coords) > 1 and coords[0] == coords[-1]:
        coords = coords[:-1]
    return coords


def load_boundary_wkt(
    path: str | Path,
    repo_root: Path | None = None,
    orient_ccw: bool = False,
) -> list[Point2D]:
    """
    Read a boundary polygon from a WKT file.
    Raises FileNotFoundError if path is missing, ValueError if it is not a polygon.
    """
    return parse_boundary_wkt(_read_text(path, repo_root, "Boundary"), orient_ccw=orient_ccw)


def _anchor_point(item: Any) -> Point2D:
    if isinstance(item, dict):
        if "x" not in item or "y" not in item:
            raise ValueError(f"Anchor object needs 'x' and 'y': {item!r}")
        x, y = item["x"], item["y"]
    elif isinstance(item, (list, tuple)) and len(item) == 2:
        x, y = item
    else:
        raise ValueError(f"Anchor must be [x, y] or {{'x': .., 'y': ..}}, got {item!r}")
    pt = (float(x), float(y))
    if not (math.isfinite(pt[0]) and math.isfinite(pt[1])):
        raise ValueError(f"Anchor coordinates must be finite: {item!r}")
    return pt


def parse_anchors(data: Any) -> list[Point2D]:
    """Anchors from a decoded JSON list, or a dict with an 'anchors' list."""
    if isinstance(data, dict):
        data = data.get("anchors")
    if not isinstance(data, list):
        raise ValueError("Anchors must be a JSON list")
    return [_anchor_point(item) for item in data]


def load_anchors(path: str | Path, repo_root: Path | None = None) -> list[Point2D]:
    """Read label anchors from a JSON file; list order is label identity."""
    text = _read_text(path, repo_root, "Anchors")
    return parse_anchors(json.loads(text))


def parse_bounds(s: str) -> tuple[float, float, float, float]:
    """Parse 'minx,miny,maxx,maxy'."""
    parts = [p.strip() for p in (s or "").split(",") if p.strip()]
    if len(parts) != 4:
        raise ValueError(f"Bounds must be 'minx,miny,maxx,maxy', got {s!r}")
    min_x, min_y, max_x, max_y = (float(p) for p in parts)
    return (min_x, min_y, max_x, max_y)
