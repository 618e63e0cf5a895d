# portlabel/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json and run_metadata.json.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from portlabel.core.config import (
    CONVEXITY_TOLERANCE,
    DEFAULT_PAD_VALUE,
    REPORTS_DIR,
    SCANLINE_MARGIN,
)
from portlabel.core.types import LabelLayout

SCHEMA_VERSION = "1.0"


def _xy(point: tuple[float, float]) -> dict:
    return {"x": float(point[0]), "y": float(point[1])}


def layout_to_dict(layout: LabelLayout) -> dict:
    """Exact structure for layout.json."""
    return {
        "schema_version": SCHEMA_VERSION,
        "input": {
            "boundary": [_xy(p) for p in layout.boundary],
            "anchors": [_xy(p) for p in layout.anchors],
        },
        "ports": [
            {"x": float(p.x), "y": float(p.y), "side": p.side, "index": p.index}
            for p in layout.ports
        ],
        "result": {
            "assignment": [{"label": int(i), "port": int(j)} for i, j in layout.assignment],
            "positions": [_xy(p) for p in layout.positions],
        },
        "metrics": {
            "n_labels": layout.n_labels,
            "total_cost": float(layout.total_cost),
        },
        "warnings": list(layout.warnings),
    }


def run_metadata_dict(
    run_name: str,
    boundary_source: str,
    anchors_source: str,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "boundary_source": boundary_source,
        "anchors_source": anchors_source,
        "config": {
            "SCANLINE_MARGIN": SCANLINE_MARGIN,
            "CONVEXITY_TOLERANCE": CONVEXITY_TOLERANCE,
            "DEFAULT_PAD_VALUE": DEFAULT_PAD_VALUE,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_layout_json(report_dir: Path, layout: LabelLayout) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    path.write_text(json.dumps(layout_to_dict(layout), indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    boundary_source: str,
    anchors_source: str,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, boundary_source, anchors_source)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
