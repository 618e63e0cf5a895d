# portlabel/core/smoke.py
"""
Single entrypoint to verify the pipeline end-to-end: unit square boundary, one
anchor near each corner, placement + reports + debug render under reports/smoke/.
Does not run on import.
"""

from __future__ import annotations

from pathlib import Path

from portlabel.core.placement import run_label_placement
from portlabel.core.render import render_layout_debug
from portlabel.core.reporting import (
    ensure_report_dir,
    write_layout_json,
    write_run_metadata_json,
)
from portlabel.core.types import LabelLayout, Point2D

SMOKE_BOUNDARY: list[Point2D] = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
SMOKE_ANCHORS: list[Point2D] = [(0.1, 0.1), (0.9, 0.1), (0.9, 0.9), (0.1, 0.9)]


def run_smoke(repo_root: Path | None = None) -> tuple[LabelLayout, Path]:
    """Place the smoke scenario and write its reports. Returns (layout, report_dir)."""
    root = (repo_root or Path.cwd()).resolve()
    layout = run_label_placement(SMOKE_BOUNDARY, SMOKE_ANCHORS)
    report_dir = ensure_report_dir(root, "smoke")
    write_layout_json(report_dir, layout)
    write_run_metadata_json(report_dir, "smoke", "builtin:unit_square", "builtin:corners")
    render_layout_debug(layout, report_dir / "debug.png")
    return layout, report_dir


def main() -> None:
    """Run the smoke scenario with run_name='smoke'."""
    _, report_dir = run_smoke()
    print(report_dir)


if __name__ == "__main__":
    main()
