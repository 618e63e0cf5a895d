# portlabel/core/runner.py
"""
CLI entrypoint: load boundary and anchors, assign labels to ports, write reports.
Boundary from a WKT polygon file or --bounds; anchors from a JSON file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from portlabel.core.config import LOG_LEVEL, REPORTS_DIR
from portlabel.core.errors import error_key, user_message
from portlabel.core.geometry import boundary_from_bounds
from portlabel.core.io import load_anchors, load_boundary_wkt, parse_bounds
from portlabel.core.placement import run_label_placement
from portlabel.core.reporting import (
    ensure_report_dir,
    write_layout_json,
    write_run_metadata_json,
)

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Assign labels to ports on a convex boundary.")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--boundary", type=str, default=None, help="Boundary WKT POLYGON path (repo-relative)")
    src.add_argument("--bounds", type=str, default=None, help="Boundary rectangle, e.g. --bounds=-1,-1,1,1")
    p.add_argument("--anchors", type=str, required=True, help="Anchors JSON path (repo-relative)")
    p.add_argument("--orient", action="store_true", help="Reorient a WKT boundary counter-clockwise")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--no-render", action="store_true", dest="no_render", help="Skip debug.png")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    try:
        if args.bounds:
            boundary = boundary_from_bounds(*parse_bounds(args.bounds))
            boundary_source = f"bounds:{args.bounds}"
        else:
            boundary = load_boundary_wkt(args.boundary, repo_root=repo_root, orient_ccw=args.orient)
            boundary_source = args.boundary
        anchors = load_anchors(args.anchors, repo_root=repo_root)
        layout = run_label_placement(boundary, anchors)
    except (FileNotFoundError, ValueError) as e:
        # InvalidBoundaryError and MissingIntersectionError are ValueErrors
        logger.error("%s: %s", error_key(e), e)
        print(user_message(e), file=sys.stderr)
        return 2

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    written = [
        write_layout_json(report_dir, layout),
        write_run_metadata_json(report_dir, args.run_name, boundary_source, args.anchors),
    ]
    if not args.no_render:
        from portlabel.core.render import render_layout_debug
        debug_path = report_dir / "debug.png"
        render_layout_debug(layout, debug_path)
        written.append(debug_path)

    for p in written:
        print(p)
    print("Total distance:", round(layout.total_cost, 6))
    return 0


if __name__ == "__main__":
    sys.exit(main())
