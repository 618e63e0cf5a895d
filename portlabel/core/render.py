# portlabel/core/render.py
"""
Matplotlib PNG debug overlay: boundary, anchors, ports and leader lines
from each anchor to its assigned port.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from portlabel.core.config import RENDER_HEIGHT_PX, RENDER_WIDTH_PX
from portlabel.core.geometry import boundary_bounds
from portlabel.core.types import LabelLayout


def set_axes_to_layout(ax: plt.Axes, layout: LabelLayout, pad_frac: float = 0.1) -> None:
    """Set xlim/ylim to cover boundary and anchors with margin; equal aspect; hide axes."""
    pts = np.array(layout.boundary + layout.anchors, dtype=np.float64)
    if pts.size == 0:
        return
    minx, miny, maxx, maxy = boundary_bounds(pts)
    dx = max(1e-3, (maxx - minx) * pad_frac)
    dy = max(1e-3, (maxy - miny) * pad_frac)
    ax.set_xlim(minx - dx, maxx + dx)
    ax.set_ylim(miny - dy, maxy + dy)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")


def render_layout_debug(
    layout: LabelLayout,
    output_path: str | Path,
    width_px: int = RENDER_WIDTH_PX,
    height_px: int = RENDER_HEIGHT_PX,
    scale: int = 1,
) -> None:
    """Render debug overlay. scale multiplies output resolution (1x, 2x, 4x)."""
    w, h = width_px * scale, height_px * scale
    fig = plt.figure(figsize=(w / 100.0, h / 100.0), dpi=100, constrained_layout=False)
    # Leave bottom margin so legend does not overlap the image
    ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
    ax.axis("off")

    if layout.boundary:
        xy = np.array(layout.boundary + [layout.boundary[0]])
        ax.fill(xy[:, 0], xy[:, 1], facecolor="lightblue", edgecolor="navy", linewidth=1, alpha=0.5, label="boundary")

    for anchor, pos in zip(layout.anchors, layout.positions):
        ax.plot([anchor[0], pos[0]], [anchor[1], pos[1]], color="gray", linewidth=1, zorder=3)

    if layout.ports:
        left = [p for p in layout.ports if p.side == "left"]
        right = [p for p in layout.ports if p.side == "right"]
        if left:
            ax.scatter([p.x for p in left], [p.y for p in left], s=24, marker="s", zorder=4, label="left ports")
        if right:
            ax.scatter([p.x for p in right], [p.y for p in right], s=24, marker="D", zorder=4, label="right ports")

    if layout.anchors:
        axy = np.array(layout.anchors)
        ax.scatter(axy[:, 0], axy[:, 1], s=16, color="black", zorder=5, label="anchors")
        for i, (x, y) in enumerate(layout.anchors):
            ax.annotate(str(i), (x, y), textcoords="offset points", xytext=(3, 3), fontsize=7)

    set_axes_to_layout(ax, layout)
    leg = ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=4, fontsize=8)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=100, facecolor="white", bbox_inches="tight", bbox_extra_artists=[leg])
    plt.close(fig)
