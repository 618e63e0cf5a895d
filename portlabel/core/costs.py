# portlabel/core/costs.py
"""
Cost matrices: pairwise Euclidean distances between label anchors and ports,
square padding, profit-to-cost conversion, and a plain-text formatter.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from portlabel.core.config import DEFAULT_PAD_VALUE
from portlabel.core.geometry import as_point_array


def as_cost_array(matrix: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """
    Copy matrix into a 2-D float array. Raises ValueError for ragged rows
    or non-finite entries.
    """
    if isinstance(matrix, np.ndarray):
        arr = np.array(matrix, dtype=np.float64)
    else:
        rows = [list(r) for r in matrix]
        if not rows:
            return np.zeros((0, 0))
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("Cost matrix rows must all have the same length")
        arr = np.array(rows, dtype=np.float64).reshape(len(rows), width)
    if arr.ndim != 2:
        raise ValueError(f"Cost matrix must be 2-D, got {arr.ndim}-D")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Cost matrix entries must be finite")
    return arr


def build_cost_matrix(
    anchors: Sequence[Sequence[float]],
    ports: Sequence[Sequence[float]] | np.ndarray,
) -> np.ndarray:
    """matrix[i, j] = distance(anchors[i], ports[j]); shape (n, m)."""
    a = as_point_array(anchors)
    p = as_point_array(ports)
    if a.shape[0] == 0 or p.shape[0] == 0:
        return np.zeros((a.shape[0], p.shape[0]))
    diff = a[:, None, :] - p[None, :, :]
    return np.hypot(diff[..., 0], diff[..., 1])


def pad_matrix(
    matrix: Sequence[Sequence[float]] | np.ndarray,
    pad_value: float = DEFAULT_PAD_VALUE,
) -> np.ndarray:
    """
    Return a new k x k matrix, k = max(n, m), holding matrix in its top-left
    corner and pad_value everywhere else. The input is never modified.
    """
    arr = as_cost_array(matrix)
    n, m = arr.shape
    k = max(n, m)
    out = np.full((k, k), float(pad_value), dtype=np.float64)
    out[:n, :m] = arr
    return out


def make_cost_matrix(
    profit_matrix: Sequence[Sequence[float]] | np.ndarray,
    inversion: Callable[[float], float] | None = None,
) -> np.ndarray:
    """
    Convert a profit matrix to a cost matrix by applying inversion to each entry.
    Default inversion is max(profit) - value.
    """
    profit = as_cost_array(profit_matrix)
    if profit.size == 0:
        return profit
    if inversion is None:
        maximum = float(profit.max())
        return maximum - profit
    return np.array(
        [[float(inversion(float(v))) for v in row] for row in profit],
        dtype=np.float64,
    ).reshape(profit.shape)


def _format_value(v: float) -> str:
    return str(int(v)) if float(v).is_integer() else repr(float(v))


def format_matrix(matrix: Sequence[Sequence[float]] | np.ndarray) -> str:
    """Right-aligned, space-separated columns; one line per row."""
    cells = [[_format_value(v) for v in row] for row in np.asarray(matrix, dtype=np.float64)]
    if not cells:
        return ""
    widths = [max(len(row[j]) for row in cells) for j in range(len(cells[0]))]
    return "\n".join(
        " ".join(s.rjust(widths[j]) for j, s in enumerate(row))
        for row in cells
    )
