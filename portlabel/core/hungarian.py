# portlabel/core/hungarian.py
"""
Kuhn-Munkres ("Hungarian") minimum-cost perfect matching.

The solver runs a seven-state machine over an explicit SolverWork record:
a private copy of the cost matrix, a k x k mark array (star / prime) and
row / column coverage vectors. Each transition takes the work record, updates it
in place, and returns the next SolverState. O(k^3), no randomness; whenever
several zeros qualify, the first in row-major order wins.

References:
- H. W. Kuhn, The Hungarian Method for the assignment problem, 1955.
- J. Munkres, Algorithms for the Assignment and Transportation Problems, 1957.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import numpy as np

from portlabel.core.config import DEFAULT_PAD_VALUE
from portlabel.core.costs import as_cost_array, pad_matrix
from portlabel.core.errors import AssignmentInvariantViolation

logger = logging.getLogger(__name__)

UNMARKED = 0
STARRED = 1
PRIMED = 2


class SolverState(enum.IntEnum):
    ROW_REDUCTION = 1
    INITIAL_STAR = 2
    COLUMN_COVER_TEST = 3
    PRIME_SEARCH = 4
    AUGMENT = 5
    ADJUST = 6
    DONE = 7


@dataclass
class SolverWork:
    """Mutable working state for one solve. Never shared between calls."""
    cost: np.ndarray
    marks: np.ndarray
    row_covered: np.ndarray
    col_covered: np.ndarray
    path_origin: tuple[int, int] | None = None

    @classmethod
    def from_matrix(cls, square: np.ndarray) -> SolverWork:
        k = square.shape[0]
        return cls(
            cost=np.array(square, dtype=np.float64),
            marks=np.zeros((k, k), dtype=np.int8),
            row_covered=np.zeros(k, dtype=bool),
            col_covered=np.zeros(k, dtype=bool),
        )

    @property
    def size(self) -> int:
        return self.cost.shape[0]

    def clear_covers(self) -> None:
        self.row_covered[:] = False
        self.col_covered[:] = False


def _first(indices: np.ndarray) -> int | None:
    return int(indices[0]) if indices.size else None


def find_uncovered_zero(work: SolverWork) -> tuple[int, int] | None:
    """First zero in row-major order whose row and column are both uncovered."""
    mask = (work.cost == 0) & ~work.row_covered[:, None] & ~work.col_covered[None, :]
    flat = _first(np.flatnonzero(mask))
    if flat is None:
        return None
    row, col = divmod(flat, work.size)
    return row, col


def find_star_in_row(work: SolverWork, row: int) -> int | None:
    return _first(np.flatnonzero(work.marks[row] == STARRED))


def find_star_in_col(work: SolverWork, col: int) -> int | None:
    return _first(np.flatnonzero(work.marks[:, col] == STARRED))


def find_prime_in_row(work: SolverWork, row: int) -> int | None:
    return _first(np.flatnonzero(work.marks[row] == PRIMED))


def row_reduction(work: SolverWork) -> SolverState:
    """Subtract each row's minimum from the row."""
    work.cost -= work.cost.min(axis=1, keepdims=True)
    return SolverState.INITIAL_STAR


def initial_star(work: SolverWork) -> SolverState:
    """Star the first zero of each row whose column holds no star yet; then drop coverage."""
    for row in range(work.size):
        candidates = np.flatnonzero((work.cost[row] == 0) & ~work.col_covered)
        col = _first(candidates)
        if col is None or work.row_covered[row]:
            continue
        work.marks[row, col] = STARRED
        work.row_covered[row] = True
        work.col_covered[col] = True
    work.clear_covers()
    return SolverState.COLUMN_COVER_TEST


def column_cover_test(work: SolverWork) -> SolverState:
    """Cover starred columns; k covered columns means the stars are a full assignment."""
    work.col_covered |= (work.marks == STARRED).any(axis=0)
    if int(work.col_covered.sum()) >= work.size:
        return SolverState.DONE
    return SolverState.PRIME_SEARCH


def prime_search(work: SolverWork) -> SolverState:
    """
    Prime uncovered zeros. A primed zero sharing a row with a star covers that row
    and uncovers the star's column; one without a star starts an augmenting path.
    """
    while True:
        zero = find_uncovered_zero(work)
        if zero is None:
            return SolverState.ADJUST
        row, col = zero
        work.marks[row, col] = PRIMED
        star_col = find_star_in_row(work, row)
        if star_col is None:
            work.path_origin = (row, col)
            return SolverState.AUGMENT
        work.row_covered[row] = True
        work.col_covered[star_col] = False


def augment(work: SolverWork) -> SolverState:
    """Flip stars and primes along the alternating path from the origin prime."""
    if work.path_origin is None:
        raise AssignmentInvariantViolation("Augment entered without a path origin")
    path = [work.path_origin]
    while True:
        col = path[-1][1]
        star_row = find_star_in_col(work, col)
        if star_row is None:
            break
        path.append((star_row, col))
        prime_col = find_prime_in_row(work, star_row)
        if prime_col is None:
            raise AssignmentInvariantViolation(f"Starred zero at ({star_row}, {col}) has no prime in its row")
        path.append((star_row, prime_col))
    for row, col in path:
        work.marks[row, col] = UNMARKED if work.marks[row, col] == STARRED else STARRED
    work.clear_covers()
    work.marks[work.marks == PRIMED] = UNMARKED
    work.path_origin = None
    return SolverState.COLUMN_COVER_TEST


def adjust(work: SolverWork) -> SolverState:
    """
    Add the smallest uncovered value to covered rows and subtract it from
    uncovered columns. Stars, primes and coverage are left alone.
    """
    uncovered = ~work.row_covered[:, None] & ~work.col_covered[None, :]
    if not uncovered.any():
        raise AssignmentInvariantViolation("Adjust found no uncovered cells")
    minval = float(work.cost[uncovered].min())
    work.cost[work.row_covered, :] += minval
    work.cost[:, ~work.col_covered] -= minval
    return SolverState.PRIME_SEARCH


TRANSITIONS: dict[SolverState, Callable[[SolverWork], SolverState]] = {
    SolverState.ROW_REDUCTION: row_reduction,
    SolverState.INITIAL_STAR: initial_star,
    SolverState.COLUMN_COVER_TEST: column_cover_test,
    SolverState.PRIME_SEARCH: prime_search,
    SolverState.AUGMENT: augment,
    SolverState.ADJUST: adjust,
}


def step(state: SolverState, work: SolverWork) -> SolverState:
    """Run one transition. DONE is terminal."""
    if state is SolverState.DONE:
        return state
    return TRANSITIONS[state](work)


def run_solver(square: np.ndarray) -> SolverWork:
    """Drive the state machine to DONE on a copy of square; return the final work record."""
    work = SolverWork.from_matrix(square)
    state = SolverState.ROW_REDUCTION
    transitions = 0
    while state is not SolverState.DONE:
        state = step(state, work)
        transitions += 1
    logger.debug("Solved %dx%d matrix in %d transitions", work.size, work.size, transitions)
    return work


def starred_pairs(work: SolverWork, n_rows: int, n_cols: int) -> list[tuple[int, int]]:
    """Starred cells inside the top-left n_rows x n_cols block, row-major."""
    rows, cols = np.nonzero(work.marks[:n_rows, :n_cols] == STARRED)
    return [(int(r), int(c)) for r, c in zip(rows, cols)]


def check_bijection(pairs: Sequence[tuple[int, int]], k: int) -> None:
    """Raise AssignmentInvariantViolation unless pairs is a permutation of 0..k-1."""
    rows = sorted(r for r, _ in pairs)
    cols = sorted(c for _, c in pairs)
    expected = list(range(k))
    if len(pairs) != k or rows != expected or cols != expected:
        raise AssignmentInvariantViolation(
            f"Expected a bijection on {k} rows/columns, got {len(pairs)} pairs: {list(pairs)}"
        )


def solve(square_matrix: Sequence[Sequence[float]] | np.ndarray) -> list[tuple[int, int]]:
    """
    Minimum-cost perfect matching of a square matrix.
    Returns k (row, col) pairs sorted by row. The input is not modified.
    """
    square = as_cost_array(square_matrix)
    n, m = square.shape
    if n != m:
        raise ValueError(f"solve() needs a square matrix, got {n}x{m}; use compute_assignment()")
    if n == 0:
        return []
    work = run_solver(square)
    pairs = starred_pairs(work, n, n)
    check_bijection(pairs, n)
    return pairs


def compute_assignment(
    cost_matrix: Sequence[Sequence[float]] | np.ndarray,
    pad_value: float = DEFAULT_PAD_VALUE,
) -> list[tuple[int, int]]:
    """
    Lowest-cost pairing for a square or rectangular matrix.
    Rectangular input is padded to square with pad_value on a copy; only pairs
    inside the original bounds are returned, sorted by row.

    Note: phantom rows/columns cost pad_value, so a strongly skewed matrix may pair
    real rows with phantom columns ahead of costlier real ones.
    """
    arr = as_cost_array(cost_matrix)
    n, m = arr.shape
    if n == 0 or m == 0:
        return []
    square = pad_matrix(arr, pad_value) if n != m else arr
    if n != m:
        logger.debug("Padded %dx%d cost matrix to %dx%d with %r", n, m, square.shape[0], square.shape[0], pad_value)
    work = run_solver(square)
    check_bijection(starred_pairs(work, square.shape[0], square.shape[0]), square.shape[0])
    return starred_pairs(work, n, m)


def assignment_cost(
    cost_matrix: Sequence[Sequence[float]] | np.ndarray,
    pairs: Sequence[tuple[int, int]],
) -> float:
    """Total cost of pairs over cost_matrix."""
    arr = as_cost_array(cost_matrix)
    return float(sum(arr[r, c] for r, c in pairs))


def _forbidden_cost(allowed_costs: np.ndarray, n: int) -> float:
    """A finite cost high enough that any matching using it loses to every allowed perfect matching."""
    lo, hi = float(allowed_costs.min()), float(allowed_costs.max())
    return hi + n * (hi - lo + 1.0)


def match_edges(edges: Iterable[Sequence[float]], n: int) -> list[int]:
    """
    Minimum-cost perfect matching on a sparse bipartite graph with n left and n right nodes.

    edges holds (left, right, cost) triples. Edges with an endpoint outside 0..n-1 are
    ignored; of repeated (left, right) pairs only the cheapest is kept.
    Returns left_matched_to, where left_matched_to[left] is the right node paired with left.
    Raises ValueError when a node has no edge or when no perfect matching exists.
    """
    if n < 0:
        raise ValueError(f"Node count must be non-negative, got {n}")
    cheapest: dict[tuple[int, int], float] = {}
    for left, right, cost in edges:
        left, right = int(left), int(right)
        if not (0 <= left < n and 0 <= right < n):
            continue
        key = (left, right)
        if key not in cheapest or cost < cheapest[key]:
            cheapest[key] = float(cost)
    if n == 0:
        return []

    allowed = np.zeros((n, n), dtype=bool)
    values = np.zeros((n, n), dtype=np.float64)
    for (left, right), cost in cheapest.items():
        allowed[left, right] = True
        values[left, right] = cost
    if not allowed.any(axis=1).all() or not allowed.any(axis=0).all():
        raise ValueError("Some nodes are not connected to an edge")
    values = as_cost_array(values)

    values[~allowed] = _forbidden_cost(values[allowed], n)
    pairs = solve(values)
    if not all(allowed[r, c] for r, c in pairs):
        raise ValueError("No perfect matching found")
    logger.debug("Matched %d nodes over %d edges", n, len(cheapest))
    return [c for _, c in pairs]
