# tests/test_hungarian.py
"""
Assignment solver: bijection and optimality against brute force, determinism,
rectangular padding, individual state transitions, and sparse edge-list matching.
"""

from __future__ import annotations

import itertools

import numpy as np
import pytest

from portlabel.core.costs import make_cost_matrix
from portlabel.core.errors import AssignmentInvariantViolation
from portlabel.core.hungarian import (
    PRIMED,
    STARRED,
    SolverState,
    SolverWork,
    adjust,
    assignment_cost,
    check_bijection,
    column_cover_test,
    compute_assignment,
    find_uncovered_zero,
    initial_star,
    match_edges,
    prime_search,
    row_reduction,
    solve,
    step,
)


def _brute_force(matrix: np.ndarray) -> tuple[float, list[tuple[int, ...]]]:
    """Minimum total over all permutations, and every permutation reaching it."""
    k = matrix.shape[0]
    totals = {
        perm: float(sum(matrix[i, perm[i]] for i in range(k)))
        for perm in itertools.permutations(range(k))
    }
    best = min(totals.values())
    return best, [p for p, t in totals.items() if t == pytest.approx(best)]


def test_known_fixture_matches_brute_force() -> None:
    matrix = np.array([[4, 1, 3], [2, 0, 5], [3, 2, 2]], dtype=float)
    best, optimal = _brute_force(matrix)
    pairs = solve(matrix)
    assert assignment_cost(matrix, pairs) == pytest.approx(best)
    assert tuple(c for _, c in pairs) in optimal
    assert best == 5.0
    assert pairs == [(0, 1), (1, 0), (2, 2)]


def test_classic_example_total() -> None:
    matrix = [[5, 9, 1], [10, 3, 2], [8, 7, 4]]
    pairs = solve(matrix)
    assert assignment_cost(matrix, pairs) == pytest.approx(12.0)


@pytest.mark.parametrize("k", range(1, 51))
def test_bijection_random_square(k: int) -> None:
    rng = np.random.default_rng(1000 + k)
    matrix = rng.uniform(0.0, 100.0, size=(k, k))
    pairs = solve(matrix)
    assert len(pairs) == k
    assert sorted(r for r, _ in pairs) == list(range(k))
    assert sorted(c for _, c in pairs) == list(range(k))


@pytest.mark.parametrize("seed", range(40))
def test_optimal_against_brute_force(seed: int) -> None:
    rng = np.random.default_rng(seed)
    k = int(rng.integers(1, 7))
    if seed % 2:
        # Small integers force ties and degenerate zero patterns
        matrix = rng.integers(0, 5, size=(k, k)).astype(float)
    else:
        matrix = rng.uniform(0.0, 10.0, size=(k, k))
    best, _ = _brute_force(matrix)
    pairs = solve(matrix)
    check_bijection(pairs, k)
    assert assignment_cost(matrix, pairs) == pytest.approx(best)


def test_solver_does_not_mutate_input() -> None:
    matrix = np.array([[4.0, 1.0, 3.0], [2.0, 0.0, 5.0], [3.0, 2.0, 2.0]])
    before = matrix.copy()
    solve(matrix)
    compute_assignment(matrix[:2])
    assert np.array_equal(matrix, before)


def test_solver_is_deterministic_with_ties() -> None:
    matrix = np.zeros((6, 6))
    first = solve(matrix)
    assert first == solve(matrix)
    # First zero in row-major order wins: identity on an all-zero matrix
    assert first == [(i, i) for i in range(6)]


def test_solve_rejects_non_square_and_handles_empty() -> None:
    with pytest.raises(ValueError):
        solve([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    assert solve(np.zeros((0, 0))) == []
    assert compute_assignment([]) == []


def test_compute_assignment_wide_matrix() -> None:
    pairs = compute_assignment([[1, 2, 3], [3, 1, 2]])
    assert pairs == [(0, 0), (1, 1)]


def test_compute_assignment_tall_matrix() -> None:
    pairs = compute_assignment([[1, 3], [2, 1], [3, 2]])
    assert len(pairs) == 2
    assert len({c for _, c in pairs}) == 2
    assert all(c < 2 for _, c in pairs)
    assert assignment_cost([[1, 3], [2, 1], [3, 2]], pairs) == pytest.approx(2.0)


def test_check_bijection_raises() -> None:
    with pytest.raises(AssignmentInvariantViolation):
        check_bijection([(0, 0), (1, 0)], 2)
    with pytest.raises(AssignmentInvariantViolation):
        check_bijection([(0, 0)], 2)
    check_bijection([(0, 1), (1, 0)], 2)


def test_row_reduction_and_initial_star() -> None:
    work = SolverWork.from_matrix(np.array([[4, 1, 3], [2, 0, 5], [3, 2, 2]], dtype=float))
    assert row_reduction(work) is SolverState.INITIAL_STAR
    assert work.cost.tolist() == [[3.0, 0.0, 2.0], [2.0, 0.0, 5.0], [1.0, 0.0, 0.0]]
    assert initial_star(work) is SolverState.COLUMN_COVER_TEST
    assert list(zip(*np.nonzero(work.marks == STARRED))) == [(0, 1), (2, 2)]
    assert not work.row_covered.any() and not work.col_covered.any()
    assert column_cover_test(work) is SolverState.PRIME_SEARCH
    assert work.col_covered.tolist() == [False, True, True]


def test_prime_search_covers_row_of_star() -> None:
    work = SolverWork.from_matrix(np.array([[0.0, 0.0], [1.0, 1.0]]))
    work.marks[0, 0] = STARRED
    work.col_covered[0] = True
    # Zero at (0, 1) shares row 0 with the star: row 0 covered, column 0 uncovered
    assert prime_search(work) is SolverState.ADJUST
    assert work.marks[0, 1] == PRIMED
    assert work.row_covered.tolist() == [True, False]
    assert work.col_covered.tolist() == [False, False]


def test_adjust_adds_to_covered_rows_and_subtracts_from_uncovered_columns() -> None:
    work = SolverWork.from_matrix(np.array([[0.0, 5.0], [3.0, 4.0]]))
    work.row_covered[0] = True
    assert adjust(work) is SolverState.PRIME_SEARCH
    # min uncovered is 3; row 0 covered, no columns covered
    assert work.cost.tolist() == [[0.0, 5.0], [0.0, 1.0]]
    assert find_uncovered_zero(work) == (1, 0)


def test_done_is_terminal() -> None:
    work = SolverWork.from_matrix(np.zeros((1, 1)))
    assert step(SolverState.DONE, work) is SolverState.DONE


@pytest.mark.parametrize(
    "matrix, expected",
    [
        ([[5]], [(0, 0)]),
        ([[-5]], [(0, 0)]),
        ([[5, 3], [2, 4]], [(0, 1), (1, 0)]),
        ([[-5, -3], [-2, -4]], [(0, 0), (1, 1)]),
        ([[5, 3, 1], [2, 4, 6], [9, 9, 9]], [(0, 2), (1, 0), (2, 1)]),
        ([[5, 3, -1], [2, 4, -6], [9, 9, -9]], [(0, 1), (1, 0), (2, 2)]),
        ([[400, 150, 400], [400, 450, 600], [300, 225, 300]], [(0, 1), (1, 0), (2, 2)]),
        ([[0, 0, 0], [0, 0, 0], [0, 0, 0]], [(0, 0), (1, 1), (2, 2)]),
    ],
)
def test_munkres_fixtures(matrix: list[list[int]], expected: list[tuple[int, int]]) -> None:
    assert solve(matrix) == expected


def test_munkres_rectangular_fixture() -> None:
    matrix = [[400, 150, 400, 1], [400, 450, 600, 2], [300, 225, 300, 3]]
    assert compute_assignment(matrix) == [(0, 1), (1, 3), (2, 0)]


def test_profit_matrix_fixture() -> None:
    assert solve(make_cost_matrix([[5, 3], [2, 4]])) == [(0, 0), (1, 1)]


def test_match_edges_dense_graph() -> None:
    matrix = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    edges = [(i, j, matrix[i][j]) for i in range(3) for j in range(3)]
    assert match_edges(edges, 3) == [1, 0, 2]
    assert match_edges([], 0) == []


def test_match_edges_keeps_cheapest_duplicate() -> None:
    edges = [(0, 0, 1.0), (0, 1, 5.0), (1, 0, 5.0), (1, 1, 10.0), (1, 1, 1.0)]
    # Without the cheaper (1, 1) duplicate the cross pairing would win
    assert match_edges(edges, 2) == [0, 1]
    assert match_edges(list(reversed(edges)), 2) == [0, 1]


def test_match_edges_ignores_out_of_range_edges() -> None:
    edges = [(0, 1, 1.0), (1, 0, 1.0), (0, 0, 0.0), (1, 1, 0.0), (2, 0, -100.0), (0, -1, -100.0)]
    assert match_edges(edges, 2) == [0, 1]
    # Out-of-range edges do not count as connections
    with pytest.raises(ValueError, match="not connected"):
        match_edges([(0, 0, 1.0), (1, 2, 1.0), (2, 1, 1.0)], 2)


def test_match_edges_unconnected_node_raises() -> None:
    with pytest.raises(ValueError, match="not connected"):
        match_edges([(0, 0, 1.0), (1, 0, 1.0)], 2)
    with pytest.raises(ValueError, match="not connected"):
        match_edges([(0, 0, 1.0), (0, 1, 1.0)], 2)


def test_match_edges_without_perfect_matching_raises() -> None:
    # Every node has an edge, but left 0 and 1 compete for right 0
    edges = [(0, 0, 1.0), (1, 0, 1.0), (2, 0, 1.0), (2, 1, 1.0), (2, 2, 1.0)]
    with pytest.raises(ValueError, match="No perfect matching"):
        match_edges(edges, 3)


@pytest.mark.parametrize("seed", range(30))
def test_match_edges_optimal_against_brute_force(seed: int) -> None:
    rng = np.random.default_rng(500 + seed)
    n = int(rng.integers(1, 6))
    allowed = rng.random((n, n)) < 0.6
    costs = rng.integers(-5, 10, size=(n, n)).astype(float)
    edges = [(i, j, costs[i, j]) for i in range(n) for j in range(n) if allowed[i, j]]
    feasible = [
        perm for perm in itertools.permutations(range(n))
        if all(allowed[i, perm[i]] for i in range(n))
    ]
    if not feasible:
        with pytest.raises(ValueError):
            match_edges(edges, n)
        return
    best = min(sum(costs[i, perm[i]] for i in range(n)) for perm in feasible)
    matched = match_edges(edges, n)
    assert sorted(matched) == list(range(n))
    assert all(allowed[i, matched[i]] for i in range(n))
    assert sum(costs[i, matched[i]] for i in range(n)) == pytest.approx(best)
