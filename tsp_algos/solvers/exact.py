"""
Exact solvers: exhaustive permutation search and Held-Karp dynamic programming.

Both return ``None`` instead of a result when the instance is larger than
``MAX_FEASIBLE_N``; callers are expected to fall back to a heuristic.
"""

import itertools
import logging
from typing import Optional

import numpy as np

from .base import SolveResult, Solver, Tour, tour_length


logger = logging.getLogger(__name__)

MAX_FEASIBLE_N = 20
BRUTE_FORCE_MAX_N = 10


def max_feasible_n() -> int:
    return MAX_FEASIBLE_N


def _size(matrix, n: Optional[int]) -> int:
    return len(matrix) if n is None else n


def brute_force_exact(matrix, n: Optional[int] = None) -> Optional[SolveResult]:
    """Try every ordering of cities 1..n-1 behind the fixed origin 0. O(n!)."""
    n = _size(matrix, n)
    if n > MAX_FEASIBLE_N:
        return None
    if n == 0:
        return SolveResult(tour=[], length=0.0, solver_name="brute_force")

    best_tour: Tour = list(range(n))
    best_len = tour_length(matrix, best_tour)
    for perm in itertools.permutations(range(1, n)):
        order = [0, *perm]
        length = tour_length(matrix, order)
        if length < best_len:
            best_len = length
            best_tour = order
    return SolveResult(tour=best_tour, length=best_len, solver_name="brute_force")


def held_karp(matrix, n: Optional[int] = None) -> Optional[SolveResult]:
    """Bitmask DP over subsets of cities 1..n-1. O(2^n * n^2) time, O(2^n * n) space.

    ``cost[mask, j]`` is the cheapest path leaving city 0, visiting exactly the
    cities in ``mask`` (bit ``j - 1`` for city ``j``) and ending at ``j``;
    ``inf`` marks states that are not reachable. ``parent[mask, j]`` is the
    city visited just before ``j`` on that path.
    """
    n = _size(matrix, n)
    if n > MAX_FEASIBLE_N:
        return None
    if n <= 1:
        return SolveResult(tour=list(range(n)), length=0.0, solver_name="held_karp")

    dist = np.asarray(matrix, dtype=float)[:n, :n]
    m = n - 1
    size = 1 << m
    cost = np.full((size, n), np.inf)
    parent = np.full((size, n), -1, dtype=np.int8)
    for j in range(1, n):
        cost[1 << (j - 1), j] = dist[0, j]
        parent[1 << (j - 1), j] = 0

    masks = np.arange(size, dtype=np.int64)
    popcount = np.zeros(size, dtype=np.int64)
    for b in range(m):
        popcount += (masks >> b) & 1

    # Every subset of size s only reads subsets of size s - 1.
    for s in range(2, n):
        layer = masks[popcount == s]
        for j in range(1, n):
            bit = 1 << (j - 1)
            sel = layer[(layer & bit) != 0]
            prev = sel ^ bit
            cand = cost[prev] + dist[:, j]
            best = cand.argmin(axis=1)
            cost[sel, j] = cand[np.arange(len(sel)), best]
            parent[sel, j] = best

    full = size - 1
    totals = cost[full, 1:] + dist[1:, 0]
    last = int(totals.argmin()) + 1
    length = float(totals[last - 1])

    tour = [0]
    mask = full
    current = last
    while current != 0:
        tour.append(current)
        prev_city = int(parent[mask, current])
        mask ^= 1 << (current - 1)
        current = prev_city
    if len(tour) != n:
        raise RuntimeError(f"held-karp reconstruction produced {len(tour)} of {n} cities")
    logger.debug("held_karp n=%d length=%.6f", n, length)
    return SolveResult(tour=tour, length=length, solver_name="held_karp")


def find_optimal(matrix, n: Optional[int] = None) -> Optional[SolveResult]:
    """Exact optimum with the cheaper method for ``n``, or ``None`` past the ceiling."""
    n = _size(matrix, n)
    if n > MAX_FEASIBLE_N:
        logger.debug("find_optimal: n=%d exceeds %d, skipping", n, MAX_FEASIBLE_N)
        return None
    if n <= BRUTE_FORCE_MAX_N:
        return brute_force_exact(matrix, n)
    return held_karp(matrix, n)


class ExactSolver(Solver):
    name = "exact"

    def solve(self, matrix, points=None) -> Tour:
        result = find_optimal(matrix)
        if result is None:
            raise RuntimeError(
                f"exact solution infeasible for n={len(matrix)} (limit {MAX_FEASIBLE_N})"
            )
        return result.tour
