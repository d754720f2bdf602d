import logging
from typing import Sequence

import numpy as np

from .base import Tour, distance


logger = logging.getLogger(__name__)

IMPROVE_PRIMS = ["two_opt", "zigzag"]


def two_opt(matrix, tour: Sequence[int], max_iterations: int = 100) -> Tour:
    """First-improvement 2-opt.

    Each pass scans ``(i, j)`` pairs and reverses ``tour[i+1..j]`` as soon as
    that shortens the tour, then starts the next pass from the top. A pass
    applies at most one reversal, so ``max_iterations`` also bounds the number
    of moves. Stops after a pass without improvement or at the cap.
    """
    dist = np.asarray(matrix, dtype=float).tolist()
    best = list(tour)
    n = len(best)
    improved = True
    it = 0
    while improved and it < max_iterations:
        improved = False
        it += 1
        for i in range(n - 1):
            a, b = best[i], best[i + 1]
            for j in range(i + 2, n):
                # reversing 1..n-1 only flips the direction of the cycle
                if i == 0 and j == n - 1:
                    continue
                c, d = best[j], best[(j + 1) % n]
                if dist[a][c] + dist[b][d] + 1e-9 < dist[a][b] + dist[c][d]:
                    best[i + 1 : j + 1] = best[i + 1 : j + 1][::-1]
                    improved = True
                    break
            if improved:
                break
    logger.debug("two_opt: %d passes over %d cities", it, n)
    return best


def should_zigzag(i: int, pts: Sequence) -> bool:
    """True if visiting ``pts[i+1]`` before ``pts[i]`` shortens the window."""
    n = len(pts)
    p1 = pts[(i - 1) % n]
    p2 = pts[i % n]
    p3 = pts[(i + 1) % n]
    p4 = pts[(i + 2) % n]
    straight = distance(p1, p2) + distance(p3, p4)
    crossed = distance(p1, p3) + distance(p2, p4)
    return crossed < straight


def zigzag(points: Sequence, tour: Sequence[int]) -> Tour:
    """Single left-to-right sweep swapping adjacent pairs that cross.

    A swap at window ``i`` emits ``i+1, i, i+2`` and resumes at ``i+3``, so
    every position before the window start has already been emitted exactly
    once and the output stays a permutation of the input.
    """
    n = len(tour)
    if n < 2:
        return list(tour)
    pts = [points[idx] for idx in tour]
    out = [tour[0]]
    i = 1
    swaps = 0
    while i < n:
        if n - i > 2 and should_zigzag(i, pts):
            out.extend((tour[i + 1], tour[i], tour[i + 2]))
            i += 3
            swaps += 1
        else:
            out.append(tour[i])
            i += 1
    logger.debug("zigzag: %d swaps over %d cities", swaps, n)
    return out
