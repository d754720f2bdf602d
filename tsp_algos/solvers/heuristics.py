import logging
import math
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .base import Solver, Tour


logger = logging.getLogger(__name__)

CONSTRUCT_PRIMS = ["nearest_neighbor", "greedy_edge", "angular_sort", "sonar_visit"]

TWO_PI = 2 * math.pi


def nearest_neighbor_tour(matrix, start: int = 0) -> Tour:
    dist = np.asarray(matrix, dtype=float)
    n = dist.shape[0]
    if n == 0:
        return []
    visited = np.zeros(n, dtype=bool)
    tour = [start]
    visited[start] = True
    current = start
    while len(tour) < n:
        row = np.where(visited, np.inf, dist[current])
        nxt = int(row.argmin())
        tour.append(nxt)
        visited[nxt] = True
        current = nxt
    return tour


class UnionFind:
    """Disjoint sets over 0..n-1 kept in flat parent/rank arrays."""

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return True


def greedy_edge_tour(matrix) -> Tour:
    """Shortest-edge-first construction.

    An edge is taken unless it gives a city a third neighbour or closes a
    cycle before the last edge. Exactly ``n`` edges are accepted.
    """
    dist = np.asarray(matrix, dtype=float)
    n = dist.shape[0]
    if n == 0:
        return []
    rows, cols = np.triu_indices(n, k=1)
    order = np.argsort(dist[rows, cols], kind="stable")

    degree = [0] * n
    sets = UnionFind(n)
    adj: List[List[int]] = [[] for _ in range(n)]
    edge_count = 0
    for idx in order:
        if edge_count >= n:
            break
        a, b = int(rows[idx]), int(cols[idx])
        if degree[a] >= 2 or degree[b] >= 2:
            continue
        if edge_count < n - 1 and sets.find(a) == sets.find(b):
            continue
        adj[a].append(b)
        adj[b].append(a)
        degree[a] += 1
        degree[b] += 1
        sets.union(a, b)
        edge_count += 1

    tour = [0]
    visited = [False] * n
    visited[0] = True
    current = 0
    while len(tour) < n:
        nxt = next((v for v in adj[current] if not visited[v]), None)
        if nxt is None:
            raise RuntimeError(
                f"greedy edge walk dead-ended at city {current} after {len(tour)} of {n} cities"
            )
        tour.append(nxt)
        visited[nxt] = True
        current = nxt
    return tour


def _require_angles(points) -> None:
    missing = [p.id for p in points if p.angle is None]
    if missing:
        raise ValueError(f"points without an angle: {missing[:5]}")


def angular_sort_tour(points) -> Tour:
    _require_angles(points)
    return [p.id for p in sorted(points, key=lambda p: p.angle)]


def sonar_visit_tour(
    points, grid_size: int = 40, center: Tuple[float, float] = (0.5, 0.5)
) -> Tour:
    """Sweep ``4 * grid_size`` equal angular buckets; inside a bucket go outwards.

    The bucket count is fixed by ``grid_size`` rather than by the number of
    points.
    """
    _require_angles(points)
    steps = 4 * grid_size
    step = TWO_PI / steps
    cx, cy = center
    buckets: Dict[int, list] = defaultdict(list)
    for p in points:
        angle = p.angle % TWO_PI
        buckets[min(int(angle // step), steps - 1)].append(p)

    tour: Tour = []
    for key in sorted(buckets):
        ring = sorted(buckets[key], key=lambda p: math.hypot(p.x - cx, p.y - cy))
        tour.extend(p.id for p in ring)
    logger.debug("sonar_visit: %d points in %d/%d buckets", len(tour), len(buckets), steps)
    return tour


class ConstructiveSolver(Solver):
    name = "constructive"

    def __init__(self, strategy: str, start: int = 0, grid_size: int = 40):
        if strategy not in CONSTRUCT_PRIMS:
            raise ValueError(f"unknown construction strategy {strategy!r}")
        self.strategy = strategy
        self.start = start
        self.grid_size = grid_size
        self.name = strategy

    def solve(self, matrix, points: Sequence = None) -> Tour:
        if self.strategy == "nearest_neighbor":
            return nearest_neighbor_tour(matrix, self.start)
        if self.strategy == "greedy_edge":
            return greedy_edge_tour(matrix)
        if points is None:
            raise ValueError(f"{self.strategy} needs point coordinates")
        if self.strategy == "angular_sort":
            return angular_sort_tour(points)
        return sonar_visit_tour(points, self.grid_size)
