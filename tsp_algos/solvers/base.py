import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import networkx as nx
import numpy as np
import torch


Tour = List[int]


def distance(a, b) -> float:
    """Euclidean distance between two objects exposing ``x`` and ``y``."""
    return math.hypot(b.x - a.x, b.y - a.y)


def tour_length(matrix, tour: Sequence[int]) -> float:
    dist = 0.0
    n = len(tour)
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        dist += float(matrix[a][b])
    return dist


def population_lengths(matrix, tours: Sequence[Sequence[int]]) -> List[float]:
    """Lengths of many equal-sized tours in one indexing pass.

    Runs on the matrix's device when ``matrix`` is a torch tensor.
    """
    if not tours:
        return []
    if torch.is_tensor(matrix):
        idx = torch.tensor(tours, device=matrix.device, dtype=torch.long)
        return matrix[idx, idx.roll(-1, dims=1)].sum(dim=1).tolist()
    mat = np.asarray(matrix, dtype=float)
    idx = np.asarray(tours, dtype=np.int64)
    if idx.shape[1] == 0:
        return [0.0] * len(tours)
    return mat[idx, np.roll(idx, -1, axis=1)].sum(axis=1).tolist()


def to_graph(matrix) -> nx.Graph:
    """Weighted complete graph of ``matrix``; zero entries are not edges."""
    mat = np.asarray(matrix, dtype=float)
    n = mat.shape[0]
    graph = nx.Graph()
    graph.add_nodes_from(range(n))
    rows, cols = np.nonzero(np.triu(mat, k=1))
    graph.add_weighted_edges_from(
        (int(i), int(j), float(mat[i, j])) for i, j in zip(rows, cols)
    )
    return graph


def mst_lower_bound(matrix) -> float:
    """Weight of a minimum spanning tree over the complete graph of ``matrix``.

    Any tour minus one edge is a spanning tree, so this never exceeds the
    optimal tour length. Zero off-diagonal entries are not treated as edges.
    """
    if len(matrix) <= 1:
        return 0.0
    graph = to_graph(matrix)
    mst = nx.minimum_spanning_tree(graph, algorithm="prim")
    return float(mst.size(weight="weight"))


def efficiency(solution_length: float, reference_length: float) -> float:
    if solution_length <= 0:
        return 0.0
    return reference_length / solution_length * 100


def is_permutation(tour: Sequence[int], n: int) -> bool:
    return len(tour) == n and sorted(tour) == list(range(n))


def check_tour(tour: Sequence[int], n: int) -> None:
    if not is_permutation(tour, n):
        raise ValueError(f"tour is not a permutation of 0..{n - 1}: {list(tour)}")


class Solver(ABC):
    name: str = "base"

    @abstractmethod
    def solve(self, matrix, points=None) -> Tour:
        raise NotImplementedError


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str = ""
    optimum: Optional[float] = None

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum

    @property
    def efficiency(self) -> float:
        if self.optimum is None:
            return 0.0
        return efficiency(self.length, self.optimum)
