"""
Comparable TSP solvers (exact, constructive, local search, metaheuristic)
over a shared distance-matrix and tour representation.
"""

__all__ = [
    "data",
    "evaluation",
    "solvers",
]
