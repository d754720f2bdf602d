from .base import (
    Solver,
    SolveResult,
    Tour,
    check_tour,
    distance,
    efficiency,
    is_permutation,
    mst_lower_bound,
    population_lengths,
    to_graph,
    tour_length,
)
from .exact import (
    MAX_FEASIBLE_N,
    ExactSolver,
    brute_force_exact,
    find_optimal,
    held_karp,
    max_feasible_n,
)
from .heuristics import (
    CONSTRUCT_PRIMS,
    ConstructiveSolver,
    UnionFind,
    angular_sort_tour,
    greedy_edge_tour,
    nearest_neighbor_tour,
    sonar_visit_tour,
)
from .local_search import IMPROVE_PRIMS, should_zigzag, two_opt, zigzag
from .metaheuristics import (
    AnnealingConfig,
    GeneticConfig,
    GeneticSolver,
    genetic_algorithm,
    order_crossover,
    random_tour,
    roulette_select,
    simulated_annealing,
    swap_mutation,
)
from .pipeline import DEFAULT_PIPELINES, CompositionSolver, Pipeline

__all__ = [
    "Solver",
    "SolveResult",
    "Tour",
    "check_tour",
    "distance",
    "efficiency",
    "is_permutation",
    "mst_lower_bound",
    "population_lengths",
    "to_graph",
    "tour_length",
    "MAX_FEASIBLE_N",
    "ExactSolver",
    "brute_force_exact",
    "find_optimal",
    "held_karp",
    "max_feasible_n",
    "CONSTRUCT_PRIMS",
    "ConstructiveSolver",
    "UnionFind",
    "angular_sort_tour",
    "greedy_edge_tour",
    "nearest_neighbor_tour",
    "sonar_visit_tour",
    "IMPROVE_PRIMS",
    "should_zigzag",
    "two_opt",
    "zigzag",
    "AnnealingConfig",
    "GeneticConfig",
    "GeneticSolver",
    "genetic_algorithm",
    "order_crossover",
    "random_tour",
    "roulette_select",
    "simulated_annealing",
    "swap_mutation",
    "DEFAULT_PIPELINES",
    "CompositionSolver",
    "Pipeline",
]
