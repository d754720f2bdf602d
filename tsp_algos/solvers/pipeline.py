from dataclasses import dataclass, field
from typing import List, Optional

from .base import Solver, Tour
from .exact import ExactSolver
from .heuristics import CONSTRUCT_PRIMS, ConstructiveSolver
from .local_search import two_opt, zigzag
from .metaheuristics import (
    AnnealingConfig,
    GeneticConfig,
    GeneticSolver,
    simulated_annealing,
)


STANDALONE_PRIMS = ["genetic", "exact"]
IMPROVE_OPS = ["two_opt", "zigzag", "simulated_annealing"]
# one improving move per 2-opt pass, so this is a move budget
TWO_OPT_ITERATIONS = 10_000

# The comparison set reported by the command line harness.
DEFAULT_PIPELINES = [
    "exact",
    "sonar_visit",
    "sonar_visit+zigzag",
    "angular_sort",
    "angular_sort+zigzag",
    "nearest_neighbor",
    "nearest_neighbor+two_opt",
    "greedy_edge",
    "greedy_edge+two_opt",
    "nearest_neighbor+simulated_annealing",
    "genetic",
]


@dataclass
class Pipeline:
    construct: str
    improve_ops: List[str] = field(default_factory=list)

    def __post_init__(self):
        if isinstance(self.improve_ops, str):
            self.improve_ops = [self.improve_ops]
        if self.construct not in CONSTRUCT_PRIMS + STANDALONE_PRIMS:
            raise ValueError(f"unknown construction step {self.construct!r}")
        for op in self.improve_ops:
            if op not in IMPROVE_OPS:
                raise ValueError(f"unknown improvement step {op!r}")

    @staticmethod
    def parse(text: str) -> "Pipeline":
        construct, *ops = [part.strip() for part in text.split("+")]
        return Pipeline(construct=construct, improve_ops=ops)

    def build_solver(
        self,
        grid_size: int = 40,
        annealing: Optional[AnnealingConfig] = None,
        genetic: Optional[GeneticConfig] = None,
        two_opt_iterations: int = TWO_OPT_ITERATIONS,
    ) -> Solver:
        return CompositionSolver(
            self.construct,
            self.improve_ops,
            grid_size=grid_size,
            annealing=annealing,
            genetic=genetic,
            two_opt_iterations=two_opt_iterations,
        )

    @property
    def signature(self) -> str:
        return "+".join([self.construct, *self.improve_ops])


class CompositionSolver(Solver):
    """
    Solver built from phases: construct -> improve.
    Improvers run in the order given, each starting from the previous tour.
    """

    name = "composition"

    def __init__(
        self,
        construct: str,
        improve_ops: List[str],
        grid_size: int = 40,
        annealing: Optional[AnnealingConfig] = None,
        genetic: Optional[GeneticConfig] = None,
        two_opt_iterations: int = TWO_OPT_ITERATIONS,
    ):
        self.construct = construct
        self.improve_ops = improve_ops
        self.grid_size = grid_size
        self.annealing = annealing or AnnealingConfig()
        self.genetic = genetic or GeneticConfig()
        self.two_opt_iterations = two_opt_iterations
        self.dist_mat = None  # torch matrix for batched fitness, set by the harness
        self.name = "+".join([construct, *improve_ops])

    def _base(self) -> Solver:
        if self.construct == "exact":
            return ExactSolver()
        if self.construct == "genetic":
            solver = GeneticSolver(self.genetic)
            solver.dist_mat = self.dist_mat
            return solver
        return ConstructiveSolver(self.construct, grid_size=self.grid_size)

    def solve(self, matrix, points=None) -> Tour:
        cur = self._base().solve(matrix, points)
        for op in self.improve_ops:
            if op == "two_opt":
                cur = two_opt(matrix, cur, self.two_opt_iterations)
            elif op == "zigzag":
                if points is None:
                    raise ValueError("zigzag needs point coordinates")
                cur = zigzag(points, cur)
            elif op == "simulated_annealing":
                cur = simulated_annealing(matrix, cur, self.annealing)
        return cur
