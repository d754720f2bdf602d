"""Tests for construct -> improve solver pipelines."""
import pytest
import torch

from tsp_algos.solvers.base import is_permutation, tour_length
from tsp_algos.solvers.exact import find_optimal
from tsp_algos.solvers.heuristics import nearest_neighbor_tour
from tsp_algos.solvers.local_search import two_opt
from tsp_algos.solvers.metaheuristics import AnnealingConfig, GeneticConfig
from tsp_algos.solvers.pipeline import (
    DEFAULT_PIPELINES,
    TWO_OPT_ITERATIONS,
    CompositionSolver,
    Pipeline,
)


class TestPipeline:
    def test_parse(self):
        pipeline = Pipeline.parse("nearest_neighbor+two_opt")
        assert pipeline.construct == "nearest_neighbor"
        assert pipeline.improve_ops == ["two_opt"]
        assert pipeline.signature == "nearest_neighbor+two_opt"

    def test_single_improver_as_string(self):
        assert Pipeline("greedy_edge", "zigzag").improve_ops == ["zigzag"]

    def test_unknown_steps(self):
        with pytest.raises(ValueError):
            Pipeline.parse("random_insertion")
        with pytest.raises(ValueError):
            Pipeline.parse("nearest_neighbor+three_opt")

    def test_build_solver_name(self):
        solver = Pipeline.parse("angular_sort+zigzag").build_solver()
        assert isinstance(solver, CompositionSolver)
        assert solver.name == "angular_sort+zigzag"


class TestCompositionSolver:
    @pytest.mark.parametrize("text", DEFAULT_PIPELINES)
    def test_default_pipelines(self, text, points_9, matrix_9):
        solver = Pipeline.parse(text).build_solver(
            grid_size=20,
            annealing=AnnealingConfig(max_iterations=500, random_seed=0),
            genetic=GeneticConfig(population_size=10, generations=10, random_seed=0),
        )
        tour = solver.solve(matrix_9, points_9)
        assert is_permutation(tour, 9)
        assert tour_length(matrix_9, tour) >= find_optimal(matrix_9).length - 1e-9

    def test_improvers_do_not_worsen(self, points_40, matrix_40):
        base = Pipeline.parse("nearest_neighbor").build_solver().solve(matrix_40, points_40)
        improved = (
            Pipeline.parse("nearest_neighbor+two_opt").build_solver().solve(matrix_40, points_40)
        )
        assert tour_length(matrix_40, improved) <= tour_length(matrix_40, base)

    def test_zigzag_needs_points(self, matrix_9):
        solver = Pipeline.parse("nearest_neighbor+zigzag").build_solver()
        with pytest.raises(ValueError):
            solver.solve(matrix_9)

    def test_genetic_gets_torch_matrix(self, matrix_9):
        solver = Pipeline.parse("genetic").build_solver(
            genetic=GeneticConfig(population_size=8, generations=3, random_seed=1)
        )
        solver.dist_mat = torch.tensor(matrix_9)
        assert is_permutation(solver.solve(matrix_9), 9)

    def test_two_opt_move_budget(self, points_40, matrix_40):
        start = nearest_neighbor_tour(matrix_40)
        pipeline = Pipeline.parse("nearest_neighbor+two_opt")
        assert pipeline.build_solver().solve(matrix_40, points_40) == two_opt(
            matrix_40, start, TWO_OPT_ITERATIONS
        )
        assert pipeline.build_solver(two_opt_iterations=1).solve(matrix_40, points_40) == two_opt(
            matrix_40, start, 1
        )
