"""Tests for the construction heuristics."""
import math

import pytest

from tsp_algos.data import Point, generate_normalized_points, create_distance_matrix
from tsp_algos.solvers.base import efficiency, is_permutation, tour_length
from tsp_algos.solvers.exact import find_optimal
from tsp_algos.solvers.heuristics import (
    ConstructiveSolver,
    UnionFind,
    angular_sort_tour,
    greedy_edge_tour,
    nearest_neighbor_tour,
    sonar_visit_tour,
)


class TestNearestNeighbor:
    def test_square(self, square_matrix):
        assert nearest_neighbor_tour(square_matrix) == [0, 1, 2, 3]

    def test_start_city_and_ties(self, square_matrix):
        # From 2 both 1 and 3 are at distance 1; the lower index wins.
        assert nearest_neighbor_tour(square_matrix, start=2) == [2, 1, 0, 3]

    def test_permutation(self, matrix_40):
        assert is_permutation(nearest_neighbor_tour(matrix_40, start=17), 40)

    def test_empty(self):
        assert nearest_neighbor_tour([]) == []


class TestUnionFind:
    def test_union_and_find(self):
        sets = UnionFind(5)
        assert sets.union(0, 1)
        assert sets.union(3, 4)
        assert sets.find(0) == sets.find(1)
        assert sets.find(0) != sets.find(3)
        assert sets.union(1, 4)
        assert not sets.union(0, 3)

    def test_path_compression(self):
        sets = UnionFind(4)
        sets.parent = [0, 0, 1, 2]
        assert sets.find(3) == 0
        assert sets.parent == [0, 0, 0, 0]


class TestGreedyEdge:
    def test_square(self, square_matrix):
        tour = greedy_edge_tour(square_matrix)
        assert tour == [0, 1, 2, 3]

    def test_permutation(self, matrix_40):
        assert is_permutation(greedy_edge_tour(matrix_40), 40)

    def test_two_cities(self):
        assert greedy_edge_tour([[0, 1], [1, 0]]) == [0, 1]

    def test_single_city(self):
        assert greedy_edge_tour([[0]]) == [0]


class TestAngularSort:
    def test_sorted_by_angle(self):
        points = [
            Point(0, 0.0, 0.0, angle=3.0),
            Point(1, 0.0, 0.0, angle=-1.0),
            Point(2, 0.0, 0.0, angle=0.5),
        ]
        assert angular_sort_tour(points) == [1, 2, 0]

    def test_square(self, square_points, square_matrix):
        tour = angular_sort_tour(square_points)
        assert tour_length(square_matrix, tour) == pytest.approx(4.0)

    def test_requires_angle(self):
        with pytest.raises(ValueError):
            angular_sort_tour([Point(0, 0.1, 0.2)])


class TestSonarVisit:
    def test_inner_point_first_within_bucket(self):
        points = [
            Point(0, 0.9, 0.5, angle=0.0),
            Point(1, 0.6, 0.5, angle=0.0),
            Point(2, 0.4, 0.9, angle=math.atan2(0.4, -0.1)),
            Point(3, 0.1, 0.4, angle=math.atan2(-0.1, -0.4) + 2 * math.pi),
        ]
        # grid_size=1 gives four quarter-turn buckets.
        assert sonar_visit_tour(points, grid_size=1) == [1, 0, 2, 3]

    def test_negative_angles_are_normalized(self):
        points = [
            Point(0, 0.8, 0.2, angle=-math.pi / 4),
            Point(1, 0.8, 0.8, angle=math.pi / 4),
        ]
        assert sonar_visit_tour(points, grid_size=1) == [1, 0]

    def test_visits_all(self):
        points = generate_normalized_points(200, grid_size=40, seed=42)
        tour = sonar_visit_tour(points, grid_size=40)
        assert is_permutation(tour, 200)


class TestConstructiveSolver:
    @pytest.mark.parametrize(
        "strategy", ["nearest_neighbor", "greedy_edge", "angular_sort", "sonar_visit"]
    )
    def test_never_beats_optimum(self, strategy, points_9, matrix_9):
        optimum = find_optimal(matrix_9).length
        tour = ConstructiveSolver(strategy, grid_size=20).solve(matrix_9, points_9)
        assert is_permutation(tour, 9)
        assert efficiency(tour_length(matrix_9, tour), optimum) <= 100 + 1e-9

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            ConstructiveSolver("christofides")

    def test_angular_needs_points(self, matrix_9):
        with pytest.raises(ValueError):
            ConstructiveSolver("angular_sort").solve(matrix_9)

    def test_points_from_generator(self):
        points = generate_normalized_points(30, grid_size=20, seed=1)
        matrix = create_distance_matrix(points)
        tour = ConstructiveSolver("sonar_visit", grid_size=20).solve(matrix, points)
        assert is_permutation(tour, 30)
