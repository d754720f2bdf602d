import pytest

from tsp_algos.data import create_distance_matrix, generate_normalized_points, normalize_points


# Unit square, ids in perimeter order: optimal tour 0-1-2-3 has length 4.
SQUARE_COORDS = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def square_points():
    return normalize_points(SQUARE_COORDS)


@pytest.fixture
def square_matrix(square_points):
    return create_distance_matrix(square_points)


@pytest.fixture
def points_9():
    return generate_normalized_points(9, grid_size=20, seed=7)


@pytest.fixture
def matrix_9(points_9):
    return create_distance_matrix(points_9)


@pytest.fixture
def points_40():
    return generate_normalized_points(40, grid_size=30, seed=99)


@pytest.fixture
def matrix_40(points_40):
    return create_distance_matrix(points_40)
