from tsp_algos.data import create_distance_matrix, generate_normalized_points
from tsp_algos.evaluation import compare_solvers, reference_length
from tsp_algos.solvers import DEFAULT_PIPELINES, Pipeline


def main():
    points = generate_normalized_points(10, grid_size=20, seed=42)
    matrix = create_distance_matrix(points)
    reference = reference_length(matrix)
    solvers = [Pipeline.parse(p).build_solver(grid_size=20) for p in DEFAULT_PIPELINES]
    for m in compare_solvers(solvers, points, matrix, reference):
        print(f"{m.solver_name}: length={m.length:.4f} efficiency={m.efficiency:.1f}%")


if __name__ == "__main__":
    main()
