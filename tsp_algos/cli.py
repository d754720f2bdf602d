import argparse
import logging
import time
from pathlib import Path
from typing import List

from tsp_algos.data import create_distance_matrix, generate_normalized_points, load_instance
from tsp_algos.evaluation import Measurement, compare_solvers, find_max_n, reference_length
from tsp_algos.solvers import (
    DEFAULT_PIPELINES,
    AnnealingConfig,
    GeneticConfig,
    Pipeline,
    angular_sort_tour,
    brute_force_exact,
    genetic_algorithm,
    greedy_edge_tour,
    held_karp,
    nearest_neighbor_tour,
    simulated_annealing,
    sonar_visit_tour,
    two_opt,
    zigzag,
)


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _build_solvers(args) -> list:
    annealing = AnnealingConfig(random_seed=args.seed)
    genetic = GeneticConfig(random_seed=args.seed)
    solvers = []
    for text in args.pipelines:
        pipeline = Pipeline.parse(text)
        if pipeline.construct == "exact" and args.n_points > 20:
            log(f"skipping {pipeline.signature}: n={args.n_points} is past the exact limit")
            continue
        solvers.append(pipeline.build_solver(args.grid_size, annealing, genetic))
    return solvers


def _print_measurements(measurements: List[Measurement], reference: float) -> None:
    print(f"reference length: {reference:.4f}")
    for m in measurements:
        print(
            f"{m.solver_name:40s} length={m.length:10.4f} "
            f"time={m.runtime * 1000:9.2f}ms efficiency={m.efficiency:6.2f}%"
        )


def compare(args) -> None:
    log(f"generating {args.n_points} points (grid={args.grid_size}, seed={args.seed})")
    points = generate_normalized_points(args.n_points, args.grid_size, args.seed)
    if len(points) < args.n_points:
        log(f"grid only holds {len(points)} points")
        args.n_points = len(points)
    matrix = create_distance_matrix(points)
    reference = reference_length(matrix)
    solvers = _build_solvers(args)
    log(f"running {len(solvers)} solvers")
    measurements = compare_solvers(
        solvers,
        points,
        matrix,
        reference,
        max_workers=args.workers,
        device=None if args.device == "cpu" else args.device,
    )
    _print_measurements(measurements, reference)


def tsplib(args) -> None:
    log(f"loading {args.path}")
    inst = load_instance(Path(args.path))
    args.n_points = len(inst.points)
    reference = inst.optimum if inst.optimum is not None else reference_length(inst.matrix)
    solvers = _build_solvers(args)
    log(f"{inst.name}: {args.n_points} cities, running {len(solvers)} solvers")
    measurements = compare_solvers(
        solvers, inst.points, inst.matrix, reference, max_workers=args.workers
    )
    _print_measurements(measurements, reference)


BENCHMARKS = [
    ("brute_force", lambda pts, m, n: brute_force_exact(m, n), 4, 12, True),
    ("held_karp", lambda pts, m, n: held_karp(m, n), 4, 20, True),
    ("angular_sort", lambda pts, m, n: angular_sort_tour(pts), 50_000, 500_000, False),
    ("sonar_visit", lambda pts, m, n: sonar_visit_tour(pts), 50_000, 500_000, False),
    ("nearest_neighbor", lambda pts, m, n: nearest_neighbor_tour(m), 10, 10_000, True),
    ("greedy_edge", lambda pts, m, n: greedy_edge_tour(m), 10, 5_000, True),
    (
        "nearest_neighbor+two_opt",
        lambda pts, m, n: two_opt(m, nearest_neighbor_tour(m)),
        10,
        3_000,
        True,
    ),
    (
        "angular_sort+zigzag",
        lambda pts, m, n: zigzag(pts, angular_sort_tour(pts)),
        10,
        5_000,
        False,
    ),
    (
        "nearest_neighbor+simulated_annealing",
        lambda pts, m, n: simulated_annealing(m, nearest_neighbor_tour(m), AnnealingConfig(random_seed=0)),
        10,
        2_000,
        True,
    ),
    ("genetic", lambda pts, m, n: genetic_algorithm(m, n, GeneticConfig(random_seed=0)), 10, 500, True),
]


def benchmark(args) -> None:
    log(f"finding the largest n each algorithm handles within {args.timeout}s")
    results = []
    for name, run_fn, min_n, max_n, needs_matrix in BENCHMARKS:
        if args.only and name not in args.only:
            continue
        log(f"testing {name}")
        result = find_max_n(name, run_fn, min_n, max_n, args.timeout, needs_matrix)
        log(f"{name}: max n={result.max_n} in {result.time_ms:.2f}ms")
        results.append(result)
    print("=" * 60)
    for r in sorted(results, key=lambda r: r.max_n, reverse=True):
        print(f"{r.name:40s} {r.max_n:>8d} {r.time_ms:>10.2f}ms")


def main(argv=None):
    parser = argparse.ArgumentParser(description="TSP algorithm comparison CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging from solvers")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser("compare", help="Run solvers on generated points")
    compare_parser.add_argument("--points", dest="n_points", type=int, default=10)
    compare_parser.add_argument("--grid-size", type=int, default=40)
    compare_parser.add_argument("--seed", type=int, default=12345)
    compare_parser.add_argument(
        "--workers", type=int, default=1, help="Worker processes; solvers run one per process"
    )
    compare_parser.add_argument("--device", default="cpu", help="torch device for GA fitness")
    compare_parser.add_argument("--pipelines", nargs="+", default=DEFAULT_PIPELINES)
    compare_parser.set_defaults(func=compare)

    tsplib_parser = subparsers.add_parser("tsplib", help="Run solvers on a TSPLIB instance")
    tsplib_parser.add_argument("path")
    tsplib_parser.add_argument("--grid-size", type=int, default=40)
    tsplib_parser.add_argument("--seed", type=int, default=12345)
    tsplib_parser.add_argument(
        "--workers", type=int, default=1, help="Worker processes; solvers run one per process"
    )
    tsplib_parser.add_argument("--pipelines", nargs="+", default=DEFAULT_PIPELINES)
    tsplib_parser.set_defaults(func=tsplib)

    bench_parser = subparsers.add_parser("benchmark", help="Largest n per algorithm under a time limit")
    bench_parser.add_argument("--timeout", type=float, default=30.0)
    bench_parser.add_argument("--only", nargs="*", help="Algorithm names to run")
    bench_parser.set_defaults(func=benchmark)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    args.func(args)


if __name__ == "__main__":
    main()
