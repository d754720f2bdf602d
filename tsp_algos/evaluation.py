import concurrent.futures
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np
import torch

from .data import create_distance_matrix, generate_normalized_points
from .solvers.base import Solver, check_tour, efficiency, mst_lower_bound, tour_length
from .solvers.exact import find_optimal


logger = logging.getLogger(__name__)


@dataclass
class Measurement:
    solver_name: str
    n: int
    length: float
    runtime: float
    efficiency: float


@dataclass
class BenchmarkResult:
    name: str
    max_n: int
    time_ms: float


def reference_length(matrix) -> float:
    """Exact optimum where feasible, otherwise the MST lower bound."""
    optimal = find_optimal(matrix)
    if optimal is not None:
        return optimal.length
    return mst_lower_bound(matrix)


def evaluate_solver(
    solver: Solver,
    matrix,
    points=None,
    reference: Optional[float] = None,
    device: Optional[str] = None,
) -> Measurement:
    """Time one ``solver.solve`` call and score the tour against ``reference``.

    With ``device`` set, solvers that take a torch matrix (``dist_mat``) get
    one built on that device before the clock starts.
    """
    if device is not None and hasattr(solver, "dist_mat"):
        solver.dist_mat = torch.tensor(np.asarray(matrix, dtype=float), device=torch.device(device))
    n = len(matrix)
    start = time.perf_counter()
    tour = solver.solve(matrix, points)
    runtime = time.perf_counter() - start
    check_tour(tour, n)
    length = tour_length(matrix, tour)
    return Measurement(
        solver_name=solver.name,
        n=n,
        length=length,
        runtime=runtime,
        efficiency=efficiency(length, reference) if reference is not None else 0.0,
    )


def compare_solvers(
    solvers: Sequence[Solver],
    points,
    matrix=None,
    reference: Optional[float] = None,
    max_workers: int = 1,
    device: Optional[str] = None,
) -> List[Measurement]:
    """Run every solver on the same instance; results keep the input order.

    With ``max_workers > 1`` each solver runs in its own worker process, so
    one solver's runtime never includes time spent on another.
    """
    if matrix is None:
        matrix = create_distance_matrix(points)
    if reference is None:
        reference = reference_length(matrix)
    if max_workers <= 1:
        return [evaluate_solver(solver, matrix, points, reference, device) for solver in solvers]
    with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as ex:
        futures = [
            ex.submit(evaluate_solver, solver, matrix, points, reference, device)
            for solver in solvers
        ]
        return [f.result() for f in futures]


def aggregate_measurements(measurements: List[Measurement]) -> dict:
    if not measurements:
        return {"efficiency": 0.0, "runtime": float("inf")}
    return {
        "efficiency": float(np.mean([m.efficiency for m in measurements])),
        "runtime": float(np.mean([m.runtime for m in measurements])),
    }


def _grid_size(n: int) -> int:
    return max(40, int(math.sqrt(n)) * 2)


def _timed_run(run_fn: Callable, n: int, needs_matrix: bool, seed: int) -> float:
    points = generate_normalized_points(n, _grid_size(n), seed)
    matrix = create_distance_matrix(points) if needs_matrix else None
    start = time.perf_counter()
    run_fn(points, matrix, n)
    return time.perf_counter() - start


def find_max_n(
    name: str,
    run_fn: Callable,
    min_n: int,
    max_n: int,
    timeout: float,
    needs_matrix: bool = True,
    seed: int = 12345,
) -> BenchmarkResult:
    """Largest n in ``[min_n, max_n]`` that ``run_fn(points, matrix, n)`` finishes within ``timeout`` seconds.

    n grows geometrically while runs are cheap, then the boundary is binary
    searched.
    """
    best_n = min_n
    n = min_n
    while n <= max_n:
        elapsed = _timed_run(run_fn, n, needs_matrix, seed)
        logger.info("%s n=%d: %.2fms", name, n, elapsed * 1000)
        if elapsed > timeout:
            break
        best_n = n
        if n == max_n:
            break
        if elapsed < timeout / 100:
            n = min(n * 2, max_n)
        elif elapsed < timeout / 10:
            n = min(math.ceil(n * 1.5), max_n)
        else:
            n += 1
        if n == best_n:
            n += 1

    low, high = best_n, min(n, max_n)
    while low < high - 1:
        mid = (low + high) // 2
        elapsed = _timed_run(run_fn, mid, needs_matrix, seed)
        logger.info("%s n=%d: %.2fms", name, mid, elapsed * 1000)
        if elapsed <= timeout:
            low = mid
        else:
            high = mid

    final = _timed_run(run_fn, low, needs_matrix, seed)
    return BenchmarkResult(name=name, max_n=low, time_ms=final * 1000)
