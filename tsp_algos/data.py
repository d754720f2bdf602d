import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import tsplib95


CENTER = 0.5
MAX_RADIUS = 0.45


@dataclass(frozen=True)
class Point:
    id: int
    x: float
    y: float
    angle: Optional[float] = None


@dataclass
class Instance:
    name: str
    points: List[Point]
    matrix: np.ndarray
    optimum: Optional[float]


def _angle(x: float, y: float) -> float:
    angle = math.atan2(y - CENTER, x - CENTER)
    return angle + 2 * math.pi if angle < 0 else angle


def generate_normalized_points(
    num_points: int, grid_size: int = 40, seed: int = 12345
) -> List[Point]:
    """Pick distinct cell centres of a ``grid_size`` grid inside a disc on [0, 1]^2.

    Candidates are the cell centres within ``MAX_RADIUS`` of the centre; they
    are shuffled with ``random.Random(seed)`` and the first ``num_points`` kept,
    so the same arguments always give the same points.
    """
    step = 1 / grid_size
    candidates: List[Tuple[float, float]] = []
    for gx in range(grid_size):
        for gy in range(grid_size):
            x = (gx + 0.5) * step
            y = (gy + 0.5) * step
            if math.hypot(x - CENTER, y - CENTER) <= MAX_RADIUS:
                candidates.append((x, y))
    random.Random(seed).shuffle(candidates)
    return [
        Point(id=idx, x=x, y=y, angle=_angle(x, y))
        for idx, (x, y) in enumerate(candidates[:num_points])
    ]


def normalize_points(coords: Sequence[Tuple[float, float]]) -> List[Point]:
    """Scale raw coordinates into the unit square (aspect kept) and add angles."""
    if not coords:
        return []
    arr = np.asarray(coords, dtype=float)
    lo = arr.min(axis=0)
    extent = float((arr.max(axis=0) - lo).max()) or 1.0
    scaled = (arr - lo) / extent
    return [
        Point(id=idx, x=float(x), y=float(y), angle=_angle(float(x), float(y)))
        for idx, (x, y) in enumerate(scaled)
    ]


def create_distance_matrix(points: Sequence[Point]) -> np.ndarray:
    xy = np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2)
    diff = xy[:, None, :] - xy[None, :, :]
    return np.hypot(diff[..., 0], diff[..., 1])


def scale_points_to_percent(points: Sequence[Point]) -> List[Dict]:
    return [
        {
            "id": p.id,
            "x": p.x,
            "y": p.y,
            "angle": p.angle,
            "percent_x": p.x * 100,
            "percent_y": p.y * 100,
        }
        for p in points
    ]


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        tour_file = tsplib95.load(candidate)
        nodes = list(tour_file.tours[0])
        dist = 0.0
        for i in range(len(nodes)):
            dist += problem.get_weight(nodes[i], nodes[(i + 1) % len(nodes)])
        return float(dist)
    return None


def load_instance(path: Path) -> Instance:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"TSPLIB file not found: {path}")
    problem = tsplib95.load(path)
    nodes = list(problem.get_nodes())
    if not problem.node_coords:
        raise ValueError(f"{path} has no NODE_COORD_SECTION; coordinates are required")
    points = normalize_points([tuple(problem.node_coords[v][:2]) for v in nodes])
    n = len(nodes)
    matrix = np.zeros((n, n))
    for i, a in enumerate(nodes):
        for j in range(i + 1, n):
            matrix[i, j] = matrix[j, i] = problem.get_weight(a, nodes[j])
    return Instance(
        name=problem.name or path.stem,
        points=points,
        matrix=matrix,
        optimum=_load_optimum(problem, path),
    )


def load_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    instances: List[Instance] = []
    for p in sorted(Path(root).glob("*.tsp")):
        inst = load_instance(p)
        if max_nodes is not None and len(inst.points) > max_nodes:
            continue
        instances.append(inst)
        if max_instances is not None and len(instances) >= max_instances:
            break
    return instances
