"""
Stochastic improvers: simulated annealing over segment reversals and a
permutation genetic algorithm with order crossover.

Randomness always comes from an explicit ``random.Random`` so runs can be
reproduced from a seed.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import torch

from .base import Solver, Tour, population_lengths, tour_length


logger = logging.getLogger(__name__)


@dataclass
class AnnealingConfig:
    max_iterations: int = 5000
    initial_temperature: float = 1.0
    cooling_rate: float = 0.9995
    random_seed: Optional[int] = None


@dataclass
class GeneticConfig:
    population_size: int = 50
    generations: int = 100
    mutation_rate: float = 0.1
    random_seed: Optional[int] = None


def simulated_annealing(
    matrix,
    initial_tour: Sequence[int],
    config: AnnealingConfig = None,
    rng: random.Random = None,
) -> Tour:
    cfg = config or AnnealingConfig()
    rng = rng or random.Random(cfg.random_seed)
    current = list(initial_tour)
    n = len(current)
    if n < 3:
        return current
    dist = np.asarray(matrix, dtype=float).tolist()
    current_len = tour_length(dist, current)
    best = current[:]
    best_len = current_len
    temperature = cfg.initial_temperature
    accepted = 0

    for _ in range(cfg.max_iterations):
        i = rng.randrange(n - 1)
        j = rng.randrange(n - 1)
        if j >= i:
            j += 1
        lo, hi = (i, j) if i < j else (j, i)
        prev = current[(lo - 1) % n]
        nxt = current[(hi + 1) % n]
        old = dist[prev][current[lo]] + dist[current[hi]][nxt]
        new = dist[prev][current[hi]] + dist[current[lo]][nxt]
        delta = new - old

        if delta < 0 or (
            temperature > 0 and rng.random() < math.exp(-delta / temperature)
        ):
            current[lo : hi + 1] = current[lo : hi + 1][::-1]
            current_len = tour_length(dist, current)
            accepted += 1
            if current_len < best_len:
                best = current[:]
                best_len = current_len
        temperature *= cfg.cooling_rate

    logger.debug(
        "simulated_annealing: accepted %d/%d moves, best=%.6f",
        accepted,
        cfg.max_iterations,
        best_len,
    )
    return best


def random_tour(n: int, rng: random.Random) -> Tour:
    tour = list(range(n))
    rng.shuffle(tour)
    return tour


def order_crossover(parent1: Sequence[int], parent2: Sequence[int], rng: random.Random) -> Tour:
    """OX: keep ``parent1[start..end]`` in place, fill the rest in parent2's order."""
    n = len(parent1)
    start = rng.randrange(n)
    end = start + rng.randrange(n - start)
    child = [-1] * n
    used = set()
    for i in range(start, end + 1):
        child[i] = parent1[i]
        used.add(parent1[i])
    idx = (end + 1) % n
    for i in range(n):
        city = parent2[(end + 1 + i) % n]
        if city not in used:
            child[idx] = city
            idx = (idx + 1) % n
    return child


def swap_mutation(tour: Sequence[int], rng: random.Random) -> Tour:
    mutated = list(tour)
    n = len(mutated)
    i = rng.randrange(n)
    j = rng.randrange(n)
    mutated[i], mutated[j] = mutated[j], mutated[i]
    return mutated


def roulette_select(
    population: Sequence[Tour], fitnesses: Sequence[float], rng: random.Random
) -> Tour:
    r = rng.random() * sum(fitnesses)
    for tour, fit in zip(population, fitnesses):
        r -= fit
        if r <= 0:
            return tour
    return population[-1]


def genetic_algorithm(
    matrix,
    n: Optional[int] = None,
    config: GeneticConfig = None,
    rng: random.Random = None,
) -> Tour:
    cfg = config or GeneticConfig()
    rng = rng or random.Random(cfg.random_seed)
    n = len(matrix) if n is None else n
    if cfg.population_size < 1:
        raise ValueError(f"population_size must be positive, got {cfg.population_size}")
    if n < 2:
        return list(range(n))

    population: List[Tour] = [random_tour(n, rng) for _ in range(cfg.population_size)]
    for gen in range(cfg.generations):
        lengths = population_lengths(matrix, population)
        if min(lengths) <= 0:
            return list(population[lengths.index(min(lengths))])
        fitnesses = [1.0 / length for length in lengths]

        best_idx = max(range(len(population)), key=fitnesses.__getitem__)
        next_population: List[Tour] = [list(population[best_idx])]
        while len(next_population) < cfg.population_size:
            parent1 = roulette_select(population, fitnesses, rng)
            parent2 = roulette_select(population, fitnesses, rng)
            child = order_crossover(parent1, parent2, rng)
            if rng.random() < cfg.mutation_rate:
                child = swap_mutation(child, rng)
            next_population.append(child)
        population = next_population
        logger.debug("genetic: generation %d best=%.6f", gen, lengths[best_idx])

    # The carried elite is not necessarily still the best individual.
    lengths = population_lengths(matrix, population)
    best_idx = min(range(len(population)), key=lengths.__getitem__)
    return population[best_idx]


class GeneticSolver(Solver):
    name = "genetic"

    def __init__(self, config: GeneticConfig = None):
        self.config = config or GeneticConfig()
        self.dist_mat = None  # set externally when a torch matrix is available

    def solve(self, matrix, points=None) -> Tour:
        if self.dist_mat is not None and torch.is_tensor(self.dist_mat):
            return genetic_algorithm(self.dist_mat, len(matrix), self.config)
        return genetic_algorithm(matrix, len(matrix), self.config)
