"""
Diversity Guard

Detects a collapsed fitness distribution and restarts part of the
population with fresh random individuals.

The check runs after every generation's evaluation. When more than 70% of
the population sits within 0.001 of the mean fitness, 30% of the slots
(drawn independently from [1, population_size), so the best elite at index
0 survives) are overwritten with new, evaluated individuals. Draws may
collide, so fewer slots than nominal can actually change.
"""

import random
from typing import Callable, Dict, List

from nq_constants import AlgorithmConstants
from nq_components.population_management import Individual


class DiversityGuard:
    """Stagnation detector with random-immigrant injection."""

    def __init__(self, rng: random.Random, individual_factory: Callable[[], Individual],
                 stagnation_ratio: float = AlgorithmConstants.STAGNATION_RATIO,
                 injection_ratio: float = AlgorithmConstants.INJECTION_RATIO,
                 tolerance: float = AlgorithmConstants.STAGNATION_TOLERANCE):
        """
        Args:
            rng: Random source
            individual_factory: Returns a fresh, already evaluated individual
            stagnation_ratio: Share of same-fitness individuals that triggers injection
            injection_ratio: Share of the population replaced on injection
            tolerance: Maximum distance from the mean counted as same fitness
        """
        self.rng = rng
        self.individual_factory = individual_factory
        self.stagnation_ratio = stagnation_ratio
        self.injection_ratio = injection_ratio
        self.tolerance = tolerance

        self.stats = {
            'checks': 0,
            'injections': 0,
            'individuals_injected': 0
        }

    def count_near_average(self, population: List[Individual]) -> int:
        """Number of individuals whose fitness is within tolerance of the mean."""
        average = sum(individual.fitness for individual in population) / len(population)
        return sum(1 for individual in population
                   if abs(individual.fitness - average) < self.tolerance)

    def is_stagnant(self, population: List[Individual]) -> bool:
        return self.count_near_average(population) > len(population) * self.stagnation_ratio

    def maintain(self, population: List[Individual]) -> int:
        """
        Inject fresh individuals into a stagnant population, in place.

        Args:
            population: Evaluated population, best elite at index 0

        Returns:
            Number of replacement draws made (0 when the population is diverse)
        """
        self.stats['checks'] += 1
        if len(population) < 2 or not self.is_stagnant(population):
            return 0

        replace_count = int(len(population) * self.injection_ratio)
        for _ in range(replace_count):
            index = self.rng.randrange(1, len(population))
            population[index] = self.individual_factory()

        self.stats['injections'] += 1
        self.stats['individuals_injected'] += replace_count
        return replace_count

    def get_statistics(self) -> Dict[str, int]:
        return self.stats.copy()
