"""
Genetic Operations Module

Permutation-preserving crossover and mutation for N-Queens genomes.

Features:
- Partially Mapped Crossover (PMX) with a validate-and-substitute safety net
- Single swap mutation, one Bernoulli trial per offspring
- Operation counters for run statistics
"""

import random
from typing import Callable, Dict, List

from nq_exceptions import GenomeIntegrityError, validate_genome
from nq_logging import get_logger
from nq_components.population_management import Individual


class GeneticOperations:
    """
    Crossover and mutation operators for permutation genomes.

    Both operators keep the permutation invariant for valid parents. Any
    child that still fails validation is replaced by a fresh individual from
    ``individual_factory``.
    """

    def __init__(self, crossover_rate: float, mutation_rate: float,
                 rng: random.Random, individual_factory: Callable[[], Individual]):
        """
        Initialize genetic operations.

        Args:
            crossover_rate: Probability of applying PMX to a parent pair
            mutation_rate: Probability of one swap per offspring
            rng: Random source
            individual_factory: Zero-argument callable returning a fresh
                random individual, used to replace invalid children
        """
        self.crossover_rate = crossover_rate
        self.mutation_rate = mutation_rate
        self.rng = rng
        self.individual_factory = individual_factory
        self.logger = get_logger()

        self.crossover_count = 0
        self.mutation_count = 0
        self.repair_count = 0

    def crossover(self, parent1: Individual, parent2: Individual) -> Individual:
        """
        Combine two parents with PMX.

        With probability ``1 - crossover_rate`` the child is a plain copy of
        ``parent1``. The child's fitness is always unset.

        Args:
            parent1: Parent whose segment is copied
            parent2: Parent filling the remaining positions

        Returns:
            Child individual with a permutation genome
        """
        if self.rng.random() >= self.crossover_rate:
            return Individual(genome=list(parent1.genome))

        n = len(parent1.genome)
        if n < 2:
            return Individual(genome=list(parent1.genome))

        point1, point2 = sorted(self.rng.sample(range(n), 2))
        child_genome = self._pmx(parent1.genome, parent2.genome, point1, point2)
        self.crossover_count += 1

        return self._checked(child_genome, "crossover")

    def _pmx(self, genome1: List[int], genome2: List[int],
             point1: int, point2: int) -> List[int]:
        """Partially mapped crossover over the inclusive segment [point1, point2]."""
        n = len(genome1)
        child = [None] * n
        used = set()

        for i in range(point1, point2 + 1):
            child[i] = genome1[i]
            used.add(genome1[i])

        mapping = {genome1[i]: genome2[i] for i in range(point1, point2 + 1)}

        for i in range(n):
            if point1 <= i <= point2:
                continue

            value = genome2[i]
            steps = 0
            while value in used and value in mapping and steps < n:
                value = mapping[value]
                steps += 1

            if value in used:
                # Broken or cyclic mapping chain
                value = next(v for v in range(n) if v not in used)

            child[i] = value
            used.add(value)

        return child

    def mutate(self, individual: Individual) -> Individual:
        """
        Swap two distinct positions with probability ``mutation_rate``.

        Mutates ``individual`` in place and resets its fitness when it
        changes.

        Args:
            individual: Offspring to mutate

        Returns:
            The same individual
        """
        n = len(individual.genome)
        if n < 2 or self.rng.random() >= self.mutation_rate:
            return individual

        i, j = self.rng.sample(range(n), 2)
        individual.genome[i], individual.genome[j] = individual.genome[j], individual.genome[i]
        individual.fitness = None
        self.mutation_count += 1

        return individual

    def breed(self, parent1: Individual, parent2: Individual) -> Individual:
        """Crossover, mutate and validate one offspring."""
        child = self.mutate(self.crossover(parent1, parent2))
        return self._checked(child.genome, "mutation")

    def _checked(self, genome: List[int], stage: str) -> Individual:
        try:
            validate_genome(genome, len(genome))
        except (GenomeIntegrityError, TypeError) as e:
            self.repair_count += 1
            self.logger.log_genome_repair(f"{stage}: {e}")
            return self.individual_factory()
        return Individual(genome=genome)

    def get_statistics(self) -> Dict[str, int]:
        """Get statistics about genetic operations performed."""
        return {
            'crossover_count': self.crossover_count,
            'mutation_count': self.mutation_count,
            'repair_count': self.repair_count
        }
