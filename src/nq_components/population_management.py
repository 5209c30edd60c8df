"""
Population Management Module

Handles individual creation and population initialization for the N-Queens
genetic algorithm.

Features:
- Random permutation genomes (one queen per row and per column)
- Value copies of individuals so generations never share genomes
- Population initialization with immediate fitness evaluation
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from nq_components.evaluation import FitnessEvaluator


@dataclass
class Individual:
    """
    A genome plus its cached fitness.

    ``genome[row]`` is the column of the queen on ``row``. ``fitness`` is
    None until the individual has been evaluated.
    """

    genome: List[int] = field(default_factory=list)
    fitness: Optional[int] = None

    def copy(self) -> 'Individual':
        return Individual(genome=list(self.genome), fitness=self.fitness)

    def to_dict(self) -> Dict[str, Any]:
        return {'genome': list(self.genome), 'fitness': self.fitness}


def create_random(n: int, rng: random.Random) -> Individual:
    """
    Create an individual with a uniformly random permutation genome.

    Columns are drawn without replacement from a shrinking candidate list,
    so the result needs no repair.

    Args:
        n: Board size
        rng: Random source

    Returns:
        Unevaluated individual
    """
    available = list(range(n))
    genome = []

    for _ in range(n):
        index = rng.randrange(len(available))
        genome.append(available.pop(index))

    return Individual(genome=genome)


class PopulationManager:
    """
    Manages population-level operations for the N-Queens search.

    Creates random individuals for a fixed board size and keeps simple
    creation counters for reporting.
    """

    def __init__(self, board_size: int, population_size: int,
                 evaluator: FitnessEvaluator, rng: random.Random):
        """
        Initialize population manager.

        Args:
            board_size: Number of rows/columns on the board
            population_size: Target population size
            evaluator: Fitness evaluator for the same board size
            rng: Random source shared with the rest of the engine
        """
        self.board_size = board_size
        self.population_size = population_size
        self.evaluator = evaluator
        self.rng = rng

        self.stats = {
            'individuals_created': 0,
            'populations_initialized': 0
        }

    def create_random_individual(self, evaluate: bool = False) -> Individual:
        """Create one random individual, optionally scoring it right away."""
        individual = create_random(self.board_size, self.rng)
        self.stats['individuals_created'] += 1

        if evaluate:
            individual.fitness = self.evaluator.fitness(individual.genome)
        return individual

    def initialize_population(self) -> List[Individual]:
        """
        Build and evaluate a fresh random population.

        Returns:
            List of ``population_size`` evaluated individuals
        """
        population = [self.create_random_individual() for _ in range(self.population_size)]
        self.evaluator.evaluate_population(population)
        self.stats['populations_initialized'] += 1
        return population

    def get_statistics(self) -> Dict[str, int]:
        return self.stats.copy()
