"""
Selection Methods Module

Parent selection strategies and elitist survivor selection for the N-Queens
genetic algorithm.

Features:
- Fitness-proportionate (roulette wheel) selection
- Tournament selection over distinct contestants
- Elitism that carries the best individuals over by value
"""

import random
from abc import ABC, abstractmethod
from typing import Dict, List

from nq_config import Parameters, SelectionStrategy
from nq_constants import AlgorithmConstants
from nq_components.population_management import Individual


class SelectionMethod(ABC):
    """
    Parent selection interface.

    Implementations return an individual from the population without
    copying it; callers must not mutate the result.
    """

    def __init__(self, rng: random.Random):
        self.rng = rng
        self.selection_stats = {
            'selections_made': 0
        }

    @abstractmethod
    def select(self, population: List[Individual]) -> Individual:
        """Pick one parent from an evaluated population."""

    def select_parents(self, population: List[Individual]):
        """Pick two parents independently; they may be the same individual."""
        return self.select(population), self.select(population)

    def get_statistics(self) -> Dict[str, int]:
        return self.selection_stats.copy()


class RouletteWheelSelection(SelectionMethod):
    """Fitness-proportionate selection."""

    def select(self, population: List[Individual]) -> Individual:
        self.selection_stats['selections_made'] += 1

        total_fitness = sum(individual.fitness for individual in population)
        if total_fitness == 0:
            # All zero: uniform choice avoids division by zero
            return population[self.rng.randrange(len(population))]

        value = self.rng.random() * total_fitness
        for individual in population:
            value -= individual.fitness
            if value <= 0:
                return individual

        # Floating point leftovers
        return population[-1]


class TournamentSelection(SelectionMethod):
    """Best of k distinct randomly sampled individuals."""

    def __init__(self, rng: random.Random, tournament_size: int):
        super().__init__(rng)
        self.tournament_size = tournament_size
        self.selection_stats['tournaments_held'] = 0

    def select(self, population: List[Individual]) -> Individual:
        self.selection_stats['selections_made'] += 1
        self.selection_stats['tournaments_held'] += 1

        k = min(self.tournament_size, len(population))
        contestants = self.rng.sample(population, k)

        best = contestants[0]
        for contestant in contestants[1:]:
            if contestant.fitness > best.fitness:
                best = contestant
        return best


def create_selection_strategy(params: Parameters, rng: random.Random) -> SelectionMethod:
    """
    Build the selection method named by the parameters.

    Args:
        params: Validated parameters
        rng: Random source

    Returns:
        SelectionMethod instance
    """
    if params.selection_strategy is SelectionStrategy.TOURNAMENT:
        return TournamentSelection(rng, params.tournament_size)
    return RouletteWheelSelection(rng)


def elite_count(population_size: int) -> int:
    """Number of individuals carried over unchanged (at least one)."""
    return max(AlgorithmConstants.MIN_ELITES,
               int(population_size * AlgorithmConstants.ELITE_RATIO))


def select_elites(population: List[Individual]) -> List[Individual]:
    """
    Copy the top individuals of a population.

    The sort is stable, so equally fit individuals keep their relative order.

    Args:
        population: Evaluated population

    Returns:
        Copies of the best ``elite_count(len(population))`` individuals,
        best first
    """
    ranked = sorted(population, key=lambda individual: individual.fitness, reverse=True)
    return [individual.copy() for individual in ranked[:elite_count(len(population))]]
