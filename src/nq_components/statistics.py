"""
Statistics Collector

Per-generation aggregate metrics and best-ever tracking.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from nq_constants import max_pairs
from nq_components.population_management import Individual


@dataclass(frozen=True)
class GenerationStats:
    """Snapshot of one generation, safe to hand to the caller."""

    generation: int
    best_fitness: int
    average_fitness: float
    worst_fitness: int
    best_genome: List[int] = field(default_factory=list)
    solved: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generation': self.generation,
            'best_fitness': self.best_fitness,
            'average_fitness': self.average_fitness,
            'worst_fitness': self.worst_fitness,
            'best_genome': list(self.best_genome),
            'solved': self.solved
        }


class StatisticsCollector:
    """
    Computes GenerationStats and keeps the best individual of the run.

    The best-ever individual is only replaced on a strict improvement, so its
    fitness never decreases even when the live population regresses.
    """

    def __init__(self, board_size: int):
        self.board_size = board_size
        self.max_pairs = max_pairs(board_size)
        self.best_solution: Optional[Individual] = None

    def compute(self, population: List[Individual], generation: int) -> GenerationStats:
        """
        Summarize an evaluated population and update the best-ever record.

        Args:
            population: Evaluated population (non-empty)
            generation: Generation counter the population belongs to

        Returns:
            GenerationStats for this generation
        """
        best_index = 0
        best_fitness = population[0].fitness
        worst_fitness = population[0].fitness
        total_fitness = 0

        for index, individual in enumerate(population):
            total_fitness += individual.fitness
            if individual.fitness > best_fitness:
                best_fitness = individual.fitness
                best_index = index
            if individual.fitness < worst_fitness:
                worst_fitness = individual.fitness

        best = population[best_index]
        if self.best_solution is None or best.fitness > self.best_solution.fitness:
            self.best_solution = best.copy()

        return GenerationStats(
            generation=generation,
            best_fitness=best_fitness,
            average_fitness=total_fitness / len(population),
            worst_fitness=worst_fitness,
            best_genome=list(best.genome),
            solved=best_fitness == self.max_pairs
        )

    def reset(self):
        self.best_solution = None
