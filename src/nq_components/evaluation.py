"""
Fitness Evaluation Module

Scores N-Queens genomes by counting non-attacking queen pairs.

A genome places one queen per row, so the only possible attacks are along a
column (unreachable for permutation genomes, still counted) or along a
diagonal. The best possible fitness is n(n-1)/2, the number of pairs.
"""

from typing import Dict, Sequence

from nq_constants import max_pairs


class FitnessEvaluator:
    """Pure, deterministic O(n^2) fitness function for one board size."""

    def __init__(self, board_size: int):
        self.board_size = board_size
        self.max_pairs = max_pairs(board_size)

        self.stats = {
            'evaluations_performed': 0
        }

    def conflicts(self, genome: Sequence[int]) -> int:
        """
        Count attacking queen pairs.

        Args:
            genome: Column of the queen on each row

        Returns:
            Number of pairs sharing a column or a diagonal
        """
        n = len(genome)
        count = 0

        for i in range(n):
            for j in range(i + 1, n):
                if genome[i] == genome[j] or abs(i - j) == abs(genome[i] - genome[j]):
                    count += 1

        return count

    def fitness(self, genome: Sequence[int]) -> int:
        """Number of non-attacking pairs, in [0, max_pairs]."""
        self.stats['evaluations_performed'] += 1
        return max_pairs(len(genome)) - self.conflicts(genome)

    def evaluate_population(self, population) -> None:
        """Assign fitness to every individual in place."""
        for individual in population:
            individual.fitness = self.fitness(individual.genome)

    def is_solution(self, fitness: int) -> bool:
        return fitness == self.max_pairs

    def get_statistics(self) -> Dict[str, int]:
        return self.stats.copy()
