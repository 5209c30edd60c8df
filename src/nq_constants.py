"""
Configuration Constants for the N-Queens Genetic Algorithm

Centralizes all magic numbers and hard-coded values for better maintainability.
All constants are organized by category with clear documentation.
"""

from typing import Dict, Tuple


class ParameterRanges:
    """Closed ranges every parameter is clamped into before the engine sees it."""

    BOARD_SIZE = (4, 50)
    POPULATION_SIZE = (10, 1000)
    TOURNAMENT_SIZE = (2, 20)
    CROSSOVER_RATE = (0.0, 1.0)
    MUTATION_RATE = (0.0, 1.0)
    MAX_GENERATIONS = (10, 100000)

    @classmethod
    def as_dict(cls) -> Dict[str, Tuple[float, float]]:
        return {
            'board_size': cls.BOARD_SIZE,
            'population_size': cls.POPULATION_SIZE,
            'tournament_size': cls.TOURNAMENT_SIZE,
            'crossover_rate': cls.CROSSOVER_RATE,
            'mutation_rate': cls.MUTATION_RATE,
            'max_generations': cls.MAX_GENERATIONS,
        }


class ParameterDefaults:
    """Values used when neither the caller nor a previous run supplies one."""

    BOARD_SIZE = 8
    POPULATION_SIZE = 100
    SELECTION_STRATEGY = "rouletteWheel"
    TOURNAMENT_SIZE = 5
    CROSSOVER_RATE = 0.8
    MUTATION_RATE = 0.2
    MAX_GENERATIONS = 1000


class AlgorithmConstants:
    """Algorithm-specific configuration constants."""

    # Elitism
    ELITE_RATIO = 0.1                 # Share of population carried over unchanged
    MIN_ELITES = 1                    # The best individual always survives

    # Diversity guard
    STAGNATION_TOLERANCE = 0.001      # Distance from the mean counted as "same fitness"
    STAGNATION_RATIO = 0.7            # Share of same-fitness individuals that triggers injection
    INJECTION_RATIO = 0.3             # Share of population replaced by fresh individuals


class StorageConstants:
    """Named-configuration persistence settings."""

    STORAGE_KEY = "nQueensConfigs"
    DEFAULT_STORE_FILE = "nqueens_configs.json"


class ReportingConstants:
    """Output file names written by the run reporter."""

    FITNESS_HISTORY_FILE = "fitness_history.csv"
    RUN_SUMMARY_FILE = "run_summary.json"
    FITNESS_PLOT_FILE = "fitness_history.png"
    SOLUTION_FILE_TEMPLATE = "n-queens-solution-{board_size}.json"


class MemoryConstants:
    """Memory-related configuration constants."""

    BYTES_PER_KB = 1024
    BYTES_PER_MB = 1024 * 1024


# Integer-valued parameter fields (everything else numeric is a rate)
INTEGER_FIELDS = ('board_size', 'population_size', 'tournament_size', 'max_generations')
RATE_FIELDS = ('crossover_rate', 'mutation_rate')

# camelCase wire keys -> snake_case field names
FIELD_ALIASES = {
    'boardSize': 'board_size',
    'populationSize': 'population_size',
    'selectionStrategy': 'selection_strategy',
    'tournamentSize': 'tournament_size',
    'crossoverRate': 'crossover_rate',
    'mutationRate': 'mutation_rate',
    'maxGenerations': 'max_generations',
}


def max_pairs(board_size: int) -> int:
    """Number of distinct queen pairs on an n x n board, i.e. the best fitness."""
    return board_size * (board_size - 1) // 2


def bytes_to_mb(bytes_value: int) -> float:
    """Convert bytes to megabytes."""
    return bytes_value / MemoryConstants.BYTES_PER_MB
