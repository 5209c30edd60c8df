"""
N-Queens GA Components Module

Modular components for the N-Queens genetic algorithm. Each component
handles a specific aspect of the search:

- PopulationManager / Individual: random permutation genomes and populations
- FitnessEvaluator: non-attacking pair count
- RouletteWheelSelection / TournamentSelection: parent selection, elitism
- GeneticOperations: PMX crossover and swap mutation
- DiversityGuard: random-immigrant injection on stagnation
- StatisticsCollector: per-generation metrics and best-ever tracking
- RunReporter: result export

Usage:
    from nq_components import FitnessEvaluator, PopulationManager
"""

from .evaluation import FitnessEvaluator
from .population_management import Individual, PopulationManager, create_random
from .selection import (
    SelectionMethod,
    RouletteWheelSelection,
    TournamentSelection,
    create_selection_strategy,
    elite_count,
    select_elites
)
from .genetic_operations import GeneticOperations
from .diversity_guard import DiversityGuard
from .statistics import GenerationStats, StatisticsCollector
from .reporting import RunReporter, format_coordinate_pairs

__all__ = [
    'FitnessEvaluator',
    'Individual',
    'PopulationManager',
    'create_random',
    'SelectionMethod',
    'RouletteWheelSelection',
    'TournamentSelection',
    'create_selection_strategy',
    'elite_count',
    'select_elites',
    'GeneticOperations',
    'DiversityGuard',
    'GenerationStats',
    'StatisticsCollector',
    'RunReporter',
    'format_coordinate_pairs'
]

__version__ = '1.0.0'
