"""
N-Queens Genetic Algorithm Engine

Owns one run of the search: the active parameters, the population, the
generation counter and the best individual seen so far. Callers drive it
through the control protocol (init / start / pause / reset) and observe it
through events (stats / solution / error).

The engine is synchronous. ``start()`` advances one generation immediately;
further generations are pulled with ``advance_one_generation()`` or the
bounded ``run()`` loop, which re-checks the running flag at every
generation boundary. ``engine_worker.EngineWorker`` runs an engine on its
own thread behind message queues.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from nq_config import Parameters, DEFAULT_PARAMETERS
from nq_exceptions import ProtocolError
from nq_logging import get_logger
from nq_components.evaluation import FitnessEvaluator
from nq_components.population_management import Individual, PopulationManager
from nq_components.selection import create_selection_strategy, select_elites
from nq_components.genetic_operations import GeneticOperations
from nq_components.diversity_guard import DiversityGuard
from nq_components.statistics import GenerationStats, StatisticsCollector


class EngineState(Enum):
    IDLE = "idle"
    INITIALIZED = "initialized"
    RUNNING = "running"
    PAUSED = "paused"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class Event:
    """Outbound message: ``stats``, ``solution`` or ``error``."""

    type: str
    data: Any

    def to_dict(self) -> Dict[str, Any]:
        data = self.data.to_dict() if hasattr(self.data, 'to_dict') else self.data
        return {'type': self.type, 'data': data}


EventListener = Callable[[Event], None]
ParamsInput = Union[Parameters, Mapping[str, Any], None]


class NQueensEngine:
    """
    Genetic algorithm state machine for the N-Queens problem.

    Every random decision draws from the injected ``rng`` so a seeded engine
    replays the same run.
    """

    MESSAGE_TYPES = ('init', 'start', 'pause', 'reset')

    def __init__(self, params: ParamsInput = None, rng: random.Random = None,
                 seed: Optional[int] = None, listener: EventListener = None) -> None:
        """
        Args:
            params: Initial parameters (Parameters or raw mapping); clamped
                before use
            rng: Random source; a new ``random.Random(seed)`` when omitted
            seed: Seed for the default random source
            listener: Optional callable receiving every emitted Event
        """
        self.logger = get_logger()
        self.rng = rng if rng is not None else random.Random(seed)
        self.params = self._resolve_params(params, DEFAULT_PARAMETERS)

        self.listeners: List[EventListener] = []
        if listener is not None:
            self.listeners.append(listener)

        self.state = EngineState.IDLE
        self.population: List[Individual] = []
        self.generation = 0
        self.last_stats: Optional[GenerationStats] = None

        self._build_components()

    @staticmethod
    def _resolve_params(params: ParamsInput, base: Parameters) -> Parameters:
        if params is None:
            return base
        raw = params.to_dict() if isinstance(params, Parameters) else params
        return Parameters.from_raw(raw, base=base)

    def _build_components(self):
        """Create the operators for the current parameters."""
        params = self.params

        self.evaluator = FitnessEvaluator(params.board_size)
        self.population_manager = PopulationManager(
            params.board_size,
            params.population_size,
            self.evaluator,
            self.rng
        )
        self.selection = create_selection_strategy(params, self.rng)
        self.genetic_operations = GeneticOperations(
            crossover_rate=params.crossover_rate,
            mutation_rate=params.mutation_rate,
            rng=self.rng,
            individual_factory=self.population_manager.create_random_individual
        )
        self.diversity_guard = DiversityGuard(
            self.rng,
            lambda: self.population_manager.create_random_individual(evaluate=True)
        )
        self.statistics = StatisticsCollector(params.board_size)

    # Listener management
    def add_listener(self, listener: EventListener):
        self.listeners.append(listener)

    def _emit(self, event_type: str, data: Any):
        event = Event(event_type, data)
        for listener in list(self.listeners):
            listener(event)

    # Control protocol
    def handle_message(self, message: Mapping[str, Any]) -> None:
        """
        Dispatch one control message.

        Unknown or malformed messages produce a single ``error`` event and
        stop a running engine; nothing else changes.

        Args:
            message: Mapping with ``type`` and, for init/reset, optional ``params``
        """
        try:
            message_type = self._message_type(message)
        except ProtocolError as e:
            self.logger.log_protocol_error(e.message_type, e)
            self._halt()
            self._emit('error', str(e))
            return

        if message_type == 'init':
            self.init(message.get('params'))
        elif message_type == 'start':
            self.start()
        elif message_type == 'pause':
            self.pause()
        else:
            self.reset(message.get('params'))

    def _message_type(self, message) -> str:
        if not isinstance(message, Mapping):
            raise ProtocolError(f"Control message must be a mapping, got {type(message).__name__}")

        message_type = message.get('type')
        if message_type not in self.MESSAGE_TYPES:
            raise ProtocolError(f"Unknown message type: {message_type}", message_type=message_type)

        params = message.get('params')
        if params is not None and not isinstance(params, (Parameters, Mapping)):
            raise ProtocolError(f"Invalid params payload for {message_type}: {type(params).__name__}",
                                message_type=message_type)
        return message_type

    def init(self, params: ParamsInput = None) -> GenerationStats:
        """
        (Re)initialize the run and emit the generation-0 statistics.

        Args:
            params: Replacement parameters; fields left out keep their held
                values. None keeps the held parameters.

        Returns:
            Statistics of the fresh population
        """
        self.params = self._resolve_params(params, self.params)
        self._build_components()
        self.logger.log_config_summary(self.params)

        self.generation = 0
        self.statistics.reset()
        self.population = self.population_manager.initialize_population()
        self.state = EngineState.INITIALIZED

        stats = self.statistics.compute(self.population, self.generation)
        self.last_stats = stats
        self._emit('stats', stats)
        return stats

    def reset(self, params: ParamsInput = None) -> GenerationStats:
        """Clear population, counter and best-ever, then initialize again."""
        self.population = []
        return self.init(params)

    def start(self) -> None:
        """
        Begin or resume advancing.

        Creates a population without emitting statistics when none exists,
        then advances one generation immediately. No-op while running.
        """
        if self.state is EngineState.RUNNING:
            self.logger.debug("Start ignored, engine already running")
            return

        if self.generation == 0 and not self.population:
            self.population = self.population_manager.initialize_population()

        self.state = EngineState.RUNNING
        self.logger.info("Run started", generation=self.generation,
                         max_generations=self.params.max_generations)
        self.advance_one_generation()

    def pause(self) -> None:
        """Stop advancing after the current generation."""
        if self.state is EngineState.RUNNING:
            self.state = EngineState.PAUSED
            self.logger.info("Run paused", generation=self.generation)

    def _halt(self):
        if self.state is EngineState.RUNNING:
            self.state = EngineState.PAUSED

    @property
    def is_running(self) -> bool:
        return self.state is EngineState.RUNNING

    @property
    def best_solution(self) -> Optional[Individual]:
        best = self.statistics.best_solution
        return best.copy() if best is not None else None

    # Generation loop
    def advance_one_generation(self) -> GenerationStats:
        """
        Run one full generation step.

        Reproduction with elitism, diversity guard, statistics and the
        termination check. Emits ``stats`` and, on termination,
        ``solution``.

        Returns:
            Statistics of the new generation
        """
        if not self.population:
            self.population = self.population_manager.initialize_population()

        self.generation += 1
        self._create_new_generation()

        injected = self.diversity_guard.maintain(self.population)
        if injected:
            self.logger.log_diversity_injection(self.generation, injected)

        stats = self.statistics.compute(self.population, self.generation)
        self.last_stats = stats
        best_ever = self.statistics.best_solution
        self.logger.log_generation_complete(self.generation, stats.best_fitness,
                                            stats.average_fitness, best_ever.fitness)
        self._emit('stats', stats)

        if stats.solved or self.generation >= self.params.max_generations:
            self.state = EngineState.TERMINATED
            self.logger.log_termination(self.generation, stats.solved, best_ever.fitness)
            self._emit('solution', best_ever.copy())

        return stats

    def _create_new_generation(self):
        """Elites first, then bred offspring; evaluate the whole population."""
        new_population = select_elites(self.population)

        while len(new_population) < self.params.population_size:
            parent1, parent2 = self.selection.select_parents(self.population)
            new_population.append(self.genetic_operations.breed(parent1, parent2))

        self.population = new_population
        self.evaluator.evaluate_population(self.population)

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        Keep advancing while the engine is running.

        The running flag is checked once per generation boundary, so a
        ``pause()`` issued from a listener stops the loop after the current
        generation.

        Args:
            max_steps: Optional cap on generations advanced by this call

        Returns:
            Number of generations advanced
        """
        steps = 0
        while self.is_running and (max_steps is None or steps < max_steps):
            self.advance_one_generation()
            steps += 1
        return steps

    def snapshot(self) -> Dict[str, Any]:
        """Read-only summary of the engine for callers and logs."""
        best = self.statistics.best_solution
        return {
            'state': self.state.value,
            'generation': self.generation,
            'params': self.params.to_dict(),
            'best_fitness': best.fitness if best is not None else None,
            'max_fitness': self.params.max_pairs
        }

    def get_statistics(self) -> Dict[str, Dict[str, int]]:
        """Component counters for the current run."""
        return {
            'population_manager': self.population_manager.get_statistics(),
            'evaluation': self.evaluator.get_statistics(),
            'selection': self.selection.get_statistics(),
            'genetic_operations': self.genetic_operations.get_statistics(),
            'diversity_guard': self.diversity_guard.get_statistics()
        }
