"""
Reporting and I/O Module

Consumes engine events and persists run results.

Features:
- Fitness history export (CSV) from the stream of stats events
- Best solution export (JSON) with (row, col) coordinate pairs
- Run summary with timing and resident memory
"""

import json
import os
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import psutil

from nq_constants import ReportingConstants, bytes_to_mb, max_pairs
from nq_exceptions import ReportingError
from nq_logging import get_logger
from nq_components.population_management import Individual
from nq_components.statistics import GenerationStats


def format_coordinate_pairs(genome: Sequence[int]) -> str:
    """Render a genome as ``(row, col)`` pairs, e.g. ``(0, 1), (1, 3)``."""
    return ", ".join(f"({row}, {col})" for row, col in enumerate(genome))


class RunReporter:
    """
    Event sink that records a run and writes its results to disk.

    Register ``handle_event`` as an engine listener.
    """

    def __init__(self, output_dir: str = "nqueens_results",
                 experiment_name: str = None):
        """
        Args:
            output_dir: Directory for output files
            experiment_name: Name of the experiment (auto-generated if None)
        """
        self.output_dir = output_dir
        self.experiment_name = experiment_name or f"nqueens_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.logger = get_logger()

        self.start_time = time.time()
        self.stats_history: List[GenerationStats] = []
        self.solution: Optional[Individual] = None
        self.errors: List[str] = []

    def handle_event(self, event) -> None:
        if event.type == 'stats':
            self.stats_history.append(event.data)
        elif event.type == 'solution':
            self.solution = event.data
        elif event.type == 'error':
            self.errors.append(event.data)

    def _ensure_output_dir(self):
        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise ReportingError(f"Cannot create output directory: {e}",
                                 output_dir=self.output_dir) from e

    def fitness_dataframe(self) -> pd.DataFrame:
        """Stats history as a DataFrame, one row per stats event."""
        columns = ['generation', 'best_fitness', 'average_fitness', 'worst_fitness', 'solved']
        rows = [{key: stats.to_dict()[key] for key in columns} for stats in self.stats_history]
        return pd.DataFrame(rows, columns=columns)

    def export_fitness_history(self, filename: str = ReportingConstants.FITNESS_HISTORY_FILE) -> str:
        """
        Write the fitness history to CSV.

        Returns:
            Path of the written file
        """
        self._ensure_output_dir()
        path = os.path.join(self.output_dir, filename)
        try:
            self.fitness_dataframe().to_csv(path, index=False)
        except OSError as e:
            raise ReportingError(f"Failed to write fitness history: {e}",
                                 output_dir=self.output_dir, file_type="csv") from e

        self.logger.debug("Fitness history exported", path=path, rows=len(self.stats_history))
        return path

    def solution_payload(self, solution: Individual = None) -> Dict[str, Any]:
        solution = solution or self.solution
        if solution is None:
            raise ReportingError("No solution recorded", output_dir=self.output_dir, file_type="json")

        board_size = len(solution.genome)
        return {
            'board_size': board_size,
            'genome': list(solution.genome),
            'fitness': solution.fitness,
            'max_fitness': max_pairs(board_size),
            'solved': solution.fitness == max_pairs(board_size),
            'coordinates': [[row, col] for row, col in enumerate(solution.genome)],
            'coordinate_pairs': format_coordinate_pairs(solution.genome)
        }

    def save_solution(self, solution: Individual = None) -> str:
        """
        Write the best solution to ``n-queens-solution-<n>.json``.

        Returns:
            Path of the written file
        """
        payload = self.solution_payload(solution)
        self._ensure_output_dir()
        filename = ReportingConstants.SOLUTION_FILE_TEMPLATE.format(board_size=payload['board_size'])
        path = os.path.join(self.output_dir, filename)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            raise ReportingError(f"Failed to write solution: {e}",
                                 output_dir=self.output_dir, file_type="json") from e
        return path

    def create_run_summary(self, params=None) -> Dict[str, Any]:
        last = self.stats_history[-1] if self.stats_history else None
        memory_info = psutil.Process().memory_info()

        summary = {
            'experiment_name': self.experiment_name,
            'timestamp': datetime.now().isoformat(),
            'total_runtime': time.time() - self.start_time,
            'generations_completed': last.generation if last else 0,
            'final_best_fitness': last.best_fitness if last else None,
            'best_ever_fitness': self.solution.fitness if self.solution else None,
            'solved': bool(self.solution and self.solution.fitness == max_pairs(len(self.solution.genome))),
            'errors': list(self.errors),
            'resident_memory_mb': round(bytes_to_mb(memory_info.rss), 2)
        }
        if params is not None:
            summary['params'] = params.to_dict()
        return summary

    def save_run_summary(self, params=None,
                         filename: str = ReportingConstants.RUN_SUMMARY_FILE) -> str:
        summary = self.create_run_summary(params)
        self._ensure_output_dir()
        path = os.path.join(self.output_dir, filename)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(summary, f, indent=2)
        except OSError as e:
            raise ReportingError(f"Failed to write run summary: {e}",
                                 output_dir=self.output_dir, file_type="json") from e
        return path
