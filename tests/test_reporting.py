"""
Reporting and CLI Tests

Tests result export (CSV, JSON, plot) and the command-line entry point.
"""

import os
import sys
import json
import unittest

import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nq_components.reporting import RunReporter, format_coordinate_pairs
from nq_components.population_management import Individual
from nq_exceptions import ReportingError
from plot_maker import FitnessHistoryPlotter
from main import main, build_parser, overrides_from_args

from tests.test_fixtures import TestFixtures, FOUR_QUEENS_SOLUTION
from nq_logging import setup_logging


class TestRunReporter(unittest.TestCase):
    """Test event recording and result files."""

    def setUp(self):
        setup_logging(level="ERROR")
        self.test_dir = TestFixtures.create_temp_test_dir()
        self.reporter = RunReporter(output_dir=self.test_dir, experiment_name="test_run")

        self.params = TestFixtures.get_test_parameters(board_size=6, max_generations=15)
        self.engine, _ = TestFixtures.create_engine(self.params, seed=8)
        self.engine.add_listener(self.reporter.handle_event)
        self.engine.init()
        self.engine.start()
        self.engine.run()

    def tearDown(self):
        TestFixtures.cleanup_path(self.test_dir)

    def test_events_recorded(self):
        self.assertEqual(len(self.reporter.stats_history), self.engine.generation + 1)
        self.assertIsNotNone(self.reporter.solution)
        self.assertEqual(self.reporter.stats_history[0].generation, 0)

    def test_export_fitness_history(self):
        path = self.reporter.export_fitness_history()

        self.assertTrue(os.path.exists(path))
        data = pd.read_csv(path)
        self.assertEqual(list(data.columns),
                         ['generation', 'best_fitness', 'average_fitness', 'worst_fitness', 'solved'])
        self.assertEqual(len(data), len(self.reporter.stats_history))
        self.assertEqual(data['generation'].iloc[0], 0)

    def test_save_solution(self):
        path = self.reporter.save_solution()

        self.assertTrue(path.endswith('n-queens-solution-6.json'))
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
        self.assertEqual(payload['board_size'], 6)
        self.assertEqual(payload['max_fitness'], 15)
        self.assertEqual(payload['fitness'], self.engine.best_solution.fitness)
        self.assertEqual(len(payload['coordinates']), 6)

    def test_save_run_summary(self):
        path = self.reporter.save_run_summary(self.params)

        with open(path, 'r', encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['experiment_name'], 'test_run')
        self.assertEqual(summary['generations_completed'], self.engine.generation)
        self.assertEqual(summary['params']['board_size'], 6)
        self.assertGreater(summary['resident_memory_mb'], 0)

    def test_plot_fitness_history(self):
        csv_path = self.reporter.export_fitness_history()
        plot_path = FitnessHistoryPlotter(csv_path).plot_fitness_history(max_fitness=15)

        self.assertTrue(plot_path.endswith('.png'))
        self.assertGreater(os.path.getsize(plot_path), 0)


class TestReportingHelpers(unittest.TestCase):

    def test_coordinate_pairs(self):
        self.assertEqual(format_coordinate_pairs(FOUR_QUEENS_SOLUTION), "(0, 1), (1, 3), (2, 0), (3, 2)")

    def test_solution_payload_marks_solved(self):
        reporter = RunReporter(output_dir="unused")
        payload = reporter.solution_payload(Individual(genome=list(FOUR_QUEENS_SOLUTION), fitness=6))

        self.assertTrue(payload['solved'])
        self.assertEqual(payload['coordinates'][1], [1, 3])

    def test_missing_solution_raises(self):
        with self.assertRaises(ReportingError):
            RunReporter(output_dir="unused").solution_payload()


class TestCommandLine(unittest.TestCase):
    """Test the CLI entry point on small runs."""

    def setUp(self):
        self.test_dir = TestFixtures.create_temp_test_dir()
        self.output_dir = os.path.join(self.test_dir, 'results')
        self.config_file = os.path.join(self.test_dir, 'configs.json')

    def tearDown(self):
        TestFixtures.cleanup_path(self.test_dir)

    def run_cli(self, *args):
        argv = ['--output_dir', self.output_dir, '--config_file', self.config_file,
                '--no_progress', '--log_level', 'ERROR', '--seed', '5']
        return main(argv + list(args))

    def test_overrides_only_include_given_options(self):
        args = build_parser().parse_args(['-n', '10', '--selection', 'tournament'])
        self.assertEqual(overrides_from_args(args), {'board_size': 10, 'selection_strategy': 'tournament'})

    def test_small_board_is_solved(self):
        exit_code = self.run_cli('-n', '4', '-ps', '40', '-g', '300', '--plot')

        self.assertEqual(exit_code, 0)
        for filename in ('fitness_history.csv', 'n-queens-solution-4.json',
                         'run_summary.json', 'fitness_history.png'):
            self.assertTrue(os.path.exists(os.path.join(self.output_dir, filename)), filename)

    def test_unsolved_run_exit_code(self):
        exit_code = self.run_cli('-n', '40', '-ps', '10', '-g', '10')

        self.assertEqual(exit_code, 1)
        with open(os.path.join(self.output_dir, 'run_summary.json'), 'r', encoding='utf-8') as f:
            self.assertEqual(json.load(f)['generations_completed'], 10)

    def test_save_and_load_config(self):
        self.run_cli('-n', '5', '-ps', '30', '-g', '20', '--save_config', 'five')

        with open(self.config_file, 'r', encoding='utf-8') as f:
            saved = json.load(f)['nQueensConfigs']['five']
        self.assertEqual(saved['board_size'], 5)

        self.run_cli('--load_config', 'five')
        with open(os.path.join(self.output_dir, 'run_summary.json'), 'r', encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['params']['board_size'], 5)
        self.assertEqual(summary['params']['population_size'], 30)

    def test_list_configs(self):
        self.assertEqual(self.run_cli('--list_configs'), 0)

    def test_corrupt_config_file(self):
        with open(self.config_file, 'w', encoding='utf-8') as f:
            f.write('[')
        self.assertEqual(self.run_cli('--load_config', 'x'), 2)


if __name__ == '__main__':
    unittest.main()
