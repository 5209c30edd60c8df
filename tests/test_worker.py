"""
Engine Worker Tests

Tests the threaded, queue-driven engine wrapper.
"""

import os
import sys
import time
import unittest
from queue import Empty

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine_worker import EngineWorker
from nqueens_engine import EngineState
from nq_logging import setup_logging


class TestEngineWorker(unittest.TestCase):
    """Test message passing across the worker thread."""

    def setUp(self):
        setup_logging(level="ERROR")
        self.workers = []

    def tearDown(self):
        for worker in self.workers:
            worker.shutdown(timeout=10)

    def make_worker(self, **kwargs) -> EngineWorker:
        worker = EngineWorker(seed=kwargs.pop('seed', 7), **kwargs)
        self.workers.append(worker)
        return worker

    def test_init_event_arrives(self):
        worker = self.make_worker()
        worker.start_thread()
        worker.init({'board_size': 6, 'population_size': 20})

        event = worker.get_event(timeout=10)
        self.assertEqual(event.type, 'stats')
        self.assertEqual(event.data.generation, 0)

    def test_run_to_solution(self):
        worker = self.make_worker()
        worker.init({'board_size': 5, 'population_size': 30, 'max_generations': 200})
        worker.start()
        worker.start_thread()

        event = worker.wait_for('solution', timeout=60)

        self.assertIsNotNone(event)
        self.assertEqual(len(event.data.genome), 5)
        self.assertIs(worker.engine.state, EngineState.TERMINATED)

    def test_pause_right_after_start(self):
        worker = self.make_worker()
        worker.init({'board_size': 50, 'max_generations': 100000})
        worker.start()
        worker.pause()
        worker.start_thread()

        self.assertEqual(worker.get_event(timeout=10).data.generation, 0)
        self.assertEqual(worker.get_event(timeout=30).data.generation, 1)

        time.sleep(0.2)
        self.assertEqual(worker.drain_events(), [])
        self.assertIs(worker.engine.state, EngineState.PAUSED)

    def test_unknown_message_then_start(self):
        worker = self.make_worker(params={'board_size': 6, 'population_size': 20})
        worker.send({'type': 'jump'})
        worker.start()
        worker.start_thread()

        first = worker.get_event(timeout=10)
        self.assertEqual(first.type, 'error')

        second = worker.get_event(timeout=10)
        self.assertEqual(second.type, 'stats')
        self.assertEqual(second.data.generation, 1)

    def test_huge_value_does_not_stop_worker(self):
        worker = self.make_worker()
        worker.start_thread()
        worker.init({'board_size': 10 ** 400, 'population_size': 10})
        worker.init({'board_size': 5})

        first = worker.wait_for('stats', timeout=30)
        second = worker.wait_for('stats', timeout=30)

        self.assertEqual(len(first.data.best_genome), 50)
        self.assertEqual(len(second.data.best_genome), 5)
        self.assertTrue(worker.is_alive)

    def test_failing_listener_reports_error_and_keeps_serving(self):
        worker = self.make_worker(params={'board_size': 6, 'population_size': 20})
        failures = []

        def fail_once(event):
            if not failures:
                failures.append(event)
                raise RuntimeError("listener failure")

        worker.engine.add_listener(fail_once)
        worker.init()
        worker.start()
        worker.start_thread()

        error = worker.wait_for('error', timeout=10)
        self.assertIsNotNone(error)
        self.assertIn('listener failure', error.data)

        stats = worker.wait_for('stats', timeout=10)
        self.assertIsNotNone(stats)
        self.assertEqual(stats.data.generation, 1)
        self.assertTrue(worker.is_alive)

    def test_get_event_timeout(self):
        worker = self.make_worker()
        worker.start_thread()

        with self.assertRaises(Empty):
            worker.get_event(timeout=0.05)
        self.assertIsNone(worker.wait_for('solution', timeout=0.05))

    def test_context_manager_stops_thread(self):
        with EngineWorker(seed=1) as worker:
            self.assertTrue(worker.is_alive)
        self.assertFalse(worker.is_alive)


if __name__ == '__main__':
    unittest.main()
