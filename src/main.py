"""
Genetic Algorithm for the N-Queens Problem

Command-line interface for running the N-Queens genetic algorithm engine.

Features:
- Every engine parameter configurable from the command line
- Named configurations saved to and loaded from a JSON store
- Progress bar over generations, structured logging
- Fitness history (CSV), best solution (JSON) and optional fitness plot

Usage:
    python main.py --board_size 12 --population_size 200 --selection tournament --seed 7
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from config_store import ConfigStore
from nq_config import Parameters
from nq_constants import StorageConstants
from nq_exceptions import NQueensException
from nq_logging import setup_logging, log_exception
from nqueens_engine import NQueensEngine
from nq_components.reporting import RunReporter, format_coordinate_pairs
from plot_maker import FitnessHistoryPlotter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Solve the N-Queens problem with a genetic algorithm.')

    # GA parameters (unset options keep the loaded/default values)
    parser.add_argument('--board_size', '-n', type=int, help="Board size N (4-50, default: 8)")
    parser.add_argument('--population_size', '-ps', type=int, help="Population size (10-1000, default: 100)")
    parser.add_argument('--selection', '-s', type=str, choices=['rouletteWheel', 'tournament'],
                        help="Parent selection strategy (default: rouletteWheel)")
    parser.add_argument('--tournament_size', '-ts', type=int, help="Tournament size (2-20, default: 5)")
    parser.add_argument('--crossover_rate', '-cr', type=float, help="Crossover rate (0-1, default: 0.8)")
    parser.add_argument('--mutation_rate', '-mr', type=float, help="Mutation rate (0-1, default: 0.2)")
    parser.add_argument('--max_generations', '-g', type=int, help="Maximum generations (10-100000, default: 1000)")
    parser.add_argument('--seed', type=int, default=None, help="Random seed for a reproducible run")

    # Named configurations
    parser.add_argument('--config_file', type=str, default=StorageConstants.DEFAULT_STORE_FILE,
                        help="JSON file holding named configurations")
    parser.add_argument('--load_config', type=str, help="Start from a saved configuration")
    parser.add_argument('--save_config', type=str, help="Save the final parameters under this name")
    parser.add_argument('--list_configs', action='store_true', help="List saved configurations and exit")

    # Output
    parser.add_argument('--output_dir', '-o', type=str, default="nqueens_results",
                        help="Folder for the fitness history, solution and summary")
    parser.add_argument('--plot', action='store_true', help="Also save a fitness history plot")
    parser.add_argument('--no_progress', action='store_true', help="Disable the progress bar")
    parser.add_argument('--log_level', type=str, default="INFO",
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help="Console log level")
    parser.add_argument('--log_to_file', action='store_true', help="Also write a log file to the output folder")

    return parser


def overrides_from_args(args) -> Dict[str, Any]:
    """Parameter fields explicitly given on the command line."""
    overrides = {
        'board_size': args.board_size,
        'population_size': args.population_size,
        'selection_strategy': args.selection,
        'tournament_size': args.tournament_size,
        'crossover_rate': args.crossover_rate,
        'mutation_rate': args.mutation_rate,
        'max_generations': args.max_generations
    }
    return {key: value for key, value in overrides.items() if value is not None}


def resolve_parameters(args, store: ConfigStore, logger) -> Parameters:
    base = None
    if args.load_config:
        base = store.load_config(args.load_config)
        if base is None:
            logger.warning("Saved configuration not found, using defaults", name=args.load_config)
    return Parameters.from_raw(overrides_from_args(args), base=base)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the N-Queens genetic algorithm.

    Parses command-line arguments, resolves the parameters, runs the engine
    to termination and writes the results to the output directory.

    Returns:
        Process exit code (0 when the board was solved, 1 otherwise)
    """
    args = build_parser().parse_args(argv)

    logger = setup_logging(
        level=args.log_level,
        log_to_file=args.log_to_file,
        output_dir=args.output_dir,
        console_colors=True
    )

    store = ConfigStore(args.config_file)

    try:
        if args.list_configs:
            for name, params in sorted(store.get_saved_configs().items()):
                logger.info(f"{name}: {params}")
            return 0

        params = resolve_parameters(args, store, logger)
        if args.save_config:
            store.save_config(args.save_config, params)
    except NQueensException as e:
        logger.error("Configuration store unavailable", exception=e)
        return 2

    reporter = RunReporter(output_dir=args.output_dir)
    engine = NQueensEngine(params, seed=args.seed, listener=reporter.handle_event)
    engine.init()

    progress = tqdm(total=params.max_generations, desc="Generations", unit="gen",
                    disable=args.no_progress, file=sys.stdout)

    def update_progress(event):
        if event.type == 'stats' and event.data.generation > 0:
            progress.update(1)
            progress.set_postfix(best=event.data.best_fitness, max=params.max_pairs)

    engine.add_listener(update_progress)

    try:
        engine.start()
        engine.run()
    except KeyboardInterrupt:
        engine.pause()
        logger.warning("Interrupted, stopping after the current generation",
                       generation=engine.generation)
    finally:
        progress.close()

    best = engine.best_solution
    if best is not None:
        reporter.solution = reporter.solution or best
        logger.info(f"Best fitness: {best.fitness}/{params.max_pairs}")
        logger.info(f"Queens: {format_coordinate_pairs(best.genome)}")

    try:
        history_path = reporter.export_fitness_history()
        reporter.save_solution()
        reporter.save_run_summary(params)
        if args.plot:
            plot_path = FitnessHistoryPlotter(history_path).plot_fitness_history(max_fitness=params.max_pairs)
            logger.info("Fitness plot saved", path=plot_path)
    except NQueensException as e:
        log_exception(e, context="result reporting")
        return 2

    logger.info("Results saved", output_dir=args.output_dir)
    return 0 if best is not None and best.fitness == params.max_pairs else 1


if __name__ == "__main__":
    sys.exit(main())
