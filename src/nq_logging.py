"""
Centralized Logging System for the N-Queens Genetic Algorithm

Structured logging shared by the engine, the worker and the CLI driver.
Provides consistent formatting, log levels, and optional file output.
"""

import logging
import sys
from datetime import datetime
from typing import Optional
from pathlib import Path


class NQFormatter(logging.Formatter):
    """Formatter with color support for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        self.use_colors = use_colors and hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()
        self.include_timestamp = include_timestamp

        if include_timestamp:
            fmt = '[%(asctime)s] %(levelname)-8s | %(name)s | %(message)s'
            datefmt = '%H:%M:%S'
        else:
            fmt = '%(levelname)-8s | %(name)s | %(message)s'
            datefmt = None

        super().__init__(fmt, datefmt)

    def format(self, record):
        if self.use_colors:
            color = self.COLORS.get(record.levelname, '')
            reset = self.COLORS['RESET']
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{reset}"

        return super().format(record)


class NQLogger:
    """
    Logger for the N-Queens engine with console and optional file output.

    Wraps a standard library logger and adds engine-specific helpers that
    attach ``key=value`` context to each message.
    """

    def __init__(self, name: str = "NQueens", level: str = "INFO",
                 log_to_file: bool = False, output_dir: str = "logs",
                 console_colors: bool = True):
        """
        Initialize the logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Whether to log to file
            output_dir: Directory for log files
            console_colors: Whether to use colors in console output
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False
        self.log_file = None

        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.logger.level)
        console_handler.setFormatter(NQFormatter(use_colors=console_colors, include_timestamp=False))
        self.logger.addHandler(console_handler)

        if log_to_file:
            self._setup_file_logging(output_dir)

    def _setup_file_logging(self, output_dir: str):
        """Attach a timestamped file handler that records every level."""
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"nqueens_run_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(NQFormatter(use_colors=False, include_timestamp=True))
        self.logger.addHandler(file_handler)

        self.log_file = str(log_file)

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, exception: Exception = None, **kwargs):
        """Log error message with optional exception details."""
        formatted_msg = self._format_message(message, **kwargs)
        if exception:
            formatted_msg += f" | Exception: {type(exception).__name__}: {str(exception)}"
        self.logger.error(formatted_msg)

    def critical(self, message: str, exception: Exception = None, **kwargs):
        formatted_msg = self._format_message(message, **kwargs)
        if exception:
            formatted_msg += f" | Exception: {type(exception).__name__}: {str(exception)}"
        self.logger.critical(formatted_msg)

    def _format_message(self, message: str, **kwargs) -> str:
        if kwargs:
            context = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {context}"
        return message

    # Engine-specific logging methods
    def log_config_summary(self, params):
        """Log the active parameter set."""
        self.info("Parameters loaded",
                  board_size=params.board_size,
                  population=params.population_size,
                  selection=params.selection_strategy.value,
                  tournament=params.tournament_size,
                  crossover_rate=params.crossover_rate,
                  mutation_rate=params.mutation_rate,
                  max_generations=params.max_generations)

    def log_generation_complete(self, generation: int, best_fitness: int,
                                average_fitness: float, best_ever: int):
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.debug(f"Generation {generation} complete",
                   best_fitness=best_fitness,
                   average_fitness=f"{average_fitness:.3f}",
                   best_ever=best_ever)

    def log_diversity_injection(self, generation: int, replaced: int):
        self.debug(f"Low diversity at generation {generation}", injected=replaced)

    def log_genome_repair(self, reason: str):
        self.warning("Crossover produced an invalid genome, substituting a random individual",
                     reason=reason)

    def log_termination(self, generation: int, solved: bool, best_fitness: int):
        reason = "solution found" if solved else "max generations reached"
        self.info(f"Run terminated at generation {generation}",
                  reason=reason,
                  best_fitness=best_fitness)

    def log_protocol_error(self, message_type, error: Exception):
        self.warning("Rejected control message", message_type=message_type,
                     error=str(error))


# Global logger instance
_global_logger: Optional[NQLogger] = None


def get_logger(name: str = "NQueens") -> NQLogger:
    """Get or create global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = NQLogger(name)
    return _global_logger


def setup_logging(level: str = "INFO", log_to_file: bool = False,
                  output_dir: str = "logs", console_colors: bool = True) -> NQLogger:
    """
    Setup global logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        output_dir: Directory for log files
        console_colors: Whether to use colors in console output

    Returns:
        Configured NQLogger instance
    """
    global _global_logger
    _global_logger = NQLogger(
        level=level,
        log_to_file=log_to_file,
        output_dir=output_dir,
        console_colors=console_colors
    )
    return _global_logger


def log_exception(exception: Exception, context: str = "", **kwargs):
    """Log exception with context using global logger."""
    logger = get_logger()
    logger.error(f"Exception in {context}", exception=exception, **kwargs)
