"""
Custom Exception Classes for the N-Queens Genetic Algorithm

Provides specific, meaningful exceptions for the few failure modes the engine
and its collaborators can hit. None of them is fatal to the engine: each one
is caught at a well-defined boundary and turned into a substitution or an
error event.
"""

from typing import Optional, Sequence


class NQueensException(Exception):
    """Base exception for all N-Queens genetic algorithm errors."""
    pass


class GenomeIntegrityError(NQueensException):
    """Raised when a genome is not a permutation of [0, board_size)."""

    def __init__(self, message: str, genome: Sequence[int] = None,
                 board_size: int = None):
        super().__init__(message)
        self.genome = tuple(genome) if genome is not None else None
        self.board_size = board_size


class ProtocolError(NQueensException):
    """Raised when a control message cannot be dispatched."""

    def __init__(self, message: str, message_type: Optional[str] = None):
        super().__init__(message)
        self.message_type = message_type


class PersistenceError(NQueensException):
    """Raised when the named-configuration store cannot be read or written."""

    def __init__(self, message: str, path: str = None, operation: str = None):
        super().__init__(message)
        self.path = path
        self.operation = operation


class ReportingError(NQueensException):
    """Raised when result reporting/saving fails."""

    def __init__(self, message: str, output_dir: str = None,
                 file_type: str = None):
        super().__init__(message)
        self.output_dir = output_dir
        self.file_type = file_type


def validate_genome(genome: Sequence[int], board_size: int) -> Sequence[int]:
    """
    Check that a genome is a permutation of [0, board_size).

    Args:
        genome: Column index per row
        board_size: Expected genome length and value bound

    Returns:
        The genome unchanged

    Raises:
        GenomeIntegrityError: If the genome has the wrong length, an
            out-of-range value or a repeated value
    """
    if len(genome) != board_size:
        raise GenomeIntegrityError(
            f"Genome length {len(genome)} != board size {board_size}",
            genome=genome, board_size=board_size
        )

    seen = set()
    for value in genome:
        if not 0 <= value < board_size:
            raise GenomeIntegrityError(
                f"Column {value} outside [0, {board_size})",
                genome=genome, board_size=board_size
            )
        if value in seen:
            raise GenomeIntegrityError(
                f"Column {value} appears more than once",
                genome=genome, board_size=board_size
            )
        seen.add(value)

    return genome


def is_valid_genome(genome: Sequence[int], board_size: int) -> bool:
    """Boolean form of validate_genome."""
    try:
        validate_genome(genome, board_size)
    except GenomeIntegrityError:
        return False
    return True
