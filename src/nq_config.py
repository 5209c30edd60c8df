"""
Parameter Management for the N-Queens Genetic Algorithm

Sanitizes and clamps raw caller-supplied settings into a valid, immutable
Parameters value. Out-of-range input is never rejected: it is clamped into
its documented range, so the engine always observes a valid configuration.
"""

import math
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from nq_constants import (
    ParameterRanges, ParameterDefaults, INTEGER_FIELDS, RATE_FIELDS, FIELD_ALIASES
)
from nq_logging import get_logger


class SelectionStrategy(Enum):
    """Parent selection scheme. Values are the wire tags used in messages and saved configs."""

    ROULETTE_WHEEL = "rouletteWheel"
    TOURNAMENT = "tournament"

    @classmethod
    def parse(cls, value: Any) -> Optional['SelectionStrategy']:
        """Resolve an enum member from a tag, a member name or a loose spelling."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None

        normalized = value.replace('_', '').replace('-', '').replace(' ', '').lower()
        for member in cls:
            if normalized in (member.value.lower(), member.name.replace('_', '').lower()):
                return member
        if normalized == "roulette":
            return cls.ROULETTE_WHEEL
        return None


@dataclass(frozen=True)
class Parameters:
    """
    Validated configuration for one engine run.

    Replaced wholesale on init/reset, never mutated while a generation is
    in progress.
    """

    board_size: int = ParameterDefaults.BOARD_SIZE
    population_size: int = ParameterDefaults.POPULATION_SIZE
    selection_strategy: SelectionStrategy = SelectionStrategy(ParameterDefaults.SELECTION_STRATEGY)
    tournament_size: int = ParameterDefaults.TOURNAMENT_SIZE
    crossover_rate: float = ParameterDefaults.CROSSOVER_RATE
    mutation_rate: float = ParameterDefaults.MUTATION_RATE
    max_generations: int = ParameterDefaults.MAX_GENERATIONS

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Any]],
                 base: Optional['Parameters'] = None) -> 'Parameters':
        """
        Build parameters from loosely typed input.

        Args:
            raw: Mapping of field name (snake_case or camelCase) to value;
                may be partial or None
            base: Parameters supplying the fields ``raw`` leaves out
                (defaults when None)

        Returns:
            Clamped Parameters instance
        """
        merged = (base or cls()).to_dict()
        merged.update(sanitize(raw or {}))
        return validate(merged)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> 'Parameters':
        """Create parameters from a dictionary (sanitized and clamped)."""
        return cls.from_raw(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a JSON-serializable dictionary."""
        data = asdict(self)
        data['selection_strategy'] = self.selection_strategy.value
        return data

    def update(self, **kwargs) -> 'Parameters':
        """Create new parameters with updated values."""
        return Parameters.from_raw(kwargs, base=self)

    @property
    def max_pairs(self) -> int:
        return self.board_size * (self.board_size - 1) // 2

    def summary(self) -> str:
        """Generate human-readable parameter summary."""
        summary = f"""N-Queens Parameters:
  Board: {self.board_size}x{self.board_size} (max fitness {self.max_pairs})
  Population: {self.population_size}
  Selection: {self.selection_strategy.value}"""
        if self.selection_strategy is SelectionStrategy.TOURNAMENT:
            summary += f" (size {self.tournament_size})"
        summary += f"""
  Rates: crossover={self.crossover_rate:.3f}, mutation={self.mutation_rate:.3f}
  Max generations: {self.max_generations}"""
        return summary

    def __str__(self) -> str:
        return (f"Parameters(n={self.board_size}, pop={self.population_size}, "
                f"gen={self.max_generations}, {self.selection_strategy.value})")


def sanitize(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Coerce present numeric fields to numbers.

    camelCase keys are renamed to their snake_case field names and strategy
    tags are resolved to SelectionStrategy members. Unknown keys are passed
    through untouched. A value that cannot be read is dropped so that the
    held or default value applies instead.

    Args:
        raw: Loosely typed parameter mapping

    Returns:
        New dictionary with coerced values
    """
    logger = get_logger()
    result = {}

    for key, value in raw.items():
        field = FIELD_ALIASES.get(key, key)

        if field in INTEGER_FIELDS or field in RATE_FIELDS:
            try:
                number = float(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric parameter", field=field, value=repr(value))
                continue
            except OverflowError:
                # Integers beyond float range; clamped like any other out-of-range value
                number = math.inf if value > 0 else -math.inf
            if math.isnan(number):
                logger.warning("Ignoring NaN parameter", field=field)
                continue
            if field in INTEGER_FIELDS and not math.isinf(number):
                number = int(round(number))
            result[field] = number
        elif field == 'selection_strategy':
            strategy = SelectionStrategy.parse(value)
            if strategy is None:
                logger.warning("Ignoring unknown selection strategy", value=repr(value))
                continue
            result[field] = strategy
        else:
            result[field] = value

    return result


def validate(params: Mapping[str, Any]) -> Parameters:
    """
    Clamp every field into its documented range.

    Never fails: the input is sanitized first, values outside a range are
    moved to the nearest bound, and missing, unreadable or unrecognised
    fields take their defaults.

    Args:
        params: Parameter mapping, sanitized or raw

    Returns:
        Parameters instance
    """
    cleaned = sanitize(params)
    values = {}

    for field, (low, high) in ParameterRanges.as_dict().items():
        value = cleaned.get(field, getattr(Parameters, field))
        value = max(low, min(high, value))
        values[field] = int(value) if field in INTEGER_FIELDS else float(value)

    values['selection_strategy'] = cleaned.get(
        'selection_strategy', SelectionStrategy(ParameterDefaults.SELECTION_STRATEGY))

    return Parameters(**values)


DEFAULT_PARAMETERS = Parameters()
