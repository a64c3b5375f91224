"""Model parameters for two load-balanced M/M/C/B queues with P-state levels."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

LEVELS = 6


class Policy(enum.Enum):
    """Migration policy applied between the two queues."""

    # Balance only when the queues sit at different levels and it saves energy.
    MIXED = "mixed"
    # Balance whenever the queue lengths differ by more than one customer.
    LOSSES = "losses"


def _check_level(level: int) -> int:
    if not 1 <= level <= LEVELS:
        raise ValueError(f"level must be between 1 and {LEVELS}, got {level}")
    return level - 1


@dataclass(frozen=True)
class ModelParameters:
    """Rates, capacities and power figures of the model."""

    buffer_size: int = 90
    servers: int = 10
    arrival_rates: tuple[float, float] = (30.0, 30.0)
    service_rates: tuple[tuple[float, ...], tuple[float, ...]] = (
        (1.0, 1.8, 2.0, 2.2, 2.4, 2.6),
        (1.0, 1.8, 2.0, 2.2, 2.4, 2.6),
    )
    busy_power: tuple[float, ...] = (32.0, 55.0, 65.0, 76.0, 90.0, 95.0)
    idle_power: tuple[float, ...] = (8.0, 13.75, 16.25, 19.0, 22.5, 23.75)
    migration_energy: float = 1.0

    def __post_init__(self) -> None:
        if self.servers <= 0:
            raise ValueError("servers must be positive")
        if self.buffer_size < 0:
            raise ValueError("buffer_size must not be negative")
        if len(self.arrival_rates) != 2 or len(self.service_rates) != 2:
            raise ValueError("exactly two queues are modelled")
        tables = (*self.service_rates, self.busy_power, self.idle_power)
        if any(len(table) != LEVELS for table in tables):
            raise ValueError(f"every per-level table needs {LEVELS} entries")

    def service_rate(self, queue: int, level: int) -> float:
        """Service rate of one server of ``queue`` (1 or 2) at ``level``."""
        if queue not in (1, 2):
            raise ValueError(f"queue must be 1 or 2, got {queue}")
        return self.service_rates[queue - 1][_check_level(level)]

    def server_power(self, level: int, busy: int, idle: int) -> float:
        """Power drawn by ``busy`` active and ``idle`` waiting servers at ``level``."""
        index = _check_level(level)
        return busy * self.busy_power[index] + idle * self.idle_power[index]


@dataclass(frozen=True)
class Thresholds:
    """Queue-length thresholds separating the six P-state levels."""

    values: tuple[int, int, int, int, int] = field(default=(3, 6, 12, 24, 48))

    def __post_init__(self) -> None:
        if len(self.values) != LEVELS - 1:
            raise ValueError(f"exactly {LEVELS - 1} thresholds are required")
        if any(low > high for low, high in zip(self.values, self.values[1:])):
            raise ValueError("thresholds must be non-decreasing")

    @staticmethod
    def from_values(values) -> Thresholds:
        """Build thresholds from any iterable of five integers."""
        return Thresholds(tuple(int(v) for v in values))

    def level(self, n: int) -> int:
        """P-state level (1 to 6) of a queue holding ``n`` customers."""
        for index, limit in enumerate(self.values, start=1):
            if n <= limit:
                return index
        return LEVELS