"""Energy and migration rewards computed from a stationary distribution."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .params import ModelParameters, Thresholds

State = tuple[int, int]

END_MARKER = -1


@dataclass(frozen=True)
class MigrationRecord:
    """A state in which customers are moved away from queue ``source``."""

    source: int
    state: State
    count: int

    def matches(self, state: State, side: int) -> bool:
        return self.source == side and self.state == tuple(state)


def _check_side(side: int) -> int:
    if side not in (1, 2):
        raise ValueError(f"side must be 1 or 2, got {side}")
    return side


def _pairs(states: Sequence[State], pi: Sequence[float]):
    if len(states) != len(pi):
        raise ValueError(
            f"{len(states)} states but {len(pi)} probabilities were given"
        )
    return zip(states, pi)


def read_migration_states(path: str | Path) -> list[MigrationRecord]:
    """Read the migration log written by the chain generator.

    The log holds groups of ``source a b count`` and ends with ``-1``.
    """
    path = Path(path)
    tokens = iter(path.read_text().split())
    records: list[MigrationRecord] = []
    for token in tokens:
        source = int(token)
        if source == END_MARKER:
            break
        try:
            a, b, count = (int(next(tokens)) for _ in range(3))
        except StopIteration:
            raise ValueError(f"{path}: incomplete migration record") from None
        records.append(MigrationRecord(source, (a, b), count))
    return records


def migration_sums(
    states: Sequence[State],
    pi: Sequence[float],
    records: Iterable[MigrationRecord],
) -> tuple[float, float]:
    """Probability mass of the recorded migration states, per source queue."""
    pairs = list(_pairs(states, pi))
    sums = [0.0, 0.0]
    for record in records:
        if record.source not in (1, 2):
            continue
        for state, p in pairs:
            if tuple(state) == record.state:
                sums[record.source - 1] += p
    return sums[0], sums[1]


def migration_probability(
    states: Sequence[State],
    pi: Sequence[float],
    gamma: float,
    records: Iterable[MigrationRecord],
    side: int,
) -> float:
    """Probability of being in a state where queue ``side`` sends customers."""
    _check_side(side)
    pairs = list(_pairs(states, pi))
    if gamma == 0:
        return 0.0
    return sum(
        p
        for record in records
        for state, p in pairs
        if record.matches(state, side)
    )


def _first_match(
    state: State, records: Sequence[MigrationRecord], side: int
) -> MigrationRecord | None:
    return next((r for r in records if r.matches(state, side)), None)


def migration_energy(
    states: Sequence[State],
    pi: Sequence[float],
    gamma: float,
    records: Iterable[MigrationRecord],
    side: int,
    params: ModelParameters,
) -> float:
    """Mean energy spent on migrations leaving queue ``side``."""
    _check_side(side)
    records = list(records)
    total = 0.0
    for state, p in _pairs(states, pi):
        if gamma == 0:
            continue
        record = _first_match(state, records, side)
        if record is not None:
            total += (record.count / gamma) * params.migration_energy * record.count * p
    return total


def queue_energy_reward(
    states: Sequence[State],
    pi: Sequence[float],
    thresholds: Thresholds,
    gamma: float,
    records: Iterable[MigrationRecord],
    queue: int,
    params: ModelParameters,
) -> float:
    """Mean energy of ``queue``, migration cost included.

    In a migration state the queue is charged for the customers it keeps
    once the transfer is done.
    """
    _check_side(queue)
    index = queue - 1
    records = list(records)
    total = 0.0
    for state, p in _pairs(states, pi):
        customers = state[index]
        if gamma != 0:
            record = _first_match(state, records, queue)
            if record is not None:
                customers -= record.count
                if customers < 0:
                    raise ValueError(
                        f"Problème dans l'etat : ({state[0]},{state[1]})"
                    )
                total += (record.count / gamma) * record.count * params.migration_energy * p
        busy = min(customers, params.servers)
        level = thresholds.level(customers)
        power = params.server_power(level, busy, params.servers - busy)
        total += power * p / params.service_rate(queue, level)
    return total