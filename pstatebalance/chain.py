"""Events, uniformized transition probabilities and successor states."""

from __future__ import annotations

import enum

from .energy import Migration, plan_migration
from .params import ModelParameters, Policy, Thresholds


class Event(enum.IntEnum):
    """Events of the uniformized chain, numbered as in the matrix generator."""

    ARRIVAL_1 = 1
    ARRIVAL_2 = 2
    SERVICE_1 = 3
    SERVICE_2 = 4
    MIGRATION_1_TO_2 = 5
    MIGRATION_2_TO_1 = 6
    LOOP = 7


def _active_migration(
    state: tuple[int, int],
    gamma: float,
    thresholds: Thresholds,
    params: ModelParameters,
    policy: Policy,
) -> Migration | None:
    if gamma <= 0:
        return None
    return plan_migration(state, thresholds, params, policy)


def uniformization_rate(
    migration: Migration | None, gamma: float, params: ModelParameters
) -> float:
    """Total rate used to uniformize the chain in a state with ``migration``."""
    rate = sum(params.arrival_rates) + params.servers * (
        sum(params.service_rates[0]) + sum(params.service_rates[1])
    )
    if migration is not None and migration.count > 0:
        rate += gamma / migration.count
    return rate


def event_probability(
    event: Event | int,
    state: tuple[int, int],
    gamma: float,
    thresholds: Thresholds,
    params: ModelParameters,
    policy: Policy,
) -> float:
    """Probability that ``event`` fires in ``state`` in one uniformized step."""
    event = Event(event)
    a, b = state
    migration = _active_migration(state, gamma, thresholds, params, policy)
    delta = uniformization_rate(migration, gamma, params)

    servers = params.servers
    busy1 = min(a, servers)
    busy2 = min(b, servers)
    level1 = thresholds.level(a)
    level2 = thresholds.level(b)
    mu1 = params.service_rate(1, level1)
    mu2 = params.service_rate(2, level2)

    if event is Event.ARRIVAL_1:
        return params.arrival_rates[0] / delta
    if event is Event.ARRIVAL_2:
        return params.arrival_rates[1] / delta
    if event is Event.SERVICE_1:
        return busy1 * mu1 / delta
    if event is Event.SERVICE_2:
        return busy2 * mu2 / delta
    if event is Event.MIGRATION_1_TO_2:
        if migration is not None and migration.source == 1:
            return gamma / migration.count / delta
        return 0.0
    if event is Event.MIGRATION_2_TO_1:
        if migration is not None and migration.source == 2:
            return gamma / migration.count / delta
        return 0.0

    # Loop: idle servers at the current levels plus every other level's rate.
    unused = (
        sum(params.service_rates[0]) - mu1 + sum(params.service_rates[1]) - mu2
    )
    return ((servers - busy1) * mu1 + (servers - busy2) * mu2 + servers * unused) / delta


def next_state(
    state: tuple[int, int],
    event: Event | int,
    gamma: float,
    thresholds: Thresholds,
    params: ModelParameters,
    policy: Policy,
) -> tuple[int, int]:
    """State reached from ``state`` when ``event`` fires."""
    event = Event(event)
    a, b = state

    if event is Event.ARRIVAL_1:
        return (a + 1, b) if a < params.buffer_size else (a, b)
    if event is Event.ARRIVAL_2:
        return (a, b + 1) if b < params.buffer_size else (a, b)
    if event is Event.SERVICE_1:
        return (a - 1, b) if a > 0 else (a, b)
    if event is Event.SERVICE_2:
        return (a, b - 1) if b > 0 else (a, b)
    if event in (Event.MIGRATION_1_TO_2, Event.MIGRATION_2_TO_1):
        migration = _active_migration(state, gamma, thresholds, params, policy)
        wanted = 1 if event is Event.MIGRATION_1_TO_2 else 2
        if migration is not None and migration.source == wanted:
            return migration.target
    return (a, b)