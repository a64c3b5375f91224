"""Instantaneous energy of a state and the migration that balances it."""

from __future__ import annotations

from dataclasses import dataclass

from .params import ModelParameters, Policy, Thresholds


@dataclass(frozen=True)
class Migration:
    """A planned transfer of customers between the two queues."""

    source: int
    target: tuple[int, int]
    count: int
    energy_before: float
    energy_after: float


def queue_energy(n: int, thresholds: Thresholds, params: ModelParameters) -> float:
    """Power drawn by the servers of one queue holding ``n`` customers."""
    busy = min(n, params.servers)
    return params.server_power(thresholds.level(n), busy, params.servers - busy)


def state_energy(
    a: int,
    b: int,
    thresholds: Thresholds,
    params: ModelParameters,
    migrations: int = 0,
) -> float:
    """Energy of state ``(a, b)`` plus the cost of ``migrations`` transfers."""
    return (
        queue_energy(a, thresholds, params)
        + queue_energy(b, thresholds, params)
        + migrations * params.migration_energy
    )


def plan_migration(
    state: tuple[int, int],
    thresholds: Thresholds,
    params: ModelParameters,
    policy: Policy,
) -> Migration | None:
    """Return the balancing migration ``policy`` chooses in ``state``, if any."""
    a, b = state
    if policy is Policy.MIXED:
        eligible = thresholds.level(a) != thresholds.level(b)
    elif policy is Policy.LOSSES:
        eligible = abs(a - b) > 1
    else:
        raise ValueError(f"unknown policy: {policy!r}")
    if not eligible:
        return None

    total = a + b
    first = total // 2
    second = total - first
    count = abs(a - first)
    if count == 0:
        return None

    before = state_energy(a, b, thresholds, params, 0)
    after = state_energy(first, second, thresholds, params, count)
    if policy is Policy.MIXED and not after < before:
        return None

    source = 1 if a > first else 2
    return Migration(source, (first, second), count, before, after)