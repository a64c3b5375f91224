"""Performance measures computed from a stationary distribution."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .params import LEVELS, ModelParameters, Thresholds

State = tuple[int, int]


def _pairs(states: Sequence[State], pi: Sequence[float]):
    if len(states) != len(pi):
        raise ValueError(
            f"{len(states)} states but {len(pi)} probabilities were given"
        )
    return zip(states, pi)


def _component(queue: int) -> int:
    if queue not in (1, 2):
        raise ValueError(f"queue must be 1 or 2, got {queue}")
    return queue - 1


def loss_probability(
    states: Sequence[State],
    pi: Sequence[float],
    queue: int,
    params: ModelParameters,
) -> float:
    """Probability that ``queue`` is full, so an arrival to it is lost."""
    index = _component(queue)
    return sum(p for state, p in _pairs(states, pi) if state[index] == params.buffer_size)


def mean_customers(states: Sequence[State], pi: Sequence[float], queue: int) -> float:
    """Mean number of customers held by ``queue``."""
    index = _component(queue)
    return sum(state[index] * p for state, p in _pairs(states, pi))


def response_time(
    states: Sequence[State],
    pi: Sequence[float],
    queue: int,
    params: ModelParameters,
) -> float:
    """Mean response time of ``queue`` by Little's law on accepted customers."""
    customers = mean_customers(states, pi, queue)
    losses = loss_probability(states, pi, queue, params)
    return customers / (params.arrival_rates[queue - 1] * (1.0 - losses))


def response_time_all(
    states: Sequence[State],
    pi: Sequence[float],
    gamma: float,
    params: ModelParameters,
) -> float:
    """Response time of the whole system.

    With migration the two queues form one system; without it the two
    response times are added.
    """
    n1 = mean_customers(states, pi, 1)
    n2 = mean_customers(states, pi, 2)
    loss1 = loss_probability(states, pi, 1, params)
    loss2 = loss_probability(states, pi, 2, params)
    lambda1, lambda2 = params.arrival_rates
    if gamma != 0:
        return (n1 + n2) / (lambda1 * (1.0 - loss1) + lambda2 * (1.0 - loss2))
    return n1 / (lambda1 * (1.0 - loss1)) + n2 / (lambda2 * (1.0 - loss2))


def level_marginals(
    states: Sequence[State],
    pi: Sequence[float],
    thresholds: Thresholds,
) -> tuple[list[float], list[float]]:
    """Probability of each P-state level, for queue 1 and for queue 2."""
    first = [0.0] * LEVELS
    second = [0.0] * LEVELS
    for (a, b), p in _pairs(states, pi):
        first[thresholds.level(a) - 1] += p
        second[thresholds.level(b) - 1] += p
    return first, second


def write_level_marginals(
    path: str | Path,
    states: Sequence[State],
    pi: Sequence[float],
    gamma: float,
    thresholds: Thresholds,
    params: ModelParameters,
) -> tuple[list[float], list[float]] | None:
    """Append the level marginals to ``path`` for the reference rates 0 and 0.02.

    Returns the marginals written, or ``None`` when ``gamma`` is not reported.
    """
    if not (gamma == 0 or gamma == 0.02):
        return None
    first, second = level_marginals(states, pi, thresholds)
    lines = [
        f"Cas de  C = {params.servers} serveurs et taux de migration = {gamma:f} \n"
    ]
    lines.extend(
        f"   P{level}\t\t   {p1:.10e}      {p2:.10e}       \n"
        for level, (p1, p2) in enumerate(zip(first, second), start=1)
    )
    lines.append("\n \n")
    with Path(path).open("a") as handle:
        handle.write("".join(lines))
    print(
        f"Verification somme des marginales : {sum(first):.5e}  et {sum(second):.5e} "
    )
    return first, second