"""Generation of the reachable uniformized Markov chain and its matrix files."""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from .chain import Event, event_probability, next_state
from .energy import Migration, plan_migration
from .params import ModelParameters, Policy, Thresholds

COMPONENTS = 2
TOLERANCE = 1.0e-9
MIGRATION_LOG = "Migration_States.data"

USAGE = (
    "usage : GenerMatrix -f filename gamma12  seuil1 seuil2 seuil3 seuil4 seuil5\n"
    "to create filename.Rii, filename.cd and filename.sz \n"
    "to store the description of the states and the matrix of your model \n"
    "The files must not exist before"
)


@dataclass(frozen=True)
class ChainRow:
    """One state of the chain with its outgoing transitions.

    ``successors`` holds ``(probability, number)`` pairs sorted by number.
    """

    number: int
    state: tuple[int, int]
    successors: tuple[tuple[float, int], ...]

    @property
    def degree(self) -> int:
        return len(self.successors)


@dataclass
class MarkovChain:
    """Reachable states, numbered in visiting order, and their transitions."""

    rows: list[ChainRow] = field(default_factory=list)
    migrations: list[tuple[tuple[int, int], Migration]] = field(default_factory=list)

    @property
    def state_count(self) -> int:
        return len(self.rows)

    @property
    def arc_count(self) -> int:
        return sum(row.degree for row in self.rows)

    @property
    def components(self) -> int:
        return COMPONENTS


def generate_chain(
    gamma: float,
    thresholds: Thresholds | None = None,
    params: ModelParameters | None = None,
    policy: Policy = Policy.MIXED,
) -> MarkovChain:
    """Explore every state reachable from ``(0, 0)`` breadth first."""
    thresholds = thresholds or Thresholds()
    params = params or ModelParameters()

    start = (0, 0)
    numbers: dict[tuple[int, int], int] = {start: 0}
    queued = {start}
    pending = deque([start])
    chain = MarkovChain()

    while pending:
        state = pending.popleft()

        if gamma > 0:
            migration = plan_migration(state, thresholds, params, policy)
            if migration is not None:
                chain.migrations.append((state, migration))

        weights: dict[int, float] = {}
        targets: dict[int, tuple[int, int]] = {}
        for event in Event:
            target = next_state(state, event, gamma, thresholds, params, policy)
            probability = event_probability(
                event, state, gamma, thresholds, params, policy
            )
            if probability > 0:
                number = numbers.setdefault(target, len(numbers))
                weights[number] = weights.get(number, 0.0) + probability
                targets[number] = target

        successors = tuple((weights[n], n) for n in sorted(weights))
        total = sum(p for p, _ in successors)
        if abs(total - 1.0) > TOLERANCE:
            raise ValueError(
                f"transition probabilities of state {state} sum to {total: .10E}"
            )

        chain.rows.append(ChainRow(numbers[state], state, successors))
        for _, number in successors:
            target = targets[number]
            if target not in queued:
                queued.add(target)
                pending.append(target)

    return chain


def write_chain(
    chain: MarkovChain,
    basename: str | Path,
    migration_log: str | Path | None = None,
) -> None:
    """Write ``basename.cd``, ``.Rii`` and ``.sz``, and the migration log if asked."""
    code_lines = []
    matrix_lines = []
    for row in chain.rows:
        code_lines.append(
            f"{row.number:12d}" + "".join(f"{v:12d}" for v in row.state) + "\n"
        )
        matrix_lines.append(
            f"{row.number:12d}{row.degree:12d}"
            + "".join(f"{p: .15E}{n:12d}" for p, n in row.successors)
            + "\n"
        )
    Path(f"{basename}.cd").write_text("".join(code_lines))
    Path(f"{basename}.Rii").write_text("".join(matrix_lines))
    Path(f"{basename}.sz").write_text(
        f"{chain.arc_count:12d}\n{chain.state_count:12d}\n{chain.components:12d}\n"
    )

    if migration_log is not None:
        lines = [
            f"{m.source}  {a}  {b}  {m.count} \n" for (a, b), m in chain.migrations
        ]
        lines.append("-1")
        Path(migration_log).write_text("".join(lines))


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``[--policy=mixed|losses] -f filename gamma12 s1 .. s5``."""
    args = sys.argv[1:] if argv is None else list(argv)
    policy = Policy.MIXED
    if args and args[0].startswith("--policy="):
        try:
            policy = Policy(args.pop(0).split("=", 1)[1])
        except ValueError:
            print(USAGE)
            return 1
    if len(args) != 8 or not args[0].startswith("-f"):
        print(USAGE)
        return 1

    basename = args[1]
    if any(Path(f"{basename}.{suffix}").exists() for suffix in ("cd", "Rii", "sz")):
        print(USAGE)
        return 1

    try:
        gamma = float(args[2]) / 10
        thresholds = Thresholds.from_values(args[3:8])
    except ValueError:
        print(USAGE)
        return 1

    print(f"gamma12 : {gamma:f} ")
    for index, value in enumerate(thresholds.values, start=1):
        print(f"Seuil{index} : {value} ")

    try:
        chain = generate_chain(gamma, thresholds, ModelParameters(), policy)
    except ValueError as error:
        print(f"attention : {error}")
        return 0

    for (a, b), migration in chain.migrations:
        first, second = migration.target
        print(
            f"etat E({a},{b}) = {migration.energy_before:f} "
            f"--Migration-de-S{migration.source}---> "
            f"Vers E({first},{second}) = {migration.energy_after:f} "
        )

    write_chain(chain, basename, MIGRATION_LOG)
    return 0