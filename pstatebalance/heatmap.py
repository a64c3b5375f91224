"""Map of the balancing migration chosen in every state of the two queues."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .energy import plan_migration, state_energy
from .params import ModelParameters, Policy, Thresholds

DEFAULT_OUTPUT = "HeatMap.data"

State = tuple[int, int]


@dataclass(frozen=True)
class HeatMapEntry:
    """A state with the migration the policy applies there, if any."""

    state: State
    energy_before: float
    migrations: int = 0
    target: State | None = None
    energy_after: float | None = None

    @property
    def migrates(self) -> bool:
        return self.migrations != 0


def compute_heatmap(
    policy: Policy = Policy.MIXED,
    params: ModelParameters | None = None,
    thresholds: Thresholds | None = None,
) -> list[HeatMapEntry]:
    """Evaluate every state ``(a, b)`` with both lengths in ``0..buffer_size``.

    Entries come in row order: ``a`` first, then ``b``.
    """
    params = params or ModelParameters()
    thresholds = thresholds or Thresholds()
    entries: list[HeatMapEntry] = []
    lengths = range(params.buffer_size + 1)
    for a in lengths:
        for b in lengths:
            before = state_energy(a, b, thresholds, params, 0)
            migration = plan_migration((a, b), thresholds, params, policy)
            if migration is None:
                entries.append(HeatMapEntry((a, b), before))
            else:
                entries.append(
                    HeatMapEntry(
                        (a, b),
                        before,
                        migration.count,
                        migration.target,
                        migration.energy_after,
                    )
                )
    return entries


def find_chained_migration(entries: Iterable[HeatMapEntry]) -> State | None:
    """Return the first migration target that would itself migrate again.

    A sound policy never sends customers into a state it would rebalance,
    so ``None`` means the property holds.
    """
    entries = list(entries)
    migrating = {entry.state for entry in entries if entry.migrates}
    for entry in entries:
        if entry.migrates and entry.target in migrating:
            return entry.target
    return None


def _format_entry(entry: HeatMapEntry) -> str:
    a, b = entry.state
    if entry.migrates and entry.target is not None:
        first, second = entry.target
        return f"{a:5d} {b:5d} {entry.migrations:5d} {first:5d} {second:5d}\n"
    return f"{a:5d} {b:5d} NaN   NaN   NaN \n"


def write_heatmap(path: str | Path, entries: Iterable[HeatMapEntry]) -> None:
    """Write one line per state: state, migrations and target, or NaN fields."""
    Path(path).write_text("".join(_format_entry(entry) for entry in entries))


def _describe(entry: HeatMapEntry) -> str:
    a, b = entry.state
    first, second = entry.target if entry.target is not None else (-1, -1)
    after = entry.energy_after if entry.energy_after is not None else 0.0
    return (
        f"({a} , {b}) : {entry.energy_before:f}  ---> ({first}  , {second}) : "
        f"{after:f} et {entry.migrations} Migrations "
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: compute, print and write the heat map, then check it."""
    parser = argparse.ArgumentParser(prog="heatmap")
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in Policy],
        default=Policy.MIXED.value,
    )
    parser.add_argument("--output", default=DEFAULT_OUTPUT)
    args = parser.parse_args(sys.argv[1:] if argv is None else list(argv))

    entries = compute_heatmap(Policy(args.policy))
    for entry in entries:
        if entry.migrates:
            print(_describe(entry))
    write_heatmap(args.output, entries)

    chained = find_chained_migration(entries)
    if chained is not None:
        print(f"Erreur etat : ({chained[0]},{chained[1]}) ")
        return 1
    print("Proprieté Verifiée ! ")
    return 0