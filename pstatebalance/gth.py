"""Stationary distribution by the Grassmann-Taksar-Heyman algorithm."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterator, Sequence
from pathlib import Path

import numpy as np

TIME_LOG = "GTH.time"

USAGE = (
    "usage : Gth -f filename Suffix \n"
    "filename.Suffix and filename.sz must exist before. And the suffix must be Rxx "
)


def _tokens(path: Path) -> Iterator[str]:
    with path.open() as handle:
        for line in handle:
            yield from line.split()


def _take(tokens: Iterator[str], path: Path) -> str:
    try:
        return next(tokens)
    except StopIteration:
        raise ValueError(f"{path}: unexpected end of file") from None


def read_size(path: str | Path) -> tuple[int, int]:
    """Return ``(arcs, states)`` from a size file."""
    path = Path(path)
    tokens = _tokens(path)
    arcs = int(_take(tokens, path))
    states = int(_take(tokens, path))
    return arcs, states


def read_matrix(path: str | Path, n: int) -> np.ndarray:
    """Read an ``n``-state sparse row file into a dense matrix."""
    path = Path(path)
    matrix = np.zeros((n, n), dtype=float)
    tokens = _tokens(path)
    for _ in range(n):
        source = int(_take(tokens, path))
        degree = int(_take(tokens, path))
        for _ in range(degree):
            probability = float(_take(tokens, path))
            dest = int(_take(tokens, path))
            if not (0 <= source < n and 0 <= dest < n):
                raise ValueError(f"{path}: transition {source} -> {dest} out of range")
            matrix[source, dest] = probability
    return matrix


def gth_solve(matrix) -> np.ndarray:
    """Stationary distribution of the stochastic ``matrix``."""
    p = np.array(matrix, dtype=float, copy=True)
    if p.ndim != 2 or p.shape[0] != p.shape[1] or p.shape[0] == 0:
        raise ValueError("a non-empty square matrix is required")
    size = p.shape[0]

    for n in range(size - 1, 0, -1):
        total = p[n, :n].sum()
        if total == 0.0:
            raise ValueError(f"Probleme en {n} {total:f}")
        p[:n, n] /= total
        p[:n, :n] += np.outer(p[:n, n], p[n, :n])

    pi = np.zeros(size, dtype=float)
    pi[0] = 1.0
    for j in range(1, size):
        pi[j] = pi[:j] @ p[:j, j]
    return pi / pi.sum()


def write_distribution(path: str | Path, pi: Sequence[float]) -> None:
    """Write one probability per line in scientific notation."""
    Path(path).write_text("".join(f" {value:.18e}\n" for value in pi))


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``-f filename Suffix``; writes ``filename.pi``."""
    start = time.perf_counter()
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3 or not args[0].startswith("-f"):
        print(USAGE)
        return 1
    basename, suffix = args[1], args[2]
    size_path = Path(f"{basename}.sz")
    matrix_path = Path(f"{basename}.{suffix}")
    if not size_path.is_file() or not suffix.startswith("R") or not matrix_path.is_file():
        print(USAGE)
        return 1

    _, states = read_size(size_path)
    matrix = read_matrix(matrix_path, states)
    try:
        pi = gth_solve(matrix)
    except ValueError as error:
        print(error)
        return 1
    write_distribution(Path(f"{basename}.pi"), pi)

    elapsed = time.perf_counter() - start
    with Path(TIME_LOG).open("a") as handle:
        handle.write(f"{elapsed:.2f}\n")
    print(f"ALGO GTH DONE, temps: {elapsed:.2f} secondes")
    return 0