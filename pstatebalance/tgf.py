"""Conversion of a generated chain into Trivial Graph Format."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

USAGE = (
    "usage : Lam2TGF -f filename \n"
    "filename.Rii, filename.sz and filename.cd must exist before "
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


def _read_sizes(basename: str | Path) -> tuple[int, int, int]:
    path = Path(f"{basename}.sz")
    tokens = _tokens(path)
    arcs, states, components = (int(_take(tokens, path)) for _ in range(3))
    if components < 1:
        raise ValueError(f"{path}: a state needs at least one component")
    return arcs, states, components


def convert_to_tgf(basename: str | Path) -> Path:
    """Write ``basename.tgf`` from ``basename.sz``, ``.cd`` and ``.Rii``."""
    paths = {suffix: Path(f"{basename}.{suffix}") for suffix in ("sz", "Rii", "cd")}
    for path in paths.values():
        if not path.is_file():
            raise FileNotFoundError(f"missing input file: {path}")

    _, states, components = _read_sizes(basename)
    output = Path(f"{basename}.tgf")
    lines: list[str] = []

    code_path = paths["cd"]
    code = _tokens(code_path)
    for _ in range(states):
        number = int(_take(code, code_path))
        values = [str(int(_take(code, code_path))) for _ in range(components)]
        lines.append(f"{number}  ({','.join(values)})\n")
    lines.append("# \n ")

    matrix_path = paths["Rii"]
    matrix = _tokens(matrix_path)
    for _ in range(states):
        source = int(_take(matrix, matrix_path))
        degree = int(_take(matrix, matrix_path))
        for _ in range(degree):
            float(_take(matrix, matrix_path))
            dest = int(_take(matrix, matrix_path))
            lines.append(f"{source} {dest} \n")

    output.write_text("".join(lines))
    return output


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``-f filename``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2 or not args[0].startswith("-f"):
        print(USAGE)
        return 1
    basename = args[1]
    try:
        arcs, states, components = _read_sizes(basename)
        print(f"{arcs:12d}\n{states:12d}\n{components:12d}")
        convert_to_tgf(basename)
    except FileNotFoundError:
        print(USAGE)
        return 1
    print("Done Lam2TGF")
    return 0