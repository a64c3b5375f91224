from pathlib import Path

import pytest

from pstatebalance.generator import (
    ChainRow,
    MarkovChain,
    generate_chain,
    main,
    write_chain,
)
from pstatebalance.params import ModelParameters, Policy, Thresholds
from pstatebalance.tgf import convert_to_tgf

SMALL = ModelParameters(buffer_size=4, servers=2)
STEPS = Thresholds((1, 2, 3, 4, 5))


@pytest.fixture
def plain_chain():
    return generate_chain(0.0, STEPS, SMALL, Policy.MIXED)


@pytest.fixture
def losses_chain():
    return generate_chain(0.5, STEPS, SMALL, Policy.LOSSES)


def test_first_row_is_empty_state(plain_chain):
    first = plain_chain.rows[0]
    assert first.number == 0
    assert first.state == (0, 0)


def test_all_states_reachable_without_migration(plain_chain):
    states = {row.state for row in plain_chain.rows}
    expected = {(a, b) for a in range(5) for b in range(5)}
    assert states == expected


def test_rows_numbered_in_order(plain_chain):
    assert [row.number for row in plain_chain.rows] == list(
        range(plain_chain.state_count)
    )


@pytest.mark.parametrize("policy", list(Policy))
@pytest.mark.parametrize("gamma", [0.0, 0.3, 2.0])
def test_rows_are_stochastic(policy, gamma):
    chain = generate_chain(gamma, STEPS, SMALL, policy)
    for row in chain.rows:
        assert sum(p for p, _ in row.successors) == pytest.approx(1.0, abs=1e-9)
        assert all(p > 0 for p, _ in row.successors)


def test_successors_sorted_and_distinct(losses_chain):
    for row in losses_chain.rows:
        numbers = [n for _, n in row.successors]
        assert numbers == sorted(set(numbers))
        assert all(0 <= n < losses_chain.state_count for n in numbers)


def test_arc_count_matches_degrees(losses_chain):
    assert losses_chain.arc_count == sum(len(r.successors) for r in losses_chain.rows)
    assert losses_chain.components == 2


def test_no_migrations_when_gamma_zero(plain_chain):
    assert plain_chain.migrations == []


def test_losses_migrations_balance_queues(losses_chain):
    assert losses_chain.migrations
    for (a, b), migration in losses_chain.migrations:
        assert abs(a - b) > 1
        assert sum(migration.target) == a + b
        assert abs(migration.target[0] - migration.target[1]) <= 1


def test_states_within_buffer(losses_chain):
    for row in losses_chain.rows:
        a, b = row.state
        assert 0 <= a <= SMALL.buffer_size
        assert 0 <= b <= SMALL.buffer_size


def test_write_chain_round_trip(tmp_path, losses_chain):
    base = tmp_path / "model"
    log = tmp_path / "migrations.data"
    write_chain(losses_chain, base, log)

    sizes = Path(f"{base}.sz").read_text().split()
    assert [int(v) for v in sizes] == [
        losses_chain.arc_count,
        losses_chain.state_count,
        2,
    ]

    code_rows = [
        tuple(int(v) for v in line.split())
        for line in Path(f"{base}.cd").read_text().splitlines()
    ]
    assert code_rows == [(r.number, *r.state) for r in losses_chain.rows]

    matrix_lines = Path(f"{base}.Rii").read_text().splitlines()
    assert len(matrix_lines) == losses_chain.state_count
    for line, row in zip(matrix_lines, losses_chain.rows):
        tokens = line.split()
        assert int(tokens[0]) == row.number
        assert int(tokens[1]) == row.degree
        pairs = [
            (float(tokens[i]), int(tokens[i + 1])) for i in range(2, len(tokens), 2)
        ]
        assert [n for _, n in pairs] == [n for _, n in row.successors]
        for (read, _), (orig, _) in zip(pairs, row.successors):
            assert read == pytest.approx(orig, rel=1e-14)

    log_text = log.read_text()
    assert log_text.endswith("-1")
    assert len(log_text.splitlines()) == len(losses_chain.migrations) + 1


def test_size_file_field_width(tmp_path):
    chain = MarkovChain([ChainRow(0, (0, 0), ((1.0, 0),))])
    write_chain(chain, tmp_path / "one")
    assert (tmp_path / "one.sz").read_text() == (
        f"{1:12d}\n{1:12d}\n{2:12d}\n"
    )
    assert (tmp_path / "one.Rii").read_text() == (
        f"{0:12d}{1:12d} 1.000000000000000E+00{0:12d}\n"
    )


def test_written_chain_converts_to_tgf(tmp_path, plain_chain):
    base = tmp_path / "graph"
    write_chain(plain_chain, base)
    output = convert_to_tgf(base)
    lines = output.read_text().split("# \n ")
    assert len(lines[0].splitlines()) == plain_chain.state_count
    assert len(lines[1].splitlines()) == plain_chain.arc_count


def test_main_rejects_wrong_arguments(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "x"), "1"]) == 1
    assert "usage" in capsys.readouterr().out


def test_main_rejects_existing_files(tmp_path):
    base = tmp_path / "exists"
    Path(f"{base}.cd").write_text("")
    assert main(["-f", str(base), "1", "3", "6", "12", "24", "48"]) == 1


def test_main_rejects_unknown_policy(tmp_path):
    args = ["--policy=other", "-f", str(tmp_path / "p"), "1", "3", "6", "12", "24", "48"]
    assert main(args) == 1


def test_main_generates_files(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["-f", "model", "0", "3", "6", "12", "24", "48"]) == 0
    assert "gamma12 : 0.000000" in capsys.readouterr().out
    sizes = [int(v) for v in (tmp_path / "model.sz").read_text().split()]
    assert sizes[1] == 91 * 91
    assert sizes[2] == 2
    assert (tmp_path / "Migration_States.data").read_text() == "-1"