import pytest

from pstatebalance.tgf import convert_to_tgf, main


def _write_model(tmp_path, name="model"):
    base = tmp_path / name
    (tmp_path / f"{name}.sz").write_text("           3\n           2\n           2\n")
    (tmp_path / f"{name}.cd").write_text(
        "           0           0           0\n"
        "           1           1           0\n"
    )
    (tmp_path / f"{name}.Rii").write_text(
        "           0           2 5.000000000000000E-01           0"
        " 5.000000000000000E-01           1\n"
        "           1           1 1.000000000000000E+00           0\n"
    )
    return base


def test_convert_writes_expected_content(tmp_path):
    base = _write_model(tmp_path)
    out = convert_to_tgf(base)
    assert out == tmp_path / "model.tgf"
    assert out.read_text() == (
        "0  (0,0)\n"
        "1  (1,0)\n"
        "# \n "
        "0 0 \n"
        "0 1 \n"
        "1 0 \n"
    )


def test_edge_count_matches_degrees(tmp_path):
    base = _write_model(tmp_path)
    text = convert_to_tgf(base).read_text()
    nodes, edges = text.split("# \n ")
    assert len(nodes.splitlines()) == 2
    assert len(edges.splitlines()) == 3


def test_missing_file_raises(tmp_path):
    base = _write_model(tmp_path)
    (tmp_path / "model.cd").unlink()
    with pytest.raises(FileNotFoundError):
        convert_to_tgf(base)


def test_truncated_matrix_raises(tmp_path):
    base = _write_model(tmp_path)
    (tmp_path / "model.Rii").write_text("0 2 0.5 0\n")
    with pytest.raises(ValueError):
        convert_to_tgf(base)


def test_main_success(tmp_path, capsys):
    base = _write_model(tmp_path)
    assert main(["-f", str(base)]) == 0
    assert (tmp_path / "model.tgf").is_file()
    assert "Done Lam2TGF" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [[], ["-f"], ["-x", "model"], ["model", "x"]])
def test_main_bad_arguments(argv, capsys):
    assert main(argv) == 1
    assert "usage" in capsys.readouterr().out


def test_main_missing_files(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "absent")]) == 1
    assert "usage" in capsys.readouterr().out