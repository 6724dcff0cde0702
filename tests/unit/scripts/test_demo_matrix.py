"""
Tests for the `demo_matrix` command-line program.

The demo fills both diagonals of a square matrix with the column index; the
cells on column 0 get the default value 0 and are never stored, so a 10x10
run stores 18 cells.
"""
import json

import pytest

from sparse_nd.scripts.demo_matrix import DemoConfig, build_demo_matrix, inner_block, main


def test_build_demo_matrix_stores_both_diagonals():
    matrix = build_demo_matrix(DemoConfig(size=10))
    assert matrix.size() == 18
    assert matrix[3][3] == 3
    assert matrix[3][6] == 6
    assert (0, 0) not in matrix
    assert (9, 0) not in matrix


def test_build_demo_matrix_rejects_unknown_store():
    with pytest.raises(ValueError):
        build_demo_matrix(DemoConfig(store="btree"))


def test_inner_block_reads_defaults_and_diagonals():
    matrix = build_demo_matrix(DemoConfig(size=10, store="ordered"))
    block = inner_block(matrix, 10)
    assert len(block) == 8
    assert block[0] == [1, 0, 0, 0, 0, 0, 0, 8]
    assert block[3] == [0, 0, 0, 4, 5, 0, 0, 0]


def test_main_text_output(capsys):
    assert main(["--store", "ordered"]) == 0
    lines = capsys.readouterr().out.splitlines()

    assert lines[0] == "1 0 0 0 0 0 0 8"
    assert lines[3] == "0 0 0 4 5 0 0 0"
    assert lines[8] == "18"
    assert len(lines) == 8 + 1 + 18
    # The ordered store lists cells in row-major order; (0, 0) is never stored.
    assert lines[9] == "0 9 9"


def test_main_json_output_with_hash_store(capsys):
    assert main(["--json", "--capacity", "64"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["store"] == "hash"
    assert payload["size"] == 18
    assert len(payload["cells"]) == 18
    assert all(cell[2] != 0 for cell in payload["cells"])


def test_main_applies_cells_file(tmp_path, capsys):
    cells = tmp_path / "extra.yaml"
    cells.write_text(
        "cells:\n"
        "  - at: [0, 0]\n"
        "    value: 5\n"
        "  - at: [1, 1]\n"
        "    value: 0\n",
        encoding="utf-8",
    )
    assert main(["--json", "--store", "ordered", "--cells", str(cells)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["size"] == 18
    assert payload["cells"][0] == [0, 0, 5]
    assert payload["block"][0][0] == 0


def test_main_rejects_bad_cells_file(tmp_path, capsys):
    cells = tmp_path / "bad.yaml"
    cells.write_text("cells:\n  - at: [0]\n    value: 5\n", encoding="utf-8")
    assert main(["--quiet", "--cells", str(cells)]) == 2
    assert "Error" in capsys.readouterr().err


def test_main_rejects_non_positive_size(capsys):
    assert main(["--size", "0"]) == 2
    assert "--size" in capsys.readouterr().err


def test_main_rejects_unparsable_cells_file(tmp_path, capsys):
    cells = tmp_path / "broken.yaml"
    cells.write_text("cells: [\n  - at: [0, 0\n", encoding="utf-8")
    assert main(["--quiet", "--cells", str(cells)]) == 2
    assert "Error" in capsys.readouterr().err
