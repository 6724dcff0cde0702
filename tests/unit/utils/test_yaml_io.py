"""
Unit tests for reading cell lists from YAML files.
"""
import pytest
import yaml

from sparse_nd.utils.yaml_io import load_cells, parse_cells, read_yaml


def test_read_yaml_rejects_other_suffixes(tmp_path):
    path = tmp_path / "cells.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        read_yaml(path)


def test_read_yaml_empty_file_is_empty_mapping(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert read_yaml(path) == {}


def test_load_cells_roundtrip(tmp_path):
    """Cells are returned in file order as `(coords, value)` pairs."""
    path = tmp_path / "cells.yml"
    path.write_text(
        "cells:\n"
        "  - at: [0, 1]\n"
        "    value: 5\n"
        "  - at: [2, 3, 4]\n"
        "    value: 1.5\n",
        encoding="utf-8",
    )
    assert load_cells(path) == [((0, 1), 5), ((2, 3, 4), 1.5)]


@pytest.mark.parametrize("document", [
    {},
    {"cells": {"at": [0, 0]}},
    {"cells": [{"at": [0, 0]}]},
    {"cells": [{"value": 1}]},
    {"cells": [{"at": 3, "value": 1}]},
    ["not", "a", "mapping"],
])
def test_parse_cells_rejects_malformed_documents(document):
    with pytest.raises(ValueError):
        parse_cells(document)


def test_read_yaml_syntax_error_is_a_value_error(tmp_path):
    """Unparsable YAML surfaces as `ValueError`, chained to the parser error."""
    path = tmp_path / "broken.yaml"
    path.write_text("cells: [\n  - at: [0, 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="broken.yaml") as excinfo:
        read_yaml(path)
    assert isinstance(excinfo.value.__cause__, yaml.YAMLError)
