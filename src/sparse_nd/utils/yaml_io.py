from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml


def read_yaml(path: str | Path) -> Dict[str, Any]:
    """
    Reads a YAML file and returns its top-level mapping.

    Parameters
    ----------
    path : str | Path
        A `.yml` or `.yaml` file. An empty file reads as `{}`.

    Raises
    ------
    OSError
        If the file cannot be read.
    ValueError
        If the suffix is not a YAML one, or the text is not valid YAML.
    """
    path_obj = Path(path)
    if path_obj.suffix.lower() not in {".yml", ".yaml"}:
        raise ValueError(f"Only YAML files are supported, got '{path_obj.name}'")

    with path_obj.open("r", encoding="utf-8") as handle:
        try:
            document = yaml.safe_load(handle)
        except yaml.YAMLError as e:
            raise ValueError(f"Could not parse '{path_obj.name}' as YAML: {e}") from e
    return document if document is not None else {}


def parse_cells(document: Dict[str, Any]) -> List[Tuple[Tuple[int, ...], Any]]:
    """
    Extracts `(coordinates, value)` pairs from a parsed cells document.

    The expected layout is::

        cells:
          - at: [0, 1]
            value: 5
          - at: [2, 3]
            value: 7

    Parameters
    ----------
    document : Dict[str, Any]
        The mapping returned by `read_yaml`.

    Returns
    -------
    List[Tuple[Tuple[int, ...], Any]]
        The cells in file order. Coordinates are not validated here; the
        matrix checks arity and sign on assignment.

    Raises
    ------
    ValueError
        If `cells` is missing or not a list, or an entry lacks `at`/`value`.
    """
    if not isinstance(document, dict):
        raise ValueError("Cells document must be a mapping")
    entries = document.get("cells")
    if not isinstance(entries, list):
        raise ValueError("Cells document must contain a 'cells' list")

    cells = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or "at" not in entry or "value" not in entry:
            raise ValueError(f"Cell entry {position} must be a mapping with 'at' and 'value' keys")
        coords = entry["at"]
        if not isinstance(coords, list):
            raise ValueError(f"Cell entry {position}: 'at' must be a list of integers, got {coords!r}")
        cells.append((tuple(coords), entry["value"]))
    return cells


def load_cells(path: str | Path) -> List[Tuple[Tuple[int, ...], Any]]:
    """Reads a YAML cells file and returns its `(coordinates, value)` pairs."""
    return parse_cells(read_yaml(path))
