#!/usr/bin/env python3
"""
Demonstrate a sparse 2-D matrix from the command line.

Fills the main diagonal and the anti-diagonal of a `size x size` matrix with
the column index, prints the inner block `[1, size-2] x [1, size-2]`, the
number of stored cells and every stored cell as `row col value`. Cells on
column 0 receive the default value 0 and are therefore never stored.

Examples:
  - python -m sparse_nd
  - python -m sparse_nd --size 12 --store ordered --json
  - python -m sparse_nd -vv --cells extra_cells.yaml --log-file var/log/demo.log

"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

# --- Local Application Imports ---
from sparse_nd.structures import HashBackingStore, OrderedBackingStore, SparseMatrix, SparseMatrixError
from sparse_nd.utils.logging_utils import DEFAULT_LOG_DIR, setup_logger, verbosity_to_level
from sparse_nd.utils.yaml_io import load_cells

logger = logging.getLogger(__name__)

STORE_TYPES = {
    "hash": HashBackingStore,
    "ordered": OrderedBackingStore,
}


@dataclass(slots=True)
class DemoConfig:
    """
    Settings for one demo run, collected from the command line.

    Attributes
    ----------
    size : int
        Number of rows and columns filled by the diagonals.
    default : int
        The matrix default value.
    store : str
        Backing store name, a key of `STORE_TYPES`.
    capacity : Optional[int]
        Preallocation hint forwarded to the hash store.
    cells_path : Optional[str]
        YAML file with extra cells assigned after the diagonals.
    as_json : bool
        Emit JSON instead of plain text.
    """
    size: int = 10
    default: int = 0
    store: str = "hash"
    capacity: Optional[int] = None
    cells_path: Optional[str] = None
    as_json: bool = False


# --------------------------
# Logging Configuration
# --------------------------
def setup_cli_logging(verbose_level: int, log_file: Optional[str] = None) -> None:
    """
    Configures the demo and library loggers from the `-v` count and `--log-file`.

    A default timestamped log file under `var/log/` is only written at DEBUG
    verbosity or when `--log-file` is given.
    """
    log_level = verbosity_to_level(verbose_level)
    should_log_to_file = verbose_level >= 2 or log_file is not None

    for logger_name in (__name__, "sparse_nd.structures"):
        setup_logger(
            logger_name,
            level=log_level,
            log_file=log_file,
            enable_file_logging=should_log_to_file,
        )

    if should_log_to_file and log_file is None:
        logger.info(f"Logs will be saved to: {DEFAULT_LOG_DIR.resolve()}")


# --------------------------
# Helpers
# --------------------------
def build_demo_matrix(config: DemoConfig) -> SparseMatrix[int]:
    """
    Builds the demo matrix: both diagonals, then any cells from `config.cells_path`.

    Raises
    ------
    ValueError
        If the store name is unknown or the cells file is malformed.
    SparseMatrixError
        If a cell from the file has the wrong arity or a negative coordinate.
    """
    if config.store not in STORE_TYPES:
        raise ValueError(f"Unknown store '{config.store}', expected one of {sorted(STORE_TYPES)}")

    store_kwargs = {"capacity": config.capacity} if config.store == "hash" else {}
    matrix = SparseMatrix(config.default, 2, STORE_TYPES[config.store], **store_kwargs)

    for col in range(config.size):
        matrix[col][col] = col
    for row in range(config.size):
        col = config.size - 1 - row
        matrix[row][col] = col
    logger.info(f"Filled diagonals of a {config.size}x{config.size} matrix: {matrix.size()} cell(s) stored")

    if config.cells_path is not None:
        logger.info(f"Loading extra cells from: {config.cells_path}")
        cells = load_cells(config.cells_path)
        matrix.update(cells)
        logger.debug(f"Assigned {len(cells)} extra cell(s)")

    return matrix


def inner_block(matrix: SparseMatrix[int], size: int) -> List[List[int]]:
    """Reads rows and columns `1 .. size-2` of the matrix as nested lists."""
    inner = range(1, size - 1)
    return [[matrix[row][col].get() for col in inner] for row in inner]


# --------------------------
# Command-Line Interface
# --------------------------
def main(argv=None) -> int:
    """
    Parses command-line arguments and runs the demo.
    """
    parser = argparse.ArgumentParser(description="Fill and print a sparse 2-D matrix.")
    parser.add_argument("--size", type=int, default=10,
                        help="Rows/columns covered by the diagonals (default: 10).")
    parser.add_argument("--default", type=int, default=0,
                        help="Matrix default value (default: 0).")
    parser.add_argument("--store", choices=sorted(STORE_TYPES), default="hash",
                        help="Backing store (default: hash).")
    parser.add_argument("--capacity", type=int, default=None,
                        help="Preallocation hint for the hash store.")
    parser.add_argument("--cells", default=None,
                        help="YAML file with extra cells: {cells: [{at: [i, j], value: v}, ...]}.")
    parser.add_argument("--json", action="store_true",
                        help="Emit JSON instead of human-readable text.")

    # Logging arguments
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file (default: var/log/<logger>_TIMESTAMP.log at -vv)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress all output except the result")

    cli_args = parser.parse_args(argv)

    verbose_level = 0 if cli_args.quiet else cli_args.verbose
    setup_cli_logging(verbose_level, cli_args.log_file)

    config = DemoConfig(
        size=cli_args.size,
        default=cli_args.default,
        store=cli_args.store,
        capacity=cli_args.capacity,
        cells_path=cli_args.cells,
        as_json=cli_args.json,
    )
    if config.size < 1:
        logger.error(f"Invalid size: {config.size}")
        print(f"Error: --size must be at least 1, got {config.size}", file=sys.stderr)
        return 2

    try:
        matrix = build_demo_matrix(config)
    except (OSError, ValueError, SparseMatrixError) as e:
        logger.error(f"Failed to build matrix: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    block = inner_block(matrix, config.size)

    # --- Output ---
    if config.as_json:
        print(json.dumps({
            "store": config.store,
            "default": config.default,
            "size": matrix.size(),
            "block": block,
            "cells": [list(record) for record in matrix],
        }, indent=2))
    else:
        for row in block:
            print(" ".join(str(value) for value in row))
        print(matrix.size())
        for x, y, value in matrix:
            print(f"{x} {y} {value}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
