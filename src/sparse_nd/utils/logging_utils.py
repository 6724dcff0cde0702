import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path("var/log")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


def verbosity_to_level(verbose_level: int) -> int:
    """
    Maps a `-v` count to a logging level.

    0 gives WARNING, 1 gives INFO and 2 or more gives DEBUG.
    """
    return VERBOSITY_LEVELS.get(min(max(verbose_level, 0), 2), logging.INFO)


def get_log_file_path(logger_name: str, log_dir: Optional[Path] = None, include_timestamp: bool = True) -> Path:
    """
    Builds the path of the log file written for `logger_name`.

    Dots in the logger name become underscores, and a timestamp suffix keeps
    consecutive runs from overwriting each other. The directory is created if
    needed.

    Parameters
    ----------
    logger_name : str
        Dotted logger name, e.g. "sparse_nd.scripts.demo_matrix".
    log_dir : Optional[Path], optional
        Target directory. Defaults to `DEFAULT_LOG_DIR`.
    include_timestamp : bool, optional
        Append `_YYYYmmdd_HHMMSS` to the file stem, by default True.

    Returns
    -------
    Path
        The log file path inside `log_dir`.
    """
    directory = DEFAULT_LOG_DIR if log_dir is None else log_dir
    directory.mkdir(parents=True, exist_ok=True)

    stem = logger_name.replace(".", "_")
    if include_timestamp:
        stem = f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    return directory / f"{stem}.log"


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
) -> logging.Logger:
    """
    Attaches a stdout handler, and optionally a file handler, to the named logger.

    Existing handlers on the logger are removed first so repeated calls (for
    example from tests invoking the CLI several times) do not duplicate output.
    The library modules never call this; only entry points do.

    Parameters
    ----------
    name : str
        Logger name.
    level : int, optional
        Level of the logger and default level of its handlers, by default INFO.
    log_file : Optional[str], optional
        Explicit log file path. Takes precedence over `enable_file_logging`.
    log_dir : Optional[Path], optional
        Directory for the generated log file when `log_file` is not given.
    enable_file_logging : bool, optional
        Write a timestamped file under `log_dir` when no `log_file` is given,
        by default False.
    console_level : Optional[int], optional
        Level override for the stdout handler.
    file_level : Optional[int], optional
        Level override for the file handler.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level if console_level is not None else level)
    logger.addHandler(console_handler)

    log_path: Optional[Path] = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
    elif enable_file_logging:
        log_path = get_log_file_path(name, log_dir=log_dir)

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode='a')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level if file_level is not None else level)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_path}")

    return logger


def set_log_level(logger: logging.Logger, level: int) -> None:
    """Sets `level` on the logger and every handler attached to it."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
