"""Configuration: data directory from environment and logging setup."""

import logging
import os
from pathlib import Path

# Env var override with the packaged data directory as default.
DATA_PATH_ENV = 'SOLAR_EPHEMERIS_DATA_PATH'
DEFAULT_DATA_PATH = Path(__file__).parent / 'data'

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def get_data_path() -> Path:
    """Return the bundled data directory (SOLAR_EPHEMERIS_DATA_PATH or package default).

    Returns:
        Path to the directory holding planets.csv, moons.csv and catalog.json.
    """
    path = os.environ.get(DATA_PATH_ENV, '').strip()
    if path:
        return Path(path)
    return DEFAULT_DATA_PATH


def configure_logging(level: int | str = logging.INFO) -> None:
    """Attach a stream handler to the package logger.

    The library itself never installs handlers; applications and scripts call
    this once at startup if they want the package's log output.

    Args:
        level: Logging level (name or number) for the ``solar_ephemeris`` logger.
    """
    logger = logging.getLogger('solar_ephemeris')
    logger.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
