"""Logging setup for scripts that drive the mesh pipeline."""

import logging
import sys


def setup_logging(level=logging.INFO, log_file=None):
    """Configure the ``reliefmesh`` logger.

    Parameters
    ----------
    level : int
        Logging level, e.g. ``logging.DEBUG`` to see per-polygon stats.
    log_file : str or Path, optional
        Also write records to this file.

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger("reliefmesh")
    logger.setLevel(level)

    # Replace handlers from an earlier call
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
