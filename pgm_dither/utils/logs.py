"""Logging setup for command-line runs."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """Route pgm_dither log records to stderr.

    Library modules only create loggers; this is called once by the CLI.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
    )
