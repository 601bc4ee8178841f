"""Logging setup for the carrierbase CLI."""

from __future__ import annotations

import logging

# These log full request URLs, and FMCSA QC URLs carry the web key.
_QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    HTTP client loggers are held at WARNING regardless of ``level``. Pass
    ``force=True`` to reconfigure an already configured root logger.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
