# src/ctf/logging_config.py
"""
Logging setup for CTF bots.

Call configure_logging() once from the bot's entrypoint:

    from ctf.logging_config import configure_logging
    configure_logging(debug_ctf=env.debug)

Correlator diagnostics ("Detected ItemDrop", "Fired off flagScored", ...) are
logged at DEBUG under the "ctf" logger, so they only show up when the ctf
logger is switched to DEBUG here or via CtfUtils.set_debug().
"""

from __future__ import annotations

import logging
import sys

CTF_LOGGER = "ctf"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def set_ctf_debug(enabled: bool) -> None:
    """Switch the ctf package logger between DEBUG and INFO."""
    logging.getLogger(CTF_LOGGER).setLevel(logging.DEBUG if enabled else logging.INFO)


def configure_logging(level: int = logging.INFO, *, debug_ctf: bool = False) -> None:
    """
    Attach a stdout handler to the root logger unless one is already there,
    then apply the ctf debug switch.

    The root handler passes everything through; levels are decided per logger.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(level)

    set_ctf_debug(debug_ctf)
