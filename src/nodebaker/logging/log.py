# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/logging/log.py
"""Handlers for the ``nodebaker`` logger, installed on request by the host."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOGGER_NAME = "nodebaker"

FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


class _OwnedHandler:
    # marks handlers installed here so a second call replaces them
    nodebaker_owned = True


class _FileHandler(_OwnedHandler, logging.FileHandler):
    pass


class _StreamHandler(_OwnedHandler, logging.StreamHandler):
    pass


def _drop_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, "nodebaker_owned", False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    *,
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    console: bool = True,
) -> Optional[Path]:
    """
    Attach handlers to the ``nodebaker`` logger.

    The console handler logs at ``level``. With ``log_dir`` a file handler
    keeps the DEBUG resolution trace; its path is returned. Handlers added
    by an earlier call are replaced, anything the host attached is kept.
    """
    logger = logging.getLogger(LOGGER_NAME)
    _drop_owned_handlers(logger)
    logger.setLevel(logging.DEBUG if log_dir else level)

    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)

    if console:
        ch = _StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    log_path = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        log_path = log_dir / f"{LOGGER_NAME}-{ts}.log"

        fh = _FileHandler(log_path)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
        logger.debug("log_file=%s", log_path)

    return log_path
