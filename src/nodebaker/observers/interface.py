# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/observers/interface.py
from __future__ import annotations

import logging
from typing import Protocol, Union

from .events import (
    BootstrapResolved,
    DistroCatalogResolved,
    ImageResolved,
    ImageVersionOverridden,
    ResolutionFailed,
)

ResolutionEvent = Union[
    ImageResolved,
    ImageVersionOverridden,
    DistroCatalogResolved,
    BootstrapResolved,
    ResolutionFailed,
]


class Observer(Protocol):
    def notify(self, event: ResolutionEvent) -> None: ...


class LoggingObserver:
    """Writes every resolution event to the ``nodebaker`` logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or logging.getLogger("nodebaker")

    def notify(self, event: ResolutionEvent) -> None:
        fields = event.dict()
        head = f"[{fields.pop('operation')} {fields.pop('run_id')[:8]}] {type(event).__name__}"
        fields.pop("ts")
        detail = " ".join(f"{k}={v}" for k, v in fields.items())
        if isinstance(event, ResolutionFailed):
            self.log.warning("%s %s", head, detail)
        else:
            self.log.info("%s %s", head, detail)
