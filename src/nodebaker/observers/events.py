# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events of one resolution request
    operation: str    # bootstrap / latest-image / distro-catalog / vhd-cache

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(operation: str) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": str(uuid.uuid4()),
        "operation": operation,
    }


# ---------------------------------------------------------------------
# Image resolution
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ImageResolved(BaseEvent):
    distro: str
    region: str
    image: Optional[str]          # SIG resource id, None when only legacy resolved

@dataclass(frozen=True)
class ImageVersionOverridden(BaseEvent):
    distro: str
    catalog_version: str
    version: str

@dataclass(frozen=True)
class DistroCatalogResolved(BaseEvent):
    region: str
    distros: int

@dataclass(frozen=True)
class ResolutionFailed(BaseEvent):
    error: str


# ---------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BootstrapResolved(BaseEvent):
    distro: str
    customized: bool
