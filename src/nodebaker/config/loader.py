# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from .models import BakerSettings

log = logging.getLogger("nodebaker")

CONFIG_ENV = "NODEBAKER_CONFIG"


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def _resolve_relative(data: dict, base: Path) -> dict:
    """Paths in the settings file are relative to the file itself."""
    for key, value in data.items():
        if isinstance(value, str) and (key.endswith("_file") or key.endswith("_dir")):
            p = Path(value).expanduser()
            data[key] = p if p.is_absolute() else base / p
    return data


def load_settings(path: str | Path | None = None) -> BakerSettings:
    """
    Load and validate the baker settings.

    Discovery order:
      1. ``path`` when given
      2. ``NODEBAKER_CONFIG`` env var
      3. defaults (packaged catalogs, no overrides, no VHD inventories)
    """
    if path is None:
        env = os.environ.get(CONFIG_ENV)
        if not env:
            log.debug("No settings file given, using defaults")
            return BakerSettings()
        path = env

    path = Path(path)
    log.debug("Loading settings from %s", path)
    data = _resolve_relative(_load_yaml(path), path.parent)
    return BakerSettings.model_validate(data)
