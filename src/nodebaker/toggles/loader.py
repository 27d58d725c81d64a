# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/toggles/loader.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import NodeBakerError
from .toggles import Entity, MapToggle, Toggles

log = logging.getLogger("nodebaker")


class ToggleRule(BaseModel):
    # every field listed here must equal the entity's value
    match: Dict[str, str] = Field(default_factory=dict)
    values: Dict[str, str] = Field(default_factory=dict)

    def matches(self, entity: Entity) -> bool:
        return all(entity.fields.get(k) == v for k, v in self.match.items())


class TogglesFile(BaseModel):
    toggles: Dict[str, List[ToggleRule]] = Field(default_factory=dict)


def rules_toggle(rules: List[ToggleRule]) -> MapToggle:
    """Merge the values of every matching rule; later rules win per key."""

    def _evaluate(entity: Entity) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for rule in rules:
            if rule.matches(entity):
                result.update(rule.values)
        return result

    return _evaluate


def load_toggles(path: str | Path) -> Toggles:
    path = Path(path)
    try:
        raw = os.path.expandvars(path.read_text(encoding="utf-8"))
        data = yaml.safe_load(raw) or {}
        parsed = TogglesFile.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        raise NodeBakerError(f"cannot load toggles from {path}: {e}") from e

    log.debug("Loaded %d toggle(s) from %s", len(parsed.toggles), path)
    return Toggles({name: rules_toggle(rules) for name, rules in parsed.toggles.items()})
