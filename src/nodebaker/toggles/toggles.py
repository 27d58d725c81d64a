# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/toggles/toggles.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Literal, Mapping, Optional

from ..datamodel.distro import Distro
from ..datamodel.models import EnvironmentInfo, NodeBootstrappingConfiguration, SigImageConfig

log = logging.getLogger("nodebaker")

LINUX_NODE_IMAGE_VERSION = "linux-node-image-version"


@dataclass(frozen=True)
class Entity:
    """
    Key an override lookup is evaluated against.

    Built either from a full node configuration or from a bare environment
    descriptor; both variants expose the same ``fields`` mapping.
    """
    kind: Literal["configuration", "environment"]
    fields: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_node_bootstrapping_configuration(cls, config: NodeBootstrappingConfiguration) -> "Entity":
        return cls(
            kind="configuration",
            fields={
                "subscription_id": config.subscription_id,
                "tenant_id": config.tenant_id,
                "region": config.container_service.location,
                "cluster": config.container_service.name,
                "distro": config.agent_pool_profile.distro.value,
            },
        )

    @classmethod
    def from_environment_info(cls, env: EnvironmentInfo) -> "Entity":
        return cls(
            kind="environment",
            fields={
                "subscription_id": env.subscription_id or "",
                "tenant_id": env.tenant_id or "",
                "region": env.region,
            },
        )


MapToggle = Callable[[Entity], Dict[str, str]]


class Toggles:
    """Named map toggles; an unknown toggle resolves to an empty mapping."""

    def __init__(self, maps: Optional[Mapping[str, MapToggle]] = None):
        self.maps: Dict[str, MapToggle] = dict(maps or {})

    def get_map(self, name: str, entity: Entity) -> Dict[str, str]:
        toggle = self.maps.get(name)
        if toggle is None:
            return {}
        return dict(toggle(entity))

    def get_linux_node_image_version(self, entity: Entity) -> Dict[str, str]:
        return self.get_map(LINUX_NODE_IMAGE_VERSION, entity)


def override_version(
    image: SigImageConfig,
    distro: Distro,
    overrides: Mapping[str, str],
) -> SigImageConfig:
    """Copy of ``image`` at the overriding version, or ``image`` itself when there is none."""
    version = overrides.get(distro.value)
    if version is None:
        return image
    log.info("Overriding %s image version %s -> %s", distro.value, image.version, version)
    return image.with_version(version)
