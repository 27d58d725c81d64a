# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/baker.py
from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

from .catalog.store import CatalogStore, OSImageMap, default_catalog_store, find_os_image_config
from .config.models import BakerSettings
from .datamodel.distro import Distro, OSFamily
from .datamodel.models import (
    CachedOnVHD,
    EnvironmentInfo,
    NodeBootstrapping,
    NodeBootstrappingConfiguration,
    SIGConfig,
    SigAzureEnvironmentSpecConfig,
    SigImageConfig,
)
from .errors import ImageNotFoundError
from .observers.dispatcher import EventBus
from .observers.events import (
    BootstrapResolved,
    DistroCatalogResolved,
    ImageResolved,
    ImageVersionOverridden,
    ResolutionFailed,
    new_ctx,
)
from .template.generator import JinjaTemplateGenerator, TemplateGenerator
from .toggles.loader import load_toggles
from .toggles.toggles import Entity, Toggles, override_version
from .logging.log import configure_logging
from .observers.interface import LoggingObserver
from .vhd.cache import DEFAULT_INVENTORIES, VHDInventories, get_cached_versions_on_vhd

log = logging.getLogger("nodebaker")


class CatalogProvider(Protocol):
    def get_cloud_os_image_map(self, cloud_name: str) -> OSImageMap: ...

    def get_sig_azure_cloud_spec_config(
        self, sig_config: SIGConfig, region: str
    ) -> SigAzureEnvironmentSpecConfig: ...


def find_sig_image_config(
    sig_config: SigAzureEnvironmentSpecConfig,
    distro: Distro,
) -> Optional[SigImageConfig]:
    """First family (in ``OSFamily`` order) that carries the distro wins."""
    for family in OSFamily:
        image = sig_config.family_catalog(family).get(distro)
        if image is not None:
            return image
    return None


class AgentBaker:
    """
    Resolves node images and assembles the bootstrap artifact for a node.

    Catalogs and VHD inventories are read-only here; version overrides are
    applied to copies returned to the caller.
    """

    def __init__(
        self,
        *,
        catalogs: Optional[CatalogProvider] = None,
        toggles: Optional[Toggles] = None,
        template_generator: Optional[TemplateGenerator] = None,
        inventories: Optional[VHDInventories] = None,
        bus: Optional[EventBus] = None,
    ):
        self.catalogs = catalogs if catalogs is not None else default_catalog_store()
        self.toggles = toggles if toggles is not None else Toggles()
        self.template_generator = (
            template_generator if template_generator is not None else JinjaTemplateGenerator()
        )
        self.inventories = inventories if inventories is not None else DEFAULT_INVENTORIES
        self.bus = bus

    def with_toggles(self, toggles: Toggles) -> "AgentBaker":
        self.toggles = toggles
        return self

    def _emit(self, event) -> None:
        if self.bus:
            self.bus.emit(event)

    def _override(
        self,
        image: SigImageConfig,
        distro: Distro,
        overrides: Dict[str, str],
        ctx: dict,
    ) -> SigImageConfig:
        overridden = override_version(image, distro, overrides)
        if overridden is not image:
            self._emit(ImageVersionOverridden(
                distro=distro.value,
                catalog_version=image.version,
                version=overridden.version,
                **ctx,
            ))
        return overridden

    # ------------------ bootstrap artifact ------------------

    def get_node_bootstrapping(self, config: NodeBootstrappingConfiguration) -> NodeBootstrapping:
        ctx = new_ctx("bootstrap")
        try:
            node_bootstrapping = NodeBootstrapping(
                custom_data=self.template_generator.get_node_bootstrapping_payload(config),
                cse=self.template_generator.get_node_bootstrapping_cmd(config),
            )

            distro = config.agent_pool_profile.distro
            if distro.is_customized:
                log.debug("Distro %s is a customized image, skipping catalog resolution", distro)
                self._emit(BootstrapResolved(distro=distro.value, customized=True, **ctx))
                return node_bootstrapping

            region = config.container_service.location
            os_image_map = self.catalogs.get_cloud_os_image_map(config.cloud_spec_config.cloud_name)
            node_bootstrapping.os_image_config = find_os_image_config(os_image_map, distro)

            sig_env = self.catalogs.get_sig_azure_cloud_spec_config(config.sig_config, region)
            sig_image = find_sig_image_config(sig_env, distro)
            if sig_image is None and node_bootstrapping.os_image_config is None:
                raise ImageNotFoundError(distro.value, region=region)

            if sig_image is not None and not config.agent_pool_profile.is_windows() and not distro.is_windows:
                e = Entity.from_node_bootstrapping_configuration(config)
                overrides = self.toggles.get_linux_node_image_version(e)
                sig_image = self._override(sig_image, distro, overrides, ctx)
            node_bootstrapping.sig_image_config = sig_image

            log.debug(
                "Resolved %s in %s: sig=%s legacy=%s",
                distro,
                region,
                sig_image.resource_id if sig_image else None,
                node_bootstrapping.os_image_config,
            )
            self._emit(ImageResolved(
                distro=distro.value,
                region=region,
                image=sig_image.resource_id if sig_image else None,
                **ctx,
            ))
            self._emit(BootstrapResolved(distro=distro.value, customized=False, **ctx))
            return node_bootstrapping

        except Exception as e:
            self._emit(ResolutionFailed(error=str(e), **ctx))
            raise

    # ------------------ image resolution ------------------

    def get_latest_sig_image_config(
        self,
        sig_config: SIGConfig,
        distro: Distro,
        env_info: EnvironmentInfo,
    ) -> SigImageConfig:
        ctx = new_ctx("latest-image")
        try:
            sig_env = self.catalogs.get_sig_azure_cloud_spec_config(sig_config, env_info.region)

            sig_image = find_sig_image_config(sig_env, distro)
            if sig_image is None:
                raise ImageNotFoundError(distro.value, region=env_info.region)

            if not distro.is_windows:
                e = Entity.from_environment_info(env_info)
                overrides = self.toggles.get_linux_node_image_version(e)
                sig_image = self._override(sig_image, distro, overrides, ctx)

            self._emit(ImageResolved(
                distro=distro.value, region=env_info.region, image=sig_image.resource_id, **ctx
            ))
            return sig_image

        except Exception as e:
            self._emit(ResolutionFailed(error=str(e), **ctx))
            raise

    def get_distro_sig_image_config(
        self,
        sig_config: SIGConfig,
        env_info: EnvironmentInfo,
    ) -> Dict[Distro, SigImageConfig]:
        """
        Every distro the region's SIG environment offers. Families are merged
        in ``OSFamily`` order, a later family replacing an earlier one on the
        same distro. Windows entries never take a version override.
        """
        ctx = new_ctx("distro-catalog")
        try:
            sig_env = self.catalogs.get_sig_azure_cloud_spec_config(sig_config, env_info.region)

            e = Entity.from_environment_info(env_info)
            linux_overrides = self.toggles.get_linux_node_image_version(e)

            all_distros: Dict[Distro, SigImageConfig] = {}
            for family in OSFamily:
                for distro, image in sig_env.family_catalog(family).items():
                    if family is not OSFamily.WINDOWS:
                        image = self._override(image, distro, linux_overrides, ctx)
                    all_distros[distro] = image

            self._emit(DistroCatalogResolved(region=env_info.region, distros=len(all_distros), **ctx))
            return all_distros

        except Exception as e:
            self._emit(ResolutionFailed(error=str(e), **ctx))
            raise

    # ------------------ VHD cache ------------------

    def get_cached_versions_on_vhd(self) -> CachedOnVHD:
        return get_cached_versions_on_vhd(self.inventories)


def new_agent_baker(settings: Optional[BakerSettings] = None, *, bus: Optional[EventBus] = None) -> AgentBaker:
    """Wire an AgentBaker from settings; defaults use the packaged catalogs."""
    settings = settings or BakerSettings()

    if settings.log_dir is not None or settings.log_level is not None:
        configure_logging(log_dir=settings.log_dir, level=settings.log_level or "INFO")
    if bus is None and settings.log_events:
        bus = EventBus([LoggingObserver()])

    if settings.legacy_catalog_file or settings.sig_catalog_file:
        catalogs = CatalogStore.load(
            legacy_path=settings.legacy_catalog_file,
            sig_path=settings.sig_catalog_file,
        )
    else:
        catalogs = default_catalog_store()

    toggles = load_toggles(settings.toggles_file) if settings.toggles_file else Toggles()

    inventories = None
    if settings.vhd_manifest_file is not None:
        inventories = DEFAULT_INVENTORIES.ensure_loaded(
            settings.vhd_manifest_file, settings.vhd_components_file
        )

    return AgentBaker(
        catalogs=catalogs,
        toggles=toggles,
        template_generator=JinjaTemplateGenerator(settings.templates_dir),
        inventories=inventories,
        bus=bus,
    )
