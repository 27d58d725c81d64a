# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/catalog/store.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..datamodel.distro import Distro, OSFamily
from ..datamodel.models import (
    AZURE_CHINA_CLOUD,
    AZURE_PUBLIC_CLOUD,
    AZURE_US_GOVERNMENT_CLOUD,
    OSImageConfig,
    SIGConfig,
    SigAzureEnvironmentSpecConfig,
    SigImageConfig,
)
from ..errors import CatalogError, SigResolutionError, UnknownCloudError

log = logging.getLogger("nodebaker")

DATA_DIR = Path(__file__).parent / "data"
LEGACY_CATALOG_FILE = DATA_DIR / "os_images.yaml"
SIG_CATALOG_FILE = DATA_DIR / "sig_images.yaml"

OSImageMap = Dict[Distro, OSImageConfig]

_FAMILY_FIELDS: Dict[OSFamily, str] = {
    OSFamily.UBUNTU: "sig_ubuntu_image_config",
    OSFamily.CBL_MARINER: "sig_cbl_mariner_image_config",
    OSFamily.AZURE_LINUX: "sig_azure_linux_image_config",
    OSFamily.WINDOWS: "sig_windows_image_config",
    OSFamily.UBUNTU_EDGE_ZONE: "sig_ubuntu_edge_zone_image_config",
}


class LegacyCatalog(BaseModel):
    clouds: Dict[str, OSImageMap] = Field(default_factory=dict)


class SigImageDefinition(BaseModel):
    gallery: str
    definition: str
    version: str


class SigFamilyCatalog(BaseModel):
    # None means "available in every region"
    regions: Optional[List[str]] = None
    images: Dict[Distro, SigImageDefinition] = Field(default_factory=dict)

    def available_in(self, region: str) -> bool:
        if self.regions is None:
            return True
        return region.lower() in {r.lower() for r in self.regions}


class SigCatalog(BaseModel):
    families: Dict[OSFamily, SigFamilyCatalog] = Field(default_factory=dict)


def _load_yaml(path: Path) -> dict:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"cannot read catalog file {path}: {e}", path=path) from e
    try:
        return yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"invalid YAML in catalog file {path}: {e}", path=path) from e


def load_legacy_catalog(path: Optional[Path] = None) -> LegacyCatalog:
    path = Path(path) if path else LEGACY_CATALOG_FILE
    log.debug("Loading legacy image catalog from %s", path)
    try:
        return LegacyCatalog.model_validate(_load_yaml(path))
    except ValidationError as e:
        raise CatalogError(f"invalid legacy image catalog {path}: {e}", path=path) from e


def load_sig_catalog(path: Optional[Path] = None) -> SigCatalog:
    path = Path(path) if path else SIG_CATALOG_FILE
    log.debug("Loading SIG image catalog from %s", path)
    try:
        return SigCatalog.model_validate(_load_yaml(path))
    except ValidationError as e:
        raise CatalogError(f"invalid SIG image catalog {path}: {e}", path=path) from e


def cloud_name_for_region(region: str) -> str:
    """Derive the Azure cloud a region belongs to from its name."""
    r = region.lower()
    if r.startswith("china"):
        return AZURE_CHINA_CLOUD
    if r.startswith("usgov") or r.startswith("usdod"):
        return AZURE_US_GOVERNMENT_CLOUD
    return AZURE_PUBLIC_CLOUD


def find_os_image_config(image_map: OSImageMap, distro: Distro) -> Optional[OSImageConfig]:
    """A missing entry only means the legacy catalog contributes nothing."""
    return image_map.get(distro)


@dataclass
class CatalogStore:
    """
    Read-only image catalogs: the per-cloud legacy map and the SIG image
    definitions that are bound to a selector/region on request.
    """
    legacy: LegacyCatalog
    sig: SigCatalog

    @classmethod
    def load(
        cls,
        *,
        legacy_path: Optional[Path] = None,
        sig_path: Optional[Path] = None,
    ) -> "CatalogStore":
        return cls(legacy=load_legacy_catalog(legacy_path), sig=load_sig_catalog(sig_path))

    def get_cloud_os_image_map(self, cloud_name: str) -> OSImageMap:
        try:
            return self.legacy.clouds[cloud_name]
        except KeyError:
            raise UnknownCloudError(cloud_name) from None

    def get_sig_azure_cloud_spec_config(
        self,
        sig_config: SIGConfig,
        region: str,
    ) -> SigAzureEnvironmentSpecConfig:
        if not region:
            raise SigResolutionError("region is required to resolve SIG images", region=region)
        if not sig_config.subscription_id:
            raise SigResolutionError(
                f"SIG config for region {region} has no subscription id", region=region
            )

        spec: Dict[str, Dict[Distro, SigImageConfig]] = {f: {} for f in _FAMILY_FIELDS.values()}
        for family, family_catalog in self.sig.families.items():
            if not family_catalog.available_in(region):
                log.debug("Skipping %s SIG images: not offered in %s", family.value, region)
                continue
            target = spec[_FAMILY_FIELDS[family]]
            for distro, definition in family_catalog.images.items():
                gallery = sig_config.galleries.get(definition.gallery)
                if gallery is None:
                    raise SigResolutionError(
                        f"SIG config for region {region} is missing gallery "
                        f"{definition.gallery} (needed by {distro})",
                        region=region,
                    )
                target[distro] = SigImageConfig(
                    resource_group=gallery.resource_group,
                    gallery=gallery.gallery_name,
                    definition=definition.definition,
                    version=definition.version,
                    subscription_id=sig_config.subscription_id,
                )

        return SigAzureEnvironmentSpecConfig(cloud_name=cloud_name_for_region(region), **spec)


_default_store: Optional[CatalogStore] = None


def default_catalog_store() -> CatalogStore:
    """The packaged catalogs, loaded on first use."""
    global _default_store
    if _default_store is None:
        _default_store = CatalogStore.load()
    return _default_store
