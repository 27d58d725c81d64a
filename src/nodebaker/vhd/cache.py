# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/vhd/cache.py
"""
Inventories of what is baked into the node image (VHD).

Each inventory is populated once, before any request is served, and is
read-only afterwards. Snapshots alias the inventories, they never copy them.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..datamodel.models import CachedOnVHD
from ..errors import CacheAlreadyInitializedError, CacheNotInitializedError, CatalogError

log = logging.getLogger("nodebaker")

MANIFEST = "manifest"
COMPONENT_CONTAINER_IMAGES = "component container images"
COMPONENT_DOWNLOADED_FILES = "component downloaded files"


class VHDInventories:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.sources: Optional[Tuple[Path, Path]] = None
        self.from_manifest: Optional[Any] = None
        self.from_component_container_images: Optional[Dict[str, Any]] = None
        self.from_component_downloaded_files: Optional[Dict[str, Any]] = None

    @property
    def initialized(self) -> bool:
        return (
            self.from_manifest is not None
            and self.from_component_container_images is not None
            and self.from_component_downloaded_files is not None
        )

    def initialize(
        self,
        *,
        manifest: Any,
        container_images: Dict[str, Any],
        downloaded_files: Dict[str, Any],
    ) -> "VHDInventories":
        with self._lock:
            if self.initialized:
                raise CacheAlreadyInitializedError("VHD inventories are already initialized")
            self.from_manifest = manifest
            self.from_component_container_images = container_images
            self.from_component_downloaded_files = downloaded_files
        log.debug(
            "VHD inventories initialized: %d container image(s), %d downloaded file(s)",
            len(container_images),
            len(downloaded_files),
        )
        return self

    def ensure_loaded(self, manifest_path: Path, components_path: Path) -> "VHDInventories":
        """
        Load the inventories from the VHD build outputs unless this handle
        already holds them. Reloading from other files is refused.
        """
        sources = (Path(manifest_path).resolve(), Path(components_path).resolve())
        with self._lock:
            if self.initialized:
                if self.sources == sources:
                    return self
                loaded_from = " and ".join(map(str, self.sources)) if self.sources else "in-memory data"
                raise CacheAlreadyInitializedError(f"VHD inventories are already initialized from {loaded_from}")
            load_inventories(*sources, into=self)
            self.sources = sources
        return self


DEFAULT_INVENTORIES = VHDInventories()


def _read_document(path: Path) -> Any:
    # manifest.json / components.json; JSON parses as YAML
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"cannot read VHD inventory {path}: {e}", path=path) from e


def _index_by_name(items: Any, path: Path, section: str) -> Dict[str, Any]:
    if not isinstance(items, list):
        raise CatalogError(f"{section} in {path} must be a list", path=path)
    indexed: Dict[str, Any] = {}
    for item in items:
        name = item.get("name") if isinstance(item, dict) else None
        if not name:
            raise CatalogError(f"{section} entry without a name in {path}", path=path)
        indexed[name] = item
    return indexed


def load_inventories(
    manifest_path: Path,
    components_path: Path,
    *,
    into: Optional[VHDInventories] = None,
) -> VHDInventories:
    """
    Populate ``into`` (a fresh handle when omitted) from the VHD build
    outputs: ``manifest.json`` and ``components.json``.
    """
    manifest_path = Path(manifest_path)
    components_path = Path(components_path)

    manifest = _read_document(manifest_path)
    if not isinstance(manifest, dict):
        raise CatalogError(f"manifest {manifest_path} must be a mapping", path=manifest_path)

    components = _read_document(components_path) or {}
    if not isinstance(components, dict):
        raise CatalogError(f"components {components_path} must be a mapping", path=components_path)

    target = into if into is not None else VHDInventories()
    return target.initialize(
        manifest=manifest,
        container_images=_index_by_name(
            components.get("ContainerImages", []), components_path, "ContainerImages"
        ),
        downloaded_files=_index_by_name(
            components.get("DownloadFiles", []), components_path, "DownloadFiles"
        ),
    )


def get_cached_versions_on_vhd(inventories: VHDInventories = DEFAULT_INVENTORIES) -> CachedOnVHD:
    if inventories.from_manifest is None:
        raise CacheNotInitializedError(MANIFEST)
    if inventories.from_component_container_images is None:
        raise CacheNotInitializedError(COMPONENT_CONTAINER_IMAGES)
    if inventories.from_component_downloaded_files is None:
        raise CacheNotInitializedError(COMPONENT_DOWNLOADED_FILES)

    return CachedOnVHD(
        from_manifest=inventories.from_manifest,
        from_component_container_images=inventories.from_component_container_images,
        from_component_downloaded_files=inventories.from_component_downloaded_files,
    )
