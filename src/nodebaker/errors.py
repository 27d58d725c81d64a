# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Optional


class NodeBakerError(RuntimeError):
    """Base class for node bootstrapping failures."""


class UnknownCloudError(NodeBakerError):
    """Raised when the legacy image catalog has no entry for a cloud."""

    def __init__(self, cloud_name: str):
        self.cloud_name = cloud_name
        super().__init__(f"don't have settings for cloud {cloud_name}")


class SigResolutionError(NodeBakerError):
    """Raised when no SIG environment can be resolved for a selector/region."""

    def __init__(self, message: str, *, region: Optional[str] = None):
        self.region = region
        super().__init__(message)


class ImageNotFoundError(NodeBakerError):
    """Raised when neither the legacy nor any SIG sub-catalog knows a distro."""

    def __init__(self, distro: str, *, region: Optional[str] = None):
        self.distro = distro
        self.region = region
        msg = f"can't find image for distro {distro}"
        if region:
            msg += f" in region {region}"
        super().__init__(msg)


class CacheNotInitializedError(NodeBakerError):
    """Raised when one of the VHD inventories was never populated."""

    def __init__(self, inventory: str):
        self.inventory = inventory
        super().__init__(f"cached versions from {inventory} are not available")


class CacheAlreadyInitializedError(NodeBakerError):
    """Raised on a second attempt to populate the VHD inventories."""


class CatalogError(NodeBakerError):
    """Raised when catalog data cannot be loaded or validated."""

    def __init__(self, message: str, *, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class TemplateRenderError(NodeBakerError):
    """Raised when a bootstrap template is missing or fails to render."""

    def __init__(self, message: str, *, template: Optional[str] = None):
        self.template = template
        super().__init__(message)
