# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/datamodel/distro.py
"""Distro identifiers and the OS families they belong to."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class OSFamily(str, Enum):
    """
    OS family of a SIG sub-catalog.

    Declaration order is the lookup precedence used when a distro is searched
    across the sub-catalogs of one SIG environment.
    """
    UBUNTU = "ubuntu"
    CBL_MARINER = "cblmariner"
    AZURE_LINUX = "azurelinux"
    WINDOWS = "windows"
    UBUNTU_EDGE_ZONE = "ubuntu-edgezone"


class Distro(str, Enum):
    # legacy (non-SIG) images
    UBUNTU = "ubuntu"
    UBUNTU_1804 = "ubuntu-18.04"
    UBUNTU_1804_GEN2 = "ubuntu-18.04-gen2"
    UBUNTU_2204 = "ubuntu-22.04"
    AKS_UBUNTU_1604 = "aks-ubuntu-16.04"
    AKS_UBUNTU_1804 = "aks-ubuntu-18.04"

    # Ubuntu SIG
    AKS_UBUNTU_CONTAINERD_1804 = "aks-ubuntu-containerd-18.04"
    AKS_UBUNTU_CONTAINERD_1804_GEN2 = "aks-ubuntu-containerd-18.04-gen2"
    AKS_UBUNTU_GPU_CONTAINERD_1804_GEN2 = "aks-ubuntu-gpu-containerd-18.04-gen2"
    AKS_UBUNTU_CONTAINERD_2204 = "aks-ubuntu-containerd-22.04"
    AKS_UBUNTU_CONTAINERD_2204_GEN2 = "aks-ubuntu-containerd-22.04-gen2"
    AKS_UBUNTU_ARM64_CONTAINERD_2204_GEN2 = "aks-ubuntu-arm64-containerd-22.04-gen2"
    AKS_UBUNTU_CONTAINERD_2404 = "aks-ubuntu-containerd-24.04"
    AKS_UBUNTU_CONTAINERD_2404_GEN2 = "aks-ubuntu-containerd-24.04-gen2"

    # CBL-Mariner SIG
    AKS_CBL_MARINER_V2 = "aks-cblmariner-v2"
    AKS_CBL_MARINER_V2_GEN2 = "aks-cblmariner-v2-gen2"
    AKS_CBL_MARINER_V2_ARM64_GEN2 = "aks-cblmariner-v2-arm64-gen2"

    # Azure Linux SIG
    AKS_AZURE_LINUX_V2 = "aks-azurelinux-v2"
    AKS_AZURE_LINUX_V2_GEN2 = "aks-azurelinux-v2-gen2"
    AKS_AZURE_LINUX_V3_GEN2 = "aks-azurelinux-v3-gen2"

    # Windows SIG
    AKS_WINDOWS_2019_CONTAINERD = "aks-windows-2019-containerd"
    AKS_WINDOWS_2022_CONTAINERD = "aks-windows-2022-containerd"
    AKS_WINDOWS_2022_CONTAINERD_GEN2 = "aks-windows-2022-containerd-gen2"
    AKS_WINDOWS_23H2 = "aks-windows-23H2"
    AKS_WINDOWS_23H2_GEN2 = "aks-windows-23H2-gen2"

    # Ubuntu edge zone SIG (region restricted)
    AKS_UBUNTU_EDGE_ZONE_CONTAINERD_1804 = "aks-ubuntu-edgezone-containerd-18.04"
    AKS_UBUNTU_EDGE_ZONE_CONTAINERD_1804_GEN2 = "aks-ubuntu-edgezone-containerd-18.04-gen2"
    AKS_UBUNTU_EDGE_ZONE_CONTAINERD_2204 = "aks-ubuntu-edgezone-containerd-22.04"
    AKS_UBUNTU_EDGE_ZONE_CONTAINERD_2204_GEN2 = "aks-ubuntu-edgezone-containerd-22.04-gen2"

    # customer supplied images
    CUSTOMIZED_IMAGE = "CustomizedImage"
    CUSTOMIZED_IMAGE_KATA = "CustomizedImageKata"
    CUSTOMIZED_WINDOWS_OS_IMAGE = "CustomizedWindowsOSImage"

    def __str__(self) -> str:
        return self.value

    @property
    def family(self) -> OSFamily:
        return _FAMILY_BY_PREFIX[_family_prefix(self.value)]

    @property
    def is_windows(self) -> bool:
        return self.family is OSFamily.WINDOWS

    @property
    def is_customized(self) -> bool:
        return self in CUSTOMIZED_DISTROS


CUSTOMIZED_DISTROS = frozenset({
    Distro.CUSTOMIZED_IMAGE,
    Distro.CUSTOMIZED_IMAGE_KATA,
    Distro.CUSTOMIZED_WINDOWS_OS_IMAGE,
})

# Longest prefix first; anything unmatched is general Linux.
_FAMILY_BY_PREFIX: Dict[str, OSFamily] = {
    "aks-ubuntu-edgezone": OSFamily.UBUNTU_EDGE_ZONE,
    "aks-cblmariner": OSFamily.CBL_MARINER,
    "aks-azurelinux": OSFamily.AZURE_LINUX,
    "aks-windows": OSFamily.WINDOWS,
    "CustomizedWindows": OSFamily.WINDOWS,
    "": OSFamily.UBUNTU,
}


def _family_prefix(value: str) -> str:
    for prefix in _FAMILY_BY_PREFIX:
        if value.startswith(prefix):
            return prefix
    return ""
