# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/datamodel/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .distro import Distro, OSFamily

AZURE_PUBLIC_CLOUD = "AzurePublicCloud"
AZURE_CHINA_CLOUD = "AzureChinaCloud"
AZURE_US_GOVERNMENT_CLOUD = "AzureUSGovernmentCloud"


class CloudSpecConfig(BaseModel):
    cloud_name: str = AZURE_PUBLIC_CLOUD


class EnvironmentInfo(BaseModel):
    """Where a node lands, without the rest of its configuration."""
    region: str
    subscription_id: Optional[str] = None
    tenant_id: Optional[str] = None


class OSImageConfig(BaseModel):
    """Marketplace (non-SIG) image reference."""
    model_config = ConfigDict(frozen=True)

    image_offer: str
    image_sku: str
    image_publisher: str
    image_version: str


class SigImageConfig(BaseModel):
    """Shared Image Gallery image reference."""
    model_config = ConfigDict(frozen=True)

    resource_group: str
    gallery: str
    definition: str
    version: str
    subscription_id: str

    @property
    def resource_id(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/Microsoft.Compute/galleries/{self.gallery}"
            f"/images/{self.definition}/versions/{self.version}"
        )

    def with_version(self, version: str) -> "SigImageConfig":
        return self.model_copy(update={"version": version})


class SigAzureEnvironmentSpecConfig(BaseModel):
    """Per-region SIG catalog, split by OS family."""
    cloud_name: str = AZURE_PUBLIC_CLOUD
    sig_ubuntu_image_config: Dict[Distro, SigImageConfig] = Field(default_factory=dict)
    sig_cbl_mariner_image_config: Dict[Distro, SigImageConfig] = Field(default_factory=dict)
    sig_azure_linux_image_config: Dict[Distro, SigImageConfig] = Field(default_factory=dict)
    sig_windows_image_config: Dict[Distro, SigImageConfig] = Field(default_factory=dict)
    sig_ubuntu_edge_zone_image_config: Dict[Distro, SigImageConfig] = Field(default_factory=dict)

    def family_catalog(self, family: OSFamily) -> Dict[Distro, SigImageConfig]:
        if family is OSFamily.UBUNTU:
            return self.sig_ubuntu_image_config
        if family is OSFamily.CBL_MARINER:
            return self.sig_cbl_mariner_image_config
        if family is OSFamily.AZURE_LINUX:
            return self.sig_azure_linux_image_config
        if family is OSFamily.WINDOWS:
            return self.sig_windows_image_config
        if family is OSFamily.UBUNTU_EDGE_ZONE:
            return self.sig_ubuntu_edge_zone_image_config
        raise ValueError(f"unknown OS family: {family}")


class SIGGalleryConfig(BaseModel):
    gallery_name: str
    resource_group: str


class SIGConfig(BaseModel):
    """Selects which galleries/subscription a SIG catalog resolves against."""
    tenant_id: str = ""
    subscription_id: str = ""
    galleries: Dict[str, SIGGalleryConfig] = Field(default_factory=dict)


class AgentPoolProfile(BaseModel):
    name: str
    distro: Distro
    os_type: Literal["Linux", "Windows"] = "Linux"
    vm_size: str = "Standard_DS2_v2"

    def is_windows(self) -> bool:
        return self.os_type == "Windows"


class ContainerService(BaseModel):
    name: str = ""
    location: str
    kubernetes_version: str = "1.29.7"
    fqdn: Optional[str] = None


class NodeBootstrappingConfiguration(BaseModel):
    agent_pool_profile: AgentPoolProfile
    cloud_spec_config: CloudSpecConfig = Field(default_factory=CloudSpecConfig)
    sig_config: SIGConfig = Field(default_factory=SIGConfig)
    container_service: ContainerService

    # consumed only by the template generator
    tenant_id: str = ""
    subscription_id: str = ""
    resource_group_name: str = ""
    user_assigned_identity_client_id: str = ""
    kubelet_config: Dict[str, str] = Field(default_factory=dict)
    enable_gpu: bool = False
    fips_enabled: bool = False


@dataclass
class NodeBootstrapping:
    custom_data: str
    cse: str
    os_image_config: Optional[OSImageConfig] = None
    sig_image_config: Optional[SigImageConfig] = None


@dataclass(frozen=True)
class CachedOnVHD:
    from_manifest: Any
    from_component_container_images: Dict[str, Any]
    from_component_downloaded_files: Dict[str, Any]
