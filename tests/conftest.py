import pytest

from nodebaker.datamodel.distro import Distro
from nodebaker.datamodel.models import (
    AgentPoolProfile,
    CloudSpecConfig,
    ContainerService,
    NodeBootstrappingConfiguration,
    SIGConfig,
    SIGGalleryConfig,
    SigImageConfig,
)
from nodebaker.toggles.toggles import Toggles

SUBSCRIPTION = "109a5e88-712a-48ae-9078-9ca8b3c81345"
GALLERY_KEYS = ("AKSUbuntu", "AKSCBLMariner", "AKSAzureLinux", "AKSWindows", "AKSUbuntuEdgeZone")


# ----------------- Fakes -----------------

class FakeTemplateGenerator:
    def __init__(self):
        self.calls = []
    def get_node_bootstrapping_payload(self, config):
        self.calls.append(("payload", config.agent_pool_profile.distro))
        return "Y3VzdG9tRGF0YQ=="
    def get_node_bootstrapping_cmd(self, config):
        self.calls.append(("cmd", config.agent_pool_profile.distro))
        return "/bin/bash /opt/azure/containers/provision_start.sh"


class ExplodingCatalogs:
    """Fails the test if any catalog lookup happens."""
    def get_cloud_os_image_map(self, cloud_name):
        raise AssertionError(f"unexpected legacy catalog lookup for {cloud_name}")
    def get_sig_azure_cloud_spec_config(self, sig_config, region):
        raise AssertionError(f"unexpected SIG lookup for {region}")


class ExplodingToggles(Toggles):
    def get_map(self, name, entity):
        raise AssertionError(f"unexpected toggle lookup {name}")


class RecordingObserver:
    def __init__(self):
        self.events = []
    def notify(self, ev):
        self.events.append(ev)


def sig_image(version="202410.09.0", definition="2204gen2containerd", gallery="AKSUbuntu"):
    return SigImageConfig(
        resource_group="resourcegroup",
        gallery=gallery,
        definition=definition,
        version=version,
        subscription_id=SUBSCRIPTION,
    )


# ----------------- Fixtures -----------------

@pytest.fixture
def sig_selector() -> SIGConfig:
    return SIGConfig(
        tenant_id="tenantID",
        subscription_id=SUBSCRIPTION,
        galleries={
            key: SIGGalleryConfig(gallery_name=f"{key}Gallery", resource_group="resourcegroup")
            for key in GALLERY_KEYS
        },
    )


@pytest.fixture
def fake_generator():
    return FakeTemplateGenerator()


@pytest.fixture
def make_config(sig_selector):
    def _make(
        distro: Distro,
        *,
        os_type: str = "Linux",
        cloud_name: str = "AzurePublicCloud",
        location: str = "southcentralus",
        sig_config: SIGConfig = None,
    ) -> NodeBootstrappingConfiguration:
        return NodeBootstrappingConfiguration(
            agent_pool_profile=AgentPoolProfile(name="nodepool1", distro=distro, os_type=os_type),
            cloud_spec_config=CloudSpecConfig(cloud_name=cloud_name),
            sig_config=sig_config or sig_selector,
            container_service=ContainerService(
                name="aks-cluster",
                location=location,
                kubernetes_version="1.29.7",
                fqdn="aks-cluster-dns.hcp.southcentralus.azmk8s.io",
            ),
            tenant_id="tenantID",
            subscription_id="subID",
            resource_group_name="resourceGroupName",
        )
    return _make
