import pytest

from nodebaker.baker import AgentBaker
from nodebaker.catalog.store import CatalogStore, LegacyCatalog, SigCatalog
from nodebaker.datamodel.distro import Distro
from nodebaker.datamodel.models import OSImageConfig
from nodebaker.errors import ImageNotFoundError, SigResolutionError, UnknownCloudError
from nodebaker.observers.dispatcher import EventBus
from nodebaker.observers.events import BootstrapResolved, ImageVersionOverridden, ResolutionFailed
from nodebaker.toggles.toggles import LINUX_NODE_IMAGE_VERSION, Toggles

from conftest import ExplodingCatalogs, ExplodingToggles, RecordingObserver, SUBSCRIPTION


def _override_toggles(values):
    seen = []
    def _toggle(entity):
        seen.append(entity)
        return values
    return Toggles({LINUX_NODE_IMAGE_VERSION: _toggle}), seen


@pytest.mark.parametrize("distro", [
    Distro.CUSTOMIZED_IMAGE,
    Distro.CUSTOMIZED_IMAGE_KATA,
    Distro.CUSTOMIZED_WINDOWS_OS_IMAGE,
])
def test_customized_distro_bypasses_catalogs_and_overrides(distro, make_config, fake_generator):
    baker = AgentBaker(
        catalogs=ExplodingCatalogs(),
        toggles=ExplodingToggles(),
        template_generator=fake_generator,
    )
    # unknown cloud would be fatal for a catalog-resolved distro
    config = make_config(distro, cloud_name="NoSuchCloud")

    nb = baker.get_node_bootstrapping(config)

    assert nb.custom_data == "Y3VzdG9tRGF0YQ=="
    assert nb.cse == "/bin/bash /opt/azure/containers/provision_start.sh"
    assert nb.os_image_config is None
    assert nb.sig_image_config is None
    assert [c[0] for c in fake_generator.calls] == ["payload", "cmd"]


def test_ubuntu_sig_image_resolved_from_packaged_catalogs(make_config, fake_generator):
    baker = AgentBaker(template_generator=fake_generator)

    nb = baker.get_node_bootstrapping(make_config(Distro.AKS_UBUNTU_CONTAINERD_2204_GEN2))

    assert nb.os_image_config is None
    assert nb.sig_image_config is not None
    assert nb.sig_image_config.gallery == "AKSUbuntuGallery"
    assert nb.sig_image_config.definition == "2204gen2containerd"
    assert nb.sig_image_config.version == "202410.09.0"
    assert nb.sig_image_config.subscription_id == SUBSCRIPTION


def test_legacy_only_distro_is_not_an_error(make_config, fake_generator):
    toggles, _ = _override_toggles({"ubuntu-18.04": "9999.99.99"})
    baker = AgentBaker(template_generator=fake_generator, toggles=toggles)

    nb = baker.get_node_bootstrapping(make_config(Distro.UBUNTU_1804))

    assert nb.sig_image_config is None
    assert nb.os_image_config == OSImageConfig(
        image_offer="UbuntuServer",
        image_sku="18.04-LTS",
        image_publisher="Canonical",
        image_version="latest",
    )


def test_unknown_cloud_fails_the_request(make_config, fake_generator):
    baker = AgentBaker(template_generator=fake_generator)

    with pytest.raises(UnknownCloudError) as ei:
        baker.get_node_bootstrapping(make_config(Distro.AKS_UBUNTU_CONTAINERD_2204_GEN2, cloud_name="MarsCloud"))
    assert ei.value.cloud_name == "MarsCloud"
    assert "MarsCloud" in str(ei.value)


def test_sig_resolution_failure_propagates(make_config, fake_generator, sig_selector):
    baker = AgentBaker(template_generator=fake_generator)
    selector = sig_selector.model_copy(update={"subscription_id": ""})

    with pytest.raises(SigResolutionError):
        baker.get_node_bootstrapping(make_config(Distro.AKS_UBUNTU_CONTAINERD_2204_GEN2, sig_config=selector))


def test_distro_missing_everywhere_raises_image_not_found(make_config, fake_generator):
    store = CatalogStore(
        legacy=LegacyCatalog(clouds={"AzurePublicCloud": {}}),
        sig=SigCatalog(),
    )
    baker = AgentBaker(catalogs=store, template_generator=fake_generator)

    with pytest.raises(ImageNotFoundError) as ei:
        baker.get_node_bootstrapping(make_config(Distro.AKS_CBL_MARINER_V2_GEN2, location="westus2"))
    assert ei.value.distro == "aks-cblmariner-v2-gen2"
    assert ei.value.region == "westus2"
    assert str(ei.value) == "can't find image for distro aks-cblmariner-v2-gen2 in region westus2"
    assert "SIG" not in str(ei.value)


def test_linux_override_replaces_version(make_config, fake_generator):
    toggles, seen = _override_toggles({"aks-azurelinux-v2-gen2": "202409.23.0"})
    baker = AgentBaker(template_generator=fake_generator).with_toggles(toggles)

    nb = baker.get_node_bootstrapping(make_config(Distro.AKS_AZURE_LINUX_V2_GEN2))

    assert nb.sig_image_config.version == "202409.23.0"
    assert nb.sig_image_config.definition == "V2gen2"
    assert seen[0].kind == "configuration"
    assert seen[0].fields["region"] == "southcentralus"


def test_override_does_not_touch_catalog(make_config, fake_generator):
    toggles, _ = _override_toggles({"aks-azurelinux-v2-gen2": "202409.23.0"})
    baker = AgentBaker(template_generator=fake_generator, toggles=toggles)
    config = make_config(Distro.AKS_AZURE_LINUX_V2_GEN2)

    baker.get_node_bootstrapping(config)
    baker.with_toggles(Toggles())
    nb = baker.get_node_bootstrapping(config)

    assert nb.sig_image_config.version == "202410.09.0"


def test_windows_ignores_override(make_config, fake_generator):
    toggles, seen = _override_toggles({"aks-windows-2022-containerd": "1.0.0"})
    baker = AgentBaker(template_generator=fake_generator, toggles=toggles)

    nb = baker.get_node_bootstrapping(make_config(Distro.AKS_WINDOWS_2022_CONTAINERD, os_type="Windows"))

    assert nb.sig_image_config.version == "20348.2700.240916"
    assert seen == []


def test_events_emitted_on_success_and_failure(make_config, fake_generator):
    obs = RecordingObserver()
    toggles, _ = _override_toggles({"aks-ubuntu-containerd-22.04-gen2": "202401.01.0"})
    baker = AgentBaker(template_generator=fake_generator, toggles=toggles, bus=EventBus([obs]))

    baker.get_node_bootstrapping(make_config(Distro.AKS_UBUNTU_CONTAINERD_2204_GEN2))
    kinds = [type(e) for e in obs.events]
    assert ImageVersionOverridden in kinds
    assert BootstrapResolved in kinds
    ov = next(e for e in obs.events if isinstance(e, ImageVersionOverridden))
    assert ov.catalog_version == "202410.09.0"
    assert ov.version == "202401.01.0"

    with pytest.raises(UnknownCloudError):
        baker.get_node_bootstrapping(make_config(Distro.AKS_UBUNTU_CONTAINERD_2204_GEN2, cloud_name="nope"))
    assert isinstance(obs.events[-1], ResolutionFailed)
    assert "nope" in obs.events[-1].error


def test_given_collaborators_are_kept(fake_generator):
    catalogs = ExplodingCatalogs()
    baker = AgentBaker(catalogs=catalogs, template_generator=fake_generator)
    assert baker.template_generator is fake_generator
    assert baker.catalogs is catalogs


def test_default_template_generator_is_jinja():
    from nodebaker.template.generator import JinjaTemplateGenerator
    assert isinstance(AgentBaker(catalogs=ExplodingCatalogs()).template_generator, JinjaTemplateGenerator)
