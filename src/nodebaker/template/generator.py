# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/template/generator.py
from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from ..datamodel.models import NodeBootstrappingConfiguration
from ..errors import TemplateRenderError

log = logging.getLogger("nodebaker")

TEMPLATES_DIR = Path(__file__).parent / "templates"

LINUX_CUSTOM_DATA = "linux_custom_data.yml.j2"
LINUX_CSE_CMD = "linux_cse_cmd.sh.j2"
WINDOWS_CUSTOM_DATA = "windows_custom_data.ps1.j2"
WINDOWS_CSE_CMD = "windows_cse_cmd.j2"


class TemplateGenerator(Protocol):
    def get_node_bootstrapping_payload(self, config: NodeBootstrappingConfiguration) -> str: ...

    def get_node_bootstrapping_cmd(self, config: NodeBootstrappingConfiguration) -> str: ...


def template_context(config: NodeBootstrappingConfiguration) -> Dict[str, Any]:
    cs = config.container_service
    pool = config.agent_pool_profile
    return {
        "cluster_name": cs.name,
        "location": cs.location,
        "kubernetes_version": cs.kubernetes_version,
        "fqdn": cs.fqdn or "",
        "agent_pool_name": pool.name,
        "vm_size": pool.vm_size,
        "cloud_name": config.cloud_spec_config.cloud_name,
        "tenant_id": config.tenant_id,
        "subscription_id": config.subscription_id,
        "resource_group_name": config.resource_group_name,
        "user_assigned_identity_client_id": config.user_assigned_identity_client_id,
        "kubelet_config": config.kubelet_config,
        "enable_gpu": config.enable_gpu,
        "fips_enabled": config.fips_enabled,
    }


class JinjaTemplateGenerator:
    """
    Renders the node custom data (base64 encoded) and the CSE command from
    the packaged Jinja templates.
    """

    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render(self, name: str, context: Dict[str, Any]) -> str:
        try:
            tmpl = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateRenderError(f"Missing template: {name}", template=name) from e
        try:
            return tmpl.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"Failed to render {name}: {e}", template=name) from e

    def get_node_bootstrapping_payload(self, config: NodeBootstrappingConfiguration) -> str:
        name = WINDOWS_CUSTOM_DATA if config.agent_pool_profile.is_windows() else LINUX_CUSTOM_DATA
        text = self.render(name, template_context(config))
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def get_node_bootstrapping_cmd(self, config: NodeBootstrappingConfiguration) -> str:
        name = WINDOWS_CSE_CMD if config.agent_pool_profile.is_windows() else LINUX_CSE_CMD
        return self.render(name, template_context(config))
