"""YAML Generation Module for compute marketplace deployments.

This module renders deployment documents from complete parameter sets using
a Jinja2 template, and patches previously rendered documents in place.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader

from ..shared.schemas import DEFAULT_GPU_MODEL, DEFAULT_REGION, JUPYTER_IMAGE, PRICING_TOKEN, ParameterSet

logger = logging.getLogger(__name__)


class DocumentUpdateError(Exception):
    """Existing document cannot be patched (wrong shape or ambiguous target)."""


def _as_mapping(value: Any, what: str) -> dict:
    if not isinstance(value, dict) or not value:
        raise DocumentUpdateError(f"Expected a non-empty mapping for {what}")
    return value


def _pick_key(mapping: dict, preferred: str | None, what: str) -> str:
    """Use the preferred key when the mapping has it, otherwise the first key."""
    mapping = _as_mapping(mapping, what)
    if preferred is not None and preferred in mapping:
        return preferred
    return next(iter(mapping))


class DocumentGenerator:
    """Generate deployment documents from parameter sets."""

    # Fallbacks used for any field the parameter set leaves unset
    DEFAULT_NAME = "py-cuda"
    DEFAULT_IMAGE = JUPYTER_IMAGE
    DEFAULT_PULL_POLICY = "IfNotPresent"
    DEFAULT_PORTS = (8888, 3000)
    DEFAULT_ENV = ("JUPYTER_TOKEN=test",)
    DEFAULT_CPU = 16
    DEFAULT_MEMORY = "64Gi"
    DEFAULT_STORAGE = "500Gi"
    DEFAULT_GPU_UNITS = 1
    DEFAULT_DURATION = "2h"
    DEFAULT_MODE = "provider"
    DEFAULT_AMOUNT = 15
    DEFAULT_COUNT = 1

    DOCUMENT_VERSION = "1.0"
    TEMPLATE_NAME = "compute.yaml.j2"

    def __init__(self):
        """Initialize the generator and its template environment."""
        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def _expose_config(self, params: ParameterSet) -> list[dict]:
        """Build the expose list; default Jupyter ports when none are given."""
        if params.ports:
            return [
                {
                    "port": mapping.port,
                    "as": mapping.published_port or mapping.port,
                    "to": [{"global": mapping.global_routing}],
                }
                for mapping in params.ports
            ]

        return [{"port": port, "as": port, "to": [{"global": True}]} for port in self.DEFAULT_PORTS]

    def _env_config(self, params: ParameterSet) -> list[str]:
        """Build KEY=VALUE environment entries."""
        if params.env is not None:
            return [f"{key}={value}" for key, value in params.env.items()]
        return list(self.DEFAULT_ENV)

    def _gpu_config(self, params: ParameterSet) -> dict | None:
        """Build the GPU resource section, or None when no GPU is requested."""
        if params.gpu is None:
            return None

        return {
            "units": params.gpu.units or self.DEFAULT_GPU_UNITS,
            "attributes": {
                "vendor": {
                    "nvidia": [{"model": params.gpu.model or DEFAULT_GPU_MODEL}],
                },
            },
        }

    def _prepare_template_context(self, params: ParameterSet) -> dict[str, Any]:
        """
        Prepare context dictionary for the Jinja2 template.

        Args:
            params: Parameter set, possibly with unset fields

        Returns:
            Context dictionary with every template variable populated
        """
        return {
            "name": params.name or self.DEFAULT_NAME,
            "image": params.image or self.DEFAULT_IMAGE,
            "pull_policy": params.pull_policy or self.DEFAULT_PULL_POLICY,
            "expose": self._expose_config(params),
            "env": self._env_config(params),
            "cpu": params.cpu or self.DEFAULT_CPU,
            "memory": params.memory or self.DEFAULT_MEMORY,
            "storage": params.storage or self.DEFAULT_STORAGE,
            "gpu": self._gpu_config(params),
            "duration": params.duration or self.DEFAULT_DURATION,
            "mode": params.mode or self.DEFAULT_MODE,
            "region": params.region or DEFAULT_REGION,
            "token": PRICING_TOKEN,
            "amount": params.amount or self.DEFAULT_AMOUNT,
            "count": params.count or self.DEFAULT_COUNT,
        }

    def render(self, params: ParameterSet) -> str:
        """
        Render a deployment document.

        Args:
            params: Parameter set; unset fields use the generator defaults

        Returns:
            YAML document text (identical output for identical input)
        """
        context = self._prepare_template_context(params)
        template = self.env.get_template(self.TEMPLATE_NAME)
        rendered = template.render(**context)

        logger.info(
            f"Rendered document for service '{context['name']}' in {context['region']} "
            f"({context['duration']}, {context['amount']} {PRICING_TOKEN})"
        )
        return rendered

    def update(
        self,
        existing_yaml: str,
        params: ParameterSet,
        service_name: str | None = None,
    ) -> str:
        """
        Patch an existing document with the fields set in params.

        Only one service is patched. Documents that define several services
        need service_name to pick one; otherwise the update is rejected. The
        pricing token is always reset. Any parse or shape error abandons the
        patch and renders a fresh document from params instead.

        Args:
            existing_yaml: Previously rendered YAML document
            params: Sparse parameter set; unset fields leave the document alone
            service_name: Service to patch when the document has several

        Returns:
            Updated YAML document text
        """
        try:
            config = yaml.safe_load(existing_yaml)
            if not isinstance(config, dict):
                raise DocumentUpdateError("Document is not a mapping")

            target = self._patch_services(config, params, service_name)
            self._patch_profiles(config, params, target)
            self._patch_deployment(config, params, target)

        except (yaml.YAMLError, DocumentUpdateError) as e:
            logger.error(f"Failed to update YAML, generating a new document: {e}")
            return self.render(params)

        return yaml.dump(config, sort_keys=False, default_flow_style=False, allow_unicode=True)

    def _patch_services(self, config: dict, params: ParameterSet, service_name: str | None) -> str | None:
        """Patch the target service and return its name."""
        if "services" not in config:
            return service_name

        services = _as_mapping(config["services"], "services")
        if service_name is not None:
            if service_name not in services:
                raise DocumentUpdateError(f"Service '{service_name}' not found in document")
            target = service_name
        elif len(services) > 1:
            raise DocumentUpdateError(
                f"Document defines {len(services)} services; a service name is required"
            )
        else:
            target = next(iter(services))

        service = _as_mapping(services[target], f"service '{target}'")

        if params.image:
            service["image"] = params.image
        if params.pull_policy:
            service["pull_policy"] = params.pull_policy
        if params.ports is not None:
            service["expose"] = self._expose_config(params)
        if params.env is not None:
            service["env"] = self._env_config(params)

        return target

    def _patch_profiles(self, config: dict, params: ParameterSet, target: str | None) -> None:
        if "profiles" not in config:
            return

        profiles = _as_mapping(config["profiles"], "profiles")

        if params.name:
            profiles["name"] = params.name
        if params.duration:
            profiles["duration"] = params.duration
        if params.mode:
            profiles["mode"] = params.mode

        if "compute" in profiles:
            compute_profiles = profiles["compute"]
            compute_name = _pick_key(compute_profiles, target, "profiles.compute")
            compute = _as_mapping(compute_profiles[compute_name], f"compute profile '{compute_name}'")

            if "resources" in compute:
                resources = _as_mapping(compute["resources"], "compute resources")
                if params.cpu:
                    resources["cpu"] = {"units": params.cpu}
                if params.memory:
                    resources["memory"] = {"size": params.memory}
                if params.storage:
                    resources["storage"] = [{"size": params.storage}]
                if params.gpu is not None:
                    resources["gpu"] = self._gpu_config(params)

        if "placement" in profiles:
            placements = profiles["placement"]
            region_name = next(iter(_as_mapping(placements, "profiles.placement")))
            placement = _as_mapping(placements[region_name], f"placement '{region_name}'")

            if "pricing" in placement:
                pricing_entries = placement["pricing"]
                pricing_name = _pick_key(pricing_entries, target, f"pricing in '{region_name}'")
                pricing = _as_mapping(pricing_entries[pricing_name], f"pricing '{pricing_name}'")

                pricing["token"] = PRICING_TOKEN
                if params.amount:
                    pricing["amount"] = params.amount

    def _patch_deployment(self, config: dict, params: ParameterSet, target: str | None) -> None:
        if "deployment" not in config:
            return

        deployments = config["deployment"]
        deployment_name = _pick_key(deployments, target, "deployment")
        deployment = _as_mapping(deployments[deployment_name], f"deployment '{deployment_name}'")

        region_name = next(iter(deployment))
        region = _as_mapping(deployment[region_name], f"deployment region '{region_name}'")

        if params.name:
            region["profile"] = params.name
        if params.count:
            region["count"] = params.count
