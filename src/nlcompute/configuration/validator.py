"""YAML validation module for generated deployment documents."""

import logging
from typing import Any

import yaml

from ..shared.schemas import PRICING_TOKEN

logger = logging.getLogger(__name__)


class YAMLValidator:
    """Structural validation of deployment documents. Never raises."""

    SUPPORTED_VERSION = "1.0"

    # Required mapping sections and the error reported when one is absent or empty
    REQUIRED_SECTIONS = [
        ("services", "At least one service must be defined"),
        ("profiles", "Profiles must be defined"),
        ("deployment", "Deployment must be defined"),
    ]

    REQUIRED_PROFILE_FIELDS = [
        ("profiles.duration", "Duration must be specified"),
        ("profiles.mode", "Mode must be specified"),
    ]

    def _get_nested_field(self, data: dict[str, Any], field_path: str) -> Any | None:
        """
        Get nested field from dictionary using dot notation.

        Args:
            data: Dictionary to search
            field_path: Dot-separated field path (e.g., "profiles.duration")

        Returns:
            Field value if found, None otherwise
        """
        current = data
        for part in field_path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return None
        return current

    def validate_yaml(self, yaml_content: str) -> tuple[bool, list[str]]:
        """
        Validate YAML content.

        Args:
            yaml_content: YAML document text

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        try:
            config = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            logger.warning(f"Document is not valid YAML: {e}")
            return False, [f"Invalid YAML: {e}"]

        if not isinstance(config, dict):
            return False, ["Document must be a YAML mapping"]

        errors = self.validate_config(config)
        if errors:
            logger.warning(f"Document validation failed with {len(errors)} error(s)")
        else:
            logger.info("Document validation passed")
        return not errors, errors

    def validate_config(self, config: dict[str, Any]) -> list[str]:
        """
        Validate an already parsed document.

        Args:
            config: Parsed YAML document

        Returns:
            List of error messages (empty when valid)
        """
        errors = []

        if str(config.get("version")) != self.SUPPORTED_VERSION:
            errors.append(f'Version must be "{self.SUPPORTED_VERSION}"')

        for section, message in self.REQUIRED_SECTIONS:
            value = config.get(section)
            if not isinstance(value, dict) or not value:
                errors.append(message)

        services = config.get("services")
        if isinstance(services, dict):
            errors.extend(self._validate_services(services))

        if isinstance(config.get("profiles"), dict):
            errors.extend(self._validate_profiles(config))

        deployment = config.get("deployment")
        if isinstance(deployment, dict):
            errors.extend(self._validate_deployment(deployment))

        return errors

    def _validate_services(self, services: dict) -> list[str]:
        errors = []
        for name, service in services.items():
            if not isinstance(service, dict):
                errors.append(f'Service "{name}" must be a mapping')
            elif not service.get("image"):
                errors.append(f'Service "{name}" must specify an image')
        return errors

    def _validate_profiles(self, config: dict) -> list[str]:
        errors = []
        for field_path, message in self.REQUIRED_PROFILE_FIELDS:
            if not self._get_nested_field(config, field_path):
                errors.append(message)

        compute = self._get_nested_field(config, "profiles.compute")
        if not isinstance(compute, dict) or not compute:
            errors.append("Compute resources must be defined")
        else:
            for name, profile in compute.items():
                if not isinstance(profile, dict) or not isinstance(profile.get("resources"), dict):
                    errors.append(f'Compute profile "{name}" must define resources')

        placement = self._get_nested_field(config, "profiles.placement")
        if not isinstance(placement, dict) or not placement:
            errors.append("Placement must be defined")
            return errors

        for region, region_placement in placement.items():
            pricing = region_placement.get("pricing") if isinstance(region_placement, dict) else None
            if not isinstance(pricing, dict) or not pricing:
                errors.append(f'Pricing must be defined for region "{region}"')
                continue

            for profile, entry in pricing.items():
                token = entry.get("token") if isinstance(entry, dict) else None
                if token != PRICING_TOKEN:
                    errors.append(
                        f'Token must be "{PRICING_TOKEN}" for profile "{profile}" in region "{region}"'
                    )
        return errors

    def _validate_deployment(self, deployment: dict) -> list[str]:
        errors = []
        for service, regions in deployment.items():
            if not isinstance(regions, dict) or not regions:
                errors.append(f'Deployment for "{service}" must target at least one region')
                continue
            for region, target in regions.items():
                if not isinstance(target, dict) or not target.get("profile"):
                    errors.append(f'Deployment "{service}" in region "{region}" must reference a profile')
        return errors
