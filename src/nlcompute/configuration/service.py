"""Configuration Service facade.

Provides a high-level interface for rendering, patching and validating
deployment documents.
"""

import logging

from ..shared.schemas import ParameterSet
from .generator import DocumentGenerator
from .validator import YAMLValidator

logger = logging.getLogger(__name__)


class ConfigurationService:
    """High-level service for generating deployment documents."""

    def __init__(
        self,
        generator: DocumentGenerator | None = None,
        validator: YAMLValidator | None = None,
    ):
        """
        Initialize the Configuration Service.

        Args:
            generator: Optional document generator
            validator: Optional YAML validator
        """
        self.generator = generator or DocumentGenerator()
        self.validator = validator or YAMLValidator()

    def generate_and_validate(
        self,
        params: ParameterSet,
        existing_yaml: str | None = None,
        service_name: str | None = None,
    ) -> tuple[str, bool, list[str]]:
        """
        Render (or patch) a document and validate the result.

        This is the primary method once a parameter set is complete.

        Args:
            params: Complete parameter set
            existing_yaml: Optional previously rendered document to patch
            service_name: Service to patch in a multi-service document

        Returns:
            Tuple of (yaml_content, is_valid, list of error messages)
        """
        if existing_yaml:
            yaml_content = self.generator.update(existing_yaml, params, service_name)
        else:
            yaml_content = self.generator.render(params)

        is_valid, errors = self.validator.validate_yaml(yaml_content)
        if not is_valid:
            logger.warning(f"Generated document failed validation: {errors}")

        return yaml_content, is_valid, errors

    def validate_yaml(self, yaml_content: str) -> tuple[bool, list[str]]:
        """
        Validate YAML content.

        Args:
            yaml_content: YAML content string to validate

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        return self.validator.validate_yaml(yaml_content)
