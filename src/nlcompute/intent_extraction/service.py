"""Parameter Extraction Service facade.

Provides a high-level interface for turning descriptions into parameter
sets: pattern extraction, optional LLM enhancement and the missing-field
check.
"""

import logging

from ..llm.enhancer import Enhanced, LLMEnhancer, default_follow_up_question
from ..shared.schemas import ParameterSet
from .extractor import extract_parameters
from .requirements import find_missing_parameters

logger = logging.getLogger(__name__)


class ParameterExtractionService:
    """High-level service for extracting compute parameters from natural language."""

    def __init__(self, enhancer: LLMEnhancer | None = None):
        """
        Initialize the Parameter Extraction Service.

        Args:
            enhancer: Optional LLM enhancer; pattern extraction only when omitted
        """
        self.enhancer = enhancer

    def extract(self, description: str, context: str | None = None) -> ParameterSet:
        """
        Extract parameters, refining them with the LLM when one is configured.

        Args:
            description: The user's natural language description
            context: Optional conversation transcript passed to the LLM

        Returns:
            Partial ParameterSet
        """
        params = extract_parameters(description)

        if self.enhancer is None:
            return params

        result = self.enhancer.enhance(description, params, context)
        if isinstance(result, Enhanced):
            return result.params

        logger.warning(f"Keeping pattern-extracted parameters: {result.reason}")
        return params

    def process_description(
        self,
        description: str,
        context: str | None = None,
    ) -> tuple[ParameterSet, list[str]]:
        """
        Extract parameters and report which required fields are missing.

        This is the primary method for a single pass over a description.

        Args:
            description: The user's natural language description
            context: Optional conversation transcript

        Returns:
            Tuple of (parameters, missing field labels)
        """
        params = self.extract(description, context)
        missing = find_missing_parameters(params)

        logger.info(
            f"Parameter extraction complete: cpu={params.cpu}, memory={params.memory}, "
            f"storage={params.storage}, duration={params.duration}, missing={missing}"
        )

        return params, missing

    def generate_question(
        self,
        missing_params: list[str],
        description: str,
        context: str | None = None,
    ) -> str:
        """
        Produce a follow-up question for the missing fields.

        Args:
            missing_params: Labels of missing fields
            description: Description the parameters came from
            context: Optional conversation transcript

        Returns:
            Question text (empty when nothing is missing)
        """
        if not missing_params:
            return ""

        if self.enhancer is None:
            return default_follow_up_question(missing_params)

        return self.enhancer.ask_follow_up(missing_params, description, context)
