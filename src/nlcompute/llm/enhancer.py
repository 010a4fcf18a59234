"""LLM refinement of pattern-extracted parameters and follow-up questions."""

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from ..shared.schemas import ParameterSet
from .ollama_client import OllamaClient
from .prompts import (
    ENHANCEMENT_SYSTEM_PROMPT,
    FOLLOW_UP_SYSTEM_PROMPT,
    build_enhancement_prompt,
    build_follow_up_prompt,
)

logger = logging.getLogger(__name__)

# Amount used when neither the LLM nor the pattern extraction supplied one
FALLBACK_AMOUNT = 15

FOLLOW_UP_TEMPLATE = (
    "I need some additional information to complete your deployment. "
    "Could you please provide: {missing}?"
)


@dataclass(frozen=True)
class Enhanced:
    """The LLM returned a usable parameter set."""

    params: ParameterSet


@dataclass(frozen=True)
class EnhancementFailed:
    """The LLM call or its reply was unusable; callers keep their own parameters."""

    reason: str


EnhancementResult = Enhanced | EnhancementFailed


def default_follow_up_question(missing_params: list[str]) -> str:
    """Deterministic follow-up question used when no LLM question is available."""
    return FOLLOW_UP_TEMPLATE.format(missing=", ".join(missing_params))


def extract_json_object(text: str) -> dict | None:
    """
    Find the first well-formed JSON object embedded in free text.

    The model may wrap its answer in prose or markdown fences, so every
    opening brace is tried in turn until one decodes to an object.

    Args:
        text: Raw LLM reply

    Returns:
        Decoded dict, or None if the text holds no JSON object
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


class LLMEnhancer:
    """Refine extracted parameters and draft follow-up questions with an LLM."""

    def __init__(self, llm_client: OllamaClient | None = None):
        """
        Initialize the enhancer.

        Args:
            llm_client: Optional Ollama client (creates default if not provided)
        """
        self.llm_client = llm_client or OllamaClient()

    def enhance(
        self,
        description: str,
        params: ParameterSet,
        context: str | None = None,
    ) -> EnhancementResult:
        """
        Ask the LLM to correct and complete extracted parameters.

        Args:
            description: Natural language description
            params: Parameters from pattern extraction
            context: Optional conversation transcript

        Returns:
            Enhanced with the parsed parameters, or EnhancementFailed
        """
        prompt = build_enhancement_prompt(description, params.to_llm_dict(), context)

        try:
            response_text = self.llm_client.generate_completion(
                prompt,
                system=ENHANCEMENT_SYSTEM_PROMPT,
                temperature=0,
            )
        except Exception as e:
            logger.warning(f"Parameter enhancement request failed: {e}")
            return EnhancementFailed(reason=f"LLM request failed: {e}")

        return self._parse_response(response_text, params)

    def _parse_response(self, response_text: str, original: ParameterSet) -> EnhancementResult:
        """
        Parse an LLM reply into a ParameterSet.

        Args:
            response_text: Raw LLM reply
            original: Pre-enhancement parameters, used to backfill the amount

        Returns:
            Enhanced or EnhancementFailed
        """
        data = extract_json_object(response_text)
        if data is None:
            logger.warning("LLM reply contained no JSON object")
            return EnhancementFailed(reason="No JSON object in LLM reply")

        # The pricing token is fixed; never accept one from the model
        data.pop("token", None)

        if data.get("amount") is None:
            data["amount"] = original.amount or FALLBACK_AMOUNT

        try:
            enhanced = ParameterSet.model_validate(data)
        except ValidationError as e:
            logger.warning(f"LLM reply did not match the parameter schema: {e}")
            return EnhancementFailed(reason=f"Invalid parameters from LLM: {e}")

        logger.info(f"Enhanced parameters: {enhanced.to_llm_dict()}")
        return Enhanced(params=enhanced)

    def ask_follow_up(
        self,
        missing_params: list[str],
        description: str,
        context: str | None = None,
    ) -> str:
        """
        Generate one natural-language question for the missing fields.

        Args:
            missing_params: Labels of missing fields
            description: Description the parameters came from
            context: Optional conversation transcript

        Returns:
            Question text; the fixed template if the LLM call fails
        """
        if not missing_params:
            return ""

        prompt = build_follow_up_prompt(missing_params, description, context)

        try:
            question = self.llm_client.generate_completion(
                prompt,
                system=FOLLOW_UP_SYSTEM_PROMPT,
                temperature=0.7,
            ).strip()
        except Exception as e:
            logger.warning(f"Follow-up question request failed: {e}")
            return default_follow_up_question(missing_params)

        if not question:
            logger.warning("LLM returned an empty follow-up question")
            return default_follow_up_question(missing_params)

        return question
