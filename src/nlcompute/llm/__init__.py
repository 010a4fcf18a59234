"""LLM client, prompts and parameter enhancement."""

from .enhancer import (
    Enhanced,
    EnhancementFailed,
    EnhancementResult,
    LLMEnhancer,
    default_follow_up_question,
    extract_json_object,
)
from .ollama_client import OllamaClient

__all__ = [
    "OllamaClient",
    "LLMEnhancer",
    "Enhanced",
    "EnhancementFailed",
    "EnhancementResult",
    "default_follow_up_question",
    "extract_json_object",
]
