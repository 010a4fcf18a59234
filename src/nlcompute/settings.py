"""Runtime settings read from NLCOMPUTE_* environment variables."""

import logging
import os

from pydantic import BaseModel, Field, PositiveFloat

from .conversation.store import ConversationStore
from .intent_extraction.service import ParameterExtractionService
from .llm.enhancer import LLMEnhancer
from .llm.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

ENV_PREFIX = "NLCOMPUTE_"


def _env(name: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_flag(name: str) -> bool:
    return (_env(name) or "false").lower() in ("true", "1", "yes")


class Settings(BaseModel):
    """Process-wide configuration."""

    debug: bool = False
    log_file: str | None = None

    llm_enabled: bool = Field(False, description="Refine extraction and phrase questions with Ollama")
    llm_model: str = "qwen2.5:7b"
    llm_host: str | None = None
    llm_timeout: PositiveFloat = 60

    conversation_ttl: PositiveFloat | None = Field(
        None, description="Seconds of inactivity before a conversation is evicted"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.

        Raises:
            pydantic.ValidationError: If a numeric variable is not a positive number
        """
        values = {
            "debug": _env_flag("DEBUG"),
            "log_file": _env("LOG_FILE"),
            "llm_enabled": _env_flag("LLM_ENABLED"),
            "llm_model": _env("LLM_MODEL"),
            "llm_host": _env("LLM_HOST"),
            "llm_timeout": _env("LLM_TIMEOUT"),
            "conversation_ttl": _env("CONVERSATION_TTL"),
        }
        return cls.model_validate({k: v for k, v in values.items() if v is not None})

    def build_store(self) -> ConversationStore:
        """Create the conversation store."""
        return ConversationStore(ttl_seconds=self.conversation_ttl)

    def build_extraction_service(self) -> ParameterExtractionService:
        """Create the extraction service, with an Ollama enhancer when enabled."""
        if not self.llm_enabled:
            return ParameterExtractionService()

        logger.info(f"LLM enhancement enabled (model={self.llm_model}, host={self.llm_host or 'default'})")
        client = OllamaClient(model=self.llm_model, host=self.llm_host, timeout=self.llm_timeout)
        return ParameterExtractionService(enhancer=LLMEnhancer(client))
