"""Shared Pydantic schemas for nlcompute.

This module provides all data schemas used across the application,
organized by domain:
- parameters: Extracted compute parameters and their constants
- conversation: Multi-turn dialogue state
- responses: Natural-language-to-YAML requests and responses
"""

from .conversation import Conversation, ConversationTurn
from .parameters import (
    DEFAULT_GPU_MODEL,
    DEFAULT_REGION,
    GPU_MODELS,
    JUPYTER_IMAGE,
    PRICING_TOKEN,
    GPUSpec,
    ParameterSet,
    PortMapping,
)
from .responses import (
    CompletedResponse,
    NaturalToYamlRequest,
    NaturalToYamlResponse,
    PendingResponse,
)

__all__ = [
    # Parameter schemas
    "ParameterSet",
    "PortMapping",
    "GPUSpec",
    "PRICING_TOKEN",
    "GPU_MODELS",
    "DEFAULT_GPU_MODEL",
    "DEFAULT_REGION",
    "JUPYTER_IMAGE",
    # Conversation schemas
    "Conversation",
    "ConversationTurn",
    # Request/response schemas
    "NaturalToYamlRequest",
    "PendingResponse",
    "CompletedResponse",
    "NaturalToYamlResponse",
]
