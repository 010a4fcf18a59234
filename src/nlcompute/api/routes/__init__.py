"""API route modules."""

from .configuration import router as configuration_router
from .conversation import router as conversation_router
from .health import router as health_router

__all__ = ["configuration_router", "conversation_router", "health_router"]
