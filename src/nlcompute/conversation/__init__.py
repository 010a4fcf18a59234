"""Conversation state management for multi-turn interactions."""

from .store import ConversationStore, build_context

__all__ = ["ConversationStore", "build_context"]
