"""Shared fixtures for the nlcompute test suite."""

import pytest

from nlcompute.conversation.store import ConversationStore
from nlcompute.orchestration.workflow import DeploymentWorkflow


class FakeLLMClient:
    """Stands in for OllamaClient; replays canned replies and records prompts."""

    def __init__(self, replies=None, error: Exception | None = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    def generate_completion(self, prompt, system=None, format_json=False, temperature=0.7):
        self.calls.append({"prompt": prompt, "system": system, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def store():
    return ConversationStore()


@pytest.fixture
def workflow(store):
    return DeploymentWorkflow(store=store)


@pytest.fixture
def llm_factory():
    """Build a FakeLLMClient with the given replies or error."""
    return FakeLLMClient
