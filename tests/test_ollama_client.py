"""Tests for the Ollama wrapper, with the HTTP client replaced."""

import pytest

from nlcompute.llm.ollama_client import OllamaClient


class StubOllama:
    def __init__(self, content="hello", error=None):
        self.content = content
        self.error = error
        self.requests = []

    def chat(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"message": {"role": "assistant", "content": self.content}}

    def list(self):
        if self.error is not None:
            raise self.error
        return {"models": []}


@pytest.fixture
def client():
    return OllamaClient(model="test-model", host="http://ollama.invalid:11434", timeout=5)


@pytest.mark.unit
def test_generate_completion_sends_system_then_user(client):
    stub = StubOllama(content='{"cpu": 2}')
    client._client = stub

    reply = client.generate_completion("2 cores", system="only JSON", format_json=True, temperature=0)

    assert reply == '{"cpu": 2}'
    request = stub.requests[0]
    assert request["model"] == "test-model"
    assert request["messages"] == [
        {"role": "system", "content": "only JSON"},
        {"role": "user", "content": "2 cores"},
    ]
    assert request["options"] == {"temperature": 0}
    assert request["format"] == "json"


@pytest.mark.unit
def test_plain_completion_has_no_format(client):
    stub = StubOllama()
    client._client = stub

    assert client.generate_completion("hi") == "hello"
    assert "format" not in stub.requests[0]
    assert len(stub.requests[0]["messages"]) == 1


@pytest.mark.unit
def test_errors_propagate(client):
    client._client = StubOllama(error=ConnectionError("refused"))
    with pytest.raises(ConnectionError):
        client.generate_completion("hi")


@pytest.mark.unit
def test_is_available(client):
    client._client = StubOllama()
    assert client.is_available()

    client._client = StubOllama(error=ConnectionError("refused"))
    assert not client.is_available()
