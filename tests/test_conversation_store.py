"""Tests for the in-memory conversation store."""

from datetime import timedelta

import pytest

from nlcompute.conversation.store import ConversationStore, build_context
from nlcompute.shared.schemas import ParameterSet


@pytest.mark.unit
class TestConversationStore:
    def test_create(self, store):
        conversation = store.create("a box", ParameterSet(cpu=2), ["storage"])

        assert conversation.id.startswith("conv_")
        assert conversation.original_description == "a box"
        assert conversation.missing_params == ["storage"]
        assert not conversation.complete
        assert conversation.id in store
        assert len(store) == 1

    def test_create_with_nothing_missing_is_complete(self, store):
        assert store.create("a box", ParameterSet(), []).complete

    def test_ids_are_unique(self, store):
        first = store.create("a", ParameterSet(), [])
        second = store.create("b", ParameterSet(), [])
        assert first.id != second.id

    def test_get_unknown(self, store):
        assert store.get("conv_missing") is None

    def test_update_records_turn_and_replaces_params(self, store):
        conversation = store.create("a box", ParameterSet(cpu=2), ["storage", "duration"])
        store.record_question(conversation.id, "How much storage?")
        assert store.get(conversation.id).pending_question == "How much storage?"

        updated = store.update(
            conversation.id,
            "How much storage?",
            "100GB storage",
            ParameterSet(storage="100Gi"),
            ["duration"],
        )

        assert updated.current_params.cpu is None
        assert updated.current_params.storage == "100Gi"
        assert updated.missing_params == ["duration"]
        assert [(t.question, t.answer) for t in updated.history] == [("How much storage?", "100GB storage")]
        assert updated.pending_question is None
        assert not updated.complete
        assert updated.updated_at >= updated.created_at

    def test_update_without_missing_completes(self, store):
        conversation = store.create("a box", ParameterSet(), ["duration"])
        assert store.update(conversation.id, "q", "3 hours", ParameterSet(duration="3h"), []).complete

    def test_update_unknown(self, store):
        assert store.update("conv_missing", "q", "a", ParameterSet(), []) is None
        assert store.record_question("conv_missing", "q") is None

    def test_complete_is_idempotent(self, store):
        conversation = store.create("a box", ParameterSet(), ["duration"])
        store.complete(conversation.id)
        store.complete(conversation.id)
        assert store.get(conversation.id).complete
        assert store.complete("conv_missing") is None

    def test_delete(self, store):
        conversation = store.create("a box", ParameterSet(), [])
        assert store.delete(conversation.id)
        assert not store.delete(conversation.id)
        assert store.get(conversation.id) is None


@pytest.mark.unit
class TestEviction:
    def test_no_ttl_keeps_everything(self, store):
        conversation = store.create("a box", ParameterSet(), [])
        assert store.evict_expired(now=conversation.updated_at + timedelta(days=365)) == 0
        assert len(store) == 1

    def test_idle_conversations_evicted(self):
        store = ConversationStore(ttl_seconds=60)
        old = store.create("old", ParameterSet(), [])
        fresh = store.create("fresh", ParameterSet(), [])
        fresh.updated_at = old.updated_at + timedelta(seconds=30)

        removed = store.evict_expired(now=old.updated_at + timedelta(seconds=61))

        assert removed == 1
        assert old.id not in store
        assert fresh.id in store


@pytest.mark.unit
def test_build_context(store):
    conversation = store.create("Jupyter with an A100", ParameterSet(), ["CPU cores"])
    store.update(conversation.id, "How many cores?", "8 cores", ParameterSet(cpu=8), [])

    context = build_context(conversation)

    assert 'Original description: "Jupyter with an A100"' in context
    assert "Q: How many cores?\nA: 8 cores" in context


@pytest.mark.unit
def test_build_context_without_history(store):
    conversation = store.create("a box", ParameterSet(), [])
    assert "Conversation history" not in build_context(conversation)
