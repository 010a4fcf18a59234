"""In-memory store for multi-turn parameter collection dialogues.

The store is an ordinary object owned by whoever constructs it (the API app
or the CLI); nothing here is module-global. It does no locking: at most one
in-flight update per conversation id is assumed.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from ..shared.schemas import Conversation, ConversationTurn, ParameterSet

logger = logging.getLogger(__name__)


class ConversationStore:
    """Keyed store of in-flight conversations."""

    def __init__(self, ttl_seconds: float | None = None):
        """
        Initialize an empty store.

        Args:
            ttl_seconds: Evict conversations idle for longer than this; None keeps
                them for the life of the process
        """
        self.ttl_seconds = ttl_seconds
        self._conversations: dict[str, Conversation] = {}

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._conversations

    @staticmethod
    def _generate_id() -> str:
        return f"conv_{uuid.uuid4().hex}"

    def create(
        self,
        description: str,
        params: ParameterSet,
        missing_params: list[str],
    ) -> Conversation:
        """
        Start a conversation.

        Args:
            description: Original natural language description
            params: Parameters extracted from the description
            missing_params: Labels of fields still missing

        Returns:
            The new conversation, complete if nothing is missing
        """
        conversation = Conversation(
            id=self._generate_id(),
            original_description=description,
            current_params=params,
            missing_params=list(missing_params),
            complete=not missing_params,
        )
        self._conversations[conversation.id] = conversation

        logger.info(f"Created conversation {conversation.id} (missing: {missing_params})")
        return conversation

    def get(self, conversation_id: str) -> Conversation | None:
        """Look up a conversation by id."""
        return self._conversations.get(conversation_id)

    def update(
        self,
        conversation_id: str,
        question: str,
        answer: str,
        params: ParameterSet,
        missing_params: list[str],
    ) -> Conversation | None:
        """
        Record an answered question and replace the collected parameters.

        The parameters are replaced wholesale; callers merge before calling.

        Args:
            conversation_id: Conversation to update
            question: Question the user answered
            answer: The user's answer
            params: Merged parameters after this turn
            missing_params: Labels of fields still missing

        Returns:
            Updated conversation, or None if the id is unknown
        """
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            logger.warning(f"Update for unknown conversation {conversation_id}")
            return None

        conversation.current_params = params
        conversation.missing_params = list(missing_params)
        conversation.history.append(ConversationTurn(question=question, answer=answer))
        conversation.complete = not missing_params
        conversation.pending_question = None
        conversation.updated_at = datetime.now(timezone.utc)

        logger.info(
            f"Updated conversation {conversation_id}: turn {len(conversation.history)}, "
            f"missing={missing_params}"
        )
        return conversation

    def record_question(self, conversation_id: str, question: str) -> Conversation | None:
        """Remember the question just asked so the next answer can be paired with it."""
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None

        conversation.pending_question = question
        conversation.updated_at = datetime.now(timezone.utc)
        return conversation

    def complete(self, conversation_id: str) -> Conversation | None:
        """Mark a conversation complete. Idempotent."""
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None

        conversation.complete = True
        return conversation

    def delete(self, conversation_id: str) -> bool:
        """Remove a conversation; returns whether it existed."""
        existed = self._conversations.pop(conversation_id, None) is not None
        if existed:
            logger.info(f"Deleted conversation {conversation_id}")
        return existed

    def evict_expired(self, now: datetime | None = None) -> int:
        """
        Drop conversations idle for longer than the TTL.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Number of conversations removed
        """
        if self.ttl_seconds is None:
            return 0

        cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=self.ttl_seconds)
        expired = [
            conversation_id
            for conversation_id, conversation in self._conversations.items()
            if conversation.updated_at < cutoff
        ]
        for conversation_id in expired:
            del self._conversations[conversation_id]

        if expired:
            logger.info(f"Evicted {len(expired)} expired conversation(s)")
        return len(expired)


def build_context(conversation: Conversation) -> str:
    """
    Render a conversation as a transcript for LLM prompts.

    Args:
        conversation: Conversation to describe

    Returns:
        Original description followed by the question/answer history
    """
    context = f'Original description: "{conversation.original_description}"\n\n'

    if conversation.history:
        context += "Conversation history:\n"
        for turn in conversation.history:
            context += f"Q: {turn.question}\nA: {turn.answer}\n\n"

    return context
