"""Conversation schemas for multi-turn parameter collection."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .parameters import ParameterSet


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationTurn(BaseModel):
    """One follow-up question and the answer the user gave to it."""

    question: str
    answer: str


class Conversation(BaseModel):
    """Server-side state of one clarification dialogue."""

    id: str
    original_description: str = Field(..., description="First description the user supplied")
    current_params: ParameterSet = Field(default_factory=ParameterSet)
    missing_params: list[str] = Field(default_factory=list, description="Outstanding field labels")
    history: list[ConversationTurn] = Field(default_factory=list)
    complete: bool = False

    # Last question put to the user, recorded into history with the next answer
    pending_question: str | None = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
