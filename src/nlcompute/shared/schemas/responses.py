"""Request and response schemas for the natural-language-to-YAML flow."""

from typing import Literal

from pydantic import BaseModel, Field


class NaturalToYamlRequest(BaseModel):
    """Start a conversation from a description, or answer a follow-up question."""

    description: str | None = Field(None, description="Natural language description of compute needs")
    conversation_id: str | None = Field(None, description="Conversation to continue")
    answer: str | None = Field(None, description="Answer to the last follow-up question")
    existing_yaml: str | None = Field(None, description="Previously rendered YAML to patch")
    service_name: str | None = Field(
        None, description="Service to patch when existing_yaml defines several"
    )


class PendingResponse(BaseModel):
    """More information is needed before a document can be rendered."""

    success: bool = True
    conversation_id: str
    complete: Literal[False] = False
    question: str
    missing_params: list[str]


class CompletedResponse(BaseModel):
    """Parameters are complete and a document was rendered."""

    success: bool = True
    conversation_id: str
    complete: Literal[True] = True
    yaml: str
    valid: bool
    errors: list[str] = Field(default_factory=list)


NaturalToYamlResponse = PendingResponse | CompletedResponse
