"""Natural-language-to-YAML conversation endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ...conversation.store import ConversationStore
from ...orchestration.workflow import (
    ConversationNotFoundError,
    DeploymentWorkflow,
    InvalidRequestError,
)
from ...shared.schemas import Conversation, NaturalToYamlRequest, NaturalToYamlResponse
from ..dependencies import get_store, get_workflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["conversation"])


@router.post("/natural-to-yaml", response_model=NaturalToYamlResponse)
def natural_to_yaml(
    request: NaturalToYamlRequest,
    workflow: DeploymentWorkflow = Depends(get_workflow),
):
    """Start or continue a conversation that ends in a deployment document.

    Send ``description`` to start. When the response has ``complete: false``,
    answer its ``question`` by sending ``conversation_id`` and ``answer``.

    Args:
        request: NaturalToYamlRequest

    Returns:
        Follow-up question, or the rendered YAML with its validation result
    """
    if request.conversation_id and request.answer:
        logger.info(f"Answer for conversation {request.conversation_id}: {request.answer[:200]}")
    elif request.description:
        logger.info(f"New description: {request.description[:200]}")

    try:
        return workflow.handle(request)

    except ConversationNotFoundError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidRequestError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error handling natural-to-yaml request: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/conversations/{conversation_id}", response_model=Conversation)
def get_conversation(conversation_id: str, store: ConversationStore = Depends(get_store)):
    """Return the collected parameters and question history of a conversation."""
    conversation = store.get(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")
    return conversation


@router.delete("/conversations/{conversation_id}")
def delete_conversation(conversation_id: str, store: ConversationStore = Depends(get_store)):
    """Discard a conversation."""
    if not store.delete(conversation_id):
        raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")
    return {"success": True, "conversation_id": conversation_id}
