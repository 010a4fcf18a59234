"""Workflow orchestration for the natural-language-to-YAML conversation."""

import logging

from ..configuration.service import ConfigurationService
from ..conversation.store import ConversationStore, build_context
from ..intent_extraction.requirements import find_missing_parameters
from ..intent_extraction.service import ParameterExtractionService
from ..shared.schemas import (
    CompletedResponse,
    Conversation,
    NaturalToYamlRequest,
    NaturalToYamlResponse,
    ParameterSet,
    PendingResponse,
)
from ..shared.utils.param_merge import apply_defaults, merge_params

logger = logging.getLogger(__name__)


class InvalidRequestError(ValueError):
    """Neither a description nor a conversation id with an answer was supplied."""


class ConversationNotFoundError(ValueError):
    """The conversation id is unknown (never created, deleted or evicted)."""

    def __init__(self, conversation_id: str):
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class DeploymentWorkflow:
    """Orchestrate extraction, clarification and document generation."""

    def __init__(
        self,
        store: ConversationStore | None = None,
        extraction_service: ParameterExtractionService | None = None,
        configuration_service: ConfigurationService | None = None,
    ):
        """
        Initialize workflow orchestrator.

        Args:
            store: Conversation store (creates an empty one if not provided)
            extraction_service: Parameter extraction service (pattern-only if not provided)
            configuration_service: Document generation and validation service
        """
        self.store = store if store is not None else ConversationStore()
        self.extraction_service = extraction_service or ParameterExtractionService()
        self.configuration_service = configuration_service or ConfigurationService()

    def handle(self, request: NaturalToYamlRequest) -> NaturalToYamlResponse:
        """
        Process one natural-to-YAML request.

        An answer to an existing conversation takes precedence over a new
        description.

        Args:
            request: Description, or conversation id plus answer

        Returns:
            PendingResponse with a follow-up question, or CompletedResponse with YAML

        Raises:
            ConversationNotFoundError: If the conversation id is unknown
            InvalidRequestError: If neither input form was supplied
        """
        self.store.evict_expired()

        if request.conversation_id and request.answer:
            return self.continue_conversation(
                request.conversation_id,
                request.answer,
                existing_yaml=request.existing_yaml,
                service_name=request.service_name,
            )

        if request.description:
            return self.start_conversation(
                request.description,
                existing_yaml=request.existing_yaml,
                service_name=request.service_name,
            )

        raise InvalidRequestError("Either description or conversation_id and answer must be provided")

    def start_conversation(
        self,
        description: str,
        existing_yaml: str | None = None,
        service_name: str | None = None,
    ) -> NaturalToYamlResponse:
        """
        Open a conversation from a first description.

        Args:
            description: Natural language description of the compute environment
            existing_yaml: Optional document to patch once parameters are complete
            service_name: Service to patch in a multi-service document

        Returns:
            PendingResponse or CompletedResponse
        """
        logger.info("Step 1: Extracting parameters from description")
        params, missing = self.extraction_service.process_description(description)

        conversation = self.store.create(description, params, missing)

        if missing:
            return self._ask_follow_up(conversation, missing, description)

        return self._complete(conversation, params, existing_yaml, service_name)

    def continue_conversation(
        self,
        conversation_id: str,
        answer: str,
        existing_yaml: str | None = None,
        service_name: str | None = None,
    ) -> NaturalToYamlResponse:
        """
        Apply the user's answer to an open conversation.

        The answer is appended to the original description and the whole
        text is extracted again; the result is merged over the parameters
        collected so far.

        Args:
            conversation_id: Conversation to continue
            answer: The user's answer to the last question
            existing_yaml: Optional document to patch once parameters are complete
            service_name: Service to patch in a multi-service document

        Returns:
            PendingResponse or CompletedResponse

        Raises:
            ConversationNotFoundError: If the conversation id is unknown
        """
        conversation = self.store.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)

        combined_description = f"{conversation.original_description} {answer}"
        context = build_context(conversation)

        logger.info(f"Step 1: Re-extracting parameters for conversation {conversation_id}")
        params, _ = self.extraction_service.process_description(combined_description, context)

        merged = merge_params(conversation.current_params, params)
        missing = find_missing_parameters(merged)

        self.store.update(
            conversation_id,
            conversation.pending_question or "",
            answer,
            merged,
            missing,
        )

        if missing:
            return self._ask_follow_up(conversation, missing, combined_description)

        return self._complete(conversation, merged, existing_yaml, service_name)

    def _ask_follow_up(
        self,
        conversation: Conversation,
        missing: list[str],
        description: str,
    ) -> PendingResponse:
        logger.info(f"Step 2: Asking for missing parameters: {missing}")
        question = self.extraction_service.generate_question(
            missing, description, build_context(conversation)
        )
        self.store.record_question(conversation.id, question)

        return PendingResponse(
            conversation_id=conversation.id,
            question=question,
            missing_params=missing,
        )

    def _complete(
        self,
        conversation: Conversation,
        params: ParameterSet,
        existing_yaml: str | None,
        service_name: str | None,
    ) -> CompletedResponse:
        # A patch only carries what the user asked for; a fresh document gets defaults
        if existing_yaml:
            logger.info("Step 2: Patching existing document")
            document_params = params
        else:
            logger.info("Step 2: Rendering new document")
            document_params = apply_defaults(params)

        yaml_content, is_valid, errors = self.configuration_service.generate_and_validate(
            document_params,
            existing_yaml=existing_yaml,
            service_name=service_name,
        )

        self.store.complete(conversation.id)
        logger.info(f"Conversation {conversation.id} complete (valid={is_valid})")

        return CompletedResponse(
            conversation_id=conversation.id,
            yaml=yaml_content,
            valid=is_valid,
            errors=errors,
        )
