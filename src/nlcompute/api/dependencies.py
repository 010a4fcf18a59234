"""Shared dependencies for API routes.

The workflow and its collaborators are built once by the app factory and
kept on ``app.state``; routes receive them through FastAPI's dependency
injection.
"""

from fastapi import Request

from ..configuration.service import ConfigurationService
from ..conversation.store import ConversationStore
from ..orchestration.workflow import DeploymentWorkflow


def get_workflow(request: Request) -> DeploymentWorkflow:
    """Get the application's workflow."""
    return request.app.state.workflow


def get_store(request: Request) -> ConversationStore:
    """Get the application's conversation store."""
    return request.app.state.workflow.store


def get_configuration_service(request: Request) -> ConfigurationService:
    """Get the application's configuration service."""
    return request.app.state.workflow.configuration_service
