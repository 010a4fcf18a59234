"""Workflow orchestration for natural-language-to-YAML requests."""

from .workflow import ConversationNotFoundError, DeploymentWorkflow, InvalidRequestError

__all__ = ["DeploymentWorkflow", "ConversationNotFoundError", "InvalidRequestError"]
