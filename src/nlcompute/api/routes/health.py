"""Health check endpoint."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...orchestration.workflow import DeploymentWorkflow
from ..dependencies import get_workflow

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(workflow: DeploymentWorkflow = Depends(get_workflow)):
    """Health check endpoint.

    Reports whether the Ollama server answers when LLM enhancement is enabled.
    """
    status = {"status": "healthy", "service": "nlcompute", "version": __version__}

    enhancer = workflow.extraction_service.enhancer
    if enhancer is not None:
        status["llm_available"] = enhancer.llm_client.is_available()

    return status
