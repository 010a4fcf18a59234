"""FastAPI application factory for the nlcompute API."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..configuration.service import ConfigurationService
from ..logging_config import setup_logging
from ..orchestration.workflow import DeploymentWorkflow
from ..settings import Settings
from .routes import configuration_router, conversation_router, health_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    workflow: DeploymentWorkflow | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Runtime settings (read from the environment if not provided)
        workflow: Prebuilt workflow; built from settings if not provided

    Returns:
        Configured application with the workflow on app.state
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="nlcompute API",
        description="Turn natural language compute requests into deployment YAML",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if workflow is None:
        configuration_service = ConfigurationService()
        workflow = DeploymentWorkflow(
            store=settings.build_store(),
            extraction_service=settings.build_extraction_service(),
            configuration_service=configuration_service,
        )

    app.state.settings = settings
    app.state.workflow = workflow

    app.include_router(health_router)
    app.include_router(conversation_router)
    app.include_router(configuration_router)

    logger.info(f"nlcompute API {__version__} created (llm_enabled={settings.llm_enabled})")
    return app


def _create_default_app() -> FastAPI:
    settings = Settings.from_env()
    # The CLI configures logging before importing this module
    if not logging.getLogger().handlers:
        setup_logging(log_file=settings.log_file, debug=settings.debug)
    return create_app(settings)


# Create the app instance for uvicorn
app = _create_default_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
