"""Document validation endpoint."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...configuration.service import ConfigurationService
from ..dependencies import get_configuration_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["configuration"])


class ValidateYamlRequest(BaseModel):
    """Request to validate a deployment document."""

    yaml: str = Field(..., description="Deployment document text")


class ValidateYamlResponse(BaseModel):
    """Structural validation result."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


@router.post("/validate-yaml", response_model=ValidateYamlResponse)
def validate_yaml(
    request: ValidateYamlRequest,
    configuration_service: ConfigurationService = Depends(get_configuration_service),
):
    """Validate a deployment document without changing it.

    Invalid documents are reported in the body, not as an HTTP error.
    """
    is_valid, errors = configuration_service.validate_yaml(request.yaml)
    return ValidateYamlResponse(valid=is_valid, errors=errors)
