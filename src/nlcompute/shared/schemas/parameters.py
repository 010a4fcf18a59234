"""Parameter schemas for compute deployment requests."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, field_validator

# Pricing token used in every rendered document (never user supplied)
PRICING_TOKEN = "CST"

# Accelerator models the marketplace knows about
GPU_MODELS = ("rtx4090", "rtx6000-ada", "a100", "h100", "t4", "v100")
DEFAULT_GPU_MODEL = "rtx6000-ada"

# Canonical region identifier; every region keyword collapses to it
DEFAULT_REGION = "westcoast"

JUPYTER_IMAGE = "spheronnetwork/jupyter-notebook:pytorch-2.4.1-cuda-enabled"

GPUModel = Literal["rtx4090", "rtx6000-ada", "a100", "h100", "t4", "v100"]
PullPolicy = Literal["Always", "IfNotPresent", "Never"]
DeploymentMode = Literal["provider", "fizz"]


class PortMapping(BaseModel):
    """Single exposed container port."""

    model_config = ConfigDict(populate_by_name=True)

    port: PositiveInt = Field(..., description="Container port")
    published_port: PositiveInt | None = Field(
        None, alias="as", description="Published port (defaults to the container port)"
    )
    global_routing: bool = Field(True, alias="global", description="Route the port globally")


class GPUSpec(BaseModel):
    """GPU request. Both fields stay optional until defaults are applied."""

    units: PositiveInt | None = Field(None, description="Number of GPUs")
    model: GPUModel | None = Field(None, description="Accelerator model identifier")

    @field_validator("model", mode="before")
    @classmethod
    def _normalize_model(cls, value):
        # LLM replies often spell models like "RTX 4090" or "NVIDIA A100"
        if isinstance(value, str):
            from ..utils.normalizers import normalize_gpu_model

            return normalize_gpu_model(value)
        return value


class ParameterSet(BaseModel):
    """
    Extracted (possibly partial) compute deployment parameters.

    Every field is optional while the set is being collected. Field aliases
    are the keys used when the set is exchanged with the language model.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Service
    name: str | None = Field(None, description="Service and profile name")
    image: str | None = Field(None, description="Container image reference")
    pull_policy: PullPolicy | None = Field(None, alias="pullPolicy")
    ports: list[PortMapping] | None = Field(None, description="Exposed ports, in order")
    env: dict[str, str] | None = Field(None, description="Environment variables")

    # Compute
    cpu: PositiveInt | None = Field(None, description="CPU units")
    memory: str | None = Field(None, description="Memory size with unit suffix, e.g. 64Gi")
    storage: str | None = Field(None, description="Storage size with unit suffix, e.g. 500Gi")
    gpu: GPUSpec | None = None

    # Deployment
    duration: str | None = Field(None, description="Lease duration, e.g. 2h, 3d, 1mon")
    mode: DeploymentMode | None = None
    region: str | None = Field(None, description="Canonical region identifier")
    amount: PositiveInt | PositiveFloat | None = Field(
        None, description=f"Price in {PRICING_TOKEN} for the whole duration"
    )
    count: PositiveInt | None = Field(None, description="Replica count")

    # LLM replies use free-form spellings ("us-east-1", "16GB", "3 hours")
    @field_validator("region", mode="before")
    @classmethod
    def _normalize_region(cls, value):
        if isinstance(value, str):
            from ..utils.normalizers import normalize_region

            return normalize_region(value)
        return value

    @field_validator("memory", "storage", mode="before")
    @classmethod
    def _normalize_size(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            from ..utils.normalizers import normalize_size

            return normalize_size(value)
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _normalize_duration(cls, value):
        if isinstance(value, str):
            from ..utils.normalizers import normalize_duration

            return normalize_duration(value)
        return value

    def to_llm_dict(self) -> dict:
        """Serialize with wire aliases, leaving out unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
