"""Field-by-field merging of parameter sets.

Top-level fields are replaced when the newer set provides a value. The two
nested fields, ``gpu`` and ``env``, are merged key by key so that an answer
mentioning only a GPU count does not wipe a previously extracted GPU model.
"""

import logging

from ..schemas.parameters import (
    DEFAULT_GPU_MODEL,
    DEFAULT_REGION,
    JUPYTER_IMAGE,
    GPUSpec,
    ParameterSet,
    PortMapping,
)

logger = logging.getLogger(__name__)

# Keywords in an image reference that indicate a GPU workload
GPU_IMAGE_KEYWORDS = ("cuda", "pytorch", "tensorflow")

# Values filled in once a parameter set is complete. Kept separate from the
# renderer's own fallbacks: the completion amount matches the extractor's
# 2 hour default (6), the renderer falls back to 15 when no amount exists.
DEFAULT_PARAMETERS = ParameterSet(
    name="py-cuda",
    image=JUPYTER_IMAGE,
    pull_policy="IfNotPresent",
    ports=[
        PortMapping(port=8888, published_port=8888, global_routing=True),
        PortMapping(port=3000, published_port=3000, global_routing=True),
    ],
    env={"JUPYTER_TOKEN": "test"},
    cpu=16,
    memory="64Gi",
    storage="500Gi",
    gpu=GPUSpec(units=1, model=DEFAULT_GPU_MODEL),
    duration="2h",
    mode="provider",
    region=DEFAULT_REGION,
    amount=6,
    count=1,
)


def is_gpu_image(image: str | None) -> bool:
    """Return True if the image reference looks like a GPU workload."""
    if not image:
        return False
    lowered = image.lower()
    return any(keyword in lowered for keyword in GPU_IMAGE_KEYWORDS)


def merge_gpu(base: GPUSpec | None, update: GPUSpec | None) -> GPUSpec | None:
    """Merge GPU specs field by field, newer values winning."""
    if base is None:
        return update.model_copy() if update else None
    if update is None:
        return base.model_copy()

    return GPUSpec(
        units=update.units if update.units is not None else base.units,
        model=update.model if update.model is not None else base.model,
    )


def merge_env(base: dict[str, str] | None, update: dict[str, str] | None) -> dict[str, str] | None:
    """Merge environment mappings key by key, newer values winning."""
    if base is None and update is None:
        return None
    merged = dict(base or {})
    merged.update(update or {})
    return merged


def merge_params(base: ParameterSet, update: ParameterSet) -> ParameterSet:
    """
    Merge a newer extraction over an existing parameter set.

    Args:
        base: Parameters collected so far
        update: Parameters extracted from the latest turn

    Returns:
        New ParameterSet; neither input is modified
    """
    merged = {}
    for field_name in ParameterSet.model_fields:
        old_value = getattr(base, field_name)
        new_value = getattr(update, field_name)

        if field_name == "gpu":
            merged[field_name] = merge_gpu(old_value, new_value)
        elif field_name == "env":
            merged[field_name] = merge_env(old_value, new_value)
        else:
            merged[field_name] = new_value if new_value is not None else old_value

    return ParameterSet.model_validate(merged)


def apply_defaults(params: ParameterSet) -> ParameterSet:
    """
    Fill every unset field from DEFAULT_PARAMETERS.

    The GPU section is only filled in when the set already asks for a GPU or
    the resolved image is a GPU workload; a plain CPU image stays GPU-free.

    Args:
        params: Parameter set with no missing required fields

    Returns:
        Fully populated ParameterSet
    """
    completed = merge_params(DEFAULT_PARAMETERS, params)

    if params.gpu is None and not is_gpu_image(completed.image):
        completed.gpu = None

    logger.debug(f"Applied defaults: {completed.to_llm_dict()}")
    return completed
