"""Required-parameter checks for extracted parameter sets."""

from ..shared.schemas import ParameterSet
from ..shared.utils.param_merge import is_gpu_image

# Labels are shown to users verbatim; order is fixed so the same gaps
# always produce the same follow-up question.
REQUIRED_FIELDS = [
    ("cpu", "CPU cores"),
    ("memory", "memory (RAM)"),
    ("storage", "storage"),
    ("duration", "duration"),
]
GPU_MODEL_LABEL = "GPU model"


def find_missing_parameters(params: ParameterSet) -> list[str]:
    """
    List the required fields that are still unset.

    A GPU is only required when the image is a GPU workload (cuda, pytorch
    or tensorflow) and no GPU has been extracted.

    Args:
        params: Partial parameter set

    Returns:
        Human-readable labels of missing fields, in a fixed order
    """
    missing = [label for field_name, label in REQUIRED_FIELDS if not getattr(params, field_name)]

    if is_gpu_image(params.image) and params.gpu is None:
        missing.append(GPU_MODEL_LABEL)

    return missing
