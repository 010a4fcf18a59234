"""Pattern-based parameter extraction from natural language descriptions."""

import logging
import re

from ..shared.schemas import JUPYTER_IMAGE, GPUSpec, ParameterSet, PortMapping
from ..shared.utils.normalizers import (
    canonical_duration,
    duration_to_hours,
    normalize_gpu_model,
    normalize_region,
    normalize_size_unit,
)

logger = logging.getLogger(__name__)

# Price per hour in the pricing token
DEFAULT_RATE_PER_HOUR = 3
DEFAULT_DURATION_HOURS = 2

CPU_REGEX = re.compile(r"\b(\d+)\s*-?\s*(?:cores?|cpus?|processors?)\b", re.IGNORECASE)
MEMORY_REGEX = re.compile(
    r"\b(\d+)\s*(GB|GiB|G|MB|MiB|M)\s*(?:of\s+)?(?:RAM|memory)\b", re.IGNORECASE
)
STORAGE_REGEX = re.compile(
    r"\b(\d+)\s*(GB|GiB|G|TB|TiB|T)\s*(?:of\s+)?(?:storage|disk|space)\b", re.IGNORECASE
)
GPU_REGEX = re.compile(
    r"\b(rtx\s*\d{4}(?:\s*-?\s*ada)?|nvidia|rtx|gtx|a100|h100|t4|v100)\b", re.IGNORECASE
)
GENERIC_GPU_KEYWORDS = {"nvidia", "rtx", "gtx"}
GPU_COUNT_REGEX = re.compile(r"\b(\d+)\s*gpus?\b", re.IGNORECASE)
# "2 A100s", "4x h100"
GPU_MODEL_COUNT_REGEX = re.compile(
    r"\b(\d+)\s*x?\s*(?:nvidia\s+)?(?:rtx\s*\d{4}|a100|h100|t4|v100)", re.IGNORECASE
)
DURATION_REGEX = re.compile(r"\b(\d+)\s*(hours?|hrs?|days?|weeks?|months?)\b", re.IGNORECASE)
REGION_REGEX = re.compile(
    r"\b(us-east|us-west|eu-west|eu-central|ap-southeast|ap-northeast|westcoast|eastcoast)\b",
    re.IGNORECASE,
)
NOTEBOOK_REGEX = re.compile(r"jupyter|notebook", re.IGNORECASE)

JUPYTER_SERVICE_NAME = "py-cuda"
JUPYTER_ENV = {"JUPYTER_TOKEN": "test"}
JUPYTER_PORTS = (8888, 3000)


def _extract_size(regex: re.Pattern, text: str) -> str | None:
    match = regex.search(text)
    if not match:
        return None
    return f"{int(match.group(1))}{normalize_size_unit(match.group(2))}"


def _extract_gpu(text: str) -> GPUSpec | None:
    """Extract GPU model and count. A bare count never implies a GPU."""
    model_matches = list(GPU_REGEX.finditer(text))
    if not model_matches:
        return None

    keywords = [match.group(1).lower() for match in model_matches]
    # "nvidia rtx 4090": prefer the specific model over the vendor word
    specific = next((k for k in keywords if k not in GENERIC_GPU_KEYWORDS), None)
    model = normalize_gpu_model(specific or keywords[0])

    # Digits inside a model token ("RTX 4090 GPU") are never a count
    model_spans = [match.span() for match in model_matches]
    count_match = next(
        (
            match
            for regex in (GPU_COUNT_REGEX, GPU_MODEL_COUNT_REGEX)
            for match in regex.finditer(text)
            if not any(start <= match.start(1) < end for start, end in model_spans)
        ),
        None,
    )
    units = max(int(count_match.group(1)), 1) if count_match else 1

    return GPUSpec(units=units, model=model)


def _extract_duration(text: str) -> str | None:
    match = DURATION_REGEX.search(text)
    if not match:
        return None

    return canonical_duration(int(match.group(1)), match.group(2))


def calculate_amount(duration: str | None, rate_per_hour: int = DEFAULT_RATE_PER_HOUR) -> int:
    """
    Calculate the price for a duration.

    Args:
        duration: Canonical duration ("3h", "2d", "1mon") or None
        rate_per_hour: Price per hour in the pricing token

    Returns:
        Price for the whole duration; the 2 hour default when duration is
        missing or malformed
    """
    hours = duration_to_hours(duration) if duration else None
    if not hours:
        hours = DEFAULT_DURATION_HOURS
    return hours * rate_per_hour


def extract_parameters(text: str) -> ParameterSet:
    """
    Extract compute parameters from a natural language description.

    Each rule is optional; fields without a match stay unset. The price
    amount is always set (derived from the duration or its default).

    Args:
        text: Free-text description, e.g. "Jupyter with 8 cores and 16GB RAM for 3 hours"

    Returns:
        Partial ParameterSet
    """
    params = ParameterSet()

    cpu_match = CPU_REGEX.search(text)
    if cpu_match and int(cpu_match.group(1)) > 0:
        params.cpu = int(cpu_match.group(1))

    params.memory = _extract_size(MEMORY_REGEX, text)
    params.storage = _extract_size(STORAGE_REGEX, text)
    params.gpu = _extract_gpu(text)
    params.duration = _extract_duration(text)

    region_match = REGION_REGEX.search(text)
    if region_match:
        params.region = normalize_region(region_match.group(1))

    if NOTEBOOK_REGEX.search(text):
        params.image = JUPYTER_IMAGE
        params.env = dict(JUPYTER_ENV)
        params.ports = [
            PortMapping(port=port, published_port=port, global_routing=True)
            for port in JUPYTER_PORTS
        ]

    if params.image and "jupyter" in params.image:
        params.name = JUPYTER_SERVICE_NAME

    # Duration must be resolved before this point
    params.amount = calculate_amount(params.duration)

    logger.debug(f"Pattern extraction: {params.to_llm_dict()}")
    return params
