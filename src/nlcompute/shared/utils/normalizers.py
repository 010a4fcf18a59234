"""Normalization of free-text hardware, region and duration values.

Maps the many ways users (and language models) spell GPU models, regions,
size units and durations onto the canonical identifiers used in documents.
"""

import logging
import re

from ..schemas.parameters import DEFAULT_GPU_MODEL, DEFAULT_REGION, GPU_MODELS

logger = logging.getLogger(__name__)

# Most specific patterns first; generic vendor words fall through to the default
GPU_MODEL_PATTERNS = [
    (re.compile(r"rtx\s*-?\s*4090", re.IGNORECASE), "rtx4090"),
    (re.compile(r"rtx\s*-?\s*6000\s*-?\s*ada", re.IGNORECASE), "rtx6000-ada"),
    (re.compile(r"a100", re.IGNORECASE), "a100"),
    (re.compile(r"h100", re.IGNORECASE), "h100"),
    (re.compile(r"\bt4\b", re.IGNORECASE), "t4"),
    (re.compile(r"v100", re.IGNORECASE), "v100"),
]

# Region keywords that map to a canonical region. Anything else that the
# extractor matches (us-east, eu-west, eastcoast, ...) collapses to DEFAULT_REGION.
REGION_ALIASES = {
    "westcoast": "westcoast",
    "us-west": "westcoast",
}

# Hours per duration unit
DURATION_UNIT_HOURS = {
    "h": 1,
    "d": 24,
    "mon": 24 * 30,
}

DURATION_REGEX = re.compile(r"^(\d+)([a-z]+)$", re.IGNORECASE)
SIZE_REGEX = re.compile(r"^(\d+)\s*([a-z]*)$", re.IGNORECASE)
SPOKEN_DURATION_REGEX = re.compile(
    r"^(\d+)\s*(hours?|hrs?|h|days?|d|weeks?|w|months?|mon)$", re.IGNORECASE
)


def normalize_gpu_model(raw: str) -> str:
    """
    Normalize a GPU keyword or model name to a canonical model identifier.

    - Case-insensitive matching
    - Already-canonical names are returned unchanged
    - Unrecognized names default to rtx6000-ada

    Args:
        raw: GPU text from user input or LLM output (e.g. "RTX 4090", "nvidia")

    Returns:
        One of GPU_MODELS
    """
    value = raw.strip().lower()
    if value in GPU_MODELS:
        return value

    for pattern, model in GPU_MODEL_PATTERNS:
        if pattern.search(value):
            return model

    logger.debug(f"Unrecognized GPU '{raw}', defaulting to {DEFAULT_GPU_MODEL}")
    return DEFAULT_GPU_MODEL


def normalize_region(raw: str) -> str:
    """Normalize a region keyword. Unknown keywords fall back to DEFAULT_REGION."""
    region = REGION_ALIASES.get(raw.strip().lower())
    if region is None:
        logger.debug(f"Region '{raw}' not mapped, using {DEFAULT_REGION}")
        return DEFAULT_REGION
    return region


def normalize_size_unit(unit: str) -> str:
    """Convert GB/G/GiB, MB/M/MiB and TB/T/TiB to binary-prefix suffixes."""
    prefix = unit.strip().upper()[:1]
    return {"G": "Gi", "M": "Mi", "T": "Ti"}.get(prefix, unit)


def normalize_size(raw: str) -> str:
    """
    Normalize a size like "16GB", "16 gb" or "16" to "16Gi".

    A bare number is taken as gibibytes. Text that is not a number with an
    optional unit is returned unchanged.
    """
    match = SIZE_REGEX.match(raw.strip())
    if not match:
        logger.debug(f"Size '{raw}' not recognized, leaving as is")
        return raw
    unit = match.group(2) or "G"
    return f"{int(match.group(1))}{normalize_size_unit(unit)}"


def canonical_duration(value: int, unit: str) -> str:
    """Build a canonical duration from a count and a unit word (weeks become days)."""
    unit = unit.lower()
    if unit.startswith("h"):
        return f"{value}h"
    if unit.startswith("d"):
        return f"{value}d"
    if unit.startswith("w"):
        return f"{value * 7}d"
    return f"{value}mon"


def normalize_duration(raw: str) -> str:
    """Normalize "3 hours", "2 weeks" or "3H" to "3h", "14d", "3h". Unknown text is returned unchanged."""
    match = SPOKEN_DURATION_REGEX.match(raw.strip())
    if not match:
        logger.debug(f"Duration '{raw}' not recognized, leaving as is")
        return raw
    return canonical_duration(int(match.group(1)), match.group(2))


def duration_to_hours(duration: str) -> int | None:
    """
    Convert a canonical duration string to hours.

    Args:
        duration: Duration like "3h", "2d" or "1mon"

    Returns:
        Number of hours, or None if the string is not a known duration
    """
    match = DURATION_REGEX.match(duration.strip())
    if not match:
        return None

    hours_per_unit = DURATION_UNIT_HOURS.get(match.group(2).lower())
    if hours_per_unit is None:
        return None

    return int(match.group(1)) * hours_per_unit
