"""Shared utilities for parameter normalization and merging."""

from .normalizers import (
    canonical_duration,
    duration_to_hours,
    normalize_duration,
    normalize_gpu_model,
    normalize_region,
    normalize_size,
    normalize_size_unit,
)
from .param_merge import DEFAULT_PARAMETERS, apply_defaults, is_gpu_image, merge_params

__all__ = [
    "normalize_gpu_model",
    "normalize_region",
    "normalize_size",
    "normalize_size_unit",
    "normalize_duration",
    "canonical_duration",
    "duration_to_hours",
    "DEFAULT_PARAMETERS",
    "apply_defaults",
    "is_gpu_image",
    "merge_params",
]
