"""Parameter extraction module."""

from .extractor import calculate_amount, extract_parameters
from .requirements import find_missing_parameters
from .service import ParameterExtractionService

__all__ = [
    "extract_parameters",
    "calculate_amount",
    "find_missing_parameters",
    "ParameterExtractionService",
]
