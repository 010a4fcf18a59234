"""Configuration Service module for YAML generation and validation."""

from .generator import DocumentGenerator, DocumentUpdateError
from .service import ConfigurationService
from .validator import YAMLValidator

__all__ = ["ConfigurationService", "DocumentGenerator", "DocumentUpdateError", "YAMLValidator"]
