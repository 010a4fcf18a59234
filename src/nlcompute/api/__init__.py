"""REST API for natural-language-to-YAML conversations."""

from .app import create_app

__all__ = ["create_app"]
