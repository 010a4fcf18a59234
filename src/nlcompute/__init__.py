"""Natural-language to compute deployment YAML."""

__version__ = "0.1.0"
