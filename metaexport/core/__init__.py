"""Core metaexport components.

This module provides the ambient building blocks shared by the exporter:
- Error handling and exceptions
- Configuration management
- Logging setup
"""

from .error import (
    MetaExportError,
    ResourceAcquisitionError,
    MetadataQueryError,
    SerializationError,
    ModelDefinitionError,
    ExportError,
    ConfigError,
)
from .logging import init_logging, get_logger, register_secret_for_redaction
from .config import ExporterConfig

__all__ = [
    # Error handling
    "MetaExportError",
    "ResourceAcquisitionError",
    "MetadataQueryError",
    "SerializationError",
    "ModelDefinitionError",
    "ExportError",
    "ConfigError",
    # Logging
    "init_logging",
    "get_logger",
    "register_secret_for_redaction",
    # Configuration
    "ExporterConfig",
]
