"""metaexport: generate typed query models from relational database metadata.

This package reads schema metadata through a ``MetadataProvider``, builds an
entity model per table and renders it with pluggable serializers:
- Query types wrapping SQLAlchemy Core tables
- Optional dataclass beans alongside them
- ``.pyi`` stubs instead of modules
"""

from .core import (
    MetaExportError,
    ResourceAcquisitionError,
    MetadataQueryError,
    SerializationError,
    ModelDefinitionError,
    ExportError,
    ConfigError,
    ExporterConfig,
    init_logging,
    get_logger,
)
from .codegen import (
    ClassRef,
    EntityType,
    Property,
    TypeCategory,
    TypeDescriptor,
    NamingStrategy,
    DefaultNamingStrategy,
    TypeMapper,
    DefaultTypeMapper,
    JdbcType,
    EntityModelBuilder,
)
from .metadata import MetadataProvider, SchemaReader, InspectorMetadataProvider
from .serialization import Serializer, SerializerConfig, QueryTypeSerializer, BeanSerializer
from .exporter import MetaDataExporter

__version__ = "0.1.0"

__all__ = [
    # Errors
    "MetaExportError",
    "ResourceAcquisitionError",
    "MetadataQueryError",
    "SerializationError",
    "ModelDefinitionError",
    "ExportError",
    "ConfigError",
    # Configuration and logging
    "ExporterConfig",
    "init_logging",
    "get_logger",
    # Model
    "ClassRef",
    "EntityType",
    "Property",
    "TypeCategory",
    "TypeDescriptor",
    # Policies
    "NamingStrategy",
    "DefaultNamingStrategy",
    "TypeMapper",
    "DefaultTypeMapper",
    "JdbcType",
    "EntityModelBuilder",
    # Metadata
    "MetadataProvider",
    "SchemaReader",
    "InspectorMetadataProvider",
    # Serialization
    "Serializer",
    "SerializerConfig",
    "QueryTypeSerializer",
    "BeanSerializer",
    # Export
    "MetaDataExporter",
]
