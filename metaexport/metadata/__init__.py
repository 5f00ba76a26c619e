"""Schema metadata sources for the exporter."""

from .provider import (
    MetadataProvider,
    COLUMN_NO_NULLS,
    COLUMN_NULLABLE,
    COLUMN_NULLABLE_UNKNOWN,
)
from .reader import SchemaReader, TableRef, ColumnRow
from .inspector import InspectorMetadataProvider

__all__ = [
    "MetadataProvider",
    "COLUMN_NO_NULLS",
    "COLUMN_NULLABLE",
    "COLUMN_NULLABLE_UNKNOWN",
    "SchemaReader",
    "TableRef",
    "ColumnRow",
    "InspectorMetadataProvider",
]
