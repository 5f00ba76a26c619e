"""Catalog introspection capability consumed by the exporter."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional


Row = Mapping[str, Any]

# JDBC DatabaseMetaData nullability codes
COLUMN_NO_NULLS = 0
COLUMN_NULLABLE = 1
COLUMN_NULLABLE_UNKNOWN = 2


class MetadataProvider(ABC):
    """Abstract source of schema metadata rows.

    Rows are string-keyed mappings labelled like the result sets of JDBC
    ``DatabaseMetaData``. A returned iterable may be a cursor: if it has a
    ``close()`` method, the caller closes it once done, on every exit path.
    """

    @abstractmethod
    def list_tables(self, schema_pattern: Optional[str], table_name_pattern: Optional[str]) -> Iterable[Row]:
        """List matched tables.

        Returns:
            Rows with ``TABLE_SCHEM`` and ``TABLE_NAME``
        """
        pass

    @abstractmethod
    def list_columns(self, schema_pattern: Optional[str], table_name: str) -> Iterable[Row]:
        """List the columns of a table in ordinal order.

        Returns:
            Rows with ``COLUMN_NAME``, ``DATA_TYPE``, ``COLUMN_SIZE`` and ``NULLABLE``
        """
        pass

    @abstractmethod
    def list_primary_keys(self, schema: Optional[str], table_name: str) -> Iterable[Row]:
        """List primary key columns.

        Returns:
            Rows with ``PK_NAME``, ``COLUMN_NAME`` and ``KEY_SEQ``
        """
        pass

    @abstractmethod
    def list_imported_keys(self, schema: Optional[str], table_name: str) -> Iterable[Row]:
        """List the foreign keys declared by a table.

        Returns:
            Rows with ``FK_NAME``, ``FKCOLUMN_NAME``, ``PKTABLE_SCHEM``,
            ``PKTABLE_NAME``, ``PKCOLUMN_NAME`` and ``KEY_SEQ``
        """
        pass

    @abstractmethod
    def list_exported_keys(self, schema: Optional[str], table_name: str) -> Iterable[Row]:
        """List the foreign keys of other tables referencing a table.

        Returns:
            Rows with ``FK_NAME``, ``PKCOLUMN_NAME``, ``FKTABLE_SCHEM``,
            ``FKTABLE_NAME``, ``FKCOLUMN_NAME`` and ``KEY_SEQ``
        """
        pass
