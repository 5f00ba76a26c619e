"""Mapping from JDBC type codes to Python runtime types."""

import datetime
import numbers
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

from ..core.logging import get_logger
from .model import TypeCategory, TypeDescriptor

logger = get_logger(__name__)


class JdbcType(IntEnum):
    """Type codes as defined by ``java.sql.Types``."""
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014


DEFAULT_TYPES: Dict[int, type] = {
    JdbcType.BIT: bool,
    JdbcType.BOOLEAN: bool,
    JdbcType.TINYINT: int,
    JdbcType.SMALLINT: int,
    JdbcType.INTEGER: int,
    JdbcType.BIGINT: int,
    JdbcType.DECIMAL: Decimal,
    JdbcType.NUMERIC: Decimal,
    JdbcType.FLOAT: float,
    JdbcType.REAL: float,
    JdbcType.DOUBLE: float,
    JdbcType.CHAR: str,
    JdbcType.VARCHAR: str,
    JdbcType.LONGVARCHAR: str,
    JdbcType.NCHAR: str,
    JdbcType.NVARCHAR: str,
    JdbcType.LONGNVARCHAR: str,
    JdbcType.CLOB: str,
    JdbcType.NCLOB: str,
    JdbcType.SQLXML: str,
    JdbcType.ROWID: str,
    JdbcType.DATE: datetime.date,
    JdbcType.TIME: datetime.time,
    JdbcType.TIME_WITH_TIMEZONE: datetime.time,
    JdbcType.TIMESTAMP: datetime.datetime,
    JdbcType.TIMESTAMP_WITH_TIMEZONE: datetime.datetime,
    JdbcType.BINARY: bytes,
    JdbcType.VARBINARY: bytes,
    JdbcType.LONGVARBINARY: bytes,
    JdbcType.BLOB: bytes,
}

DEFAULT_CATEGORIES: Dict[type, TypeCategory] = {
    str: TypeCategory.STRING,
    datetime.date: TypeCategory.DATE,
    datetime.datetime: TypeCategory.DATETIME,
    datetime.time: TypeCategory.TIME,
}


class TypeMapper(ABC):
    """Maps a vendor type code plus table/column context to a type descriptor."""

    @abstractmethod
    def resolve(self, type_code: int, table_name: str, column_name: str) -> TypeDescriptor:
        """Resolve the runtime type and category of a column.

        Args:
            type_code: JDBC type code reported by the catalog
            table_name: Name of the owning table
            column_name: Name of the column

        Returns:
            The type descriptor; unknown codes resolve to ``object``
        """
        pass


class DefaultTypeMapper(TypeMapper):
    """Built-in JDBC type table with per-type and per-column overrides."""

    def __init__(self) -> None:
        self._types: Dict[int, type] = dict(DEFAULT_TYPES)
        self._columns: Dict[Tuple[str, str], type] = {}
        self._categories: Dict[type, TypeCategory] = dict(DEFAULT_CATEGORIES)

    def register_type(self, type_code: int, runtime_type: type) -> "DefaultTypeMapper":
        """Override the runtime type of a type code."""
        self._types[int(type_code)] = runtime_type
        return self

    def register_column(self, table_name: str, column_name: str, runtime_type: type) -> "DefaultTypeMapper":
        """Override the runtime type of one column, regardless of its type code."""
        self._columns[(table_name, column_name)] = runtime_type
        return self

    def register_category(self, runtime_type: type, category: TypeCategory) -> "DefaultTypeMapper":
        """Assign the category of a runtime type not covered by the built-in rules."""
        self._categories[runtime_type] = category
        return self

    def resolve(self, type_code: int, table_name: str, column_name: str) -> TypeDescriptor:
        runtime_type = self._columns.get((table_name, column_name))
        if runtime_type is None:
            runtime_type = self._types.get(type_code)
        if runtime_type is None:
            logger.debug(
                "Unknown type code %s for %s.%s, using object", type_code, table_name, column_name
            )
            runtime_type = object
        return TypeDescriptor(self.get_category(runtime_type), runtime_type)

    def get_category(self, runtime_type: type) -> TypeCategory:
        """Classify a runtime type.

        Enumerations are always ENUM and numbers always NUMERIC; ``bool`` is
        BOOLEAN even though it is an ``int`` subclass.
        """
        if issubclass(runtime_type, Enum):
            return TypeCategory.ENUM
        if issubclass(runtime_type, bool):
            return TypeCategory.BOOLEAN
        if issubclass(runtime_type, numbers.Number):
            return TypeCategory.NUMERIC
        category: Optional[TypeCategory] = self._categories.get(runtime_type)
        if category is not None:
            return category
        return TypeCategory.DEFAULT
