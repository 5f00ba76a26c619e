"""SQLAlchemy Inspector based metadata provider.

This module exposes a live database, reached through a SQLAlchemy engine or
connection, as a ``MetadataProvider``. Rows are produced lazily by generators,
so every listing is a closeable cursor.
"""

import re
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.types import TypeEngine
from sqlalchemy import types as sqltypes

from ..codegen.typemap import JdbcType
from ..core.logging import get_logger, register_secret_for_redaction
from .provider import COLUMN_NO_NULLS, COLUMN_NULLABLE, MetadataProvider, Row

logger = get_logger(__name__)

# Skipped when no schema pattern is given
SYSTEM_SCHEMAS = frozenset({"information_schema"})


def like_to_regex(pattern: str) -> "re.Pattern[str]":
    """Compile a SQL LIKE pattern (``%``, ``_``, backslash escapes)."""
    parts = []
    escaped = False
    for char in pattern:
        if escaped:
            parts.append(re.escape(char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    if escaped:
        parts.append(re.escape("\\"))
    return re.compile("".join(parts), re.DOTALL)


def matches(pattern: Optional[str], value: str) -> bool:
    """A ``None`` pattern matches everything."""
    if pattern is None:
        return True
    return like_to_regex(pattern).fullmatch(value) is not None


def jdbc_type_code(sql_type: TypeEngine) -> int:
    """Convert a reflected SQLAlchemy type to a JDBC type code."""
    if isinstance(sql_type, sqltypes.Boolean):
        return JdbcType.BOOLEAN
    elif isinstance(sql_type, sqltypes.SmallInteger):
        return JdbcType.SMALLINT
    elif isinstance(sql_type, sqltypes.BigInteger):
        return JdbcType.BIGINT
    elif isinstance(sql_type, sqltypes.Integer):
        return JdbcType.INTEGER
    elif isinstance(sql_type, sqltypes.REAL):
        return JdbcType.REAL
    elif isinstance(sql_type, sqltypes.Float):
        return JdbcType.DOUBLE
    elif isinstance(sql_type, sqltypes.NUMERIC):
        return JdbcType.NUMERIC
    elif isinstance(sql_type, sqltypes.Numeric):
        return JdbcType.DECIMAL
    elif isinstance(sql_type, sqltypes.DateTime):
        if getattr(sql_type, "timezone", False):
            return JdbcType.TIMESTAMP_WITH_TIMEZONE
        return JdbcType.TIMESTAMP
    elif isinstance(sql_type, sqltypes.Date):
        return JdbcType.DATE
    elif isinstance(sql_type, sqltypes.Time):
        return JdbcType.TIME
    elif isinstance(sql_type, sqltypes.Enum):
        return JdbcType.VARCHAR
    elif isinstance(sql_type, sqltypes.Text):
        return JdbcType.LONGVARCHAR
    elif isinstance(sql_type, sqltypes.NCHAR):
        return JdbcType.NCHAR
    elif isinstance(sql_type, (sqltypes.NVARCHAR, sqltypes.Unicode)):
        return JdbcType.NVARCHAR
    elif isinstance(sql_type, sqltypes.CHAR):
        return JdbcType.CHAR
    elif isinstance(sql_type, sqltypes.String):
        return JdbcType.VARCHAR
    elif isinstance(sql_type, sqltypes.BINARY):
        return JdbcType.BINARY
    elif isinstance(sql_type, sqltypes.VARBINARY):
        return JdbcType.VARBINARY
    elif isinstance(sql_type, sqltypes.LargeBinary):
        return JdbcType.LONGVARBINARY
    elif isinstance(sql_type, sqltypes.ARRAY):
        return JdbcType.ARRAY
    else:
        return JdbcType.OTHER


def column_size(sql_type: TypeEngine) -> int:
    """Length of character types, precision of numeric types, else 0."""
    if isinstance(sql_type, sqltypes.String):
        return sql_type.length or 0
    if isinstance(sql_type, sqltypes.Numeric):
        return getattr(sql_type, "precision", None) or 0
    return 0


class InspectorMetadataProvider(MetadataProvider):
    """Metadata provider reflecting a database through SQLAlchemy.

    Schema and table patterns are SQL LIKE patterns evaluated client-side. A
    ``None`` schema pattern matches every schema except ``information_schema``.
    """

    def __init__(self, bind: Union[Engine, Connection]):
        """Initialize the provider.

        Args:
            bind: Engine or connection to reflect
        """
        self.bind = bind
        self.inspector = inspect(bind)
        engine = bind if isinstance(bind, Engine) else bind.engine
        register_secret_for_redaction(engine.url.password)
        logger.debug("Reflecting metadata of %s", engine.url)

    def list_tables(self, schema_pattern: Optional[str], table_name_pattern: Optional[str]) -> Iterator[Row]:
        for schema in self._schemas(schema_pattern):
            for name in self.inspector.get_table_names(schema=schema):
                if matches(table_name_pattern, name):
                    yield {"TABLE_CAT": None, "TABLE_SCHEM": schema, "TABLE_NAME": name}

    def list_columns(self, schema_pattern: Optional[str], table_name: str) -> Iterator[Row]:
        for position, column in enumerate(self.inspector.get_columns(table_name, schema=schema_pattern), 1):
            sql_type = column["type"]
            yield {
                "TABLE_SCHEM": schema_pattern,
                "TABLE_NAME": table_name,
                "COLUMN_NAME": column["name"],
                "DATA_TYPE": jdbc_type_code(sql_type),
                "TYPE_NAME": type(sql_type).__name__,
                "COLUMN_SIZE": column_size(sql_type),
                "NULLABLE": COLUMN_NULLABLE if column.get("nullable", True) else COLUMN_NO_NULLS,
                "ORDINAL_POSITION": position,
            }

    def list_primary_keys(self, schema: Optional[str], table_name: str) -> Iterator[Row]:
        constraint = self.inspector.get_pk_constraint(table_name, schema=schema) or {}
        for seq, column in enumerate(constraint.get("constrained_columns") or [], 1):
            yield {
                "TABLE_SCHEM": schema,
                "TABLE_NAME": table_name,
                "COLUMN_NAME": column,
                "KEY_SEQ": seq,
                "PK_NAME": constraint.get("name"),
            }

    def list_imported_keys(self, schema: Optional[str], table_name: str) -> Iterator[Row]:
        for name, fk in self._named_foreign_keys(schema, table_name):
            yield from self._key_rows(name, schema, table_name, fk)

    def list_exported_keys(self, schema: Optional[str], table_name: str) -> Iterator[Row]:
        for other in self.inspector.get_table_names(schema=schema):
            for name, fk in self._named_foreign_keys(schema, other):
                if fk["referred_table"] != table_name:
                    continue
                if fk.get("referred_schema") not in (None, schema):
                    continue
                yield from self._key_rows(name, schema, other, fk)

    def _schemas(self, schema_pattern: Optional[str]) -> List[Optional[str]]:
        if schema_pattern is None:
            return [s for s in self.inspector.get_schema_names() if s.lower() not in SYSTEM_SCHEMAS]
        return [s for s in self.inspector.get_schema_names() if matches(schema_pattern, s)]

    def _named_foreign_keys(self, schema: Optional[str], table_name: str) -> List[Tuple[str, Dict[str, Any]]]:
        """Foreign keys of a table, with names generated for unnamed ones."""
        foreign_keys = self.inspector.get_foreign_keys(table_name, schema=schema)
        referred = [fk["referred_table"] for fk in foreign_keys]
        named = []
        for index, fk in enumerate(foreign_keys, 1):
            name = fk.get("name")
            if not name:
                name = f"fk_{table_name}_{fk['referred_table']}"
                if referred.count(fk["referred_table"]) > 1:
                    name = f"{name}_{index}"
            named.append((name, fk))
        return named

    @staticmethod
    def _key_rows(name: str, schema: Optional[str], table_name: str, fk: Dict[str, Any]) -> Iterator[Row]:
        pairs = zip(fk["constrained_columns"], fk["referred_columns"])
        for seq, (foreign_column, parent_column) in enumerate(pairs, 1):
            yield {
                "FK_NAME": name,
                "KEY_SEQ": seq,
                "FKTABLE_SCHEM": schema,
                "FKTABLE_NAME": table_name,
                "FKCOLUMN_NAME": foreign_column,
                "PKTABLE_SCHEM": fk.get("referred_schema") or schema,
                "PKTABLE_NAME": fk["referred_table"],
                "PKCOLUMN_NAME": parent_column,
            }
