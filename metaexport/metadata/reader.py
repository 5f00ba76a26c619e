"""Typed access to catalog rows."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from ..codegen.model import ForeignKeyData, InverseForeignKeyData, PrimaryKeyData
from ..core.error import MetadataQueryError
from ..core.logging import get_logger
from .provider import COLUMN_NULLABLE_UNKNOWN, MetadataProvider, Row

logger = get_logger(__name__)

K = TypeVar("K")


@dataclass(frozen=True)
class TableRef:
    """A matched table."""
    schema: Optional[str]
    name: str


@dataclass(frozen=True)
class ColumnRow:
    """One column as reported by the catalog."""
    name: str
    type_code: int
    size: int
    nullable: int


@contextmanager
def scoped(cursor: Iterable[Row]) -> Iterator[Iterable[Row]]:
    """Close ``cursor`` on exit if it is closeable."""
    try:
        yield cursor
    finally:
        close = getattr(cursor, "close", None)
        if callable(close):
            close()


def _int(row: Row, key: str, default: int) -> int:
    value = row.get(key)
    if value is None:
        return default
    return int(value)


class SchemaReader:
    """Reads tables, columns and key sets from a metadata provider.

    Provider failures surface as ``MetadataQueryError`` with the original
    exception as cause.
    """

    def __init__(self, provider: MetadataProvider, schema_pattern: Optional[str] = None):
        self.provider = provider
        self.schema_pattern = schema_pattern

    def iter_tables(self, schema_pattern: Optional[str], table_name_pattern: Optional[str]) -> Iterator[TableRef]:
        """Yield matched tables lazily, in provider order.

        The table cursor stays open while the caller processes each table and
        is closed when the generator finishes or is closed.
        """
        try:
            cursor = self.provider.list_tables(schema_pattern, table_name_pattern)
        except Exception as e:
            raise MetadataQueryError("listing tables", e)

        with scoped(cursor):
            rows = iter(cursor)
            while True:
                try:
                    row = next(rows)
                    table = TableRef(row.get("TABLE_SCHEM"), row["TABLE_NAME"])
                except StopIteration:
                    return
                except Exception as e:
                    raise MetadataQueryError("listing tables", e)
                logger.debug("Matched table %s", table.name)
                yield table

    def list_columns(self, table: TableRef) -> List[ColumnRow]:
        """List the columns of ``table`` in catalog order."""
        def to_column(row: Row) -> ColumnRow:
            return ColumnRow(
                name=row["COLUMN_NAME"],
                type_code=_int(row, "DATA_TYPE", 0),
                size=_int(row, "COLUMN_SIZE", 0),
                nullable=_int(row, "NULLABLE", COLUMN_NULLABLE_UNKNOWN),
            )

        return self._read(
            f"listing columns of {table.name}",
            lambda: self.provider.list_columns(self._schema(table), table.name),
            to_column,
        )

    def primary_keys(self, table: TableRef) -> Dict[str, PrimaryKeyData]:
        """Primary keys of ``table`` keyed by constraint name."""
        rows = self._read(
            f"listing primary keys of {table.name}",
            lambda: self.provider.list_primary_keys(self._schema(table), table.name),
            dict,
        )
        keys: Dict[str, PrimaryKeyData] = {}
        for row in sorted(rows, key=lambda r: _int(r, "KEY_SEQ", 0)):
            name = row.get("PK_NAME") or f"pk_{table.name}"
            keys.setdefault(name, PrimaryKeyData(name)).add(row["COLUMN_NAME"])
        return keys

    def imported_keys(self, table: TableRef) -> Dict[str, ForeignKeyData]:
        """Foreign keys declared by ``table`` keyed by constraint name."""
        rows = self._read(
            f"listing imported keys of {table.name}",
            lambda: self.provider.list_imported_keys(self._schema(table), table.name),
            dict,
        )
        keys: Dict[str, ForeignKeyData] = {}
        for name, group in self._group_keys(rows, "PKTABLE_NAME", lambda parent: f"fk_{table.name}_{parent}"):
            data = ForeignKeyData(name, group[0]["PKTABLE_NAME"], group[0].get("PKTABLE_SCHEM"))
            for row in group:
                data.add(row["FKCOLUMN_NAME"], row["PKCOLUMN_NAME"])
            keys[name] = data
        return keys

    def exported_keys(self, table: TableRef) -> Dict[str, InverseForeignKeyData]:
        """Foreign keys of other tables referencing ``table`` keyed by constraint name."""
        rows = self._read(
            f"listing exported keys of {table.name}",
            lambda: self.provider.list_exported_keys(self._schema(table), table.name),
            dict,
        )
        keys: Dict[str, InverseForeignKeyData] = {}
        for name, group in self._group_keys(rows, "FKTABLE_NAME", lambda child: f"fk_{child}_{table.name}"):
            data = InverseForeignKeyData(name, group[0]["FKTABLE_NAME"], group[0].get("FKTABLE_SCHEM"))
            for row in group:
                data.add(row["PKCOLUMN_NAME"], row["FKCOLUMN_NAME"])
            keys[name] = data
        return keys

    def _schema(self, table: TableRef) -> Optional[str]:
        return table.schema if table.schema is not None else self.schema_pattern

    def _read(self, what: str, query: Callable[[], Iterable[Row]], convert: Callable[[Row], K]) -> List[K]:
        try:
            cursor = query()
            with scoped(cursor):
                return [convert(row) for row in cursor]
        except MetadataQueryError:
            raise
        except Exception as e:
            raise MetadataQueryError(what, e)

    @staticmethod
    def _group_keys(
        rows: List[Dict[str, Any]],
        related: str,
        generated_name: Callable[[str], str],
    ) -> List[Tuple[str, List[Dict[str, Any]]]]:
        """Foreign key rows grouped per constraint, in order of first appearance.

        Named rows are grouped by ``FK_NAME``. Unnamed rows belong to the same
        key until ``KEY_SEQ`` restarts or the related table changes; each such
        key gets ``generated_name(related table)``, suffixed with ``_<n>`` when
        several unnamed keys share that name.
        """
        groups: List[List[Any]] = []
        named: Dict[str, List[Any]] = {}
        current: Optional[List[Any]] = None
        last_seq = 0
        for row in rows:
            name = row.get("FK_NAME")
            if name:
                if name not in named:
                    named[name] = [name, []]
                    groups.append(named[name])
                named[name][1].append(row)
                continue

            seq = _int(row, "KEY_SEQ", 0)
            restarted = seq != 0 and seq <= last_seq
            if current is None or restarted or current[1][0][related] != row[related]:
                current = [None, []]
                groups.append(current)
            current[1].append(row)
            last_seq = seq

        unnamed = [generated_name(group[1][0][related]) for group in groups if group[0] is None]
        ordinals: Dict[str, int] = {}
        result = []
        for group in groups:
            name, members = group
            if name is None:
                name = generated_name(members[0][related])
                if unnamed.count(name) > 1:
                    ordinals[name] = ordinals.get(name, 0) + 1
                    name = f"{name}_{ordinals[name]}"
            result.append((name, sorted(members, key=lambda r: _int(r, "KEY_SEQ", 0))))
        return result
