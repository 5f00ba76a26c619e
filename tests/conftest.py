"""Shared fixtures for metaexport tests."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from metaexport.codegen.typemap import JdbcType
from metaexport.core.config import ExporterConfig
from metaexport.metadata.provider import COLUMN_NO_NULLS, COLUMN_NULLABLE, MetadataProvider


class FakeCursor:
    """Iterable of rows that records whether it was closed.

    With ``error`` set, iteration raises it after ``fail_after`` rows.
    """

    def __init__(self, rows: List[Dict[str, Any]], error: Optional[Exception] = None, fail_after: int = 0):
        self.rows = rows
        self.error = error
        self.fail_after = fail_after
        self.closed = False

    def __iter__(self):
        for index, row in enumerate(self.rows):
            if self.error is not None and index == self.fail_after:
                raise self.error
            yield row
        if self.error is not None and self.fail_after >= len(self.rows):
            raise self.error

    def close(self):
        self.closed = True


class FakeMetadataProvider(MetadataProvider):
    """In-memory catalog returning ``FakeCursor`` listings."""

    def __init__(self, schema: Optional[str] = None):
        self.schema = schema
        self.tables: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        self.cursors: List[FakeCursor] = []
        self.calls: List[Tuple[str, Optional[str], Optional[str]]] = []
        self.failures: Dict[str, Exception] = {}
        self.fail_after: Dict[str, int] = {}

    def add_table(self, name, columns=(), primary_keys=(), imported_keys=(), exported_keys=()):
        self.tables[name] = {
            "columns": list(columns),
            "primary_keys": list(primary_keys),
            "imported_keys": list(imported_keys),
            "exported_keys": list(exported_keys),
        }
        return self

    def _cursor(self, operation, rows):
        cursor = FakeCursor(rows, self.failures.get(operation), self.fail_after.get(operation, 0))
        self.cursors.append(cursor)
        return cursor

    def list_tables(self, schema_pattern, table_name_pattern):
        self.calls.append(("list_tables", schema_pattern, table_name_pattern))
        rows = [
            {"TABLE_SCHEM": self.schema, "TABLE_NAME": name}
            for name in self.tables
            if table_name_pattern is None or name == table_name_pattern
        ]
        return self._cursor("list_tables", rows)

    def list_columns(self, schema_pattern, table_name):
        self.calls.append(("list_columns", schema_pattern, table_name))
        return self._cursor("list_columns", self.tables[table_name]["columns"])

    def list_primary_keys(self, schema, table_name):
        self.calls.append(("list_primary_keys", schema, table_name))
        return self._cursor("list_primary_keys", self.tables[table_name]["primary_keys"])

    def list_imported_keys(self, schema, table_name):
        self.calls.append(("list_imported_keys", schema, table_name))
        return self._cursor("list_imported_keys", self.tables[table_name]["imported_keys"])

    def list_exported_keys(self, schema, table_name):
        self.calls.append(("list_exported_keys", schema, table_name))
        return self._cursor("list_exported_keys", self.tables[table_name]["exported_keys"])


def column_row(name, data_type, size=None, nullable=COLUMN_NULLABLE):
    row = {"COLUMN_NAME": name, "DATA_TYPE": int(data_type), "NULLABLE": nullable}
    if size is not None:
        row["COLUMN_SIZE"] = size
    return row


def pk_row(column, seq=1, name=None):
    return {"COLUMN_NAME": column, "KEY_SEQ": seq, "PK_NAME": name}


def fk_row(name, column, parent_table, parent_column, seq=1, parent_schema=None):
    return {
        "FK_NAME": name,
        "KEY_SEQ": seq,
        "FKCOLUMN_NAME": column,
        "PKTABLE_SCHEM": parent_schema,
        "PKTABLE_NAME": parent_table,
        "PKCOLUMN_NAME": parent_column,
    }


def exported_row(name, column, child_table, child_column, seq=1, child_schema=None):
    return {
        "FK_NAME": name,
        "KEY_SEQ": seq,
        "PKCOLUMN_NAME": column,
        "FKTABLE_SCHEM": child_schema,
        "FKTABLE_NAME": child_table,
        "FKCOLUMN_NAME": child_column,
    }


def add_person_tables(provider: FakeMetadataProvider) -> FakeMetadataProvider:
    """``person`` and ``address`` with a foreign key from address to person."""
    provider.add_table(
        "person",
        columns=[
            column_row("id", JdbcType.INTEGER, 10, COLUMN_NO_NULLS),
            column_row("name", JdbcType.VARCHAR, 64),
            column_row("created", JdbcType.TIMESTAMP),
        ],
        primary_keys=[pk_row("id", 1, "pk_person")],
        exported_keys=[exported_row("fk_address_person", "id", "address", "person_id")],
    )
    provider.add_table(
        "address",
        columns=[
            column_row("id", JdbcType.INTEGER, 10, COLUMN_NO_NULLS),
            column_row("person_id", JdbcType.INTEGER, 10, COLUMN_NO_NULLS),
            column_row("street", JdbcType.VARCHAR, 128),
        ],
        primary_keys=[pk_row("id", 1, "pk_address")],
        imported_keys=[fk_row("fk_address_person", "person_id", "person", "id")],
    )
    return provider


@pytest.fixture
def provider():
    """Empty fake catalog."""
    return FakeMetadataProvider()


@pytest.fixture
def person_provider():
    """Fake catalog holding ``person`` and ``address``."""
    return add_person_tables(FakeMetadataProvider())


@pytest.fixture
def target(tmp_path):
    return tmp_path / "out"


@pytest.fixture
def config(target):
    return ExporterConfig(target_folder=target, package_name="query")
