"""Query type serializer.

A query type is a class holding a SQLAlchemy Core ``Table`` as ``__table__``
and one attribute per property bound to its column. Key metadata is rendered
as column-name tuples, either as flat attributes or grouped in nested
``PrimaryKeys``, ``ForeignKeys`` and ``InverseForeignKeys`` classes.
"""

import datetime
from decimal import Decimal
from typing import Dict, List, Tuple

from ..codegen.model import EntityType, Property, TypeCategory
from ..codegen.naming import NamingStrategy, unique_name
from .base import Serializer, SerializerConfig
from .writer import CodeWriter, ImportSet, tuple_literal


# Exact runtime type -> SQLAlchemy type name
SQLALCHEMY_TYPES: Dict[type, str] = {
    bool: "Boolean",
    int: "Integer",
    float: "Float",
    Decimal: "Numeric",
    str: "String",
    bytes: "LargeBinary",
    datetime.datetime: "DateTime",
    datetime.date: "Date",
    datetime.time: "Time",
}

# Fallback by category for runtime types registered by the user
CATEGORY_TYPES: Dict[TypeCategory, str] = {
    TypeCategory.BOOLEAN: "Boolean",
    TypeCategory.NUMERIC: "Numeric",
    TypeCategory.STRING: "String",
    TypeCategory.DATETIME: "DateTime",
    TypeCategory.DATE: "Date",
    TypeCategory.TIME: "Time",
}


def column_type(prop: Property, imports: ImportSet) -> str:
    """SQLAlchemy type expression of a property's column."""
    runtime_type = prop.type.runtime_type
    if prop.type.category == TypeCategory.ENUM:
        imports.add("sqlalchemy", "Enum")
        return f"Enum({imports.add_type(runtime_type)})"

    type_name = SQLALCHEMY_TYPES.get(runtime_type) or CATEGORY_TYPES.get(prop.type.category)
    if type_name is None:
        imports.add("sqlalchemy.types", "NullType")
        return "NullType"

    imports.add("sqlalchemy", type_name)
    size = prop.size
    if type_name == "String" and size is not None:
        return f"String({size.max})"
    return type_name


class QueryTypeSerializer(Serializer):
    """Default serializer producing query metamodel classes."""

    def __init__(self, naming_strategy: NamingStrategy, inner_classes_for_keys: bool = False):
        """Initialize the serializer.

        Args:
            naming_strategy: Policy naming the key attributes
            inner_classes_for_keys: Group key metadata in nested classes
        """
        self.naming_strategy = naming_strategy
        self.inner_classes_for_keys = inner_classes_for_keys

    def serialize(self, model: EntityType, config: SerializerConfig, writer: CodeWriter) -> None:
        imports = ImportSet()
        imports.add("sqlalchemy", "Column").add("sqlalchemy", "MetaData").add("sqlalchemy", "Table")

        table_args = [repr(model.table_name), "metadata"]
        column_annotations = []
        for prop in model.properties:
            args = [repr(prop.column_name), column_type(prop, imports)]
            if prop.is_not_null:
                args.append("nullable=False")
            table_args.append(f"Column({', '.join(args)})")
            column_annotations.append(f"Column[{imports.add_type(prop.type.runtime_type)}]")

        for pk in model.primary_keys:
            imports.add("sqlalchemy", "PrimaryKeyConstraint")
            columns = ", ".join(repr(c) for c in pk.columns)
            table_args.append(f"PrimaryKeyConstraint({columns}, name={pk.name!r})")

        for fk in model.foreign_keys:
            imports.add("sqlalchemy", "ForeignKeyConstraint")
            parent = f"{fk.schema}.{fk.table}" if fk.schema else fk.table
            local = ", ".join(repr(c) for c in fk.foreign_columns)
            remote = ", ".join(repr(f"{parent}.{c}") for c in fk.parent_columns)
            table_args.append(f"ForeignKeyConstraint([{local}], [{remote}], name={fk.name!r})")

        if model.schema_name:
            table_args.append(f"schema={model.schema_name!r}")

        key_groups = self._key_groups(model)
        if key_groups:
            imports.add("typing", "Tuple")

        qualified = f"{model.schema_name}.{model.table_name}" if model.schema_name else model.table_name
        writer.module_header(
            SerializerConfig.HEADER if config.generated_header else None,
            f"Query type for table {qualified}." if config.docstrings else None,
        )
        writer.imports(imports)
        writer.nl()
        writer.field("metadata", "MetaData", "MetaData()")
        writer.nl()
        writer.nl()

        writer.begin_class(model.query_simple_name)
        if config.docstrings:
            writer.docstring(f"Query type for table ``{qualified}``.")
            writer.nl()

        table_value = "Table(\n" + "".join(f"    {arg},\n" for arg in table_args) + ")"
        writer.field("__table__", "Table", table_value)

        if model.properties:
            writer.nl()
        for prop, annotation in zip(model.properties, column_annotations):
            writer.field(prop.name, annotation, f"__table__.c[{prop.column_name!r}]")

        for class_name, keys in key_groups:
            writer.nl()
            if self.inner_classes_for_keys:
                writer.begin_class(class_name)
            for name, columns in keys:
                writer.field(name, "Tuple[str, ...]", tuple_literal(columns))
            if self.inner_classes_for_keys:
                writer.end_class()

        writer.end_class()

    def _key_groups(self, model: EntityType) -> List[Tuple[str, List[Tuple[str, List[str]]]]]:
        """Key attributes grouped by kind, empty kinds omitted.

        Attribute names are unique within the namespace they land in: the
        query class itself, or each nested class with inner classes enabled.
        """
        naming = self.naming_strategy
        groups = [
            ("PrimaryKeys", [
                (naming.get_property_name_for_primary_key(pk.name, model), pk.columns)
                for pk in model.primary_keys
            ]),
            ("ForeignKeys", [
                (naming.get_property_name_for_foreign_key(fk.name, model), fk.foreign_columns)
                for fk in model.foreign_keys
            ]),
            ("InverseForeignKeys", [
                (naming.get_property_name_for_inverse_foreign_key(ifk.name, model), ifk.parent_columns)
                for ifk in model.inverse_foreign_keys
            ]),
        ]

        taken = set(model.property_names)
        result = []
        for class_name, keys in groups:
            if not keys:
                continue
            if self.inner_classes_for_keys:
                taken = set()
            unique_keys = []
            for name, columns in keys:
                name = unique_name(name, taken)
                taken.add(name)
                unique_keys.append((name, columns))
            result.append((class_name, unique_keys))
        return result
