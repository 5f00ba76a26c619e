"""Entity model definitions.

This module defines the in-memory model built from catalog metadata: one
``EntityType`` per table, one ``Property`` per column, and the key descriptors
attached to an entity as structural metadata.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from ..core.error import ModelDefinitionError


class TypeCategory(str, Enum):
    """Secondary classification of a runtime type."""
    DEFAULT = "DEFAULT"
    ENTITY = "ENTITY"
    STRING = "STRING"
    NUMERIC = "NUMERIC"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DATETIME = "DATETIME"
    TIME = "TIME"
    ENUM = "ENUM"


@dataclass(frozen=True)
class TypeDescriptor:
    """Runtime type of a property together with its category."""
    category: TypeCategory
    runtime_type: type

    @property
    def name(self) -> str:
        """Qualified name of the runtime type."""
        module = self.runtime_type.__module__
        if module == "builtins":
            return self.runtime_type.__qualname__
        return f"{module}.{self.runtime_type.__qualname__}"


@dataclass(frozen=True)
class ClassRef:
    """Identity of a generated class."""
    package_name: str
    simple_name: str

    @property
    def full_name(self) -> str:
        """Dotted name, without a leading dot for the empty package."""
        if self.package_name:
            return f"{self.package_name}.{self.simple_name}"
        return self.simple_name


@dataclass(frozen=True)
class Constraint:
    """Constraint annotation attached to a property."""
    pass


@dataclass(frozen=True)
class NotNull(Constraint):
    """The column disallows null."""
    pass


@dataclass(frozen=True)
class Size(Constraint):
    """Length bounds of a character column."""
    min: int = 0
    max: int = 0


@dataclass
class PrimaryKeyData:
    """Primary key constraint and its columns in key order."""
    name: str
    columns: List[str] = field(default_factory=list)

    def add(self, column: str) -> None:
        self.columns.append(column)


@dataclass
class ForeignKeyData:
    """Foreign key from this table's columns to a parent table."""
    name: str
    table: str
    schema: Optional[str] = None
    foreign_columns: List[str] = field(default_factory=list)
    parent_columns: List[str] = field(default_factory=list)

    def add(self, foreign_column: str, parent_column: str) -> None:
        self.foreign_columns.append(foreign_column)
        self.parent_columns.append(parent_column)


@dataclass
class InverseForeignKeyData:
    """Foreign key of another table that references this table."""
    name: str
    table: str
    schema: Optional[str] = None
    parent_columns: List[str] = field(default_factory=list)
    foreign_columns: List[str] = field(default_factory=list)

    def add(self, parent_column: str, foreign_column: str) -> None:
        self.parent_columns.append(parent_column)
        self.foreign_columns.append(foreign_column)


KeyData = Union[PrimaryKeyData, ForeignKeyData, InverseForeignKeyData]


@dataclass(eq=False)
class Property:
    """One generated field, corresponding to one column."""
    entity: "EntityType" = field(repr=False)
    name: str
    column_name: str
    type: TypeDescriptor
    constraints: List[Constraint] = field(default_factory=list)

    def add_constraint(self, constraint: Constraint) -> None:
        self.constraints.append(constraint)

    @property
    def is_not_null(self) -> bool:
        return any(isinstance(c, NotNull) for c in self.constraints)

    @property
    def size(self) -> Optional[Size]:
        for constraint in self.constraints:
            if isinstance(constraint, Size):
                return constraint
        return None


@dataclass(eq=False)
class EntityType:
    """One generated type, corresponding to one table.

    ``type`` is the wrapped class identity. When ``naming_override`` is set,
    the reported full, package and simple names come from it instead; this is
    how the query-type view of a dual-output entity keeps its own identity
    while wrapping the bean type.
    """
    type: ClassRef
    table_name: str
    schema_name: Optional[str] = None
    prefix: str = ""
    suffix: str = ""
    naming_override: Optional[ClassRef] = None
    properties: List[Property] = field(default_factory=list)
    data: Dict[Type[Any], Dict[str, Any]] = field(default_factory=dict)

    @property
    def _identity(self) -> ClassRef:
        return self.naming_override if self.naming_override is not None else self.type

    @property
    def full_name(self) -> str:
        return self._identity.full_name

    @property
    def package_name(self) -> str:
        return self._identity.package_name

    @property
    def simple_name(self) -> str:
        return self._identity.simple_name

    @property
    def query_simple_name(self) -> str:
        """Class name of the rendered query type."""
        return f"{self.prefix}{self.simple_name}{self.suffix}"

    @property
    def property_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.properties)

    def add_property(self, prop: Property) -> None:
        """Append a property, keeping property names unique.

        Raises:
            ModelDefinitionError: If a property with the same name exists
        """
        if prop.name in self.property_names:
            raise ModelDefinitionError(
                f"Duplicate property name '{prop.name}' in {self.full_name}"
            )
        self.properties.append(prop)

    def set_key_data(self, key_type: Type[Any], keys: Dict[str, Any]) -> None:
        """Store a non-empty key mapping; empty mappings are never stored."""
        if keys:
            self.data[key_type] = dict(keys)

    @property
    def primary_keys(self) -> List[PrimaryKeyData]:
        return list(self.data.get(PrimaryKeyData, {}).values())

    @property
    def foreign_keys(self) -> List[ForeignKeyData]:
        return list(self.data.get(ForeignKeyData, {}).values())

    @property
    def inverse_foreign_keys(self) -> List[InverseForeignKeyData]:
        return list(self.data.get(InverseForeignKeyData, {}).values())

    def bean_view(self, wrapped: ClassRef) -> "EntityType":
        """Return the bean view of this entity under the ``wrapped`` identity.

        The returned entity holds the same ``Property`` objects in the same
        order and carries no key data.
        """
        bean = EntityType(
            type=wrapped,
            table_name=self.table_name,
            schema_name=self.schema_name,
        )
        bean.properties = self.properties
        return bean
