"""Entity model, naming and type mapping policies."""

from .model import (
    TypeCategory,
    TypeDescriptor,
    ClassRef,
    Constraint,
    NotNull,
    Size,
    PrimaryKeyData,
    ForeignKeyData,
    InverseForeignKeyData,
    Property,
    EntityType,
)
from .naming import NamingStrategy, DefaultNamingStrategy
from .typemap import JdbcType, TypeMapper, DefaultTypeMapper
from .builder import EntityModelBuilder

__all__ = [
    # Model
    "TypeCategory",
    "TypeDescriptor",
    "ClassRef",
    "Constraint",
    "NotNull",
    "Size",
    "PrimaryKeyData",
    "ForeignKeyData",
    "InverseForeignKeyData",
    "Property",
    "EntityType",
    # Policies
    "NamingStrategy",
    "DefaultNamingStrategy",
    "JdbcType",
    "TypeMapper",
    "DefaultTypeMapper",
    "EntityModelBuilder",
]
