"""Builds entity models from catalog rows."""

from typing import TYPE_CHECKING, Dict, Optional

from ..core.config import ExporterConfig
from ..metadata.provider import COLUMN_NO_NULLS
from .model import (
    ClassRef,
    EntityType,
    ForeignKeyData,
    InverseForeignKeyData,
    NotNull,
    PrimaryKeyData,
    Property,
    Size,
    TypeCategory,
)
from .naming import NamingStrategy
from .typemap import TypeMapper

if TYPE_CHECKING:
    from ..metadata.reader import ColumnRow


class EntityModelBuilder:
    """Assembles one ``EntityType`` per table.

    In dual-output mode (``bean_mode``) an entity wraps the bean type and
    reports the query-type identity through its naming override, so the
    same property list serves both generated types.
    """

    def __init__(
        self,
        config: ExporterConfig,
        naming_strategy: NamingStrategy,
        type_mapper: TypeMapper,
        bean_mode: bool = False,
    ):
        """Initialize the builder.

        Args:
            config: Exporter configuration (packages and affixes)
            naming_strategy: Identifier policy
            type_mapper: Column type policy
            bean_mode: Whether bean types are generated alongside query types
        """
        self.config = config
        self.naming_strategy = naming_strategy
        self.type_mapper = type_mapper
        self.bean_mode = bean_mode

    def create_entity(self, schema_name: Optional[str], table_name: str, class_name: str) -> EntityType:
        """Create the entity of one table.

        Args:
            schema_name: Schema of the table, if the catalog reports one
            table_name: Raw table name
            class_name: Query class name, or the unprefixed base name in bean mode

        Returns:
            A new entity without properties
        """
        config = self.config
        if not self.bean_mode:
            entity = EntityType(
                type=ClassRef(config.package_name, class_name),
                table_name=self.naming_strategy.normalize_table_name(table_name),
            )
        else:
            wrapped = ClassRef(
                config.effective_bean_package_name,
                f"{config.bean_prefix}{class_name}{config.bean_suffix}",
            )
            entity = EntityType(
                type=wrapped,
                table_name=self.naming_strategy.normalize_table_name(table_name),
                prefix=config.name_prefix,
                suffix=config.name_suffix,
                naming_override=ClassRef(config.package_name, class_name),
            )

        if schema_name is not None:
            entity.schema_name = schema_name
        return entity

    def add_column(self, entity: EntityType, table_name: str, column: "ColumnRow") -> Property:
        """Append the property of one column to ``entity``.

        Args:
            entity: Entity under construction
            table_name: Raw table name, used for per-column type overrides
            column: Column as reported by the catalog

        Returns:
            The appended property
        """
        type_descriptor = self.type_mapper.resolve(column.type_code, table_name, column.name)
        property_name = self.naming_strategy.get_property_name(
            column.name, self.config.name_prefix, self.config.name_suffix, entity
        )
        prop = Property(
            entity=entity,
            name=property_name,
            column_name=self.naming_strategy.normalize_column_name(column.name),
            type=type_descriptor,
        )
        if column.nullable == COLUMN_NO_NULLS:
            prop.add_constraint(NotNull())
        if column.size > 0 and type_descriptor.category == TypeCategory.STRING:
            prop.add_constraint(Size(0, column.size))

        entity.add_property(prop)
        return prop

    def attach_keys(
        self,
        entity: EntityType,
        primary_keys: Dict[str, PrimaryKeyData],
        foreign_keys: Dict[str, ForeignKeyData],
        inverse_foreign_keys: Dict[str, InverseForeignKeyData],
    ) -> None:
        """Attach the non-empty key sets of a table."""
        entity.set_key_data(PrimaryKeyData, primary_keys)
        entity.set_key_data(ForeignKeyData, foreign_keys)
        entity.set_key_data(InverseForeignKeyData, inverse_foreign_keys)
