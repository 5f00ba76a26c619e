"""Export coordinator.

``MetaDataExporter`` drives one export run: it matches tables through a
``MetadataProvider``, builds an entity per table and writes the generated
sources below the configured target folder.
"""

import io
import os
from contextlib import closing
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Set

from .codegen.builder import EntityModelBuilder
from .codegen.model import ClassRef, EntityType
from .codegen.naming import DefaultNamingStrategy, NamingStrategy
from .codegen.typemap import DefaultTypeMapper, TypeMapper
from .core.config import ExporterConfig
from .core.error import (
    ExportError,
    MetaExportError,
    ResourceAcquisitionError,
    SerializationError,
)
from .core.logging import get_logger
from .metadata.provider import MetadataProvider
from .metadata.reader import SchemaReader, TableRef
from .serialization.base import Serializer, SerializerConfig
from .serialization.query import QueryTypeSerializer
from .serialization.writer import writer_for

logger = get_logger(__name__)


class MetaDataExporter:
    """Generates query types, and optionally bean types, for matched tables.

    Without a bean serializer every table yields one query type in
    ``package_name``. With one, every table yields a bean type in the bean
    package plus a query type in ``package_name`` sharing the same property
    list.

    Example:
        ```python
        config = ExporterConfig(target_folder="generated", package_name="app.query")
        exporter = MetaDataExporter(config)
        exporter.export(InspectorMetadataProvider(engine))
        ```
    """

    def __init__(
        self,
        config: ExporterConfig,
        naming_strategy: Optional[NamingStrategy] = None,
        type_mapper: Optional[TypeMapper] = None,
        serializer: Optional[Serializer] = None,
        bean_serializer: Optional[Serializer] = None,
        serializer_config: SerializerConfig = SerializerConfig.DEFAULT,
    ):
        """Initialize the exporter.

        Args:
            config: Export settings
            naming_strategy: Identifier policy, ``DefaultNamingStrategy`` if omitted
            type_mapper: Column type policy, ``DefaultTypeMapper`` if omitted
            serializer: Query type serializer, ``QueryTypeSerializer`` if omitted
            bean_serializer: Bean serializer; enables dual-output mode
            serializer_config: Rendering options passed to the serializers
        """
        self.config = config
        self.naming_strategy = naming_strategy or DefaultNamingStrategy()
        self.type_mapper = type_mapper or DefaultTypeMapper()
        self.serializer = serializer
        self.bean_serializer = bean_serializer
        self.serializer_config = serializer_config

        self._classes: Set[Path] = set()
        self._entity_to_wrapped: Dict[str, ClassRef] = {}

    @property
    def classes(self) -> FrozenSet[Path]:
        """Paths written by the last export run."""
        return frozenset(self._classes)

    @property
    def wrapped_types(self) -> Dict[str, ClassRef]:
        """Bean type of each query entity of the last dual-mode run, by full name."""
        return dict(self._entity_to_wrapped)

    @property
    def extension(self) -> str:
        return ".pyi" if self.config.create_stubs else ".py"

    def export(self, provider: MetadataProvider) -> None:
        """Generate sources for every table the provider matches.

        Args:
            provider: Catalog introspection capability

        Raises:
            ResourceAcquisitionError: If the target folder or a file cannot be created
            MetadataQueryError: If the provider fails
            SerializationError: If rendering or writing a source fails
            ExportError: For any other failure, with the table name in the message
        """
        config = self.config
        self._classes = set()
        self._entity_to_wrapped = {}

        # The bean package must be settled before any serializer is built from config
        bean_package_name = config.effective_bean_package_name
        serializer = self.serializer
        if serializer is None:
            serializer = QueryTypeSerializer(self.naming_strategy, config.inner_classes_for_keys)

        target_folder = Path(config.target_folder)
        try:
            os.makedirs(target_folder, exist_ok=True)
        except OSError as e:
            raise ResourceAcquisitionError(f"folder {target_folder} could not be created", e)

        reader = SchemaReader(provider, config.schema_pattern)
        builder = EntityModelBuilder(
            config,
            self.naming_strategy,
            self.type_mapper,
            bean_mode=self.bean_serializer is not None,
        )

        logger.info(
            "Exporting tables matching schema=%s table=%s to %s",
            config.schema_pattern,
            config.table_name_pattern,
            target_folder,
        )

        count = 0
        with closing(reader.iter_tables(config.schema_pattern, config.table_name_pattern)) as tables:
            for table in tables:
                try:
                    self._handle_table(reader, builder, serializer, table, bean_package_name)
                except MetaExportError as e:
                    logger.error("Export of table %s failed: %s", table.name, e)
                    raise
                except Exception as e:
                    logger.error("Export of table %s failed: %s", table.name, e)
                    raise ExportError(f"table {table.name}", e)
                count += 1

        logger.info("Exported %d table(s), %d file(s) written", count, len(self._classes))

    def _handle_table(
        self,
        reader: SchemaReader,
        builder: EntityModelBuilder,
        serializer: Serializer,
        table: TableRef,
        bean_package_name: str,
    ) -> None:
        naming = self.naming_strategy
        config = self.config
        if self.bean_serializer is None:
            class_name = naming.get_class_name(config.name_prefix, config.name_suffix, table.name)
        else:
            class_name = naming.get_class_name("", "", table.name)

        entity = builder.create_entity(table.schema, table.name, class_name)
        if self.bean_serializer is not None:
            self._entity_to_wrapped[entity.full_name] = entity.type
        builder.attach_keys(
            entity,
            reader.primary_keys(table),
            reader.imported_keys(table),
            reader.exported_keys(table),
        )
        for column in reader.list_columns(table):
            builder.add_column(entity, table.name, column)

        self._serialize(serializer, entity, bean_package_name)
        logger.info("Exported %s successfully", table.name)

    def _serialize(self, serializer: Serializer, entity: EntityType, bean_package_name: str) -> None:
        package_name = self.config.package_name
        wrapped = self._entity_to_wrapped.get(entity.full_name)
        if wrapped is not None:
            bean = entity.bean_view(wrapped)
            self._write(self.bean_serializer, self._path(bean_package_name, wrapped.simple_name), bean)

        self._write(serializer, self._path(package_name, entity.query_simple_name), entity)

    def _path(self, package_name: str, simple_name: str) -> Path:
        folder = Path(self.config.target_folder)
        if package_name:
            folder = folder.joinpath(*package_name.split("."))
        return folder / f"{simple_name}{self.extension}"

    def _write(self, serializer: Serializer, path: Path, entity: EntityType) -> None:
        buffer = io.StringIO()
        try:
            serializer.serialize(entity, self.serializer_config, writer_for(buffer, self.config.create_stubs))
        except MetaExportError:
            raise
        except Exception as e:
            raise SerializationError(f"rendering {path}", e)

        try:
            os.makedirs(path.parent, exist_ok=True)
            handle = open(path, "w", encoding="utf-8")
        except OSError as e:
            raise ResourceAcquisitionError(f"file {path} could not be created", e)

        with handle:
            try:
                handle.write(buffer.getvalue())
            except OSError as e:
                raise SerializationError(f"writing {path}", e)

        if path in self._classes:
            logger.warning("%s was generated more than once in this run", path)
        self._classes.add(path)
        logger.debug("Wrote %s", path)
