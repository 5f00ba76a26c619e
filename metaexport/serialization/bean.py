"""Bean serializer: plain dataclass holders."""

from ..codegen.model import EntityType
from .base import Serializer, SerializerConfig
from .writer import CodeWriter, ImportSet


class BeanSerializer(Serializer):
    """Renders an entity as a ``@dataclass`` with one optional field per property.

    Configuring one on the exporter enables dual-output mode.
    """

    def serialize(self, model: EntityType, config: SerializerConfig, writer: CodeWriter) -> None:
        imports = ImportSet()
        imports.add("dataclasses", "dataclass")
        if model.properties:
            imports.add("typing", "Optional")
        annotations = [
            f"Optional[{imports.add_type(prop.type.runtime_type)}]" for prop in model.properties
        ]

        qualified = f"{model.schema_name}.{model.table_name}" if model.schema_name else model.table_name
        writer.module_header(
            SerializerConfig.HEADER if config.generated_header else None,
            f"Bean type for table {qualified}." if config.docstrings else None,
        )
        writer.imports(imports)
        writer.nl()
        writer.nl()

        writer.begin_class(model.simple_name, decorators=["dataclass"])
        if config.docstrings:
            writer.docstring(f"Row of table ``{qualified}``.")
            if model.properties:
                writer.nl()
        for prop, annotation in zip(model.properties, annotations):
            writer.field(prop.name, annotation, "None")
        writer.end_class()
