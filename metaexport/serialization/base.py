"""Serializer interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from ..codegen.model import EntityType
from .writer import CodeWriter


@dataclass(frozen=True)
class SerializerConfig:
    """Rendering options shared by all serializers."""
    generated_header: bool = True
    docstrings: bool = True

    DEFAULT: ClassVar["SerializerConfig"]

    HEADER: ClassVar[str] = "Generated by metaexport. Do not edit."


SerializerConfig.DEFAULT = SerializerConfig()


class Serializer(ABC):
    """Renders an entity model to source text.

    The caller computes the output location and supplies the writer; a
    serializer is only responsible for the text.
    """

    @abstractmethod
    def serialize(self, model: EntityType, config: SerializerConfig, writer: CodeWriter) -> None:
        """Render ``model`` through ``writer``.

        Args:
            model: Entity to render
            config: Rendering options
            writer: Destination writer, selecting the output dialect
        """
        pass
