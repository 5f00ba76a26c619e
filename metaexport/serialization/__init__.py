"""Source emission backends."""

from .writer import CodeWriter, PythonWriter, StubWriter, ImportSet, writer_for
from .base import Serializer, SerializerConfig
from .query import QueryTypeSerializer
from .bean import BeanSerializer

__all__ = [
    "CodeWriter",
    "PythonWriter",
    "StubWriter",
    "ImportSet",
    "writer_for",
    "Serializer",
    "SerializerConfig",
    "QueryTypeSerializer",
    "BeanSerializer",
]
