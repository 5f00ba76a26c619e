"""Identifier policy for generated types."""

import keyword
import re
from abc import ABC, abstractmethod
from typing import Iterable, List

from .model import EntityType


_WORD_BOUNDARY = re.compile(r"[\W_]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Attribute names every generated query module defines
RESERVED_PROPERTY_NAMES = frozenset({"metadata"})


def split_words(identifier: str) -> List[str]:
    """Split a raw catalog identifier into lower-case words.

    ``PERSON_ADDRESS``, ``person address`` and ``PersonAddress`` all yield
    ``["person", "address"]``.
    """
    words = []
    for chunk in _WORD_BOUNDARY.split(identifier):
        if not chunk:
            continue
        if chunk.isupper():
            words.append(chunk.lower())
        else:
            words.extend(w.lower() for w in _CAMEL_BOUNDARY.split(chunk) if w)
    return words


def unique_name(name: str, taken: Iterable[str]) -> str:
    """Append ``_2``, ``_3``, ... to ``name`` until it is not in ``taken``."""
    taken = set(taken)
    if name not in taken:
        return name
    counter = 2
    while f"{name}_{counter}" in taken:
        counter += 1
    return f"{name}_{counter}"


class NamingStrategy(ABC):
    """Pluggable, deterministic identifier transformation policy.

    Implementations must be referentially transparent: the same raw input
    with the same configuration always yields the same output.
    """

    @abstractmethod
    def get_class_name(self, prefix: str, suffix: str, table_name: str) -> str:
        """Convert a table name into a class name with the given affixes."""
        pass

    @abstractmethod
    def get_property_name(self, column_name: str, prefix: str, suffix: str, entity: EntityType) -> str:
        """Convert a column name into a property name unique within ``entity``."""
        pass

    @abstractmethod
    def normalize_table_name(self, table_name: str) -> str:
        pass

    @abstractmethod
    def normalize_column_name(self, column_name: str) -> str:
        pass

    @abstractmethod
    def get_property_name_for_primary_key(self, key_name: str, entity: EntityType) -> str:
        pass

    @abstractmethod
    def get_property_name_for_foreign_key(self, key_name: str, entity: EntityType) -> str:
        pass

    @abstractmethod
    def get_property_name_for_inverse_foreign_key(self, key_name: str, entity: EntityType) -> str:
        pass


class DefaultNamingStrategy(NamingStrategy):
    """CamelCase class names and snake_case property names."""

    def get_class_name(self, prefix: str, suffix: str, table_name: str) -> str:
        stem = "".join(word[:1].upper() + word[1:] for word in split_words(table_name))
        if not stem or not stem[0].isalpha():
            stem = f"_{stem}"
        return f"{prefix}{stem}{suffix}"

    def get_property_name(self, column_name: str, prefix: str, suffix: str, entity: EntityType) -> str:
        name = self._to_property_name(column_name)
        return unique_name(name, entity.property_names)

    def normalize_table_name(self, table_name: str) -> str:
        return table_name.strip()

    def normalize_column_name(self, column_name: str) -> str:
        return column_name.strip()

    def get_property_name_for_primary_key(self, key_name: str, entity: EntityType) -> str:
        return unique_name(self._to_property_name(key_name), entity.property_names)

    def get_property_name_for_foreign_key(self, key_name: str, entity: EntityType) -> str:
        return unique_name(self._to_property_name(key_name), entity.property_names)

    def get_property_name_for_inverse_foreign_key(self, key_name: str, entity: EntityType) -> str:
        name = "_" + "_".join(split_words(key_name))
        return unique_name(name, entity.property_names)

    def _to_property_name(self, identifier: str) -> str:
        name = "_".join(split_words(identifier))
        if not name:
            return "_"
        if not (name[0].isalpha() or name[0] == "_"):
            name = f"_{name}"
        if keyword.iskeyword(name) or name in RESERVED_PROPERTY_NAMES:
            name = f"{name}_"
        return name
