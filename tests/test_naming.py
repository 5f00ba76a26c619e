"""Tests for the default naming strategy."""

import pytest

from metaexport.codegen.model import ClassRef, EntityType, Property, TypeCategory, TypeDescriptor
from metaexport.codegen.naming import DefaultNamingStrategy, split_words, unique_name


def make_entity(*property_names):
    entity = EntityType(type=ClassRef("query", "QPerson"), table_name="person")
    for name in property_names:
        entity.add_property(Property(entity, name, name, TypeDescriptor(TypeCategory.STRING, str)))
    return entity


class TestSplitWords:
    """Test identifier splitting."""

    @pytest.mark.parametrize("identifier", ["PERSON_ADDRESS", "person address", "PersonAddress", "person-address"])
    def test_split_variants(self, identifier):
        """Test the separator styles a catalog may use."""
        assert split_words(identifier) == ["person", "address"]

    def test_split_acronyms(self):
        """Test acronyms followed by a word."""
        assert split_words("HTTPServerLog") == ["http", "server", "log"]

    def test_split_empty(self):
        """Test identifiers without word characters."""
        assert split_words("__") == []

    def test_unique_name(self):
        """Test numeric suffixes on collisions."""
        assert unique_name("name", []) == "name"
        assert unique_name("name", ["name"]) == "name_2"
        assert unique_name("name", ["name", "name_2"]) == "name_3"


class TestDefaultNamingStrategy:
    """Test class, property and key naming."""

    def setup_method(self):
        self.naming = DefaultNamingStrategy()

    def test_class_name_with_prefix(self):
        """Test the query-type prefix is applied."""
        assert self.naming.get_class_name("Q", "", "person") == "QPerson"
        assert self.naming.get_class_name("Q", "Type", "PERSON_ADDRESS") == "QPersonAddressType"

    def test_class_name_without_affixes(self):
        """Test the base name used for bean types."""
        assert self.naming.get_class_name("", "", "order_item") == "OrderItem"

    def test_class_name_leading_digit(self):
        """Test stems that would not be valid identifiers."""
        assert self.naming.get_class_name("", "", "2fa_codes") == "_2faCodes"

    def test_class_name_is_deterministic(self):
        """Test the same input always yields the same output."""
        first = self.naming.get_class_name("Q", "", "user_account")
        assert self.naming.get_class_name("Q", "", "user_account") == first

    def test_property_name(self):
        """Test snake_case property names."""
        entity = make_entity()
        assert self.naming.get_property_name("FIRST_NAME", "Q", "", entity) == "first_name"
        assert self.naming.get_property_name("createdAt", "Q", "", entity) == "created_at"

    def test_property_name_keywords(self):
        """Test keywords and reserved names get a trailing underscore."""
        entity = make_entity()
        assert self.naming.get_property_name("class", "Q", "", entity) == "class_"
        assert self.naming.get_property_name("metadata", "Q", "", entity) == "metadata_"

    def test_property_name_leading_digit(self):
        """Test a leading digit is prefixed with an underscore."""
        assert self.naming.get_property_name("1st_line", "Q", "", make_entity()) == "_1st_line"

    def test_property_name_unique_within_entity(self):
        """Test collisions with existing properties."""
        entity = make_entity("name")
        assert self.naming.get_property_name("NAME", "Q", "", entity) == "name_2"

    def test_normalize_names(self):
        """Test surrounding whitespace is stripped."""
        assert self.naming.normalize_table_name("  person ") == "person"
        assert self.naming.normalize_column_name("first name\t") == "first name"

    def test_key_names(self):
        """Test constraint names become key attribute names."""
        entity = make_entity("id")
        assert self.naming.get_property_name_for_primary_key("PK_PERSON", entity) == "pk_person"
        assert self.naming.get_property_name_for_foreign_key("fk_address_person", entity) == "fk_address_person"
        assert (
            self.naming.get_property_name_for_inverse_foreign_key("fk_address_person", entity)
            == "_fk_address_person"
        )

    def test_key_name_collides_with_property(self):
        """Test key names are unique against the entity's properties."""
        entity = make_entity("person_id")
        assert self.naming.get_property_name_for_foreign_key("person_id", entity) == "person_id_2"
