"""Tests for the reference entity model — declaration, descriptors, identity pool."""

from __future__ import annotations

from datetime import date

import pytest

from entityserde.domain.model import Entity, InitializationContext, Model, Property
from entityserde.domain.protocols import TypeDescriptor, is_entity_type


class TestDeclaration:
    def test_type_registered_in_model(self, people) -> None:
        assert people.model.get_type("Person") is people.Person.meta
        assert people.Person.meta.entity_class is people.Person

    def test_top_level_type_derives_from_root(self, people) -> None:
        assert people.Person.meta.base_type is people.model.root
        assert people.model.root.full_name == "Entity"

    def test_subclass_sets_base_type(self, people) -> None:
        assert people.Employee.meta.base_type is people.Person.meta

    def test_properties_inherited_first(self, people) -> None:
        names = [p.name for p in people.Employee.meta.properties]
        assert names == [
            "name",
            "manager",
            "reports",
            "staff_id",
            "hired",
            "skills",
            "initials",
            "kind",
        ]

    def test_redeclared_property_replaces_inherited(self, people) -> None:
        class Contractor(people.Person):
            name = Property(str, default="anon")
            agency = Property(str)

        props = Contractor.meta.properties
        assert [p.name for p in props] == ["name", "manager", "reports", "agency"]
        assert props[0] is Contractor.meta.get_property("name")
        assert props[0].containing_type is Contractor.meta
        assert people.Person.meta.get_property("name").containing_type is people.Person.meta

    def test_redeclared_property_serializes_once(self, people) -> None:
        class Contractor(people.Person):
            name = Property(str, default="anon")

        assert Contractor().serialize() == {"name": "anon", "manager": None, "reports": []}
        assert people.Person().serialize()["name"] is None

    def test_containing_type_is_declaring_type(self, people) -> None:
        assert people.Employee.meta.get_property("name").containing_type is people.Person.meta
        assert people.Employee.meta.get_property("hired").containing_type is people.Employee.meta

    def test_string_property_type_resolves_lazily(self, people) -> None:
        assert people.Person.meta.get_property("manager").property_type is people.Person

    def test_custom_full_name(self, model: Model) -> None:
        class Widget(Entity, model=model, name="Shop.Widget"):
            label = Property(str)

        assert Widget.meta.full_name == "Shop.Widget"
        assert model.get_type("Shop.Widget") is Widget.meta

    def test_model_required(self) -> None:
        with pytest.raises(TypeError, match="must be declared with a model"):

            class Orphan(Entity):
                pass

    def test_duplicate_type_name_rejected(self, people) -> None:
        with pytest.raises(ValueError, match="already defined"):

            class Person(Entity, model=people.model):
                pass

    def test_unknown_type_name(self, model: Model) -> None:
        with pytest.raises(KeyError, match="Unknown entity type"):
            model.get_type("Nope")

    def test_entity_classes_satisfy_protocol(self, people) -> None:
        assert is_entity_type(people.Person)
        assert isinstance(people.Person.meta, TypeDescriptor)
        assert not is_entity_type(str)
        assert not is_entity_type(people.Person())


class TestDescriptors:
    def test_defaults(self, people) -> None:
        p = people.Person()
        assert p.name is None
        assert p.reports == []
        assert people.Person().reports is not p.reports

    def test_calculated_value(self, people) -> None:
        e = people.Employee()
        e.name = "Ada Lovelace"
        assert e.initials == "AL"
        assert people.Employee.meta.get_property("initials").is_calculated

    def test_constant_is_read_only(self, people) -> None:
        e = people.Employee()
        assert e.kind == "employee"
        with pytest.raises(AttributeError, match="read-only"):
            e.kind = "contractor"

    def test_value_reads_property(self, people) -> None:
        p = people.Person()
        p.name = "Ann"
        assert people.Person.meta.get_property("name").value(p) == "Ann"


class TestIdentity:
    def test_identifier_property(self, people) -> None:
        assert people.Person.meta.identifier is None
        assert people.Employee.meta.identifier.name == "staff_id"

    def test_constructed_with_id_is_pooled(self, people) -> None:
        e = people.Employee("e1")
        assert e.id == "e1"
        assert e.staff_id == "e1"
        assert people.Employee.meta.get("e1") is e

    def test_pooled_in_ancestors(self, people) -> None:
        e = people.Employee("e1")
        assert people.Person.meta.get("e1") is e
        assert people.model.root.get("e1") is e

    def test_id_from_state_is_pooled(self, people) -> None:
        e = people.Employee(state={"staff_id": "e9", "name": "Zed"})
        assert people.Employee.meta.get("e9") is e

    def test_unknown_id(self, people) -> None:
        assert people.Employee.meta.get("missing") is None


class TestConstruction:
    def test_state_deserialized(self, people) -> None:
        e = people.Employee("e1", {"name": "Ann", "hired": "2024-03-01", "skills": ["go", "py"]})
        assert e.name == "Ann"
        assert e.hired == date(2024, 3, 1)
        assert e.skills == ["go", "py"]

    def test_unknown_keys_ignored(self, people) -> None:
        p = people.Person(state={"name": "Ann", "shoe_size": 38})
        assert p.name == "Ann"
        assert not hasattr(p, "shoe_size")

    def test_calculated_and_constant_keys_ignored(self, people) -> None:
        e = people.Employee(state={"name": "Ann Bee", "initials": "XX", "kind": "robot"})
        assert e.initials == "AB"
        assert e.kind == "employee"

    def test_null_values_assigned(self, people) -> None:
        p = people.Person(state={"name": "Ann"})
        p.update({"name": None})
        assert p.name is None

    def test_null_identifier_not_pooled(self, people) -> None:
        e = people.Employee(state={"staff_id": None, "name": "Ann"})
        assert e.id is None
        assert people.Employee.meta.get(None) is None

    def test_context_tracks_created_entities(self, people) -> None:
        ctx = InitializationContext()
        p = people.Person(state={"name": "Ann", "manager": {"name": "Bob"}}, context=ctx)
        assert ctx.created == [p, p.manager]

    def test_serialize_uses_model_serializer(self, people) -> None:
        p = people.Person(state={"name": "Ann"})
        assert p.serialize() == {"name": "Ann", "manager": None, "reports": []}

    def test_repr(self, people) -> None:
        assert repr(people.Employee("e1")) == "<Employee 'e1'>"
        assert repr(people.Person()) == "<Person>"
