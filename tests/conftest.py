"""Shared pytest fixtures and test helpers for entityserde tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

import pytest

from entityserde.domain.model import Entity, Model, Property
from entityserde.serializer.engine import EntitySerializer


class IsoDateFormat:
    """Minimal string format: ISO dates."""

    def convert_from_string(self, text: str) -> date:
        return date.fromisoformat(text)


@dataclass
class PersonTypes:
    """The entity classes of the people fixture model."""

    model: Model
    Person: type[Entity]
    Employee: type[Entity]


@pytest.fixture
def serializer() -> EntitySerializer:
    return EntitySerializer()


@pytest.fixture
def model(serializer: EntitySerializer) -> Model:
    """Empty model bound to the ``serializer`` fixture."""
    return Model(serializer)


@pytest.fixture
def people(model: Model) -> PersonTypes:
    """``Person{name, manager, reports}`` plus an ``Employee`` subtype."""

    class Person(Entity, model=model):
        name = Property(str)
        manager = Property("Person")
        reports = Property("Person", is_list=True)

    class Employee(Person):
        staff_id = Property(str, identifier=True)
        hired = Property(date, format=IsoDateFormat())
        skills = Property(str, is_list=True)
        initials = Property(str, calculated=lambda e: "".join(w[0] for w in (e.name or "").split()))
        kind = Property(str, constant=True, default="employee")

    return PersonTypes(model=model, Person=Person, Employee=Employee)


class StaticInjector:
    """Injects a fixed list of pairs."""

    def __init__(self, *pairs: tuple[str, Any]) -> None:
        from entityserde.domain.results import PropertySerializationResult

        self.pairs = [PropertySerializationResult(k, v) for k, v in pairs]

    def inject(self, entity: Any) -> list[Any]:
        return list(self.pairs)
