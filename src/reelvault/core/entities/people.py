"""Person and Credit records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from reelvault.core.entities.base import Entity
from reelvault.shared.errors import ErrorCode, ErrorContext, InvalidArgumentError


@dataclass
class Person(Entity):
    """Cast or crew member."""

    TYPE_ACTOR: ClassVar[str] = "actor"
    TYPE_DIRECTOR: ClassVar[str] = "director"
    TYPE_WRITER: ClassVar[str] = "writer"
    TYPE_PRODUCER: ClassVar[str] = "producer"

    type: str | None = None
    id: str | None = None
    name: str | None = None
    link: str | None = None
    character: str | None = None
    image: str | None = None


@dataclass
class Credit(Entity):
    """One involvement of a person in a title (role plus person)."""

    role: str | None = None
    involvement: str | None = None
    person: Person | None = None

    def set_person(self, person: Person | Mapping[str, Any] | None) -> None:
        """Store ``person``, hydrating it first when given as a raw mapping."""
        if person is None or isinstance(person, Person):
            self.person = person
        elif isinstance(person, Mapping):
            self.person = Person.from_dict(person)  # type: ignore[assignment]
        else:
            raise InvalidArgumentError(
                ErrorCode.INVALID_ARGUMENT,
                f"Credit.person expects a Person or a mapping, got {type(person).__name__}",
                ErrorContext(operation="set_person"),
            )
