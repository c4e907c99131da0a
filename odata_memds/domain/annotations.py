"""Markers declaring the EDM role of domain classes and their fields.

Domain classes are pydantic models. Field-level markers are attached with
``typing.Annotated`` so they survive in ``FieldInfo.metadata``::

    @entity_set(name="Rooms")
    class Room(BaseModel):
        id: Annotated[str | None, EdmKey()] = None
        building: Annotated["Building | None", EdmNavigationProperty()] = None
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

T = TypeVar("T", bound=type)

# Class attribute holding the EntitySetInfo set by @entity_set
ENTITY_SET_ATTR = "__edm_entity_set__"


class Multiplicity(str, Enum):
    ONE = "1"
    ZERO_TO_ONE = "0..1"
    MANY = "*"


@dataclass(frozen=True, slots=True)
class EntitySetInfo:
    name: str


@dataclass(frozen=True, slots=True)
class EdmKey:
    """Marks a key field. Several fields together form a composite key."""


@dataclass(frozen=True, slots=True)
class EdmProperty:
    """Overrides the EDM property name of a field (defaults to the field name)."""

    name: str | None = None


@dataclass(frozen=True, slots=True)
class EdmNavigationProperty:
    """Marks a field referencing another entity type, or a collection of them.

    `to_multiplicity` defaults to MANY for collection-typed fields and ONE
    otherwise. `association` names the relationship; both ends of a
    bi-directional relation must agree on it.
    """

    name: str | None = None
    association: str | None = None
    to_multiplicity: Multiplicity | None = None


@dataclass(frozen=True, slots=True)
class EdmMediaResourceContent:
    """Marks the field holding the binary content of a media link entry."""


@dataclass(frozen=True, slots=True)
class EdmMediaResourceMimeType:
    """Marks the field holding the MIME type of the media content."""


def entity_set(name: str | None = None) -> Callable[[T], T]:
    """Class decorator registering a domain class as the type of an entity set."""

    def decorator(cls: T) -> T:
        setattr(cls, ENTITY_SET_ATTR, EntitySetInfo(name=name or f"{cls.__name__}Set"))
        return cls

    return decorator
