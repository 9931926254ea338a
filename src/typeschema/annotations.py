"""Declarative markers which naming/shape modules read from type metadata.

Attach these via :py:class:`typing.Annotated` or ``dataclasses.field(metadata=...)``::

    @dataclasses.dataclass
    class User:
        user_id: Annotated[int, JsonProperty("userId", required=True)]
        password: Annotated[str, JsonIgnore()]
"""

from __future__ import annotations

import dataclasses
from typing import Generic, TypeVar

from typeschema.classes import slotted

__all__ = (
    "Expose",
    "JsonIgnore",
    "JsonProperty",
    "JsonPropertyDescription",
    "ReadOnly",
    "SerializedName",
    "WriteOnly",
)

T = TypeVar("T")


class ReadOnly(Generic[T]):
    """A type annotation to indicate a field is meant to be read-only."""

    pass


class WriteOnly(Generic[T]):
    """A type annotation to indicate a field is meant to be write-only."""

    pass


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class SerializedName:
    """The name a member is serialized under."""

    value: str


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class Expose:
    """Whether a member takes part in serialization and deserialization."""

    serialize: bool = True
    deserialize: bool = True


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class JsonProperty:
    """An explicit property name, plus whether the property must be present.

    An empty `value` keeps the declared name.
    """

    value: str = ""
    required: bool = False


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class JsonIgnore:
    value: bool = True


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class JsonPropertyDescription:
    value: str
