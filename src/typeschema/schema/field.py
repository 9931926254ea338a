from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import ipaddress
import pathlib
import re
import reprlib
import uuid
from typing import Any, ClassVar, Hashable, Literal, Mapping, Tuple, Union

from typeschema.classes import slotted
from typeschema.core import constants
from typeschema.inspection import TypeMap

__all__ = (
    "ArraySchemaField",
    "BaseSchemaField",
    "BooleanSchemaField",
    "IntSchemaField",
    "MultiSchemaField",
    "NumberSchemaField",
    "NullSchemaField",
    "ObjectSchemaField",
    "Ref",
    "SCHEMA_FIELD_FORMATS",
    "SchemaFieldT",
    "SchemaType",
    "StringFormat",
    "StrSchemaField",
    "UndeclaredSchemaField",
)


class SchemaType(str, enum.Enum):
    """The official primitive types supported by JSON Schema.

    See Also
    --------
    `JSON Schema Types <https://json-schema.org/understanding-json-schema/reference/type.html>`_
    """

    STR = "string"
    INT = "integer"
    NUM = "number"
    OBJ = "object"
    ARR = "array"
    BOOL = "boolean"
    NULL = "null"

    def __str__(self) -> str:
        return self.value

    def __repr__(self):
        return self.value.__repr__()


class StringFormat(str, enum.Enum):
    """The official string 'formats' supported by JSON Schema.

    See Also
    --------
    `JSON Schema Strings <https://json-schema.org/understanding-json-schema/reference/string.html>`_
    """

    TIME = "time"
    DATE = "date"
    DTIME = "date-time"
    DURATION = "duration"
    HNAME = "hostname"
    URI = "uri"
    EMAIL = "email"
    UUID = "uuid"
    RE = "regex"
    IPV4 = "ipv4"
    IPV6 = "ipv6"


@slotted
@dataclasses.dataclass(frozen=True)
class Ref:
    """A JSON Schema ref (pointer) to an entry in the definitions table.

    A ref never owns its target: it holds the target's structural signature, which
    is resolved to a `$ref` path when the document is written.
    """

    signature: Hashable
    title: str
    description: str | None = None
    default: Any = constants.empty
    readOnly: bool | None = None
    writeOnly: bool | None = None


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class BaseSchemaField:
    """The base JSON Schema Field."""

    type: ClassVar[SchemaType] = NotImplemented
    format: str | None = None
    enum: tuple[Any, ...] | None = None
    title: str | None = None
    description: str | None = None
    default: Any = constants.empty
    readOnly: bool | None = None
    writeOnly: bool | None = None

    @reprlib.recursive_repr()
    def __repr__(self) -> str:  # pragma: nocover
        vars = ", ".join(
            f"{f.name}={v!r}"
            for f in dataclasses.fields(self)
            if (v := getattr(self, f.name))
            not in (f.default, NotImplemented, constants.empty)
        )

        return f"{self.__class__.__name__}({vars})"


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class UndeclaredSchemaField(BaseSchemaField):
    """A sentinel object for generating an empty schema."""

    type = None


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class MultiSchemaField(BaseSchemaField):
    """A schema field which supports multiple types."""

    anyOf: tuple[SchemaFieldT, ...] | None = None
    allOf: tuple[SchemaFieldT, ...] | None = None
    oneOf: tuple[SchemaFieldT, ...] | None = None


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class NullSchemaField(BaseSchemaField):
    type = SchemaType.NULL


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class StrSchemaField(BaseSchemaField):
    """A JSON Schema Field for the `string` type.

    See Also
    --------
    `JSON Schema String Type <https://json-schema.org/understanding-json-schema/reference/string.html>`_
    """

    type = SchemaType.STR
    format: StringFormat | None = None
    pattern: str | None = None
    minLength: int | None = None
    maxLength: int | None = None


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class IntSchemaField(BaseSchemaField):
    """A JSON Schema Field for the `integer` type.

    See Also
    --------
    `JSON Schema Numeric Types <https://json-schema.org/understanding-json-schema/reference/numeric.html>`_
    """

    type = SchemaType.INT
    multipleOf: int | float | None = None
    maximum: int | float | None = None
    minimum: int | float | None = None
    exclusiveMaximum: int | float | None = None
    exclusiveMinimum: int | float | None = None


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class NumberSchemaField(IntSchemaField):
    """A JSON Schema Field for the `number` type."""

    type = SchemaType.NUM


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class BooleanSchemaField(BaseSchemaField):
    """A JSON Schema Field for the `boolean` type."""

    type = SchemaType.BOOL


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class ObjectSchemaField(BaseSchemaField):
    """A JSON Schema Field for the `object` type.

    `properties` keep the declaration order of the members they came from.

    See Also
    --------
    `JSON Schema Object Type <https://json-schema.org/understanding-json-schema/reference/object.html>`_
    """

    type = SchemaType.OBJ
    properties: Mapping[str, SchemaFieldT] | None = None
    additionalProperties: Literal[False] | SchemaFieldT | None = None
    required: Tuple[str, ...] | None = None


@slotted
@dataclasses.dataclass(frozen=True, repr=False)
class ArraySchemaField(BaseSchemaField):
    """A JSON Schema Field for the `array` type.

    `prefixItems` holds the positional schemas of a fixed-length tuple; it's
    written as array-form `items` on dialects before 2020-12.

    See Also
    --------
    `JSON Schema Array Type <https://json-schema.org/understanding-json-schema/reference/array.html>`_
    """

    type = SchemaType.ARR
    prefixItems: tuple[SchemaFieldT, ...] | None = None
    items: SchemaFieldT | None = None
    minItems: int | None = None
    maxItems: int | None = None
    uniqueItems: bool | None = None


SchemaFieldT = Union[
    BaseSchemaField,
    StrSchemaField,
    IntSchemaField,
    NumberSchemaField,
    BooleanSchemaField,
    ObjectSchemaField,
    ArraySchemaField,
    MultiSchemaField,
    UndeclaredSchemaField,
    NullSchemaField,
    Ref,
]
"""A type-alias for the defined JSON Schema Fields."""


SCHEMA_FIELD_FORMATS: TypeMap[BaseSchemaField] = TypeMap(
    {
        decimal.Decimal: NumberSchemaField(),
        datetime.datetime: StrSchemaField(format=StringFormat.DTIME),
        datetime.date: StrSchemaField(format=StringFormat.DATE),
        datetime.time: StrSchemaField(format=StringFormat.TIME),
        datetime.timedelta: StrSchemaField(format=StringFormat.DURATION),
        pathlib.PurePath: StrSchemaField(format=StringFormat.URI),
        uuid.UUID: StrSchemaField(format=StringFormat.UUID),
        re.Pattern: StrSchemaField(format=StringFormat.RE),  # type: ignore
        ipaddress.IPv4Address: StrSchemaField(format=StringFormat.IPV4),
        ipaddress.IPv6Address: StrSchemaField(format=StringFormat.IPV6),
        str: StrSchemaField(),
        bytes: StrSchemaField(),
        bytearray: StrSchemaField(),
        bool: BooleanSchemaField(),
        int: IntSchemaField(),
        float: NumberSchemaField(),
        list: ArraySchemaField(),
        set: ArraySchemaField(uniqueItems=True),
        tuple: ArraySchemaField(),
        frozenset: ArraySchemaField(uniqueItems=True),
        dict: ObjectSchemaField(),
        type(None): NullSchemaField(),
    }
)
