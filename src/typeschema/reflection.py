"""Reflection over declared types.

:py:func:`describe` turns an annotation into a :py:class:`TypeDescriptor`,
:py:func:`members` lists the immediate members of a structured type, and
:py:func:`parameters` lists its constructor parameters. Nothing here recurses into
member types; that's the builder's job.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import inspect
import ipaddress
import pathlib
import re
import types
import uuid
from typing import (
    Any,
    Callable,
    Hashable,
    Iterator,
    Literal,
    Mapping,
    Tuple,
    TypeVar,
    Union,
)

from typeschema import checks, inspection
from typeschema.classes import slotted
from typeschema.compat import get_args, lru_cache
from typeschema.core import constants

__all__ = (
    "EMPTY_TUPLE_ARGS",
    "Metadata",
    "MemberDescriptor",
    "ParameterDescriptor",
    "TypeDescriptor",
    "TypeKind",
    "describe",
    "members",
    "parameters",
)


class TypeKind(str, enum.Enum):
    """The shape of a declared type, as far as schema generation is concerned."""

    ANY = "any"
    PRIMITIVE = "primitive"
    ENUM = "enum"
    LITERAL = "literal"
    UNION = "union"
    ARRAY = "array"
    TUPLE = "tuple"
    MAPPING = "mapping"
    STRUCTURED = "structured"
    UNKNOWN = "unknown"


PRIMITIVE_TYPES = (
    str,
    bytes,
    bytearray,
    bool,
    int,
    float,
    decimal.Decimal,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    pathlib.PurePath,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    re.Pattern,
    type(None),
)

EMPTY_TUPLE_ARGS: Tuple[Any, ...] = ((),)
"""The args of an explicit empty tuple, e.g. `tuple[()]`."""


class Metadata(Mapping[Hashable, Any]):
    """An immutable view over the metadata attached to a declaration.

    Metadata comes from two places: the extras of a :py:class:`typing.Annotated`
    wrapper and the mapping given to ``dataclasses.field(metadata=...)``.

    Lookups by class return the first extra (or mapping value) which is an instance
    of that class. Any other key is looked up in the mapping. A miss returns
    :py:class:`~typeschema.core.constants.empty`, never ``None``.

    Examples
    --------
    >>> from typeschema.annotations import JsonProperty
    >>> meta = Metadata((JsonProperty("userId"),), {"required": True})
    >>> meta.lookup(JsonProperty)
    JsonProperty(value='userId', required=False)
    >>> meta["required"]
    True
    >>> meta.lookup("name") is constants.empty
    True
    """

    __slots__ = ("extras", "present", "_mapping")

    def __init__(
        self,
        extras: Tuple[Any, ...] = (),
        mapping: Mapping[Hashable, Any] | None = None,
        *,
        present: bool | None = None,
    ):
        self.extras = (*extras,)
        self._mapping = types.MappingProxyType(dict(mapping or {}))
        self.present = (
            bool(self.extras) or mapping is not None if present is None else present
        )

    def lookup(self, key: Any, default: Any = constants.empty) -> Any:
        if inspect.isclass(key):
            return next(
                (
                    e
                    for e in (*self.extras, *self._mapping.values())
                    if isinstance(e, key)
                ),
                default,
            )
        return self._mapping.get(key, default)

    def merge(self, other: Metadata) -> Metadata:
        return Metadata(
            (*self.extras, *other.extras),
            {**self._mapping, **other._mapping},
            present=self.present or other.present,
        )

    def __getitem__(self, key: Any) -> Any:
        value = self.lookup(key)
        if value is constants.empty:
            raise KeyError(key)
        return value

    def __iter__(self) -> Iterator[Hashable]:
        yield from self._mapping
        yield from (e.__class__ for e in self.extras)

    def __len__(self) -> int:
        return len(self._mapping) + len(self.extras)

    def __hash__(self) -> int:
        return hash(frozenset(self))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(extras={self.extras!r}, "
            f"mapping={dict(self._mapping)!r})"
        )


EMPTY_METADATA = Metadata(present=False)


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """A reflected view of a single annotation."""

    annotation: Any = dataclasses.field(hash=False)
    """The raw annotation, as declared. Left out of the hash."""
    origin: Any
    """The unwrapped origin type (e.g., `list` for `list[int]`)."""
    args: Tuple[Any, ...] = ()
    """Generic arguments (or Literal values), with TypeVars normalized."""
    kind: TypeKind = TypeKind.ANY
    nullable: bool = False
    readonly: bool = False
    writeonly: bool = False
    metadata: Metadata = dataclasses.field(
        default=EMPTY_METADATA, compare=False, repr=False
    )

    @property
    def signature(self) -> Tuple[Any, Tuple[Any, ...]]:
        """The structural identity of this type. Equal signatures share a definition."""
        return self.origin, self.args

    @property
    def name(self) -> str:
        return inspection.get_defname(self.origin, self.args)


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class MemberDescriptor:
    """A single member of a structured type."""

    name: str
    """The declared name, exactly as written."""
    type: TypeDescriptor
    index: int
    owner: TypeDescriptor
    default: Any = dataclasses.field(default=constants.empty, compare=False)
    required_hint: bool = True
    metadata: Metadata = dataclasses.field(
        default=EMPTY_METADATA, compare=False, repr=False
    )

    @property
    def has_default(self) -> bool:
        return self.default is not constants.empty


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class ParameterDescriptor:
    """A constructor parameter of a structured type."""

    name: str
    position: int
    annotation: Any
    type: TypeDescriptor
    default: Any = dataclasses.field(default=constants.empty, compare=False)
    metadata: Metadata = dataclasses.field(
        default=EMPTY_METADATA, compare=False, repr=False
    )


def describe(annotation: Any) -> TypeDescriptor:
    """Reflect on an annotation.

    `Annotated`, `NewType`, `Optional`, `ReadOnly`, `WriteOnly` and `Final` wrappers
    are unwrapped and recorded on the descriptor.

    Examples
    --------
    >>> from typing import Optional
    >>> from typeschema import reflection
    >>> td = reflection.describe(Optional[list[int]])
    >>> td.kind, td.origin, td.args, td.nullable
    (<TypeKind.ARRAY: 'array'>, <class 'list'>, (<class 'int'>,), True)
    """
    try:
        hash(annotation)
    except TypeError:
        # Unhashable metadata, etc.
        return _describe(annotation)
    return _cached_describe(annotation)


def _describe(annotation: Any) -> TypeDescriptor:
    extras: list[Any] = []
    mapping: dict[Hashable, Any] = {}
    nullable = readonly = writeonly = False
    hint = annotation
    while True:
        if hint is None:
            hint = type(None)
        # Annotated extras may be unhashable; unwrap before any cached check.
        if checks.isannotated(hint):
            for extra in hint.__metadata__:
                extras.append(extra)
                if isinstance(extra, Mapping):
                    mapping.update(extra)
            hint = hint.__origin__
            continue
        supertype = _check(inspection.resolve_supertype, hint)
        if supertype is not hint:
            hint = supertype
            continue
        if _check(checks.isrequiredmarker, hint):
            hint = inspection.get_args(hint)[0]
            continue
        if isinstance(hint, TypeVar):
            hint = inspection.normalize_typevar(hint)
            continue
        if _check(checks.iswriteonly, hint):
            writeonly = True
            hint = next(iter(inspection.get_args(hint)), Any)
            continue
        if _check(checks.isreadonly, hint) or _check(checks.isclassvartype, hint):
            readonly = True
            hint = next(iter(inspection.get_args(hint)), Any)
            continue
        if _check(checks.isliteral, hint) and not checks.isforwardref(hint):
            break
        if _check(checks.isoptionaltype, hint):
            nullable = True
            args = tuple(
                a for a in inspection.get_args(hint) if a not in constants.NULLABLES
            )
            if len(args) == 1:
                hint = args[0]
                continue
            hint = Union[args] if args else type(None)
        break

    metadata = (
        Metadata(tuple(extras), mapping or None) if extras else EMPTY_METADATA
    )
    kind, origin, args = _classify(hint)
    if kind is TypeKind.LITERAL and None in args:
        nullable = True
        args = tuple(a for a in args if a is not None)
    return TypeDescriptor(
        annotation=annotation,
        origin=origin,
        args=args,
        kind=kind,
        nullable=nullable,
        readonly=readonly,
        writeonly=writeonly,
        metadata=metadata,
    )


_cached_describe = lru_cache(maxsize=None)(_describe)


def _ishashable(o: Any) -> bool:
    try:
        hash(o)
    except TypeError:
        return False
    return True


def _check(func: Callable[[Any], Any], hint: Any) -> Any:
    """Call a cached helper, skipping its cache for an unhashable hint."""
    if _ishashable(hint):
        return func(hint)
    return getattr(func, "__wrapped__", func)(hint)


def _classify(hint: Any) -> tuple[TypeKind, Any, Tuple[Any, ...]]:
    if hint in (Any, object, Ellipsis):
        return TypeKind.ANY, Any, ()
    if checks.isforwardref(hint) or isinstance(hint, str):
        return TypeKind.UNKNOWN, hint, ()
    if _check(checks.isliteral, hint):
        return TypeKind.LITERAL, Literal, get_args(hint)
    if _check(checks.isuniontype, hint):
        return TypeKind.UNION, Union, inspection.get_args(hint)

    origin = _check(inspection.origin, hint)
    args = inspection.get_args(hint)
    if not inspect.isclass(origin):
        return TypeKind.UNKNOWN, origin, args
    if checks.isenumtype(origin):
        return TypeKind.ENUM, origin, ()
    if issubclass(origin, PRIMITIVE_TYPES):
        return TypeKind.PRIMITIVE, origin, ()
    if (
        checks.istypeddict(origin)
        or checks.isnamedtuple(origin)
        or checks.isdataclass(origin)
    ):
        return TypeKind.STRUCTURED, origin, args
    if checks.ismappingtype(origin):
        return TypeKind.MAPPING, origin, args
    if checks.istupletype(origin):
        # `tuple[()]` is a fixed length of zero, a bare `tuple` is unconstrained.
        if getattr(hint, "__args__", None) in ((), ((),)):
            return TypeKind.TUPLE, origin, EMPTY_TUPLE_ARGS
        return TypeKind.TUPLE, origin, args
    if checks.iscollectiontype(origin):
        return TypeKind.ARRAY, origin, args
    if not checks.isstdlibsubtype(origin) and _annotated_members(origin):
        return TypeKind.STRUCTURED, origin, args
    return TypeKind.UNKNOWN, origin, args


def _annotated_members(cls: type) -> tuple[str, ...]:
    if cls.__module__ == "builtins":
        return ()
    hints = inspection.cached_type_hints(cls)
    return tuple(
        name
        for name, hint in hints.items()
        if not name.startswith("_") and not _check(checks.isclassvartype, hint)
    )


def members(td: TypeDescriptor) -> Iterator[MemberDescriptor]:
    """Lazily yield the immediate members of a structured type, in declaration order.

    Type parameters of the owner are substituted by its generic arguments.
    `ClassVar` and ``_private`` names are skipped. Anything which isn't a
    structured type has no members.
    """
    if td.kind is not TypeKind.STRUCTURED:
        return
    cls = td.origin
    hints = inspection.cached_type_hints(cls)
    mapping = inspection.typevar_map(cls, td.args)
    index = 0
    for name, hint, default, required, fieldmeta in _member_sources(cls, hints):
        if name.startswith("_") or _check(checks.isclassvartype, hint):
            continue
        mtype = describe(inspection.substitute(hint, mapping))
        metadata = mtype.metadata
        if fieldmeta is not None:
            metadata = metadata.merge(Metadata(mapping=fieldmeta))
        yield MemberDescriptor(
            name=name,
            type=mtype,
            index=index,
            owner=td,
            default=default,
            required_hint=required,
            metadata=metadata,
        )
        index += 1


def _member_sources(cls: type, hints: Mapping[str, Any]) -> Iterator[tuple]:
    empty = constants.empty
    if checks.isdataclass(cls):
        for f in dataclasses.fields(cls):
            default = empty if f.default is dataclasses.MISSING else f.default
            required = (
                f.default is dataclasses.MISSING
                and f.default_factory is dataclasses.MISSING  # type: ignore[misc]
            )
            yield f.name, hints.get(f.name, f.type), default, required, f.metadata
        return
    if checks.isnamedtuple(cls):
        defaults = getattr(cls, "_field_defaults", {})
        for name in cls._fields:
            default = defaults.get(name, empty)
            yield name, hints.get(name, Any), default, default is empty, None
        return
    if checks.istypeddict(cls):
        total = getattr(cls, "__total__", True)
        required_keys = getattr(cls, "__required_keys__", hints.keys() if total else ())
        for name, hint in hints.items():
            yield name, hint, empty, name in required_keys, None
        return
    for name, hint in hints.items():
        default = getattr(cls, name, empty)
        if inspect.isroutine(default) or isinstance(default, property):
            default = empty
        yield name, hint, default, default is empty, None


def parameters(td: TypeDescriptor) -> Tuple[ParameterDescriptor, ...]:
    """Get the constructor parameters of a structured type.

    `self`, `*args` and `**kwargs` are not included. Parameters are positioned in
    declaration order.
    """
    if td.kind is not TypeKind.STRUCTURED or not inspect.isclass(td.origin):
        return ()
    return _parameters(td)


@lru_cache(maxsize=None)
def _parameters(td: TypeDescriptor) -> Tuple[ParameterDescriptor, ...]:
    cls = td.origin
    try:
        sig = inspection.signature(cls)
    except (ValueError, TypeError):
        return ()
    init = cls.__init__
    hints = (
        inspection.get_type_hints(init, localns={cls.__name__: cls})
        if inspect.isfunction(init)
        else {}
    )
    mapping = inspection.typevar_map(cls, td.args)
    params = []
    position = 0
    for name, param in sig.parameters.items():
        if param.kind in constants.VAR_KINDS:
            continue
        hint = hints.get(name, param.annotation)
        if hint is param.empty:
            hint = Any
        ptype = describe(inspection.substitute(hint, mapping))
        params.append(
            ParameterDescriptor(
                name=name,
                position=position,
                annotation=ptype.annotation,
                type=ptype,
                default=(
                    constants.empty if param.default is param.empty else param.default
                ),
                metadata=ptype.metadata,
            )
        )
        position += 1
    return (*params,)
