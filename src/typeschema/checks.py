from __future__ import annotations

import builtins
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import ipaddress
import pathlib
import types
import uuid
from operator import attrgetter
from typing import (
    Any,
    ClassVar,
    Final,
    Generic,
    Hashable,
    Literal,
    NamedTuple,
    Tuple,
    Union,
)

from typeschema import inspection
from typeschema.annotations import ReadOnly, WriteOnly
from typeschema.compat import (
    Annotated,
    ForwardRef,
    NotRequired,
    Required,
    TypeGuard,
    get_origin,
    lru_cache,
)

__all__ = (
    "BUILTIN_TYPES",
    "STDLIB_TYPES",
    "isannotated",
    "isbuiltintype",
    "iscollectiontype",
    "isdataclass",
    "isenumtype",
    "isfixedtuple",
    "isforwardref",
    "isgeneric",
    "ishashable",
    "isinstance",
    "isliteral",
    "ismappingtype",
    "isnamedtuple",
    "isoptionaltype",
    "isreadonly",
    "isrequiredmarker",
    "isstdlibtype",
    "isstdlibsubtype",
    "issubclass",
    "istupletype",
    "istypeddict",
    "isuniontype",
    "iswriteonly",
    "isclassvartype",
)


# Here we are with a manually-defined set of builtin-types.
# This probably won't break anytime soon, but we shall see...
BuiltInTypeT = Union[
    int, bool, float, str, bytes, bytearray, list, set, frozenset, tuple, dict, None
]
BUILTIN_TYPES = frozenset(
    (type(None), *(t for t in BuiltInTypeT.__args__ if t is not None))  # type: ignore
)
STDLibTypeT = Union[
    BuiltInTypeT,
    datetime.datetime,
    datetime.date,
    datetime.timedelta,
    datetime.time,
    decimal.Decimal,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    pathlib.Path,
    uuid.UUID,
    types.MappingProxyType,
]
STDLIB_TYPES = frozenset(
    (type(None), *(t for t in STDLibTypeT.__args__ if t is not None))  # type: ignore
)
STDLIB_TYPES_TUPLE = tuple(STDLIB_TYPES)


@lru_cache(maxsize=None)
def isbuiltintype(obj: Any) -> bool:
    """Check whether the provided object is a builtin-type.

    Examples:
        >>> from typeschema import checks
        >>> from typing import NewType, Mapping
        >>> checks.isbuiltintype(str)
        True
        >>> checks.isbuiltintype(NewType("MyStr", str))
        True
        >>> checks.isbuiltintype(Mapping)
        False
    """
    return (
        inspection.resolve_supertype(obj) in BUILTIN_TYPES
        or inspection.resolve_supertype(type(obj)) in BUILTIN_TYPES
    )


@lru_cache(maxsize=None)
def isstdlibtype(obj: Any) -> bool:
    return (
        inspection.resolve_supertype(obj) in STDLIB_TYPES
        or inspection.resolve_supertype(type(obj)) in STDLIB_TYPES
    )


@lru_cache(maxsize=None)
def isstdlibsubtype(t: Any) -> bool:
    """Test whether the given type is a subclass of a standard-lib type.

    Examples:
        >>> import datetime
        >>> from typeschema import checks
        >>> class MyDate(datetime.date): ...
        ...
        >>> checks.isstdlibsubtype(MyDate)
        True
    """
    return issubclass(inspection.resolve_supertype(t), STDLIB_TYPES_TUPLE)


@lru_cache(maxsize=None)
def isoptionaltype(obj: Any) -> bool:
    """Test whether an annotation is :py:class`typing.Optional`, or can be treated as.

    :py:class:`typing.Optional` is an alias for `typing.Union[<T>, None]`, so both are
    "optional".

    Examples:
        >>> from typeschema import checks
        >>> from typing import Optional, Union, Dict, Literal
        >>> checks.isoptionaltype(Optional[str])
        True
        >>> checks.isoptionaltype(Union[str, None])
        True
        >>> checks.isoptionaltype(Literal["", None])
        True
        >>> checks.isoptionaltype(Dict[str, None])
        False
    """
    args = getattr(obj, "__args__", ())
    tname = inspection.get_name(inspection.origin(obj))
    nullarg = next((a for a in args if a in (type(None), None)), ...)
    isoptional = tname == "Optional" or (
        nullarg is not ... and tname in ("Union", "UnionType", "Literal")
    )
    return isoptional


@lru_cache(maxsize=None)
def isuniontype(obj: Any) -> bool:
    return inspection.get_name(inspection.origin(obj)) in ("Union", "UnionType")


@lru_cache(maxsize=None)
def isreadonly(obj: Any) -> TypeGuard[ReadOnly]:
    """Test whether an annotation is marked as :py:class:`typeschema.ReadOnly`.

    :py:class:`typing.Final` is treated as read-only as well.

    Examples:
        >>> from typeschema import checks
        >>> from typeschema.annotations import ReadOnly
        >>> from typing import NewType
        >>> checks.isreadonly(ReadOnly[str])
        True
        >>> checks.isreadonly(NewType("Foo", ReadOnly[str]))
        True
    """
    return inspection.origin(obj) in (ReadOnly, Final)


@lru_cache(maxsize=None)
def iswriteonly(obj: Any) -> TypeGuard[WriteOnly]:
    """Test whether an annotation is marked as :py:class:`typeschema.WriteOnly`.

    Examples:
        >>> from typeschema import checks
        >>> from typeschema.annotations import WriteOnly
        >>> checks.iswriteonly(WriteOnly[str])
        True
    """
    return inspection.origin(obj) is WriteOnly


@lru_cache(maxsize=None)
def isrequiredmarker(obj: Any) -> bool:
    """Test whether an annotation is wrapped in `Required[...]` or `NotRequired[...]`."""
    return get_origin(obj) in (Required, NotRequired)


@lru_cache(maxsize=None)
def isliteral(obj: Any) -> bool:
    """Test whether an annotation is :py:class:`typing.Literal`.

    Examples:
        >>> from typeschema import checks
        >>> from typing import Literal
        >>> checks.isliteral(Literal["foo", "bar"])
        True
    """
    return inspection.origin(obj) is Literal or (
        obj.__class__ is ForwardRef and obj.__forward_arg__.startswith("Literal")
    )


def isannotated(obj: Any) -> bool:
    """Test whether an annotation is :py:class:`typing.Annotated`.

    Examples:
        >>> from typeschema import checks
        >>> from typing import Annotated
        >>> checks.isannotated(Annotated[str, "meta"])
        True
        >>> checks.isannotated(str)
        False
    """
    return get_origin(obj) is Annotated and hasattr(obj, "__metadata__")


@lru_cache(maxsize=None)
def istupletype(obj: Any) -> bool:
    """Tests whether the given type is a subclass of :py:class:`tuple`.

    Examples:
        >>> from typeschema import checks
        >>> from typing import NamedTuple, Tuple
        >>> class MyTup(NamedTuple):
        ...     field: int
        ...
        >>> checks.istupletype(tuple)
        True
        >>> checks.istupletype(Tuple[str])
        True
        >>> checks.istupletype(MyTup)
        True
    """
    obj = inspection.origin(obj)
    return obj is tuple or issubclass(obj, tuple)


@lru_cache(maxsize=None)
def iscollectiontype(obj: Any) -> bool:
    """Test whether this annotation is a subclass of :py:class:`typing.Collection`.

    Includes builtins.

    Examples:
        >>> from typeschema import checks
        >>> from typing import Collection, Mapping
        >>> checks.iscollectiontype(Collection)
        True
        >>> checks.iscollectiontype(Mapping[str, str])
        True
        >>> checks.iscollectiontype(list)
        True
        >>> checks.iscollectiontype(int)
        False
    """
    obj = inspection.origin(obj)
    return obj in _COLLECTIONS or issubclass(obj, collections.abc.Collection)


_COLLECTIONS = {list, set, tuple, frozenset, dict, str, bytes}


@lru_cache(maxsize=None)
def ismappingtype(obj: Any) -> bool:
    """Test whether this annotation is a subtype of :py:class:`typing.Mapping`.

    Examples:
        >>> from typeschema import checks
        >>> from typing import Mapping, Dict, DefaultDict
        >>> checks.ismappingtype(Mapping)
        True
        >>> checks.ismappingtype(Dict[str, str])
        True
        >>> checks.ismappingtype(DefaultDict)
        True
        >>> checks.ismappingtype(dict)
        True
    """
    obj = inspection.origin(obj)
    return issubclass(
        obj, (dict, types.MappingProxyType)
    ) or issubclass(obj, collections.abc.Mapping)


@lru_cache(maxsize=None)
def isenumtype(obj: Any) -> TypeGuard[type[enum.Enum]]:
    """Test whether this annotation is a subclass of :py:class:`enum.Enum`

    Examples:
        >>> from typeschema import checks
        >>> import enum
        >>>
        >>> class FooNum(enum.Enum): ...
        ...
        >>> checks.isenumtype(FooNum)
        True
    """
    return issubclass(obj, enum.Enum)


@lru_cache(maxsize=None)
def isclassvartype(obj: Any) -> bool:
    """Test whether an annotation is a ClassVar annotation.

    Examples:
        >>> from typeschema import checks
        >>> from typing import ClassVar, NewType
        >>> checks.isclassvartype(ClassVar[str])
        True
        >>> checks.isclassvartype(NewType("Foo", ClassVar[str]))
        True
    """
    obj = inspection.resolve_supertype(obj)
    if isannotated(obj):
        obj = obj.__origin__
    return getattr(obj, "__origin__", obj) is ClassVar


@lru_cache(maxsize=None)
def isdataclass(obj: Any) -> bool:
    """Test whether this annotation is a dataclass type (not an instance)."""
    return inspect.isclass(obj) and dataclasses.is_dataclass(obj)


_isinstance = isinstance


@lru_cache(maxsize=None)
def _type_check(t) -> bool:
    if _isinstance(t, tuple):
        return all(_type_check(x) for x in t)
    return inspect.isclass(t)


def isinstance(o: Any, t: Union[type, Tuple[type, ...]]) -> bool:
    """An instance check which returns `False` if `t` is an instance rather than a type.

    Examples:
        >>> from typeschema import checks
        >>> checks.isinstance("", str)
        True
        >>> checks.isinstance("", "")
        False
    """
    return _type_check(t) and builtins.isinstance(o, t)


def issubclass(o: Any, t: Union[type, Tuple[type, ...]]) -> bool:
    """A subclass check which returns `False` if `t` or `o` are instances.

    Notes:
        Not compatible with classes from :py:mod:`typing`, as they return False with
        :py:func:`inspect.isclass`

    Examples:
        >>> from typeschema import checks
        >>> class MyStr(str): ...
        ...
        >>> checks.issubclass(MyStr, str)
        True
        >>> checks.issubclass(MyStr(), str)
        False
    """
    return _type_check(t) and _type_check(o) and builtins.issubclass(o, t)


__hashgetter = attrgetter("__hash__")


def ishashable(obj: Any) -> TypeGuard[Hashable]:
    """Check whether an object is hashable.

    An order of magnitude faster than :py:class:`isinstance` with
    :py:class:`typing.Hashable`

    Examples:
        >>> from typeschema import checks
        >>> checks.ishashable(str())
        True
        >>> checks.ishashable(frozenset())
        True
        >>> checks.ishashable(list())
        False
    """
    return __hashgetter(obj) is not None


@lru_cache(maxsize=None)
def istypeddict(obj: Any) -> bool:
    """Check whether an object is a :py:class:`typing.TypedDict`.

    Examples:
        >>> from typeschema import checks
        >>> from typing import TypedDict
        >>>
        >>> class FooMap(TypedDict):
        ...     bar: str
        ...
        >>> checks.istypeddict(FooMap)
        True
    """
    return (
        inspect.isclass(obj)
        and dict in {*inspect.getmro(obj)}
        and hasattr(obj, "__total__")
    )


@lru_cache(maxsize=None)
def isnamedtuple(obj: Any) -> TypeGuard[NamedTuple]:
    """Check whether an object is a "named" tuple (:py:func:`collections.namedtuple`).

    Examples:
        >>> from typeschema import checks
        >>> from collections import namedtuple
        >>>
        >>> FooTup = namedtuple("FooTup", ["bar"])
        >>> checks.isnamedtuple(FooTup)
        True
    """
    return inspect.isclass(obj) and issubclass(obj, tuple) and hasattr(obj, "_fields")


@lru_cache(maxsize=None)
def isfixedtuple(obj: Any) -> bool:
    """Check whether an object is a "fixed" tuple, e.g., tuple[int, int].

    Examples:
        >>> from typeschema import checks
        >>> from typing import Tuple
        >>>
        >>> checks.isfixedtuple(Tuple[str, int])
        True
        >>> checks.isfixedtuple(Tuple[str, ...])
        False
    """
    args = inspection.get_args(obj)
    origin = inspection.origin(obj)
    if not args or args[-1] is ...:
        return False
    return issubclass(origin, tuple)


def isforwardref(obj: Any) -> TypeGuard[ForwardRef]:
    """Tests whether the given object is a :py:class:`typing.ForwardRef`."""
    return obj.__class__ is ForwardRef


@lru_cache(maxsize=None)
def isgeneric(t: Any) -> bool:
    """Test whether the given type is a typing generic.

    Examples:
        >>> from typing import Tuple, Generic, TypeVar
        >>> from typeschema import checks
        >>>
        >>> checks.isgeneric(Tuple)
        True
        >>> checks.isgeneric(tuple)
        False
        >>> T = TypeVar("T")
        >>> class MyGeneric(Generic[T]): ...
        >>> checks.isgeneric(MyGeneric[int])
        True
    """
    strobj = str(t)
    is_generic = (
        strobj.startswith("typing.")
        or strobj.startswith("typing_extensions.")
        or "[" in strobj
        or issubclass(t, Generic)  # type: ignore[arg-type]
    )
    return is_generic
