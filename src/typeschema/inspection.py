from __future__ import annotations

import collections
import collections.abc
import inspect
import sys
import typing
import warnings
from typing import (
    AbstractSet,
    Any,
    Callable,
    Collection,
    Dict,
    Hashable,
    Iterable,
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

import inflection

from typeschema import checks as checks
from typeschema.compat import (
    KW_ONLY,
    ForwardRef,
    eval_type,
    get_args as _get_args,
    get_origin,
    get_type_hints as _get_type_hints,
    lru_cache,
    transform_annotation,
)
from typeschema.core import constants

__all__ = (
    "origin",
    "get_args",
    "get_name",
    "get_qualname",
    "get_defname",
    "resolve_supertype",
    "signature",
    "get_type_hints",
    "cached_type_hints",
    "typevar_map",
    "substitute",
    "TypeMap",
    "normalize_typevar",
)


@lru_cache(maxsize=None)
def origin(annotation: Any) -> Any:
    """Get the highest-order 'origin'-type for subclasses of typing._SpecialForm.

    For the purposes of this library, if we can resolve to a builtin type, we will.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import Dict, Mapping, NewType, Optional
    >>> inspection.origin(Dict)
    <class 'dict'>
    >>> inspection.origin(Mapping)
    <class 'dict'>
    >>> Registry = NewType('Registry', Dict)
    >>> inspection.origin(Registry)
    <class 'dict'>
    """
    # Resolve custom NewTypes.
    actual = resolve_supertype(annotation)

    # Unwrap classvar
    if checks.isclassvartype(actual):
        args = get_args(actual)
        actual = args[0] if args else actual

    actual = get_origin(actual) or actual

    # provide defaults for generics
    if not checks.isbuiltintype(actual):
        actual = _check_generics(actual)

    if inspect.isroutine(actual):
        actual = Callable

    return actual


def _check_generics(hint: Any):
    return GENERIC_TYPE_MAP.get(hint, hint)


GENERIC_TYPE_MAP: dict[type, type] = {
    Sequence: list,
    MutableSequence: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    Collection: list,
    collections.abc.Collection: list,
    Iterable: list,
    collections.abc.Iterable: list,
    AbstractSet: set,
    MutableSet: set,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
    Mapping: dict,
    MutableMapping: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    Hashable: str,
    collections.abc.Hashable: str,
}


@lru_cache(maxsize=None)
def get_args(annotation: Any) -> Tuple[Any, ...]:
    """Get the args supplied to an annotation, normalizing :py:class:`typing.TypeVar`.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import Dict, TypeVar
    >>> T = TypeVar("T")
    >>> inspection.get_args(Dict)
    ()
    >>> inspection.get_args(Dict[str, int])
    (<class 'str'>, <class 'int'>)
    >>> inspection.get_args(Dict[str, T])
    (<class 'str'>, typing.Any)
    """
    args = _get_args(annotation)
    return (*_normalize_typevars(*args),)


def _normalize_typevars(*args: Any) -> Iterable:
    for t in args:
        if type(t) is TypeVar:
            yield normalize_typevar(tvar=t)
        else:
            yield t


@lru_cache(maxsize=None)
def normalize_typevar(tvar: TypeVar):
    """Reduce a TypeVar to a simple type."""
    if tvar.__bound__:
        return tvar.__bound__
    elif tvar.__constraints__:
        return Union[tvar.__constraints__]
    return Any


@lru_cache(maxsize=None)
def get_name(obj: Union[Type, ForwardRef, Callable]) -> str:
    """Safely retrieve the name of either a standard object or a type annotation.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import Dict, Any
    >>> inspection.get_name(Dict)
    'Dict'
    >>> inspection.get_name(Dict[str, str])
    'Dict'
    >>> inspection.get_name(Any)
    'Any'
    >>> inspection.get_name(dict)
    'dict'
    """
    strobj = get_qualname(obj)
    return strobj.rsplit(".")[-1]


@lru_cache(maxsize=None)
def get_qualname(obj: Union[Type, ForwardRef, Callable]) -> str:
    """Safely retrieve the qualname of either a standard object or a type annotation.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import Dict, Any
    >>> inspection.get_qualname(Dict)
    'typing.Dict'
    >>> inspection.get_qualname(Dict[str, str])
    'typing.Dict'
    >>> inspection.get_qualname(Any)
    'typing.Any'
    >>> inspection.get_qualname(dict)
    'dict'
    """
    strobj = str(obj)
    if isinstance(obj, ForwardRef):
        strobj = str(obj.__forward_arg__)
    isgeneric = checks.isgeneric(strobj)
    # We got a typing thing.
    if isgeneric:
        # If this is a subscripted generic we should clean that up.
        return strobj.split("[")[0]
    # Easy-ish path, use name magix
    if hasattr(obj, "__qualname__") and obj.__qualname__:  # type: ignore
        qualname = obj.__qualname__  # type: ignore
        if "<locals>" in qualname:
            return qualname.rsplit(".")[-1]
        return qualname
    if hasattr(obj, "__name__") and obj.__name__:  # type: ignore
        return obj.__name__  # type: ignore
    return strobj


@lru_cache(maxsize=None)
def get_defname(t: Any, args: Tuple[Any, ...] = ()) -> str:
    """Get the definition name for a type and its generic arguments.

    Generic arguments prefix the origin's name, recursively.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import Generic, TypeVar
    >>> T = TypeVar("T")
    >>> class Box(Generic[T]): ...
    ...
    >>> inspection.get_defname(Box, (int,))
    'IntBox'
    >>> inspection.get_defname(Box, (list[int],))
    'IntListBox'
    """
    name = inflection.camelize(inflection.underscore(get_name(t)))
    if args:
        argname = "".join(
            get_defname(origin(a), get_args(a))
            for a in args
            if a not in constants.NULLABLES and a is not Any
        )
        name = f"{argname}{name}"
    return name


@lru_cache(maxsize=None)
def resolve_supertype(annotation: Any) -> Any:
    """Get the highest-order supertype for a NewType.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import NewType
    >>> UserID = NewType("UserID", int)
    >>> AdminID = NewType("AdminID", UserID)
    >>> inspection.resolve_supertype(AdminID)
    <class 'int'>
    """
    while hasattr(annotation, "__supertype__"):
        annotation = annotation.__supertype__  # type: ignore[union-attr]
    return annotation


def signature(obj: Union[Callable, Type]) -> inspect.Signature:
    """Get the signature of a type or callable.

    Raises
    ------
    ValueError, TypeError
        If no signature can be provided for this object.
    """
    return inspect.signature(obj)


def get_type_hints(
    obj: Union[Type, Callable], localns: Mapping[str, Any] | None = None
) -> Dict[str, Any]:
    """Resolve the type hints for a class or callable, keeping `Annotated` extras.

    Forward references to the owning class resolve without it being importable.
    Names which can't be resolved are left as :py:class:`typing.ForwardRef`.
    """
    if localns is None and inspect.isclass(obj):
        localns = {obj.__name__: obj}
    try:
        hints = _get_type_hints(obj, localns=localns, include_extras=True)
    except (NameError, TypeError):
        hints = _safe_get_type_hints(obj, localns)
    # KW_ONLY is a special sentinel to denote kw-only params in a dataclass.
    #  We don't want to do anything with this hint/field. It's not real.
    return {f: t for f, t in hints.items() if t is not KW_ONLY}


def _safe_get_type_hints(
    annotation: Union[Type, Callable], localns: Mapping[str, Any] | None
) -> Dict[str, Any]:
    base_globals, raw_annotations = _get_globalns(annotation)
    annotations = {}
    for name, value in raw_annotations.items():
        if isinstance(value, str):
            value = transform_annotation(value)
            if sys.version_info >= (3, 9, 8) and sys.version_info[:3] != (3, 10, 0):
                value = ForwardRef(  # type: ignore
                    value,
                    is_argument=False,
                    is_class=inspect.isclass(annotation),
                )
            else:
                value = ForwardRef(value, is_argument=False)
        try:
            value = eval_type(value, base_globals or None, localns)
        except NameError:
            # this is ok, we deal with it later.
            pass
        except TypeError as e:
            warnings.warn(f"Couldn't evaluate type {value!r}: {e}")
            value = Any
        annotations[name] = value
    return annotations


def _get_globalns(
    annotation: Union[Type, Callable]
) -> tuple[dict[str, Any], dict[str, Any]]:
    raw_annotations: Dict[str, Any] = {}
    base_globals: Dict[str, Any] = {"typing": typing}
    if isinstance(annotation, type):
        for base in reversed(annotation.__mro__):
            module = sys.modules.get(base.__module__)
            if module:
                base_globals.update(module.__dict__)
            raw_annotations.update(base.__dict__.get("__annotations__", None) or {})
    else:
        raw_annotations = getattr(annotation, "__annotations__", None) or {}
        module_name = getattr(annotation, "__module__", None)
        if module_name and module_name in sys.modules:
            base_globals.update(sys.modules[module_name].__dict__)
    raw_annotations.pop("return", None)
    return base_globals, raw_annotations


cached_type_hints = lru_cache(maxsize=None)(get_type_hints)


@lru_cache(maxsize=None)
def typevar_map(cls: Type, args: Tuple[Any, ...] = ()) -> Mapping[TypeVar, Any]:
    """Map the type parameters of `cls` (and its generic bases) to concrete arguments.

    Examples
    --------
    >>> from typeschema import inspection
    >>> from typing import Generic, TypeVar
    >>> T = TypeVar("T")
    >>> class Box(Generic[T]): ...
    ...
    >>> class IntBox(Box[int]): ...
    ...
    >>> inspection.typevar_map(IntBox)
    {~T: <class 'int'>}
    """
    inherited: dict[TypeVar, Any] = {}
    for base in reversed(getattr(cls, "__mro__", (cls,))):
        for orig in getattr(base, "__orig_bases__", ()):
            borigin = get_origin(orig)
            params = getattr(borigin, "__parameters__", ())
            inherited.update(zip(params, _get_args(orig)))
    own: dict[TypeVar, Any] = {}
    params = getattr(cls, "__parameters__", ())
    if args and len(args) == len(params):
        own.update(zip(params, args))
    # Bases may be parametrized by the parameters of a subclass.
    #  The arguments given for `cls` itself are never substituted.
    inherited = {k: v for k, v in inherited.items() if v is not k}
    for _ in range(len(inherited)):
        resolved = {
            k: substitute(v, {**inherited, **own}) for k, v in inherited.items()
        }
        if resolved == inherited:
            break
        inherited = resolved
    return {**inherited, **own}


def substitute(hint: Any, mapping: Mapping[TypeVar, Any]) -> Any:
    """Replace the type parameters found in `hint` with their mapped arguments."""
    if not mapping:
        return hint
    if isinstance(hint, TypeVar):
        return mapping.get(hint, hint)
    params = getattr(hint, "__parameters__", ())
    if params and not inspect.isclass(hint):
        return hint[tuple(mapping.get(p, p) for p in params)]
    return hint


VT = TypeVar("VT")


class TypeMap(Dict[Type, VT]):
    """A mapping of Type -> value."""

    def get_by_parent(self, t: Type, default: VT = None) -> Optional[VT]:
        """Traverse the MRO of a class, return the value for the nearest parent."""
        # Skip traversal if this type is already mapped.
        if t in self:
            return self[t]

        # Get the MRO - the first value is the given type so skip it
        try:
            for ptype in inspect.getmro(t)[1:]:
                if ptype in self:
                    v = self[ptype]
                    # Cache for later use
                    self[t] = v
                    return v
        except (AttributeError, TypeError):
            pass

        return default
