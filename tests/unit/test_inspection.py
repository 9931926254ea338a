from __future__ import annotations

import dataclasses
import typing as t

import pytest

from typeschema import checks, inspection


class MyClass: ...


@pytest.mark.suite(
    dict=dict(annotation=dict, expected=dict),
    list=dict(annotation=list, expected=list),
    tuple=dict(annotation=tuple, expected=tuple),
    set=dict(annotation=set, expected=set),
    frozenset=dict(annotation=frozenset, expected=frozenset),
    generic_dict=dict(annotation=t.Dict, expected=dict),
    generic_list=dict(annotation=t.List, expected=list),
    generic_tuple=dict(annotation=t.Tuple, expected=tuple),
    generic_set=dict(annotation=t.Set, expected=set),
    generic_frozenset=dict(annotation=t.FrozenSet, expected=frozenset),
    abstract_mapping=dict(annotation=t.Mapping[str, int], expected=dict),
    abstract_sequence=dict(annotation=t.Sequence[int], expected=list),
    function=dict(annotation=lambda x: x, expected=t.Callable),
    newtype=dict(annotation=t.NewType("new", dict), expected=dict),
    subscripted_generic=dict(annotation=t.Dict[str, str], expected=dict),
    user_type=dict(annotation=MyClass, expected=MyClass),
)
def test_origin(annotation, expected):
    # When
    actual = inspection.origin(annotation)
    # Then
    assert actual == expected


UnBoundT = t.TypeVar("UnBoundT")
BoundT = t.TypeVar("BoundT", bound=int)
ConstrainedT = t.TypeVar("ConstrainedT", str, int)


@pytest.mark.suite(
    dict=dict(annotation=dict, expected=()),
    subscripted_dict=dict(annotation=t.Dict[str, str], expected=(str, str)),
    dict_unbound_tvar=dict(annotation=t.Dict[str, UnBoundT], expected=(str, t.Any)),
    dict_bound_tvar=dict(annotation=t.Dict[str, BoundT], expected=(str, int)),
    dict_constrained_tvar=dict(
        annotation=t.Dict[str, ConstrainedT], expected=(str, t.Union[str, int])
    ),
)
def test_get_args(annotation, expected):
    # When
    actual = inspection.get_args(annotation)
    # Then
    assert actual == expected


@pytest.mark.suite(
    builtin_dict=dict(annotation=dict, expected="dict"),
    generic_dict=dict(annotation=t.Dict, expected="Dict"),
    subscripted_dict=dict(annotation=t.Dict[str, str], expected="Dict"),
    user_class=dict(annotation=MyClass, expected=MyClass.__name__),
)
def test_get_name(annotation, expected):
    # When
    actual = inspection.get_name(annotation)
    # Then
    assert actual == expected


@pytest.mark.suite(
    builtin_dict=dict(annotation=dict, expected="dict"),
    generic_dict=dict(annotation=t.Dict, expected="typing.Dict"),
    subscripted_dict=dict(annotation=t.Dict[str, str], expected="typing.Dict"),
    user_class=dict(annotation=MyClass, expected=MyClass.__qualname__),
)
def test_get_qualname(annotation, expected):
    # When
    actual = inspection.get_qualname(annotation)
    # Then
    assert actual == expected


def test_resolve_supertype():
    # Given
    supertype = int
    UserID = t.NewType("UserID", int)
    AdminID = t.NewType("AdminID", UserID)
    # When
    resolved = inspection.resolve_supertype(AdminID)
    # Then
    assert resolved == supertype


T = t.TypeVar("T")
U = t.TypeVar("U")


class Box(t.Generic[T]):
    value: T


class Pair(t.Generic[T, U]):
    left: T
    right: U


class IntBox(Box[int]):
    ...


class Wrapper(Box[t.List[U]], t.Generic[U]):
    ...


class snake_case_thing:
    ...


@pytest.mark.suite(
    plain=dict(given_type=MyClass, args=(), expected="MyClass"),
    snake_case=dict(given_type=snake_case_thing, args=(), expected="SnakeCaseThing"),
    generic=dict(given_type=Box, args=(int,), expected="IntBox"),
    nested_generic=dict(given_type=Box, args=(t.List[int],), expected="IntListBox"),
    many_args=dict(given_type=Pair, args=(int, str), expected="IntStrPair"),
)
def test_get_defname(given_type, args, expected):
    # When
    name = inspection.get_defname(given_type, args)
    # Then
    assert name == expected


@pytest.mark.suite(
    unparametrized=dict(cls=Box, args=(), expected={}),
    parametrized=dict(cls=Box, args=(int,), expected={T: int}),
    subclass=dict(cls=IntBox, args=(), expected={T: int}),
    subclass_params=dict(cls=Wrapper, args=(str,), expected={T: t.List[str], U: str}),
    self_referencing_arg=dict(cls=Box, args=(t.List[T],), expected={T: t.List[T]}),
)
def test_typevar_map(cls, args, expected):
    # When
    mapping = inspection.typevar_map(cls, args)
    # Then
    assert mapping == expected


@pytest.mark.suite(
    typevar=dict(hint=T, expected=int),
    generic=dict(hint=t.List[T], expected=t.List[int]),
    optional=dict(hint=t.Optional[T], expected=t.Optional[int]),
    unrelated=dict(hint=str, expected=str),
)
def test_substitute(hint, expected):
    # When
    substituted = inspection.substitute(hint, {T: int})
    # Then
    assert substituted == expected


@dataclasses.dataclass
class SelfReferencing:
    child: t.Optional[SelfReferencing] = None


def test_get_type_hints_self_reference():
    # When
    hints = inspection.get_type_hints(SelfReferencing)
    # Then
    assert hints == {"child": t.Optional[SelfReferencing]}


def test_get_type_hints_unresolvable():
    # Given

    class Dangling:
        other: DoesNotExist  # noqa: F821

    # When
    hints = inspection.get_type_hints(Dangling)
    # Then
    assert checks.isforwardref(hints["other"])


class Parent:
    ...


class Child(Parent):
    ...


def test_type_map_get_by_parent():
    # Given
    type_map = inspection.TypeMap({Parent: "parent"})
    # When
    value = type_map.get_by_parent(Child)
    # Then
    assert value == "parent"
    assert Child in type_map


def test_type_map_get_by_parent_default():
    # Given
    type_map = inspection.TypeMap({Parent: "parent"})
    # When
    value = type_map.get_by_parent(MyClass, "default")
    # Then
    assert value == "default"
