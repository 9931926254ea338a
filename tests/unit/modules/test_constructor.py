from __future__ import annotations

import pytest

from tests import objects
from typeschema import reflection
from typeschema.modules import ConstructorParameterModule, JsonPropertyModule
from typeschema.modules.constructor import find_parameter


def get_member(t, name: str) -> reflection.MemberDescriptor:
    return next(
        m for m in reflection.members(reflection.describe(t)) if m.name == name
    )


@pytest.mark.suite(
    by_position_first=dict(t=objects.Record, name="text", expected="arg0"),
    by_position_second=dict(t=objects.Record, name="number", expected="arg1"),
    by_type_first=dict(t=objects.SwappedRecord, name="text", expected="arg1"),
    by_type_second=dict(t=objects.SwappedRecord, name="number", expected="arg0"),
)
def test_find_parameter(t, name, expected):
    # Given
    member = get_member(t, name)
    # When
    param = find_parameter(member)
    # Then
    assert param.name == expected


def test_find_parameter_ambiguous():
    # Given

    class Ambiguous:
        first: str
        second: str
        third: bytes

        def __init__(self, a: int, b: str, c: str):
            ...

    member = get_member(Ambiguous, "first")
    # When
    param = find_parameter(member)
    # Then
    assert param is None


@pytest.mark.suite(
    record_text=dict(t=objects.Record, name="text", expected="my_text"),
    record_number=dict(t=objects.Record, name="number", expected="my_number"),
    swapped_text=dict(t=objects.SwappedRecord, name="text", expected="my_text"),
    swapped_number=dict(t=objects.SwappedRecord, name="number", expected="my_number"),
)
def test_resolve_property_name(t, name, expected):
    # Given
    module = ConstructorParameterModule()
    member = get_member(t, name)
    # When
    resolved = module.resolve_property_name(member)
    # Then
    assert resolved == expected


def test_falls_back_to_member_metadata():
    # Given
    module = ConstructorParameterModule()
    member = get_member(objects.User, "user_id")
    # When
    resolved = module.resolve_property_name(member)
    # Then
    assert resolved == "userId"


def test_plain_module_ignores_constructor():
    # Given
    module = JsonPropertyModule()
    member = get_member(objects.Record, "text")
    # When
    resolved = module.resolve_property_name(member)
    # Then
    assert resolved is None
