from __future__ import annotations

import dataclasses
import logging

import pytest

from tests import objects
from typeschema import reflection
from typeschema.errors import ConfigurationError, RuleResolutionError
from typeschema.modules import (
    BaseModule,
    JsonPropertyModule,
    SerdeFlagsModule,
    SerializedNameModule,
)
from typeschema.registry import OVERRIDE, ModuleRegistry


def get_member(t, name: str) -> reflection.MemberDescriptor:
    return next(
        m for m in reflection.members(reflection.describe(t)) if m.name == name
    )


@dataclasses.dataclass(frozen=True)
class ExplodingModule(BaseModule):
    def resolve_property_name(self, member):
        raise ValueError("boom")


@dataclasses.dataclass(frozen=True)
class ConstantModule(BaseModule):
    name: str = "constant"

    def resolve_property_name(self, member):
        return self.name


def test_register_order():
    # Given
    registry = ModuleRegistry((SerializedNameModule(),))
    # When
    registry.register(JsonPropertyModule())
    # Then
    assert [m.__class__ for m in registry] == [
        SerializedNameModule,
        JsonPropertyModule,
    ]
    assert len(registry) == 2


def test_register_invalid():
    # Given
    registry = ModuleRegistry()
    # When/Then
    with pytest.raises(ConfigurationError):
        registry.register(object())


@pytest.mark.suite(
    serialized_first=dict(
        modules=(SerializedNameModule(), JsonPropertyModule()),
        expected="alias",
        producer="SerializedNameModule",
    ),
    json_property_first=dict(
        modules=(JsonPropertyModule(), SerializedNameModule()),
        expected="nick",
        producer="JsonPropertyModule",
    ),
)
def test_first_match_wins(modules, expected, producer):
    # Given
    registry = ModuleRegistry(modules)
    member = get_member(objects.User, "nickname")
    # When
    decision = registry.resolve(member)
    # Then
    assert decision.name == expected
    assert decision.provenance["name"] == producer


def test_fields_resolve_independently():
    # Given
    registry = ModuleRegistry((SerializedNameModule(), JsonPropertyModule()))
    member = get_member(objects.User, "nickname")
    # When
    decision = registry.resolve(member)
    # Then
    assert decision.name == "alias"
    assert decision.required is True
    assert decision.provenance == {
        "name": "SerializedNameModule",
        "required": "JsonPropertyModule",
    }


def test_no_modules():
    # Given
    registry = ModuleRegistry()
    member = get_member(objects.User, "user_id")
    # When
    decision = registry.resolve(member)
    # Then
    assert decision.name is None
    assert decision.required is None
    assert decision.excluded is None
    assert decision.description is None
    assert decision.provenance == {}


@pytest.mark.suite(
    single_member=dict(overrides={objects.User: {"user_id": "id"}}),
    with_other_members=dict(
        overrides={objects.User: {"user_id": "id", "bio": "about"}}
    ),
)
def test_override_wins(overrides):
    # Given
    registry = ModuleRegistry((JsonPropertyModule(),), overrides=overrides)
    member = get_member(objects.User, "user_id")
    # When
    decision = registry.resolve(member)
    # Then
    assert decision.name == "id"
    assert decision.provenance["name"] == OVERRIDE


def test_override_generic_alias():
    # Given
    registry = ModuleRegistry(
        overrides={objects.Box[int]: {"value": "int_value"}},
    )
    int_member = get_member(objects.Box[int], "value")
    str_member = get_member(objects.Box[str], "value")
    # When
    int_decision = registry.resolve(int_member)
    str_decision = registry.resolve(str_member)
    # Then
    assert int_decision.name == "int_value"
    assert str_decision.name is None


def test_module_failure_recovers(caplog):
    # Given
    registry = ModuleRegistry((ExplodingModule(), ConstantModule()))
    member = get_member(objects.Data, "foo")
    # When
    with caplog.at_level(logging.WARNING, logger="typeschema.registry"):
        decision = registry.resolve(member)
    # Then
    assert decision.name == "constant"
    assert decision.provenance["name"] == "ConstantModule"
    assert len(decision.errors) == 1
    error = decision.errors[0]
    assert isinstance(error, RuleResolutionError)
    assert isinstance(error.cause, ValueError)
    assert error.member is member
    assert "ExplodingModule" in caplog.text


def test_module_failure_without_fallback():
    # Given
    registry = ModuleRegistry((ExplodingModule(),))
    member = get_member(objects.Data, "foo")
    # When
    decision = registry.resolve(member)
    # Then
    assert decision.name is None
    assert len(decision.errors) == 1


def test_excluded_first_match():
    # Given
    registry = ModuleRegistry((SerdeFlagsModule(), JsonPropertyModule()))
    member = get_member(objects.Account, "secret")
    # When
    decision = registry.resolve(member)
    # Then
    assert decision.excluded is True
    assert decision.provenance["excluded"] == "SerdeFlagsModule"
