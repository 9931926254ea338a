from __future__ import annotations

import dataclasses

import pytest
from typing_extensions import Annotated

from tests import objects
from typeschema import reflection
from typeschema.annotations import JsonProperty
from typeschema.modules import JsonPropertyModule


def get_member(t, name: str) -> reflection.MemberDescriptor:
    return next(
        m for m in reflection.members(reflection.describe(t)) if m.name == name
    )


@dataclasses.dataclass
class Renamed:
    same: Annotated[str, JsonProperty("same")]
    blank: Annotated[str, JsonProperty("", required=True)]
    other: Annotated[str, JsonProperty("different")]


@pytest.mark.suite(
    renamed=dict(t=objects.User, name="user_id", expected="userId"),
    nick=dict(t=objects.User, name="nickname", expected="nick"),
    unmarked=dict(t=objects.User, name="display_name", expected=None),
    same_as_declared=dict(t=Renamed, name="same", expected=None),
    blank=dict(t=Renamed, name="blank", expected=None),
    different=dict(t=Renamed, name="other", expected="different"),
)
def test_resolve_property_name(t, name, expected):
    # Given
    module = JsonPropertyModule()
    member = get_member(t, name)
    # When
    resolved = module.resolve_property_name(member)
    # Then
    assert resolved == expected


@pytest.mark.suite(
    required=dict(t=objects.User, name="nickname", expected=True),
    not_required=dict(t=objects.User, name="user_id", expected=None),
    blank_required=dict(t=Renamed, name="blank", expected=True),
)
def test_resolve_required(t, name, expected):
    # Given
    module = JsonPropertyModule()
    member = get_member(t, name)
    # When
    required = module.resolve_required(member)
    # Then
    assert required is expected


@pytest.mark.suite(
    ignored=dict(name="password", expected=True),
    unmarked=dict(name="user_id", expected=None),
)
def test_resolve_excluded(name, expected):
    # Given
    module = JsonPropertyModule()
    member = get_member(objects.User, name)
    # When
    excluded = module.resolve_excluded(member)
    # Then
    assert excluded is expected


@pytest.mark.suite(
    described=dict(name="bio", expected="All about me."),
    unmarked=dict(name="user_id", expected=None),
)
def test_resolve_description(name, expected):
    # Given
    module = JsonPropertyModule()
    member = get_member(objects.User, name)
    # When
    description = module.resolve_description(member)
    # Then
    assert description == expected
