from __future__ import annotations

import pytest

from tests import objects
from typeschema.ext import json
from typeschema.generator import Configuration, SchemaGenerator
from typeschema.schema.keywords import SchemaVersion


@pytest.mark.suite(
    draft_7=dict(version=SchemaVersion.DRAFT_7),
    draft_2020_12=dict(version=SchemaVersion.DRAFT_2020_12),
)
def test_tojson(version):
    # Given
    document = SchemaGenerator(Configuration(version=version)).generate(
        objects.Shared
    )
    # When
    serialized = document.tojson()
    # Then
    assert json.loads(serialized) == document.primitive()


def test_tojson_indent():
    # Given
    document = SchemaGenerator().generate(objects.Data)
    # When
    serialized = document.tojson(indent=2)
    # Then
    text = serialized.decode() if isinstance(serialized, bytes) else serialized
    assert "\n" in text


def test_version():
    # Given
    config = Configuration(version=SchemaVersion.DRAFT_6)
    # When
    document = SchemaGenerator(config).generate(objects.Data)
    # Then
    assert document.version is SchemaVersion.DRAFT_6
    assert document.primitive()["$schema"] == SchemaVersion.DRAFT_6.value
