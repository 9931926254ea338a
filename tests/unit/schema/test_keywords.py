from __future__ import annotations

import pytest

from typeschema.schema.keywords import (
    KeywordSet,
    SchemaKeyword,
    SchemaVersion,
    get_keywords,
)


@pytest.mark.suite(
    draft_6=dict(
        version=SchemaVersion.DRAFT_6,
        definitions=SchemaKeyword.DEFINITIONS,
        tuple_items=SchemaKeyword.ITEMS,
        ref_siblings=False,
    ),
    draft_7=dict(
        version=SchemaVersion.DRAFT_7,
        definitions=SchemaKeyword.DEFINITIONS,
        tuple_items=SchemaKeyword.ITEMS,
        ref_siblings=False,
    ),
    draft_2019_09=dict(
        version=SchemaVersion.DRAFT_2019_09,
        definitions=SchemaKeyword.DEFS,
        tuple_items=SchemaKeyword.ITEMS,
        ref_siblings=True,
    ),
    draft_2020_12=dict(
        version=SchemaVersion.DRAFT_2020_12,
        definitions=SchemaKeyword.DEFS,
        tuple_items=SchemaKeyword.PREFIX_ITEMS,
        ref_siblings=True,
    ),
)
def test_get_keywords(version, definitions, tuple_items, ref_siblings):
    # When
    keywords = get_keywords(version)
    # Then
    assert keywords.version is version
    assert keywords.definitions is definitions
    assert keywords.tuple_items is tuple_items
    assert keywords.ref_siblings is ref_siblings


@pytest.mark.suite(
    draft_7=dict(version=SchemaVersion.DRAFT_7, expected="#/definitions/User"),
    draft_2020_12=dict(version=SchemaVersion.DRAFT_2020_12, expected="#/$defs/User"),
)
def test_ref_path(version, expected):
    # When
    path = get_keywords(version).ref_path("User")
    # Then
    assert path == expected


def test_for_version_from_identifier():
    # When
    keywords = KeywordSet.for_version("http://json-schema.org/draft-07/schema#")
    # Then
    assert keywords is get_keywords(SchemaVersion.DRAFT_7)
