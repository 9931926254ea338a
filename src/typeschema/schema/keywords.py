from __future__ import annotations

import dataclasses
import enum

from typeschema.classes import slotted
from typeschema.compat import lru_cache

__all__ = ("KeywordSet", "SchemaKeyword", "SchemaVersion", "get_keywords")


class SchemaVersion(str, enum.Enum):
    """The supported JSON Schema dialects, by their meta-schema identifier."""

    DRAFT_6 = "http://json-schema.org/draft-06/schema#"
    DRAFT_7 = "http://json-schema.org/draft-07/schema#"
    DRAFT_2019_09 = "https://json-schema.org/draft/2019-09/schema"
    DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"

    @property
    def identifier(self) -> str:
        return self.value


class SchemaKeyword(str, enum.Enum):
    """The keywords whose spelling or shape depends on the dialect."""

    SCHEMA = "$schema"
    REF = "$ref"
    DEFINITIONS = "definitions"
    DEFS = "$defs"
    ITEMS = "items"
    PREFIX_ITEMS = "prefixItems"
    ALL_OF = "allOf"

    def __str__(self) -> str:
        return self.value


_DEFS_PATH = {
    SchemaKeyword.DEFINITIONS: "#/definitions/",
    SchemaKeyword.DEFS: "#/$defs/",
}


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class KeywordSet:
    """The keywords to use for a single dialect."""

    version: SchemaVersion
    definitions: SchemaKeyword
    tuple_items: SchemaKeyword
    ref_siblings: bool
    """Whether keywords next to a `$ref` are applied (2019-09 onwards)."""

    @property
    def ref_prefix(self) -> str:
        return _DEFS_PATH[self.definitions]

    def ref_path(self, name: str) -> str:
        return f"{self.ref_prefix}{name}"

    @staticmethod
    def for_version(version: SchemaVersion) -> KeywordSet:
        return get_keywords(SchemaVersion(version))


@lru_cache(maxsize=None)
def get_keywords(version: SchemaVersion) -> KeywordSet:
    """Get the keyword set for a dialect.

    Examples
    --------
    >>> from typeschema.schema.keywords import SchemaVersion, get_keywords
    >>> get_keywords(SchemaVersion.DRAFT_7).ref_path("User")
    '#/definitions/User'
    >>> get_keywords(SchemaVersion.DRAFT_2020_12).ref_path("User")
    '#/$defs/User'
    """
    if version in (SchemaVersion.DRAFT_6, SchemaVersion.DRAFT_7):
        return KeywordSet(
            version=version,
            definitions=SchemaKeyword.DEFINITIONS,
            tuple_items=SchemaKeyword.ITEMS,
            ref_siblings=False,
        )
    if version is SchemaVersion.DRAFT_2019_09:
        return KeywordSet(
            version=version,
            definitions=SchemaKeyword.DEFS,
            tuple_items=SchemaKeyword.ITEMS,
            ref_siblings=True,
        )
    return KeywordSet(
        version=version,
        definitions=SchemaKeyword.DEFS,
        tuple_items=SchemaKeyword.PREFIX_ITEMS,
        ref_siblings=True,
    )
