from __future__ import annotations

import dataclasses
from typing import Any, Dict

from typeschema.classes import slotted
from typeschema.ext import json
from typeschema.schema import field
from typeschema.schema.definitions import DefinitionsTable
from typeschema.schema.keywords import KeywordSet, SchemaVersion
from typeschema.schema.writer import SchemaWriter

__all__ = ("SchemaDocument",)


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class SchemaDocument:
    """The result of a single generation call.

    The document owns its definitions table. Nodes refer to one another through
    :py:class:`~typeschema.schema.field.Ref` lookups into that table, so the
    document is only rendered to a plain mapping on demand.

    Examples
    --------
    >>> import dataclasses
    >>> from typeschema import generate_schema
    >>>
    >>> @dataclasses.dataclass
    ... class Duck:
    ...     color: str
    ...
    >>> generate_schema(Duck).primitive()["properties"]
    {'color': {'type': 'string'}}
    """

    root: field.SchemaFieldT
    definitions: DefinitionsTable = dataclasses.field(compare=False, repr=False)
    keywords: KeywordSet
    inline_single_use: bool = False
    include_schema_version: bool = True

    @property
    def version(self) -> SchemaVersion:
        return self.keywords.version

    @property
    def writer(self) -> SchemaWriter:
        return SchemaWriter(
            self.keywords, self.definitions, inline_single_use=self.inline_single_use
        )

    def primitive(self) -> Dict[str, Any]:
        """Render this document as a plain, JSON-ready dictionary."""
        return self.writer.document(
            self.root, include_schema_version=self.include_schema_version
        )

    def tojson(self, *, indent: int = 0, **kwargs) -> str | bytes:
        """Render this document as JSON."""
        return _tojson(self, indent=indent, **kwargs)


_tojson = json.get_tojson(SchemaDocument.primitive)
