from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, Hashable, Mapping, Optional

from typeschema.core import constants
from typeschema.schema import field
from typeschema.schema.definitions import Definition, DefinitionsTable
from typeschema.schema.keywords import KeywordSet, SchemaKeyword

__all__ = ("SchemaWriter",)


class SchemaWriter:
    """Write schema nodes out as plain, JSON-ready Python objects.

    Refs are resolved against the definitions table here: the root entry is
    written as ``#``, every other entry as a path into the dialect's definitions
    keyword. With `inline_single_use`, entries which are referenced exactly once
    and aren't recursive are written in place of their ref.
    """

    __slots__ = ("keywords", "table", "inline_single_use", "_names")

    def __init__(
        self,
        keywords: KeywordSet,
        table: DefinitionsTable,
        *,
        inline_single_use: bool = False,
    ):
        self.keywords = keywords
        self.table = table
        self.inline_single_use = inline_single_use
        self._names: Dict[Hashable, str] = table.names()

    def document(
        self, root: field.SchemaFieldT, *, include_schema_version: bool = True
    ) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if include_schema_version:
            out[SchemaKeyword.SCHEMA.value] = self.keywords.version.value
        out.update(self.write(root))
        definitions = self.definitions()
        if definitions:
            out[self.keywords.definitions.value] = definitions
        return out

    def definitions(self) -> Dict[str, Any]:
        return {
            self._names[entry.signature]: self.write(entry.node)
            for entry in self.table
            if not entry.root and not self._inlined(entry)
        }

    def write(self, node: field.SchemaFieldT) -> Dict[str, Any]:
        if isinstance(node, field.Ref):
            return self._write_ref(node)
        out: Dict[str, Any] = {}
        if node.type not in (None, NotImplemented):
            out["type"] = node.type.value
        for f in dataclasses.fields(node):
            value = getattr(node, f.name)
            if value is None or value is constants.empty:
                if f.name == "default" and value is None:
                    out[f.name] = None
                continue
            if f.name == "prefixItems":
                out[self.keywords.tuple_items.value] = self._value(value)
                continue
            out[f.name] = self._value(value)
        return out

    def _value(self, value: Any) -> Any:
        if isinstance(value, (field.BaseSchemaField, field.Ref)):
            return self.write(value)
        if isinstance(value, enum.Enum):
            return value.value
        if isinstance(value, Mapping):
            return {k: self._value(v) for k, v in value.items()}
        if isinstance(value, (tuple, list, set, frozenset)):
            return [self._value(v) for v in value]
        return value

    def _inlined(self, entry: Definition) -> bool:
        return (
            self.inline_single_use
            and entry.references == 1
            and not entry.recursive
            and not entry.root
        )

    def _write_ref(self, ref: field.Ref) -> Dict[str, Any]:
        entry = self.table[ref.signature]
        annotations = self._ref_annotations(ref)
        if self._inlined(entry):
            return {**self.write(entry.node), **annotations}
        path = "#" if entry.root else self.keywords.ref_path(self._names[ref.signature])
        pointer = {SchemaKeyword.REF.value: path}
        if not annotations:
            return pointer
        if self.keywords.ref_siblings:
            return {**pointer, **annotations}
        # Keywords next to $ref are ignored before 2019-09.
        return {SchemaKeyword.ALL_OF.value: [pointer], **annotations}

    def _ref_annotations(self, ref: field.Ref) -> Dict[str, Any]:
        out: Dict[str, Optional[Any]] = {}
        for name in ("description", "default", "readOnly", "writeOnly"):
            value = getattr(ref, name)
            if value is constants.empty or (value is None and name != "default"):
                continue
            out[name] = self._value(value)
        return out
