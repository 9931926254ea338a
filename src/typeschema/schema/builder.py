from __future__ import annotations

import dataclasses
import enum
import inspect
import logging
import warnings
from typing import Any, Callable, ClassVar, Mapping, Optional

from typeschema import reflection
from typeschema.core import constants
from typeschema.errors import CycleOverflowError, UnsupportedTypeError
from typeschema.reflection import MemberDescriptor, TypeDescriptor, TypeKind
from typeschema.registry import ModuleRegistry, NamingDecision
from typeschema.schema import field
from typeschema.schema.definitions import DefinitionsTable
from typeschema.types import FrozenDict

__all__ = ("SchemaBuilder",)

logger = logging.getLogger(__name__)

_JSON_PRIMITIVES = (str, int, float, bool)


class SchemaBuilder:
    """Build schema nodes for reflected types.

    A builder (and its definitions table) belongs to a single generation call.
    Structured types are always built into the table and referenced with a
    :py:class:`~typeschema.schema.field.Ref`; everything else is built inline.
    """

    __slots__ = (
        "registry",
        "table",
        "opaque_unknown_types",
        "forbid_additional_properties",
        "max_depth",
        "_depth",
        "_path",
    )

    _KIND_TO_HANDLER: ClassVar[Mapping[TypeKind, Callable[..., field.SchemaFieldT]]]

    def __init__(
        self,
        registry: ModuleRegistry,
        table: DefinitionsTable = None,
        *,
        opaque_unknown_types: bool = False,
        forbid_additional_properties: bool = True,
        max_depth: int = 64,
    ):
        self.registry = registry
        self.table = DefinitionsTable() if table is None else table
        self.opaque_unknown_types = opaque_unknown_types
        self.forbid_additional_properties = forbid_additional_properties
        self.max_depth = max_depth
        self._depth = 0
        self._path: list[str] = []

    @property
    def path(self) -> str:
        return ".".join(self._path)

    def build_root(self, td: TypeDescriptor) -> field.SchemaFieldT:
        """Build the top-level node of a document.

        A structured root is registered as the root entry of the table, so any
        reference back to it points at the document itself.
        """
        self._path = [td.name]
        if td.kind is not TypeKind.STRUCTURED:
            return self.build(td)
        self.table.reserve(td.signature, td.name, root=True)
        node = self._enter_object(td)
        self.table.fill(td.signature, node)
        return self._wrap_nullable(node) if td.nullable else node

    def build(self, td: TypeDescriptor) -> field.SchemaFieldT:
        handler = self._KIND_TO_HANDLER[td.kind]
        node = handler(self, td)
        if td.nullable:
            node = self._wrap_nullable(node)
        return node

    def build_object(self, td: TypeDescriptor) -> field.ObjectSchemaField:
        """Build the object node for a structured type from its members."""
        properties: dict[str, field.SchemaFieldT] = {}
        required: list[str] = []
        for member in reflection.members(td):
            decision = self.registry.resolve(member)
            if decision.excluded:
                continue
            name, node, isrequired = self.build_member(member, decision)
            if name in properties:
                logger.warning(
                    "%s.%s resolves to the property %r, which is already taken. "
                    "Keeping the first member.",
                    td.name,
                    member.name,
                    name,
                )
                continue
            properties[name] = node
            if isrequired:
                required.append(name)

        return field.ObjectSchemaField(
            title=td.name,
            description=self._get_description(td.origin),
            properties=FrozenDict(properties),
            required=(*required,) or None,
            additionalProperties=False if self.forbid_additional_properties else None,
        )

    def build_member(
        self, member: MemberDescriptor, decision: NamingDecision
    ) -> tuple[str, field.SchemaFieldT, bool]:
        """Build the node for a single member, annotated per the naming decision."""
        name = decision.name or member.name
        self._path.append(member.name)
        node = self.build(member.type)
        self._path.pop()

        attrs: dict[str, Any] = {}
        if decision.description:
            attrs["description"] = decision.description
        default = self._get_default(member)
        if default is not constants.empty:
            attrs["default"] = default
        if member.type.readonly:
            attrs["readOnly"] = True
        if member.type.writeonly:
            attrs["writeOnly"] = True
        if attrs:
            node = dataclasses.replace(node, **attrs)

        required = (
            member.required_hint if decision.required is None else decision.required
        )
        return name, node, required

    def _enter_object(self, td: TypeDescriptor) -> field.ObjectSchemaField:
        self._depth += 1
        if self._depth > self.max_depth:
            raise CycleOverflowError(self.max_depth, self.path)
        node = self.build_object(td)
        self._depth -= 1
        return node

    def _from_structured(self, td: TypeDescriptor) -> field.Ref:
        signature = td.signature
        if signature not in self.table:
            self.table.reserve(signature, td.name)
            self.table.fill(signature, self._enter_object(td))
        entry = self.table.reference(signature)
        return field.Ref(signature=signature, title=entry.basename)

    def _from_primitive(self, td: TypeDescriptor) -> field.SchemaFieldT:
        base = field.SCHEMA_FIELD_FORMATS.get_by_parent(td.origin)
        if base is None:
            return self._unsupported(td)
        return base

    def _from_enum(self, td: TypeDescriptor) -> field.SchemaFieldT:
        values = (*(m.value for m in td.origin),)
        return dataclasses.replace(
            self._get_enum_base(values),
            enum=values,
            title=td.name,
            description=self._get_description(td.origin),
        )

    def _from_literal(self, td: TypeDescriptor) -> field.SchemaFieldT:
        values = (*(v.value if isinstance(v, enum.Enum) else v for v in td.args),)
        return dataclasses.replace(self._get_enum_base(values), enum=values)

    def _from_union(self, td: TypeDescriptor) -> field.MultiSchemaField:
        return field.MultiSchemaField(
            anyOf=(*(self.build(reflection.describe(a)) for a in td.args),)
        )

    def _from_array(self, td: TypeDescriptor) -> field.ArraySchemaField:
        items = None
        if td.args:
            itd = reflection.describe(td.args[0])
            if itd.kind is not TypeKind.ANY:
                items = self.build(itd)
        unique = issubclass(td.origin, (set, frozenset)) or None
        return field.ArraySchemaField(items=items, uniqueItems=unique)

    def _from_tuple(self, td: TypeDescriptor) -> field.ArraySchemaField:
        args = td.args
        if not args:
            return field.ArraySchemaField()
        if args == reflection.EMPTY_TUPLE_ARGS:
            return field.ArraySchemaField(maxItems=0)
        if args[-1] is ...:
            itd = reflection.describe(args[0])
            items = None if itd.kind is TypeKind.ANY else self.build(itd)
            return field.ArraySchemaField(items=items)
        prefix = (*(self.build(reflection.describe(a)) for a in args),)
        return field.ArraySchemaField(
            prefixItems=prefix, minItems=len(prefix), maxItems=len(prefix)
        )

    def _from_mapping(self, td: TypeDescriptor) -> field.ObjectSchemaField:
        additional = None
        if len(td.args) == 2:
            vtd = reflection.describe(td.args[1])
            if vtd.kind is not TypeKind.ANY:
                additional = self.build(vtd)
        return field.ObjectSchemaField(additionalProperties=additional)

    def _from_any(self, td: TypeDescriptor) -> field.UndeclaredSchemaField:
        return field.UndeclaredSchemaField()

    def _unsupported(self, td: TypeDescriptor) -> field.UndeclaredSchemaField:
        if not self.opaque_unknown_types:
            raise UnsupportedTypeError(td.annotation, self.path)
        warnings.warn(
            f"Can't derive a schema for {td.annotation!r} at {self.path!r}. "
            "Falling back to an empty schema."
        )
        return field.UndeclaredSchemaField()

    @staticmethod
    def _wrap_nullable(definition: field.SchemaFieldT) -> field.SchemaFieldT:
        if isinstance(definition, field.UndeclaredSchemaField):
            return definition
        null = field.NullSchemaField()
        if (
            isinstance(definition, field.MultiSchemaField)
            and definition.anyOf
            and null not in definition.anyOf
        ):
            return dataclasses.replace(definition, anyOf=(*definition.anyOf, null))
        return field.MultiSchemaField(anyOf=(definition, null))

    @staticmethod
    def _get_enum_base(values: tuple) -> field.BaseSchemaField:
        types = {v.__class__ for v in values}
        t = types.pop() if len(types) == 1 else object
        return field.SCHEMA_FIELD_FORMATS.get_by_parent(
            t, field.UndeclaredSchemaField()
        )

    @staticmethod
    def _get_default(member: MemberDescriptor) -> Any:
        default = member.default
        if isinstance(default, enum.Enum):
            default = default.value
        if default is None or isinstance(default, _JSON_PRIMITIVES):
            return default
        return constants.empty

    @staticmethod
    def _get_description(t: Any) -> Optional[str]:
        if not inspect.isclass(t):
            return None
        # Only the class' own docstring, not an inherited or generated one.
        doc = t.__dict__.get("__doc__")
        if not doc or doc.startswith(f"{t.__name__}("):
            return None
        return inspect.cleandoc(doc).split("\n", maxsplit=1)[0]

    _KIND_TO_HANDLER = {
        TypeKind.ANY: _from_any,
        TypeKind.PRIMITIVE: _from_primitive,
        TypeKind.ENUM: _from_enum,
        TypeKind.LITERAL: _from_literal,
        TypeKind.UNION: _from_union,
        TypeKind.ARRAY: _from_array,
        TypeKind.TUPLE: _from_tuple,
        TypeKind.MAPPING: _from_mapping,
        TypeKind.STRUCTURED: _from_structured,
        TypeKind.UNKNOWN: _unsupported,
    }
