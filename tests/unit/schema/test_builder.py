from __future__ import annotations

import datetime
import decimal
import logging
import typing as t
import uuid

import pytest

from tests import objects
from typeschema import reflection
from typeschema.errors import CycleOverflowError, UnsupportedTypeError
from typeschema.modules import FieldMetadataModule, SerializedNameModule
from typeschema.registry import ModuleRegistry
from typeschema.schema import field
from typeschema.schema.builder import SchemaBuilder


@pytest.fixture
def builder() -> SchemaBuilder:
    return SchemaBuilder(ModuleRegistry())


@pytest.mark.suite(
    str=dict(annotation=str, expected=field.StrSchemaField()),
    int=dict(annotation=int, expected=field.IntSchemaField()),
    bool=dict(annotation=bool, expected=field.BooleanSchemaField()),
    float=dict(annotation=float, expected=field.NumberSchemaField()),
    decimal=dict(annotation=decimal.Decimal, expected=field.NumberSchemaField()),
    datetime=dict(
        annotation=datetime.datetime,
        expected=field.StrSchemaField(format=field.StringFormat.DTIME),
    ),
    date=dict(
        annotation=datetime.date,
        expected=field.StrSchemaField(format=field.StringFormat.DATE),
    ),
    uuid=dict(
        annotation=uuid.UUID,
        expected=field.StrSchemaField(format=field.StringFormat.UUID),
    ),
    any=dict(annotation=t.Any, expected=field.UndeclaredSchemaField()),
    list=dict(
        annotation=t.List[str],
        expected=field.ArraySchemaField(items=field.StrSchemaField()),
    ),
    bare_list=dict(annotation=list, expected=field.ArraySchemaField()),
    set=dict(
        annotation=t.Set[int],
        expected=field.ArraySchemaField(
            items=field.IntSchemaField(), uniqueItems=True
        ),
    ),
    fixed_tuple=dict(
        annotation=t.Tuple[int, str],
        expected=field.ArraySchemaField(
            prefixItems=(field.IntSchemaField(), field.StrSchemaField()),
            minItems=2,
            maxItems=2,
        ),
    ),
    variadic_tuple=dict(
        annotation=t.Tuple[float, ...],
        expected=field.ArraySchemaField(items=field.NumberSchemaField()),
    ),
    empty_tuple=dict(
        annotation=t.Tuple[()], expected=field.ArraySchemaField(maxItems=0)
    ),
    bare_tuple=dict(annotation=tuple, expected=field.ArraySchemaField()),
    mapping=dict(
        annotation=t.Dict[str, int],
        expected=field.ObjectSchemaField(additionalProperties=field.IntSchemaField()),
    ),
    literal=dict(
        annotation=t.Literal["a", "b"],
        expected=field.StrSchemaField(enum=("a", "b")),
    ),
    mixed_literal=dict(
        annotation=t.Literal["a", 1],
        expected=field.UndeclaredSchemaField(enum=("a", 1)),
    ),
    union=dict(
        annotation=t.Union[int, str],
        expected=field.MultiSchemaField(
            anyOf=(field.IntSchemaField(), field.StrSchemaField())
        ),
    ),
    optional=dict(
        annotation=t.Optional[int],
        expected=field.MultiSchemaField(
            anyOf=(field.IntSchemaField(), field.NullSchemaField())
        ),
    ),
    optional_union=dict(
        annotation=t.Optional[t.Union[int, str]],
        expected=field.MultiSchemaField(
            anyOf=(
                field.IntSchemaField(),
                field.StrSchemaField(),
                field.NullSchemaField(),
            )
        ),
    ),
)
def test_build(builder, annotation, expected):
    # When
    node = builder.build(reflection.describe(annotation))
    # Then
    assert node == expected


def test_build_enum(builder):
    # When
    node = builder.build(reflection.describe(objects.Color))
    # Then
    assert node == field.StrSchemaField(
        enum=("red", "blue"), title="Color", description="The colors of a duck."
    )


def test_build_int_enum(builder):
    # When
    node = builder.build(reflection.describe(objects.Level))
    # Then
    assert isinstance(node, field.IntSchemaField)
    assert node.enum == (1, 2)


def test_build_structured_is_ref(builder):
    # When
    node = builder.build(reflection.describe(objects.Data))
    # Then
    assert node == field.Ref(signature=(objects.Data, ()), title="Data")
    entry = builder.table[(objects.Data, ())]
    assert entry.references == 1
    assert entry.node.properties == {"foo": field.StrSchemaField()}


def test_build_object(builder):
    # When
    node = builder.build_object(reflection.describe(objects.Duck))
    # Then
    assert node.title == "Duck"
    assert node.description == "A duck, which quacks."
    assert [*node.properties] == ["color", "level", "name"]
    assert node.required is None
    assert node.additionalProperties is False


def test_build_object_without_docstring(builder):
    # When
    node = builder.build_object(reflection.describe(objects.Data))
    # Then
    assert node.description is None
    assert node.required == ("foo",)


def test_build_object_allows_additional_properties():
    # Given
    builder = SchemaBuilder(ModuleRegistry(), forbid_additional_properties=False)
    # When
    node = builder.build_object(reflection.describe(objects.Data))
    # Then
    assert node.additionalProperties is None


def test_build_member_defaults(builder):
    # When
    node = builder.build_object(reflection.describe(objects.Duck))
    # Then
    assert node.properties["color"].default == "red"
    assert node.properties["level"].default is None
    assert node.properties["name"].default == "Donald"


def test_build_member_access(builder):
    # When
    node = builder.build_object(reflection.describe(objects.Credentials))
    # Then
    assert node.properties["username"].readOnly is True
    assert node.properties["password"].writeOnly is True
    assert node.properties["created"].readOnly is True


def test_build_shared_type(builder):
    # When
    builder.build(reflection.describe(objects.Shared))
    # Then
    entry = builder.table[(objects.Data, ())]
    assert entry.references == 2
    assert len(builder.table) == 2


def test_build_self_reference(builder):
    # When
    builder.build_root(reflection.describe(objects.Node))
    # Then
    entry = builder.table[(objects.Node, ())]
    assert entry.root
    assert entry.recursive
    assert len(builder.table) == 1


def test_build_mutual_recursion(builder):
    # When
    builder.build_root(reflection.describe(objects.Tree))
    # Then
    tree = builder.table[(objects.Tree, ())]
    branch = builder.table[(objects.Branch, ())]
    assert tree.recursive
    assert not branch.recursive
    assert branch.references == 1


def test_build_generics(builder):
    # When
    builder.build_root(reflection.describe(objects.Boxes))
    # Then
    names = [*builder.table.names().values()]
    assert names == ["Boxes", "IntBox", "StrBox", "IntListBox"]


def test_build_overflow():
    # Given
    builder = SchemaBuilder(ModuleRegistry(), max_depth=8)
    # When/Then
    with pytest.raises(CycleOverflowError) as exc_info:
        builder.build_root(reflection.describe(objects.Nest[int]))
    assert exc_info.value.depth == 8
    assert exc_info.value.path.startswith("IntNest.child.child")


def test_build_unsupported(builder):
    # When/Then
    with pytest.raises(UnsupportedTypeError) as exc_info:
        builder.build_root(reflection.describe(objects.HasOpaque))
    assert exc_info.value.path == "HasOpaque.handle"
    assert exc_info.value.annotation is objects.Opaque


def test_build_opaque():
    # Given
    builder = SchemaBuilder(ModuleRegistry(), opaque_unknown_types=True)
    # When
    with pytest.warns(UserWarning):
        node = builder.build_root(reflection.describe(objects.HasOpaque))
    # Then
    assert node.properties["handle"] == field.UndeclaredSchemaField()


def test_build_excluded():
    # Given
    builder = SchemaBuilder(ModuleRegistry((SerializedNameModule(),)))
    # When
    node = builder.build_object(reflection.describe(objects.User))
    # Then
    assert "token" not in node.properties
    assert "displayName" in node.properties


def test_build_duplicate_names(caplog):
    # Given
    builder = SchemaBuilder(ModuleRegistry((SerializedNameModule(),)))
    # When
    with caplog.at_level(logging.WARNING, logger="typeschema.schema.builder"):
        node = builder.build_object(reflection.describe(objects.Colliding))
    # Then
    assert [*node.properties] == ["same"]
    assert node.required == ("same",)
    assert "Colliding.second" in caplog.text


def test_build_annotated_mapping_metadata():
    # Given
    builder = SchemaBuilder(ModuleRegistry((FieldMetadataModule(),)))
    # When
    node = builder.build_object(reflection.describe(objects.MappedMetadata))
    # Then
    assert [*node.properties] == ["my_value", "nothing"]
    assert node.properties["my_value"] == field.IntSchemaField(description="Mapped.")
    assert node.properties["nothing"] == field.ArraySchemaField(maxItems=0)
    assert node.required == ("my_value",)
