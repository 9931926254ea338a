"""Naming/shape modules.

Each module reads one vocabulary of member metadata and answers per member:
the property name, whether it's required, whether it's excluded, and its
description. Register them on a :py:class:`~typeschema.registry.ModuleRegistry`
(or a :py:class:`~typeschema.generator.Configuration`) in priority order.
"""

from .base import BaseModule, ModuleProtocol
from .constructor import ConstructorParameterModule
from .field_metadata import FieldMetadataModule
from .json_property import JsonPropertyModule
from .serde import SerdeFlagsModule
from .serialized_name import SerializedNameModule

__all__ = (
    "BaseModule",
    "ConstructorParameterModule",
    "FieldMetadataModule",
    "JsonPropertyModule",
    "ModuleProtocol",
    "SerdeFlagsModule",
    "SerializedNameModule",
)
