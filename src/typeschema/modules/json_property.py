from __future__ import annotations

import dataclasses
from typing import Any, Optional

from typeschema.annotations import JsonIgnore, JsonProperty, JsonPropertyDescription
from typeschema.core import constants
from typeschema.modules.base import BaseModule
from typeschema.reflection import MemberDescriptor

__all__ = ("JsonPropertyModule",)


@dataclasses.dataclass(frozen=True)
class JsonPropertyModule(BaseModule):
    """Read :py:class:`~typeschema.annotations.JsonProperty`,
    :py:class:`~typeschema.annotations.JsonIgnore` and
    :py:class:`~typeschema.annotations.JsonPropertyDescription` markers.

    A `JsonProperty` only renames a member when its value is non-empty and differs
    from the declared name.
    """

    def lookup(self, member: MemberDescriptor, key: type) -> Any:
        return member.metadata.lookup(key)

    def resolve_property_name(self, member: MemberDescriptor) -> Optional[str]:
        prop = self.lookup(member, JsonProperty)
        if prop is constants.empty or not prop.value or prop.value == member.name:
            return None
        return prop.value

    def resolve_required(self, member: MemberDescriptor) -> Optional[bool]:
        prop = self.lookup(member, JsonProperty)
        if prop is constants.empty or not prop.required:
            return None
        return True

    def resolve_excluded(self, member: MemberDescriptor) -> Optional[bool]:
        ignore = self.lookup(member, JsonIgnore)
        if ignore is constants.empty or not ignore.value:
            return None
        return True

    def resolve_description(self, member: MemberDescriptor) -> Optional[str]:
        desc = self.lookup(member, JsonPropertyDescription)
        if desc is constants.empty or not desc.value:
            return None
        return desc.value
