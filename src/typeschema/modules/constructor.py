from __future__ import annotations

import dataclasses
from typing import Any, Optional

from typeschema import reflection
from typeschema.compat import lru_cache
from typeschema.core import constants
from typeschema.modules.json_property import JsonPropertyModule
from typeschema.reflection import MemberDescriptor, ParameterDescriptor

__all__ = ("ConstructorParameterModule", "find_parameter")


@dataclasses.dataclass(frozen=True)
class ConstructorParameterModule(JsonPropertyModule):
    """Read JSON property markers from the constructor parameter behind a member.

    This is for record-style types whose stored members aren't the declarations
    carrying the metadata, e.g.::

        class Point:
            x: int
            y: int

            def __init__(
                self,
                px: Annotated[int, JsonProperty("x_coord")],
                py: Annotated[int, JsonProperty("y_coord")],
            ):
                self.x, self.y = px, py

    Members are correlated with a parameter by position, confirmed by declared
    type; otherwise by the single parameter with the same declared type. Metadata
    on the member itself is used when no parameter correlates or the parameter
    doesn't carry the marker.
    """

    def lookup(self, member: MemberDescriptor, key: type) -> Any:
        param = find_parameter(member)
        if param is not None:
            found = param.metadata.lookup(key)
            if found is not constants.empty:
                return found
        return super().lookup(member, key)


def find_parameter(member: MemberDescriptor) -> Optional[ParameterDescriptor]:
    """Find the constructor parameter which corresponds to the given member."""
    return _find_parameter(member.owner, member.index, member.type.signature)


@lru_cache(maxsize=None)
def _find_parameter(
    owner: reflection.TypeDescriptor, index: int, signature: tuple
) -> Optional[ParameterDescriptor]:
    params = reflection.parameters(owner)
    if not params:
        return None
    if index < len(params) and params[index].type.signature == signature:
        return params[index]
    matches = [p for p in params if p.type.signature == signature]
    if len(matches) == 1:
        return matches[0]
    return None
