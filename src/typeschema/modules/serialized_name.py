from __future__ import annotations

import dataclasses
from typing import Optional

from typeschema.annotations import Expose, SerializedName
from typeschema.core import constants
from typeschema.modules.base import BaseModule
from typeschema.reflection import MemberDescriptor

__all__ = ("SerializedNameModule",)


@dataclasses.dataclass(frozen=True)
class SerializedNameModule(BaseModule):
    """Read :py:class:`~typeschema.annotations.SerializedName` and
    :py:class:`~typeschema.annotations.Expose` markers.
    """

    def resolve_property_name(self, member: MemberDescriptor) -> Optional[str]:
        serialized = member.metadata.lookup(SerializedName)
        if serialized is constants.empty or not serialized.value:
            return None
        return serialized.value

    def resolve_excluded(self, member: MemberDescriptor) -> Optional[bool]:
        expose = member.metadata.lookup(Expose)
        if expose is constants.empty or expose.serialize:
            return None
        return True
