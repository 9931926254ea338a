from __future__ import annotations

import dataclasses
from typing import Optional

from typeschema.core import constants
from typeschema.modules.base import BaseModule
from typeschema.reflection import MemberDescriptor
from typeschema.serde import SerdeFlags

__all__ = ("SerdeFlagsModule",)


@dataclasses.dataclass(frozen=True)
class SerdeFlagsModule(BaseModule):
    """Read class-level :py:class:`~typeschema.serde.SerdeFlags`.

    An explicit field mapping wins over the case transform.
    """

    def resolve_property_name(self, member: MemberDescriptor) -> Optional[str]:
        flags = _get_flags(member)
        if flags is None:
            return None
        name = flags.name_for(member.name)
        if name == member.name:
            return None
        return name

    def resolve_excluded(self, member: MemberDescriptor) -> Optional[bool]:
        flags = _get_flags(member)
        if flags is None or member.name not in flags.exclude:
            return None
        return True


def _get_flags(member: MemberDescriptor) -> Optional[SerdeFlags]:
    flags = getattr(member.owner.origin, constants.SERDE_FLAGS_ATTR, None)
    return flags if isinstance(flags, SerdeFlags) else None
