from __future__ import annotations

import dataclasses
from typing import Optional, Protocol

from typeschema.compat import runtime_checkable
from typeschema.reflection import MemberDescriptor

__all__ = ("BaseModule", "ModuleProtocol")


@runtime_checkable
class ModuleProtocol(Protocol):
    """The interface for a naming/shape module.

    Each resolver answers for a single member. ``None`` means "no opinion", and the
    next registered module is consulted.
    """

    def resolve_property_name(self, member: MemberDescriptor) -> Optional[str]:
        ...

    def resolve_required(self, member: MemberDescriptor) -> Optional[bool]:
        ...

    def resolve_excluded(self, member: MemberDescriptor) -> Optional[bool]:
        ...

    def resolve_description(self, member: MemberDescriptor) -> Optional[str]:
        ...


@dataclasses.dataclass(frozen=True)
class BaseModule:
    """A module with no opinions. Subclass and override what you need."""

    def resolve_property_name(self, member: MemberDescriptor) -> Optional[str]:
        return None

    def resolve_required(self, member: MemberDescriptor) -> Optional[bool]:
        return None

    def resolve_excluded(self, member: MemberDescriptor) -> Optional[bool]:
        return None

    def resolve_description(self, member: MemberDescriptor) -> Optional[str]:
        return None
