from __future__ import annotations

import dataclasses
from typing import Optional

from typeschema.core import constants
from typeschema.modules.base import BaseModule
from typeschema.reflection import MemberDescriptor

__all__ = ("FieldMetadataModule",)


@dataclasses.dataclass(frozen=True)
class FieldMetadataModule(BaseModule):
    """Read string-keyed member metadata, e.g. ``dataclasses.field(metadata=...)``.

    Examples
    --------
    >>> import dataclasses
    >>>
    >>> @dataclasses.dataclass
    ... class Account:
    ...     account_id: int = dataclasses.field(metadata={"name": "id"})
    ...     password: str = dataclasses.field(metadata={"exclude": True})
    ...
    """

    name_key: str = "name"
    required_key: str = "required"
    exclude_key: str = "exclude"
    description_key: str = "description"

    def resolve_property_name(self, member: MemberDescriptor) -> Optional[str]:
        name = member.metadata.lookup(self.name_key)
        if name is constants.empty or not name:
            return None
        return str(name)

    def resolve_required(self, member: MemberDescriptor) -> Optional[bool]:
        required = member.metadata.lookup(self.required_key)
        if required is constants.empty:
            return None
        return bool(required)

    def resolve_excluded(self, member: MemberDescriptor) -> Optional[bool]:
        exclude = member.metadata.lookup(self.exclude_key)
        if exclude is constants.empty:
            return None
        return bool(exclude)

    def resolve_description(self, member: MemberDescriptor) -> Optional[str]:
        description = member.metadata.lookup(self.description_key)
        if description is constants.empty or not description:
            return None
        return str(description)
