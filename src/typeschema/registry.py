from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from typeschema.classes import slotted
from typeschema.errors import ConfigurationError, RuleResolutionError
from typeschema.modules.base import ModuleProtocol
from typeschema.reflection import MemberDescriptor
from typeschema.types import FrozenDict

__all__ = ("ModuleRegistry", "NamingDecision", "OVERRIDE")

logger = logging.getLogger(__name__)

OVERRIDE = "override"
"""The provenance of a name given by a caller override."""

_RESOLVERS: Tuple[Tuple[str, str], ...] = (
    ("name", "resolve_property_name"),
    ("required", "resolve_required"),
    ("excluded", "resolve_excluded"),
    ("description", "resolve_description"),
)


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class NamingDecision:
    """The combined answer of all registered modules for a single member."""

    name: Optional[str] = None
    required: Optional[bool] = None
    excluded: Optional[bool] = None
    description: Optional[str] = None
    provenance: Mapping[str, str] = dataclasses.field(default_factory=FrozenDict)
    """Which module (or "override") produced each resolved field."""
    errors: Tuple[RuleResolutionError, ...] = dataclasses.field(
        default=(), compare=False
    )


class ModuleRegistry:
    """An ordered collection of naming/shape modules.

    For each member, every module is asked in registration order. The first
    non-``None`` answer for a field wins, independently per field. Caller overrides
    win over every module for the property name.

    Examples
    --------
    >>> from typeschema.modules import JsonPropertyModule, SerializedNameModule
    >>> registry = ModuleRegistry((SerializedNameModule(),))
    >>> registry.register(JsonPropertyModule())
    >>> [m.__class__.__name__ for m in registry]
    ['SerializedNameModule', 'JsonPropertyModule']
    """

    __slots__ = ("_modules", "overrides")

    def __init__(
        self,
        modules: Iterable[ModuleProtocol] = (),
        overrides: Mapping[Any, Mapping[str, str]] = None,
    ):
        self._modules: list[ModuleProtocol] = []
        self.overrides: Mapping[Any, Mapping[str, str]] = FrozenDict(overrides or {})
        for module in modules:
            self.register(module)

    def register(self, module: ModuleProtocol) -> None:
        if not isinstance(module, ModuleProtocol):
            raise ConfigurationError(
                f"{module!r} does not implement the naming module protocol."
            )
        self._modules.append(module)

    def __iter__(self) -> Iterator[ModuleProtocol]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._modules!r})"

    def override_for(self, member: MemberDescriptor) -> Optional[str]:
        owner = member.owner
        for key in (owner.annotation, owner.origin):
            try:
                names = self.overrides.get(key)
            except TypeError:
                # An unhashable annotation, e.g. `Annotated[T, {...}]`.
                continue
            if names and member.name in names:
                return names[member.name]
        return None

    def resolve(self, member: MemberDescriptor) -> NamingDecision:
        """Resolve the naming decision for a member."""
        answers: dict[str, Any] = dict.fromkeys(f for f, _ in _RESOLVERS)
        provenance: dict[str, str] = {}
        errors: list[RuleResolutionError] = []
        override = self.override_for(member)
        if override is not None:
            answers["name"] = override
            provenance["name"] = OVERRIDE

        for module in self._modules:
            if len(provenance) == len(_RESOLVERS):
                break
            for field, method in _RESOLVERS:
                if field in provenance:
                    continue
                try:
                    answer = getattr(module, method)(member)
                except Exception as e:
                    err = RuleResolutionError(module=module, member=member, cause=e)
                    logger.warning("%s Skipping to the next module.", err)
                    errors.append(err)
                    continue
                if answer is not None:
                    answers[field] = answer
                    provenance[field] = module.__class__.__name__

        return NamingDecision(
            **answers, provenance=FrozenDict(provenance), errors=(*errors,)
        )
