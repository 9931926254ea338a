from __future__ import annotations

import dataclasses
import enum
from functools import partial
from typing import Callable, Iterable, Mapping, Optional, Tuple, Union

import inflection

from typeschema.classes import slotted
from typeschema.types import FrozenDict, freeze

__all__ = ("Case", "SerdeFlags")

CaseTransformerT = Callable[[str], str]
FieldSettingsT = Union[Tuple[str, ...], Mapping[str, str]]
"""An iterable of fields to keep under their declared name, or a mapping of
attribute name -> output field name."""


class Case(str, enum.Enum):
    """An enumeration of the supported case-styles for field names."""

    CAMEL = "camelCase"
    SNAKE = "snake_case"
    PASCAL = "PascalCase"
    KEBAB = "kebab-case"
    DOT = "dot.case"
    UPPER_KEBAB = "UPPER-KEBAB-CASE"
    UPPER_DOT = "UPPER.DOT.CASE"

    @property
    def transformer(self) -> CaseTransformerT:
        return _TRANSFORMERS[self]


def upper_kebab_case(s: str) -> str:
    return inflection.dasherize(s).upper()


def dot_case(s: str) -> str:
    return inflection.underscore(s).replace("_", ".")


def upper_dot_case(s: str) -> str:
    return dot_case(s).upper()


_TRANSFORMERS: Mapping[Case, CaseTransformerT] = {
    Case.CAMEL: partial(inflection.camelize, uppercase_first_letter=False),
    Case.SNAKE: inflection.underscore,
    Case.PASCAL: inflection.camelize,
    Case.KEBAB: inflection.dasherize,
    Case.DOT: dot_case,
    Case.UPPER_KEBAB: upper_kebab_case,
    Case.UPPER_DOT: upper_dot_case,
}


@slotted(dict=False)
@dataclasses.dataclass(unsafe_hash=True)
class SerdeFlags:
    """Class-level naming settings, read from ``__serde_flags__``.

    Examples
    --------
    >>> import dataclasses
    >>> from typeschema.serde import Case, SerdeFlags
    >>>
    >>> @dataclasses.dataclass
    ... class Account:
    ...     __serde_flags__ = SerdeFlags(case=Case.CAMEL, exclude=("secret",))
    ...     account_id: int
    ...     secret: str
    ...
    """

    case: Optional[Case] = None
    """Select the case-style for the output fields."""
    fields: Mapping[str, str] = dataclasses.field(default_factory=FrozenDict)
    """A mapping of attribute name -> output field name."""
    exclude: Tuple[str, ...] = ()
    """Provide a set of fields which will be excluded from the output."""

    def __init__(
        self,
        *,
        case: Case = None,
        fields: FieldSettingsT = None,
        exclude: Iterable[str] = None,
    ):
        if fields is not None and not isinstance(fields, Mapping):
            fields = {x: x for x in fields}
        self.case = Case(case) if case else None
        self.fields = FrozenDict(fields or {})
        self.exclude = freeze(tuple(exclude or ()))

    def name_for(self, name: str) -> Optional[str]:
        """Get the output name for an attribute, if these flags rename it."""
        if name in self.fields:
            return self.fields[name]
        if self.case:
            return self.case.transformer(name)
        return None
