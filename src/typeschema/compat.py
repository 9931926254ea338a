# flake8: noqa
# pragma: nocover
from __future__ import annotations

import sys
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ForwardRef,
    Optional,
    TypeVar,
    Union,
)

from typing_extensions import (
    Annotated,
    NotRequired,
    Required,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

PYTHON_VERSION = sys.version_info

if PYTHON_VERSION >= (3, 10):
    from typing import TypeGuard

    def transform_annotation(annotation: str) -> str:
        return annotation

else:
    from future_typing import transform_annotation
    from typing_extensions import TypeGuard


if TYPE_CHECKING:
    eval_type: Callable[..., Any]

    class _KWOnlyType:
        pass

    KW_ONLY = _KWOnlyType()

    F = TypeVar("F", bound=Callable)

    def lru_cache(
        maxsize: Optional[int] = 128, typed: bool = False
    ) -> Callable[[F], F]: ...

else:
    from functools import lru_cache
    from typing import _eval_type as eval_type

    class _KWOnlyType: ...

    KW_ONLY = _KWOnlyType()

    UnionType = Union

    if PYTHON_VERSION >= (3, 10):
        from dataclasses import KW_ONLY
        from types import UnionType
