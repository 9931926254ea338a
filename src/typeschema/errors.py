from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typeschema.reflection import MemberDescriptor


__all__ = (
    "SchemaGenerationError",
    "ConfigurationError",
    "RuleResolutionError",
    "CycleOverflowError",
    "UnsupportedTypeError",
)


class SchemaGenerationError(Exception):
    """The root exception for all schema generation errors."""


class ConfigurationError(SchemaGenerationError, ValueError):
    """A generic error indicating an invalid generator configuration."""

    pass


class RuleResolutionError(SchemaGenerationError):
    """A naming/shape module failed while resolving a member.

    These are recovered: the failure is logged and recorded on the naming decision
    for the member, and the next module in line answers instead.
    """

    def __init__(self, module: Any, member: MemberDescriptor, cause: Exception):
        self.module = module
        self.member = member
        self.cause = cause
        super().__init__(
            f"{module.__class__.__name__} failed to resolve "
            f"{member.owner.name}.{member.name}: {cause!r}"
        )


class CycleOverflowError(SchemaGenerationError, RecursionError):
    """Nesting exceeded the configured maximum depth.

    This happens with types which expand to a new type on every level, e.g.
    ``Node[T]`` declaring a child of ``Node[list[T]]``.
    """

    def __init__(self, depth: int, path: str):
        self.depth = depth
        self.path = path
        super().__init__(f"Exceeded maximum depth of {depth} at {path!r}.")


class UnsupportedTypeError(SchemaGenerationError, TypeError):
    """No schema can be derived for the type found at `path`."""

    def __init__(self, annotation: Any, path: str):
        self.annotation = annotation
        self.path = path
        super().__init__(f"Can't derive a schema for {annotation!r} at {path!r}.")
