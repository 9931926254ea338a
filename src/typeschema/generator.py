from __future__ import annotations

import dataclasses
import inspect
import logging
import threading
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

from typeschema import inspection, reflection
from typeschema.classes import slotted
from typeschema.document import SchemaDocument
from typeschema.errors import ConfigurationError
from typeschema.modules.base import ModuleProtocol
from typeschema.registry import ModuleRegistry
from typeschema.schema.builder import SchemaBuilder
from typeschema.schema.keywords import SchemaVersion, get_keywords
from typeschema.types import FrozenDict, freeze

__all__ = (
    "Configuration",
    "SchemaGenerator",
    "clear_cache",
    "generate_schema",
)

logger = logging.getLogger(__name__)


@slotted(dict=False, weakref=True)
@dataclasses.dataclass(frozen=True)
class Configuration:
    """Settings for schema generation.

    Configurations are immutable and hashable, so they may be used as cache keys.
    Call :py:meth:`validate` (or hand it to a
    :py:class:`SchemaGenerator`) to check it before use.

    Examples
    --------
    >>> from typeschema.generator import Configuration
    >>> from typeschema.modules import JsonPropertyModule
    >>> from typeschema.schema.keywords import SchemaVersion
    >>> config = Configuration(
    ...     version=SchemaVersion.DRAFT_7, modules=(JsonPropertyModule(),)
    ... )
    >>> config.validate()
    """

    version: SchemaVersion = SchemaVersion.DRAFT_2020_12
    """The JSON Schema dialect to write."""
    modules: Tuple[ModuleProtocol, ...] = ()
    """Naming/shape modules, in priority order."""
    overrides: Mapping[Any, Mapping[str, str]] = dataclasses.field(
        default_factory=FrozenDict
    )
    """Caller-provided property names: ``{Type: {"member": "propertyName"}}``."""
    opaque_unknown_types: bool = False
    """Write an empty schema for unsupported types instead of failing."""
    inline_single_use: bool = False
    """Inline definitions which are referenced exactly once and aren't recursive."""
    forbid_additional_properties: bool = True
    include_schema_version: bool = True
    max_depth: int = 64
    """The maximum nesting of structured types before generation is aborted."""

    def __post_init__(self):
        object.__setattr__(self, "modules", (*self.modules,))
        object.__setattr__(self, "overrides", freeze(dict(self.overrides or {})))

    def validate(self) -> None:
        """Check this configuration, raising a :py:class:`ConfigurationError`."""
        try:
            SchemaVersion(self.version)
        except ValueError:
            raise ConfigurationError(
                f"Unknown JSON Schema version: {self.version!r}. "
                f"Expected one of: {[v.value for v in SchemaVersion]}."
            ) from None
        seen: list = []
        for module in self.modules:
            if not isinstance(module, ModuleProtocol):
                raise ConfigurationError(
                    f"{module!r} does not implement the naming module protocol."
                )
            if module in seen:
                raise ConfigurationError(f"{module!r} is registered more than once.")
            seen.append(module)
        for t, names in self.overrides.items():
            self._validate_override(t, names)
        if (
            not isinstance(self.max_depth, int)
            or isinstance(self.max_depth, bool)
            or self.max_depth <= 0
        ):
            raise ConfigurationError(
                f"max_depth must be a positive integer, got {self.max_depth!r}."
            )

    @staticmethod
    def _validate_override(t: Any, names: Any) -> None:
        if not inspect.isclass(t) and not inspect.isclass(inspection.origin(t)):
            raise ConfigurationError(f"Override keys must be types, got {t!r}.")
        if not isinstance(names, Mapping):
            raise ConfigurationError(
                f"Overrides for {t!r} must map member names to property names, "
                f"got {names!r}."
            )
        taken: Dict[str, str] = {}
        for member, name in names.items():
            if not isinstance(member, str) or not isinstance(name, str) or not name:
                raise ConfigurationError(
                    f"Invalid override for {t!r}: {member!r} -> {name!r}. "
                    "Member and property names must be non-empty strings."
                )
            if name in taken:
                raise ConfigurationError(
                    f"Invalid overrides for {t!r}: {taken[name]!r} and {member!r} "
                    f"are both renamed to {name!r}."
                )
            taken[name] = member
        declared = {m.name for m in reflection.members(reflection.describe(t))}
        unknown = [m for m in names if m not in declared]
        if unknown:
            raise ConfigurationError(
                f"Invalid overrides for {t!r}: no such member(s) {unknown!r}."
            )


class SchemaGenerator:
    """Generate JSON Schema documents for types.

    Every call to :py:meth:`generate` builds with its own registry, builder and
    definitions table. With `cache=True`, finished documents are kept per root type.

    Examples
    --------
    >>> import dataclasses
    >>> from typeschema.generator import SchemaGenerator
    >>>
    >>> @dataclasses.dataclass
    ... class Duck:
    ...     color: str
    ...
    >>> SchemaGenerator().generate(Duck).primitive()["required"]
    ['color']
    """

    __slots__ = ("config", "_cache", "_lock")

    def __init__(self, config: Configuration = None, *, cache: bool = False):
        config = Configuration() if config is None else config
        config.validate()
        self.config = config
        self._cache: Optional[Dict[Hashable, SchemaDocument]] = {} if cache else None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config!r})"

    def generate(self, root: Any) -> SchemaDocument:
        """Generate the schema document for `root`."""
        if self._cache is None or not _ishashable(root):
            return self._generate(root)
        with self._lock:
            if root in self._cache:
                return self._cache[root]
        document = self._generate(root)
        with self._lock:
            return self._cache.setdefault(root, document)

    def _generate(self, root: Any) -> SchemaDocument:
        config = self.config
        keywords = get_keywords(SchemaVersion(config.version))
        registry = ModuleRegistry(config.modules, config.overrides)
        builder = SchemaBuilder(
            registry,
            opaque_unknown_types=config.opaque_unknown_types,
            forbid_additional_properties=config.forbid_additional_properties,
            max_depth=config.max_depth,
        )
        td = reflection.describe(root)
        logger.debug("Generating a %s schema for %r.", keywords.version.name, root)
        node = builder.build_root(td)
        logger.debug(
            "Generated the schema for %r with %d definition(s).",
            root,
            len(builder.table),
        )
        return SchemaDocument(
            root=node,
            definitions=builder.table,
            keywords=keywords,
            inline_single_use=config.inline_single_use,
            include_schema_version=config.include_schema_version,
        )


_CACHE: Dict[Tuple[Any, Configuration], SchemaDocument] = {}
_LOCK = threading.Lock()


def _ishashable(o: Any) -> bool:
    try:
        hash(o)
    except TypeError:
        return False
    return True


def generate_schema(root: Any, config: Configuration = None) -> SchemaDocument:
    """Generate the schema document for `root`, re-using earlier results.

    Documents are cached for the life of the process, keyed by the root type and
    the configuration. Unhashable roots or configurations are never cached.

    Examples
    --------
    >>> import dataclasses
    >>> from typeschema import generate_schema
    >>>
    >>> @dataclasses.dataclass
    ... class Duck:
    ...     color: str
    ...
    >>> generate_schema(Duck) is generate_schema(Duck)
    True
    """
    config = Configuration() if config is None else config
    key = (root, config)
    if not _ishashable(key):
        return SchemaGenerator(config).generate(root)
    with _LOCK:
        if key in _CACHE:
            return _CACHE[key]
    document = SchemaGenerator(config).generate(root)
    with _LOCK:
        return _CACHE.setdefault(key, document)


def clear_cache() -> None:
    """Drop every document cached by :py:func:`generate_schema`."""
    with _LOCK:
        _CACHE.clear()
