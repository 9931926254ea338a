from __future__ import annotations

import collections
import dataclasses
from typing import Dict, Hashable, Iterator, Optional

from typeschema.classes import slotted
from typeschema.schema.field import ObjectSchemaField

__all__ = ("Definition", "DefinitionsTable")


@slotted(dict=False, weakref=True)
@dataclasses.dataclass
class Definition:
    """A single entry in the definitions table.

    An entry without a node is a placeholder: its type is still being built.
    """

    signature: Hashable
    basename: str
    node: Optional[ObjectSchemaField] = None
    references: int = 0
    recursive: bool = False
    root: bool = False

    @property
    def placeholder(self) -> bool:
        return self.node is None


class DefinitionsTable:
    """The definitions of a single generation call, keyed by structural signature.

    Entries are kept in insertion order. A placeholder is reserved *before*
    recursing into a type's members, so a type which (transitively) refers to
    itself finds its own placeholder and becomes a reference instead of recursing
    forever.

    Final names are resolved on read: when distinct signatures share a base name,
    each gets a numeric suffix (`Name-1`, `Name-2`, ...).
    """

    __slots__ = ("_entries",)

    def __init__(self):
        self._entries: Dict[Hashable, Definition] = {}

    def __contains__(self, signature: Hashable) -> bool:
        return signature in self._entries

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({[*self.names().values()]!r})"

    def get(self, signature: Hashable) -> Optional[Definition]:
        return self._entries.get(signature)

    def __getitem__(self, signature: Hashable) -> Definition:
        return self._entries[signature]

    def reserve(
        self, signature: Hashable, basename: str, *, root: bool = False
    ) -> Definition:
        """Reserve a placeholder for a type which is about to be built."""
        if signature in self._entries:
            raise KeyError(f"{basename!r} ({signature!r}) is already defined.")
        entry = Definition(signature=signature, basename=basename, root=root)
        self._entries[signature] = entry
        return entry

    def fill(self, signature: Hashable, node: ObjectSchemaField) -> Definition:
        """Replace a placeholder with the finished node."""
        entry = self._entries[signature]
        entry.node = node
        return entry

    def reference(self, signature: Hashable) -> Definition:
        """Count a reference to an entry.

        Referencing a placeholder means the type refers back to itself.
        """
        entry = self._entries[signature]
        entry.references += 1
        if entry.placeholder:
            entry.recursive = True
        return entry

    def names(self) -> Dict[Hashable, str]:
        """Resolve the final, unique name for every entry."""
        bybase: Dict[str, list[Hashable]] = collections.defaultdict(list)
        for signature, entry in self._entries.items():
            bybase[entry.basename].append(signature)
        names: Dict[Hashable, str] = {}
        for basename, signatures in bybase.items():
            if len(signatures) == 1:
                names[signatures[0]] = basename
                continue
            for i, signature in enumerate(signatures, start=1):
                names[signature] = f"{basename}-{i}"
        return {s: names[s] for s in self._entries}

    def name_for(self, signature: Hashable) -> str:
        return self.names()[signature]

    def root(self) -> Optional[Definition]:
        return next((e for e in self._entries.values() if e.root), None)
