from .frozendict import FrozenDict, freeze

__all__ = ("FrozenDict", "freeze")
