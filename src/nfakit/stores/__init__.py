"""Predicate transition stores.

The automaton engine depends only on ``ITransitionStore`` and on a factory
producing empty stores. The concrete stores here cover the common predicate
representations.
"""

from nfakit.stores.base import ITransitionStore, StoreFactory, TransitionStoreFactory
from nfakit.stores.callables import CallableTransitionStore
from nfakit.stores.ranges import CharRange, RangeTransitionStore
from nfakit.stores.registry import StoreRegistry, store_registry
from nfakit.stores.symbol import SymbolTransitionStore

__all__ = [
    "CallableTransitionStore",
    "CharRange",
    "ITransitionStore",
    "RangeTransitionStore",
    "StoreFactory",
    "StoreRegistry",
    "SymbolTransitionStore",
    "TransitionStoreFactory",
    "store_registry",
]
