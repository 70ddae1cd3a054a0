"""Base interfaces for predicate transition stores.

A transition store holds the outgoing edges of one state: a multi-map from
guards to destination states. The automaton engine never looks inside a
predicate; it only records edges, asks a store for the destinations whose
predicate matches an input value, and merges stores during composition.

The base class keeps the epsilon edges and the ordered edge list itself, so
concrete stores only decide how predicates are indexed and matched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, List, Protocol, Tuple, Type

from nfakit.guards import EPSILON, Guard, Predicate, as_guard
from nfakit.state import State


class ITransitionStore(ABC):
    """Interface for the outgoing edges of a single state.

    Subclasses implement ``_index`` and ``_lookup`` for their predicate
    representation. Recording the same ``(guard, target)`` pair twice is a
    no-op, otherwise the store behaves as a multi-map.

    Attributes:
        kind: Registry name of the store class.
    """

    kind: ClassVar[str] = ""

    def __init__(self) -> None:
        self._edges: Dict[Tuple[Guard, State], None] = {}
        self._epsilon: List[State] = []

    def put(self, guard: Any, target: State) -> None:
        """Record an edge to ``target`` guarded by ``guard``.

        Args:
            guard: ``EPSILON``, a ``Predicate`` or a bare predicate value.
            target: Destination state.
        """
        guard = as_guard(guard)
        if guard is not EPSILON:
            guard = Predicate(self.coerce_predicate(guard.value))
        key = (guard, target)
        if key in self._edges:
            return
        if guard is EPSILON:
            self._epsilon.append(target)
        else:
            self._index(guard.value, target)
        self._edges[key] = None

    def query(self, value: Any) -> Iterable[State]:
        """Return every destination whose predicate matches ``value``.

        ``query(EPSILON)`` returns the destinations of the epsilon edges.
        """
        if value is EPSILON:
            return tuple(self._epsilon)
        return self._lookup(value)

    def merge(self, other: ITransitionStore, relabel: Callable[[State], State]) -> None:
        """Copy every edge of ``other`` into this store.

        Args:
            other: Store whose edges are copied.
            relabel: Applied to each destination before it is recorded.
        """
        for guard, target in other.items():
            self.put(guard, relabel(target))

    def items(self) -> Iterator[Tuple[Guard, State]]:
        """Iterate over the stored ``(guard, target)`` pairs in insertion order."""
        return iter(list(self._edges))

    def __iter__(self) -> Iterator[Tuple[Guard, State]]:
        return self.items()

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        edges = ", ".join(
            f"{self.format_guard(guard)}>{target.id}" for guard, target in self._edges
        )
        return f"{type(self).__name__}({edges})"

    def format_guard(self, guard: Guard) -> str:
        """Render a guard for debug output: ``eps`` or the quoted predicate."""
        if guard is EPSILON:
            return "eps"
        return f"'{self.format_predicate(guard.value)}'"

    @abstractmethod
    def _index(self, predicate: Any, target: State) -> None:
        """Index a predicate edge for lookups."""
        pass

    @abstractmethod
    def _lookup(self, value: Any) -> Iterable[State]:
        """Return the destinations of every predicate matching ``value``."""
        pass

    @classmethod
    def coerce_predicate(cls, predicate: Any) -> Any:
        """Normalize a predicate before it is recorded."""
        return predicate

    @classmethod
    def format_predicate(cls, predicate: Any) -> str:
        """Return the debug text of a predicate."""
        return str(predicate)

    @classmethod
    def parse_predicate(cls, raw: Any) -> Any:
        """Convert a predicate read from a configuration file."""
        return raw

    @classmethod
    def dump_predicate(cls, predicate: Any) -> Any:
        """Convert a predicate to a configuration value."""
        return predicate


class TransitionStoreFactory(Protocol):
    """Anything that can produce an empty transition store."""

    def empty(self) -> ITransitionStore:
        ...


class StoreFactory:
    """Factory producing empty stores of one class.

    Example:
        ```python
        factory = StoreFactory(SymbolTransitionStore)
        store = factory.empty()
        factory.kind  # "symbol"
        ```
    """

    def __init__(self, store_cls: Type[ITransitionStore]):
        self.store_cls = store_cls

    @property
    def kind(self) -> str:
        return self.store_cls.kind

    def empty(self) -> ITransitionStore:
        return self.store_cls()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StoreFactory):
            return False
        return self.store_cls is other.store_cls

    def __hash__(self) -> int:
        return hash(self.store_cls)

    def __repr__(self) -> str:
        return f"StoreFactory({self.store_cls.__name__})"


__all__ = [
    "ITransitionStore",
    "StoreFactory",
    "TransitionStoreFactory",
]
