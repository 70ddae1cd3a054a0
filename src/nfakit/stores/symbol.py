"""Transition store matching input values by equality."""

from typing import Any, Dict, Hashable, Iterable, List

from nfakit.state import State
from nfakit.stores.base import ITransitionStore


class SymbolTransitionStore(ITransitionStore):
    """Store whose predicates are hashable symbols.

    A predicate matches an input value when the two are equal. Lookups go
    through a hash index, so stepping costs one dictionary access per active
    state. Predicates and input values must therefore be hashable; querying
    an unhashable value such as a list raises ``TypeError``.

    Example:
        ```python
        store = SymbolTransitionStore()
        store.put("a", State(1))
        store.put("a", State(2))
        list(store.query("a"))  # [State(id=1), State(id=2)]
        list(store.query("b"))  # []
        ```
    """

    kind = "symbol"

    def __init__(self) -> None:
        super().__init__()
        self._by_symbol: Dict[Hashable, List[State]] = {}

    def _index(self, predicate: Any, target: State) -> None:
        self._by_symbol.setdefault(predicate, []).append(target)

    def _lookup(self, value: Any) -> Iterable[State]:
        return tuple(self._by_symbol.get(value, ()))

    def symbols(self) -> List[Hashable]:
        """Return the distinct symbols that lead somewhere, in insertion order."""
        return list(self._by_symbol)
