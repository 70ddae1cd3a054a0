"""Transition store whose predicates are arbitrary callables."""

from typing import Any, Callable, Iterable, List, Tuple

from nfakit.exceptions import ConfigurationError, SerializationError, ValidationError
from nfakit.state import State
from nfakit.stores.base import ITransitionStore

PredicateFn = Callable[[Any], bool]


class CallableTransitionStore(ITransitionStore):
    """Store whose predicates are functions of the input value.

    Every predicate is called on every lookup, which makes this the most
    flexible and the slowest store. Callables cannot be written to a
    configuration file.

    Example:
        ```python
        store = CallableTransitionStore()
        store.put(str.isdigit, State(1))
        list(store.query("7"))  # [State(id=1)]
        ```
    """

    kind = "callable"

    def __init__(self) -> None:
        super().__init__()
        self._predicates: List[Tuple[PredicateFn, State]] = []

    def _index(self, predicate: Any, target: State) -> None:
        self._predicates.append((predicate, target))

    @classmethod
    def coerce_predicate(cls, predicate: Any) -> PredicateFn:
        if not callable(predicate):
            raise ValidationError(
                f"Predicate must be callable, got {type(predicate).__name__}",
                context={"store": cls.kind},
            )
        return predicate

    def _lookup(self, value: Any) -> Iterable[State]:
        return tuple(target for fn, target in self._predicates if fn(value))

    @classmethod
    def format_predicate(cls, predicate: Any) -> str:
        return getattr(predicate, "__name__", repr(predicate))

    @classmethod
    def parse_predicate(cls, raw: Any) -> Any:
        raise ConfigurationError(
            "Callable predicates cannot be read from configuration",
            context={"store": cls.kind, "predicate": raw},
        )

    @classmethod
    def dump_predicate(cls, predicate: Any) -> Any:
        raise SerializationError(
            "Callable predicates cannot be dumped",
            context={"store": cls.kind, "predicate": cls.format_predicate(predicate)},
        )
