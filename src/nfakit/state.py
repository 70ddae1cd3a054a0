"""State identity for automata.

A state is a small immutable integer handle. Ids are dense and zero-based:
an automaton with ``n`` states owns exactly the ids ``0 .. n-1``, and state 0
is always the start state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class State:
    """Immutable handle of an automaton state.

    Attributes:
        id: Zero-based state number, assigned at creation and never reused.

    Example:
        ```python
        s = State(2)
        s.shifted(3)   # State(id=5)
        int(s)         # 2
        ```
    """

    id: int

    def __post_init__(self) -> None:
        if not isinstance(self.id, int) or isinstance(self.id, bool) or self.id < 0:
            raise ValueError(f"State id must be a non-negative int, got {self.id!r}")

    def __int__(self) -> int:
        return self.id

    def __index__(self) -> int:
        return self.id

    def __str__(self) -> str:
        return f"#{self.id}"

    def shifted(self, offset: int) -> State:
        """Return the state whose id is this id plus ``offset``."""
        return State(self.id + offset)
