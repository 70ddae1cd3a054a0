"""Nondeterministic finite automaton runtime.

This module provides the ``Automaton`` class, which stores states,
predicate-guarded transitions and accept markers, and simulates all live
branches in parallel. The simulation frontier (the set of active states) is
kept closed under epsilon transitions, so reading the markers of the active
states after each step tells whether the input consumed so far is accepted.

Automata are built incrementally with ``new_state``, ``new_transition`` and
``mark_state``; larger automata are assembled from smaller ones with ``add``,
which splices another automaton in as a fresh block of states.

Typical usage example:

    ```python
    from nfakit import EPSILON, Automaton

    automaton = Automaton()
    start = automaton.new_state()
    end = automaton.new_state()
    automaton.new_transition(start, end, "a")
    automaton.mark_state(end, "ACCEPT")

    automaton.reset()
    automaton.step("a")          # True
    automaton.get_markers()      # frozenset({'ACCEPT'})
    automaton.step("b")          # False, frontier unchanged
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Iterator, List, Set, Tuple

import graphviz

from nfakit.exceptions import (
    CompositionError,
    SerializationError,
    UnknownStateError,
    ValidationError,
)
from nfakit.guards import EPSILON, Guard, as_guard
from nfakit.state import State
from nfakit.stores.base import ITransitionStore, StoreFactory, TransitionStoreFactory
from nfakit.stores.symbol import SymbolTransitionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedResult:
    """Outcome of feeding a sequence of values to an automaton.

    Attributes:
        consumed: Number of values accepted by ``step`` before the first
            rejection (or all of them).
        completed: True if every value was consumed.
        markers: Markers of the frontier after the last successful step.
    """

    consumed: int
    completed: bool
    markers: FrozenSet[Hashable]

    @property
    def accepted(self) -> bool:
        """True if the whole input was consumed and the frontier is accepting."""
        return self.completed and bool(self.markers)


class Automaton:
    """A nondeterministic finite automaton with parallel simulation.

    States are dense integer handles starting at 0, the start state. Each
    state owns one transition store, produced by the injected factory, and
    one set of markers; a state with markers is an accept state.

    The set of active states is epsilon-closed after ``reset``, ``step``,
    ``set_active_states`` and every epsilon ``new_transition``. ``add`` is
    the one exception: it copies the other automaton's active states without
    closing the merged set.

    Getters return copies; all mutation goes through the methods of this
    class.

    Attributes:
        name: Label used in debug output and serialized definitions.

    Example:
        ```python
        automaton = Automaton(name="cycle")
        s0 = automaton.new_state()
        s1 = automaton.new_state()
        automaton.new_transition(s0, s1, EPSILON)
        automaton.new_transition(s1, s0, EPSILON)
        automaton.reset()
        automaton.get_active_states()  # frozenset({State(id=0), State(id=1)})
        ```
    """

    def __init__(
        self,
        factory: TransitionStoreFactory | None = None,
        name: str = "automaton",
    ):
        """Create an automaton without states.

        Args:
            factory: Produces the empty transition store of each new state.
                Defaults to a ``SymbolTransitionStore`` factory.
            name: Label of the automaton.
        """
        self.name = name
        self._factory = factory if factory is not None else StoreFactory(SymbolTransitionStore)
        self._transitions: List[ITransitionStore] = []
        self._markers: List[Set[Hashable]] = []
        self._active: Set[State] = set()
        self.reset()

    def __len__(self) -> int:
        return len(self._transitions)

    def __str__(self) -> str:
        return self.to_debug_string()

    def __repr__(self) -> str:
        active = ",".join(str(state.id) for state in sorted(self._active))
        return f"Automaton(name={self.name!r}, states={self.num_states}, active=[{active}])"

    @property
    def num_states(self) -> int:
        """Number of states; valid ids are ``0 .. num_states - 1``."""
        return len(self._transitions)

    @property
    def factory(self) -> TransitionStoreFactory:
        """The factory producing this automaton's transition stores."""
        return self._factory

    def states(self) -> Iterator[State]:
        """Iterate over all states in id order."""
        return (State(idx) for idx in range(self.num_states))

    # Construction

    def new_state(self) -> State:
        """Create the next state and return it.

        The first state created (state 0) becomes active immediately.
        """
        state = State(self.num_states)
        self._transitions.append(self._factory.empty())
        self._markers.append(set())
        if state.id == 0:
            self._active.add(state)
        return state

    def new_transition(self, source: State | int, target: State | int, guard: Any) -> None:
        """Add a transition from ``source`` to ``target``.

        An epsilon transition re-closes the active set at once, so an edge
        leaving an already active state takes effect immediately. Other
        transitions leave the active set alone.

        Args:
            source: Origin state.
            target: Destination state.
            guard: ``EPSILON``, a ``Predicate`` or a bare predicate value.

        Raises:
            UnknownStateError: If either state does not exist.
            ValidationError: If ``guard`` is None.
        """
        source = self._resolve(source)
        target = self._resolve(target)
        guard = as_guard(guard)
        self._transitions[source.id].put(guard, target)
        if guard is EPSILON:
            self._close(self._active)

    def mark_state(self, state: State | int, marker: Hashable) -> None:
        """Make ``state`` an accept state labelled with ``marker``."""
        self._markers[self._resolve(state).id].add(marker)

    def add(self, other: Automaton) -> State | None:
        """Splice ``other`` into this automaton as a block of new states.

        Every state ``i`` of ``other`` becomes state ``offset + i`` here, where
        ``offset`` is the number of states before the call. Transitions,
        markers and active states are copied with that renumbering. The
        merged active set is not epsilon-closed by this call; close it with
        ``set_active_states`` or ``reset`` once the block is wired in.

        Args:
            other: Automaton to copy. It is not modified.

        Returns:
            The state corresponding to state 0 of ``other``, i.e. the entry
            point to connect with an epsilon transition, or None if ``other``
            has no states.

        Raises:
            CompositionError: If ``other`` is this automaton or uses a
                different transition store factory.
        """
        if other is self:
            raise CompositionError(
                "Cannot compose an automaton with itself",
                context={"name": self.name, "num_states": self.num_states},
            )
        if other.factory != self._factory:
            raise CompositionError(
                f"Cannot compose {other.name!r} into {self.name!r}: "
                f"store factories differ ({other.factory!r} vs {self._factory!r})",
                context={
                    "name": self.name,
                    "other": other.name,
                    "factory": repr(self._factory),
                    "other_factory": repr(other.factory),
                },
            )
        if other.num_states == 0:
            return None

        offset = self.num_states
        entry = self.new_state()
        for _ in range(1, other.num_states):
            self.new_state()

        def relabel(state: State) -> State:
            return state.shifted(offset)

        self._active.update(relabel(state) for state in other._active)
        for idx, store in enumerate(other._transitions):
            self._transitions[offset + idx].merge(store, relabel)
        for idx, markers in enumerate(other._markers):
            self._markers[offset + idx].update(markers)

        logger.debug(
            "Composed %r (%d states) into %r at offset %d",
            other.name, other.num_states, self.name, offset,
        )
        return entry

    # Simulation

    def reset(self) -> None:
        """Restart the simulation from the epsilon-closure of state 0."""
        self._active.clear()
        if self.num_states > 0:
            self._active.add(State(0))
            self._close(self._active)

    def step(self, value: Any) -> bool:
        """Advance every active branch by one input value.

        Args:
            value: The input symbol.

        Returns:
            True if at least one active state has a matching transition, in
            which case the frontier becomes the epsilon-closure of all
            destinations. False otherwise, with the frontier unchanged.

        Raises:
            ValidationError: If ``value`` is ``EPSILON``, which is a guard and
                never an input symbol.
        """
        if value is EPSILON:
            raise ValidationError("EPSILON is not an input value", context={"value": value})
        following: Set[State] = set()
        for source in self._active:
            following.update(self._transitions[source.id].query(value))
        if not following:
            logger.debug("No transition on %r from %d active states", value, len(self._active))
            return False
        self._active = self._close(following)
        return True

    def get_markers(self) -> FrozenSet[Hashable]:
        """Return the union of the markers of all active states."""
        markers: Set[Hashable] = set()
        for state in self._active:
            markers.update(self._markers[state.id])
        return frozenset(markers)

    def feed(self, values: Iterable[Any]) -> FeedResult:
        """Step through ``values`` from the current frontier.

        Stops at the first value no active state can consume.
        """
        consumed = 0
        for value in values:
            if not self.step(value):
                return FeedResult(consumed, False, self.get_markers())
            consumed += 1
        return FeedResult(consumed, True, self.get_markers())

    def accepts(self, values: Iterable[Any]) -> bool:
        """Reset, feed ``values``, and tell whether the whole input is accepted."""
        self.reset()
        return self.feed(values).accepted

    def epsilon_closure(self, states: Iterable[State | int]) -> FrozenSet[State]:
        """Return the states reachable from ``states`` by epsilon transitions.

        The given states are included. The frontier is not modified.
        """
        return frozenset(self._close({self._resolve(state) for state in states}))

    def _close(self, states: Set[State]) -> Set[State]:
        # Only states discovered in the previous round are scanned, so each
        # state is expanded at most once even on epsilon cycles.
        suspects = set(states)
        while suspects:
            discovered: Set[State] = set()
            for source in suspects:
                for target in self._transitions[source.id].query(EPSILON):
                    if target not in states:
                        discovered.add(target)
            states.update(discovered)
            suspects = discovered
        return states

    # Introspection

    def get_active_states(self) -> FrozenSet[State]:
        """Return the current frontier."""
        return frozenset(self._active)

    def set_active_states(self, states: Iterable[State | int]) -> None:
        """Replace the frontier with the epsilon-closure of ``states``.

        Raises:
            UnknownStateError: If any state does not exist.
        """
        active = {self._resolve(state) for state in states}
        self._active = self._close(active)

    def get_active_transitions(self) -> ITransitionStore:
        """Return one store combining the transitions of every active state."""
        combined = self._factory.empty()
        for state in sorted(self._active):
            combined.merge(self._transitions[state.id], lambda target: target)
        return combined

    def get_marked(self) -> FrozenSet[State]:
        """Return every state that carries at least one marker."""
        return frozenset(State(idx) for idx, markers in enumerate(self._markers) if markers)

    def drop_markers(self) -> None:
        """Remove all markers; transitions and the frontier are untouched."""
        for markers in self._markers:
            markers.clear()

    def markers_of(self, state: State | int) -> FrozenSet[Hashable]:
        return frozenset(self._markers[self._resolve(state).id])

    def transitions_of(self, state: State | int) -> List[Tuple[Guard, State]]:
        return list(self._transitions[self._resolve(state).id].items())

    def _resolve(self, state: State | int) -> State:
        if not isinstance(state, State):
            if isinstance(state, int) and not isinstance(state, bool) and state < 0:
                raise UnknownStateError(state, self.num_states)
            state = State(state)
        if state.id >= self.num_states:
            raise UnknownStateError(state.id, self.num_states)
        return state

    # Serialization

    def to_debug_string(self) -> str:
        """Render every state on one line.

        The format is ``#<id>[:<marker>[,<marker>]*]:`` followed by one
        `` '<predicate>'><dest>`` or `` eps><dest>`` token per outgoing edge.
        Markers are sorted by their text, edges keep insertion order.
        """
        lines = []
        for state in self.states():
            store = self._transitions[state.id]
            line = f"#{state.id}"
            markers = self._sorted_markers(state)
            if markers:
                line += ":" + ",".join(str(marker) for marker in markers)
            line += ":"
            for guard, target in store.items():
                line += f" {store.format_guard(guard)}>{target.id}"
            lines.append(line + "\n")
        return "".join(lines)

    def build_dot(self, **kwargs: Any) -> graphviz.Digraph:
        """Build a Graphviz Digraph of this automaton.

        Accept states are drawn as double circles labelled with their
        markers, active states are filled, and epsilon edges are labelled
        ``ε``.

        Args:
            **kwargs: Passed to the ``graphviz.Digraph`` constructor (e.g.
                name, format, graph_attr).

        Returns:
            The graph; ``dot.source`` holds the DOT text.

        Note:
            Rendering to an image requires the Graphviz system binaries;
            building the source does not.
        """
        kwargs.setdefault("name", self.name)
        dot = graphviz.Digraph(**kwargs)
        dot.attr(rankdir="LR")
        for state in self.states():
            attrs: Dict[str, str] = {"shape": "circle"}
            label = str(state.id)
            markers = self._sorted_markers(state)
            if markers:
                attrs["shape"] = "doublecircle"
                label += "\n" + ",".join(str(marker) for marker in markers)
            if state in self._active:
                attrs["style"] = "filled"
                attrs["fillcolor"] = "lightgrey"
            dot.node(f"S_{state.id:03}", label, **attrs)
        for state in self.states():
            store = self._transitions[state.id]
            for guard, target in store.items():
                label = "ε" if guard is EPSILON else store.format_predicate(guard.value)
                dot.edge(f"S_{state.id:03}", f"S_{target.id:03}", label=label)
        return dot

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dictionary form read by ``nfakit.config``.

        Raises:
            SerializationError: If the factory has no registered kind or a
                predicate cannot be dumped.
        """
        kind = getattr(self._factory, "kind", None)
        if not kind:
            raise SerializationError(
                "Transition store factory has no kind",
                context={"factory": repr(self._factory)},
            )
        states = []
        transitions = []
        for state in self.states():
            states.append({"id": state.id, "markers": self._sorted_markers(state)})
            store = self._transitions[state.id]
            for guard, target in store.items():
                entry: Dict[str, Any] = {"from": state.id, "to": target.id}
                if guard is EPSILON:
                    entry["epsilon"] = True
                else:
                    entry["guard"] = store.dump_predicate(guard.value)
                transitions.append(entry)
        return {
            "name": self.name,
            "store": kind,
            "states": states,
            "transitions": transitions,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Automaton:
        """Build an automaton from its dictionary form."""
        from nfakit.config.builder import AutomatonBuilder
        from nfakit.config.loader import ConfigLoader

        config = ConfigLoader().load_from_dict(data, resolve_env=False)
        return AutomatonBuilder().build(config)

    def _sorted_markers(self, state: State) -> List[Hashable]:
        return sorted(self._markers[state.id], key=str)
