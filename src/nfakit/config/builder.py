"""Automaton builder for constructing automata from configuration.

The builder turns a validated ``AutomatonConfig`` into an ``Automaton``:
- Store kind resolution through the store registry
- State and marker creation
- Predicate parsing by the store class
- Fragment composition and linking
"""

import logging
from pathlib import Path
from typing import Union

from nfakit.automaton import Automaton
from nfakit.config.loader import ConfigLoader
from nfakit.config.schema import AutomatonConfig, FragmentConfig
from nfakit.exceptions import ConfigurationError, NfaError
from nfakit.guards import EPSILON, Predicate
from nfakit.state import State
from nfakit.stores.registry import StoreRegistry, store_registry

logger = logging.getLogger(__name__)

DEFAULT_STORE = "symbol"


class AutomatonBuilder:
    """Build Automaton instances from configuration."""

    def __init__(self, registry: StoreRegistry | None = None):
        """Initialize the AutomatonBuilder.

        Args:
            registry: Store registry used to resolve store kinds. Defaults to
                the package-wide registry.
        """
        self._registry = registry if registry is not None else store_registry

    def build(self, config: AutomatonConfig) -> Automaton:
        """Build an automaton from configuration.

        The returned automaton has been reset, so its frontier is the
        epsilon-closure of state 0.

        Args:
            config: Automaton configuration.

        Returns:
            The automaton.

        Raises:
            ConfigurationError: If the store kind is unknown or a predicate
                cannot be parsed.
        """
        automaton = self._build(config, config.store or DEFAULT_STORE)
        automaton.reset()
        logger.info(
            "Built automaton %r: %d states, %d marked",
            automaton.name, automaton.num_states, len(automaton.get_marked()),
        )
        return automaton

    def _build(self, config: AutomatonConfig, kind: str) -> Automaton:
        store_cls = self._registry.get(kind)
        automaton = Automaton(self._registry.factory(kind), name=config.name)

        for state_config in config.states:
            state = automaton.new_state()
            for marker in state_config.markers:
                automaton.mark_state(state, marker)

        for transition in config.transitions:
            if transition.epsilon:
                guard = EPSILON
            else:
                try:
                    guard = Predicate(store_cls.parse_predicate(transition.guard))
                except NfaError as e:
                    raise ConfigurationError(
                        f"Invalid guard on transition {transition.source}->{transition.target} "
                        f"of {config.name!r}: {e}",
                        context={"automaton": config.name, "guard": transition.guard},
                    ) from e
            automaton.new_transition(State(transition.source), State(transition.target), guard)

        for fragment in config.fragments:
            self._add_fragment(automaton, fragment, kind)

        return automaton

    def _add_fragment(self, automaton: Automaton, fragment: FragmentConfig, kind: str) -> None:
        if fragment.automaton.store not in (None, kind):
            raise ConfigurationError(
                f"Fragment {fragment.name!r} uses store {fragment.automaton.store!r}, "
                f"parent uses {kind!r}",
                context={"fragment": fragment.name, "store": fragment.automaton.store},
            )
        sub = self._build(fragment.automaton, kind)
        entry = automaton.add(sub)
        if entry is None:
            logger.debug("Fragment %r has no states; skipped", fragment.name)
            return
        if fragment.link_from is not None:
            automaton.new_transition(State(fragment.link_from), entry, EPSILON)
        logger.debug("Added fragment %r with entry %s", fragment.name, entry)


def load_automaton(file_path: Union[str, Path], resolve_env: bool = True) -> Automaton:
    """Load a definition file and build its automaton."""
    config = ConfigLoader().load_from_file(file_path, resolve_env=resolve_env)
    return AutomatonBuilder().build(config)
