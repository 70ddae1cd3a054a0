"""Configuration schema for automaton definitions using Pydantic.

An automaton definition lists its states (with their markers), its
transitions, and optionally fragments: nested definitions that are composed
into the automaton and linked to it with an epsilon transition.
"""

from __future__ import annotations

from typing import Any, Hashable, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class StateConfig(BaseModel):
    """Configuration for one state."""

    id: int = Field(ge=0)
    markers: List[Hashable] = Field(default_factory=list)


class TransitionConfig(BaseModel):
    """Configuration for one transition.

    Exactly one of ``guard`` and ``epsilon: true`` must be given. The
    endpoints may be written ``from``/``to`` or ``source``/``target``.
    """

    model_config = ConfigDict(populate_by_name=True)

    source: int = Field(ge=0, alias="from")
    target: int = Field(ge=0, alias="to")
    guard: Any = None
    epsilon: bool = False

    @model_validator(mode="after")
    def validate_guard(self) -> TransitionConfig:
        """Validate that the transition has exactly one kind of guard."""
        if self.epsilon and self.guard is not None:
            raise ValueError(
                f"Transition {self.source}->{self.target} has both a guard and epsilon"
            )
        if not self.epsilon and self.guard is None:
            raise ValueError(
                f"Transition {self.source}->{self.target} needs a guard or 'epsilon: true'"
            )
        return self


class FragmentConfig(BaseModel):
    """A nested automaton composed into its parent."""

    name: str | None = None
    link_from: int | None = Field(default=None, ge=0)
    automaton: AutomatonConfig


class AutomatonConfig(BaseModel):
    """Complete automaton definition."""

    name: str = "automaton"
    description: str | None = None
    store: str | None = None
    states: List[StateConfig] = Field(default_factory=list)
    transitions: List[TransitionConfig] = Field(default_factory=list)
    fragments: List[FragmentConfig] = Field(default_factory=list)

    @field_validator("states")
    @classmethod
    def validate_dense_ids(cls, states: List[StateConfig]) -> List[StateConfig]:
        """Validate that state ids are 0, 1, 2, ... in order."""
        for expected, state in enumerate(states):
            if state.id != expected:
                raise ValueError(
                    f"State ids must be dense and ordered: expected {expected}, got {state.id}"
                )
        return states

    @model_validator(mode="after")
    def validate_references(self) -> AutomatonConfig:
        """Validate that transitions and fragment links name declared states."""
        num_states = len(self.states)
        for transition in self.transitions:
            for endpoint in (transition.source, transition.target):
                if endpoint >= num_states:
                    raise ValueError(
                        f"Transition {transition.source}->{transition.target} references "
                        f"undeclared state {endpoint}"
                    )
        for fragment in self.fragments:
            if fragment.link_from is not None and fragment.link_from >= num_states:
                raise ValueError(
                    f"Fragment {fragment.name!r} links from undeclared state {fragment.link_from}"
                )
            child_store = fragment.automaton.store
            if child_store is not None and self.store is not None and child_store != self.store:
                raise ValueError(
                    f"Fragment {fragment.name!r} uses store {child_store!r}, "
                    f"parent uses {self.store!r}"
                )
        return self


FragmentConfig.model_rebuild()


def validate_config(config: dict[str, Any]) -> AutomatonConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If the dictionary violates the schema.
    """
    return AutomatonConfig.model_validate(config)
