"""Configuration module for declarative automaton definitions."""

from nfakit.config.builder import AutomatonBuilder, load_automaton
from nfakit.config.loader import ConfigLoader
from nfakit.config.schema import AutomatonConfig, FragmentConfig, StateConfig, TransitionConfig

__all__ = [
    "AutomatonBuilder",
    "AutomatonConfig",
    "ConfigLoader",
    "FragmentConfig",
    "StateConfig",
    "TransitionConfig",
    "load_automaton",
]
