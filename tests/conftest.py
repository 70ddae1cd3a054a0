"""Shared fixtures for nfakit tests."""

import pytest
import yaml

from nfakit import EPSILON, Automaton


@pytest.fixture
def ab_automaton():
    """Two states: 0 --a--> 1, with state 1 accepting as ACCEPT."""
    automaton = Automaton(name="ab")
    s0 = automaton.new_state()
    s1 = automaton.new_state()
    automaton.new_transition(s0, s1, "a")
    automaton.mark_state(s1, "ACCEPT")
    automaton.reset()
    return automaton


@pytest.fixture
def epsilon_cycle():
    """Two states joined by epsilon transitions in both directions."""
    automaton = Automaton(name="cycle")
    s0 = automaton.new_state()
    s1 = automaton.new_state()
    automaton.new_transition(s0, s1, EPSILON)
    automaton.new_transition(s1, s0, EPSILON)
    return automaton


@pytest.fixture
def a_b_star():
    """Accepts ``a`` followed by any number of ``b``: 0 -a-> 1 -eps-> 2 -b-> 1."""
    automaton = Automaton(name="ab*")
    s0, s1, s2 = automaton.new_state(), automaton.new_state(), automaton.new_state()
    automaton.new_transition(s0, s1, "a")
    automaton.new_transition(s1, s2, EPSILON)
    automaton.new_transition(s2, s1, "b")
    automaton.mark_state(s2, "AB*")
    automaton.reset()
    return automaton


@pytest.fixture
def sample_config():
    """Definition of an automaton accepting ``hi`` and ``ho``."""
    return {
        'name': 'greeting',
        'store': 'symbol',
        'states': [
            {'id': 0},
            {'id': 1},
            {'id': 2, 'markers': ['HI']},
            {'id': 3, 'markers': ['HO']},
        ],
        'transitions': [
            {'from': 0, 'to': 1, 'guard': 'h'},
            {'from': 1, 'to': 2, 'guard': 'i'},
            {'from': 1, 'to': 3, 'guard': 'o'},
        ],
    }


@pytest.fixture
def config_file(tmp_path, sample_config):
    """The sample definition written to a YAML file."""
    path = tmp_path / "greeting.yaml"
    path.write_text(yaml.safe_dump(sample_config))
    return path
