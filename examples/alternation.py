"""Assemble ``(cat|car)s?`` from fragments, the way a pattern compiler would.

Each literal becomes a small chain automaton; ``Automaton.add`` splices the
chains into one automaton and epsilon transitions wire them together.

Usage:
    python examples/alternation.py
"""

import logging

from nfakit import EPSILON, Automaton


def literal(word: str) -> Automaton:
    """Chain automaton accepting exactly ``word``; its last state is marked ``END``."""
    automaton = Automaton(name=word)
    previous = automaton.new_state()
    for char in word:
        state = automaton.new_state()
        automaton.new_transition(previous, state, char)
        previous = state
    automaton.mark_state(previous, "END")
    return automaton


def build() -> Automaton:
    automaton = Automaton(name="(cat|car)s?")
    start = automaton.new_state()
    join = automaton.new_state()
    for word in ("cat", "car"):
        entry = automaton.add(literal(word))
        automaton.new_transition(start, entry, EPSILON)
        # The chain's END state is its last one
        end = automaton.num_states - 1
        automaton.new_transition(end, join, EPSILON)
    plural = automaton.new_state()
    automaton.new_transition(join, plural, "s")
    # Chain END markers are internal to the literals
    automaton.drop_markers()
    automaton.mark_state(join, "SINGULAR")
    automaton.mark_state(plural, "PLURAL")
    automaton.reset()
    return automaton


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    automaton = build()
    print(automaton)
    for text in ("cat", "cars", "cab", "carss"):
        automaton.reset()
        result = automaton.feed(text)
        print(f"{text!r:8} accepted={result.accepted} markers={sorted(result.markers)}")


if __name__ == "__main__":
    main()
