"""Tests for the automaton engine."""

import pytest

from nfakit import (
    EPSILON,
    Automaton,
    CallableTransitionStore,
    CharRange,
    CompositionError,
    Predicate,
    RangeTransitionStore,
    State,
    StoreFactory,
    UnknownStateError,
    ValidationError,
)


def make_chain(symbols, marker="END"):
    """Build a linear automaton accepting exactly ``symbols``."""
    automaton = Automaton(name="".join(symbols))
    previous = automaton.new_state()
    for symbol in symbols:
        state = automaton.new_state()
        automaton.new_transition(previous, state, symbol)
        previous = state
    automaton.mark_state(previous, marker)
    automaton.reset()
    return automaton


def edges(automaton):
    """All transitions as (source id, guard, target id) triples."""
    return {
        (state.id, guard, target.id)
        for state in automaton.states()
        for guard, target in automaton.transitions_of(state)
    }


class TestConstruction:
    """Tests for new_state, new_transition and mark_state."""

    def test_empty_automaton(self):
        automaton = Automaton()
        assert automaton.num_states == 0
        assert len(automaton) == 0
        assert automaton.get_active_states() == frozenset()
        assert automaton.get_markers() == frozenset()
        assert automaton.to_debug_string() == ""

    def test_states_are_dense_from_zero(self):
        automaton = Automaton()
        states = [automaton.new_state() for _ in range(4)]
        assert states == [State(0), State(1), State(2), State(3)]
        assert list(automaton.states()) == states
        assert automaton.num_states == 4

    def test_first_state_is_active(self):
        automaton = Automaton()
        automaton.new_state()
        assert automaton.get_active_states() == {State(0)}
        automaton.new_state()
        assert automaton.get_active_states() == {State(0)}

    def test_new_states_have_empty_tables(self):
        automaton = Automaton()
        state = automaton.new_state()
        assert automaton.transitions_of(state) == []
        assert automaton.markers_of(state) == frozenset()

    def test_epsilon_transition_closes_active_set(self):
        automaton = Automaton()
        s0, s1, s2 = automaton.new_state(), automaton.new_state(), automaton.new_state()
        automaton.new_transition(s1, s2, EPSILON)
        assert automaton.get_active_states() == {s0}
        automaton.new_transition(s0, s1, EPSILON)
        assert automaton.get_active_states() == {s0, s1, s2}

    def test_predicate_transition_leaves_active_set(self):
        automaton = Automaton()
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, "a")
        assert automaton.get_active_states() == {s0}

    def test_transition_guards(self):
        automaton = Automaton()
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, "a")
        automaton.new_transition(s0, s1, Predicate("b"))
        automaton.new_transition(s0, s1, EPSILON)
        assert automaton.transitions_of(s0) == [
            (Predicate("a"), s1),
            (Predicate("b"), s1),
            (EPSILON, s1),
        ]

    def test_none_guard_rejected(self):
        automaton = Automaton()
        s0 = automaton.new_state()
        with pytest.raises(ValidationError):
            automaton.new_transition(s0, s0, None)

    def test_int_state_arguments(self):
        automaton = Automaton()
        automaton.new_state()
        automaton.new_state()
        automaton.new_transition(0, 1, "a")
        automaton.mark_state(1, "M")
        assert automaton.transitions_of(0) == [(Predicate("a"), State(1))]
        assert automaton.markers_of(State(1)) == {"M"}

    def test_mark_state_is_a_set(self):
        automaton = Automaton()
        state = automaton.new_state()
        automaton.mark_state(state, "A")
        automaton.mark_state(state, "A")
        automaton.mark_state(state, "B")
        assert automaton.markers_of(state) == {"A", "B"}

    def test_unknown_states(self):
        automaton = Automaton()
        automaton.new_state()
        with pytest.raises(UnknownStateError) as exc_info:
            automaton.new_transition(State(0), State(5), "a")
        assert exc_info.value.state_id == 5
        assert exc_info.value.context == {"state_id": 5, "num_states": 1}
        with pytest.raises(UnknownStateError):
            automaton.mark_state(State(1), "A")
        with pytest.raises(UnknownStateError):
            automaton.set_active_states([State(3)])
        with pytest.raises(UnknownStateError) as exc_info:
            automaton.mark_state(-1, "A")
        assert exc_info.value.state_id == -1
        with pytest.raises(UnknownStateError):
            automaton.new_transition(0, -2, "a")
        with pytest.raises(UnknownStateError):
            automaton.markers_of(-1)

    def test_custom_factory(self):
        automaton = Automaton(StoreFactory(RangeTransitionStore))
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, "a-z")
        automaton.mark_state(s1, "WORD")
        assert automaton.accepts("q")
        assert not automaton.accepts("Q")
        assert automaton.factory == StoreFactory(RangeTransitionStore)


class TestEpsilonClosure:
    """Tests for epsilon-closure."""

    def test_cycle_terminates(self, epsilon_cycle):
        assert epsilon_cycle.epsilon_closure([State(0)]) == {State(0), State(1)}

    def test_reset_on_cycle(self, epsilon_cycle):
        epsilon_cycle.reset()
        assert epsilon_cycle.get_active_states() == {State(0), State(1)}

    def test_idempotent(self):
        automaton = Automaton()
        states = [automaton.new_state() for _ in range(5)]
        automaton.new_transition(states[0], states[1], EPSILON)
        automaton.new_transition(states[1], states[2], EPSILON)
        automaton.new_transition(states[2], states[0], EPSILON)
        automaton.new_transition(states[2], states[3], "x")
        closed = automaton.epsilon_closure([states[0]])
        assert closed == {states[0], states[1], states[2]}
        assert automaton.epsilon_closure(closed) == closed

    def test_self_loop(self):
        automaton = Automaton()
        s0 = automaton.new_state()
        automaton.new_transition(s0, s0, EPSILON)
        assert automaton.epsilon_closure([s0]) == {s0}

    def test_long_chain(self):
        automaton = Automaton()
        states = [automaton.new_state() for _ in range(50)]
        for source, target in zip(states, states[1:]):
            automaton.new_transition(source, target, EPSILON)
        assert automaton.get_active_states() == frozenset(states)

    def test_closure_of_empty_set(self, epsilon_cycle):
        assert epsilon_cycle.epsilon_closure([]) == frozenset()

    def test_closure_does_not_touch_frontier(self):
        automaton = Automaton()
        s0, s1, s2 = automaton.new_state(), automaton.new_state(), automaton.new_state()
        automaton.new_transition(s1, s2, EPSILON)
        assert automaton.epsilon_closure([s1]) == {s1, s2}
        assert automaton.get_active_states() == {s0}


class TestStepping:
    """Tests for step, get_markers, feed and accepts."""

    def test_scenario_accept_then_reject(self, ab_automaton):
        assert ab_automaton.get_active_states() == {State(0)}
        assert ab_automaton.step("a") is True
        assert ab_automaton.get_active_states() == {State(1)}
        assert ab_automaton.get_markers() == {"ACCEPT"}
        assert ab_automaton.step("b") is False
        assert ab_automaton.get_active_states() == {State(1)}
        assert ab_automaton.get_markers() == {"ACCEPT"}

    def test_failed_step_leaves_frontier_unchanged(self, a_b_star):
        before = a_b_star.get_active_states()
        assert a_b_star.step("b") is False
        assert a_b_star.get_active_states() == before

    def test_step_closes_result(self, a_b_star):
        assert a_b_star.step("a")
        assert a_b_star.get_active_states() == {State(1), State(2)}
        assert a_b_star.get_markers() == {"AB*"}

    def test_parallel_branches(self):
        automaton = Automaton()
        s0, s1, s2, s3 = (automaton.new_state() for _ in range(4))
        automaton.new_transition(s0, s1, "a")
        automaton.new_transition(s0, s2, "a")
        automaton.new_transition(s1, s3, "b")
        automaton.new_transition(s2, s2, "c")
        automaton.mark_state(s3, "AB")
        automaton.mark_state(s2, "AC*")

        automaton.reset()
        assert automaton.step("a")
        assert automaton.get_active_states() == {s1, s2}
        assert automaton.get_markers() == {"AC*"}
        # Only one branch survives, the other dies silently
        assert automaton.step("b")
        assert automaton.get_active_states() == {s3}
        assert automaton.get_markers() == {"AB"}

    def test_markers_union(self):
        automaton = Automaton()
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, EPSILON)
        automaton.mark_state(s0, "X")
        automaton.mark_state(s1, "Y")
        automaton.mark_state(s1, "X")
        assert automaton.get_markers() == {"X", "Y"}

    def test_feed(self, a_b_star):
        result = a_b_star.feed("abb")
        assert result.consumed == 3
        assert result.completed
        assert result.accepted
        assert result.markers == {"AB*"}

    def test_feed_stops_at_rejection(self, a_b_star):
        result = a_b_star.feed("abxb")
        assert result.consumed == 2
        assert not result.completed
        assert not result.accepted
        assert a_b_star.get_active_states() == {State(1), State(2)}

    def test_accepts(self, a_b_star):
        assert a_b_star.accepts("a")
        assert a_b_star.accepts("abbbb")
        assert not a_b_star.accepts("")
        assert not a_b_star.accepts("b")
        assert not a_b_star.accepts("aa")

    def test_accepts_resets_first(self, a_b_star):
        a_b_star.step("a")
        assert a_b_star.accepts("ab")

    def test_step_on_empty_automaton(self):
        assert Automaton().step("a") is False

    def test_epsilon_is_not_an_input_value(self, epsilon_cycle):
        before = epsilon_cycle.get_active_states()
        with pytest.raises(ValidationError):
            epsilon_cycle.step(EPSILON)
        assert epsilon_cycle.get_active_states() == before
        with pytest.raises(ValidationError):
            epsilon_cycle.feed([EPSILON])


class TestReset:
    """Tests for reset."""

    def test_reset_restores_start(self, ab_automaton):
        ab_automaton.step("a")
        ab_automaton.reset()
        assert ab_automaton.get_active_states() == {State(0)}

    def test_reset_is_closed(self):
        automaton = Automaton()
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, EPSILON)
        automaton.reset()
        active = automaton.get_active_states()
        assert State(0) in active
        assert automaton.epsilon_closure(active) == active

    def test_reset_empty(self):
        automaton = Automaton()
        automaton.reset()
        assert automaton.get_active_states() == frozenset()

    def test_rerun(self, ab_automaton):
        for _ in range(3):
            ab_automaton.reset()
            assert ab_automaton.step("a")
            assert ab_automaton.get_markers() == {"ACCEPT"}


class TestComposition:
    """Tests for add."""

    def test_add_empty_is_noop(self):
        automaton = Automaton()
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, "a")
        automaton.mark_state(s1, "x")
        before = automaton.to_debug_string()

        assert automaton.add(Automaton()) is None
        assert automaton.num_states == 2
        assert automaton.to_debug_string() == before

    def test_add_single_state(self, ab_automaton):
        other = Automaton()
        other.new_state()
        entry = ab_automaton.add(other)
        assert entry == State(2)
        assert ab_automaton.num_states == 3
        assert ab_automaton.transitions_of(entry) == []
        assert ab_automaton.markers_of(entry) == frozenset()

    def test_add_preserves_structure(self, ab_automaton, a_b_star):
        offset = ab_automaton.num_states
        entry = ab_automaton.add(a_b_star)
        assert entry == State(offset)
        assert ab_automaton.num_states == offset + a_b_star.num_states
        for source, guard, target in edges(a_b_star):
            assert (offset + source, guard, offset + target) in edges(ab_automaton)
        for state in a_b_star.states():
            assert ab_automaton.markers_of(state.shifted(offset)) == a_b_star.markers_of(state)

    def test_add_leaves_other_untouched(self, ab_automaton, a_b_star):
        before = a_b_star.to_debug_string()
        ab_automaton.add(a_b_star)
        assert a_b_star.to_debug_string() == before

    def test_add_copies_shifted_active_states(self, ab_automaton, a_b_star):
        a_b_star.step("a")
        ab_automaton.add(a_b_star)
        assert ab_automaton.get_active_states() == {State(0), State(3), State(4)}

    def test_add_does_not_close_active_set(self):
        # add copies the frontier as-is; closing it is left to the caller.
        # Composing into an empty automaton activates the new state 0 even
        # when the other automaton has moved past its start state, and that
        # state's epsilon successors are not pulled in.
        other = Automaton()
        o0, o1, o2 = other.new_state(), other.new_state(), other.new_state()
        other.new_transition(o0, o1, "a")
        other.new_transition(o0, o2, EPSILON)
        other.reset()
        assert other.step("a")
        assert other.get_active_states() == {o1}

        automaton = Automaton()
        automaton.add(other)
        assert automaton.get_active_states() == {State(0), State(1)}

        automaton.set_active_states(automaton.get_active_states())
        assert automaton.get_active_states() == {State(0), State(1), State(2)}

    def test_add_into_empty_automaton(self, a_b_star):
        automaton = Automaton()
        entry = automaton.add(a_b_star)
        assert entry == State(0)
        assert automaton.to_debug_string() == a_b_star.to_debug_string()
        automaton.reset()
        assert automaton.accepts("abb")

    def test_compose_alternation(self):
        # 0 -eps-> hi | ho, the way a pattern compiler assembles a|b
        automaton = Automaton()
        start = automaton.new_state()
        for word in ("hi", "ho"):
            entry = automaton.add(make_chain(list(word), marker=word.upper()))
            automaton.new_transition(start, entry, EPSILON)
        automaton.reset()

        assert automaton.step("h")
        assert automaton.get_markers() == frozenset()
        assert automaton.step("o")
        assert automaton.get_markers() == {"HO"}

    def test_add_self_rejected(self, ab_automaton):
        with pytest.raises(CompositionError):
            ab_automaton.add(ab_automaton)
        assert ab_automaton.num_states == 2

    def test_add_rejects_other_store_kind(self):
        letters = Automaton(StoreFactory(RangeTransitionStore), name="letters")
        l0, l1 = letters.new_state(), letters.new_state()
        letters.new_transition(l0, l1, "a-z")

        automaton = Automaton(name="parent")
        automaton.new_state()
        with pytest.raises(CompositionError) as exc_info:
            automaton.add(letters)
        assert exc_info.value.context["other"] == "letters"
        assert automaton.num_states == 1
        assert automaton.to_debug_string() == "#0:\n"

    def test_add_rejects_incompatible_predicates_without_side_effects(self):
        checks = Automaton(StoreFactory(CallableTransitionStore), name="digits")
        c0, c1 = checks.new_state(), checks.new_state()
        checks.new_transition(c0, c1, str.isdigit)

        automaton = Automaton(StoreFactory(RangeTransitionStore))
        automaton.new_state()
        with pytest.raises(CompositionError):
            automaton.add(checks)
        assert automaton.num_states == 1
        assert automaton.get_active_states() == {State(0)}

    def test_add_same_store_kind_from_distinct_factories(self):
        other = Automaton(StoreFactory(RangeTransitionStore))
        o0, o1 = other.new_state(), other.new_state()
        other.new_transition(o0, o1, "a-z")

        automaton = Automaton(StoreFactory(RangeTransitionStore))
        start = automaton.new_state()
        entry = automaton.add(other)
        automaton.new_transition(start, entry, EPSILON)
        automaton.reset()
        assert automaton.step("q")


class TestIntrospection:
    """Tests for active-state access, active transitions and markers."""

    def test_set_active_states_closes(self, a_b_star):
        a_b_star.set_active_states([State(1)])
        assert a_b_star.get_active_states() == {State(1), State(2)}

    def test_set_active_states_accepts_ints(self, a_b_star):
        a_b_star.set_active_states([1])
        assert a_b_star.get_active_states() == {State(1), State(2)}

    def test_get_active_states_is_a_copy(self, ab_automaton):
        active = ab_automaton.get_active_states()
        assert isinstance(active, frozenset)
        ab_automaton.step("a")
        assert active == {State(0)}

    def test_get_active_transitions(self):
        automaton = Automaton()
        s0, s1, s2, s3 = (automaton.new_state() for _ in range(4))
        automaton.new_transition(s0, s1, EPSILON)
        automaton.new_transition(s0, s2, "a")
        automaton.new_transition(s1, s3, "b")
        automaton.new_transition(s2, s3, "c")

        combined = automaton.get_active_transitions()
        assert list(combined.query("a")) == [s2]
        assert list(combined.query("b")) == [s3]
        assert list(combined.query("c")) == []
        assert list(combined.query(EPSILON)) == [s1]
        # The view is detached from the automaton
        combined.put("z", s0)
        assert automaton.transitions_of(s0) == [(EPSILON, s1), (Predicate("a"), s2)]

    def test_get_active_transitions_empty(self):
        assert len(Automaton().get_active_transitions()) == 0

    def test_get_marked(self, a_b_star):
        assert a_b_star.get_marked() == {State(2)}
        a_b_star.mark_state(State(0), "START")
        assert a_b_star.get_marked() == {State(0), State(2)}

    def test_drop_markers(self, a_b_star):
        a_b_star.step("a")
        assert a_b_star.get_markers() == {"AB*"}
        a_b_star.drop_markers()
        assert a_b_star.get_marked() == frozenset()
        assert a_b_star.get_markers() == frozenset()
        a_b_star.reset()
        a_b_star.feed("abbb")
        assert a_b_star.get_markers() == frozenset()
        # Structure is untouched
        assert a_b_star.get_active_states() == {State(1), State(2)}

    def test_relabel_after_drop(self, a_b_star):
        a_b_star.drop_markers()
        a_b_star.mark_state(State(1), "NEW")
        a_b_star.reset()
        a_b_star.step("a")
        assert a_b_star.get_markers() == {"NEW"}

    def test_repr(self, ab_automaton):
        assert repr(ab_automaton) == "Automaton(name='ab', states=2, active=[0])"


class TestDebugOutput:
    """Tests for to_debug_string, build_dot and to_dict."""

    def test_debug_string(self, a_b_star):
        assert a_b_star.to_debug_string() == (
            "#0: 'a'>1\n"
            "#1: eps>2\n"
            "#2:AB*: 'b'>1\n"
        )
        assert str(a_b_star) == a_b_star.to_debug_string()

    def test_debug_string_sorts_markers(self):
        automaton = Automaton()
        state = automaton.new_state()
        automaton.mark_state(state, "b")
        automaton.mark_state(state, "a")
        automaton.new_transition(state, state, "x")
        automaton.new_transition(state, state, EPSILON)
        assert automaton.to_debug_string() == "#0:a,b: 'x'>0 eps>0\n"

    def test_debug_string_ranges(self):
        automaton = Automaton(StoreFactory(RangeTransitionStore))
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, "0-9")
        assert automaton.to_debug_string() == "#0: '0-9'>1\n#1:\n"

    def test_build_dot(self, a_b_star):
        dot = a_b_star.build_dot()
        source = dot.source
        assert "S_000" in source
        assert "doublecircle" in source
        assert "ε" in source
        assert "S_000 -> S_001" in source
        assert "lightgrey" in source

    def test_to_dict(self, a_b_star):
        assert a_b_star.to_dict() == {
            "name": "ab*",
            "store": "symbol",
            "states": [
                {"id": 0, "markers": []},
                {"id": 1, "markers": []},
                {"id": 2, "markers": ["AB*"]},
            ],
            "transitions": [
                {"from": 0, "to": 1, "guard": "a"},
                {"from": 1, "to": 2, "epsilon": True},
                {"from": 2, "to": 1, "guard": "b"},
            ],
        }

    def test_from_dict_round_trip(self, a_b_star):
        restored = Automaton.from_dict(a_b_star.to_dict())
        assert restored.to_debug_string() == a_b_star.to_debug_string()
        assert restored.name == a_b_star.name
        assert restored.accepts("abb")

    def test_from_dict_round_trip_numeric_ranges(self):
        automaton = Automaton(StoreFactory(RangeTransitionStore), name="levels")
        s0, s1 = automaton.new_state(), automaton.new_state()
        automaton.new_transition(s0, s1, CharRange(5, 5))
        automaton.new_transition(s1, s1, CharRange(0, 9))
        automaton.mark_state(s1, "LEVEL")

        data = automaton.to_dict()
        assert data["transitions"][0]["guard"] == [5, 5]
        restored = Automaton.from_dict(data)
        assert restored.to_debug_string() == automaton.to_debug_string()
        assert restored.accepts([5, 3, 9])
        assert not restored.accepts([4])
