"""Tests for the SAT-based guard analysis."""

from fsm_table import FSM, State, Transition, parse_guard
from fsm_table.analysis import (
    find_overlapping_transitions,
    find_unsatisfiable_guards,
    guard_satisfiable,
    guards_overlap,
)


def test_exclusive_guards_do_not_overlap():
    assert guards_overlap(parse_guard("A"), parse_guard("!A")) is None
    assert guards_overlap(parse_guard("A & B"), parse_guard("A ^ B")) is None


def test_overlap_witness():
    witness = guards_overlap(parse_guard("A"), parse_guard("A & B"))
    assert witness == {"A": True, "B": True}


def test_overlap_witness_satisfies_both_guards():
    first = parse_guard("A | B")
    second = parse_guard("!A & (B | C)")
    witness = guards_overlap(first, second)
    assert witness is not None
    assignment = {"A": False, "B": False, "C": False}
    assignment.update(witness)
    assert first.evaluate(assignment)
    assert second.evaluate(assignment)


def test_guard_satisfiable():
    assert guard_satisfiable(parse_guard("A | !A"))
    assert guard_satisfiable(parse_guard("1"))
    assert not guard_satisfiable(parse_guard("A & !A"))
    assert not guard_satisfiable(parse_guard("0"))
    assert not guard_satisfiable(parse_guard("A ^ A"))


def test_find_overlapping_transitions():
    fsm = FSM([State(0), State(1), State(2)])
    s0, s1, s2 = fsm.states
    fsm.add_transition(Transition(s0, s1))
    fsm.add_transition(Transition(s0, s2))
    fsm.add_transition(Transition(s1, s0, "A"))
    fsm.add_transition(Transition(s1, s2, "!A"))
    fsm.add_transition(Transition(s2, s0, "A"))
    fsm.add_transition(Transition(s2, s1, "B"))

    overlaps = find_overlapping_transitions(fsm)

    assert len(overlaps) == 2
    assert overlaps[0].first.start is s0
    assert overlaps[0].witness == {}
    assert "both unconditional" in str(overlaps[0])
    assert overlaps[1].first.start is s2
    assert overlaps[1].witness == {"A": True, "B": True}
    assert "A=1, B=1" in str(overlaps[1])


def test_constant_guards_are_not_reported_as_unconditional():
    fsm = FSM([State(0), State(1)])
    s0, s1 = fsm.states
    fsm.add_transition(Transition(s0, s1, "1"))
    fsm.add_transition(Transition(s0, s0, "1"))

    overlaps = find_overlapping_transitions(fsm)

    assert len(overlaps) == 1
    assert overlaps[0].witness == {}
    assert str(overlaps[0]) == "0 -> 1 [1] and 0 -> 0 [1] both fire for every input"


def test_unconditional_and_conditional_do_not_overlap():
    fsm = FSM([State(0), State(1)])
    s0, s1 = fsm.states
    fsm.add_transition(Transition(s0, s1))
    fsm.add_transition(Transition(s0, s0, "A"))
    assert find_overlapping_transitions(fsm) == []


def test_find_unsatisfiable_guards():
    fsm = FSM([State(0), State(1)])
    s0, s1 = fsm.states
    fsm.add_transition(Transition(s0, s1, "A"))
    dead = fsm.add_transition(Transition(s1, s0, "A & !A"))
    fsm.add_transition(Transition(s1, s1))
    assert find_unsatisfiable_guards(fsm) == [dead]
