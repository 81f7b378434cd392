# tests/test_dfa.py
import json

import pytest

from dfa_designer.core.dfa import Dfa, DfaError, SimulationStep


@pytest.fixture
def dfa():
    return Dfa(
        states=["q1", "q2", "q3", "q4", "q5"],
        alphabet=["a", "b", "c"],
        transition_table={
            "q1": {"a": "q2", "b": "q1"},
            "q2": {"a": "q3", "b": "q2"},
            "q3": {"a": "q1", "b": "q4"},
            "q4": {"a": "q5", "b": "q4"},
            "q5": {"a": "q1", "b": "q4"},
        },
        start_state="q1",
        accept_states=["q5"],
    )


@pytest.mark.parametrize("word, accepted", [
    ("abababab", False),
    ("ababababa", True),
    ("abababa", True),
    ("aaaa", False),
    ("babacbaba", False),
])
def test_simulate(dfa, word, accepted):
    assert dfa.simulate(word) is accepted


def test_empty_input_accepts_only_when_start_accepts(dfa):
    assert not dfa.simulate("")
    dfa.add_accept_state("q1")
    assert dfa.simulate("")


def test_trace_stops_at_missing_transition(dfa):
    steps = dfa.trace("abcab")
    assert steps == [
        SimulationStep("q1", "a", "q2"),
        SimulationStep("q2", "b", "q2"),
        SimulationStep("q2", "c", None),
    ]


@pytest.mark.parametrize("kwargs", [
    {"start_state": "q9"},
    {"accept_states": ["q9"]},
    {"transition_table": {"q1": {"z": "q1"}}},
    {"transition_table": {"q1": {"a": "q9"}}},
    {"transition_table": {"q9": {"a": "q1"}}},
])
def test_constructor_validation(kwargs):
    args = dict(states=["q1", "q2"], alphabet=["a"], transition_table={},
                start_state="q1", accept_states=[])
    args.update(kwargs)
    with pytest.raises(DfaError):
        Dfa(**args)


def test_state_mutators(dfa):
    dfa.add_state("q6")
    assert "q6" in dfa.states
    with pytest.raises(DfaError):
        dfa.add_state("q6")

    dfa.remove_state("q5")
    assert "q5" not in dfa.states
    assert "q5" not in dfa.accept_states
    assert dfa.get_transition("q4", "a") is None
    assert dfa.get_transition("q4", "b") == "q4"

    with pytest.raises(DfaError):
        dfa.remove_state("q1")
    with pytest.raises(DfaError):
        dfa.remove_state("missing")


def test_symbol_mutators(dfa):
    dfa.add_symbol("d")
    with pytest.raises(DfaError):
        dfa.add_symbol("c")
    dfa.add_transition("q2", "d", "q5")
    assert dfa.simulate("ad")

    dfa.remove_symbol("a")
    assert dfa.alphabet == {"b", "c", "d"}
    assert dfa.get_transition("q1", "a") is None
    with pytest.raises(DfaError):
        dfa.remove_symbol("a")


def test_transition_mutators(dfa):
    dfa.add_transition("q1", "a", "q5")
    assert dfa.simulate("a")
    dfa.remove_transition("q1", "a")
    assert dfa.get_transition("q1", "a") is None

    with pytest.raises(DfaError):
        dfa.add_transition("q1", "z", "q2")
    with pytest.raises(DfaError):
        dfa.add_transition("q1", "a", "q9")


def test_remove_transition_for_state_without_row():
    dfa = Dfa(["q1", "q2"], ["a"], {}, "q1", [])
    with pytest.raises(DfaError):
        dfa.remove_transition("q2", "a")


def test_start_and_accept_states(dfa):
    dfa.set_start_state("q4")
    assert dfa.start_state == "q4"
    assert dfa.simulate("a")
    with pytest.raises(DfaError):
        dfa.set_start_state("q9")

    with pytest.raises(DfaError):
        dfa.add_accept_state("q5")
    dfa.remove_accept_state("q5")
    assert dfa.accept_states == set()
    with pytest.raises(DfaError):
        dfa.remove_accept_state("q5")


def test_accessors_return_copies(dfa):
    dfa.states.add("x")
    dfa.accept_states.clear()
    assert "x" not in dfa.states
    assert dfa.accept_states == {"q5"}


def test_to_dict_and_str(dfa):
    data = dfa.to_dict()
    assert data["states"] == ["q1", "q2", "q3", "q4", "q5"]
    assert data["alphabet"] == ["a", "b", "c"]
    assert data["transitionTable"]["q3"] == {"a": "q1", "b": "q4"}
    assert data["startState"] == "q1"
    assert data["acceptStates"] == ["q5"]
    assert json.loads(str(dfa)) == data
