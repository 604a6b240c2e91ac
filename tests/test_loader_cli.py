"""Tests for FSM loading, output value parsing and the command line."""

import json

import pytest

from fsm_table import FiniteStateMachineError, State, Transition, fsm_from_dict, load_fsm
from fsm_table.cli import main
from fsm_table.fsm import parse_values

TOGGLE = {
    "states": [
        {"number": 0, "name": "off"},
        {"number": 1, "name": "on", "values": "Y=1"},
    ],
    "transitions": [
        {"start": "off", "target": "on"},
        {"start": 1, "target": 0},
    ],
}


def write_fsm(tmp_path, data):
    path = tmp_path / "machine.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_parse_values():
    assert parse_values("Y=1, Z=0") == {"Y": 1, "Z": 0}
    assert parse_values("Y") == {"Y": 1}
    assert parse_values("") == {}
    assert parse_values(None) == {}
    assert parse_values({"A": 0}) == {"A": 0}


@pytest.mark.parametrize("values", ["Y=2", "Y=x", "=1", {"Y": 5}])
def test_parse_values_rejects_invalid(values):
    with pytest.raises(FiniteStateMachineError):
        parse_values(values)


def test_state_and_transition_validation():
    with pytest.raises(FiniteStateMachineError):
        State(-1)
    s0 = State(0)
    assert not Transition(s0, s0, "  ").has_condition
    assert str(Transition(State(0, name="idle"), State(1), "A")) == "idle -> 1 [A]"


def test_fsm_from_dict():
    fsm = fsm_from_dict(TOGGLE)
    off, on = fsm.states
    assert on.values == {"Y": 1}
    assert fsm.transitions[0].start is off
    assert fsm.transitions[1].target is off


def test_fsm_from_dict_unknown_state():
    data = {"states": [{"number": 0}], "transitions": [{"start": 0, "target": 7}]}
    with pytest.raises(FiniteStateMachineError):
        fsm_from_dict(data)


def test_fsm_from_dict_invalid_entries():
    with pytest.raises(FiniteStateMachineError):
        fsm_from_dict({"states": [{"name": "x"}]})
    with pytest.raises(FiniteStateMachineError):
        fsm_from_dict([])


def test_load_fsm(tmp_path):
    fsm = load_fsm(write_fsm(tmp_path, TOGGLE))
    assert [s.number for s in fsm.states] == [0, 1]

    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(FiniteStateMachineError):
        load_fsm(bad)


def test_cli_table(tmp_path, capsys):
    assert main([str(write_fsm(tmp_path, TOGGLE))]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Q0_n | Q0_n+1 Y"
    assert lines[2].split() == ["0", "|", "1", "0"]
    assert lines[3].split() == ["1", "|", "0", "1"]


def test_cli_columns(tmp_path, capsys):
    assert main([str(write_fsm(tmp_path, TOGGLE)), "--format", "columns"]) == 0
    out = capsys.readouterr().out
    assert "Q0_n+1: 10" in out
    assert "Y: 01" in out


def test_cli_check_reports_overlap(tmp_path, capsys):
    data = {
        "states": [{"number": 0}, {"number": 1}, {"number": 2}],
        "transitions": [
            {"start": 0, "target": 1, "condition": "A"},
            {"start": 0, "target": 2, "condition": "A | B"},
        ],
    }
    assert main([str(write_fsm(tmp_path, data)), "--check"]) == 2
    assert "Overlap: 0 -> 1 [A] and 0 -> 2 [A | B]" in capsys.readouterr().out


def test_cli_error(tmp_path, capsys):
    data = {"states": [{"number": 1}], "transitions": []}
    assert main([str(write_fsm(tmp_path, data))]) == 1
    assert "Error: There is no initial state" in capsys.readouterr().err


@pytest.mark.parametrize("field, value", [("condition", 1), ("values", 5), ("values", [1])])
def test_fsm_from_dict_invalid_transition_fields(field, value):
    transition = {"start": 0, "target": 0, field: value}
    data = {"states": [{"number": 0}], "transitions": [transition]}
    with pytest.raises(FiniteStateMachineError):
        fsm_from_dict(data)
