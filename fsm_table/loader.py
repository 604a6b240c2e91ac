"""
Loading state machines from JSON descriptions.

    {
      "states": [{"number": 0, "name": "idle", "values": "Y=0"}, ...],
      "transitions": [{"start": 0, "target": 1, "condition": "A & !B",
                       "values": {"Y": 1}}, ...]
    }

Transition endpoints refer to states by number or by name.
"""

import json
from pathlib import Path
from typing import Union

from .errors import FiniteStateMachineError
from .fsm import FSM, State, Transition


def fsm_from_dict(data: dict) -> FSM:
    """Build an FSM from a parsed JSON document."""
    if not isinstance(data, dict):
        raise FiniteStateMachineError("FSM description must be a JSON object")

    fsm = FSM()
    for entry in data.get("states", []):
        try:
            fsm.add_state(State(
                number=int(entry["number"]),
                values=entry.get("values"),
                name=entry.get("name", ""),
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FiniteStateMachineError(f"Invalid state entry {entry!r}: {e}") from e

    for entry in data.get("transitions", []):
        try:
            start, target = entry["start"], entry["target"]
        except (KeyError, TypeError) as e:
            raise FiniteStateMachineError(f"Invalid transition entry {entry!r}") from e

        condition = entry.get("condition")
        if condition is not None and not isinstance(condition, str):
            raise FiniteStateMachineError(f"Condition must be a string in {entry!r}")
        values = entry.get("values")
        if values is not None and not isinstance(values, (str, dict)):
            raise FiniteStateMachineError(f"Values must be a string or an object in {entry!r}")

        fsm.add_transition(Transition(
            start=_resolve_state(fsm, start),
            target=_resolve_state(fsm, target),
            condition=condition,
            values=values,
        ))

    return fsm


def _resolve_state(fsm: FSM, ref) -> State:
    for state in fsm.states:
        if isinstance(ref, str) and state.name == ref:
            return state
        if isinstance(ref, int) and state.number == ref:
            return state
    raise FiniteStateMachineError(f"Transition refers to unknown state {ref!r}")


def load_fsm(path: Union[str, Path]) -> FSM:
    """Load an FSM from a JSON file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise FiniteStateMachineError(f"{path}: invalid JSON: {e}") from e
    return fsm_from_dict(data)
