"""
Finite state machine model: states, transitions and the machine itself.

States carry Moore outputs (valid whenever the state is active), transitions
carry Mealy overrides (valid only while the transition fires).
"""

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from .errors import FiniteStateMachineError
from .expression import Expression, parse_guard
from .transition_table import TransitionTableCreator

Values = Union[Mapping[str, int], str, None]

_VALUE_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*(?:=\s*(\S+))?\s*$")


def parse_values(values: Values) -> dict[str, int]:
    """
    Normalize an output value description to a dict.

    Accepts a mapping or a comma separated string such as "Y=1, Z=0".
    A bare name ("Y") means the output is 1.
    """
    if values is None:
        return {}
    if isinstance(values, str):
        result = {}
        for part in values.split(","):
            if not part.strip():
                continue
            m = _VALUE_RE.match(part)
            if m is None:
                raise FiniteStateMachineError(f"Invalid output assignment: {part.strip()!r}")
            name, raw = m.groups()
            try:
                result[name] = 1 if raw is None else int(raw)
            except ValueError:
                raise FiniteStateMachineError(
                    f"Invalid value {raw!r} for output {name!r}"
                ) from None
        values = result

    result = {}
    for name, value in values.items():
        if value not in (0, 1):
            raise FiniteStateMachineError(f"Output {name!r} must be 0 or 1, got {value!r}")
        result[name] = int(value)
    return result


@dataclass(eq=False)
class State:
    """A state with its number (0 = initial state) and Moore outputs."""

    number: int
    values: dict[str, int] = field(default_factory=dict)
    name: str = ""

    def __post_init__(self):
        if self.number < 0:
            raise FiniteStateMachineError(f"State number {self.number} is negative")
        self.values = parse_values(self.values)

    def __str__(self):
        return self.name or str(self.number)


@dataclass(eq=False)
class Transition:
    """
    A transition from start to target.

    Without a condition the transition is unconditional: it fires for every
    input and acts as the default successor of its start state. A conditional
    transition fires where its guard is true and overrides the default.
    """

    start: State
    target: State
    condition: Union[str, Expression, None] = None
    values: dict[str, int] = field(default_factory=dict)
    _expression: Optional[Expression] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.values = parse_values(self.values)
        if isinstance(self.condition, Expression):
            self._expression = self.condition
        elif isinstance(self.condition, str) and not self.condition.strip():
            self.condition = None

    @property
    def has_condition(self) -> bool:
        return self.condition is not None

    @property
    def condition_expression(self) -> Optional[Expression]:
        """The parsed guard, or None for an unconditional transition."""
        if self._expression is None and self.condition is not None:
            self._expression = parse_guard(self.condition)
        return self._expression

    def __str__(self):
        text = f"{self.start} -> {self.target}"
        if self.condition is not None:
            text += f" [{self.condition}]"
        return text


class FSM:
    """Ordered collection of states and transitions."""

    def __init__(
        self,
        states: Optional[list[State]] = None,
        transitions: Optional[list[Transition]] = None,
    ):
        self.states: list[State] = list(states or [])
        self.transitions: list[Transition] = list(transitions or [])

    def add_state(self, state: State) -> State:
        self.states.append(state)
        return state

    def add_transition(self, transition: Transition) -> Transition:
        self.transitions.append(transition)
        return transition

    def get_state(self, number: int) -> State:
        for state in self.states:
            if state.number == number:
                return state
        raise KeyError(f"No state with number {number}")

    def create_transition_table(self):
        """Build the ternary transition table of this machine."""
        return TransitionTableCreator(self).create()

    def __repr__(self):
        return f"FSM(states={len(self.states)}, transitions={len(self.transitions)})"
