"""
Transition table creation for finite state machines.

The table has the current state bits Q{n-1}_n .. Q0_n followed by the input
variables of all guards as inputs, and the next state bits Q{n-1}_n+1 .. Q0_n+1
followed by the outputs (sorted by name) as results.

Row layout for a machine with input variables v1..vk:

    row = state_number * 2^k + assignment

where the assignment holds v1 in its most significant bit. Rows of bit
patterns that are no state number stay don't care.
"""

import logging

from .errors import (
    DuplicateStateNumberError,
    FiniteStateMachineError,
    MissingInitialStateError,
    NonDeterministicTransitionError,
)
from .truth_table import DONT_CARE, TruthTable

logger = logging.getLogger(__name__)


def state_variable_name(bit: int) -> str:
    """Name of the current state bit `bit`."""
    return f"Q{bit}_n"


def next_state_variable_name(bit: int) -> str:
    """Name of the next state bit `bit`."""
    return f"Q{bit}_n+1"


class TransitionTableCreator:
    """
    Creates the transition table of an FSM.

    The build is a fixed pipeline:
    1. State bit width from the state numbers
    2. Table with state bits, next state bits and outputs, all don't care
    3. Outputs and "stay in state" successor at row = state number
    4. Expansion by the input variables of all guards
    5. Unconditional transitions
    6. Conditional transitions, overriding unconditional ones
    """

    def __init__(self, fsm):
        self.states = fsm.states
        self.transitions = fsm.transitions

    def create(self) -> TruthTable:
        """
        Create the transition table.

        Returns:
            The populated truth table

        Raises:
            FiniteStateMachineError: If the machine is invalid or not deterministic
            ExpressionError: If a guard cannot be parsed or evaluated
        """
        state_bits = self.state_bits()
        self._check_transitions()

        table = TruthTable([state_variable_name(i) for i in range(state_bits - 1, -1, -1)])
        for i in range(state_bits - 1, -1, -1):
            table.add_result(next_state_variable_name(i))

        outputs = self.output_names()
        for name in outputs:
            table.add_result(name)

        table.set_all_to(DONT_CARE)

        # Before the expansion there is exactly one row per state number
        for state in self.states:
            row = state.number
            for name in outputs:
                table.set_value(row, name, state.values.get(name, 0))
            self._set_next_state(table, row, state_bits, state.number)

        in_vars = self.input_variables()
        for name in in_vars:
            table.add_variable(name)

        logger.debug(
            "state bits: %d, input variables: %s, rows: %d",
            state_bits, in_vars, table.rows,
        )

        unconditional = [t for t in self.transitions if not t.has_condition]
        conditional = [t for t in self.transitions if t.has_condition]

        # Each kind gets its own claimed rows: a conditional transition may
        # overwrite an unconditional one, but never another conditional one.
        claimed: set[int] = set()
        for t in unconditional:
            self._fill_in_transition(table, t, state_bits, in_vars, claimed)

        claimed = set()
        for t in conditional:
            self._fill_in_transition(table, t, state_bits, in_vars, claimed)

        logger.debug(
            "filled %d unconditional and %d conditional transitions",
            len(unconditional), len(conditional),
        )
        return table

    def state_bits(self) -> int:
        """
        Number of bits needed to encode all state numbers.

        Raises:
            DuplicateStateNumberError: If two states share a number
            MissingInitialStateError: If there is no state 0
        """
        numbers = set()
        max_number = 0
        for state in self.states:
            n = state.number
            if n in numbers:
                raise DuplicateStateNumberError(n)
            numbers.add(n)
            max_number = max(max_number, n)

        if 0 not in numbers:
            raise MissingInitialStateError()

        n = 1
        while (1 << n) <= max_number:
            n += 1
        return n

    def input_variables(self) -> list[str]:
        """Free variables of all guards, in order of first appearance."""
        seen: dict[str, None] = {}
        for t in self.transitions:
            if t.has_condition:
                for name in t.condition_expression.collect_free_variables():
                    seen.setdefault(name, None)
        return list(seen)

    def output_names(self) -> list[str]:
        """All output names used by any state or transition, sorted."""
        names = set()
        for state in self.states:
            names.update(state.values)
        for t in self.transitions:
            names.update(t.values)
        return sorted(names)

    def _check_transitions(self):
        members = {id(s) for s in self.states}
        for t in self.transitions:
            if id(t.start) not in members or id(t.target) not in members:
                raise FiniteStateMachineError(
                    f"Transition {t} uses a state that is not part of the FSM"
                )

    @staticmethod
    def _set_next_state(table: TruthTable, row: int, state_bits: int, number: int):
        # Next state columns are the first result columns, MSB first
        for j in range(state_bits):
            table.set_value(row, state_bits - 1 - j, (number >> j) & 1)

    def _fill_in_transition(self, table, t, state_bits, in_vars, claimed):
        rows_per_state = 1 << len(in_vars)
        start_row = t.start.number * rows_per_state
        guard = t.condition_expression

        for r in range(rows_per_state):
            if guard is not None:
                assignment = {
                    name: bool((r >> (len(in_vars) - 1 - i)) & 1)
                    for i, name in enumerate(in_vars)
                }
                if not guard.evaluate(assignment):
                    continue

            row = start_row + r
            if row in claimed:
                raise NonDeterministicTransitionError(t, row)
            claimed.add(row)

            self._set_next_state(table, row, state_bits, t.target.number)
            for name, value in t.values.items():
                table.set_value(row, name, value)


def create_transition_table(fsm) -> TruthTable:
    """Create the transition table of an FSM."""
    return TransitionTableCreator(fsm).create()
