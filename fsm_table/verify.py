"""
Verification of transition tables.

Recomputes every reachable row directly from the state machine and compares
it with the table.
"""

from .fsm import FSM, State
from .transition_table import TransitionTableCreator
from .truth_table import DONT_CARE, TruthTable


def expected_row(fsm: FSM, state: State, assignment: dict[str, bool]) -> tuple[int, dict[str, int]]:
    """
    Next state number and outputs of `state` for one input assignment.

    A firing conditional transition wins over the unconditional one; without
    any firing transition the machine stays in its state. Outputs are layered:
    state values, then the unconditional transition's values, then the
    firing conditional transition's values.
    """
    leaving = [t for t in fsm.transitions if t.start is state]
    default = [t for t in leaving if not t.has_condition]
    firing = [t for t in leaving if t.has_condition and t.condition_expression.evaluate(assignment)]

    target = state.number
    outputs = dict(state.values)
    for t in default[:1] + firing[:1]:
        target = t.target.number
        outputs.update(t.values)
    return target, outputs


def verify_table(fsm: FSM, table: TruthTable) -> tuple[bool, list[str]]:
    """
    Verify a transition table against the machine it was built from.

    Args:
        fsm: The state machine
        table: Its transition table

    Returns:
        Tuple of (all_correct, list of error messages)
    """
    errors = []

    creator = TransitionTableCreator(fsm)
    state_bits = creator.state_bits()
    in_vars = table.variables[state_bits:]
    outputs = table.results[state_bits:]
    rows_per_state = 1 << len(in_vars)
    states = {s.number: s for s in fsm.states}

    for number in range(1 << state_bits):
        state = states.get(number)
        for r in range(rows_per_state):
            row = number * rows_per_state + r

            if state is None:
                for col, name in enumerate(table.results):
                    if table.get_value(row, col) != DONT_CARE:
                        errors.append(f"Row {row}, {name}: expected don't care")
                continue

            assignment = {
                name: bool((r >> (len(in_vars) - 1 - i)) & 1)
                for i, name in enumerate(in_vars)
            }
            target, values = expected_row(fsm, state, assignment)

            actual = 0
            for col in range(state_bits):
                bit = table.get_value(row, col)
                if bit == DONT_CARE:
                    errors.append(f"Row {row}, {table.results[col]}: next state is don't care")
                    break
                actual = (actual << 1) | bit
            else:
                if actual != target:
                    errors.append(f"Row {row}: expected next state {target}, got {actual}")

            for name in outputs:
                expected = values.get(name, 0)
                got = table.get_value(row, name)
                if got != expected:
                    errors.append(f"Row {row}, {name}: expected {expected}, got {got}")

    return len(errors) == 0, errors
