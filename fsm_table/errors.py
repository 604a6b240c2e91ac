"""Errors raised while checking a state machine or building its table."""


class FiniteStateMachineError(Exception):
    """Base class for every error caused by an invalid state machine."""


class DuplicateStateNumberError(FiniteStateMachineError):
    """Two states share the same number."""

    def __init__(self, number: int):
        super().__init__(f"State number {number} is used twice")
        self.number = number


class MissingInitialStateError(FiniteStateMachineError):
    """No state is numbered 0."""

    def __init__(self):
        super().__init__("There is no initial state (state number zero)")


class NonDeterministicTransitionError(FiniteStateMachineError):
    """Two transitions of the same kind fire on the same row."""

    def __init__(self, transition, row: int):
        super().__init__(f"FSM is not deterministic: {transition} (row {row})")
        self.transition = transition
        self.row = row
