"""Transition table creation for finite state machines."""

from .errors import (
    FiniteStateMachineError,
    DuplicateStateNumberError,
    MissingInitialStateError,
    NonDeterministicTransitionError,
)
from .expression import (
    Expression,
    ExpressionError,
    ExpressionParseError,
    ExpressionEvaluationError,
    parse_guard,
)
from .truth_table import TruthTable, DONT_CARE
from .fsm import FSM, State, Transition
from .transition_table import TransitionTableCreator, create_transition_table
from .verify import verify_table
from .analysis import find_overlapping_transitions, find_unsatisfiable_guards, guards_overlap
from .loader import load_fsm, fsm_from_dict

__all__ = [
    "FiniteStateMachineError",
    "DuplicateStateNumberError",
    "MissingInitialStateError",
    "NonDeterministicTransitionError",
    "Expression",
    "ExpressionError",
    "ExpressionParseError",
    "ExpressionEvaluationError",
    "parse_guard",
    "TruthTable",
    "DONT_CARE",
    "FSM",
    "State",
    "Transition",
    "TransitionTableCreator",
    "create_transition_table",
    "verify_table",
    "find_overlapping_transitions",
    "find_unsatisfiable_guards",
    "guards_overlap",
    "load_fsm",
    "fsm_from_dict",
]
__version__ = "0.1.0"
