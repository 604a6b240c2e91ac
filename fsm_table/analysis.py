"""
Static determinism analysis of state machine guards using SAT.

Instead of enumerating every input assignment, each pair of guards leaving
the same state is Tseitin-encoded into one CNF and handed to a SAT solver.
A model is a witness assignment under which both transitions fire.
"""

from dataclasses import dataclass, field
from itertools import combinations
from typing import Optional

from pysat.formula import CNF
from pysat.solvers import Solver

from .expression import And, Constant, Expression, Not, Or, Variable, Xor
from .fsm import FSM, Transition


@dataclass
class TransitionOverlap:
    """Two transitions of the same kind that can fire together."""

    first: Transition
    second: Transition
    witness: dict[str, bool] = field(default_factory=dict)

    def __str__(self):
        if not self.first.has_condition:
            return f"{self.first} and {self.second} are both unconditional"
        if not self.witness:
            return f"{self.first} and {self.second} both fire for every input"
        inputs = ", ".join(f"{k}={int(v)}" for k, v in self.witness.items())
        return f"{self.first} and {self.second} both fire for {inputs}"


class _Encoder:
    """Tseitin encoder sharing variable numbers across several guards."""

    def __init__(self):
        self.cnf = CNF()
        self.var_ids: dict[str, int] = {}
        self._counter = 1

    def new_var(self) -> int:
        v = self._counter
        self._counter += 1
        return v

    def encode(self, expr: Expression) -> int:
        """Return a literal equivalent to expr, adding defining clauses."""
        if isinstance(expr, Variable):
            if expr.name not in self.var_ids:
                self.var_ids[expr.name] = self.new_var()
            return self.var_ids[expr.name]

        if isinstance(expr, Constant):
            v = self.new_var()
            self.cnf.append([v] if expr.value else [-v])
            return v

        if isinstance(expr, Not):
            return -self.encode(expr.operand)

        if isinstance(expr, And):
            lits = [self.encode(op) for op in expr.operands]
            out = self.new_var()
            # out <-> AND(lits)
            for lit in lits:
                self.cnf.append([-out, lit])
            self.cnf.append([out] + [-lit for lit in lits])
            return out

        if isinstance(expr, Or):
            lits = [self.encode(op) for op in expr.operands]
            out = self.new_var()
            # out <-> OR(lits)
            for lit in lits:
                self.cnf.append([out, -lit])
            self.cnf.append([-out] + lits)
            return out

        if isinstance(expr, Xor):
            a = self.encode(expr.left)
            b = self.encode(expr.right)
            out = self.new_var()
            self.cnf.append([-out, a, b])
            self.cnf.append([-out, -a, -b])
            self.cnf.append([out, -a, b])
            self.cnf.append([out, a, -b])
            return out

        raise TypeError(f"Unsupported expression node: {type(expr).__name__}")

    def solve(self) -> Optional[dict[str, bool]]:
        with Solver(bootstrap_with=self.cnf) as solver:
            if not solver.solve():
                return None
            model = set(solver.get_model())
        return {name: var in model for name, var in self.var_ids.items()}


def guards_overlap(first: Expression, second: Expression) -> Optional[dict[str, bool]]:
    """
    Check whether two guards can be true at the same time.

    Returns:
        A witness assignment of the variables of both guards, or None if the
        guards are mutually exclusive
    """
    encoder = _Encoder()
    encoder.cnf.append([encoder.encode(first)])
    encoder.cnf.append([encoder.encode(second)])
    return encoder.solve()


def guard_satisfiable(guard: Expression) -> bool:
    """Check whether a guard is true for at least one assignment."""
    encoder = _Encoder()
    encoder.cnf.append([encoder.encode(guard)])
    return encoder.solve() is not None


def find_overlapping_transitions(fsm: FSM) -> list[TransitionOverlap]:
    """
    Find all pairs of same-kind transitions leaving one state that can fire together.

    Unconditional pairs always overlap; conditional pairs overlap if their
    guards are jointly satisfiable.
    """
    overlaps = []
    for state in fsm.states:
        leaving = [t for t in fsm.transitions if t.start is state]
        unconditional = [t for t in leaving if not t.has_condition]
        conditional = [t for t in leaving if t.has_condition]

        for first, second in combinations(unconditional, 2):
            overlaps.append(TransitionOverlap(first, second))

        for first, second in combinations(conditional, 2):
            witness = guards_overlap(first.condition_expression, second.condition_expression)
            if witness is not None:
                overlaps.append(TransitionOverlap(first, second, witness))

    return overlaps


def find_unsatisfiable_guards(fsm: FSM) -> list[Transition]:
    """Conditional transitions whose guard can never be true."""
    return [
        t for t in fsm.transitions
        if t.has_condition and not guard_satisfiable(t.condition_expression)
    ]
