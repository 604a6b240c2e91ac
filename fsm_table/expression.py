"""
Boolean guard expressions for state transitions.

A guard is a small expression tree over named input variables:

    A & !B          AND / NOT
    A | B ^ C       OR / XOR
    A B'            juxtaposition is AND, postfix ' is NOT

Guards are evaluated against a total assignment of their free variables.
"""

import re
from dataclasses import dataclass
from typing import Mapping, Optional


class ExpressionError(ValueError):
    """Base class for guard expression errors."""


class ExpressionParseError(ExpressionError):
    """Raised when guard text cannot be parsed."""


class ExpressionEvaluationError(ExpressionError):
    """Raised when a guard cannot be evaluated for an assignment."""


class Expression:
    """Base class of all guard expression nodes."""

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        raise NotImplementedError

    def collect_free_variables(self) -> list[str]:
        """Return free variable names in first-seen order, without duplicates."""
        seen: dict[str, None] = {}
        self._collect(seen)
        return list(seen)

    def _collect(self, seen: dict[str, None]):
        raise NotImplementedError


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        try:
            return bool(assignment[self.name])
        except KeyError:
            raise ExpressionEvaluationError(
                f"Variable {self.name!r} has no value"
            ) from None

    def _collect(self, seen):
        seen.setdefault(self.name, None)

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Constant(Expression):
    value: bool

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return self.value

    def _collect(self, seen):
        pass

    def __str__(self):
        return "1" if self.value else "0"


@dataclass(frozen=True)
class Not(Expression):
    operand: Expression

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return not self.operand.evaluate(assignment)

    def _collect(self, seen):
        self.operand._collect(seen)

    def __str__(self):
        return f"!{_wrap(self.operand)}"


@dataclass(frozen=True)
class And(Expression):
    operands: tuple[Expression, ...]

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        # no short-circuit: a missing variable always raises
        return all([op.evaluate(assignment) for op in self.operands])

    def _collect(self, seen):
        for op in self.operands:
            op._collect(seen)

    def __str__(self):
        return " & ".join(_wrap(op) for op in self.operands)


@dataclass(frozen=True)
class Or(Expression):
    operands: tuple[Expression, ...]

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return any([op.evaluate(assignment) for op in self.operands])

    def _collect(self, seen):
        for op in self.operands:
            op._collect(seen)

    def __str__(self):
        return " | ".join(_wrap(op) for op in self.operands)


@dataclass(frozen=True)
class Xor(Expression):
    left: Expression
    right: Expression

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return self.left.evaluate(assignment) != self.right.evaluate(assignment)

    def _collect(self, seen):
        self.left._collect(seen)
        self.right._collect(seen)

    def __str__(self):
        return f"{_wrap(self.left)} ^ {_wrap(self.right)}"


def _wrap(expr: Expression) -> str:
    if isinstance(expr, (Variable, Constant, Not)):
        return str(expr)
    return f"({expr})"


# =============================================================================
# Parser
# =============================================================================

_TOKEN_RE = re.compile(r"\s*(?:([A-Za-z_][A-Za-z0-9_]*)|([01])|(.))")

_AND_OPS = ("&", "*", "and")
_OR_OPS = ("|", "+", "or")
_NOT_OPS = ("!", "~", "not")


class _Parser:
    # Grammar:
    #   or    := xor (('|' | '+' | 'or') xor)*
    #   xor   := and ('^' and)*
    #   and   := unary (('&' | '*' | 'and')? unary)*
    #   unary := ('!' | '~' | 'not') unary | atom "'"*
    #   atom  := name | '0' | '1' | '(' or ')'

    def __init__(self, text: str):
        self.text = text
        self.tokens = self._tokenize(text)
        self.i = 0

    @staticmethod
    def _tokenize(text: str) -> list[tuple[str, str, int]]:
        tokens = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            m = _TOKEN_RE.match(text, pos)
            name, const, op = m.groups()
            if name is not None:
                kind = "op" if name in ("and", "or", "not") else "name"
                tokens.append((kind, name, m.start(1)))
            elif const is not None:
                tokens.append(("const", const, m.start(2)))
            else:
                if op not in "&*|+^!~()'":
                    raise ExpressionParseError(
                        f"Unexpected character {op!r} at position {m.start(3)} in {text!r}"
                    )
                tokens.append(("op", op, m.start(3)))
            pos = m.end()
        return tokens

    def parse(self) -> Expression:
        if not self.tokens:
            raise ExpressionParseError("Empty expression")
        expr = self._parse_or()
        if self.i < len(self.tokens):
            _, text, pos = self.tokens[self.i]
            raise ExpressionParseError(
                f"Unexpected {text!r} at position {pos} in {self.text!r}"
            )
        return expr

    def _peek(self) -> Optional[tuple[str, str, int]]:
        if self.i < len(self.tokens):
            return self.tokens[self.i]
        return None

    def _accept(self, ops) -> bool:
        tok = self._peek()
        if tok is not None and tok[0] == "op" and tok[1] in ops:
            self.i += 1
            return True
        return False

    def _parse_or(self) -> Expression:
        operands = [self._parse_xor()]
        while self._accept(_OR_OPS):
            operands.append(self._parse_xor())
        if len(operands) == 1:
            return operands[0]
        return Or(tuple(operands))

    def _parse_xor(self) -> Expression:
        expr = self._parse_and()
        while self._accept(("^",)):
            expr = Xor(expr, self._parse_and())
        return expr

    def _parse_and(self) -> Expression:
        operands = [self._parse_unary()]
        while True:
            if self._accept(_AND_OPS) or self._starts_unary():
                operands.append(self._parse_unary())
            else:
                break
        if len(operands) == 1:
            return operands[0]
        return And(tuple(operands))

    def _starts_unary(self) -> bool:
        tok = self._peek()
        if tok is None:
            return False
        kind, text, _ = tok
        return kind in ("name", "const") or text == "(" or text in _NOT_OPS

    def _parse_unary(self) -> Expression:
        if self._accept(_NOT_OPS):
            return Not(self._parse_unary())
        expr = self._parse_atom()
        while self._accept(("'",)):
            expr = Not(expr)
        return expr

    def _parse_atom(self) -> Expression:
        tok = self._peek()
        if tok is None:
            raise ExpressionParseError(f"Unexpected end of expression in {self.text!r}")
        kind, text, pos = tok
        if kind == "name":
            self.i += 1
            return Variable(text)
        if kind == "const":
            self.i += 1
            return Constant(text == "1")
        if self._accept(("(",)):
            expr = self._parse_or()
            if not self._accept((")",)):
                raise ExpressionParseError(f"Missing ')' in {self.text!r}")
            return expr
        raise ExpressionParseError(f"Unexpected {text!r} at position {pos} in {self.text!r}")


def parse_guard(text: str) -> Expression:
    """
    Parse guard text into an expression tree.

    Args:
        text: Guard text such as ``"A & !B"`` or ``"A B' + C"``

    Returns:
        The parsed expression

    Raises:
        ExpressionParseError: If the text is not a valid guard
    """
    return _Parser(text).parse()
