"""Tests for guard expression parsing and evaluation."""

import pytest

from fsm_table.expression import (
    And,
    Constant,
    ExpressionEvaluationError,
    ExpressionParseError,
    Not,
    Or,
    Variable,
    Xor,
    parse_guard,
)


def test_parse_and_not():
    expr = parse_guard("A & !B")
    assert expr == And((Variable("A"), Not(Variable("B"))))
    assert expr.evaluate({"A": True, "B": False})
    assert not expr.evaluate({"A": True, "B": True})


def test_juxtaposition_and_postfix_not():
    assert parse_guard("A B'") == parse_guard("A & !B")
    assert parse_guard("A*B") == parse_guard("A and B")


def test_precedence():
    assert parse_guard("A | B & C") == Or((Variable("A"), And((Variable("B"), Variable("C")))))
    assert parse_guard("A ^ B | C") == Or((Xor(Variable("A"), Variable("B")), Variable("C")))
    assert parse_guard("not (A or B)") == Not(Or((Variable("A"), Variable("B"))))


def test_constants():
    assert parse_guard("1") == Constant(True)
    assert not parse_guard("A & 0").evaluate({"A": True})


def test_xor():
    expr = parse_guard("A ^ B")
    table = [expr.evaluate({"A": a, "B": b}) for a in (False, True) for b in (False, True)]
    assert table == [False, True, True, False]


def test_free_variables_first_seen_order():
    expr = parse_guard("B & A | B & C")
    assert expr.collect_free_variables() == ["B", "A", "C"]
    assert parse_guard("1 | 0").collect_free_variables() == []


def test_missing_variable_raises():
    with pytest.raises(ExpressionEvaluationError):
        parse_guard("A & B").evaluate({"A": False})


@pytest.mark.parametrize("text", ["", "   ", "A &", "(A", "A)", "A $ B", "!"])
def test_parse_errors(text):
    with pytest.raises(ExpressionParseError):
        parse_guard(text)


def test_str_round_trip():
    for text in ["A & !B", "A | (B & C)", "!(A | B)", "A ^ B"]:
        expr = parse_guard(text)
        assert parse_guard(str(expr)) == expr
