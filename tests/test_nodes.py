"""Tests for the expression-tree model."""
from __future__ import annotations

import pytest

from formula_charts.core.enums import NodeKind
from formula_charts.core.errors import EvaluationError
from formula_charts.expression.nodes import (
    ADDITION,
    DIVISION,
    NEGATIVE,
    Expression,
    boolean,
    color,
    from_python,
    list_of,
    matrix_columns,
    native_integer,
    node_kind,
    null,
    number,
    string,
)


def test_node_kind_scalars() -> None:
    assert node_kind(number(3)) is NodeKind.NUMBER
    assert node_kind(string("a")) is NodeKind.STRING
    assert node_kind(boolean(True)) is NodeKind.BOOLEAN
    assert node_kind(boolean(False)) is NodeKind.BOOLEAN
    assert node_kind(color(1, 0, 0)) is NodeKind.COLOR
    assert node_kind(null()) is NodeKind.NULL
    assert node_kind(Expression("Symbolic.Symbol", Name="x")) is NodeKind.OTHER


def test_node_kind_list_and_matrix() -> None:
    flat = list_of(number(1), number(2))
    matrix = list_of(list_of(number(1), number(2)), list_of(number(3), number(4)))
    ragged = list_of(list_of(number(1), number(2)), list_of(number(3)))

    assert node_kind(flat) is NodeKind.LIST
    assert node_kind(matrix) is NodeKind.MATRIX
    assert node_kind(ragged) is NodeKind.LIST
    assert node_kind(list_of()) is NodeKind.LIST


def test_matrix_columns() -> None:
    assert matrix_columns(list_of(list_of(number(1)), list_of(number(2)))) == 1
    assert matrix_columns(list_of(list_of(number(1), number(2), number(3)))) == 3
    assert matrix_columns(list_of(number(1))) == 0
    assert matrix_columns(list_of(list_of())) == 0
    assert matrix_columns(number(1)) == 0


def test_evaluate_arithmetic() -> None:
    assert number(2.5).evaluate() == 2.5
    assert Expression(NEGATIVE, [number(4)]).evaluate() == -4
    assert Expression(ADDITION, [number(1), number(2), number(3)]).evaluate() == 6
    assert Expression(DIVISION, [number(1), number(4)]).evaluate() == 0.25


def test_evaluate_non_numeric_raises() -> None:
    with pytest.raises(EvaluationError):
        string("x").evaluate()
    with pytest.raises(EvaluationError):
        Expression(DIVISION, [number(1), number(0)]).evaluate()
    with pytest.raises(EvaluationError):
        Expression("Math.Number", Value=True).evaluate()


def test_native_integer() -> None:
    assert native_integer(number(7)) == 7
    assert native_integer(number(-3)) == -3
    assert native_integer(number(2.5)) is None
    assert native_integer(string("7")) is None


def test_replace_by_updates_parent() -> None:
    child = number(1)
    parent = list_of(number(0), child)
    replacement = string("done")

    child.replace_by(replacement)

    assert parent.children[1] is replacement
    assert replacement.parent is parent
    assert child.parent is None


def test_from_python() -> None:
    node = from_python([["a", 1], ["b", 2.5]])
    assert node_kind(node) is NodeKind.MATRIX
    assert node.children[0].children[0].get("Value") == "a"
    assert node.children[1].children[1].evaluate() == 2.5

    assert node_kind(from_python(True)) is NodeKind.BOOLEAN
    assert node_kind(from_python(None)) is NodeKind.NULL

    c = from_python({"red": 1, "green": 0, "blue": 0.5})
    assert node_kind(c) is NodeKind.COLOR
    assert c.get("Blue") == 0.5
    assert c.get("Alpha") == 1.0


def test_from_python_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        from_python(object())


@pytest.mark.parametrize("channel", [None, "high", True])
def test_from_python_rejects_bad_color_channel(channel) -> None:
    with pytest.raises(TypeError, match="Color channel 'blue'"):
        from_python({"red": 1, "green": 0, "blue": channel})
