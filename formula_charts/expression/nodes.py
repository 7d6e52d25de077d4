"""Minimal expression-tree model consumed by the chart reducers.

A node carries a tag (``"Math.Number"``, ``"String.String"``, ``"List.List"``,
...), named attributes and ordered children. Chart code never compares tags
directly; it goes through :func:`node_kind`, which folds the open tag space
into the closed :class:`NodeKind` variant.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.enums import NodeKind
from ..core.errors import EvaluationError

NUMBER = "Math.Number"
STRING = "String.String"
TRUE = "Logic.True"
FALSE = "Logic.False"
COLOR = "Color.Color"
LIST = "List.List"
NULL = "Null"
RASTER = "Graphics.RasterGraphics"

ADDITION = "Math.Arithmetic.Addition"
MULTIPLICATION = "Math.Arithmetic.Multiplication"
DIVISION = "Math.Arithmetic.Division"
NEGATIVE = "Math.Arithmetic.Negative"


class Expression:
    """A node of an expression tree."""

    def __init__(self, tag: str, children: list[Expression] | tuple = (), **attributes: Any):
        self.tag = tag
        self.children: list[Expression] = []
        self.parent: Expression | None = None
        self.error: str | None = None
        self._attributes: dict[str, Any] = dict(attributes)
        for child in children:
            self.add_child(child)

    def __repr__(self) -> str:
        if "Value" in self._attributes and self.tag != RASTER:
            return f"{self.tag}({self._attributes['Value']!r})"
        if self.children:
            return f"{self.tag}{self.children!r}"
        return self.tag

    def get_tag(self) -> str:
        return self.tag

    def get(self, name: str) -> Any:
        return self._attributes[name]

    def set(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    def add_child(self, child: Expression) -> None:
        child.parent = self
        self.children.append(child)

    def replace_by(self, node: Expression) -> None:
        """Put ``node`` in this node's place inside its parent."""
        node.parent = self.parent
        if self.parent is not None:
            siblings = self.parent.children
            for i, sibling in enumerate(siblings):
                if sibling is self:
                    siblings[i] = node
                    break
        self.parent = None

    def evaluate(self) -> int | float:
        """Reduce this node to a native number.

        Raises:
            EvaluationError: If the node is not numeric.
        """
        if self.tag == NUMBER:
            value = self._attributes.get("Value")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise EvaluationError(f"{self.tag} holds a non-numeric value")
            return value
        if self.tag == NEGATIVE and len(self.children) == 1:
            return -self.children[0].evaluate()
        if self.tag == ADDITION and self.children:
            return sum(child.evaluate() for child in self.children)
        if self.tag == MULTIPLICATION and self.children:
            result: int | float = 1
            for child in self.children:
                result *= child.evaluate()
            return result
        if self.tag == DIVISION and len(self.children) == 2:
            numerator = self.children[0].evaluate()
            denominator = self.children[1].evaluate()
            if denominator == 0:
                raise EvaluationError("Division by zero")
            return numerator / denominator
        raise EvaluationError(f"{self.tag} is not numeric")


def matrix_columns(node: Expression) -> int:
    """Return the column count of a matrix-shaped list, or 0 if it is not one."""
    if node.tag != LIST or not node.children:
        return 0
    columns = -1
    for row in node.children:
        if row.tag != LIST or not row.children:
            return 0
        if columns == -1:
            columns = len(row.children)
        elif len(row.children) != columns:
            return 0
    return columns


def node_kind(node: Expression) -> NodeKind:
    tag = node.tag
    if tag == NUMBER:
        return NodeKind.NUMBER
    if tag == STRING:
        return NodeKind.STRING
    if tag in (TRUE, FALSE):
        return NodeKind.BOOLEAN
    if tag == COLOR:
        return NodeKind.COLOR
    if tag == NULL:
        return NodeKind.NULL
    if tag == LIST:
        return NodeKind.MATRIX if matrix_columns(node) > 0 else NodeKind.LIST
    return NodeKind.OTHER


def native_integer(node: Expression) -> int | None:
    """Return the integer held by a number node, or None."""
    if node.tag != NUMBER:
        return None
    value = node.get("Value")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


# Builders


def number(value: int | float) -> Expression:
    return Expression(NUMBER, Value=value)


def string(value: str) -> Expression:
    return Expression(STRING, Value=value)


def boolean(value: bool) -> Expression:
    return Expression(TRUE if value else FALSE)


def color(red: float, green: float, blue: float, alpha: float = 1.0) -> Expression:
    return Expression(COLOR, Red=red, Green=green, Blue=blue, Alpha=alpha)


def null() -> Expression:
    return Expression(NULL)


def list_of(*items: Expression) -> Expression:
    return Expression(LIST, list(items))


def option(name: str, value: Expression) -> Expression:
    return list_of(string(name), value)


def chart(tag: str, data: Expression, options: Expression | None = None) -> Expression:
    children = [data] if options is None else [data, options]
    return Expression(tag, children)


def from_python(value: Any) -> Expression:
    """Convert plain Python (or YAML-loaded) data into an expression tree.

    Mappings with ``red``/``green``/``blue`` keys become colors; any other
    mapping becomes an option list with one entry per key.
    """
    if value is None:
        return null()
    if isinstance(value, bool):
        return boolean(value)
    if isinstance(value, (int, float)):
        return number(value)
    if isinstance(value, str):
        return string(value)
    if isinstance(value, Mapping):
        keys = {str(k).lower() for k in value}
        if {"red", "green", "blue"} <= keys:
            channels = {}
            for k, v in value.items():
                if isinstance(v, bool) or not isinstance(v, (int, float)):
                    raise TypeError(f"Color channel {k!r} must be a number, got {v!r}")
                channels[str(k).lower()] = float(v)
            return color(
                channels["red"], channels["green"], channels["blue"], channels.get("alpha", 1.0)
            )
        return list_of(*(option(str(k), from_python(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return list_of(*(from_python(item) for item in value))
    raise TypeError(f"Cannot convert {type(value).__name__} to an expression")
