from __future__ import annotations

from enum import Enum


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    AREA = "area"
    DOT = "dot"
    STEP = "step"
    PIE = "pie"

    @property
    def tag(self) -> str:
        return "Chart." + self.value.capitalize()

    @classmethod
    def from_tag(cls, tag: str) -> ChartKind:
        prefix, _, name = tag.partition(".")
        if prefix != "Chart":
            raise ValueError(f"Not a chart tag: {tag!r}")
        return cls(name.lower())


class NodeKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    COLOR = "color"
    LIST = "list"
    MATRIX = "matrix"
    NULL = "null"
    OTHER = "other"


class Stacking(str, Enum):
    NONE = "none"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class LegendPosition(str, Enum):
    NONE = "none"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    LABELED = "labeled"


class SliceText(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    VALUE = "value"
    LABEL = "label"
