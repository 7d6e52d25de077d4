"""Chart option validation.

Options arrive as a list of ``[name, value]`` entries. Each entry is checked
independently; every failure is reported to the error sink against the
offending node, and a :class:`ChartOptions` is only produced when all entries
are valid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

from ..core.enums import ChartKind, LegendPosition, NodeKind, SliceText, Stacking
from ..core.errors import ValidationError
from ..core.logging_config import get_logger
from ..expression.nodes import Expression, native_integer, node_kind
from ..expression.reduction import ErrorSink

logger = get_logger(__name__)

INVALID_FOR_CHART = "Invalid option for the type of chart"

PIE_ONLY = frozenset({"3d", "slice text"})
# reported against the value node instead of the whole entry
VALUE_LOCALIZED = frozenset({"slice text", "logarithmic scale"})
NOT_FOR_PIE = frozenset(
    {
        "domain text",
        "range text",
        "series names",
        "horizontal domain",
        "stacking",
        "logarithmic scale",
    }
)


@dataclass(frozen=True, slots=True)
class ChartOptions:
    width: int = 400
    height: int = 300
    title: str | None = None
    series_names: str | tuple[str, ...] | None = None
    horizontal_domain: bool = True
    stacking: Stacking | None = None
    is_3d: bool = False
    background_color: str | None = None
    legend_position: LegendPosition = LegendPosition.BOTTOM
    slice_text: SliceText = SliceText.PERCENTAGE
    domain_text: str | None = None
    range_text: str | None = None
    logarithmic_scale: bool | None = None
    starting: int = 1
    dot_size: int | None = None


def color_to_hex(red: float, green: float, blue: float) -> str:
    """Format color components in [0, 1] as ``#rrggbb``.

    Each channel is rounded half up (``floor(c * 255 + 0.5)``) rather than
    truncated, so 0.5 maps to ``80`` and 0.1 to ``1a``.
    """
    return "#" + "".join(f"{int(math.floor(c * 255 + 0.5)):02x}" for c in (red, green, blue))


def _string_value(value: Expression, node: Expression, message: str) -> str:
    if node_kind(value) is not NodeKind.STRING:
        raise ValidationError(node, message)
    return value.get("Value")


def _boolean_value(value: Expression, node: Expression) -> bool:
    if node_kind(value) is not NodeKind.BOOLEAN:
        raise ValidationError(node, "Option is not a boolean value")
    return value.tag == "Logic.True"


def _integer_value(value: Expression) -> int:
    result = native_integer(value)
    if result is None:
        raise ValidationError(value, "Value is not a valid number")
    return result


class OptionsValidator:
    """Validate option entries for one kind of chart."""

    def __init__(self, kind: ChartKind, sink: ErrorSink):
        self.kind = kind
        self.sink = sink
        self._checks = {
            "size": self._size,
            "title": self._title,
            "domain text": self._domain_text,
            "range text": self._range_text,
            "3d": self._3d,
            "series names": self._series_names,
            "horizontal domain": self._horizontal_domain,
            "stacking": self._stacking,
            "background color": self._background_color,
            "legend position": self._legend_position,
            "slice text": self._slice_text,
            "logarithmic scale": self._logarithmic_scale,
            "starting": self._starting,
            "dot size": self._dot_size,
        }

    @property
    def is_pie(self) -> bool:
        return self.kind is ChartKind.PIE

    def validate(self, options: Expression | None) -> ChartOptions | None:
        """Validate an option list and return the resolved options.

        Args:
            options: A ``List.List`` of ``[name, value]`` entries, or None
                when the chart was invoked without options.

        Returns:
            ChartOptions on success, None if any entry was reported in error.
        """
        if options is None:
            return ChartOptions()
        if node_kind(options) not in (NodeKind.LIST, NodeKind.MATRIX):
            self.sink.set_in_error(options, "Invalid options")
            return None

        fields: dict[str, Any] = {}
        valid = True
        for entry in options.children:
            updates = self.check_option(entry)
            if updates is None:
                valid = False
                continue
            fields.update(updates)

        if not valid:
            return None
        return replace(ChartOptions(), **fields)

    def check_option(self, entry: Expression) -> dict[str, Any] | None:
        """Check a single ``[name, value]`` entry.

        Returns:
            The ChartOptions fields the entry sets, or None after reporting
            the failure to the sink.
        """
        try:
            return self._check(entry)
        except ValidationError as e:
            self.sink.set_in_error(e.node, e.message)
            return None

    def _check(self, entry: Expression) -> dict[str, Any]:
        if node_kind(entry) not in (NodeKind.LIST, NodeKind.MATRIX) or len(entry.children) != 2:
            raise ValidationError(entry, "Invalid option")
        name_node, value = entry.children
        name = _string_value(name_node, name_node, "Option name is not a string").lower()

        check = self._checks.get(name)
        if check is None:
            raise ValidationError(name_node, "Unknown option")
        if (name in PIE_ONLY and not self.is_pie) or (name in NOT_FOR_PIE and self.is_pie):
            raise ValidationError(value if name in VALUE_LOCALIZED else entry, INVALID_FOR_CHART)
        return check(value, entry)

    def _size(self, value: Expression, entry: Expression) -> dict[str, Any]:
        if node_kind(value) not in (NodeKind.LIST, NodeKind.MATRIX):
            raise ValidationError(value, "Value must be a list")
        if len(value.children) != 2:
            raise ValidationError(value, "Value must be a two-element list")
        dimensions = []
        for child in value.children:
            n = native_integer(child)
            if n is None or n <= 0:
                raise ValidationError(child, "Value is not a valid number")
            dimensions.append(n)
        return {"width": dimensions[0], "height": dimensions[1]}

    def _title(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"title": _string_value(value, value, "Value is not a string")}

    def _domain_text(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"domain_text": _string_value(value, entry, "Option is not a string")}

    def _range_text(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"range_text": _string_value(value, entry, "Option is not a string")}

    def _3d(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"is_3d": _boolean_value(value, entry)}

    def _series_names(self, value: Expression, entry: Expression) -> dict[str, Any]:
        kind = node_kind(value)
        if kind is NodeKind.STRING:
            return {"series_names": value.get("Value")}
        if kind is not NodeKind.LIST:
            raise ValidationError(entry, "Invalid option")
        if not value.children:
            raise ValidationError(value, "Empty list")
        names = tuple(_string_value(child, child, "Value is not a string") for child in value.children)
        return {"series_names": names}

    def _horizontal_domain(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"horizontal_domain": _boolean_value(value, entry)}

    def _stacking(self, value: Expression, entry: Expression) -> dict[str, Any]:
        s = _string_value(value, entry, "Expression is not a string").lower()
        try:
            return {"stacking": Stacking(s)}
        except ValueError:
            raise ValidationError(value, "Invalid option") from None

    def _background_color(self, value: Expression, entry: Expression) -> dict[str, Any]:
        kind = node_kind(value)
        if kind is NodeKind.NULL:
            return {"background_color": "transparent"}
        if kind is not NodeKind.COLOR:
            raise ValidationError(value, "Invalid option")
        components = [value.get("Red"), value.get("Green"), value.get("Blue")]
        for c in components:
            if isinstance(c, bool) or not isinstance(c, (int, float)) or not 0 <= c <= 1:
                raise ValidationError(value, "Invalid color")
        return {"background_color": color_to_hex(*components)}

    def _legend_position(self, value: Expression, entry: Expression) -> dict[str, Any]:
        s = _string_value(value, value, "Value is not a string").lower()
        if s == "beside slice":
            if not self.is_pie:
                raise ValidationError(value, INVALID_FOR_CHART)
            return {"legend_position": LegendPosition.LABELED}
        if s == LegendPosition.LABELED.value:
            raise ValidationError(value, "Invalid option")
        try:
            return {"legend_position": LegendPosition(s)}
        except ValueError:
            raise ValidationError(value, "Invalid option") from None

    def _slice_text(self, value: Expression, entry: Expression) -> dict[str, Any]:
        s = _string_value(value, value, "Expression is not a string").lower()
        try:
            return {"slice_text": SliceText(s)}
        except ValueError:
            raise ValidationError(value, "Invalid option") from None

    def _logarithmic_scale(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"logarithmic_scale": _boolean_value(value, entry)}

    def _starting(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"starting": _integer_value(value)}

    def _dot_size(self, value: Expression, entry: Expression) -> dict[str, Any]:
        return {"dot_size": _integer_value(value)}


def validate_options(
    kind: ChartKind, options: Expression | None, sink: ErrorSink
) -> ChartOptions | None:
    """Convenience wrapper around :class:`OptionsValidator`."""
    result = OptionsValidator(kind, sink).validate(options)
    if result is not None:
        logger.debug(f"Options resolved for {kind.value} chart", extra={"options": repr(result)})
    return result
