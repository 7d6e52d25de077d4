"""Derivation of the tabular chart data model from expression data.

Two shapes are accepted:

* a flat list of numeric nodes: one implicit series, whose categories are
  sequential integers beginning at ``ChartOptions.starting``;
* a matrix: column 0 holds the categories (strings or numbers, decided by the
  first row), columns 1..N hold one numeric series each.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from ..core.enums import ChartKind, NodeKind
from ..core.errors import EvaluationError, ValidationError
from ..core.logging_config import get_logger
from ..expression.nodes import Expression, matrix_columns, node_kind
from ..expression.reduction import ErrorSink
from .options import ChartOptions

logger = get_logger(__name__)

ColumnType = Literal["string", "number"]


@dataclass(frozen=True, slots=True)
class Column:
    type: ColumnType
    label: str | None = None


@dataclass(frozen=True, slots=True)
class DataTable:
    columns: tuple[Column, ...]
    rows: tuple[tuple[Any, ...], ...]

    @property
    def number_of_columns(self) -> int:
        return len(self.columns)

    @property
    def number_of_rows(self) -> int:
        return len(self.rows)

    @property
    def series_labels(self) -> list[str | None]:
        return [column.label for column in self.columns[1:]]

    def column_values(self, index: int) -> list[Any]:
        return [row[index] for row in self.rows]

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the cols/rows layout charting libraries accept."""
        return {
            "cols": [{"type": c.type, "label": c.label or ""} for c in self.columns],
            "rows": [{"c": [{"v": v} for v in row]} for row in self.rows],
        }


class TableBuilder:
    """Build a :class:`DataTable` for one chart invocation."""

    def __init__(self, kind: ChartKind, options: ChartOptions, sink: ErrorSink):
        self.kind = kind
        self.options = options
        self.sink = sink

    def build(self, data: Expression) -> DataTable | None:
        """Return the table for ``data``, or None after reporting the failure."""
        try:
            table = self._build(data)
        except ValidationError as e:
            self.sink.set_in_error(e.node, e.message)
            return None
        logger.debug(
            f"Data table built for {self.kind.value} chart",
            extra={"rows": table.number_of_rows, "columns": table.number_of_columns},
        )
        return table

    def _build(self, data: Expression) -> DataTable:
        columns = matrix_columns(data)
        if columns <= 0:
            return self._from_sequence(data)
        return self._from_matrix(data, columns)

    def _series_value(self, cell: Expression) -> int | float:
        try:
            value = cell.evaluate()
        except EvaluationError:
            raise ValidationError(cell, "Value is not numeric") from None
        if value <= 0:
            if self.kind is ChartKind.PIE:
                raise ValidationError(cell, "Non-positive value for pie chart")
            if self.options.logarithmic_scale:
                raise ValidationError(cell, "Non-positive value for logarithmic scale")
        return value

    def _from_sequence(self, data: Expression) -> DataTable:
        if node_kind(data) is not NodeKind.LIST:
            raise ValidationError(data, "Invalid data")

        names = self.options.series_names
        if names is not None and not isinstance(names, str):
            raise ValidationError(data, "Series names must be a single name for single-series data")

        header = (Column("number"), Column("number", names))
        rows = tuple(
            (r + self.options.starting, self._series_value(cell))
            for r, cell in enumerate(data.children)
        )
        return DataTable(columns=header, rows=rows)

    def _from_matrix(self, data: Expression, columns: int) -> DataTable:
        if columns == 1:
            raise ValidationError(data, "Data has no series")

        names = self.options.series_names
        if isinstance(names, str):
            names = (names,)
        if names is not None and len(names) != columns - 1:
            raise ValidationError(data, "Series data and names do not match")

        string_categories = node_kind(data.children[0].children[0]) is NodeKind.STRING
        if not string_categories and self.kind is ChartKind.PIE:
            raise ValidationError(data, "Pie chart must have non-numerical categories")

        header = [Column("string" if string_categories else "number")]
        for c in range(1, columns):
            header.append(Column("number", names[c - 1] if names is not None else None))

        rows = []
        for row in data.children:
            category = row.children[0]
            values: list[Any] = [self._category_value(category, string_categories)]
            values.extend(self._series_value(cell) for cell in row.children[1:])
            rows.append(tuple(values))

        return DataTable(columns=tuple(header), rows=tuple(rows))

    def _category_value(self, cell: Expression, string_categories: bool) -> Any:
        if string_categories:
            if node_kind(cell) is not NodeKind.STRING:
                raise ValidationError(cell, "Invalid type")
            return cell.get("Value")
        try:
            return cell.evaluate()
        except EvaluationError:
            raise ValidationError(cell, "Value is not numeric") from None


def build_data_table(
    kind: ChartKind, data: Expression, options: ChartOptions, sink: ErrorSink
) -> DataTable | None:
    return TableBuilder(kind, options, sink).build(data)
