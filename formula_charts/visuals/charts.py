"""Chart rendering with matplotlib."""

from __future__ import annotations

import asyncio
import base64
import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any

import matplotlib
import matplotlib.image
import numpy as np
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import Wedge

from ..charting.table import DataTable
from ..core.enums import ChartKind
from ..core.errors import RenderError
from ..core.logging_config import get_logger

logger = get_logger(__name__)

_initialized = False

LEGEND_LOCATIONS = {
    "top": "upper center",
    "bottom": "lower center",
    "left": "center left",
    "right": "center right",
}

SERIES_COLORS = ["#3366cc", "#dc3912", "#ff9900", "#109618", "#990099", "#0099c6", "#dd4477"]


def initialize_backend() -> bool:
    """Select the non-interactive Agg backend.

    Returns:
        True on the first call, False when the backend was already set up.
    """
    global _initialized
    if _initialized:
        return False
    matplotlib.use("Agg")
    _initialized = True
    logger.debug("matplotlib backend initialized")
    return True


@dataclass(frozen=True)
class Bitmap:
    """An RGBA raster image, shape (height, width, 4)."""

    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_png(self) -> bytes:
        buffer = BytesIO()
        matplotlib.image.imsave(buffer, self.pixels, format="png")
        return buffer.getvalue()

    def to_base64(self) -> str:
        return base64.b64encode(self.to_png()).decode("utf-8")

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_png())
        logger.debug(f"Chart saved to {path}")
        return path


def _stack_mode(bag: dict[str, Any]) -> str | None:
    mode = bag.get("isStacked")
    if mode in (None, "none"):
        return None
    return mode


class ChartRenderer:
    """Draw a DataTable on a fixed-size pixel canvas."""

    def __init__(self, dpi: int = 100):
        """Initialize chart renderer.

        Args:
            dpi: Resolution used to convert the pixel size into a figure size
        """
        self.dpi = dpi
        initialize_backend()

    async def render_async(self, kind: ChartKind, table: DataTable, bag: dict[str, Any]) -> Bitmap:
        return await asyncio.to_thread(self.render, kind, table, bag)

    def render(self, kind: ChartKind, table: DataTable, bag: dict[str, Any]) -> Bitmap:
        """Render ``table`` as a ``kind`` chart.

        Args:
            kind: Chart kind to draw
            table: Validated chart data
            bag: Renderer options produced by ``translate_options``

        Returns:
            Bitmap of exactly ``bag["width"]`` x ``bag["height"]`` pixels

        Raises:
            RenderError: If matplotlib fails for any reason, including running
                out of memory on very large canvases
        """
        width, height = bag["width"], bag["height"]
        try:
            fig = Figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
            canvas = FigureCanvasAgg(fig)
            ax = fig.add_subplot()
            self._style_background(fig, ax, bag)
            if kind is ChartKind.PIE:
                self._draw_pie(ax, table, bag)
            elif kind is ChartKind.BAR:
                self._draw_bars(ax, table, bag)
            else:
                self._draw_series(ax, kind, table, bag)
            self._decorate(ax, kind, bag)
            canvas.draw()
            pixels = np.asarray(canvas.buffer_rgba()).copy()
        except Exception as e:
            raise RenderError(f"Failed to render {kind.value} chart: {e}") from e

        logger.debug(
            f"Rendered {kind.value} chart",
            extra={"width": pixels.shape[1], "height": pixels.shape[0]},
        )
        return Bitmap(pixels=pixels)

    def _style_background(self, fig: Figure, ax: Axes, bag: dict[str, Any]) -> None:
        background = bag.get("backgroundColor", {})
        fill = background.get("fill")
        if fill == "transparent":
            fig.patch.set_alpha(0.0)
            ax.patch.set_alpha(0.0)
        elif fill is not None:
            fig.patch.set_facecolor(fill)
            ax.set_facecolor(fill)
        fig.patch.set_edgecolor(background.get("stroke", "black"))
        fig.patch.set_linewidth(background.get("strokeWidth", 1))

    def _domain(self, table: DataTable) -> tuple[np.ndarray, list[str] | None]:
        """Return category positions and, for string categories, tick labels."""
        categories = table.column_values(0)
        if table.columns[0].type == "number":
            return np.asarray(categories, dtype=float), None
        return np.arange(len(categories), dtype=float), [str(c) for c in categories]

    def _series(self, table: DataTable, bag: dict[str, Any]) -> np.ndarray:
        values = np.array(
            [table.column_values(c) for c in range(1, table.number_of_columns)], dtype=float
        ).reshape(table.number_of_columns - 1, table.number_of_rows)
        if _stack_mode(bag) == "relative":
            totals = values.sum(axis=0)
            values = np.divide(values, totals, out=np.zeros_like(values), where=totals != 0) * 100.0
        return values

    def _labels(self, table: DataTable) -> list[str]:
        return [label or f"Series {i}" for i, label in enumerate(table.series_labels, start=1)]

    def _draw_bars(self, ax: Axes, table: DataTable, bag: dict[str, Any]) -> None:
        vertical_bars = bag.get("orientation") != "vertical"
        categories = table.column_values(0)
        positions = np.arange(len(categories), dtype=float)
        series = self._series(table, bag)
        stacked = _stack_mode(bag) is not None

        count = max(len(series), 1)
        width = 0.8 if stacked else 0.8 / count
        base = np.zeros(len(categories))

        for i, (values, label) in enumerate(zip(series, self._labels(table), strict=True)):
            color = SERIES_COLORS[i % len(SERIES_COLORS)]
            offsets = positions if stacked else positions - 0.4 + width * (i + 0.5)
            if vertical_bars:
                ax.bar(offsets, values, width, bottom=base, label=label, color=color)
            else:
                ax.barh(offsets, values, height=width, left=base, label=label, color=color)
            if stacked:
                base = base + values

        tick_labels = [str(c) for c in categories]
        if vertical_bars:
            ax.set_xticks(positions)
            ax.set_xticklabels(tick_labels)
        else:
            ax.set_yticks(positions)
            ax.set_yticklabels(tick_labels)
            ax.invert_yaxis()

    def _draw_series(self, ax: Axes, kind: ChartKind, table: DataTable, bag: dict[str, Any]) -> None:
        horizontal = bag.get("orientation") != "vertical"
        x, tick_labels = self._domain(table)
        series = self._series(table, bag)
        stacked = _stack_mode(bag) is not None and kind is not ChartKind.DOT
        point_size = bag.get("pointSize")

        lower = np.zeros(len(x))
        for i, (values, label) in enumerate(zip(series, self._labels(table), strict=True)):
            color = SERIES_COLORS[i % len(SERIES_COLORS)]
            upper = lower + values if stacked else values

            if kind is ChartKind.DOT:
                xy = (x, upper) if horizontal else (upper, x)
                size = point_size**2 if point_size else None
                ax.scatter(*xy, s=size, label=label, color=color)
            elif kind is ChartKind.LINE:
                xy = (x, upper) if horizontal else (upper, x)
                marker = "o" if point_size else None
                ax.plot(*xy, label=label, color=color, marker=marker, markersize=point_size)
            else:
                step = "mid" if kind is ChartKind.STEP else None
                base = lower if stacked else np.zeros(len(x))
                if horizontal:
                    ax.fill_between(x, base, upper, step=step, alpha=0.3, color=color)
                    if step:
                        ax.step(x, upper, where=step, label=label, color=color)
                    else:
                        ax.plot(x, upper, label=label, color=color)
                else:
                    ax.fill_betweenx(x, base, upper, step=step, alpha=0.3, color=color)
                    if step:
                        ax.step(upper, x, where=step, label=label, color=color)
                    else:
                        ax.plot(upper, x, label=label, color=color)

            if stacked:
                lower = upper

        if tick_labels is not None:
            if horizontal:
                ax.set_xticks(x)
                ax.set_xticklabels(tick_labels)
            else:
                ax.set_yticks(x)
                ax.set_yticklabels(tick_labels)

    def _draw_pie(self, ax: Axes, table: DataTable, bag: dict[str, Any]) -> None:
        labels = [str(c) for c in table.column_values(0)]
        values = np.asarray(table.column_values(1), dtype=float)
        total = float(values.sum())
        slice_text = bag.get("pieSliceText", "percentage")
        beside = bag.get("legend", {}).get("position") == "labeled"

        autopct: Any = None
        if slice_text == "percentage":
            autopct = "%1.1f%%"
        elif slice_text == "value":
            autopct = lambda pct: f"{pct * total / 100.0:g}"  # noqa: E731

        ax.pie(
            values,
            labels=labels if beside else None,
            autopct=autopct,
            startangle=90,
            counterclock=False,
            shadow=bool(bag.get("is3D")),
            colors=[SERIES_COLORS[i % len(SERIES_COLORS)] for i in range(len(values))],
        )
        wedges = [patch for patch in ax.patches if isinstance(patch, Wedge)]

        if slice_text == "label":
            for wedge, label in zip(wedges, labels, strict=True):
                angle = math.radians((wedge.theta1 + wedge.theta2) / 2.0)
                ax.text(0.6 * math.cos(angle), 0.6 * math.sin(angle), label, ha="center", va="center")

        ax.set_aspect("equal")
        position = bag.get("legend", {}).get("position")
        if position in LEGEND_LOCATIONS:
            ax.legend(wedges, labels, loc=LEGEND_LOCATIONS[position])

    def _decorate(self, ax: Axes, kind: ChartKind, bag: dict[str, Any]) -> None:
        if "title" in bag:
            ax.set_title(bag["title"], fontsize=12, fontweight="bold")
        if kind is ChartKind.PIE:
            return

        h_axis, v_axis = bag.get("hAxis", {}), bag.get("vAxis", {})
        if "title" in h_axis:
            ax.set_xlabel(h_axis["title"])
        if "title" in v_axis:
            ax.set_ylabel(v_axis["title"])
        if h_axis.get("logScale"):
            ax.set_xscale("log")
        if v_axis.get("logScale"):
            ax.set_yscale("log")

        position = bag.get("legend", {}).get("position")
        if position in LEGEND_LOCATIONS:
            ax.legend(loc=LEGEND_LOCATIONS[position])
        ax.grid(alpha=0.3)
