"""Tests for the matplotlib chart renderer."""
from __future__ import annotations

import base64
from pathlib import Path

import numpy as np
import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg

from formula_charts.charting.options import ChartOptions
from formula_charts.charting.render_options import translate_options
from formula_charts.charting.table import Column, DataTable
from formula_charts.core.enums import ChartKind, LegendPosition, SliceText, Stacking
from formula_charts.core.errors import RenderError
from formula_charts.visuals import Bitmap, ChartRenderer, initialize_backend

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def renderer() -> ChartRenderer:
    return ChartRenderer(dpi=100)


@pytest.fixture
def table() -> DataTable:
    return DataTable(
        columns=(Column("string"), Column("number", "North"), Column("number", "South")),
        rows=(("Jan", 3, 4), ("Feb", 5, 1), ("Mar", 2, 6)),
    )


def test_initialize_backend_is_idempotent() -> None:
    initialize_backend()
    assert initialize_backend() is False


@pytest.mark.parametrize("kind", [k for k in ChartKind if k is not ChartKind.PIE])
def test_render_every_kind(renderer, table, kind) -> None:
    bag = translate_options(kind, ChartOptions(width=200, height=100, series_names=("N", "S")))
    bitmap = renderer.render(kind, table, bag)

    assert isinstance(bitmap, Bitmap)
    assert (bitmap.width, bitmap.height) == (200, 100)
    assert bitmap.pixels.shape == (100, 200, 4)


@pytest.mark.parametrize("slice_text", list(SliceText))
def test_render_pie(renderer, table, slice_text) -> None:
    options = ChartOptions(
        slice_text=slice_text, legend_position=LegendPosition.LABELED, is_3d=True
    )
    bitmap = renderer.render(ChartKind.PIE, table, translate_options(ChartKind.PIE, options))
    assert (bitmap.width, bitmap.height) == (400, 300)


@pytest.mark.parametrize("stacking", list(Stacking))
@pytest.mark.parametrize("horizontal_domain", [True, False])
def test_render_stacked_and_oriented(renderer, table, stacking, horizontal_domain) -> None:
    options = ChartOptions(stacking=stacking, horizontal_domain=horizontal_domain)
    for kind in (ChartKind.BAR, ChartKind.AREA, ChartKind.STEP):
        bitmap = renderer.render(kind, table, translate_options(kind, options))
        assert bitmap.height == 300


def test_render_numeric_domain_with_log_scale(renderer) -> None:
    table = DataTable(
        columns=(Column("number"), Column("number")),
        rows=((1, 10.0), (2, 100.0), (3, 1000.0)),
    )
    options = ChartOptions(logarithmic_scale=True, domain_text="x", range_text="y", dot_size=4)
    bitmap = renderer.render(ChartKind.DOT, table, translate_options(ChartKind.DOT, options))
    assert bitmap.width == 400


def test_background_fill_is_painted(renderer, table) -> None:
    options = ChartOptions(background_color="#ff0000")
    bitmap = renderer.render(ChartKind.LINE, table, translate_options(ChartKind.LINE, options))
    # a pixel just inside the black stroke
    assert tuple(bitmap.pixels[5, 5, :3]) == (255, 0, 0)


def test_transparent_background(renderer, table) -> None:
    options = ChartOptions(background_color="transparent")
    bitmap = renderer.render(ChartKind.LINE, table, translate_options(ChartKind.LINE, options))
    assert bitmap.pixels[5, 5, 3] == 0


def test_bitmap_png_and_base64(tmp_path: Path) -> None:
    pixels = np.zeros((4, 6, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    bitmap = Bitmap(pixels=pixels)

    png = bitmap.to_png()
    assert png.startswith(PNG_SIGNATURE)
    assert base64.b64decode(bitmap.to_base64()) == png

    path = bitmap.save(tmp_path / "out" / "chart.png")
    assert path.read_bytes() == png


@pytest.mark.asyncio
async def test_render_async(renderer, table) -> None:
    bag = translate_options(ChartKind.BAR, ChartOptions(width=120, height=80))
    bitmap = await renderer.render_async(ChartKind.BAR, table, bag)
    assert (bitmap.width, bitmap.height) == (120, 80)


@pytest.mark.parametrize("failure", [MemoryError, RuntimeError])
def test_unexpected_matplotlib_failure_becomes_render_error(renderer, table, monkeypatch, failure) -> None:
    def explode(*args, **kwargs):
        raise failure("canvas too large")

    monkeypatch.setattr(FigureCanvasAgg, "draw", explode)
    bag = translate_options(ChartKind.BAR, ChartOptions())
    with pytest.raises(RenderError, match="canvas too large"):
        renderer.render(ChartKind.BAR, table, bag)
