"""Rendering of validated chart data to raster images.

The renderer is the only part of the package that touches matplotlib. It
consumes a DataTable plus the option bag produced by
``formula_charts.charting.render_options.translate_options`` and returns a
:class:`Bitmap` of the requested pixel size.

Usage:
    from formula_charts.visuals import ChartRenderer

    renderer = ChartRenderer(dpi=100)
    bitmap = renderer.render(ChartKind.BAR, table, bag)
    bitmap.save(Path("output/chart.png"))

Notes:
    - Figures are built outside pyplot's global state, so renders can run in
      worker threads (``render_async``).
    - ``initialize_backend`` selects the Agg backend once per process.
"""

from __future__ import annotations

from .charts import Bitmap, ChartRenderer, initialize_backend

__all__ = ["Bitmap", "ChartRenderer", "initialize_backend"]
