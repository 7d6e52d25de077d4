"""Chart option validation, data-table derivation and reduction.

Main Components:
    - OptionsValidator: ``[name, value]`` option entries -> ChartOptions
    - TableBuilder: flat list or matrix data -> DataTable
    - translate_options: ChartOptions -> renderer option bag
    - reduce_chart: the async reducer registered for every ``Chart.*`` tag

Usage:
    from formula_charts.charting import ChartSession, register_chart_reducers

    manager = ReductionManager()
    register_chart_reducers(manager)
    session = ChartSession(manager=manager, renderer=ChartRenderer())
    await manager.reduce(chart_node, session)
"""

from __future__ import annotations

from .options import ChartOptions, OptionsValidator, validate_options
from .reducer import ChartSession, reduce_chart, register_chart_reducers
from .render_options import translate_options
from .table import Column, DataTable, TableBuilder, build_data_table

__all__ = [
    "ChartOptions",
    "ChartSession",
    "Column",
    "DataTable",
    "OptionsValidator",
    "TableBuilder",
    "build_data_table",
    "reduce_chart",
    "register_chart_reducers",
    "translate_options",
    "validate_options",
]
