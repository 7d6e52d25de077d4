"""Reduction of ``Chart.*`` invocations into raster graphics."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..core.config import Settings
from ..core.enums import ChartKind
from ..core.errors import RenderError, RenderTimeoutError
from ..core.logging_config import get_logger
from ..expression.nodes import RASTER, Expression
from ..expression.reduction import ReductionManager
from .options import validate_options
from .render_options import translate_options
from .table import DataTable, build_data_table

logger = get_logger(__name__)


class Renderer(Protocol):
    async def render_async(self, kind: ChartKind, table: DataTable, bag: dict[str, Any]) -> Any: ...


@dataclass
class ChartSession:
    """What a chart reduction needs from its host."""

    manager: ReductionManager
    renderer: Renderer
    settings: Settings = field(default_factory=Settings)


async def render_with_timeout(
    renderer: Renderer,
    kind: ChartKind,
    table: DataTable,
    bag: dict[str, Any],
    timeout: float | None,
) -> Any:
    """Await the renderer, giving up after ``timeout`` seconds (None waits forever).

    Raises:
        RenderTimeoutError: If the renderer does not finish in time
    """
    try:
        return await asyncio.wait_for(renderer.render_async(kind, table, bag), timeout)
    except asyncio.TimeoutError as e:
        raise RenderTimeoutError(f"{kind.value} chart not rendered within {timeout}s") from e


async def reduce_chart(expression: Expression, session: ChartSession) -> bool:
    """Replace a chart invocation by the rendered chart.

    Args:
        expression: A ``Chart.<Kind>`` node; child 0 is the data, the optional
            child 1 the option list
        session: Host collaborators (error sink, renderer, settings)

    Returns:
        True if the node was replaced, False if a diagnostic was reported.
    """
    sink = session.manager
    try:
        kind = ChartKind.from_tag(expression.tag)
    except ValueError:
        sink.set_in_error(expression, "Unknown chart type")
        return False

    if not expression.children:
        sink.set_in_error(expression, "Missing chart data")
        return False

    options_node = expression.children[1] if len(expression.children) > 1 else None
    options = validate_options(kind, options_node, sink)
    if options is None:
        return False

    data = expression.children[0]
    table = build_data_table(kind, data, options, sink)
    if table is None:
        return False

    bag = translate_options(kind, options)
    try:
        bitmap = await render_with_timeout(
            session.renderer, kind, table, bag, session.settings.render_timeout
        )
    except RenderTimeoutError as e:
        logger.warning(str(e))
        sink.set_in_error(expression, "Chart rendering timed out")
        return False
    except RenderError:
        logger.exception(f"Rendering failed for {expression.tag}")
        sink.set_in_error(expression, "Chart could not be rendered")
        return False

    result = Expression(RASTER, Value=bitmap)
    expression.replace_by(result)
    logger.info(
        f"Rendered {kind.value} chart",
        extra={"rows": table.number_of_rows, "series": table.number_of_columns - 1},
    )
    return True


def register_chart_reducers(manager: ReductionManager) -> None:
    for kind in ChartKind:
        manager.add_reducer(kind.tag, reduce_chart, "Chart.chart")
