from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
import yaml

from .. import __version__
from ..charting.options import validate_options
from ..charting.reducer import ChartSession, register_chart_reducers
from ..charting.table import DataTable, build_data_table
from ..core.config import get_settings
from ..core.enums import ChartKind
from ..core.logging_config import get_logger, setup_logging
from ..expression.nodes import RASTER, Expression, chart, from_python, list_of, option
from ..expression.reduction import ReductionManager
from ..visuals.charts import ChartRenderer
from . import output as cli_output

app = typer.Typer(help="Render charts from expression data")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


def load_chart(path: Path) -> tuple[ChartKind, Expression]:
    """Load a YAML chart description into a ``Chart.<Kind>`` node.

    The file holds ``chart`` (bar|line|area|dot|step|pie), ``data`` (a list or
    a list of rows) and an optional ``options`` mapping of option name to value.

    Raises:
        ValueError: If the description is malformed
    """
    try:
        cfg = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ValueError(f"{path} must contain a mapping")
    if "chart" not in cfg or "data" not in cfg:
        raise ValueError(f"{path} must define 'chart' and 'data'")

    try:
        kind = ChartKind(str(cfg["chart"]).lower())
    except ValueError:
        choices = ", ".join(k.value for k in ChartKind)
        raise ValueError(f"Unknown chart type {cfg['chart']!r} (expected one of: {choices})") from None

    options: dict[str, Any] | None = cfg.get("options")
    options_node = None
    if options:
        if not isinstance(options, dict):
            raise ValueError("'options' must be a mapping of option name to value")
        try:
            options_node = list_of(*(option(str(k), from_python(v)) for k, v in options.items()))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid option value: {e}") from e

    try:
        data = from_python(cfg["data"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid data: {e}") from e
    return kind, chart(kind.tag, data, options_node)


def _report(manager: ReductionManager) -> None:
    for diagnostic in manager.diagnostics:
        cli_output.error(f"{diagnostic.message}: {diagnostic.node!r}")


def _describe(table: DataTable) -> None:
    cli_output.info(f"{table.number_of_rows} rows, {table.number_of_columns} columns")
    for i, column in enumerate(table.columns):
        label = f" {column.label!r}" if column.label else ""
        cli_output.plain(f"  column {i}: {column.type}{label}", color=cli_output.OutputColor.WHITE)


@app.command()
def validate(
    spec: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML chart description"),  # noqa: B008
) -> None:
    """Validate a chart description without rendering it."""
    try:
        kind, node = load_chart(spec)
    except ValueError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from e

    manager = ReductionManager()
    options_node = node.children[1] if len(node.children) > 1 else None
    options = validate_options(kind, options_node, manager)
    table = build_data_table(kind, node.children[0], options, manager) if options is not None else None
    if table is None:
        _report(manager)
        raise typer.Exit(code=1)

    cli_output.success(f"Valid {kind.value} chart")
    _describe(table)


@app.command()
def render(
    spec: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML chart description"),  # noqa: B008
    out: Path | None = typer.Option(None, "--out", "-o", help="PNG file to write"),  # noqa: B008
) -> None:
    """Render a chart description to a PNG file.

    Without --out the image goes to FC_OUTPUT_DIR (or the current directory)
    named after the description file.
    """
    try:
        settings = get_settings()
        kind, node = load_chart(spec)
    except ValueError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from e

    manager = ReductionManager()
    register_chart_reducers(manager)
    session = ChartSession(manager=manager, renderer=ChartRenderer(dpi=settings.dpi), settings=settings)

    root = Expression("Expression.Root", [node])
    reduced = asyncio.run(manager.reduce(node, session))
    result = root.children[0]
    if not reduced or result.tag != RASTER:
        _report(manager)
        raise typer.Exit(code=1)

    if out is None:
        out = (settings.output_dir or Path.cwd()) / f"{spec.stem}.png"
    bitmap = result.get("Value")
    try:
        bitmap.save(out)
    except OSError as e:
        cli_output.error(f"Failed to write {out}: {e}")
        raise typer.Exit(code=1) from e

    cli_output.success(f"{kind.value.capitalize()} chart ({bitmap.width}x{bitmap.height}) written to {out}")


if __name__ == "__main__":
    app()
