"""Error types raised and reported by the chart core."""

from __future__ import annotations

from typing import Any


class ChartError(Exception):
    """Base exception for chart errors."""
    pass


class ValidationError(ChartError):
    """An option or data node has the wrong shape, type or value."""

    def __init__(self, node: Any, message: str):
        super().__init__(message)
        self.node = node
        self.message = message


class EvaluationError(ChartError):
    """A node that should reduce to a number does not."""
    pass


class RenderError(ChartError):
    """The renderer failed to produce a bitmap."""
    pass


class RenderTimeoutError(RenderError):
    """The renderer did not finish within the configured wait."""
    pass
