from __future__ import annotations

from .nodes import Expression, from_python, matrix_columns, native_integer, node_kind
from .reduction import Diagnostic, ErrorSink, ReductionManager

__all__ = [
    "Diagnostic",
    "ErrorSink",
    "Expression",
    "ReductionManager",
    "from_python",
    "matrix_columns",
    "native_integer",
    "node_kind",
]
