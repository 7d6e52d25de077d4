"""Tag-keyed reducer dispatch and the error sink used by chart reducers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..core.logging_config import get_logger
from .nodes import Expression

logger = get_logger(__name__)

Reducer = Callable[[Expression, Any], Awaitable[bool]]


class ErrorSink(Protocol):
    def set_in_error(self, node: Expression, message: str) -> None: ...


@dataclass
class Diagnostic:
    """A message attached to the node that caused it."""
    node: Expression
    message: str


@dataclass
class ReductionManager:
    """Registry of reducers keyed by tag, plus the diagnostics they report."""

    reducers: dict[str, list[tuple[Reducer, str]]] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def add_reducer(self, tag: str, reducer: Reducer, name: str) -> None:
        self.reducers.setdefault(tag, []).append((reducer, name))
        logger.debug(f"Registered reducer {name} for {tag}")

    def set_in_error(self, node: Expression, message: str) -> None:
        """Attach a diagnostic to ``node``. Never raises."""
        node.error = message
        self.diagnostics.append(Diagnostic(node=node, message=message))
        logger.info(f"{message}: {node!r}", extra={"tag": node.tag})

    @property
    def failed(self) -> bool:
        return bool(self.diagnostics)

    async def reduce(self, node: Expression, session: Any = None) -> bool:
        """Run the reducers registered for ``node.tag`` until one succeeds."""
        for reducer, name in self.reducers.get(node.tag, []):
            logger.debug(f"Applying {name} to {node.tag}")
            if await reducer(node, session):
                return True
        return False
