from __future__ import annotations

import pytest

from formula_charts.expression.reduction import ReductionManager


@pytest.fixture
def manager() -> ReductionManager:
    """A reduction manager used as the error sink."""
    return ReductionManager()
