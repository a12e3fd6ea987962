"""Placeholder matrix returned for unknown metric types."""

from __future__ import annotations

from typing import Any

from proxyprobe.matrices.base import Matrix
from proxyprobe.models import MacroType, MatrixEntry, MetricType


class Invalid(Matrix):
    """Reports nothing and depends on no job."""

    @property
    def type(self) -> MetricType:
        return MetricType.INVALID

    @property
    def macro_job(self) -> MacroType:
        return MacroType.INVALID

    def extract(self, entry: MatrixEntry, result: Any) -> None:
        pass
