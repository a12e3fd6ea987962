"""Abstract base class for matrices (metric extractors)."""

from __future__ import annotations

import abc
import logging
from typing import Any, Optional

from proxyprobe.models import MacroType, MatrixEntry, MetricType, PingResult

logger = logging.getLogger(__name__)


class Matrix(abc.ABC):
    """One requested metric, filled from the result of a macro job.

    Each matrix names the job it depends on through :attr:`macro_job`; the
    caller runs that job once and passes its result to :meth:`extract`.
    """

    value: Any = None

    @property
    @abc.abstractmethod
    def type(self) -> MetricType:
        """Metric identifier reported back to the caller."""

    @property
    @abc.abstractmethod
    def macro_job(self) -> MacroType:
        """The macro job whose result this matrix reads."""

    @abc.abstractmethod
    def extract(self, entry: MatrixEntry, result: Any) -> None:
        """Copy this matrix's value out of *result*.

        A *result* of the wrong shape leaves :attr:`value` untouched.
        """

    def as_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "value": self.value}


class PingMatrix(Matrix):
    """Base for matrices derived from a :class:`PingResult`."""

    @property
    def macro_job(self) -> MacroType:
        return MacroType.PING

    def extract(self, entry: MatrixEntry, result: Any) -> None:
        ping = _as_ping(self, result)
        if ping is not None:
            self.value = self.pick(ping)

    @abc.abstractmethod
    def pick(self, ping: PingResult) -> Any:
        """Return the field of *ping* this matrix reports."""


def _as_ping(matrix: Matrix, result: Any) -> Optional[PingResult]:
    if isinstance(result, PingResult):
        return result
    logger.debug(
        "%s expects a PingResult, got %s; value left unset",
        matrix.type.value, type(result).__name__,
    )
    return None
