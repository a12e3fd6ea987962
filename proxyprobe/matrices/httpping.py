"""HTTP ping matrix."""

from __future__ import annotations

from proxyprobe.matrices.base import PingMatrix
from proxyprobe.models import MetricType, PingResult


class HTTPPing(PingMatrix):
    """Mean request completion time in milliseconds."""

    def __init__(self) -> None:
        self.value: int = 0

    @property
    def type(self) -> MetricType:
        return MetricType.HTTP_PING

    def pick(self, ping: PingResult) -> int:
        return ping.request
