"""RTT ping matrix."""

from __future__ import annotations

from proxyprobe.matrices.base import PingMatrix
from proxyprobe.models import MetricType, PingResult


class RTTPing(PingMatrix):
    """Mean connect/handshake-phase latency in milliseconds."""

    def __init__(self) -> None:
        self.value: int = 0

    @property
    def type(self) -> MetricType:
        return MetricType.RTT_PING

    def pick(self, ping: PingResult) -> int:
        return ping.rtt
