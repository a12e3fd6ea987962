"""Packet loss matrix."""

from __future__ import annotations

from proxyprobe.matrices.base import PingMatrix
from proxyprobe.models import MetricType, PingResult


class PacketLoss(PingMatrix):
    """Percentage of ping attempts that produced no measurement."""

    def __init__(self) -> None:
        self.value: float = 0.0

    @property
    def type(self) -> MetricType:
        return MetricType.PACKET_LOSS

    def pick(self, ping: PingResult) -> float:
        return ping.packet_loss
