"""Data models for proxyprobe."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from proxyprobe.config import (
    DEFAULT_ATTEMPTS,
    DEFAULT_PING_URL,
    DEFAULT_TIMEOUT_MS,
    NETCAT_HTTP_PAYLOAD,
)


class MetricType(str, enum.Enum):
    """Identifier of a single measurement (a "matrix")."""

    INVALID = "INVALID"
    PACKET_LOSS = "TEST_PING_PACKET_LOSS"
    RTT_PING = "TEST_PING_RTT"
    HTTP_PING = "TEST_PING_CONN"
    AVERAGE_SPEED = "SPEED_AVERAGE"
    MAX_SPEED = "SPEED_MAX"
    PER_SECOND_SPEED = "SPEED_PER_SECOND"
    UDP_TYPE = "UDP_TYPE"
    INBOUND_GEOIP = "GEOIP_INBOUND"
    OUTBOUND_GEOIP = "GEOIP_OUTBOUND"
    SCRIPT_TEST = "TEST_SCRIPT"

    @classmethod
    def parse(cls, value: str) -> MetricType:
        """Look up a metric by value or member name, falling back to INVALID."""
        key = value.strip().upper()
        for member in cls:
            if key in (member.value, member.name):
                return member
        return cls.INVALID


class MacroType(str, enum.Enum):
    """Identifier of a raw measurement run (a "macro" job)."""

    INVALID = "INVALID"
    PING = "PING"
    SPEED = "SPEED"
    GEO = "GEO"
    UDP = "UDP"
    SCRIPT = "SCRIPT"


@dataclass
class PingResult:
    """Aggregated outcome of one ping run.

    Latencies are integer milliseconds.  ``rtt*`` fields describe the
    connect/handshake phase, ``request*`` fields the request phase.
    """

    rtt: int = 0
    rtt_sd: int = 0
    max_rtt: int = 0
    request: int = 0
    request_sd: int = 0
    max_request: int = 0
    rtt_list: list[int] = field(default_factory=list)
    request_list: list[int] = field(default_factory=list)
    status_codes: list[int] = field(default_factory=list)
    packet_loss: float = 0.0

    @property
    def jitter(self) -> int:
        return self.rtt_sd

    @classmethod
    def failed(cls) -> PingResult:
        """A result for a run where no attempt produced a measurement."""
        return cls(packet_loss=100.0)


@dataclass
class MatrixEntry:
    """One requested metric plus the parameters the caller supplied."""

    type: MetricType
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProbeConfig:
    """Parameters shared by the macro jobs of one request."""

    ping_address: str = DEFAULT_PING_URL
    ping_average_over: int = DEFAULT_ATTEMPTS
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    payload_template: str = NETCAT_HTTP_PAYLOAD
    cafile: Optional[str] = None
    cadata: Optional[str] = None
