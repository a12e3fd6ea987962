"""Failure taxonomy for a single probe attempt.

The engine folds every one of these into the packet-loss counter; they
never escape :func:`proxyprobe.macros.ping.ping`.
"""

from __future__ import annotations


class ProbeError(Exception):
    """Base class for probe attempt failures."""


class DialFailure(ProbeError):
    """The vendor could not establish a connection."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"dial failed for {url}: {cause}")
        self.url = url
        self.cause = cause


class TimeoutFailure(ProbeError):
    """A connection-wide or bounded-read deadline elapsed."""


class HandshakeIncomplete(ProbeError):
    """TLS negotiation did not finish or did not reach TLS 1.3."""


class ProtocolParseFailure(ProbeError):
    """Response bytes could not be parsed as an HTTP status line."""
