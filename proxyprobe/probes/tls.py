"""TLS-instrumented latency probe for ``https:`` targets.

Every attempt dials a fresh connection through the vendor and upgrades
it with ``start_tls`` so the handshake is always paid in full.  Four
timestamps are recorded along the way (handshake start, handshake done,
request headers written, first response byte) which lets the probe
separate handshake cost from the request round trip on one connection.

Only TLS 1.3 is accepted: older versions need two round trips for the
handshake and would skew the numbers.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import h2.config
import h2.connection
import h2.events
import h2.exceptions

from proxyprobe.config import ALPN_PROTOCOLS, TLS_HANDSHAKE_TIMEOUT, USER_AGENT
from proxyprobe.errors import (
    HandshakeIncomplete,
    ProbeError,
    ProtocolParseFailure,
    TimeoutFailure,
)
from proxyprobe.probes.common import dial, elapsed_ms, safe_close_writer
from proxyprobe.reader import parse_http_status
from proxyprobe.vendors.base import Vendor

logger = logging.getLogger(__name__)


@dataclass
class RequestTrace:
    """Timestamps (``time.perf_counter``) collected during one TLS probe."""

    tls_start: Optional[float] = None
    tls_done: Optional[float] = None
    wrote_headers: Optional[float] = None
    first_byte: Optional[float] = None

    def handshake_started(self) -> None:
        self.tls_start = time.perf_counter()

    def handshake_done(self) -> None:
        self.tls_done = time.perf_counter()

    def headers_written(self) -> None:
        self.wrote_headers = time.perf_counter()

    def got_first_byte(self) -> None:
        if self.first_byte is None:
            self.first_byte = time.perf_counter()

    @property
    def is_complete(self) -> bool:
        return None not in (self.tls_start, self.tls_done, self.first_byte)

    @property
    def handshake_ms(self) -> int:
        return elapsed_ms(self.tls_start, self.tls_done)

    @property
    def request_ms(self) -> int:
        """First response byte relative to the end of the handshake."""
        return elapsed_ms(self.tls_done, self.first_byte)

    @property
    def total_ms(self) -> int:
        return elapsed_ms(self.tls_start, self.first_byte)


def build_ssl_context(
    cafile: Optional[str] = None,
    cadata: Optional[str] = None,
) -> ssl.SSLContext:
    """Build a verifying TLS 1.3-only client context.

    *cafile* / *cadata* replace the system trust store when given.
    """
    ctx = ssl.create_default_context(cafile=cafile, cadata=cadata)
    ctx.minimum_version = ssl.TLSVersion.TLSv1_3
    ctx.set_alpn_protocols(ALPN_PROTOCOLS)
    return ctx


def _detect_alpn(writer: asyncio.StreamWriter) -> Optional[str]:
    ssl_obj = writer.transport.get_extra_info("ssl_object")
    if ssl_obj is not None:
        return ssl_obj.selected_alpn_protocol()
    return None


def _tls_version(writer: asyncio.StreamWriter) -> Optional[str]:
    ssl_obj = writer.transport.get_extra_info("ssl_object")
    if ssl_obj is not None:
        return ssl_obj.version()
    return None


async def _handshake(
    writer: asyncio.StreamWriter,
    ctx: ssl.SSLContext,
    hostname: str,
    trace: RequestTrace,
) -> None:
    trace.handshake_started()
    try:
        await asyncio.wait_for(
            writer.start_tls(ctx, server_hostname=hostname),
            timeout=TLS_HANDSHAKE_TIMEOUT,
        )
    except asyncio.TimeoutError as exc:
        raise TimeoutFailure(f"TLS handshake with {hostname} timed out") from exc
    except (ssl.SSLError, OSError) as exc:
        raise HandshakeIncomplete(f"TLS handshake with {hostname} failed: {exc}") from exc
    trace.handshake_done()

    version = _tls_version(writer)
    if version != "TLSv1.3":
        raise HandshakeIncomplete(f"{hostname} negotiated {version}, TLSv1.3 required")


async def _request_h1(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    authority: str,
    path: str,
    trace: RequestTrace,
) -> int:
    request_lines = [
        f"GET {path} HTTP/1.1",
        f"Host: {authority}",
        f"User-Agent: {USER_AGENT}",
        "Accept: */*",
        "Connection: close",
        "",
        "",
    ]
    writer.write("\r\n".join(request_lines).encode())
    await writer.drain()
    trace.headers_written()

    first = await reader.read(1)
    if not first:
        raise ProtocolParseFailure("connection closed before response")
    trace.got_first_byte()
    return await parse_http_status(reader, prefix=first)


async def _request_h2(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    authority: str,
    path: str,
    trace: RequestTrace,
) -> int:
    conn = h2.connection.H2Connection(
        config=h2.config.H2Configuration(client_side=True),
    )

    # Settle the connection preface before the request is timed.
    conn.initiate_connection()
    writer.write(conn.data_to_send())
    await writer.drain()
    preface = await reader.read(65535)
    if not preface:
        raise ProtocolParseFailure("connection closed during HTTP/2 preface")
    conn.receive_data(preface)
    writer.write(conn.data_to_send())
    await writer.drain()

    headers = [
        (":method", "GET"),
        (":path", path),
        (":scheme", "https"),
        (":authority", authority),
        ("user-agent", USER_AGENT),
    ]
    stream_id = conn.get_next_available_stream_id()
    conn.send_headers(stream_id, headers, end_stream=True)
    writer.write(conn.data_to_send())
    await writer.drain()
    trace.headers_written()

    while True:
        data = await reader.read(65535)
        if not data:
            raise ProtocolParseFailure("connection closed before HTTP/2 response")

        for event in conn.receive_data(data):
            if isinstance(event, h2.events.ResponseReceived) and event.stream_id == stream_id:
                trace.got_first_byte()
                for name, value in event.headers:
                    name = name.decode() if isinstance(name, bytes) else name
                    if name == ":status":
                        return int(value)
                raise ProtocolParseFailure("HTTP/2 response without :status")
            if isinstance(event, h2.events.StreamReset):
                raise ProtocolParseFailure(
                    f"HTTP/2 stream reset: error code {event.error_code}"
                )
        writer.write(conn.data_to_send())
        await writer.drain()


async def ping_via_trace(
    vendor: Vendor,
    url: str,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> tuple[int, int, int]:
    """Probe an ``https:`` *url* through *vendor*.

    Returns ``(request_ms, total_ms, status_code)`` where *request_ms* runs
    from the end of the handshake to the first response byte and
    *total_ms* from the start of the handshake to the first response byte.

    Raises
    ------
    DialFailure
        When the vendor cannot connect.
    HandshakeIncomplete
        When TLS fails, negotiates below 1.3, or never records completion.
    TimeoutFailure
        When the handshake outlives its deadline.
    ProtocolParseFailure
        When no status can be read from the response.
    """
    parsed = urlparse(url)
    hostname = parsed.hostname or ""
    authority = parsed.netloc.rpartition("@")[2]
    path = parsed.path or "/"
    if parsed.query:
        path = f"{path}?{parsed.query}"

    ctx = ssl_context or build_ssl_context()
    trace = RequestTrace()

    reader, writer = await dial(vendor, url)
    try:
        await _handshake(writer, ctx, hostname, trace)
        if _detect_alpn(writer) == "h2":
            status = await _request_h2(reader, writer, authority, path, trace)
        else:
            status = await _request_h1(reader, writer, authority, path, trace)
    except h2.exceptions.ProtocolError as exc:
        raise ProtocolParseFailure(f"HTTP/2 protocol error: {exc}") from exc
    except OSError as exc:
        raise ProbeError(f"request to {url} failed: {exc}") from exc
    finally:
        safe_close_writer(writer)

    if not trace.is_complete:
        raise HandshakeIncomplete("cannot extract handshake timing from response")

    logger.debug(
        "%s: handshake %dms, request %dms, total %dms",
        url, trace.handshake_ms, trace.request_ms, trace.total_ms,
    )
    return trace.request_ms, trace.total_ms, status
