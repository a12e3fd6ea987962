"""Netcat-style latency probe for plaintext targets.

The same crafted request is written twice over one connection.  The
first exchange covers dial + first response byte ("connect RTT"); the
second one, sent on the already warm connection, isolates the request
round trip ("request RTT").  Generic HTTP clients hide that split on a
keep-alive socket, so the exchange is driven by hand here.
"""

from __future__ import annotations

import asyncio
import logging
import time
from urllib.parse import parse_qsl, urlencode, urlparse

from proxyprobe.config import (
    NETCAT_DEADLINE,
    NETCAT_HTTP_PAYLOAD,
    STATUS_READ_DEADLINE,
    VERSION,
)
from proxyprobe.errors import ProbeError, TimeoutFailure
from proxyprobe.probes.common import dial, elapsed_ms, safe_close_writer
from proxyprobe.reader import parse_http_status
from proxyprobe.vendors.base import Vendor

logger = logging.getLogger(__name__)


def build_payload(
    url: str,
    template: str = NETCAT_HTTP_PAYLOAD,
    version: str = VERSION,
) -> bytes:
    """Render the request written by :func:`ping_via_netcat` for *url*.

    The query string is re-encoded with sorted keys so that the same URL
    always produces the same bytes.
    """
    parsed = urlparse(url)
    query = urlencode(sorted(parse_qsl(parsed.query, keep_blank_values=True)))
    path = f"{parsed.path or '/'}?{query}"
    return template.format(path=path, host=parsed.hostname or "", version=version).encode()


def _buffered(reader: asyncio.StreamReader) -> int:
    """Number of bytes already received but not yet consumed.

    StreamReader has no public accessor for this; vendors hand back plain
    asyncio streams (see :meth:`Vendor.dial_tcp`).
    """
    return len(reader._buffer)


async def _write(writer: asyncio.StreamWriter, payload: bytes, phase: int) -> None:
    try:
        writer.write(payload)
        await writer.drain()
    except (OSError, RuntimeError) as exc:
        raise ProbeError(f"write failed {phase}: {exc}") from exc


async def _exchange(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    payload: bytes,
    conn_start: float,
) -> tuple[int, int, bytes]:
    """Run both write/read phases; returns the RTTs and the first byte read."""
    await _write(writer, payload, 1)
    try:
        await reader.readexactly(1)
    except (asyncio.IncompleteReadError, OSError) as exc:
        logger.debug("first response byte not received: %s", exc)
    conn_rtt = elapsed_ms(conn_start)

    # Start phase two on a clean frame boundary.
    pending = _buffered(reader)
    if pending:
        await reader.readexactly(pending)

    request_start = time.perf_counter()
    await _write(writer, payload, 2)
    try:
        first = await reader.read(1)
    except OSError as exc:
        raise ProbeError(f"read failed 3: {exc}") from exc
    if not first:
        raise ProbeError("read failed 3: connection closed by peer")
    return elapsed_ms(request_start), conn_rtt, first


async def ping_via_netcat(
    vendor: Vendor,
    url: str,
    template: str = NETCAT_HTTP_PAYLOAD,
) -> tuple[int, int, int]:
    """Probe a plaintext *url* through *vendor*.

    Returns ``(request_rtt_ms, connect_rtt_ms, status_code)``.  When the
    second response cannot be parsed the request RTT is still reported,
    with connect RTT and status code set to 0.

    Raises
    ------
    DialFailure
        When the vendor cannot connect.
    TimeoutFailure
        When the second response does not start before the connection
        deadline.  Running out of time while parsing the status line only
        degrades the result.
    ProbeError
        When writing a payload or reading the second response fails.
    """
    payload = build_payload(url, template)

    conn_start = time.perf_counter()
    reader, writer = await dial(vendor, url)

    deadline = time.monotonic() + NETCAT_DEADLINE

    try:
        try:
            request_rtt, conn_rtt, first = await asyncio.wait_for(
                _exchange(reader, writer, payload, conn_start),
                timeout=NETCAT_DEADLINE,
            )
        except asyncio.TimeoutError as exc:
            raise TimeoutFailure(f"no response from {url} within {NETCAT_DEADLINE}s") from exc

        budget = min(STATUS_READ_DEADLINE, deadline - time.monotonic())
        try:
            status = await parse_http_status(reader, deadline_s=budget, prefix=first)
        except (ProbeError, OSError) as exc:
            logger.debug("status line unavailable, keeping request RTT only: %s", exc)
            return request_rtt, 0, 0

        return request_rtt, conn_rtt, status
    finally:
        safe_close_writer(writer)
