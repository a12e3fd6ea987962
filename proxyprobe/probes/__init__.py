"""Probe strategies, selected by URL scheme."""

from __future__ import annotations

import ssl
from typing import Optional

from proxyprobe.config import NETCAT_HTTP_PAYLOAD
from proxyprobe.probes.plaintext import ping_via_netcat
from proxyprobe.probes.tls import ping_via_trace
from proxyprobe.vendors.base import Vendor


async def perform_probe(
    vendor: Vendor,
    url: str,
    ssl_context: Optional[ssl.SSLContext] = None,
    payload_template: str = NETCAT_HTTP_PAYLOAD,
) -> tuple[int, int, int]:
    """Run one probe attempt and return ``(rtt_ms, request_ms, status_code)``.

    ``https:`` URLs go through the TLS-traced probe, anything else through
    the plaintext one.
    """
    if url.startswith("https:"):
        return await ping_via_trace(vendor, url, ssl_context)
    return await ping_via_netcat(vendor, url, payload_template)
