"""Ping macro: repeated latency probes aggregated into one result.

Public API:
    ping  -- run N sequential probe attempts and aggregate them
    Ping  -- macro wrapper feeding the ping-derived matrices
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Optional

from proxyprobe.config import NETCAT_HTTP_PAYLOAD
from proxyprobe.macros.base import Macro
from proxyprobe.models import MacroType, PingResult, ProbeConfig
from proxyprobe.probes import perform_probe
from proxyprobe.probes.tls import build_ssl_context
from proxyprobe.stats import aggregate_ping, update_maxima
from proxyprobe.vendors.base import Vendor

logger = logging.getLogger(__name__)


async def ping(
    vendor: Optional[Vendor],
    url: str,
    attempts: int,
    timeout_ms: int,
    ssl_context: Optional[ssl.SSLContext] = None,
    payload_template: str = NETCAT_HTTP_PAYLOAD,
) -> PingResult:
    """Probe *url* through *vendor* *attempts* times and aggregate.

    Attempts run one after another, each with a fresh connection and its
    own *timeout_ms* budget; an attempt that fails for any reason only
    bumps the failure count.  Without a vendor nothing is dialled and the
    result reports 100% loss.
    """
    if vendor is None or attempts < 1:
        return PingResult.failed()

    if url.startswith("https:") and ssl_context is None:
        ssl_context = build_ssl_context()

    result = PingResult()
    rtts: list[int] = []
    requests: list[int] = []
    codes: list[int] = []
    failed = 0

    for i in range(attempts):
        try:
            rtt, req, code = await asyncio.wait_for(
                perform_probe(vendor, url, ssl_context, payload_template),
                timeout=timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            logger.debug("ping %s attempt %d/%d timed out", url, i + 1, attempts)
            failed += 1
            continue
        except Exception as exc:
            logger.debug("ping %s attempt %d/%d failed: %s", url, i + 1, attempts, exc)
            failed += 1
            continue

        update_maxima(result, rtt, req)
        rtts.append(rtt)
        requests.append(req)
        codes.append(code)

    aggregate_ping(result, rtts, requests, codes, failed, attempts)
    return result


class Ping(Macro):
    """Macro job running :func:`ping` against ``config.ping_address``."""

    def __init__(self) -> None:
        self.result = PingResult()

    @property
    def type(self) -> MacroType:
        return MacroType.PING

    async def run(self, vendor: Optional[Vendor], config: ProbeConfig) -> PingResult:
        ssl_context = None
        if config.cafile or config.cadata:
            ssl_context = build_ssl_context(config.cafile, config.cadata)

        self.result = await ping(
            vendor,
            config.ping_address,
            config.ping_average_over,
            config.timeout_ms,
            ssl_context=ssl_context,
            payload_template=config.payload_template,
        )
        return self.result
