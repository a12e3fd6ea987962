"""Direct vendor: dials targets without any proxy in between."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
from urllib.parse import urlparse

import dns.asyncresolver
import dns.rdatatype

from proxyprobe.vendors.base import ROPTIONS_TCP, DialOptions, Vendor

logger = logging.getLogger(__name__)


def target_address(url: str) -> tuple[str, int]:
    """Return the (host, port) pair a probe of *url* connects to."""
    parsed = urlparse(url)
    hostname = parsed.hostname or ""
    port = parsed.port or (443 if parsed.scheme == "https" else 80)
    return hostname, port


class DirectVendor(Vendor):
    """Connects straight to the target, resolving names with dnspython.

    IP literals skip resolution.  Hostnames are looked up as A records
    first with an AAAA fallback, unless *options* pins an address family.
    """

    def __init__(self, dns_server: str | None = None) -> None:
        self._dns_server = dns_server

    @property
    def name(self) -> str:
        return "Direct"

    @property
    def slug(self) -> str:
        return "direct"

    async def dial_tcp(
        self,
        url: str,
        options: DialOptions = ROPTIONS_TCP,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        hostname, port = target_address(url)
        if not hostname:
            raise ValueError(f"URL has no host: {url!r}")
        ip = await self._resolve(hostname, options)
        return await asyncio.open_connection(ip, port)

    async def _resolve(self, hostname: str, options: DialOptions) -> str:
        try:
            ipaddress.ip_address(hostname)
            return hostname
        except ValueError:
            pass

        resolver = dns.asyncresolver.Resolver()
        if self._dns_server:
            resolver.nameservers = [self._dns_server]

        if options.ipv6_only:
            rdtypes = [dns.rdatatype.AAAA]
        elif options.ipv4_only:
            rdtypes = [dns.rdatatype.A]
        else:
            rdtypes = [dns.rdatatype.A, dns.rdatatype.AAAA]

        last_error: Exception | None = None
        for rdtype in rdtypes:
            try:
                answer = await resolver.resolve(hostname, rdtype)
                return str(answer[0])
            except Exception as exc:
                logger.debug("%s lookup failed for %s: %s", rdtype.name, hostname, exc)
                last_error = exc

        raise last_error  # type: ignore[misc]
