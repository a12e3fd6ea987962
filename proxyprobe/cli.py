"""CLI entry point for proxyprobe."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import click

from proxyprobe import __version__
from proxyprobe.config import DEFAULT_ATTEMPTS, DEFAULT_PING_URL, DEFAULT_TIMEOUT_MS, NETCAT_HTTP_PAYLOAD
from proxyprobe.models import MacroType, MatrixEntry, MetricType, PingResult, ProbeConfig

DEFAULT_METRICS = ",".join([
    MetricType.RTT_PING.value,
    MetricType.HTTP_PING.value,
    MetricType.PACKET_LOSS.value,
])


@click.command()
@click.argument("url", default=DEFAULT_PING_URL)
@click.option("-n", "--attempts", default=DEFAULT_ATTEMPTS, help="Probe attempts", show_default=True)
@click.option("-t", "--timeout", default=DEFAULT_TIMEOUT_MS, help="Per-attempt timeout in ms", show_default=True)
@click.option("-m", "--metrics", default=DEFAULT_METRICS, help="Comma-separated metric types", show_default=True)
@click.option("--vendor", "vendor_slug", default="direct", help="Vendor to dial through", show_default=True)
@click.option("--cafile", default=None, type=click.Path(exists=True, dir_okay=False), help="Trust store for TLS")
@click.option("--json", "json_output", is_flag=True, help="Output JSON to stdout")
@click.option("-v", "--verbose", is_flag=True, help="Show per-attempt samples and debug logs")
@click.version_option(version=__version__)
def main(
    url: str,
    attempts: int,
    timeout: int,
    metrics: str,
    vendor_slug: str,
    cafile: str | None,
    json_output: bool,
    verbose: bool,
) -> None:
    """proxyprobe: latency probing through a network vendor.

    Measures connect/handshake RTT, request time, jitter and packet loss
    against URL and reports the requested metrics.
    """
    from proxyprobe.display import render_error, render_warning
    from proxyprobe.vendors import get_vendor, list_vendors

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not json_output and vendor_slug == "direct":
        for var in ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy"):
            if os.environ.get(var):
                render_warning(f"{var} is set but ignored by the direct vendor")
                break

    try:
        vendor = get_vendor(vendor_slug)
    except ValueError:
        render_error(f"Unknown vendor: {vendor_slug}. Available: {', '.join(list_vendors())}")
        sys.exit(1)

    entries = [MatrixEntry(type=MetricType.parse(m)) for m in metrics.split(",") if m.strip()]
    config = ProbeConfig(
        ping_address=url,
        ping_average_over=attempts,
        timeout_ms=timeout,
        payload_template=NETCAT_HTTP_PAYLOAD,
        cafile=cafile,
    )

    try:
        matrices, ping = asyncio.run(_run(vendor, entries, config))
    except KeyboardInterrupt:
        sys.exit(130)

    if json_output:
        from proxyprobe.export import export_json

        click.echo(export_json(matrices, ping))
        return

    from proxyprobe.display import render_full

    render_full(url, matrices, ping, verbose=verbose)


async def _run(vendor, entries, config):
    """Run the ping job once and extract every requested matrix from it."""
    from proxyprobe.matrices import find_batch_from_entry
    from proxyprobe.service import extract_matrices, run_macros

    matrices = find_batch_from_entry(entries)
    jobs = [MacroType.PING] + [m.macro_job for m in matrices]
    results = await run_macros(vendor, jobs, config)
    extract_matrices(entries, matrices, results)

    ping = results.get(MacroType.PING)
    return matrices, ping if isinstance(ping, PingResult) else None


if __name__ == "__main__":
    main()
