"""Helpers shared by the probe strategies."""

from __future__ import annotations

import asyncio
import time

from proxyprobe.errors import DialFailure
from proxyprobe.vendors.base import ROPTIONS_TCP, Vendor


def elapsed_ms(start: float, end: float | None = None) -> int:
    """Whole milliseconds between two :func:`time.perf_counter` readings."""
    if end is None:
        end = time.perf_counter()
    return int((end - start) * 1000)


async def dial(
    vendor: Vendor,
    url: str,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Dial *url* through *vendor*, wrapping any failure in :class:`DialFailure`."""
    try:
        return await vendor.dial_tcp(url, ROPTIONS_TCP)
    except Exception as exc:
        raise DialFailure(url, exc) from exc


def safe_close_writer(writer: asyncio.StreamWriter | None) -> None:
    """Close a stream writer without raising on already-closed transports."""
    if writer is None:
        return
    try:
        writer.close()
    except Exception:
        pass
