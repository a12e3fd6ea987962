"""Abstract base class for network vendors."""

from __future__ import annotations

import abc
import asyncio
from dataclasses import dataclass


@dataclass(frozen=True)
class DialOptions:
    """Connection options handed to :meth:`Vendor.dial_tcp`."""

    network: str = "tcp"
    ipv4_only: bool = False
    ipv6_only: bool = False


ROPTIONS_TCP = DialOptions()


class Vendor(abc.ABC):
    """A dialable network endpoint (direct route, proxy, tunnel...).

    Implementations must be safe to dial concurrently from independent
    probe runs; the probe engine never touches anything but
    :meth:`dial_tcp`.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-readable vendor name (e.g. 'Direct')."""

    @property
    @abc.abstractmethod
    def slug(self) -> str:
        """Short identifier (e.g. 'direct')."""

    @abc.abstractmethod
    async def dial_tcp(
        self,
        url: str,
        options: DialOptions = ROPTIONS_TCP,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Open a TCP stream to the host and port of *url*.

        The pair must be a plain :class:`asyncio.StreamReader` /
        :class:`asyncio.StreamWriter` (as returned by
        :func:`asyncio.open_connection`); the plaintext probe inspects the
        reader's receive buffer between its two writes.

        Cancellation of the calling task must abort the dial.  The caller
        owns the returned writer and closes it.
        """
