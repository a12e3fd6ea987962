"""Deadline- and size-bounded reads for parsing raw TCP responses.

A peer on the plaintext probe path is not trusted to send a well-formed
HTTP response, so every read made while looking for the status line is
limited both in wall-clock time and in total bytes.
"""

from __future__ import annotations

import asyncio
import re
import time

from proxyprobe.config import STATUS_READ_DEADLINE, STATUS_READ_LIMIT
from proxyprobe.errors import ProtocolParseFailure, TimeoutFailure

LINE_TERMINATOR = b"\r\n"
HEAD_TERMINATOR = b"\r\n\r\n"

_HTTP_PREFIX = b"HTTP/"
_STATUS_LINE = re.compile(rb"^HTTP/(\d)(?:\.(\d))? (\d{3})(?: .*)?$")


class BoundedReader:
    """Read wrapper enforcing an absolute deadline and a byte budget.

    *deadline* is a :func:`time.monotonic` timestamp.  *prefix* holds bytes
    already taken off the stream (e.g. the byte used to time a response)
    and is served before the stream is touched; it counts against *limit*.
    """

    def __init__(
        self,
        stream,
        deadline: float,
        limit: int = STATUS_READ_LIMIT,
        prefix: bytes = b"",
    ) -> None:
        self._stream = stream
        self._deadline = deadline
        self._remaining = limit
        self._prefix = prefix

    @property
    def remaining(self) -> int:
        return self._remaining

    async def read(self, n: int = 4096) -> bytes:
        """Read up to *n* bytes; ``b""`` means EOF or an exhausted budget."""
        left = self._deadline - time.monotonic()
        if left <= 0:
            raise TimeoutFailure("read deadline exceeded")
        if self._remaining <= 0:
            return b""

        n = min(n, self._remaining)
        if self._prefix:
            data, self._prefix = self._prefix[:n], self._prefix[n:]
        else:
            try:
                data = await asyncio.wait_for(self._stream.read(n), timeout=left)
            except asyncio.TimeoutError as exc:
                raise TimeoutFailure("read deadline exceeded") from exc

        self._remaining -= len(data)
        return data


async def read_until(reader: BoundedReader, marker: bytes, buf: bytes = b"") -> bytes:
    """Extend *buf* through *reader* until it contains *marker*."""
    while marker not in buf:
        chunk = await reader.read(4096)
        if not chunk:
            raise ProtocolParseFailure(
                f"response incomplete after {len(buf)} bytes"
            )
        buf += chunk
    return buf


def parse_status_line(head: bytes) -> int:
    """Return the status code from the first line of an HTTP/1.x head."""
    line = head.split(b"\r\n", 1)[0]
    match = _STATUS_LINE.match(line)
    if match is None:
        raise ProtocolParseFailure(f"malformed status line: {line[:64]!r}")
    return int(match.group(3))


async def parse_http_status(
    stream,
    deadline_s: float = STATUS_READ_DEADLINE,
    limit: int = STATUS_READ_LIMIT,
    prefix: bytes = b"",
) -> int:
    """Parse the HTTP status of the response waiting on *stream*.

    Raises
    ------
    TimeoutFailure
        When *deadline_s* elapses before the header block is complete.
    ProtocolParseFailure
        When the bytes are not an HTTP/1.x response head.  This is
        raised as soon as the first line is known to be malformed,
        without waiting for the rest of the head.
    """
    reader = BoundedReader(stream, time.monotonic() + deadline_s, limit, prefix)

    buf = b""
    while LINE_TERMINATOR not in buf:
        if not _HTTP_PREFIX.startswith(buf[:len(_HTTP_PREFIX)]):
            raise ProtocolParseFailure(f"not an HTTP response: {buf[:64]!r}")
        chunk = await reader.read(4096)
        if not chunk:
            raise ProtocolParseFailure(f"status line incomplete after {len(buf)} bytes")
        buf += chunk
    status = parse_status_line(buf)

    await read_until(reader, HEAD_TERMINATOR, buf)
    return status
