import asyncio
from contextlib import asynccontextmanager

import pytest

from proxyprobe.vendors.base import ROPTIONS_TCP, Vendor


class LoopbackVendor(Vendor):
    """Dials 127.0.0.1:<port> whatever host the URL names."""

    def __init__(self, port):
        self.port = port
        self.dials = 0

    @property
    def name(self):
        return "Loopback"

    @property
    def slug(self):
        return "loopback"

    async def dial_tcp(self, url, options=ROPTIONS_TCP):
        self.dials += 1
        return await asyncio.open_connection("127.0.0.1", self.port)


class RefusingVendor(Vendor):
    """Fails every dial."""

    def __init__(self):
        self.dials = 0

    @property
    def name(self):
        return "Refusing"

    @property
    def slug(self):
        return "refusing"

    async def dial_tcp(self, url, options=ROPTIONS_TCP):
        self.dials += 1
        raise ConnectionRefusedError("connection refused")


async def _read_request(reader, seen):
    try:
        head = await reader.readuntil(b"\r\n\r\n")
    except (asyncio.IncompleteReadError, ConnectionError):
        return False
    if seen is not None:
        seen.append(head)
    return True


def _scripted_handler(responses, seen=None):
    """Answer the n-th request on a connection with responses[n], then hang up."""

    async def handler(reader, writer):
        try:
            for response in responses:
                if not await _read_request(reader, seen):
                    break
                writer.write(response)
                await writer.drain()
        except ConnectionError:
            pass
        finally:
            writer.close()

    return handler


@asynccontextmanager
async def _serve(handler, ssl_context=None):
    server = await asyncio.start_server(handler, "127.0.0.1", 0, ssl=ssl_context)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()


@pytest.fixture
def serve():
    return _serve


@pytest.fixture
def scripted_handler():
    return _scripted_handler


@pytest.fixture
def loopback_vendor():
    return LoopbackVendor


@pytest.fixture
def refusing_vendor():
    return RefusingVendor()
