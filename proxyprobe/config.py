"""Constants and configuration for proxyprobe."""

from proxyprobe import __version__

# Default probing settings
DEFAULT_PING_URL = "https://www.gstatic.com/generate_204"
DEFAULT_ATTEMPTS = 3
DEFAULT_TIMEOUT_MS = 3000

# Plaintext (netcat-style) probe
NETCAT_DEADLINE = 6.0           # seconds, covers the whole exchange
STATUS_READ_DEADLINE = 5.0      # seconds, status line parsing
STATUS_READ_LIMIT = 1024 * 1024  # bytes

# Sent twice per plaintext probe; must stay byte-stable between attempts.
NETCAT_HTTP_PAYLOAD = (
    "GET {path} HTTP/1.1\r\n"
    "Host: {host}\r\n"
    "User-Agent: proxyprobe/{version}\r\n"
    "Accept: */*\r\n"
    "Connection: keep-alive\r\n"
    "\r\n"
)

# TLS probe
ALPN_PROTOCOLS = ["h2", "http/1.1"]
TLS_HANDSHAKE_TIMEOUT = 3.0     # seconds

# User agent for HTTP requests
VERSION = __version__
USER_AGENT = f"proxyprobe/{__version__}"

# Latency color thresholds (milliseconds)
FAST_THRESHOLD_MS = 100
MEDIUM_THRESHOLD_MS = 300
