"""proxyprobe: latency probing through pluggable network vendors."""

__version__ = "0.1.0"
