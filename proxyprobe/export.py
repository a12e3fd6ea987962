"""JSON export for collected matrices."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Optional, Sequence

from proxyprobe.matrices.base import Matrix
from proxyprobe.models import PingResult


def build_export_dict(
    matrices: Sequence[Matrix],
    ping: Optional[PingResult] = None,
) -> dict:
    data: dict = {"matrices": [m.as_dict() for m in matrices]}
    if ping is not None:
        data["ping"] = asdict(ping)
        data["ping"]["jitter"] = ping.jitter
    return data


def export_json(
    matrices: Sequence[Matrix],
    ping: Optional[PingResult] = None,
    indent: int = 2,
) -> str:
    """Export matrix values (and optionally the raw ping result) as JSON."""
    return json.dumps(build_export_dict(matrices, ping), indent=indent, default=str)
