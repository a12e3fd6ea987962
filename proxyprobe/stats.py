"""Statistical aggregation for ping samples."""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Sequence

from proxyprobe.models import PingResult


def mean_ms(values: Sequence[int]) -> int:
    """Arithmetic mean of *values*, truncated to whole milliseconds."""
    if not values:
        return 0
    return int(sum(values) / len(values))


def stdev_ms(values: Sequence[int]) -> int:
    """Sample standard deviation (N-1 denominator), truncated to whole ms.

    Fewer than two samples carry no spread information and yield 0.
    """
    n = len(values)
    if n < 2:
        return 0
    avg = sum(values) / n
    variance = sum((v - avg) ** 2 for v in values) / (n - 1)
    return int(math.sqrt(variance))


def update_maxima(result: PingResult, rtt: int, request: int) -> None:
    """Fold one successful sample into the running maxima of *result*."""
    result.max_rtt = max(result.max_rtt, rtt)
    result.max_request = max(result.max_request, request)


def aggregate_ping(
    result: PingResult,
    rtts: list[int],
    requests: list[int],
    codes: list[int],
    failed: int,
    total: int,
) -> None:
    """Compute the final statistics of a ping run, modifying *result* in place."""
    if total <= 0 or not rtts:
        _reset(result)
        return

    result.packet_loss = failed / total * 100
    result.status_codes = codes

    result.rtt = mean_ms(rtts)
    result.rtt_sd = stdev_ms(rtts)
    result.rtt_list = rtts

    result.request = mean_ms(requests)
    result.request_sd = stdev_ms(requests)
    result.request_list = requests


def _reset(result: PingResult) -> None:
    failed = PingResult.failed()
    for f in fields(result):
        setattr(result, f.name, getattr(failed, f.name))
