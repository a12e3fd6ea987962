"""Matrix registry.

Maps each metric type to a factory producing a fresh matrix.  The map is
built once on first use and is read-only afterwards.  Lookups never
fail: unregistered types resolve to :class:`Invalid`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

from proxyprobe.models import MatrixEntry, MetricType

if TYPE_CHECKING:
    from proxyprobe.matrices.base import Matrix

_MATRIX_MAP: Mapping[MetricType, Callable[[], Matrix]] | None = None


def _load_matrices() -> Mapping[MetricType, Callable[[], Matrix]]:
    from proxyprobe.matrices.httpping import HTTPPing
    from proxyprobe.matrices.packetloss import PacketLoss
    from proxyprobe.matrices.rttping import RTTPing

    return MappingProxyType({
        MetricType.PACKET_LOSS: PacketLoss,
        MetricType.RTT_PING: RTTPing,
        MetricType.HTTP_PING: HTTPPing,
    })


def get_matrix_map() -> Mapping[MetricType, Callable[[], Matrix]]:
    """Return the read-only mapping of metric type → matrix factory."""
    global _MATRIX_MAP
    if _MATRIX_MAP is None:
        _MATRIX_MAP = _load_matrices()
    return _MATRIX_MAP


def find(matrix_type: MetricType) -> Matrix:
    """Instantiate the matrix for *matrix_type*, or :class:`Invalid`."""
    from proxyprobe.matrices.invalid import Invalid

    factory = get_matrix_map().get(matrix_type)
    if factory is None:
        return Invalid()
    return factory()


def find_batch(matrix_types: Iterable[MetricType]) -> list[Matrix]:
    """Resolve each type in order, one matrix per input (duplicates included)."""
    return [find(t) for t in matrix_types]


def find_batch_from_entry(entries: Iterable[MatrixEntry]) -> list[Matrix]:
    """Like :func:`find_batch`, reading the type of each request entry."""
    return [find(e.type) for e in entries]


def list_matrices() -> list[str]:
    """Return sorted list of registered metric type values."""
    return sorted(t.value for t in get_matrix_map())
