"""Vendor registry."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from proxyprobe.vendors.base import Vendor

_VENDOR_MAP: Mapping[str, type[Vendor]] | None = None


def _load_vendors() -> Mapping[str, type[Vendor]]:
    from proxyprobe.vendors.direct import DirectVendor

    return MappingProxyType({
        "direct": DirectVendor,
    })


def get_vendor_map() -> Mapping[str, type[Vendor]]:
    """Return the read-only mapping of slug → vendor class, loading lazily."""
    global _VENDOR_MAP
    if _VENDOR_MAP is None:
        _VENDOR_MAP = _load_vendors()
    return _VENDOR_MAP


def get_vendor(slug: str) -> Vendor:
    """Instantiate a vendor by slug."""
    vmap = get_vendor_map()
    if slug not in vmap:
        raise ValueError(f"Unknown vendor: {slug!r}. Available: {list(vmap)}")
    return vmap[slug]()


def list_vendors() -> list[str]:
    """Return sorted list of available vendor slugs."""
    return sorted(get_vendor_map())
