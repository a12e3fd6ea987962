"""Macro job registry."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Mapping, Optional

from proxyprobe.models import MacroType

if TYPE_CHECKING:
    from proxyprobe.macros.base import Macro

_MACRO_MAP: Mapping[MacroType, Callable[[], Macro]] | None = None


def _load_macros() -> Mapping[MacroType, Callable[[], Macro]]:
    from proxyprobe.macros.ping import Ping

    return MappingProxyType({
        MacroType.PING: Ping,
    })


def get_macro_map() -> Mapping[MacroType, Callable[[], Macro]]:
    """Return the read-only mapping of job type → macro factory."""
    global _MACRO_MAP
    if _MACRO_MAP is None:
        _MACRO_MAP = _load_macros()
    return _MACRO_MAP


def find_macro(macro_type: MacroType) -> Optional[Macro]:
    """Instantiate the macro for *macro_type*, or None when none is built in."""
    factory = get_macro_map().get(macro_type)
    if factory is None:
        return None
    return factory()
