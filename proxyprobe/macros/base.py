"""Abstract base class for macro jobs (raw measurement runs)."""

from __future__ import annotations

import abc
from typing import Any, Optional

from proxyprobe.models import MacroType, ProbeConfig
from proxyprobe.vendors.base import Vendor


class Macro(abc.ABC):
    """A raw measurement run whose result feeds one or more matrices.

    A macro is created per request, run once, and then only read.
    """

    @property
    @abc.abstractmethod
    def type(self) -> MacroType:
        """The job identifier matrices refer to in ``macro_job``."""

    @abc.abstractmethod
    async def run(self, vendor: Optional[Vendor], config: ProbeConfig) -> Any:
        """Execute the job and return its result object."""
