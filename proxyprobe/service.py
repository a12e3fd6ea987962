"""Request orchestration: matrices in, macro jobs run once, values out.

Public API:
    collect_matrices  -- resolve, run and extract one batch of matrices
    run_macros        -- run each distinct macro job once
    measure_all       -- run independent batches concurrently
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

from proxyprobe.macros import find_macro
from proxyprobe.matrices import find_batch_from_entry
from proxyprobe.matrices.base import Matrix
from proxyprobe.models import MacroType, MatrixEntry, ProbeConfig
from proxyprobe.vendors.base import Vendor

logger = logging.getLogger(__name__)


async def run_macros(
    vendor: Optional[Vendor],
    macro_types: Sequence[MacroType],
    config: ProbeConfig,
) -> dict[MacroType, Any]:
    """Run each distinct job in *macro_types* once, in first-seen order.

    Jobs without a built-in engine (and ``MacroType.INVALID``) are skipped
    and have no entry in the returned mapping.
    """
    results: dict[MacroType, Any] = {}
    for macro_type in dict.fromkeys(macro_types):
        if macro_type is MacroType.INVALID:
            continue
        macro = find_macro(macro_type)
        if macro is None:
            logger.debug("no engine for macro %s, skipping", macro_type.value)
            continue
        results[macro_type] = await macro.run(vendor, config)
    return results


def extract_matrices(
    entries: Sequence[MatrixEntry],
    matrices: Sequence[Matrix],
    results: dict[MacroType, Any],
) -> None:
    """Feed every matrix the result of the job it depends on."""
    for entry, matrix in zip(entries, matrices):
        result = results.get(matrix.macro_job)
        if result is not None:
            matrix.extract(entry, result)


async def collect_matrices(
    vendor: Optional[Vendor],
    entries: Sequence[MatrixEntry],
    config: ProbeConfig,
) -> list[Matrix]:
    """Resolve *entries* into matrices and fill each from its job's result.

    The returned list matches *entries* one to one.  Matrices whose job
    did not run keep their default value.
    """
    matrices = find_batch_from_entry(entries)
    results = await run_macros(vendor, [m.macro_job for m in matrices], config)
    extract_matrices(entries, matrices, results)
    return matrices


async def measure_all(
    vendors: Sequence[Optional[Vendor]],
    entries: Sequence[MatrixEntry],
    config: ProbeConfig,
) -> list[list[Matrix]]:
    """Collect the same matrices through several vendors concurrently.

    Each vendor gets its own jobs and results; the output is in vendor
    order.
    """
    tasks = [collect_matrices(v, entries, config) for v in vendors]
    return list(await asyncio.gather(*tasks))
