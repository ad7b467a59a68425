"""
Chunked parallel map for the embarrassingly parallel pipeline stages.

Work is split into fixed-size chunks, each chunk is processed by a worker
thread, and results are concatenated in input order once every chunk has
finished. Output is therefore identical to a sequential run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Input type
R = TypeVar("R")  # Result type


def chunked(items: Sequence[T], chunk_size: int) -> list[Sequence[T]]:
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    return [items[start : start + chunk_size] for start in range(0, len(items), chunk_size)]


def map_in_chunks(
    items: Sequence[T],
    worker_func: Callable[[Sequence[T]], list[R]],
    max_workers: int = 1,
    chunk_size: int = 5000,
    desc: str = "Processing",
) -> list[R]:
    """
    Apply ``worker_func`` to chunks of ``items`` and merge results in order.

    Args:
        items: Items to process
        worker_func: Takes a chunk, returns one result per item
        max_workers: Thread pool size; 1 runs inline without a pool
        chunk_size: Items per chunk
        desc: Label used in debug logging

    Returns:
        Flat list of results, aligned with ``items``
    """
    if not items:
        return []

    chunks = chunked(items, chunk_size)
    if max_workers <= 1 or len(chunks) == 1:
        logger.debug("%s: %d items inline", desc, len(items))
        shards = [worker_func(chunk) for chunk in chunks]
    else:
        logger.debug("%s: %d items in %d chunks on %d workers", desc, len(items), len(chunks), max_workers)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            shards = list(executor.map(worker_func, chunks))

    results: list[R] = []
    for shard in shards:
        results.extend(shard)
    return results
