"""
Chunked execution of independent Monte Carlo trials.

Trials are split into fixed-size chunks. Each chunk owns an independent
child stream spawned from a single ``numpy.random.SeedSequence``, so
results depend on (seed, n_paths, chunk_size) only, never on how many
workers ran the chunks or in which order they finished.

Chunks may run on a thread pool: NumPy releases the GIL inside the
vectorised kernels that dominate a chunk.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar, Union

import numpy as np

from exotic_pricing.errors import SimulationCancelledError, require_count

logger = logging.getLogger(__name__)

T = TypeVar("T")

SeedLike = Union[int, np.random.SeedSequence, None]

#: progress(done, total) callback
ProgressCallback = Callable[[int, int], None]


class CancellationToken:
    """
    Cooperative cancellation flag shared between a caller and a running simulation.

    Examples
    --------
    >>> token = CancellationToken()
    >>> token.cancel()
    >>> token.cancelled
    True
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation; running loops stop at their next check."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self, where: str = "simulation") -> None:
        """
        Raises
        ------
        SimulationCancelledError
            If cancellation was requested
        """
        if self._event.is_set():
            raise SimulationCancelledError(f"{where} cancelled")


def plan_chunks(n_paths: int, chunk_size: int) -> list[int]:
    """
    Split ``n_paths`` trials into chunk sizes.

    >>> plan_chunks(10, 4)
    [4, 4, 2]
    """
    require_count("n_paths", n_paths)
    require_count("chunk_size", chunk_size)
    full, rest = divmod(n_paths, chunk_size)
    return [chunk_size] * full + ([rest] if rest else [])


def spawn_streams(seed: SeedLike, n_streams: int) -> list[np.random.SeedSequence]:
    """
    Spawn ``n_streams`` statistically independent child seed sequences.

    A fresh root is built for every call so the same ``seed`` always
    yields the same children.
    """
    if isinstance(seed, np.random.SeedSequence):
        root = np.random.SeedSequence(seed.entropy, spawn_key=seed.spawn_key)
    else:
        root = np.random.SeedSequence(seed)
    return root.spawn(n_streams)


def run_chunks(
    task: Callable[[int, np.random.Generator], T],
    sizes: list[int],
    streams: list[np.random.SeedSequence],
    n_workers: int = 1,
    cancel: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
) -> list[T]:
    """
    Run ``task(size, rng)`` for every chunk and return results in chunk order.

    Parameters
    ----------
    task : Callable[[int, np.random.Generator], T]
        Work for one chunk; must not share mutable state with other chunks
    sizes : list[int]
        Trials per chunk
    streams : list[np.random.SeedSequence]
        One independent stream per chunk
    n_workers : int, default 1
        Thread count; 1 runs inline
    cancel : CancellationToken, optional
        Checked before each chunk starts
    progress : ProgressCallback, optional
        Called with (chunks_done, chunks_total) in chunk order

    Returns
    -------
    list[T]
        Per-chunk results, ordered like ``sizes``

    Raises
    ------
    SimulationCancelledError
        If ``cancel`` fires before all chunks have started
    """
    if len(sizes) != len(streams):
        raise ValueError(
            f"CRITICAL: sizes and streams must have same length. "
            f"Got sizes={len(sizes)}, streams={len(streams)}"
        )
    require_count("n_workers", n_workers)

    def _run_one(size: int, stream: np.random.SeedSequence) -> T:
        if cancel is not None:
            cancel.raise_if_cancelled("Monte Carlo run")
        return task(size, np.random.default_rng(stream))

    total = len(sizes)
    results: list[T] = []

    if n_workers == 1 or total == 1:
        for i, (size, stream) in enumerate(zip(sizes, streams)):
            results.append(_run_one(size, stream))
            if progress is not None:
                progress(i + 1, total)
        return results

    logger.debug(f"Running {total} chunks on {n_workers} threads")
    executor = ThreadPoolExecutor(max_workers=n_workers)
    try:
        futures = [executor.submit(_run_one, size, stream) for size, stream in zip(sizes, streams)]
        for i, future in enumerate(futures):
            results.append(future.result())
            if progress is not None:
                progress(i + 1, total)
    finally:
        # On error, pending chunks are dropped instead of run to completion
        executor.shutdown(wait=True, cancel_futures=True)

    return results
