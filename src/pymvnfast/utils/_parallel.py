"""Row partitioning and the per-call worker pool.

Batch kernels split their n rows into contiguous blocks, one per worker,
and run each block to completion on a fixed-size thread pool. Shared
inputs (factor, mean) are read-only and every worker writes only to its
own row slice of the output, so no locking is needed. The call returns
after all workers have joined.
"""

from __future__ import annotations

from typing import Any, Callable

from joblib import Parallel, cpu_count, delayed

from pymvnfast.utils._validation import check_ncores


def partition_rows(n: int, ncores: int) -> list[tuple[int, int]]:
    """Split ``range(n)`` into ``ncores`` contiguous blocks.

    Block sizes differ by at most one; the larger blocks come first.

    Parameters
    ----------
    n : int
        Number of rows.
    ncores : int
        Number of blocks.

    Returns
    -------
    blocks : list of (start, stop)
        Half-open row ranges covering ``range(n)`` in order.

    Examples
    --------
    >>> partition_rows(10, 3)
    [(0, 4), (4, 7), (7, 10)]
    """
    q, r = divmod(n, ncores)
    blocks = []
    start = 0
    for w in range(ncores):
        stop = start + q + (1 if w < r else 0)
        blocks.append((start, stop))
        start = stop
    return blocks


def resolve_workers(ncores: int, n: int) -> int:
    """Number of workers actually used for a batch of ``n`` rows.

    Requesting more workers than the machine supports is not an error: the
    call silently runs on a single worker instead. The count is also capped
    at the number of rows.

    Raises
    ------
    InvalidParameterError
        If ``ncores`` is not a positive integer.
    """
    ncores = check_ncores(ncores)
    if ncores > cpu_count():
        return 1
    return max(1, min(ncores, n))


def run_blocks(
    fn: Callable[[int, int, int], Any],
    n: int,
    ncores: int,
) -> list[Any]:
    """Run ``fn(worker_index, start, stop)`` over the row blocks of ``n``.

    Parameters
    ----------
    fn : callable
        Block kernel. Must only write rows ``start:stop`` of any shared
        output.
    n : int
        Number of rows.
    ncores : int
        Requested number of workers (see ``resolve_workers``).

    Returns
    -------
    results : list
        Return values of ``fn``, in block order.
    """
    p = resolve_workers(ncores, n)
    blocks = partition_rows(n, p)
    if p == 1:
        return [fn(0, *blocks[0])]
    return Parallel(n_jobs=p, backend="threading")(
        delayed(fn)(w, start, stop) for w, (start, stop) in enumerate(blocks)
    )
