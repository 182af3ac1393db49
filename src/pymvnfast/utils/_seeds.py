"""Counter-based random streams for parallel simulation.

Every worker of a simulation call draws from its own Philox stream. All
streams of one call share the same key (the base seed) and differ only in
the starting value of the 256-bit counter::

    counter = [0, 0, block_offset, worker_index]

The two low words are left for the stream to advance through, so each
``(worker_index, block_offset)`` pair owns a disjoint range of 2**128
counter values. Philox is a bijection of the counter for a fixed key, which
makes the streams non-overlapping by construction, whatever the number of
workers. No generator state is shared between threads.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pymvnfast._exceptions import InvalidParameterError

_KEY_BITS = 128
_WORD = 2**64


def resolve_seed(seed: int | None) -> int:
    """Return a usable Philox key.

    Parameters
    ----------
    seed : int or None
        Base seed. If None, fresh OS entropy is drawn, so the call is not
        reproducible.

    Returns
    -------
    key : int
        Integer in [0, 2**128).
    """
    if seed is None:
        return int(np.random.SeedSequence().entropy) % 2**_KEY_BITS
    seed = int(seed)
    if seed < 0 or seed >= 2**_KEY_BITS:
        raise InvalidParameterError(
            f"seed must be in [0, 2**{_KEY_BITS}), got {seed}"
        )
    return seed


@dataclass(frozen=True)
class RngStream:
    """Random stream keyed by (seed, worker_index, block_offset).

    Attributes
    ----------
    seed : int
        Base seed shared by all workers of a call.
    worker_index : int
        Index of the worker consuming the stream.
    block_offset : int
        Offset of the block served by the stream (the first row of the
        worker's block in the simulators).
    """

    seed: int
    worker_index: int
    block_offset: int = 0

    def __post_init__(self):
        if not 0 <= self.worker_index < _WORD:
            raise InvalidParameterError(
                f"worker_index out of range: {self.worker_index}"
            )
        if not 0 <= self.block_offset < _WORD:
            raise InvalidParameterError(
                f"block_offset out of range: {self.block_offset}"
            )

    @property
    def counter(self) -> np.ndarray:
        """Starting Philox counter, least significant word first."""
        return np.array(
            [0, 0, self.block_offset, self.worker_index], dtype=np.uint64
        )

    def bit_generator(self) -> np.random.Philox:
        return np.random.Philox(key=resolve_seed(self.seed), counter=self.counter)

    def generator(self) -> np.random.Generator:
        """Fresh ``numpy.random.Generator`` positioned at the stream start."""
        return np.random.Generator(self.bit_generator())
