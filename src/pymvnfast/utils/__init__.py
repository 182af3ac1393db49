"""Utility functions: validation, worker pool, random streams."""

from pymvnfast.utils._parallel import partition_rows, resolve_workers, run_blocks
from pymvnfast.utils._seeds import RngStream, resolve_seed
from pymvnfast.utils._validation import check_square, check_symmetric

__all__ = [
    "RngStream",
    "resolve_seed",
    "partition_rows",
    "resolve_workers",
    "run_blocks",
    "check_symmetric",
    "check_square",
]
