"""
sqlbatch – split SQL scripts into batches on ``GO``-style separator lines.
"""
from sqlbatch.batch import Batch, has_prefix_fold, normalize_continuations, scan, split

__version__ = "0.1.0"

__all__ = [
    "Batch",
    "has_prefix_fold",
    "normalize_continuations",
    "scan",
    "split",
    "__version__",
]
