from __future__ import annotations

import os
from typing import List, Optional


def worker_count(max_workers: Optional[int] = None) -> int:
    if max_workers is not None:
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        return max_workers
    return os.cpu_count() or 1


def row_partitions(height: int, parts: int) -> List[range]:
    """
    Split [0, height) into at most `parts` contiguous, non-empty row ranges.
    """

    if height <= 0:
        return []
    parts = max(1, min(parts, height))
    step, extra = divmod(height, parts)
    ranges = []
    start = 0
    for i in range(parts):
        stop = start + step + (1 if i < extra else 0)
        ranges.append(range(start, stop))
        start = stop
    return ranges
