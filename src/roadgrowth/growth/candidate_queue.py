"""Priority queue of pending candidates.

Lowest cost pops first. Equal costs pop in insertion order (FIFO), which
keeps builds reproducible.
"""

import heapq
import itertools
from typing import List, Optional, Tuple

from ..contracts import Candidate


class CandidateQueue:
    """Min-heap of candidates keyed by (cost, insertion sequence)."""

    def __init__(self):
        self._heap: List[Tuple[float, int, Candidate]] = []
        self._sequence = itertools.count()
        self.pushed = 0
        self.popped = 0

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)

    def push(self, candidate: Candidate):
        heapq.heappush(self._heap, (candidate.cost, next(self._sequence), candidate))
        self.pushed += 1

    def pop(self) -> Optional[Candidate]:
        """Remove and return the cheapest candidate, or None when empty."""
        if not self._heap:
            return None
        _, _, candidate = heapq.heappop(self._heap)
        self.popped += 1
        return candidate

    def peek(self) -> Optional[Candidate]:
        return self._heap[0][2] if self._heap else None
