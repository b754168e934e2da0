from __future__ import annotations
from collections.abc import Iterable, Iterator, Sequence
import bisect
import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

# --- Configuration ---
CHECK_INVARIANTS: bool = False  # run validate() after every mutating call


class Run:
    """A contiguous inclusive index range [left, right] holding a single value"""

    __slots__: tuple[str, ...] = ("left", "right", "value")

    def __init__(self, left: int, right: int, value: int):
        if left > right:
            raise ValueError(f"Run left {left} is past right {right}")
        self.left: int = left
        self.right: int = right
        self.value: int = value

    @property
    def length(self) -> int:
        return self.right - self.left + 1

    def __len__(self):
        return self.length

    def contains(self, x: int) -> bool:
        """Whether the index x falls inside this run"""
        return self.left <= x <= self.right

    def __contains__(self, x: int) -> bool:
        return self.contains(x)

    def __eq__(self, other):
        if not isinstance(other, Run):
            return NotImplemented
        return (self.left, self.right, self.value) == (
            other.left,
            other.right,
            other.value,
        )

    def __repr__(self):
        return f"<Run [{self.left}, {self.right}]: {self.value}>"


def _check_range(left: int, right: int):
    if left < 0:
        raise ValueError(f"Range start {left} is negative")
    if left > right:
        raise ValueError(f"Range start {left} is past range end {right}")


# --- Main Tree Class ---
class RangeTree:
    """Ordered runs of equal values over an integer index space.

    Runs are kept in one list sorted by their left bound. A second list holds
    just those left bounds so boundary lookups are a single bisect. Every
    range operation first splits the runs straddling its boundaries, then
    works on the aligned slice between them.

    Properties:
        runs: The runs, sorted by `left` and never overlapping
        check: Whether to validate the invariants after every mutation
    """

    def __init__(self, runs: Iterable[Run] = (), check: Optional[bool] = None):
        self.runs: list[Run] = sorted(runs, key=lambda run: run.left)
        self._lefts: list[int] = [run.left for run in self.runs]
        self.check: bool = CHECK_INVARIANTS if check is None else check
        self.validate()

    @classmethod
    def from_sequence(
        cls, values: Sequence[int], check: Optional[bool] = None
    ) -> RangeTree:
        """Build a tree with one run per element of values"""
        tree = cls(check=check)
        tree.runs = [Run(i, i, int(v)) for i, v in enumerate(values)]
        tree._lefts = list(range(len(tree.runs)))
        return tree

    # --- Public API ---
    def __len__(self) -> int:
        return len(self.runs)

    def __iter__(self) -> Iterator[Run]:
        return iter(self.runs)

    def __repr__(self):
        return f"<RangeTree runs: {len(self.runs)} span: {self.span}>"

    @property
    def span(self) -> int:
        """The number of indices covered by some run"""
        return sum(run.length for run in self.runs)

    def split(self, middle: int) -> Optional[Run]:
        """Split the run containing middle into [left, middle - 1] and
        [middle, right]. Returns the run that now starts at middle, or None
        if no run contains middle
        """
        if middle < 0:
            raise ValueError(f"Split position {middle} is negative")
        index = self._split(middle)
        self._maybe_validate()
        return None if index is None else self.runs[index]

    def assign(self, left: int, right: int, value: int):
        """Set every index in [left, right] to value as one single run"""
        _check_range(left, right)
        self._split(right + 1)
        self._split(left)

        lo = bisect.bisect_left(self._lefts, left)
        hi = bisect.bisect_right(self._lefts, right, lo)
        if lo == hi:
            # Nothing in the span yet
            self.runs.insert(lo, Run(left, right, value))
            self._lefts.insert(lo, left)
        else:
            run = self.runs[lo]
            run.left = left
            run.right = right
            run.value = value
            self._lefts[lo] = left
            if hi - lo > 1:
                logger.debug("assign [%d, %d] coalesced %d runs", left, right, hi - lo)
                del self.runs[lo + 1 : hi]
                del self._lefts[lo + 1 : hi]
        self._maybe_validate()

    def add(self, left: int, right: int, delta: int):
        """Add delta to every index in [left, right].
        Does nothing when left comes before every run
        """
        _check_range(left, right)
        if self._precedes_runs(left):
            return
        self._split(right + 1)
        self._split(left)

        lo = bisect.bisect_left(self._lefts, left)
        hi = bisect.bisect_right(self._lefts, right, lo)
        for run in self.runs[lo:hi]:
            run.value += delta
        self._maybe_validate()

    def nth(self, left: int, x: int) -> Optional[int]:
        """Get the value of the x-th (0-indexed) covered index at or after left

        Args:
            left: The index to start counting from
            x: How many covered indices to skip past left

        Returns:
            Optional[int]: The value, or None if left comes before every run
                or fewer than x + 1 indices are covered at or after left
        """
        if left < 0 or x < 0:
            raise ValueError("nth needs a non-negative start and offset")
        if self._precedes_runs(left):
            return None

        for index in range(self._first_overlap(left), len(self.runs)):
            run = self.runs[index]
            count = run.right - max(left, run.left) + 1
            if x < count:
                return run.value
            x -= count
        return None

    def pow_sum(self, left: int, right: int, power: int, modulo: int) -> int:
        """Sum of value ** power over every index in [left, right], mod modulo.
        0 when left comes before every run
        """
        _check_range(left, right)
        if modulo <= 0:
            raise ValueError(f"Modulo must be positive, got {modulo}")
        if power < 0:
            raise ValueError(f"Power must be non-negative, got {power}")
        if self._precedes_runs(left):
            return 0

        total = 0
        for run in self._overlapping(left, right):
            count = min(right, run.right) - max(left, run.left) + 1
            total = (total + count * pow(run.value, power, modulo)) % modulo
        return total

    def kth_smallest(self, left: int, right: int, k: int) -> Optional[int]:
        """Get the k-th (0-indexed) smallest value among the indices in
        [left, right], or None if fewer than k + 1 of them are covered
        """
        _check_range(left, right)
        if k < 0:
            raise ValueError(f"Rank must be non-negative, got {k}")

        pairs = sorted(
            (run.value, min(right, run.right) - max(left, run.left) + 1)
            for run in self._overlapping(left, right)
        )
        for value, count in pairs:
            if k < count:
                return value
            k -= count
        return None

    def get_single(self, index: int) -> int:
        """Get the value at a single index"""
        pos = bisect.bisect_right(self._lefts, index) - 1
        if index < 0 or pos < 0 or index > self.runs[pos].right:
            raise IndexError(f"RangeTree index {index} is not covered")
        return self.runs[pos].value

    def compact(self) -> int:
        """Merge every adjacent pair of touching runs that share a value.

        Returns:
            int: The number of runs removed
        """
        if not self.runs:
            return 0

        merged: list[Run] = [self.runs[0]]
        for run in self.runs[1:]:
            prev = merged[-1]
            if prev.right + 1 == run.left and prev.value == run.value:
                prev.right = run.right
            else:
                merged.append(run)

        removed = len(self.runs) - len(merged)
        if removed:
            logger.debug("compact removed %d runs", removed)
            self.runs = merged
            self._lefts = [run.left for run in merged]
        self._maybe_validate()
        return removed

    def to_list(self) -> list[int]:
        """Return the value of every covered index as a flat list"""
        ret: list[int] = []
        for run in self.runs:
            ret.extend([run.value] * run.length)
        return ret

    def to_array(self) -> np.ndarray:
        """Return the value of every covered index as an int64 numpy array.
        Every value must fit in int64, use to_list() for anything wider
        """
        if not self.runs:
            return np.array([], dtype=np.int64)
        values = np.array([run.value for run in self.runs], dtype=np.int64)
        lengths = np.array([run.length for run in self.runs])
        return np.repeat(values, lengths)

    def validate(self):
        """Make sure the runs are sorted, well formed and never overlap"""
        if len(self._lefts) != len(self.runs):
            self._fail(f"{len(self._lefts)} bounds tracked for {len(self.runs)} runs")

        prev: Optional[Run] = None
        for i, run in enumerate(self.runs):
            if run.left > run.right:
                self._fail(f"{run!r} at {i} is inverted")
            if self._lefts[i] != run.left:
                self._fail(f"{run!r} at {i} has a stale left bound {self._lefts[i]}")
            if prev is not None and prev.right >= run.left:
                self._fail(f"{prev!r} overlaps or follows {run!r} at {i}")
            prev = run

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _split(self, middle: int) -> Optional[int]:
        """Make sure a run starts at middle. Returns its position, or None
        if middle isn't covered by any run
        """
        index = bisect.bisect_right(self._lefts, middle) - 1
        if index < 0:
            return None

        run = self.runs[index]
        if run.left == middle:
            return index
        if middle > run.right:
            return None

        new = Run(middle, run.right, run.value)
        run.right = middle - 1
        self.runs.insert(index + 1, new)
        self._lefts.insert(index + 1, middle)
        return index + 1

    def _precedes_runs(self, left: int) -> bool:
        """Whether no run starts at or before left"""
        return bisect.bisect_right(self._lefts, left) == 0

    def _first_overlap(self, left: int) -> int:
        """Position of the first run that ends at or after left"""
        index = bisect.bisect_right(self._lefts, left) - 1
        if index < 0:
            return 0
        if self.runs[index].right < left:
            return index + 1
        return index

    def _overlapping(self, left: int, right: int) -> Iterator[Run]:
        for index in range(self._first_overlap(left), len(self.runs)):
            run = self.runs[index]
            if run.left > right:
                break
            yield run

    def _maybe_validate(self):
        if self.check:
            self.validate()

    def _fail(self, msg: str):
        logger.error("RangeTree invariant broken: %s", msg)
        raise ValueError(f"RangeTree invariant broken: {msg}")
