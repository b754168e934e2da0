"""Shared helpers: the CF896C operation generator and a plain array to check against"""

from typing import Optional

import numpy as np
import pytest

from rangetree import RangeTree

SEED_MAX = 1_000_000_007


class CF896CRng:
    """The linear congruential generator from the CF896C statement"""

    def __init__(self, seed: int):
        self.state = seed

    def next(self) -> int:
        ret = self.state
        self.state = (self.state * 7 + 13) % SEED_MAX
        return ret


def random_array(n: int, vmax: int, rng: CF896CRng) -> list[int]:
    return [rng.next() % vmax + 1 for _ in range(n)]


def random_ops(n: int, m: int, vmax: int, rng: CF896CRng) -> list[tuple]:
    """Generate m operations with 1-indexed inclusive bounds"""
    ops = []
    for _ in range(m):
        opi = rng.next() % 4 + 1
        l = rng.next() % n + 1
        r = rng.next() % n + 1
        if l > r:
            l, r = r, l

        if opi == 3:
            x = rng.next() % (r - l + 1) + 1
        else:
            x = rng.next() % vmax + 1

        if opi == 1:
            ops.append(("add", l, r, x))
        elif opi == 2:
            ops.append(("assign", l, r, x))
        elif opi == 3:
            ops.append(("nth", l, r, x))
        else:
            y = rng.next() % vmax + 1
            ops.append(("pow_sum", l, r, x, y))
    return ops


def apply_op(target, op: tuple) -> Optional[int]:
    """Apply one generated op to a RangeTree or a NaiveArray.
    Returns the query output, or None for the mutating ops
    """
    name, l, r = op[0], op[1] - 1, op[2] - 1
    if name == "add":
        target.add(l, r, op[3])
    elif name == "assign":
        target.assign(l, r, op[3])
    elif name == "nth":
        return target.nth(l, op[3] - 1)
    else:
        return target.pow_sum(l, r, op[3], op[4])
    return None


class NaiveArray:
    """Every index stored explicitly, edited slice by slice"""

    def __init__(self, values):
        self.values = np.array(values, dtype=np.int64)

    def assign(self, left: int, right: int, value: int):
        self.values[left : right + 1] = value

    def add(self, left: int, right: int, delta: int):
        self.values[left : right + 1] += delta

    def nth(self, left: int, x: int) -> Optional[int]:
        if left + x >= len(self.values):
            return None
        return int(self.values[left + x])

    def pow_sum(self, left: int, right: int, power: int, modulo: int) -> int:
        return (
            sum(pow(int(v), power, modulo) for v in self.values[left : right + 1])
            % modulo
        )

    def kth_smallest(self, left: int, right: int, k: int) -> Optional[int]:
        ordered = np.sort(self.values[left : right + 1])
        if k >= len(ordered):
            return None
        return int(ordered[k])


@pytest.fixture
def values():
    return [8, 9, 7, 2, 3, 1, 5, 6, 4, 8]


@pytest.fixture
def tree(values):
    return RangeTree.from_sequence(values, check=True)


@pytest.fixture
def cf_rng():
    """The generator class, so tests can seed their own streams"""
    return CF896CRng


@pytest.fixture
def cf_vector():
    """Build the starting array and the op list for one generated scenario"""

    def build(n: int, m: int, seed: int, vmax: int) -> tuple[list[int], list[tuple]]:
        rng = CF896CRng(seed)
        array = random_array(n, vmax, rng)
        ops = random_ops(n, m, vmax, rng)
        return array, ops

    return build


@pytest.fixture
def naive_array():
    return NaiveArray


@pytest.fixture
def run_op():
    return apply_op
