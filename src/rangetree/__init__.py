from .rangetree import RangeTree, Run

__all__ = [
    "RangeTree",
    "Run",
]
