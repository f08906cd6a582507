"""
Transformation chains run over single-element sequences.

Every stage materializes a new list before the next one runs, mirroring
eager collection operations. Each chain is an independent scenario; the
parity filters and constants differ between them on purpose.
"""

from collections.abc import Sequence

BASE_VALUE = 75


def list_chain(seq: Sequence[int]) -> int | None:
    """Multiply by 3, keep even values, add 7, and return the first value (or None)."""
    tripled = [x * 3 for x in seq]
    evens = [x for x in tripled if (x & 1) == 0]
    shifted = [x + 7 for x in evens]
    return shifted[0] if shifted else None


def list_chain_odd(seq: Sequence[int]) -> int | None:
    """Multiply by 3, keep odd values, add 7, and return the first value (or None)."""
    tripled = [x * 3 for x in seq]
    odds = [x for x in tripled if (x & 1) == 1]
    shifted = [x + 7 for x in odds]
    return shifted[0] if shifted else None


def list_real_world(seq: Sequence[int], base_value: int = BASE_VALUE) -> int:
    offset = [x + base_value for x in seq]
    tripled = [x * 3 for x in offset]
    evens = [x for x in tripled if (x & 1) == 0]
    strings = [str(x) for x in evens]
    lengths = [len(s) for s in strings]
    long_enough = [n for n in lengths if n > 1]
    return sum(n + 1 for n in long_enough)


def sum_chain(seq: Sequence[int]) -> int:
    """The map/filter/sum chain run at the polymorphic call site."""
    tripled = [x * 3 for x in seq]
    odds = [x for x in tripled if (x & 1) == 1]
    return sum(x + 1 for x in odds)
