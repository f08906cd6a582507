"""Bare construction of single-element sequences."""

from listbench import benchmark, product
from listbench.listof import listof, listof_vararg
from listbench.measure import Blackhole

COUNTS = (1, 10, 1000, 1_000_000)


@benchmark(tags=("creation",))
def default_listof_single_creation():
    return listof(1)


@benchmark(tags=("creation",))
def listof_vararg_creation():
    return listof_vararg(1)


@product(count=COUNTS, tags=("creation", "repeated"))
def default_listof_repeated_creation(blackhole: Blackhole, count: int) -> None:
    """Create ``count`` sequences per operation with ``listof()``."""
    consume = blackhole.consume
    for _ in range(count):
        consume(listof(1))


@product(count=COUNTS, tags=("creation", "repeated"))
def listof_vararg_repeated_creation(blackhole: Blackhole, count: int) -> None:
    """Create ``count`` sequences per operation with ``listof_vararg()``."""
    consume = blackhole.consume
    for _ in range(count):
        consume(listof_vararg(1))
