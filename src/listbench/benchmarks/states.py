"""Per-trial state for the operation and polymorphic call site benchmarks."""

import random
from collections.abc import Callable, Sequence
from typing import Any

from listbench.fixtures import ConfigurationError, Fixture
from listbench.listof import listof, listof_vararg

SEED = 0xCAFEBABE
"""Seed of every fixture's random number generator, so that all variants see the same inputs."""

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
ODD_BOUND = 2_000_000

VARIANTS: dict[str, Callable[[int], Sequence[int]]] = {
    "default": listof,
    "vararg": listof_vararg,
}


def random_int32(rng: random.Random) -> int:
    return rng.randint(INT32_MIN, INT32_MAX)


def random_odd(rng: random.Random) -> int:
    """An odd integer in ``[0, ODD_BOUND)``."""
    return rng.randrange(ODD_BOUND // 2) * 2 + 1


VALUE_STRATEGIES: dict[str, Callable[[random.Random], int]] = {
    "random": random_int32,
    "odd": random_odd,
}


def constructor(variant: str) -> Callable[[int], Sequence[int]]:
    try:
        return VARIANTS[variant]
    except KeyError:
        raise ConfigurationError(f"Unknown list type: {variant}") from None


class ListState(Fixture):
    """
    A single-element sequence built with the constructor given by ``variant``.

    Parameters
    ----------
    variant: str
        The construction variant, either ``"default"`` or ``"vararg"``.
    values: str
        How the element is drawn: ``"random"`` for any 32-bit signed integer,
        ``"odd"`` for an odd integer in ``[0, 2_000_000)``.
    """

    def __init__(self, variant: str, values: str = "random"):
        self.variant = variant
        self.values = values
        self.list: Sequence[int] = ()

    def setup(self) -> None:
        build = constructor(self.variant)
        if self.values not in VALUE_STRATEGIES:
            raise ConfigurationError(f"Unknown value strategy: {self.values}")
        rng = random.Random(SEED)
        self.list = build(VALUE_STRATEGIES[self.values](rng))

    def params(self) -> dict[str, Any]:
        if self.values == "random":
            return {"variant": self.variant}
        return {"variant": self.variant, "values": self.values}


SCENARIOS = ("default_only", "vararg_only", "mixed")
DEFAULT_BATCH_SIZE = 100


class PolymorphicState(Fixture):
    """
    A batch of single-element sequences, built under one of three call site regimes.

    With ``"default_only"`` and ``"vararg_only"``, all sequences come from the same
    constructor, so a call site iterating them sees a single sequence type. With
    ``"mixed"``, even indices use ``listof()`` and odd indices use ``listof_vararg()``.
    """

    def __init__(self, scenario: str, size: int = DEFAULT_BATCH_SIZE):
        self.scenario = scenario
        self.size = size
        self.lists: tuple[Sequence[int], ...] = ()

    def setup(self) -> None:
        if self.scenario == "default_only":
            builders = [listof]
        elif self.scenario == "vararg_only":
            builders = [listof_vararg]
        elif self.scenario == "mixed":
            builders = [listof, listof_vararg]
        else:
            raise ConfigurationError(f"Unknown scenario: {self.scenario}")

        rng = random.Random(SEED)
        self.lists = tuple(
            builders[i % len(builders)](random_odd(rng)) for i in range(self.size)
        )

    def params(self) -> dict[str, Any]:
        if self.size == DEFAULT_BATCH_SIZE:
            return {"scenario": self.scenario}
        return {"scenario": self.scenario, "size": self.size}
