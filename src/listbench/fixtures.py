"""
Per-trial benchmark state ('fixtures').

A fixture is passed to a benchmark as a parameter value, and is set up anew
at the start of every measurement trial, inside the process the trial runs in.
After ``setup()`` returns, the fixture is only read by the benchmark.
"""

from typing import Any


class ConfigurationError(ValueError):
    """Raised during fixture setup when a parameter value is not recognized."""


class Fixture:
    """
    Base class for benchmark state built once per measurement trial.

    Subclasses store their parameters in ``__init__()``, and compute the values
    read by benchmarks in ``setup()``. Parameters should be validated in ``setup()``,
    so that a bad configuration fails only the trial using it.
    """

    def setup(self) -> None:
        """Build the state for a measurement trial."""
        pass

    def params(self) -> dict[str, Any]:
        """The parameters identifying this fixture in benchmark names and results."""
        return {}

    def to_json(self) -> dict[str, Any]:
        return self.params()

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.params().items())
        return f"{self.__class__.__name__}({args})"
