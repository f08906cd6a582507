"""Types for benchmarks, measurement options, and records holding results of a run."""

import inspect
import json
import os
import sys
from collections.abc import Callable, Iterable, Mapping
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Protocol

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

TIME_UNITS: dict[str, int] = {"ns": 1, "us": 1_000, "ms": 1_000_000, "s": 1_000_000_000}
"""Supported output time units, mapped to their length in nanoseconds."""

JSON_COLUMNS = ("context", "parameters", "raw_samples")
"""Result record fields holding nested values, stored as JSON strings in flat rows."""


@dataclass(frozen=True)
class State:
    """
    Where a benchmark stands in its *family*, the configurations that
    ``@parametrize`` or ``@product`` created from one function. Passed to the
    ``setUp`` and ``tearDown`` hooks of every trial.

    A plain ``@benchmark`` is a family of its own, with ``family_size == 1``.
    """

    name: str
    family: str
    family_size: int
    family_index: int


def NoOp(state: State, params: Mapping[str, Any] = MappingProxyType({})) -> None:
    """The default trial hook, which does nothing."""


@dataclass(frozen=True)
class MeasurementOptions:
    """
    The measurement protocol applied to every benchmark configuration in a run.

    Each configuration is measured in ``forks`` freshly forked processes. Each of
    these runs ``warmup_iterations`` discarded iterations of ``warmup_time`` seconds,
    followed by ``iterations`` recorded iterations of ``time`` seconds.
    ``forks = 0`` measures a single trial in the current process.
    """

    forks: int = 2
    """Number of forked processes to measure each configuration in."""
    warmup_iterations: int = 10
    """Number of discarded warmup iterations per trial."""
    warmup_time: float = 1.0
    """Time budget of a single warmup iteration, in seconds."""
    iterations: int = 5
    """Number of recorded measurement iterations per trial."""
    time: float = 1.0
    """Time budget of a single measurement iteration, in seconds."""
    time_unit: str = "ns"
    """Unit to report average times in, one of ``ns``, ``us``, ``ms``, ``s``."""

    def __post_init__(self):
        if self.time_unit not in TIME_UNITS:
            raise ValueError(
                f"unknown time unit {self.time_unit!r}, expected one of {', '.join(TIME_UNITS)}"
            )
        for name in ("forks", "warmup_iterations", "warmup_time", "time"):
            if getattr(self, name) < 0:
                raise ValueError(f"measurement option {name!r} must be non-negative")
        if self.iterations < 1:
            raise ValueError("need at least one measurement iteration")

    @property
    def trials(self) -> int:
        """Number of trials measured per configuration."""
        return max(self.forks, 1)


@dataclass(frozen=True)
class BenchmarkResult:
    """
    Everything ``listbench.run()`` measured in one run: one record per benchmark
    configuration, plus the context the run happened in.
    """

    run: str
    """The run name, either given or generated from host name and a random suffix."""
    context: dict[str, Any]
    """Values from context providers, e.g. the interpreter and CPU the run happened on."""
    benchmarks: list[dict[str, Any]]
    """Per-configuration records with name, parameters, score, stdev, unit, and samples."""
    timestamp: int
    """Start of the run, in seconds since the epoch."""

    def to_json(self) -> dict[str, Any]:
        """
        The result as a JSON object, with the per-configuration records nested under
        ``benchmarks``.
        """
        return asdict(self)

    def to_records(self) -> list[dict[str, Any]]:
        """
        Export a benchmark result as flat rows, one per benchmark configuration.

        Every row carries the run name, timestamp, and context next to the
        configuration's own fields (name, score, stdev, unit, samples, ...).
        Nested values are stored as JSON strings, so that every column holds scalars.
        """
        rows = []
        for bm in self.benchmarks:
            row = {"run": self.run, "timestamp": self.timestamp, "context": self.context, **bm}
            for col in JSON_COLUMNS:
                if col in row:
                    row[col] = json.dumps(row[col])
            rows.append(row)
        return rows

    @classmethod
    def from_json(cls, struct: dict[str, Any]) -> Self:
        """
        The inverse of ``to_json()``. Missing fields get empty defaults.
        """
        return cls(
            run=struct.get("run", ""),
            context=struct.get("context", {}),
            benchmarks=struct.get("benchmarks", []),
            timestamp=struct.get("timestamp", 0),
        )

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> list[Self]:
        """
        Group flat rows (as produced by ``to_records()``) back into one
        result per run name.

        Missing values, which tabular formats fill in as nulls, are dropped.
        """
        runs: dict[str, Self] = {}
        for record in records:
            row = {
                k: json.loads(v) if k in JSON_COLUMNS else v
                for k, v in record.items()
                if v is not None
            }
            run = row.pop("run", "")
            context = row.pop("context", {})
            timestamp = row.pop("timestamp", 0)
            if run not in runs:
                runs[run] = cls(run=run, context=context, benchmarks=[], timestamp=timestamp)
            runs[run].benchmarks.append(row)
        return list(runs.values())


class BenchmarkReporter(Protocol):
    def read(self, fp: str | os.PathLike[str], **kwargs: Any) -> list[BenchmarkResult]: ...

    def write(self, result: BenchmarkResult, fp: str | os.PathLike[str], **kwargs: Any) -> None: ...


Variable = tuple[str, type, Any]


@dataclass(frozen=True)
class Interface:
    """
    The parameters and return annotation of a benchmark function, as seen after
    parametrization. Create one with ``Interface.from_callable()``.
    """

    funcname: str
    """Name of the function."""
    names: tuple[str, ...]
    """Parameter names, in signature order."""
    types: tuple[type, ...]
    """Parameter annotations, ``inspect.Parameter.empty`` where missing."""
    defaults: tuple
    """The parameters' default values, or inspect.Parameter.empty if a parameter has no default."""
    variables: tuple[Variable, ...]
    """A tuple of (name, type, default) triples, one for each parameter."""
    returntype: type
    """The return annotation, or NoneType if it is None."""

    @classmethod
    def from_callable(cls, fn: Callable, defaults: dict[str, Any] | None = None) -> Self:
        """
        Describe the signature of ``fn``, where values in ``defaults`` take
        precedence over the signature's own default values.
        """
        defaults = defaults or {}
        # follow_wrapped=False keeps the values bound by the parametrization decorators.
        sig = inspect.signature(fn, follow_wrapped=False)
        ret = sig.return_annotation
        _defaults = {k: defaults.get(k, v.default) for k, v in sig.parameters.items()}
        return cls(
            fn.__name__,
            tuple(sig.parameters.keys()),
            tuple(p.annotation for p in sig.parameters.values()),
            tuple(_defaults.values()),
            tuple((k, v.annotation, _defaults[k]) for k, v in sig.parameters.items()),
            type(ret) if ret is None else ret,
        )


@dataclass(frozen=True)
class Benchmark:
    """
    A function to measure, together with its name, tags and per-trial hooks.
    Created by the ``@benchmark``, ``@parametrize`` and ``@product`` decorators.
    """

    fn: Callable[..., Any]
    """The measured function. Its arguments are bound by parametrization or ``run(params=...)``."""
    name: str = ""
    """A display name. If not given, the function name is used."""
    params: dict[str, Any] = field(default_factory=dict)
    """A partial parametrization to apply to the benchmark function. Internal only."""
    setUp: Callable[[State, Mapping[str, Any]], None] = field(repr=False, default=NoOp)
    """A setup hook run once per trial, before warmup."""
    tearDown: Callable[[State, Mapping[str, Any]], None] = field(repr=False, default=NoOp)
    """A teardown hook run once per trial, after the last measurement iteration."""
    tags: tuple[str, ...] = field(repr=False, default=())
    """Tags for selecting benchmarks, as with ``listbench run -t <tag>``."""
    interface: Interface = field(init=False, repr=False)
    """Signature of ``fn``, filled in on construction."""

    def __post_init__(self):
        if not self.name:
            super().__setattr__("name", self.fn.__name__)
        super().__setattr__("interface", Interface.from_callable(self.fn, self.params))
