"""Utilities for parsing a ``[tool.listbench]`` config block out of a pyproject.toml file."""

import importlib
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self

    import tomllib
else:
    import tomli as tomllib
    from typing_extensions import Self

from listbench.types import MeasurementOptions

logger = logging.getLogger("listbench.config")

# maps pyproject.toml keys to MeasurementOptions fields.
_MEASUREMENT_KEYS = {
    "forks": "forks",
    "warmup-iterations": "warmup_iterations",
    "warmup-time": "warmup_time",
    "iterations": "iterations",
    "time": "time",
    "time-unit": "time_unit",
}


@dataclass
class ContextProviderDef:
    """
    A context provider declared as ``[tool.listbench.context.<name>]`` in pyproject.toml,
    whose values are recorded with every ``listbench run``.
    """

    name: str
    """Name of the provider table."""
    classpath: str
    """Dotted import path of a provider class, or of a function returning a context dict."""
    arguments: dict[str, Any] = field(default_factory=dict)
    """Keyword arguments for the provider class. Function providers take none."""

    def instantiate(self):
        """Import the provider and return a context provider callable."""
        obj = import_(self.classpath)
        if isinstance(obj, type):
            return obj(**self.arguments)
        if self.arguments:
            raise TypeError(
                f"context provider {self.name!r}: function providers take no arguments"
            )
        return obj


@dataclass(frozen=True)
class ListbenchConfig:
    log_level: str
    """Log level to use for the ``listbench`` module root logger."""
    measurement: MeasurementOptions
    """The measurement protocol to run benchmarks with."""
    include: str | None
    """A regular expression selecting benchmarks by name."""
    context: list[ContextProviderDef]
    """A list of context provider definitions found in pyproject.toml."""

    @classmethod
    def from_toml(cls, d: dict[str, Any]) -> Self:
        """
        Build a config from the contents of a ``[tool.listbench]`` table.

        Measurement keys are spelled as in the table (``warmup-iterations``,
        ``time-unit``, ...). Keys that are not set keep their defaults, unknown
        keys are ignored.

        Raises
        ------
        ValueError
            If a measurement value is out of range, e.g. an unknown time unit.
        """
        log_level = d.get("log-level", "NOTSET")
        measurement = MeasurementOptions(
            **{attr: d[key] for key, attr in _MEASUREMENT_KEYS.items() if key in d}
        )
        return cls(
            log_level=log_level,
            measurement=measurement,
            include=d.get("include"),
            context=[ContextProviderDef(**table) for table in d.get("context", {}).values()],
        )


def import_(classpath: str) -> Any:
    """Import an object given by its full dotted path, e.g. ``listbench.context.PythonInfo``."""
    modname, _, attr = classpath.rpartition(".")
    if not modname:
        raise ValueError(f"expected a dotted path to an object, got {classpath!r}")
    module = importlib.import_module(modname)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ImportError(f"module {modname!r} has no member {attr!r}") from None


def locate_pyproject(stop: os.PathLike[str] = Path.home()) -> os.PathLike[str] | None:
    """
    Find the nearest pyproject.toml in the current directory or its parents,
    looking no further up than ``stop`` (the home directory by default).
    Returns None if there is none.
    """
    cwd = Path.cwd()
    for p in (cwd, *cwd.parents):
        candidate = p / "pyproject.toml"
        if candidate.is_file():
            return candidate
        if p == stop:
            break
    logger.debug(f"could not locate pyproject.toml in directory {cwd}")
    return None


def parse_listbench_config(
    pyproject_path: str | os.PathLike[str] | None = None,
) -> ListbenchConfig:
    """
    Read the ``[tool.listbench]`` table of a pyproject.toml file, by default
    the one found by ``locate_pyproject()``. Without a pyproject.toml, or without
    the table, the default config is returned.
    """
    pyproject_path = pyproject_path or locate_pyproject()
    if pyproject_path is None:
        return ListbenchConfig.from_toml({})

    with open(pyproject_path, "rb") as fp:
        table = tomllib.load(fp).get("tool", {}).get("listbench", {})
    return ListbenchConfig.from_toml(table)
