"""
Utilities for collecting context key-value pairs as metadata in benchmark runs.

Measured times depend heavily on the interpreter executing the benchmarks
(e.g. CPython's specializing interpreter vs. PyPy's tracing JIT), so results
are only comparable between runs with matching context.
"""

import platform
import sys
from collections.abc import Callable, Sequence
from typing import Any

Context = dict[str, Any]
"""A mapping of context keys to values."""

ContextProvider = Callable[[], Context]
"""A function providing a dictionary of context values."""


class PythonInfo:
    """
    A context helper returning interpreter information and version info for
    requested installed packages.

    If a requested package is not installed, an empty string is returned instead.

    Parameters
    ----------
    packages: Sequence[str]
        Names of the requested packages under which they exist in the current environment.
        For packages installed through ``pip``, this equals the PyPI package name.
    """

    key = "python"

    def __init__(self, packages: Sequence[str] = ()):
        self.packages = tuple(packages)

    def __call__(self) -> Context:
        buildno, buildtime = platform.python_build()
        # free-threaded builds (PEP 703) can run with the GIL disabled.
        gil_check = getattr(sys, "_is_gil_enabled", None)
        return {
            self.key: {
                "version": platform.python_version(),
                "implementation": platform.python_implementation(),
                "buildno": buildno,
                "buildtime": buildtime,
                "compiler": platform.python_compiler(),
                "gil_enabled": gil_check() if gil_check is not None else True,
                "packages": {pkg: _installed_version(pkg) for pkg in self.packages},
            }
        }


def _installed_version(package: str) -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version(package)
    except PackageNotFoundError:
        return ""


class CPUInfo:
    """
    A context helper describing the CPU resources available to the benchmark process.

    Timings of single-element constructors are in the nanosecond range, and
    shift with clock speed and competing load. The current clock frequency,
    the number of CPUs the process may run on, and the system load averages
    are therefore recorded when the run starts. Needs ``psutil``.
    """

    key = "cpu"

    def __call__(self) -> Context:
        try:
            import psutil
        except ModuleNotFoundError:
            raise ModuleNotFoundError(
                "the cpu context provider needs `psutil` installed, "
                "run `pip install listbench[context]`"
            ) from None

        logical = psutil.cpu_count()
        # cpu_affinity() is not available on macOS.
        affinity = getattr(psutil.Process(), "cpu_affinity", None)
        return {
            self.key: {
                "architecture": platform.machine(),
                "system": platform.system(),
                "logical_cpus": logical,
                "physical_cpus": psutil.cpu_count(logical=False),
                "usable_cpus": len(affinity()) if affinity is not None else logical,
                "frequency_mhz": _current_frequency(psutil),
                "load_average": list(psutil.getloadavg()),
                "available_memory_mb": psutil.virtual_memory().available / 1e6,
            }
        }


def _current_frequency(psutil: Any) -> float:
    try:
        freq = psutil.cpu_freq()
    except (AttributeError, RuntimeError, NotImplementedError, FileNotFoundError):
        # unreadable on some ARM boards and virtual machines.
        return 0.0
    return float(freq.current) if freq is not None else 0.0


builtin_providers: dict[str, ContextProvider] = {
    "cpu": CPUInfo(),
    "python": PythonInfo(),
}
