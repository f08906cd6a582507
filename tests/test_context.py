import platform

import pytest

from listbench.context import CPUInfo, PythonInfo, builtin_providers


def test_cpu_info_provider() -> None:
    """Tests the CPU resources recorded for a run, along with some sanity checks."""
    pytest.importorskip("psutil")

    ctx = CPUInfo()()["cpu"]
    assert ctx["architecture"] == platform.machine()
    assert 1 <= ctx["usable_cpus"] <= ctx["logical_cpus"]
    assert isinstance(ctx["frequency_mhz"], float)
    assert len(ctx["load_average"]) == 3
    assert ctx["available_memory_mb"] > 0


def test_python_info_provider() -> None:
    """Tests Python info, along with an example of Python package version scraping."""
    packages = ["rich", "pytest", "surely-not-installed-package"]
    p = PythonInfo(packages=packages)
    ctx = p()["python"]

    for k in ["version", "implementation", "packages", "gil_enabled"]:
        assert k in ctx

    assert ctx["implementation"] == platform.python_implementation()
    assert list(ctx["packages"].keys()) == packages
    assert ctx["packages"]["rich"] != ""
    assert ctx["packages"]["surely-not-installed-package"] == ""


def test_builtin_providers() -> None:
    assert set(builtin_providers) == {"cpu", "python"}
