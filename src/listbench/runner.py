"""Collection and execution of benchmark workloads."""

import collections
import inspect
import logging
import os
import platform
import re
import statistics
import time
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from listbench.context import Context, ContextProvider
from listbench.measure import BLACKHOLE, convert, measure
from listbench.types import Benchmark, BenchmarkResult, MeasurementOptions, State
from listbench.util import (
    all_python_files,
    collapse,
    exists_module,
    import_file_as_module,
    import_modules,
    qualname,
)

logger = logging.getLogger("listbench.runner")


def jsonify(
    params: dict[str, Any], repr_hooks: dict[type, Callable] | None = None
) -> dict[str, Any]:
    """
    Convert the parameters of a benchmark configuration into a JSON object.

    Numbers, strings, booleans and None are kept. Fixtures and other objects with a
    ``to_json()`` method are replaced by its result, containers become lists, and
    anything else is replaced by its ``repr()``. ``repr_hooks`` maps types to custom converters,
    which take precedence.
    """
    repr_hooks = repr_hooks or {}
    natives = (float, int, str, bool, complex)
    json_params: dict[str, Any] = {}

    def _jsonify(val):
        vtype = type(val)
        if vtype in repr_hooks:
            return repr_hooks[vtype](val)
        if val is None or isinstance(val, natives):
            return val
        elif hasattr(val, "to_json"):
            try:
                return val.to_json()
            except TypeError:
                # to_json() needs arguments.
                pass

        return repr(val)

    for k, v in params.items():
        if isinstance(v, tuple | list | set | frozenset):
            json_params[k] = list(map(_jsonify, v))
        elif isinstance(v, dict):
            json_params[k] = jsonify(v, repr_hooks)
        else:
            json_params[k] = _jsonify(v)
    return json_params


def collect(
    path_or_module: str | os.PathLike[str],
    tags: tuple[str, ...] = (),
    include: str | None = None,
) -> list[Benchmark]:
    """
    Discover benchmarks in a module, package, or source file.

    Parameters
    ----------
    path_or_module: str | os.PathLike[str]
        A Python file, a directory searched for Python files recursively, or the
        dotted name of a module. For a package, all of its submodules are searched.
    tags: tuple[str, ...]
        If given, only benchmarks carrying at least one of these tags are collected.
    include: str | None
        A regular expression selecting benchmarks by name. Only benchmarks whose name
        contains a match are collected.

    Raises
    ------
    ValueError
        If the given path is not a Python file, directory, or module name.
    """
    benchmarks: list[Benchmark] = []
    ppath = Path(path_or_module)
    if ppath.is_dir():
        for py in all_python_files(ppath):
            benchmarks.extend(collect(py, tags, include))
        return benchmarks
    elif ppath.is_file():
        logger.debug(f"Collecting benchmarks from file {ppath}.")
        modules = [import_file_as_module(path_or_module)]
    elif exists_module(path_or_module):
        logger.debug(f"Collecting benchmarks from module {path_or_module}.")
        modules = import_modules(str(path_or_module))
    else:
        raise ValueError(
            f"expected a module name, Python file, or directory, got {str(path_or_module)!r}"
        )

    pattern = re.compile(include) if include else None

    def _select(bm: Benchmark) -> bool:
        if tags and not set(tags) & set(bm.tags):
            return False
        return pattern is None or pattern.search(bm.name) is not None

    seen: set[int] = set()
    for module in modules:
        for k, v in module.__dict__.items():
            if k.startswith("__") and k.endswith("__"):
                # dunder names are ignored.
                continue
            candidates = v if isinstance(v, list | tuple | set | frozenset) else (v,)
            for bm in candidates:
                if isinstance(bm, Benchmark) and id(bm) not in seen and _select(bm):
                    seen.add(id(bm))
                    benchmarks.append(bm)
    return benchmarks


def _summarize(res: dict[str, Any], trials: list[list[float]], unit: str) -> None:
    samples = [s for trial in trials for s in trial]
    res["samples"] = len(samples)
    res["score"] = convert(statistics.fmean(samples), unit)
    res["stdev"] = convert(statistics.stdev(samples), unit) if len(samples) > 1 else 0.0
    res["min"] = convert(min(samples), unit)
    res["max"] = convert(max(samples), unit)
    res["raw_samples"] = [[convert(s, unit) for s in trial] for trial in trials]


def run(
    benchmarks: Benchmark | Iterable[Benchmark | Iterable[Benchmark]],
    name: str | None = None,
    params: dict[str, Any] | None = None,
    context: Context | Iterable[ContextProvider] = (),
    jsonifier: Callable[[dict[str, Any]], dict[str, Any]] = jsonify,
    options: MeasurementOptions | None = None,
) -> BenchmarkResult:
    """
    Measure a previously collected benchmark workload.

    Every benchmark configuration is measured according to ``options``. A
    configuration failing in any of its trials (for example, by raising a
    ``ConfigurationError`` during fixture setup) is recorded as an error,
    and the run continues with the next configuration.

    Parameters
    ----------
    benchmarks: Benchmark | Iterable[Benchmark | Iterable[Benchmark]]
        The benchmarks to measure, e.g. as returned by ``collect()``. Families may be
        passed as nested lists.
    name: str | None
        The run name. Generated from the host name and a random suffix if not given.
    params: dict[str, Any] | None
        Values for benchmark arguments that are neither bound by parametrization nor
        defaulted. Each benchmark takes the subset matching its argument names.
    context: Context | Iterable[ContextProvider]
        A ready context dict, or providers whose values are merged into one. Timings
        strongly depend on the interpreter, so recording ``PythonInfo`` is advisable.
    jsonifier: Callable[[dict[str, Any]], dict[str, Any]]
        A function constructing a JSON representation from the input parameters.
    options: MeasurementOptions | None
        The forking, warmup, and measurement protocol. Defaults to ``MeasurementOptions()``.

    Returns
    -------
    BenchmarkResult
        The run name, context, start timestamp, and one record per benchmark configuration.

    Raises
    ------
    ValueError
        If a benchmark has an unresolved parameter, or if context providers
        return duplicate keys.
    """
    _run = name or "listbench-" + platform.node() + "-" + uuid.uuid1().hex[:8]
    options = options or MeasurementOptions()

    if isinstance(context, dict):
        ctx = context
    else:
        ctx = dict()
        for provider in context:
            val = provider()
            duplicates = set(ctx.keys()) & set(val.keys())
            if duplicates:
                dupe, *_ = duplicates
                raise ValueError(f"got multiple values for context key {dupe!r}")
            ctx.update(val)

    if isinstance(benchmarks, Benchmark):
        benchmarks = [benchmarks]
    bms: list[Benchmark] = list(collapse(benchmarks))

    dparams = params or {}
    family_sizes = collections.Counter(bm.interface.funcname for bm in bms)
    family_indices: dict[str, int] = collections.defaultdict(int)

    results: list[dict[str, Any]] = []
    timestamp = int(time.time())

    for benchmark in bms:
        bm_family = benchmark.interface.funcname
        state = State(
            name=benchmark.name,
            family=bm_family,
            family_size=family_sizes[bm_family],
            family_index=family_indices[bm_family],
        )
        family_indices[bm_family] += 1

        # defaults from the signature, overridden by run parameters.
        bmparams = {
            name: val
            for name, _, val in benchmark.interface.variables
            if val is not inspect.Parameter.empty
        }
        bmparams |= {k: v for k, v in dparams.items() if k in benchmark.interface.names}
        bmparams.pop(BLACKHOLE, None)
        missing = [n for n in benchmark.interface.names if n not in bmparams and n != BLACKHOLE]
        if missing:
            raise ValueError(
                f"missing value for required parameter {missing[0]!r} "
                f"of benchmark {benchmark.name!r}"
            )

        res: dict[str, Any] = {
            "name": benchmark.name,
            "function": qualname(benchmark.fn),
            "description": benchmark.fn.__doc__ or "",
            "mode": "avgt",
            "forks": options.forks,
            "warmup_iterations": options.warmup_iterations,
            "iterations": options.iterations,
            "unit": options.time_unit,
            "error_occurred": False,
            "error_message": "",
            "parameters": jsonifier(bmparams),
        }
        logger.info(f"Measuring benchmark {benchmark.name!r}.")
        try:
            trials = measure(benchmark, bmparams, options, state)
        except Exception as e:
            logger.error(f"benchmark {benchmark.name!r} failed: {e}")
            res["error_occurred"] = True
            res["error_message"] = f"{type(e).__name__}: {e}"
        else:
            _summarize(res, trials, options.time_unit)
        results.append(res)

    return BenchmarkResult(
        run=_run,
        context=ctx,
        benchmarks=results,
        timestamp=timestamp,
    )
