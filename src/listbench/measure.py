"""
Measurement of average benchmark time per operation.

A configuration is measured in one or more *trials*, each running in a freshly
forked process by default. A trial sets up the benchmark's fixtures, runs a number
of discarded warmup iterations, then a number of recorded measurement iterations.
Each iteration invokes the benchmark repeatedly until its time budget is used up,
and yields the average wall time per invocation in nanoseconds.
"""

import logging
import multiprocessing
import time
from collections.abc import Callable
from functools import partial
from typing import Any

from listbench.fixtures import Fixture
from listbench.types import TIME_UNITS, Benchmark, MeasurementOptions, State

logger = logging.getLogger("listbench.measure")

BLACKHOLE = "blackhole"
"""Name of the benchmark parameter receiving the trial's ``Blackhole``."""

_MAX_BATCH = 1 << 16


class TrialError(RuntimeError):
    """Raised when a forked trial process exits without reporting a result."""


class Blackhole:
    """
    A sink for values computed in a benchmark.

    Consuming a value keeps it reachable from the blackhole, so that no benchmark
    result can be discarded as dead code by an optimizing runtime.
    """

    __slots__ = ("last",)

    def __init__(self) -> None:
        self.last: Any = None

    def consume(self, obj: Any) -> None:
        self.last = obj


def convert(value_ns: float, unit: str) -> float:
    """Convert a time in nanoseconds to the given unit."""
    return value_ns / TIME_UNITS[unit]


def measure_iteration(fn: Callable[[], Any], blackhole: Blackhole, budget_ns: int) -> float:
    """
    Run ``fn`` until ``budget_ns`` nanoseconds have passed, and return the average
    time per call in nanoseconds.

    Calls are made in batches of doubling size to keep the clock out of the
    measured loop, with each batch sized to end near the budget. At least one
    call is always made.
    """
    consume = blackhole.consume
    ops, batch = 0, 1
    start = time.perf_counter_ns()
    while True:
        for _ in range(batch):
            consume(fn())
        ops += batch
        elapsed = time.perf_counter_ns() - start
        if elapsed >= budget_ns:
            return elapsed / ops
        batch = min(batch * 2, _MAX_BATCH)
        if elapsed > 0:
            # the next batch must fit into the remaining budget at the current rate.
            batch = max(1, min(batch, (budget_ns - elapsed) * ops // elapsed))


def run_trial(
    benchmark: Benchmark,
    params: dict[str, Any],
    options: MeasurementOptions,
    state: State,
) -> list[float]:
    """
    Measure a single trial of a benchmark configuration in the current process.

    Returns
    -------
    list[float]
        The recorded per-iteration averages, in nanoseconds per operation.
    """
    for v in params.values():
        if isinstance(v, Fixture):
            v.setup()

    blackhole = Blackhole()
    call_params = dict(params)
    if BLACKHOLE in benchmark.interface.names:
        call_params[BLACKHOLE] = blackhole
    fn = partial(benchmark.fn, **call_params)

    benchmark.setUp(state, params)
    try:
        warmup_ns = int(options.warmup_time * 1e9)
        for i in range(options.warmup_iterations):
            score = measure_iteration(fn, blackhole, warmup_ns)
            logger.debug(f"{benchmark.name}: warmup iteration {i + 1}: {score:.3f} ns/op")

        samples: list[float] = []
        measurement_ns = int(options.time * 1e9)
        for i in range(options.iterations):
            score = measure_iteration(fn, blackhole, measurement_ns)
            logger.debug(f"{benchmark.name}: iteration {i + 1}: {score:.3f} ns/op")
            samples.append(score)
    finally:
        benchmark.tearDown(state, params)
    return samples


def _trial_worker(benchmark, params, options, state, conn) -> None:
    try:
        conn.send(("ok", run_trial(benchmark, params, options, state)))
    except Exception as e:
        try:
            conn.send(("error", e))
        except Exception:
            # the exception itself could not be pickled.
            conn.send(("error", TrialError(f"{type(e).__name__}: {e}")))
    finally:
        conn.close()


def run_forked(
    benchmark: Benchmark,
    params: dict[str, Any],
    options: MeasurementOptions,
    state: State,
) -> list[float]:
    """
    Measure a single trial in a freshly forked child process.

    The benchmark and its parameters are inherited by the child, so they do not
    need to be picklable. Exceptions raised in the child are raised again here.
    """
    try:
        ctx = multiprocessing.get_context("fork")
    except ValueError:
        logger.warning("fork start method is unavailable, measuring trial in-process")
        return run_trial(benchmark, params, options, state)

    recv, send = ctx.Pipe(duplex=False)
    proc = ctx.Process(
        target=_trial_worker,
        args=(benchmark, params, options, state, send),
        daemon=True,
    )
    proc.start()
    # the child holds the only open write end from here on.
    send.close()
    try:
        status, payload = recv.recv()
    except EOFError:
        proc.join()
        raise TrialError(
            f"trial process for benchmark {benchmark.name!r} exited "
            f"with code {proc.exitcode} before reporting a result"
        ) from None
    finally:
        recv.close()
        proc.join()

    if status == "error":
        raise payload
    return payload


def measure(
    benchmark: Benchmark,
    params: dict[str, Any],
    options: MeasurementOptions,
    state: State,
) -> list[list[float]]:
    """
    Measure all trials of a benchmark configuration, one after another.

    Returns one list of samples per trial. The first failing trial aborts the
    configuration, and its exception propagates.
    """
    trials = []
    for n in range(options.trials):
        if options.forks == 0:
            trials.append(run_trial(benchmark, params, options, state))
            continue
        logger.debug(f"{benchmark.name}: starting fork {n + 1} of {options.forks}")
        trials.append(run_forked(benchmark, params, options, state))
    return trials
