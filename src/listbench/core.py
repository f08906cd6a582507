"""Decorators turning plain functions into benchmarks and benchmark families."""

from __future__ import annotations

import inspect
import itertools
import types
import warnings
from functools import partial, update_wrapper
from typing import Any, Callable, Iterable, Union, get_args, get_origin, overload

from listbench.fixtures import Fixture
from listbench.types import Benchmark, NoOp


def _accepted_types(annotation: Any) -> type | tuple[type, ...] | None:
    """The runtime types admitted by an annotation, or None if it cannot be checked."""
    if annotation in (inspect.Parameter.empty, Any) or isinstance(annotation, str):
        # unannotated, or a postponed annotation that is not evaluated here.
        return None
    origin = get_origin(annotation)
    if origin is types.UnionType or origin is Union:
        return tuple(get_origin(a) or a for a in get_args(annotation))
    return origin or annotation


def _check_against_interface(params: dict[str, Any], fun: Callable) -> None:
    signature = inspect.signature(fun).parameters
    for name, value in params.items():
        if name not in signature:
            raise TypeError(
                f"benchmark {fun.__name__}() got an unexpected keyword argument {name!r}"
            )
        accepted = _accepted_types(signature[name].annotation)
        if accepted is not None and not isinstance(value, accepted):
            raise TypeError(
                f"benchmark {fun.__name__}(): expected type {signature[name].annotation}, "
                f"got type {type(value)} for parametrized argument {name!r}"
            )


def _default_namegen(fn: Callable, **kwargs: Any) -> str:
    parts = []
    for k, v in kwargs.items():
        if isinstance(v, Fixture):
            # name fixtures by their own parameters, e.g. list_first_variant=default.
            parts.extend(f"{fk}={fv}" for fk, fv in v.params().items())
        else:
            parts.append(f"{k}={v}")
    return fn.__name__ + "_" + "_".join(parts)


def _make_family(
    fn: Callable,
    parameters: Iterable[dict[str, Any]],
    setUp: Callable[..., None],
    tearDown: Callable[..., None],
    namegen: Callable[..., str],
    tags: tuple[str, ...],
) -> list[Benchmark]:
    family: list[Benchmark] = []
    for params in parameters:
        _check_against_interface(params, fn)
        name = namegen(fn, **params)
        if any(bm.name == name for bm in family):
            warnings.warn(
                f"benchmark {fn.__name__}() has duplicate configuration name {name!r}, "
                "they cannot be told apart in results"
            )
        bound = update_wrapper(partial(fn, **params), fn)
        family.append(Benchmark(bound, name=name, setUp=setUp, tearDown=tearDown, tags=tags))
    return family


# @benchmark
# def vararg_single() -> Sequence[int]:
#     return listof_vararg(1)
@overload
def benchmark(
    func: None = None,
    name: str | None = None,
    setUp: Callable[..., None] = NoOp,
    tearDown: Callable[..., None] = NoOp,
    tags: tuple[str, ...] = (),
) -> Callable[[Callable], Benchmark]: ...


# @benchmark(name="vararg_single", tags=("creation",))
# def single() -> Sequence[int]:
#     return listof_vararg(1)
@overload
def benchmark(
    func: Callable[..., Any],
    name: str | None = None,
    setUp: Callable[..., None] = NoOp,
    tearDown: Callable[..., None] = NoOp,
    tags: tuple[str, ...] = (),
) -> Benchmark: ...


def benchmark(
    func: Callable[..., Any] | None = None,
    name: str | None = None,
    setUp: Callable[..., None] = NoOp,
    tearDown: Callable[..., None] = NoOp,
    tags: tuple[str, ...] = (),
) -> Benchmark | Callable[[Callable], Benchmark]:
    """
    Turn a function into a benchmark, with or without decorator arguments.

    The function is called over and over during measurement, and whatever it
    returns goes into the trial's blackhole. Functions producing several values
    per call can take a ``blackhole`` parameter and consume them one by one.

    Parameters
    ----------
    func: Callable[..., Any] | None
        Filled in by Python when the decorator is used bare, as ``@benchmark``.
    name: str | None
        Name of the benchmark in results, the function name by default.
    setUp: Callable[..., None]
        Called with the benchmark state and parameters at the start of every trial.
    tearDown: Callable[..., None]
        Called with the benchmark state and parameters at the end of every trial.
    tags: tuple[str, ...]
        Tags to select the benchmark by, e.g. with ``listbench run -t creation``.
    """

    def decorator(fun: Callable) -> Benchmark:
        return Benchmark(fun, name=name or "", setUp=setUp, tearDown=tearDown, tags=tags)

    return decorator(func) if func is not None else decorator


def parametrize(
    parameters: Iterable[dict[str, Any]],
    setUp: Callable[..., None] = NoOp,
    tearDown: Callable[..., None] = NoOp,
    namegen: Callable[..., str] = _default_namegen,
    tags: tuple[str, ...] = (),
) -> Callable[[Callable], list[Benchmark]]:
    """
    Turn a function into one benchmark per given set of keyword arguments.

    Benchmarks are named by ``namegen(fn, **params)``. By default, that is the
    function name followed by ``key=value`` pairs joined by underscores, where
    a fixture argument contributes its own ``params()`` instead, as in
    ``list_first_variant=default``.

    Raises
    ------
    TypeError
        If a parameter is not an argument of the function, or does not match its
        type annotation.
    """

    def decorator(fn: Callable) -> list[Benchmark]:
        return _make_family(fn, parameters, setUp, tearDown, namegen, tags)

    return decorator


def product(
    setUp: Callable[..., None] = NoOp,
    tearDown: Callable[..., None] = NoOp,
    namegen: Callable[..., str] = _default_namegen,
    tags: tuple[str, ...] = (),
    **iterables: Iterable,
) -> Callable[[Callable], list[Benchmark]]:
    """
    Like ``parametrize()``, over every combination of values drawn from ``iterables``.

    Examples
    --------
    >>> @product(count=(1, 10), state=[ListState("default"), ListState("vararg")])
    ... def repeated(count: int, state: ListState) -> int: ...
    >>> [bm.name for bm in repeated]
    ['repeated_count=1_variant=default', 'repeated_count=1_variant=vararg',
     'repeated_count=10_variant=default', 'repeated_count=10_variant=vararg']
    """

    def decorator(fn: Callable) -> list[Benchmark]:
        names = list(iterables)
        combinations = itertools.product(*iterables.values())
        parameters = (dict(zip(names, values)) for values in combinations)
        return _make_family(fn, parameters, setUp, tearDown, namegen, tags)

    return decorator
