"""Helpers for finding and importing the modules that benchmarks are collected from."""

import importlib
import importlib.util
import os
import pkgutil
import sys
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from types import ModuleType
from typing import TypeVar

T = TypeVar("T")


def collapse(_its: Iterable[T | Iterable[T]]) -> Generator[T, None, None]:
    """Flatten an iterable of items and iterables of items by one level."""
    for _it in _its:
        if isinstance(_it, Iterable):
            yield from _it
        else:
            yield _it


def exists_module(name: str | os.PathLike[str]) -> bool:
    """
    Whether ``name`` is the dotted name of an importable module.

    Parent packages of ``name`` are imported to answer this, the module itself is not.
    """
    name = str(name)
    if name in sys.modules:
        return True
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        # a parent package is missing, or the name is not a valid module name.
        return False


def import_file_as_module(file: str | os.PathLike[str]) -> ModuleType:
    """
    Import a Python source file as a module named after its path.

    A file that is already imported, under any module name, is not executed a
    second time, since its benchmarks would otherwise be collected twice.

    Raises
    ------
    ValueError
        If ``file`` is not a Python source file.
    ImportError
        If no loader could be created for the file.
    """
    path = Path(file)
    if path.suffix != ".py" or not path.is_file():
        raise ValueError(f"path {str(file)!r} is not a Python file")

    resolved = path.resolve()
    for module in list(sys.modules.values()):
        origin = getattr(module, "__file__", None)
        if origin and Path(origin).resolve() == resolved:
            return module

    stem = path.with_suffix("")
    modname = ".".join(stem.parts[1:] if stem.is_absolute() else stem.parts)
    spec = importlib.util.spec_from_file_location(modname, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load {str(file)!r} as a module")

    module = importlib.util.module_from_spec(spec)
    sys.modules[modname] = module
    spec.loader.exec_module(module)
    return module


def import_modules(name: str) -> list[ModuleType]:
    """
    Import a module by name. If the module is a package, its submodules
    are imported as well, and returned after the package itself.
    """
    module = importlib.import_module(name)
    modules = [module]
    if hasattr(module, "__path__"):
        for info in pkgutil.walk_packages(module.__path__, prefix=module.__name__ + "."):
            modules.append(importlib.import_module(info.name))
    return modules


def all_python_files(directory: str | os.PathLike[str]) -> list[Path]:
    """All Python files below ``directory`` in sorted order, skipping ``__pycache__``."""
    return sorted(p for p in Path(directory).rglob("*.py") if "__pycache__" not in p.parts)


def qualname(fn: Callable) -> str:
    """The fully qualified name of a function, e.g. ``mypackage.module.func``."""
    module = getattr(fn, "__module__", None)
    if not module:
        return fn.__qualname__
    return f"{module}.{fn.__qualname__}"
