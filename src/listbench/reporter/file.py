"""
Result files.

A JSON file holds one whole ``BenchmarkResult``. The line-oriented and tabular
formats (ndjson, yaml, parquet) hold one row per benchmark configuration, with
the score, spread, unit and sample counts of that configuration next to the
run name, timestamp and context, much like JMH's ``-rf json`` output.

Files are opened locally, or through ``fsspec`` for remote URIs such as
``s3://bucket/results.ndjson``.
"""

import json
import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

from listbench.types import BenchmarkReporter, BenchmarkResult


def get_protocol(url: str | os.PathLike[str]) -> str:
    """Returns the protocol of a URI like ``s3://bucket/run.json``, or ``file`` for a local path."""
    match = re.match(r"^([a-z][a-z0-9+.-]*)(?:://|::)", str(url))
    return match.group(1) if match else "file"


def _dump_json(result: BenchmarkResult, fd: IO) -> None:
    json.dump(result.to_json(), fd)


def _load_json(fd: IO) -> list[BenchmarkResult]:
    return [BenchmarkResult.from_json(json.load(fd))]


def _dump_ndjson(result: BenchmarkResult, fd: IO) -> None:
    for row in result.to_records():
        fd.write(json.dumps(row) + "\n")


def _load_ndjson(fd: IO) -> list[BenchmarkResult]:
    return BenchmarkResult.from_records([json.loads(line) for line in fd if line.strip()])


def _dump_yaml(result: BenchmarkResult, fd: IO) -> None:
    import yaml

    yaml.safe_dump(result.to_records(), fd, sort_keys=False)


def _load_yaml(fd: IO) -> list[BenchmarkResult]:
    import yaml

    return BenchmarkResult.from_records(yaml.safe_load(fd) or [])


def _dump_parquet(result: BenchmarkResult, fd: IO) -> None:
    import pyarrow
    import pyarrow.parquet

    rows = result.to_records()
    # failed configurations lack the score columns, which become nulls here.
    columns = list(dict.fromkeys(k for row in rows for k in row))
    table = pyarrow.Table.from_pylist([{c: row.get(c) for c in columns} for row in rows])
    pyarrow.parquet.write_table(table, fd)


def _load_parquet(fd: IO) -> list[BenchmarkResult]:
    import pyarrow.parquet

    return BenchmarkResult.from_records(pyarrow.parquet.read_table(fd).to_pylist())


@dataclass(frozen=True)
class ResultFormat:
    binary: bool
    dump: Callable[[BenchmarkResult, IO], None]
    load: Callable[[IO], list[BenchmarkResult]]


_json = ResultFormat(binary=False, dump=_dump_json, load=_load_json)
_ndjson = ResultFormat(binary=False, dump=_dump_ndjson, load=_load_ndjson)
_yaml = ResultFormat(binary=False, dump=_dump_yaml, load=_load_yaml)
_parquet = ResultFormat(binary=True, dump=_dump_parquet, load=_load_parquet)

FORMATS: dict[str, ResultFormat] = {
    ".json": _json,
    ".ndjson": _ndjson,
    ".yaml": _yaml,
    ".yml": _yaml,
    ".parquet": _parquet,
    ".pq": _parquet,
}
"""Result file formats by file extension."""


def result_format(path: str | os.PathLike[str]) -> ResultFormat:
    ext = Path(str(path)).suffix
    try:
        return FORMATS[ext]
    except KeyError:
        raise ValueError(f"unsupported benchmark file format {ext!r}") from None


def open_result_file(path: str | os.PathLike[str], mode: str) -> Any:
    """Open a local path, or a remote URI through ``fsspec``, as a context manager."""
    if get_protocol(path) == "file":
        return open(path, mode)
    try:
        import fsspec
    except ModuleNotFoundError:
        raise ModuleNotFoundError(
            f"accessing {str(path)!r} needs `fsspec` installed, "
            "run `pip install listbench[fsspec]`"
        ) from None
    return fsspec.open(str(path), mode)


class FileReporter(BenchmarkReporter):
    """
    Reads and writes result files. The file format is chosen by extension, one of
    ``.json``, ``.ndjson``, ``.yaml`` (``.yml``) and ``.parquet`` (``.pq``).

    YAML needs ``pyyaml``, Parquet needs ``pyarrow``.
    """

    def read(self, path: str | os.PathLike[str], **kwargs: Any) -> list[BenchmarkResult]:
        """
        Read all benchmark results stored in a file.

        Raises
        ------
        ValueError
            If the file extension is not a known result format.
        """
        del kwargs
        fmt = result_format(path)
        with open_result_file(path, "rb" if fmt.binary else "r") as fd:
            return fmt.load(fd)

    def write(self, result: BenchmarkResult, path: str | os.PathLike[str], **kwargs: Any) -> None:
        """
        Write a benchmark result to a file, replacing any previous contents.

        Raises
        ------
        ValueError
            If the file extension is not a known result format.
        """
        del kwargs
        fmt = result_format(path)
        with open_result_file(path, "wb" if fmt.binary else "w") as fd:
            fmt.dump(result, fd)
