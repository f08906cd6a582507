import json
import os
from typing import Any

from rich.console import Console
from rich.table import Table

from listbench.types import BenchmarkReporter, BenchmarkResult

_MISSING = "-----"
_STDOUT = "-"


def format_score(result: dict[str, Any], key: str = "score") -> str:
    if result.get("error_occurred", False):
        errmsg = result.get("error_message", "<unknown>")
        return "[red]ERROR: [/red]" + errmsg
    if key not in result:
        return _MISSING
    return f"{result[key]:.3f}"


class ConsoleReporter(BenchmarkReporter):
    """
    Displays benchmark results in the console as a rich-text table, with one row
    per benchmark configuration, similar to the summary printed by JMH.
    """

    def __init__(self, *args, **kwargs):
        """
        Keyword arguments are passed on to ``rich.console.Console``, e.g. ``width``.
        """
        super().__init__()
        self.console = Console(**kwargs)

    def read(self, path: str | os.PathLike[str], **kwargs: Any) -> list[BenchmarkResult]:
        raise NotImplementedError

    def write(
        self,
        result: BenchmarkResult,
        path: str | os.PathLike[str] = _STDOUT,
        **options: Any,
    ) -> None:
        """
        Display a benchmark result in the console as a rich-text table.

        Context values are printed as JSON directly above the table.

        Parameters
        ----------
        result: BenchmarkResult
            The benchmark result to display.
        path: str | os.PathLike[str]
            For compatibility with the ``BenchmarkReporter`` protocol, unused.
        options: Any
            Unused.
        """
        del path, options
        t = Table(title=result.run)
        for column in ("Benchmark", "Mode", "Cnt", "Score", "Stdev", "Units", "Parameters"):
            numeric = column in ("Cnt", "Score", "Stdev")
            t.add_column(column, justify="right" if numeric else "left")

        if result.context:
            self.console.print("Context values:")
            self.console.print_json(json.dumps(result.context))

        for bm in result.benchmarks:
            t.add_row(
                bm["name"],
                bm.get("mode", ""),
                str(bm.get("samples", _MISSING)),
                format_score(bm),
                "" if bm.get("error_occurred") else format_score(bm, "stdev"),
                bm.get("unit", "") + "/op",
                json.dumps(bm.get("parameters", {})),
            )

        self.console.print(t, overflow="ellipsis")
