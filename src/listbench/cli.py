"""The ``listbench`` command line interface."""

import argparse
import dataclasses
import logging
import sys
import time
from typing import Any

from listbench import __version__, collect, run
from listbench.config import ListbenchConfig, parse_listbench_config
from listbench.types import TIME_UNITS

_VERSION = f"%(prog)s version {__version__}"
_DEFAULT_SUITE = "listbench.benchmarks"
logger = logging.getLogger("listbench")


class CustomFormatter(argparse.RawDescriptionHelpFormatter):
    def _format_action_invocation(self, action):
        if not action.option_strings:
            (metavar,) = self._metavar_formatter(action, action.dest)(1)
            return metavar
        parts = list(action.option_strings)
        # if the Optional takes a value, format is:
        #    -s, --long ARGS
        if action.nargs != 0:
            default = action.dest.upper()
            parts[-1] += f" {self._format_args(action, default)}"
        return ", ".join(parts)


def _log_level(log_level: str) -> str:
    """
    Attach a stream handler at the given level to the ``listbench`` logger, unless the
    level is NOTSET. Runs as the argparse ``type`` converter, so it validates the level itself.
    """

    if log_level not in ("NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        # argparse catches ValueErrors, and reports them with the __name__ below.
        raise ValueError

    if log_level != "NOTSET":
        logger.setLevel(log_level)
        sh = logging.StreamHandler()
        sh.setFormatter(
            logging.Formatter(fmt="[{levelname:<4} {name}:L{lineno}] {message}", style="{")
        )
        logger.addHandler(sh)
    return log_level


# argparse uses __name__ as the argument value name in error messages.
_log_level.__name__ = "log level"


def _add_selection_args(parser: argparse.ArgumentParser, config: ListbenchConfig) -> None:
    # can be a directory, single file, or module name
    parser.add_argument(
        "benchmarks",
        nargs="?",
        metavar="<benchmarks>",
        default=_DEFAULT_SUITE,
        help="A Python file, directory, or module containing benchmarks, "
        f"defaults to the bundled suite ({_DEFAULT_SUITE}).",
    )
    parser.add_argument(
        "-b",
        "--include",
        metavar="<regex>",
        default=config.include,
        help="Only select benchmarks whose name matches the given regular expression.",
    )
    parser.add_argument(
        "-t",
        "--tag",
        action="append",
        metavar="<tag>",
        dest="tags",
        help="Only select benchmarks marked with one or more given tag(s).",
        default=list(),
    )


def construct_parser(config: ListbenchConfig) -> argparse.ArgumentParser:
    defaults = config.measurement
    parser = argparse.ArgumentParser("listbench", formatter_class=CustomFormatter)
    parser.add_argument("--version", action="version", version=_VERSION)
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        type=_log_level,
        metavar="<level>",
        help="Log level to use for the listbench package, defaults to NOTSET (no logging).",
    )
    subparsers = parser.add_subparsers(
        title="Available commands",
        required=False,
        dest="command",
        metavar="",
    )
    run_parser = subparsers.add_parser(
        "run", help="Run a benchmark workload.", formatter_class=CustomFormatter
    )
    _add_selection_args(run_parser, config)
    run_parser.add_argument(
        "-n",
        "--name",
        type=str,
        default=f"listbench-{time.time_ns()}",
        metavar="<name>",
        help="A name to assign to the benchmark run.",
    )
    run_parser.add_argument(
        "-f",
        "--forks",
        type=int,
        default=defaults.forks,
        metavar="<N>",
        help=f"Number of forked processes per benchmark, default: {defaults.forks} "
        "(0 measures in the current process).",
    )
    run_parser.add_argument(
        "-wi",
        "--warmup-iterations",
        type=int,
        default=defaults.warmup_iterations,
        metavar="<N>",
        help=f"Number of discarded warmup iterations, default: {defaults.warmup_iterations}.",
    )
    run_parser.add_argument(
        "-w",
        "--warmup-time",
        type=float,
        default=defaults.warmup_time,
        metavar="<seconds>",
        help=f"Time budget of each warmup iteration, default: {defaults.warmup_time}.",
    )
    run_parser.add_argument(
        "-i",
        "--iterations",
        type=int,
        default=defaults.iterations,
        metavar="<N>",
        help=f"Number of measurement iterations, default: {defaults.iterations}.",
    )
    run_parser.add_argument(
        "-r",
        "--time",
        type=float,
        default=defaults.time,
        metavar="<seconds>",
        help=f"Time budget of each measurement iteration, default: {defaults.time}.",
    )
    run_parser.add_argument(
        "-tu",
        "--time-unit",
        choices=tuple(TIME_UNITS),
        default=defaults.time_unit,
        metavar="<unit>",
        help=f"Output time unit, one of {', '.join(TIME_UNITS)}, default: {defaults.time_unit}.",
    )
    run_parser.add_argument(
        "--context",
        action="append",
        metavar="<key=value>",
        help="Additional context values giving information about the benchmark run. "
        "Names of builtin providers (cpu, python) are also accepted.",
        default=list(),
    )
    run_parser.add_argument(
        "-o",
        "--output-file",
        metavar="<file>",
        dest="outfile",
        help="File to write results to, in a format chosen by its extension "
        "(json, ndjson, yaml, parquet). Defaults to a table on stdout.",
        default=sys.stdout,
    )

    list_parser = subparsers.add_parser(
        "list", help="List the selected benchmarks.", formatter_class=CustomFormatter
    )
    _add_selection_args(list_parser, config)
    return parser


def main(argv: list[str] | None = None) -> int:
    """The main ``listbench`` CLI entry point."""
    try:
        config = parse_listbench_config()
        parser = construct_parser(config)
        args = parser.parse_args(argv)
        if args.command is None:
            parser.print_help()
            return 1

        benchmarks = collect(args.benchmarks, tags=tuple(args.tags), include=args.include)
        if args.command == "list":
            for bm in benchmarks:
                print(bm.name)
        elif args.command == "run":
            from listbench.context import builtin_providers
            from listbench.reporter import get_reporter_implementation

            context: dict[str, Any] = {}
            for p in config.context:
                context.update(p.instantiate()())

            for val in args.context:
                if val in builtin_providers:
                    context.update(builtin_providers[val]())
                else:
                    try:
                        k, v = val.split("=", 1)
                        context[k] = v
                    except ValueError:
                        raise ValueError("context values need to be of the form <key>=<value>")

            options = dataclasses.replace(
                config.measurement,
                forks=args.forks,
                warmup_iterations=args.warmup_iterations,
                warmup_time=args.warmup_time,
                iterations=args.iterations,
                time=args.time,
                time_unit=args.time_unit,
            )
            result = run(benchmarks, name=args.name, context=context, options=options)

            outfile = args.outfile
            reporter = get_reporter_implementation(outfile)
            reporter.write(result, outfile)
        return 0
    except Exception as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
