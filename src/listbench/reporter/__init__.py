"""Reporters showing benchmark results as a console table, or storing them in result files."""

import os
import sys
from typing import IO

from listbench.types import BenchmarkReporter

from .console import ConsoleReporter
from .file import FileReporter, get_protocol

REMOTE_PROTOCOLS = frozenset({"s3", "gs", "gcs", "az", "abfs", "memory"})
"""Storage protocols that result files can be written to through ``fsspec``."""


def get_reporter_implementation(dest: str | os.PathLike[str] | IO) -> BenchmarkReporter:
    """
    Pick the reporter for an output destination.

    ``sys.stdout`` gets a console table, local paths and URIs of a
    ``REMOTE_PROTOCOLS`` storage get a result file.
    """
    if dest is sys.stdout:
        return ConsoleReporter()
    protocol = get_protocol(dest)
    if protocol != "file" and protocol not in REMOTE_PROTOCOLS:
        raise ValueError(f"cannot store benchmark results under {protocol!r} URIs")
    return FileReporter()
