"""A harness for comparing single-element sequence constructors in Python."""

from .core import benchmark, parametrize, product
from .fixtures import ConfigurationError, Fixture
from .listof import EMPTY_LIST, listof, listof_vararg
from .measure import Blackhole
from .runner import collect, run
from .types import Benchmark, BenchmarkResult, MeasurementOptions

__version__ = "0.1.0"
