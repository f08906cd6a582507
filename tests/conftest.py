import logging
from pathlib import Path

import pytest

from listbench import MeasurementOptions

HERE = Path(__file__).parent

logger = logging.getLogger("listbench")
logger.setLevel(logging.DEBUG)


@pytest.fixture(scope="session")
def testfolder() -> str:
    """A test directory for benchmark collection."""
    return str(HERE / "benchmarks")


@pytest.fixture
def quick() -> MeasurementOptions:
    """A measurement protocol with tiny budgets, measuring in-process."""
    return MeasurementOptions(
        forks=0, warmup_iterations=1, warmup_time=0.0, iterations=3, time=0.001
    )
