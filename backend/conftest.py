"""
Shared fixtures for the subway map tests.

The map registry and the status simulator are process-wide; every test gets
pristine maps so status mutations never leak between tests.
"""
import random

import pytest

from subwaymap.api import routes
from subwaymap.catalog.registry import reset_map_registry
from subwaymap.simulation.status import StatusSimulator


@pytest.fixture(autouse=True)
def fresh_registry():
    reset_map_registry()
    routes.reset_simulator(StatusSimulator(seed=1234))
    yield
    reset_map_registry()
    routes.reset_simulator()


@pytest.fixture
def rng():
    return random.Random(42)
