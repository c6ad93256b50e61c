"""
Shared fixtures for the jscesk test suite
"""

import io
import os
import sys

import pytest

# Add grandparent directory to path for imports (to find jscesk package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from jscesk.address import Allocator
from jscesk.config import MachineConfig
from jscesk.environment import Environment
from jscesk.machine import Machine
from jscesk.store import Store


EXAMPLES_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))),
    "tests", "examples",
)


@pytest.fixture
def allocator():
    return Allocator()


@pytest.fixture
def frame(allocator):
    return Environment(allocator)


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def machine(out):
    return Machine(MachineConfig(), out=out)


@pytest.fixture
def run(machine):
    """Run source text on a fresh machine and return the RunResult"""
    return machine.run


@pytest.fixture
def example_source():
    def _load(name):
        with open(os.path.join(EXAMPLES_DIR, name), encoding="utf-8") as f:
            return f.read()
    return _load
