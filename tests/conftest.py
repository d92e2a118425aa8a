"""
Shared test fixtures for the tapestack test suite.
"""

import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tapestack.alphabet import ACCEPT, Command, Direction, Symbol, Transition  # noqa: E402
from tapestack.table import BUSY_BEAVER_3  # noqa: E402
from tapestack.turing_machine import Machine  # noqa: E402


def same_symbol_state(direction, to_state):
    """A state that rewrites whatever it reads and moves."""
    return Transition(
        Command(Symbol.ZERO, direction, to_state),
        Command(Symbol.ONE, direction, to_state),
    )


@pytest.fixture
def busy_beaver():
    """3-state busy beaver loaded with a single blank cell."""
    return Machine(BUSY_BEAVER_3).set_input([Symbol.ZERO])


@pytest.fixture
def self_loop():
    """Never leaves state 1 and never moves."""
    return Machine((same_symbol_state(Direction.NEITHER, 1), ACCEPT))


@pytest.fixture
def right_runner():
    """Writes a one and moves right forever on an 8-bit tape."""
    state = Transition(
        Command(Symbol.ONE, Direction.RIGHT, 1),
        Command(Symbol.ONE, Direction.RIGHT, 1),
    )
    return Machine((state, ACCEPT), max_length=8)


@pytest.fixture
def left_runner():
    """Writes a one and moves left forever on an 8-bit tape."""
    state = Transition(
        Command(Symbol.ONE, Direction.LEFT, 1),
        Command(Symbol.ONE, Direction.LEFT, 1),
    )
    return Machine((state, ACCEPT), max_length=8)


@pytest.fixture
def config_file(tmp_path):
    """Write a runtime config into tmp_path and return its path."""
    def _write(**overrides):
        data = {"output_directory": str(tmp_path / "logs")}
        data.update(overrides)
        path = tmp_path / "runtime_config.json"
        path.write_text(json.dumps(data))
        return path
    return _write
