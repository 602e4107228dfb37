"""
Pytest configuration for stark_primitives tests.
"""

import random
import sys
from pathlib import Path

import pytest

# Project root on the path so tests run without an editable install
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def rng() -> random.Random:
    """Deterministic randomness for property-style tests."""
    return random.Random(0x5EED)
