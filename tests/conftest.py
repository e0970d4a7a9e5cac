from __future__ import annotations

import random

import pytest


@pytest.fixture
def rng() -> random.Random:
    """A fixed-seed generator so every test run carves the same levels."""
    return random.Random(1234)
