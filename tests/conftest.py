"""Shared fixtures for the adiff tests."""

from __future__ import annotations

import numpy as np
import pytest


# ── Fixtures ─────────────────────────────────────────────────────
@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
