"""Pytest configuration and shared fixtures for dfopt tests.

This module provides:
- Deterministic RNG fixtures for numpy and NLopt
- Shared test objectives
"""

import os

import nlopt
import numpy as np
import pytest


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed numpy and NLopt's global generators before every test."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    np.random.seed(seed)
    nlopt.srand(seed)


class CountingObjective:
    """Objective wrapper recording every point it is evaluated at."""

    def __init__(self, func):
        self.func = func
        self.points = []

    def __call__(self, *args):
        self.points.append(args)
        return self.func(*args)

    @property
    def calls(self) -> int:
        return len(self.points)


@pytest.fixture
def counting():
    return CountingObjective
