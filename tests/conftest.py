"""Shared test fixtures for pymvnfast."""

from __future__ import annotations

import numpy as np
import pytest

import pymvnfast.utils._parallel as _parallel


@pytest.fixture
def pd_3x3():
    """3x3 positive-definite symmetric matrix."""
    return np.array([[4.0, 2.0, 1.0],
                     [2.0, 5.0, 3.0],
                     [1.0, 3.0, 6.0]])


@pytest.fixture
def cov_3x3():
    """3x3 covariance matrix with known std devs and correlations."""
    # Sigma = omega * Corr * omega, omega = diag(1.0, 1.5, 2.0)
    omega = np.diag([1.0, 1.5, 2.0])
    corr = np.array([[1.0, 0.6, 0.3],
                     [0.6, 1.0, 0.5],
                     [0.3, 0.5, 1.0]])
    return omega @ corr @ omega


@pytest.fixture
def mu_3():
    return np.array([1.0, -2.0, 0.5])


@pytest.fixture
def X_3(mu_3):
    """50 deterministic evaluation points in 3 dimensions."""
    rng = np.random.default_rng(20240101)
    return mu_3 + 2.0 * rng.standard_normal((50, 3))


@pytest.fixture
def many_cores(monkeypatch):
    """Pretend the machine has 8 cores so the threaded path always runs."""
    monkeypatch.setattr(_parallel, "cpu_count", lambda: 8)
    return 8
