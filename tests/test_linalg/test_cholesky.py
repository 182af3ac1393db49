"""Tests for covariance factorization."""

from __future__ import annotations

import numpy as np
import pytest
import scipy.linalg

from pymvnfast import (
    CovarianceFactor,
    DimensionMismatchError,
    NotPositiveDefiniteError,
    factorize,
)


class TestFactorize:
    def test_reconstructs_covariance(self, pd_3x3):
        f = factorize(pd_3x3)
        np.testing.assert_allclose(f.R.T @ f.R, pd_3x3, atol=1e-12)

    def test_upper_triangular(self, pd_3x3):
        f = factorize(pd_3x3)
        assert f.R[1, 0] == 0.0
        assert f.R[2, 0] == 0.0
        assert f.R[2, 1] == 0.0

    def test_positive_diagonal(self, cov_3x3):
        f = factorize(cov_3x3)
        assert np.all(np.diag(f.R) > 0)

    def test_log_det(self, cov_3x3):
        f = factorize(cov_3x3)
        sign, logdet = np.linalg.slogdet(cov_3x3)
        assert sign == 1.0
        np.testing.assert_allclose(f.log_det, logdet, atol=1e-12)

    def test_dim(self, pd_3x3):
        assert factorize(pd_3x3).dim == 3

    def test_scalar_variance(self):
        f = factorize(4.0)
        np.testing.assert_allclose(f.R, [[2.0]])

    def test_covariance_roundtrip(self, cov_3x3):
        np.testing.assert_allclose(factorize(cov_3x3).covariance(), cov_3x3, atol=1e-12)

    def test_factor_passthrough(self, pd_3x3):
        f = factorize(pd_3x3)
        assert factorize(f) is f
        assert factorize(f, is_chol=True) is f

    def test_is_chol_uses_factor_verbatim(self, pd_3x3):
        R = scipy.linalg.cholesky(pd_3x3, lower=False)
        f = factorize(R, is_chol=True)
        np.testing.assert_array_equal(f.R, R)

    def test_read_only(self, pd_3x3):
        f = factorize(pd_3x3)
        with pytest.raises(ValueError):
            f.R[0, 0] = 1.0

    def test_input_not_aliased(self, pd_3x3):
        R = scipy.linalg.cholesky(pd_3x3)
        f = factorize(R, is_chol=True)
        R[0, 0] = 100.0
        assert f.R[0, 0] != 100.0


class TestFactorizeErrors:
    def test_not_positive_definite(self):
        A = np.array([[1.0, 2.0], [2.0, 1.0]])
        with pytest.raises(NotPositiveDefiniteError):
            factorize(A)

    def test_error_is_linalg_and_value_error(self):
        A = np.array([[1.0, 0.0], [0.0, -1.0]])
        with pytest.raises(np.linalg.LinAlgError):
            factorize(A)
        with pytest.raises(ValueError):
            factorize(A)

    def test_not_square(self):
        with pytest.raises(DimensionMismatchError):
            factorize(np.ones((2, 3)))

    def test_not_2d(self):
        with pytest.raises(DimensionMismatchError):
            factorize(np.ones(3))


class TestFromCholesky:
    def test_unchecked_factor_is_trusted(self):
        R = np.array([[-1.0, 0.5], [0.0, 2.0]])
        f = CovarianceFactor.from_cholesky(R)
        np.testing.assert_array_equal(f.R, R)

    def test_check_rejects_negative_diagonal(self):
        R = np.array([[-1.0, 0.5], [0.0, 2.0]])
        with pytest.raises(NotPositiveDefiniteError):
            CovarianceFactor.from_cholesky(R, check=True)

    def test_check_rejects_lower_entries(self):
        R = np.array([[1.0, 0.5], [0.3, 2.0]])
        with pytest.raises(NotPositiveDefiniteError):
            factorize(R, is_chol=True, check=True)

    def test_check_accepts_valid_factor(self, cov_3x3):
        R = scipy.linalg.cholesky(cov_3x3)
        f = CovarianceFactor.from_cholesky(R, check=True)
        np.testing.assert_allclose(f.covariance(), cov_3x3, atol=1e-12)

    def test_lower_triangle_ignored(self, cov_3x3):
        R = scipy.linalg.cholesky(cov_3x3)
        noisy = R + np.tril(np.full((3, 3), 9.0), -1)
        f = CovarianceFactor.from_cholesky(noisy)
        np.testing.assert_allclose(f.covariance(), cov_3x3, atol=1e-12)
