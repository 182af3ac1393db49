"""Tests for input validation helpers."""

from __future__ import annotations

import numpy as np
import pytest

from pymvnfast import BufferSizeError, DimensionMismatchError, InvalidParameterError
from pymvnfast.utils._validation import (
    as_mean,
    as_rows,
    check_buffer,
    check_df,
    check_n,
    check_symmetric,
)


class TestAsRows:
    def test_vector_becomes_row(self):
        assert as_rows([1.0, 2.0, 3.0]).shape == (1, 3)

    def test_matrix_kept(self):
        assert as_rows(np.zeros((4, 2))).shape == (4, 2)

    def test_3d_rejected(self):
        with pytest.raises(DimensionMismatchError):
            as_rows(np.zeros((2, 2, 2)))

    def test_dtype(self):
        assert as_rows([[1, 2]]).dtype == np.float64


class TestAsMean:
    def test_ok(self):
        np.testing.assert_array_equal(as_mean([1, 2], 2), [1.0, 2.0])

    def test_wrong_length(self):
        with pytest.raises(DimensionMismatchError):
            as_mean([1.0, 2.0], 3)

    def test_matrix_rejected(self):
        with pytest.raises(DimensionMismatchError):
            as_mean(np.zeros((1, 2)), 2)


class TestScalars:
    def test_df(self):
        assert check_df(3) == 3.0

    @pytest.mark.parametrize("bad", [0.0, -1.0, np.nan])
    def test_bad_df(self, bad):
        with pytest.raises(InvalidParameterError):
            check_df(bad)

    @pytest.mark.parametrize("bad", [0, -5, 2.5, True])
    def test_bad_n(self, bad):
        with pytest.raises(InvalidParameterError):
            check_n(bad)

    def test_symmetric(self, pd_3x3):
        assert check_symmetric(pd_3x3)
        assert not check_symmetric(np.triu(pd_3x3))


class TestCheckBuffer:
    def test_ok(self):
        A = np.empty((5, 3))
        assert check_buffer(A, 5, 3) is A

    def test_wrong_shape(self):
        with pytest.raises(BufferSizeError):
            check_buffer(np.empty((5, 2)), 5, 3)

    def test_wrong_dtype(self):
        with pytest.raises(BufferSizeError):
            check_buffer(np.empty((5, 3), dtype=np.float32), 5, 3)

    def test_fortran_order(self):
        with pytest.raises(BufferSizeError):
            check_buffer(np.empty((5, 3), order="F"), 5, 3)

    def test_read_only(self):
        A = np.empty((5, 3))
        A.setflags(write=False)
        with pytest.raises(BufferSizeError):
            check_buffer(A, 5, 3)

    def test_not_array(self):
        with pytest.raises(BufferSizeError):
            check_buffer([[0.0] * 3] * 5, 5, 3)
