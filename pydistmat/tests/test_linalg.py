import numpy as np
from numpy.testing import assert_equal, assert_almost_equal
from unittest import TestCase

from pydistmat.linalg import Cholesky, check_out
from pydistmat.exceptions import DimensionMismatchError


class TestCholesky(TestCase):

    def setUp(self):
        self.A = np.array([[4.0, 1.2, 0.4],
                           [1.2, 3.0, 0.5],
                           [0.4, 0.5, 2.0]])
        self.chol, ok = Cholesky.factorize(self.A)
        self.assertTrue(ok)

    def test_upper_reconstructs(self):
        U = self.chol.upper()
        assert_almost_equal(np.tril(U, -1), np.zeros((3, 3)))
        assert_almost_equal(U.T.dot(U), self.A)

    def test_to_sym_is_symmetric(self):
        S = self.chol.to_sym()
        assert_equal(S, S.T)
        assert_almost_equal(S, self.A)

    def test_logdet(self):
        _, expected = np.linalg.slogdet(self.A)
        assert_almost_equal(self.chol.logdet(), expected)

    def test_solve(self):
        b = np.array([[1.0, 0.0], [2.0, 1.0], [0.5, -1.0]])
        x, ok = self.chol.solve(b)
        self.assertTrue(ok)
        assert_almost_equal(self.A.dot(x), b)

    def test_solve_not_finite(self):
        _, ok = self.chol.solve(np.array([[np.inf], [0.0], [1.0]]))
        self.assertFalse(ok)

    def test_not_positive_definite(self):
        chol, ok = Cholesky.factorize(np.array([[1.0, 2.0], [2.0, 1.0]]))
        self.assertFalse(ok)
        self.assertIsNone(chol)

    def test_non_finite(self):
        chol, ok = Cholesky.factorize(np.array([[np.nan, 0.0], [0.0, 1.0]]))
        self.assertFalse(ok)

    def test_from_upper_drops_lower_triangle(self):
        U = np.array([[2.0, 1.0], [5.0, 3.0]])
        chol = Cholesky.from_upper(U)
        assert_equal(chol.upper(), np.array([[2.0, 1.0], [0.0, 3.0]]))
        assert_equal(chol.size, 2)

    def test_frozen_factor_is_read_only(self):
        self.chol.freeze()
        before = self.chol.upper()
        with self.assertRaises(ValueError):
            self.chol.set_from_upper(np.eye(3))
        assert_equal(self.chol.upper(), before)

    def test_set_from_upper_in_place(self):
        U = np.triu(np.ones((3, 3)))
        out = self.chol.set_from_upper(U)
        self.assertIs(out, self.chol)
        assert_equal(self.chol.upper(), U)
        with self.assertRaises(DimensionMismatchError):
            self.chol.set_from_upper(np.eye(2))

    def test_square_required(self):
        with self.assertRaises(DimensionMismatchError):
            Cholesky.factorize(np.ones((2, 3)))

    def test_check_out(self):
        assert_equal(check_out(None, 2).shape, (2, 2))
        buf = np.zeros((2, 2))
        self.assertIs(check_out(buf, 2), buf)
        with self.assertRaises(DimensionMismatchError):
            check_out(np.zeros((3, 3)), 2)
        with self.assertRaises(DimensionMismatchError):
            check_out(np.zeros((2, 2), dtype=int), 2)
