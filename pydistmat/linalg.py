import numpy as np
from scipy.linalg import cholesky, cho_solve

from .exceptions import DimensionMismatchError


def _check_square(a, name='matrix'):
    a = np.asarray(a, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise DimensionMismatchError('%s must be a square matrix, got shape %s'
                                     % (name, a.shape))
    return a


def check_out(out, dim):
    """Validate a caller-supplied (dim, dim) floating point output buffer."""
    if out is None:
        return np.zeros((dim, dim))
    if not isinstance(out, np.ndarray) or out.shape != (dim, dim):
        raise DimensionMismatchError('output must have shape (%d, %d), got %s'
                                     % (dim, dim, np.shape(out)))
    if not np.issubdtype(out.dtype, np.floating):
        raise DimensionMismatchError('output must be a float array, got dtype %s' % out.dtype)
    return out


class Cholesky(object):
    r"""
    The Cholesky factorization of a symmetric positive definite matrix.

    The factor is stored upper triangular, so that
    .. math ::
    A = U^{\prime}U

    Only the upper triangle of the input is read by ``factorize``.
    """

    def __init__(self, upper):
        self._u = upper

    @classmethod
    def factorize(cls, a):
        """
        Factorizes a.

        Returns (chol, ok).  ok is False, and chol is None, when a is not
        positive definite or holds non-finite entries.
        """
        a = _check_square(a)
        try:
            u = cholesky(a, lower=False)
        except (np.linalg.LinAlgError, ValueError):
            return None, False
        return cls(u), True

    @classmethod
    def from_upper(cls, u):
        """Wraps an upper triangular factor without checking it."""
        u = _check_square(u, 'upper factor')
        return cls(np.triu(u))

    def set_from_upper(self, u):
        """Overwrites the factor in place with the upper triangle of u."""
        u = np.asarray(u, dtype=float)
        if u.shape != self._u.shape:
            raise DimensionMismatchError('upper factor must have shape %s, got %s'
                                         % (self._u.shape, u.shape))
        self._u[...] = np.triu(u)
        return self

    def freeze(self):
        """Makes the factor read-only; later set_from_upper calls raise ValueError."""
        self._u.flags.writeable = False
        return self

    @property
    def size(self):
        return self._u.shape[0]

    def upper(self):
        """Returns a copy of the upper triangular factor U."""
        return self._u.copy()

    def logdet(self):
        return np.sum(np.log(np.diag(self._u)**2))

    def solve(self, b):
        """
        Solves A x = b using the factorization.

        Returns (x, ok).  ok is False if the solution is not finite.
        """
        b = np.asarray(b, dtype=float)
        if b.shape[0] != self.size:
            raise DimensionMismatchError('right hand side has %d rows, expected %d'
                                         % (b.shape[0], self.size))
        try:
            x = cho_solve((self._u, False), b, check_finite=False)
        except np.linalg.LinAlgError:
            return None, False
        return x, bool(np.all(np.isfinite(x)))

    def to_sym(self, out=None):
        """Rebuilds A = U'U as an exactly symmetric matrix."""
        out = check_out(out, self.size)
        a = self._u.T.dot(self._u)
        out[...] = np.triu(a) + np.triu(a, 1).T
        return out

    def __repr__(self):
        return "Cholesky factorization of order %d" % self.size
