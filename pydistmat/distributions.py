import logging
import threading

import numpy as np
from scipy.special import multigammaln
from scipy.stats import chi2, norm
from statsmodels.tsa.tsatools import vech
from tqdm import tqdm

from .exceptions import (DimensionMismatchError, InvalidParameterError,
                         NotPositiveDefiniteError, SampleDomainError)
from .linalg import Cholesky, check_out

logger = logging.getLogger(__name__)


class Wishart(object):
    r"""
    The Wishart distribution over d x d symmetric positive definite
    matrices, with degrees of freedom :math:`\nu > d - 1` and positive
    definite scale matrix V.

    .. math ::
    p(X) = \frac{|X|^{(\nu-d-1)/2} \exp(-tr(V^{-1}X)/2)}
                {2^{\nu d/2} |V|^{\nu/2} \Gamma_d(\nu/2)}

    Keyword Arguments:
    v -- The d x d scale matrix.  Only its upper triangle is read.
    nu -- The degrees of freedom.
    random_state -- None, a seed, or a numpy Generator.  A Generator is
                    used as is and may be shared with other objects.
    """

    def _check_parameters(self, v, nu):
        v = np.asarray(v, dtype=float)
        if v.ndim != 2 or v.shape[0] != v.shape[1]:
            raise DimensionMismatchError('v must be a square matrix!')
        dim = v.shape[0]
        if dim < 1:
            raise DimensionMismatchError('v must have at least one row!')
        if not nu > dim - 1:
            raise InvalidParameterError('nu must be greater than dim - 1 = %d, got %r'
                                        % (dim - 1, nu))
        return v, dim

    def __init__(self, v, nu, random_state=None):
        v, self.dim = self._check_parameters(v, nu)
        chol, ok = Cholesky.factorize(v)
        if not ok:
            raise NotPositiveDefiniteError('v is not positive definite!')

        self.nu = float(nu)
        self.random_state = np.random.default_rng(random_state)

        self.chol_v = chol.freeze()
        self.logdet_v = chol.logdet()
        self.upper_v = chol.upper()
        self.upper_v.flags.writeable = False

        self._v = None
        self._v_lock = threading.Lock()

        logger.debug("Initialized Wishart with dim=%d, nu=%g, logdet(v)=%g.",
                     self.dim, self.nu, self.logdet_v)

    @classmethod
    def try_create(cls, v, nu, random_state=None):
        """
        Like the constructor, but returns None instead of raising when v
        is not positive definite.  An invalid nu still raises.
        """
        try:
            return cls(v, nu, random_state=random_state)
        except NotPositiveDefiniteError:
            logger.debug("Scale matrix is not positive definite; no distribution created.")
            return None

    def _scale_matrix(self):
        if self._v is None:
            with self._v_lock:
                if self._v is None:
                    v = self.chol_v.to_sym()
                    v.flags.writeable = False
                    self._v = v
        return self._v

    def mean(self, out=None):
        """
        Returns nu * V.  If out is given it must be a d x d float array; the mean is
        written into it and it is returned.
        """
        out = check_out(out, self.dim)
        np.multiply(self.nu, self._scale_matrix(), out=out)
        return out

    def pdf(self, x):
        return np.exp(self.logpdf(x))

    def logpdf(self, x):
        """
        The log density at x.  Returns -inf if x is not positive definite.
        """
        x = np.asarray(x, dtype=float)
        if x.shape != (self.dim, self.dim):
            raise DimensionMismatchError('x must have shape (%d, %d), got %s'
                                         % (self.dim, self.dim, x.shape))
        chol_x, ok = Cholesky.factorize(x)
        if not ok:
            return -np.inf
        return self._logpdf_chol(chol_x)

    def logpdf_chol(self, chol_x):
        """The log density at X, given the Cholesky factorization of X."""
        if chol_x.size != self.dim:
            raise DimensionMismatchError('factorization has order %d, expected %d'
                                         % (chol_x.size, self.dim))
        return self._logpdf_chol(chol_x)

    def _logpdf_chol(self, chol_x):
        # (nu-d-1)/2 logdet(X) - tr(V^-1 X)/2 - nu d/2 log(2) - nu/2 logdet(V) - log Gamma_d(nu/2)
        logdet_x = chol_x.logdet()

        # tr(V^-1 X) with X = U'U, as tr((V^-1 U') U)
        u = chol_x.upper()
        vinv_ut, ok = self.chol_v.solve(u.T)
        if not ok:
            return -np.inf
        tr = np.trace(vinv_ut.dot(u))

        nu, dim = self.nu, self.dim
        return (0.5 * ((nu - dim - 1) * logdet_x - tr - nu * dim * np.log(2)
                       - nu * self.logdet_v)
                - multigammaln(0.5 * nu, dim))

    def draw_chol(self, out=None):
        r"""
        Draws the Cholesky factorization of a random matrix from the
        distribution, using the Bartlett decomposition.

        The Bartlett decomposition gives X = L A A' L' with V = L L' and A
        lower triangular, where
        .. math ::
        A_{ii}^2 \sim \chi^2_{\nu - i}, \quad A_{ij} \sim N(0, 1), j < i

        Working with upper factors instead, U_X = (L A)' = A' U, so A' is
        generated directly as an upper triangular matrix.

        If out is a Cholesky of order d, it is overwritten and returned.
        """
        if out is not None and out.size != self.dim:
            raise DimensionMismatchError('factorization has order %d, expected %d'
                                         % (out.size, self.dim))
        dim = self.dim
        t = np.zeros((dim, dim))
        for i in range(dim):
            df = self.nu - i
            if df <= 0:
                raise SampleDomainError('chi-squared degrees of freedom must be positive, '
                                        'got nu - %d = %g' % (i, df))
            t[i, i] = np.sqrt(chi2(df).rvs(random_state=self.random_state))

        iu = np.triu_indices(dim, 1)
        if len(iu[0]) > 0:
            t[iu] = norm(0.0, 1.0).rvs(size=len(iu[0]), random_state=self.random_state)

        t = t.dot(self.upper_v)
        if out is None:
            return Cholesky.from_upper(t)
        return out.set_from_upper(t)

    def draw(self, out=None):
        """A single draw, as a symmetric matrix."""
        return self.draw_chol().to_sym(out)

    def rvs(self, ndraw=1, flatten_output=False, progress=False):
        """
        ndraw independent draws, stacked as (ndraw, d, d), or as
        (ndraw, d(d+1)/2) half-vectorizations if flatten_output is set.
        """
        if ndraw < 1:
            raise InvalidParameterError('ndraw must be at least 1, got %r' % ndraw)

        draws = np.zeros((ndraw, self.dim, self.dim))
        for i in tqdm(range(ndraw), disable=not progress):
            self.draw(out=draws[i])

        if flatten_output:
            return np.array([vech(d) for d in draws])
        return draws

    def __repr__(self):
        return "A Wishart distribution of order %d with %g degrees of freedom" % (self.dim, self.nu)
