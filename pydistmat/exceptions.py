import numpy as np


class WishartError(Exception):
    """Base class for errors raised by pydistmat."""


class InvalidParameterError(WishartError, ValueError):
    pass


class NotPositiveDefiniteError(WishartError, np.linalg.LinAlgError):
    pass


class DimensionMismatchError(WishartError, ValueError):
    pass


class SampleDomainError(WishartError, ValueError):
    """A chi-squared draw was requested with non-positive degrees of freedom."""
