import logging

from .distributions import Wishart
from .exceptions import (WishartError, InvalidParameterError, NotPositiveDefiniteError,
                         DimensionMismatchError, SampleDomainError)
from .linalg import Cholesky

logging.getLogger(__name__).addHandler(logging.NullHandler())
