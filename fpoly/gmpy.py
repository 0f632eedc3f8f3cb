"""This module collects all gmpy2 functions used by fpoly.

Some helpers built on top of these functions are provided as well,
e.g., for finding primes suited for number-theoretic transforms.
"""

import logging
from gmpy2 import version, is_prime, powmod, invert, legendre  # noqa: F401

logging.debug(f'Load gmpy2 version {version()}')


def two_adic_valuation(x):
    """Return the number of times 2 divides x, for x > 0."""
    if x <= 0:
        raise ValueError('positive number required')

    return (x & -x).bit_length() - 1


def least_qnr(p):
    """Return the least quadratic nonresidue modulo odd prime p."""
    a = 2
    while legendre(a, p) != -1:
        a += 1
    return a
