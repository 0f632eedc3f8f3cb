"""This module supports finite rings of integers modulo m, and prime fields in particular.

Function Zmod creates types implementing the integers modulo m, for any m>=2.
Function GF creates types implementing prime fields GF(p), where each field
also records a primitive root of unity of 2-power order for use by
number-theoretic transforms (NTTs).

Instantiate an object from a ring or field and subsequently apply overloaded
operators such as +,-,*,/ etc., to compute with its elements. Elements are
immutable, hence in-place operators fall back to their plain counterparts.
Division by a non-invertible element raises ZeroDivisionError.

Function inverse_batch() computes the inverses of many elements at the cost
of a single inversion and a linear number of multiplications.
"""

import math
import functools
from fpoly import gmpy as gmpy2


def GF(modulus):
    """Create a prime field for given modulus p, or for given triple (p, n, w).

    If only p is given, n is set to the largest power of 2 dividing p-1
    and w is set to a primitive nth root of unity modulo p.
    """
    if isinstance(modulus, tuple):
        p, n, w = modulus
    else:
        p = modulus
        if not gmpy2.is_prime(p):
            raise ValueError('modulus is not a prime')

        if p == 2:
            n, w = 1, 1
        else:
            n = 1 << gmpy2.two_adic_valuation(p-1)
            w = int(gmpy2.powmod(gmpy2.least_qnr(p), (p-1) // n, p))
    return pGF(p, n, w)


@functools.cache
def Zmod(modulus):
    """Create a ring of integers modulo given modulus, modulus>=2."""
    if not isinstance(modulus, int) or modulus < 2:
        raise ValueError('modulus must be an integer >= 2')

    Zm = type(f'Z/{modulus}Z', (ModularIntegerElement,), {'__slots__': ()})
    Zm.__doc__ = 'Class of integers modulo m.'
    Zm.modulus = modulus
    Zm.order = modulus
    Zm.characteristic = modulus
    return Zm


class ModularIntegerElement:
    """Common base class for integers modulo m.

    Invariant: 'value' is reduced w.r.t. modulus.
    """

    __slots__ = 'value'

    modulus: int  # set by subclass
    order = None
    characteristic = None
    is_field = False
    _mix_types = int

    def __init__(self, value=0):
        if not isinstance(value, int):
            raise TypeError(f'int required, got {type(value).__name__}')

        # Directly call int.__mod__() for efficiency:
        self.value = value.__mod__(self.modulus)

    def __int__(self):
        """Extract element as an integer value in {0, ... , modulus-1}."""
        return self.value

    def __add__(self, other):
        """Addition."""
        if isinstance(other, type(self)):
            return type(self)(self.value + other.value)

        if isinstance(other, self._mix_types):
            return type(self)(self.value + other)

        return NotImplemented

    def __radd__(self, other):
        """Addition (with reflected arguments)."""
        if isinstance(other, self._mix_types):
            return type(self)(self.value + other)

        return NotImplemented

    def __sub__(self, other):
        """Subtraction."""
        if isinstance(other, type(self)):
            return type(self)(self.value - other.value)

        if isinstance(other, self._mix_types):
            return type(self)(self.value - other)

        return NotImplemented

    def __rsub__(self, other):
        """Subtraction (with reflected arguments)."""
        if isinstance(other, self._mix_types):
            return type(self)(other - self.value)

        return NotImplemented

    def __neg__(self):
        """Negation."""
        return type(self)(-self.value)

    def __pos__(self):
        """Unary +."""
        return type(self)(+self.value)

    def __mul__(self, other):
        """Multiplication."""
        if isinstance(other, type(self)):
            return type(self)(self.value * other.value)

        if isinstance(other, self._mix_types):
            return type(self)(self.value * other)

        return NotImplemented

    def __rmul__(self, other):
        """Multiplication (with reflected arguments)."""
        if isinstance(other, self._mix_types):
            return type(self)(self.value * other)

        return NotImplemented

    def __truediv__(self, other):
        """Division."""
        if isinstance(other, type(self)):
            other = other.value
        elif not isinstance(other, self._mix_types):
            return NotImplemented

        return type(self)(self.value * type(self)._reciprocal(other))

    def __rtruediv__(self, other):
        """Division (with reflected arguments)."""
        if isinstance(other, self._mix_types):
            return self.reciprocal() * other

        return NotImplemented

    def __pow__(self, other):
        """Exponentiation."""
        if not isinstance(other, int):
            return NotImplemented

        cls = type(self)
        a = self.value
        if other < 0:
            a = cls._reciprocal(a)
            other = -other
        return cls(int(gmpy2.powmod(a, other, cls.modulus)))

    @classmethod
    def _reciprocal(cls, a):
        """Multiplicative inverse."""
        return int(gmpy2.invert(a, cls.modulus))

    def reciprocal(self):
        """Multiplicative inverse."""
        cls = type(self)
        return cls(cls._reciprocal(self.value))

    def is_unit(self):
        """Test for invertibility."""
        return math.gcd(self.value, self.modulus) == 1

    def __eq__(self, other):
        """Equality test."""
        if isinstance(other, type(self)):
            return self.value == other.value

        if isinstance(other, self._mix_types):
            return self.value == other % self.modulus

        return NotImplemented

    def __hash__(self):
        """Make elements hashable (e.g., for LRU caching)."""
        return hash((type(self).__name__, self.value))

    def __bool__(self):
        """Truth value testing.

        Return False if this element is zero, True otherwise.
        """
        return bool(self.value)

    def __repr__(self):
        return f'{self.value}'


@functools.cache
def pGF(p, n, w):
    """Create a prime field for given prime modulus p with primitive nth root of unity w."""
    if not gmpy2.is_prime(p):
        raise ValueError('modulus is not a prime')

    w %= p
    if (p-1) % n or pow(w, n, p) != 1 or n > 1 and pow(w, n >> 1, p) == 1:
        raise ValueError('no primitive root of unity of given order')

    GFp = type(f'GF({p})', (PrimeFieldElement,), {'__slots__': ()})
    GFp.__doc__ = 'Class of prime field elements.'
    GFp.modulus = p
    GFp.order = p
    GFp.characteristic = p
    GFp.nth = n
    GFp.root = w
    return GFp


class PrimeFieldElement(ModularIntegerElement):
    """Common base class for prime field elements."""

    __slots__ = ()

    is_field = True
    nth = None
    root = None

    def is_unit(self):
        """Test for invertibility."""
        return self.value != 0


def find_ntt_prime(l, k):
    """Find largest prime p < 2^l such that 2^k divides p-1.

    Also, a primitive 2^k-th root of unity w is returned, 0 < w < p.
    The output (p, 2^k, w) can be passed to GF() directly.
    """
    n = 1 << k
    if l <= k:
        raise ValueError('bit length must exceed k')

    c = ((1 << l) - 1) // n
    while c:
        p = c * n + 1
        if p < 1 << l and gmpy2.is_prime(p):
            break

        c -= 1
    else:
        raise ValueError('no such prime')

    w = int(gmpy2.powmod(gmpy2.least_qnr(p), c, p)) if p > 2 else 1
    return p, n, w


def inverse_batch(x):
    """Return the list of multiplicative inverses of the given elements.

    Montgomery's trick is used: one inversion and 3(len(x)-1) multiplications.
    Raises ZeroDivisionError if any element is not invertible.
    """
    x = list(x)
    if not x:
        return []

    partials = [x[0]]
    for a in x[1:]:
        partials.append(partials[-1] * a)
    inv = type(x[0])(1) / partials[-1]
    y = [None] * len(x)
    for i in range(len(x) - 1, 0, -1):
        y[i] = inv * partials[i-1]
        inv = inv * x[i]
    y[0] = inv
    return y
