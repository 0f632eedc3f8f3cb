"""This module provides convolution strategies for coefficient lists over a ring.

A convolution strategy is a class bound to a coefficient ring R via its class
attribute 'ring'. The strategy multiplies polynomials given as coefficient lists
[a_0, a_1, ... , a_n], where a_i is the coefficient of X^i, computing the exact
(untruncated) product. All methods are classmethods, strategies are never
instantiated and hold no state other than the ring.

Strategies also compute formal inverses of power series modulo X^n by means of
Newton iteration, which only relies on convolutions (see class PolyInverse).

The following strategies are available:

    Schoolbook  quadratic reference method, for any ring
    Karatsuba   subquadratic method, for any ring
    NTT         number-theoretic transform, for prime fields GF(p) with
                primitive roots of unity of sufficiently large 2-power order
    NumpyNTT    vectorized NTT using NumPy int64 arrays, for p < 2^31

Use function convolution() to bind a strategy to a ring.
"""

import os
import logging
import functools
import numpy as np
from fpoly import gmpy as gmpy2
from fpoly.finfields import PrimeFieldElement

logging.debug(f'Load NumPy version {np.__version__}')


@functools.cache
def convolution(ring, kind=None):
    """Create convolution strategy for given ring.

    Parameter kind selects the strategy by name ('schoolbook', 'karatsuba',
    'ntt', or 'numpy') or by class. By default, NTTs are used for prime fields
    admitting transforms of length 2^16 or more, where the NumPy variant is
    preferred unless disabled, see fpoly.get_arg_parser(). Karatsuba is used
    otherwise.
    """
    if kind is None:
        kind = _default_kind(ring)
    if isinstance(kind, str):
        try:
            base = STRATEGIES[kind]
        except KeyError:
            raise ValueError(f'unknown convolution strategy {kind!r}') from None

    elif isinstance(kind, type) and issubclass(kind, Convolution):
        base = kind
    else:
        raise TypeError('convolution strategy expected')

    base._check_ring(ring)
    name = f'{base.__name__}[{ring.__name__}]'
    conv = type(name, (base,), {})
    conv.ring = ring
    logging.debug(f'Use convolution strategy {name}')
    return conv


def _default_kind(ring):
    if isinstance(ring, type) and issubclass(ring, PrimeFieldElement) and ring.nth >= 1<<16:
        if os.getenv('FPOLY_NONUMPY') != '1' and ring.modulus < 1<<31:
            return 'numpy'

        return 'ntt'

    return 'karatsuba'


def _resize(a, n, zero):
    """Truncate or zero-pad list a to length n, returning a new list."""
    a = a[:n]
    a.extend([zero] * (n - len(a)))
    return a


def _add(a, b):
    if len(a) < len(b):
        a, b = b, a
    c = a[:]
    for i, b_i in enumerate(b):
        c[i] = c[i] + b_i
    return c


def _schoolbook(a, b, zero):
    if len(a) > len(b):
        a, b = b, a
    c = [zero] * (len(a) + len(b) - 1)
    for i, a_i in enumerate(a):
        if a_i:
            for j, b_j in enumerate(b):
                c[i + j] = c[i + j] + a_i * b_j
    return c


class Convolution:
    """Abstract base class for convolution strategies."""

    ring = None  # set by convolution()

    @classmethod
    def _check_ring(cls, ring):
        """Check if strategy supports given ring."""

    @classmethod
    def convolution(cls, a, b):
        """Return the product of coefficient lists a and b.

        The product has length len(a)+len(b)-1, or equals [0] if a or b is empty.
        Lists a and b are not modified.
        """
        raise NotImplementedError('abstract method')

    @classmethod
    def pow2(cls, a):
        """Return the square of coefficient list a."""
        return cls.convolution(a, a)

    @staticmethod
    def good_length(n):
        """Return smallest power of 2 greater than or equal to n."""
        return 1 << (n-1).bit_length() if n > 1 else 1


class PolyInverse(Convolution):
    """Abstract base class for strategies providing formal inverses of power series."""

    @classmethod
    def inverse(cls, a, n):
        """Return list q of length n satisfying a q = 1 modulo X^n, for n>=1.

        The constant term a[0] must be invertible.
        """
        return cls._inverse(_resize(a, n, cls.ring(0)))

    @classmethod
    def _inverse(cls, p):
        # Newton iteration: q = c (2 - p c) mod X^m, for inverse c of p modulo X^ceil(m/2).
        m = len(p)
        if m == 1:
            return [cls.ring(1) / p[0]]

        c = cls._inverse(p[:(m + 1) // 2])
        pc = cls.convolution(p, c)[:m]
        e = [-pc_i for pc_i in pc]
        e[0] = e[0] + cls.ring(2)
        return _resize(cls.convolution(c, e), m, cls.ring(0))


class Schoolbook(PolyInverse):
    """Schoolbook multiplication using len(a)*len(b) ring multiplications."""

    @classmethod
    def convolution(cls, a, b):
        if not a or not b:
            return [cls.ring(0)]

        return _schoolbook(a, b, cls.ring(0))


class Karatsuba(PolyInverse):
    """Karatsuba multiplication, switching to schoolbook multiplication for short inputs."""

    threshold = 32

    @classmethod
    def convolution(cls, a, b):
        if not a or not b:
            return [cls.ring(0)]

        return cls._karatsuba(a, b)

    @classmethod
    def _karatsuba(cls, a, b):
        zero = cls.ring(0)
        if len(a) > len(b):
            a, b = b, a
        # len(a) <= len(b)
        n, m = len(a), len(b)
        if n <= cls.threshold:
            return _schoolbook(a, b, zero)

        c = [zero] * (n + m - 1)
        if 2*n <= m:
            # unbalanced: multiply a by consecutive blocks of b
            for k in range(0, m, n):
                for i, d_i in enumerate(cls._karatsuba(a, b[k:k + n])):
                    c[k + i] = c[k + i] + d_i
            return c

        h = m // 2  # 0 < h < n
        a0, a1 = a[:h], a[h:]
        b0, b1 = b[:h], b[h:]
        z0 = cls._karatsuba(a0, b0)
        z2 = cls._karatsuba(a1, b1)
        z1 = cls._karatsuba(_add(a0, a1), _add(b0, b1))
        for i, z_i in enumerate(z0):
            c[i] = c[i] + z_i
            c[i + h] = c[i + h] - z_i
        for i, z_i in enumerate(z2):
            c[i + 2*h] = c[i + 2*h] + z_i
            c[i + h] = c[i + h] - z_i
        for i, z_i in enumerate(z1):
            c[i + h] = c[i + h] + z_i
        return c


@functools.lru_cache(maxsize=64)
def _twiddles(p, nth, root, n, inverse=False):
    """Return twiddle factors for NTTs of length n over GF(p), one list per stage."""
    if n > nth:
        raise ValueError(f'NTT length {n} exceeds maximum {nth} for GF({p})')

    w = int(gmpy2.powmod(root, nth // n, p))  # primitive nth root of unity
    if inverse:
        w = int(gmpy2.invert(w, p))
    stages = []
    h = 1
    while h < n:
        w_h = pow(w, n // (2*h), p)  # primitive (2h)th root of unity
        t = [1] * h
        for i in range(1, h):
            t[i] = t[i-1] * w_h % p
        stages.append(t)
        h *= 2
    return stages


def _bit_reverse(a):
    """Permute list a of length 2^k in-place into bit-reversed order."""
    n = len(a)
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j ^= bit
        if i < j:
            a[i], a[j] = a[j], a[i]


class NTT(PolyInverse):
    """Multiplication over GF(p) by means of number-theoretic transforms.

    The transforms are of length 2^k, at most the order ring.nth of the primitive
    root of unity ring.root. Schoolbook multiplication is used for short inputs.
    """

    threshold = 32

    @classmethod
    def _check_ring(cls, ring):
        if not (isinstance(ring, type) and issubclass(ring, PrimeFieldElement)):
            raise TypeError('prime field required for NTT')

    @classmethod
    def convolution(cls, a, b):
        F = cls.ring
        if not a or not b:
            return [F(0)]

        if min(len(a), len(b)) <= cls.threshold:
            return _schoolbook(a, b, F(0))

        k = len(a) + len(b) - 1
        c = cls._cyclic([a_i.value for a_i in a], [b_i.value for b_i in b], cls.good_length(k))
        return [F(int(c_i)) for c_i in c[:k]]

    @classmethod
    def pow2(cls, a):
        F = cls.ring
        if not a:
            return [F(0)]

        if len(a) <= cls.threshold:
            return _schoolbook(a, a, F(0))

        k = 2*len(a) - 1
        c = cls._cyclic_square([a_i.value for a_i in a], cls.good_length(k))
        return [F(int(c_i)) for c_i in c[:k]]

    @classmethod
    def _ntt(cls, a, n, inverse=False):
        """Return (inverse) NTT of length n for list a of integers, len(a) <= n."""
        F = cls.ring
        p = F.modulus
        a = a + [0] * (n - len(a))
        _bit_reverse(a)
        h = 1
        for t in _twiddles(p, F.nth, F.root, n, inverse):
            for s in range(0, n, 2*h):
                for i in range(s, s + h):
                    u = a[i]
                    v = a[i + h] * t[i - s] % p
                    a[i] = (u + v) % p
                    a[i + h] = (u - v) % p
            h *= 2
        if inverse:
            n_inv = int(gmpy2.invert(n, p))
            a = [a_i * n_inv % p for a_i in a]
        return a

    @classmethod
    def _cyclic(cls, a, b, n):
        """Return cyclic convolution of length n for integer lists a and b."""
        p = cls.ring.modulus
        A = cls._ntt(a, n)
        B = cls._ntt(b, n)
        return cls._ntt([x * y % p for x, y in zip(A, B)], n, inverse=True)

    @classmethod
    def _cyclic_square(cls, a, n):
        p = cls.ring.modulus
        A = cls._ntt(a, n)
        return cls._ntt([x * x % p for x in A], n, inverse=True)


@functools.lru_cache(maxsize=64)
def _np_twiddles(p, nth, root, n, inverse=False):
    return tuple(np.array(t, dtype=np.int64) for t in _twiddles(p, nth, root, n, inverse))


@functools.lru_cache(maxsize=64)
def _np_bit_reversal(n):
    """Return index array for permuting arrays of length n=2^k into bit-reversed order."""
    k = n.bit_length() - 1
    i = np.arange(n, dtype=np.int64)
    r = np.zeros(n, dtype=np.int64)
    for b in range(k):
        r |= ((i >> b) & 1) << (k - 1 - b)
    return r


class NumpyNTT(NTT):
    """NTTs vectorized using NumPy arrays with dtype int64, for prime moduli p < 2^31."""

    @classmethod
    def _check_ring(cls, ring):
        super()._check_ring(ring)
        if ring.modulus >= 1<<31:
            raise ValueError('modulus too large for NumPy int64 NTT')

    @classmethod
    def _ntt(cls, a, n, inverse=False):
        F = cls.ring
        p = F.modulus
        x = np.zeros(n, dtype=np.int64)
        x[:len(a)] = a
        x = x[_np_bit_reversal(n)]
        h = 1
        for t in _np_twiddles(p, F.nth, F.root, n, inverse):
            x = x.reshape(-1, 2*h)
            u = x[:, :h]
            v = x[:, h:] * t % p
            x = np.concatenate(((u + v) % p, (u - v) % p), axis=1)
            h *= 2
        x = x.reshape(-1)
        if inverse:
            x = x * int(gmpy2.invert(n, p)) % p
        return x

    @classmethod
    def _cyclic(cls, a, b, n):
        p = cls.ring.modulus
        return cls._ntt(cls._ntt(a, n) * cls._ntt(b, n) % p, n, inverse=True)

    @classmethod
    def _cyclic_square(cls, a, n):
        p = cls.ring.modulus
        A = cls._ntt(a, n)
        return cls._ntt(A * A % p, n, inverse=True)


STRATEGIES = {
    'schoolbook': Schoolbook,
    'karatsuba': Karatsuba,
    'ntt': NTT,
    'numpy': NumpyNTT,
}
