"""This module supports arithmetic with polynomials and truncated formal power series.

Polynomials over a commutative ring R are represented as coefficient lists.
The polynomial a_0 + a_1 X + ... + a_n X^n corresponds to the list
[a_0, a_1, ... , a_n] of elements of R. Coefficient lists are always trimmed:
leading coefficient a_n is nonzero, except for the zero polynomial, which is
represented by the list [0] of length 1. The rank of a polynomial is the length
of its coefficient list minus 1, hence the rank of a constant polynomial is 0.

Multiplication is delegated to a convolution strategy bound to R (see module
fpoly.convolution), and so are formal inverses. Formal power series are handled
as polynomials truncated modulo X^n, where operations such as inverse(), ln(),
and exp() take the number of terms n as a parameter.

The operators +,-,*,//,%, and function divmod are overloaded, where / is
an alias for //. Operator << multiplies by a power of X, and operator >> divides
by a power of X discarding the remainder. Equivalently, methods right_shift()
and left_shift() shift the coefficient list to the right and to the left, respectively.

Powers of X modulo a fixed polynomial are computed by downgrade_mod() for an
exponent given as a sequence of bits, which is used to find terms of linear
recurrences far ahead, see linear_recurrence().
"""

import functools
from fpoly import convolution
from fpoly.finfields import inverse_batch

X = 'x'  # symbol for indeterminate in polynomials


@functools.cache
def FPSX(ring, conv=None):
    """Create type for polynomials over given ring using given convolution strategy.

    Parameter conv is either a strategy bound to ring, or anything accepted as
    kind by fpoly.convolution.convolution(), using a default strategy for ring if
    conv is None.
    """
    if not (isinstance(conv, type) and issubclass(conv, convolution.Convolution)
            and conv.ring is ring):
        conv = convolution.convolution(ring, conv)
    RX = type(f'{ring.__name__}[{X}]', (Poly,), {'__slots__': ()})
    RX.ring = ring
    RX.conv = conv
    return RX


def bits(k):
    """Yield the bits of nonnegative integer k, most significant bit first."""
    for i in range(k.bit_length() - 1, -1, -1):
        yield (k >> i) & 1


class Poly:
    """Polynomials over a ring represented as trimmed lists of ring elements.

    Invariant: attribute 'value' is a nonempty list, with its last element nonzero
    if its length exceeds 1. Polynomials are never modified after creation.
    """

    __slots__ = 'value'

    ring = None
    conv = None

    def __init__(self, value=0, check=True):
        """Initialize polynomial to given value (zero polynomial, by default)."""
        if check:
            value = self._intern(value)
        self.value = value

    @classmethod
    def _intern(cls, a):
        # convert a to cls internal format, if possible
        a = cls._coerce(a)
        if a is NotImplemented:
            raise TypeError(f'polynomial over {cls.ring.__name__} expected')

        return a

    @classmethod
    def _coerce(cls, a):
        if isinstance(a, Poly):
            if not isinstance(a, cls):
                raise TypeError(f'polynomial of type {cls.__name__} expected')

            return a.value

        if isinstance(a, (int, cls.ring)):
            return cls._from_list([a])

        if isinstance(a, str):
            return cls._from_terms(a)

        if isinstance(a, tuple):
            a = list(a)
        if isinstance(a, list):
            return cls._from_list(a)

        return NotImplemented

    @classmethod
    def _elements(cls, a):
        R = cls.ring
        c = []
        for a_i in a:
            if isinstance(a_i, R):
                c.append(a_i)
            elif isinstance(a_i, int):
                c.append(R(a_i))
            else:
                raise TypeError('polynomial coefficients must be ints or ring elements')

        return c

    @classmethod
    def _from_list(cls, a):
        return cls._trim(cls._elements(a))

    @classmethod
    def _trim(cls, a):
        # NB: in-place
        while len(a) > 1 and not a[-1]:
            a.pop()
        if not a:
            a.append(cls.ring(0))
        return a

    @classmethod
    def _coefficient(cls, c):
        # integer n or quotient n/d, the latter evaluated in the ring
        n, _, d = c.partition('/')
        c = int(n)
        if d:
            c = cls.ring(c) / cls.ring(int(d))
        return c

    @classmethod
    def _from_terms(cls, s, x=X):
        d = {}
        s = ''.join(s.split())  # remove all whitespace
        for term in s.split('+'):
            try:
                if term.find(x) == -1:
                    c = cls._coefficient(term)
                    i = 0
                elif term.endswith(x):
                    c = term[:-1]
                    c = 1 if c == '' else cls._coefficient(c)
                    i = 1
                else:
                    c, i = term.split(f'{x}^')
                    c = 1 if c == '' else cls._coefficient(c)
                    i = int(i)
            except Exception as exc:
                raise ValueError('ill formatted polynomial') from exc

            d[i] = d.get(i, 0) + c

        m = max(d.keys(), default=-1)
        a = [0] * (m+1)
        for i, c in d.items():
            a[i] = c
        return cls._from_list(a)

    @staticmethod
    def _to_terms(a, x=X):
        if len(a) == 1 and not a[0]:
            return '0'

        s = ''
        for i in range(len(a) - 1, -1, -1):
            if a[i]:
                c = '' if a[i] == 1 else a[i]
                if i == 0:
                    s += f'+{a[i]}'  # x^0 = 1
                elif i == 1:
                    s += f'+{c}{x}'  # x^1 = x
                else:
                    s += f'+{c}{x}^{i}'
        return s[1:]

    @classmethod
    def from_terms(cls, s, x=X):
        """Convert string s with sum of powers of x to a polynomial.

        Coefficients are integers or quotients n/d of integers, the latter
        computed in the ring, such that repr() output for rational coefficients
        converts back.
        """
        return cls(cls._from_terms(s, x), check=False)

    @classmethod
    def to_terms(cls, a, x=X):
        """Convert polynomial a to a string with sum of powers of x."""
        a = cls._intern(a)
        return cls._to_terms(a, x)

    @classmethod
    def zero(cls):
        """Zero polynomial."""
        return cls([cls.ring(0)], check=False)

    @classmethod
    def one(cls):
        """Constant polynomial 1."""
        return cls([cls.ring(1)], check=False)

    @classmethod
    def with_constant(cls, v):
        """Constant polynomial v."""
        return cls(cls._from_list([v]), check=False)

    def is_zero(self):
        """Test for zero polynomial."""
        return len(self.value) == 1 and not self.value[0]

    def rank(self):
        """Length of coefficient list minus 1 (0 for zero polynomial)."""
        return len(self.value) - 1

    def to_list(self):
        """Return (a copy of) the coefficient list."""
        return self.value[:]

    def __iter__(self):
        yield from self.value

    def __getitem__(self, key):  # NB: no set_item to prevent mutability
        if not isinstance(key, int):
            raise IndexError('use int for indexing polynomials')

        if key < 0:
            raise IndexError('negative index not allowed for polynomials')

        if key < len(self.value):
            return self.value[key]

        return self.ring(0)

    def apply(self, x):
        """Evaluate polynomial at given x, using Horner's rule."""
        R = self.ring
        if not isinstance(x, R):
            x = R(x)
        y = R(0)
        for c in reversed(self.value):
            y = y * x + c
        return y

    __call__ = apply

    @classmethod
    def _reverse(cls, a, d=None):
        if d is None:
            d = len(a) - 1
        # d >= -1
        a = a[:d+1]
        a.extend([cls.ring(0)] * (d + 1 - len(a)))
        a.reverse()
        return cls._trim(a)

    def reverse(self, d=None):
        """Reverse of polynomial (basically, coefficients in reverse order).

        For example, reverse of x + 2x^2 + 3x^3 is 3 + 2x + x^2.
        If d is None (default), d is set to the rank of the given polynomial.
        Otherwise, the given polynomial is first padded with zeros or truncated
        to attain the given rank d, d>=-1, before it is reversed.
        """
        cls = type(self)
        return cls(cls._reverse(self.value, d=d), check=False)

    @classmethod
    def _modular(cls, a, n):
        return cls._trim(a[:n])

    def modular(self, n):
        """Polynomial modulo X^n, that is, the first n terms as power series."""
        cls = type(self)
        return cls(cls._modular(self.value, n), check=False)

    @classmethod
    def _left_shift(cls, a, n):
        return cls._trim(a[n:])

    @classmethod
    def _right_shift(cls, a, n):
        if len(a) == 1 and not a[0]:
            return a[:]

        return [cls.ring(0)] * n + a

    def left_shift(self, n):
        """Quotient for polynomial divided by X^n, discarding the remainder."""
        cls = type(self)
        return cls(cls._left_shift(self.value, n), check=False)

    def right_shift(self, n):
        """Polynomial multiplied by X^n."""
        cls = type(self)
        return cls(cls._right_shift(self.value, n), check=False)

    def __lshift__(self, other):
        if not isinstance(other, int):
            return NotImplemented

        return self.right_shift(other)

    def __rshift__(self, other):
        if not isinstance(other, int):
            return NotImplemented

        return self.left_shift(other)

    @classmethod
    def _differential(cls, a):
        R = cls.ring
        return cls._trim([a[i] * R(i) for i in range(1, len(a))])

    def differential(self):
        """Formal derivative of polynomial."""
        cls = type(self)
        return cls(cls._differential(self.value), check=False)

    @classmethod
    def _integral(cls, a):
        R = cls.ring
        inv = inverse_batch(R(i) for i in range(1, len(a) + 1))
        return cls._trim([R(0)] + [inv_i * a_i for inv_i, a_i in zip(inv, a)])

    def integral(self):
        """Formal integral of polynomial, with constant term 0.

        The inverses of 1, 2, ..., rank+1 are computed all at once, hence these
        must be invertible in the ring (e.g., rank+1 below the characteristic).
        """
        cls = type(self)
        return cls(cls._integral(self.value), check=False)

    def dot(self, other):
        """Coefficient-wise product, truncated to the shorter of the two coefficient lists."""
        cls = type(self)
        other = cls._intern(other)
        return cls(cls._trim([a_i * b_i for a_i, b_i in zip(self.value, other)]), check=False)

    def __neg__(self):
        cls = type(self)
        return cls([-a_i for a_i in self.value], check=False)

    def __pos__(self):
        cls = type(self)
        return cls(self.value[:], check=False)

    @classmethod
    def _add(cls, a, b):
        if len(a) < len(b):
            a, b = b, a
        # len(a) >= len(b)
        c = a[:]
        for i, b_i in enumerate(b):
            c[i] = c[i] + b_i
        return cls._trim(c)

    @classmethod
    def _sub(cls, a, b):
        c = a + [cls.ring(0)] * (len(b) - len(a))
        for i, b_i in enumerate(b):
            c[i] = c[i] - b_i
        return cls._trim(c)

    @classmethod
    def _mul(cls, a, b):
        return cls._trim(cls.conv.convolution(a, b))

    def __add__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._add(self.value, other), check=False)

    __radd__ = __add__

    def __sub__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._sub(self.value, other), check=False)

    def __rsub__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._sub(other, self.value), check=False)

    def __mul__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._mul(self.value, other), check=False)

    __rmul__ = __mul__

    def pow2(self):
        """Square of polynomial."""
        cls = type(self)
        return cls(cls._trim(cls.conv.pow2(self.value)), check=False)

    def __pow__(self, other):
        if not isinstance(other, int):
            return NotImplemented

        if other < 0:
            raise ValueError('negative exponent')

        a = type(self).one()
        for b in bits(other):
            a = a.pow2()
            if b:
                a *= self
        return a

    @classmethod
    def batch_mul(cls, polys):
        """Multiply all given polynomials.

        The multiplications are arranged in a balanced binary tree, such that
        the factors in each multiplication are of comparable size if the given
        polynomials are. The product of no polynomials is 1.
        """
        a = [cls._intern(p) for p in polys]
        if not a:
            return cls.one()

        return cls(cls._batch_mul(a, 0, len(a)), check=False)

    @classmethod
    def _batch_mul(cls, a, i, j):
        if j - i == 1:
            return a[i][:]

        h = (i + j) // 2
        return cls._mul(cls._batch_mul(a, i, h), cls._batch_mul(a, h, j))

    @classmethod
    def convolution_delta(cls, a, b):
        """Return the top part of the product of a reversed and b.

        The result has coefficients c_j = sum_i a_i b_{i-j}, for 0 <= j <= rank(a).
        Computed by reversing a, convolving with b, keeping the first rank(a)+1
        terms and reversing back.
        """
        a = cls._intern(a)
        b = cls._intern(b)
        c = cls.conv.convolution(a[::-1], b)
        c = c[:len(a)]
        c.extend([cls.ring(0)] * (len(a) - len(c)))
        c.reverse()
        return cls(cls._trim(c), check=False)

    @classmethod
    def _inverse(cls, a, n):
        if n == 0:
            return [cls.ring(0)]

        return cls._trim(cls.conv.inverse(a, n))

    def inverse(self, n):
        """Inverse of polynomial as power series modulo X^n.

        The constant term must be invertible, and the zero polynomial is returned for n=0.
        """
        cls = type(self)
        return cls(cls._inverse(self.value, n), check=False)

    @classmethod
    def _div(cls, a, b):
        if len(b) == 1 and not b[0]:
            raise ZeroDivisionError('division by zero polynomial')

        if len(a) < len(b):
            return [cls.ring(0)]

        b_inv = cls.conv.inverse(b[::-1], len(a) - len(b) + 1)
        return cls._fast_div(a, b, b_inv)

    @classmethod
    def _fast_div(cls, a, b, b_inv):
        # b_inv is inverse of reversed b modulo X^k, for some k > rank(a) - rank(b)
        m = len(a)
        n = len(b)
        if m < n:
            return [cls.ring(0)]

        k = m - n + 1
        q = cls.conv.convolution(a[::-1][:k], b_inv[:k])
        q = q[:k]
        q.extend([cls.ring(0)] * (k - len(q)))
        q.reverse()
        return cls._trim(q)

    @classmethod
    def _fast_rem(cls, a, b, b_inv):
        q = cls._fast_div(a, b, b_inv)
        r = cls._sub(a, cls._mul(b, q))
        assert len(r) < len(a), 'remainder rank must decrease'
        return r

    @classmethod
    def _divmod(cls, a, b):
        q = cls._div(a, b)
        r = cls._sub(a, cls._mul(q, b))
        assert len(r) < len(b) or len(r) == 1 and not r[0], 'remainder rank too large'
        return q, r

    @classmethod
    def _mod(cls, a, b):
        return cls._divmod(a, b)[1]

    def divide_and_remainder(self, other):
        """Divide polynomial by nonzero polynomial with remainder.

        The leading coefficient of the divisor must be invertible.
        """
        cls = type(self)
        other = cls._intern(other)
        q, r = cls._divmod(self.value, other)
        return cls(q, check=False), cls(r, check=False)

    def __floordiv__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._div(self.value, other), check=False)

    def __rfloordiv__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._div(other, self.value), check=False)

    __truediv__ = __floordiv__

    __rtruediv__ = __rfloordiv__

    def __mod__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._mod(self.value, other), check=False)

    def __rmod__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        return cls(cls._mod(other, self.value), check=False)

    def __divmod__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        q, r = cls._divmod(self.value, other)
        return cls(q, check=False), cls(r, check=False)

    def __rdivmod__(self, other):
        cls = type(self)
        other = cls._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        q, r = cls._divmod(other, self.value)
        return cls(q, check=False), cls(r, check=False)

    @classmethod
    def _ln(cls, a, n):
        if a[0] != cls.ring(1):
            raise ValueError('constant term must be 1')

        d = cls._modular(cls._differential(a), n)
        d = cls._modular(cls._mul(d, cls._inverse(a, n)), n)
        return cls._modular(cls._integral(d), n)

    def ln(self, n):
        """Logarithm of power series modulo X^n, for constant term 1."""
        cls = type(self)
        return cls(cls._ln(self.value, n), check=False)

    @classmethod
    def _exp(cls, a, n):
        if n == 0:
            return [cls.ring(0)]

        if a[0]:
            raise ValueError('constant term must be 0')

        return cls._exp_newton(cls._modular(a, n), n)

    @classmethod
    def _exp_newton(cls, a, n):
        # Newton iteration: exp(a) = g (1 + a - ln(g)) mod X^n, for g = exp(a) mod X^ceil(n/2).
        if n == 1:
            return [cls.ring(1)]

        g = cls._exp_newton(a, (n + 1) // 2)
        e = cls._sub(cls._modular(a, n), cls._ln(g, n))
        e[0] = e[0] + cls.ring(1)
        return cls._modular(cls._mul(g, e), n)

    def exp(self, n):
        """Exponential of power series modulo X^n, for constant term 0.

        The zero polynomial is returned for n=0.
        """
        cls = type(self)
        return cls(cls._exp(self.value, n), check=False)

    @classmethod
    def _downgrade_mod(cls, m, e):
        R = cls.ring
        if len(m) == 1:
            if not m[0]:
                raise ZeroDivisionError('division by zero polynomial')

            return [R(0)]

        r = len(m) - 1
        m_inv = cls.conv.inverse(m[::-1], 2*(r-1) + 2)
        a = [R(1)]
        for b in e:
            assert len(a) <= r, 'reduced polynomial rank must stay below modulus rank'
            a = cls._trim(cls.conv.pow2(a))
            if b:
                a = cls._right_shift(a, 1)
            if len(a) > r:
                a = cls._fast_rem(a, m, m_inv)
        return a

    def downgrade_mod(self, e):
        """Return X^k modulo this polynomial, where k is given by iterable e of bits.

        The bits of exponent k are consumed most significant bit first.
        Division by this polynomial is done using a precomputed inverse, hence
        its leading coefficient must be invertible. For a nonzero constant
        polynomial, the zero polynomial is returned.
        """
        cls = type(self)
        return cls(cls._downgrade_mod(self.value, e), check=False)

    @classmethod
    def linear_recurrence(cls, c, a, k):
        """Return term a_k of linear recurrence a_n = c_1 a_{n-1} + ... + c_d a_{n-d}.

        The recurrence is given by coefficients c = [c_1, ... , c_d] and initial
        terms a = [a_0, ... , a_{d-1}], d>=1. Exponent k>=0 may be huge, as X^k
        is computed modulo X^d - c_1 X^{d-1} - ... - c_d using downgrade_mod().
        """
        R = cls.ring
        c = cls._elements(c)
        a = cls._elements(a)
        if not c or len(a) != len(c):
            raise ValueError('d>=1 coefficients and d initial terms required')

        if k < 0:
            raise ValueError('negative index')

        m = [-c_i for c_i in reversed(c)] + [R(1)]
        y = R(0)
        for r_i, a_i in zip(cls._downgrade_mod(cls._trim(m), bits(k)), a):
            y = y + r_i * a_i
        return y

    def __repr__(self):
        return self._to_terms(self.value)

    def __eq__(self, other):
        """Equality test."""
        other = self._coerce(other)
        if other is NotImplemented:
            return False

        return self.value == other

    def __hash__(self):
        """Make polynomials hashable (e.g., for LRU caching)."""
        return hash((type(self).__name__, tuple(self.value)))

    def __bool__(self):
        """Truth value testing.

        Return False if this polynomial is zero, True otherwise.
        """
        return not self.is_zero()
