import random
import unittest
from fractions import Fraction
from fpoly import convolution
from fpoly import finfields


def random_list(ring, n, rnd):
    if ring is Fraction:
        return [Fraction(rnd.randint(-9, 9), rnd.randint(1, 9)) for _ in range(n)]

    return [ring(rnd.randrange(ring.modulus)) for _ in range(n)]


class Arithmetic(unittest.TestCase):

    def setUp(self):
        global f_ntt, f101, Z1000
        f_ntt = finfields.GF(998244353)
        f101 = finfields.GF(101)
        Z1000 = finfields.Zmod(1000)

    def test_factory(self):
        C = convolution.convolution(f_ntt, 'ntt')
        self.assertIs(convolution.convolution(f_ntt, 'ntt'), C)
        self.assertIs(convolution.convolution(f_ntt, convolution.NTT), convolution.convolution(f_ntt, convolution.NTT))
        self.assertTrue(issubclass(C, convolution.NTT))
        self.assertIs(C.ring, f_ntt)
        self.assertEqual(C.__name__, 'NTT[GF(998244353)]')
        self.assertTrue(issubclass(convolution.convolution(f_ntt), convolution.NTT))
        self.assertTrue(issubclass(convolution.convolution(f101), convolution.Karatsuba))
        self.assertTrue(issubclass(convolution.convolution(Z1000), convolution.Karatsuba))
        self.assertTrue(issubclass(convolution.convolution(Fraction), convolution.Karatsuba))
        self.assertRaises(ValueError, convolution.convolution, f_ntt, 'fft')
        self.assertRaises(TypeError, convolution.convolution, f_ntt, 3)
        self.assertRaises(TypeError, convolution.convolution, f_ntt, int)
        self.assertRaises(TypeError, convolution.convolution, Z1000, 'ntt')
        self.assertRaises(TypeError, convolution.convolution, Fraction, 'numpy')
        big = finfields.GF(finfields.find_ntt_prime(62, 20))
        self.assertRaises(ValueError, convolution.convolution, big, 'numpy')

    def test_good_length(self):
        self.assertEqual(convolution.Convolution.good_length(0), 1)
        self.assertEqual(convolution.Convolution.good_length(1), 1)
        self.assertEqual(convolution.Convolution.good_length(5), 8)
        self.assertEqual(convolution.Convolution.good_length(8), 8)
        self.assertEqual(convolution.Convolution.good_length(9), 16)

    def test_small(self):
        for kind in convolution.STRATEGIES:
            C = convolution.convolution(f_ntt, kind)
            self.assertEqual(C.convolution([], [f_ntt(1)]), [0])
            self.assertEqual(C.convolution([f_ntt(1), f_ntt(1)], []), [0])
            self.assertEqual(C.convolution([f_ntt(1), f_ntt(1)], [f_ntt(1), f_ntt(-1)]), [1, 0, -1])
            self.assertEqual(C.pow2([f_ntt(1), f_ntt(1)]), [1, 2, 1])
            self.assertEqual(C.pow2([]), [0])

    def test_prime_field(self):
        rnd = random.Random(1)
        ref = convolution.convolution(f_ntt, 'schoolbook')
        for n, m in ((1, 1), (5, 70), (40, 40), (33, 100), (65, 200), (128, 129)):
            a = random_list(f_ntt, n, rnd)
            b = random_list(f_ntt, m, rnd)
            c = ref.convolution(a, b)
            self.assertEqual(len(c), n + m - 1)
            for kind in ('karatsuba', 'ntt', 'numpy'):
                C = convolution.convolution(f_ntt, kind)
                self.assertEqual(C.convolution(a, b), c)
                self.assertEqual(C.convolution(b, a), c)
                self.assertEqual(C.pow2(a), ref.convolution(a, a))

    def test_large_prime(self):
        rnd = random.Random(2)
        F = finfields.GF(finfields.find_ntt_prime(62, 20))
        a = random_list(F, 50, rnd)
        b = random_list(F, 90, rnd)
        C = convolution.convolution(F, 'ntt')
        self.assertEqual(C.convolution(a, b), convolution.convolution(F, 'schoolbook').convolution(a, b))
        self.assertEqual(C.pow2(b), convolution.convolution(F, 'karatsuba').pow2(b))

    def test_ntt_length(self):
        self.assertEqual(f101.nth, 4)
        f97 = finfields.GF(97)
        self.assertEqual(f97.nth, 32)
        a = [f97(1)] * 40
        self.assertRaises(ValueError, convolution.convolution(f97, 'ntt').convolution, a, a)
        self.assertRaises(ValueError, convolution.convolution(f97, 'numpy').pow2, a)
        c = convolution.convolution(f97, 'karatsuba').convolution(a, a)
        self.assertEqual(c[39], 40)

    def test_other_rings(self):
        rnd = random.Random(3)
        for ring in (Z1000, f101, Fraction):
            ref = convolution.convolution(ring, 'schoolbook')
            C = convolution.convolution(ring, 'karatsuba')
            for n, m in ((3, 4), (10, 100), (50, 70), (64, 64)):
                a = random_list(ring, n, rnd)
                b = random_list(ring, m, rnd)
                self.assertEqual(C.convolution(a, b), ref.convolution(a, b))
                self.assertEqual(C.pow2(b), ref.pow2(b))

    def test_inverse(self):
        rnd = random.Random(4)
        for ring, kinds in ((f_ntt, convolution.STRATEGIES), (f101, ('schoolbook', 'karatsuba')),
                            (Z1000, ('karatsuba',))):
            for kind in kinds:
                C = convolution.convolution(ring, kind)
                for n in (1, 2, 7, 40, 100):
                    a = random_list(ring, n, rnd)
                    a[0] = ring(3)
                    q = C.inverse(a, n)
                    self.assertEqual(len(q), n)
                    self.assertEqual(C.convolution(a, q)[:n], [1] + [0] * (n-1))
        C = convolution.convolution(Fraction)
        self.assertEqual(C.inverse([Fraction(1), Fraction(1)], 4), [1, -1, 1, -1])
        self.assertEqual(C.inverse([Fraction(2)], 3), [Fraction(1, 2), 0, 0])
        C = convolution.convolution(Z1000)
        self.assertRaises(ZeroDivisionError, C.inverse, [Z1000(2), Z1000(1)], 3)


if __name__ == "__main__":
    unittest.main()
