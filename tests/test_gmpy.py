import unittest
from fpoly import gmpy


class Arithmetic(unittest.TestCase):

    def test_basic(self):
        self.assertFalse(gmpy.is_prime(1))
        self.assertTrue(gmpy.is_prime(2))
        self.assertTrue(gmpy.is_prime(101))
        self.assertFalse(gmpy.is_prime(561))
        self.assertTrue(gmpy.is_prime(998244353))

        self.assertEqual(gmpy.powmod(3, 256, 257), 1)
        self.assertEqual(gmpy.invert(3, 7), 5)
        self.assertRaises(ZeroDivisionError, gmpy.invert, 4, 10)

    def test_two_adic_valuation(self):
        self.assertEqual(gmpy.two_adic_valuation(1), 0)
        self.assertEqual(gmpy.two_adic_valuation(12), 2)
        self.assertEqual(gmpy.two_adic_valuation(2**40), 40)
        self.assertEqual(gmpy.two_adic_valuation(998244352), 23)
        self.assertRaises(ValueError, gmpy.two_adic_valuation, 0)
        self.assertRaises(ValueError, gmpy.two_adic_valuation, -4)

    def test_least_qnr(self):
        self.assertEqual(gmpy.least_qnr(3), 2)
        self.assertEqual(gmpy.least_qnr(7), 3)
        self.assertEqual(gmpy.least_qnr(17), 3)
        self.assertEqual(gmpy.least_qnr(998244353), 3)
        for p in (5, 11, 13, 101, 257):
            a = gmpy.least_qnr(p)
            self.assertEqual(gmpy.legendre(a, p), -1)
            for b in range(1, a):
                self.assertEqual(gmpy.legendre(b, p), 1)


if __name__ == "__main__":
    unittest.main()
