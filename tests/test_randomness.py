import os
import unittest
from collections import Counter

from primetools.error import InvalidArgument
from primetools.number_theory_stuff import bit_length
from primetools.randomness import random_bits, random_range

from sources import ScriptedBytes, seeded


class TestRandomBits(unittest.TestCase):

    def test_exact_bit_length(self):
        rng = seeded(1)
        for bits in list(range(2, 300)) + [255, 256, 257, 1023, 1024, 1025, 2240]:
            for _ in range(20):
                n = random_bits(bits, rng)
                self.assertGreaterEqual(n, 0)
                self.assertEqual(bit_length(n), bits)

    def test_small_sizes_fit(self):
        rng = seeded(2)
        for bits in range(1, 33):
            for _ in range(50):
                self.assertLess(random_bits(bits, rng), 2 ** bits)

    def test_one_bit(self):
        seen = Counter(random_bits(1, os.urandom) for _ in range(2000))
        self.assertEqual(set(seen), {0, 1})

    def test_invalid_bits(self):
        for bits in (0, -1, -64):
            with self.assertRaises(InvalidArgument):
                random_bits(bits, os.urandom)

    def test_scripted_bytes(self):
        # little-endian 0x1234, top bit forced
        self.assertEqual(random_bits(16, ScriptedBytes(b'\x34\x12')), 0x9234)
        # surplus high bits are masked away before the top bit is set
        self.assertEqual(random_bits(4, ScriptedBytes(b'\xf3')), 0b1011)
        self.assertEqual(random_bits(1, ScriptedBytes(b'\xfe')), 0)

    def test_short_read(self):
        with self.assertRaises(InvalidArgument):
            random_bits(64, lambda n: b'\x00')


class TestRandomRange(unittest.TestCase):

    def test_bounds(self):
        rng = seeded(3)
        for low, high in [(0, 1), (0, 2), (5, 6), (-10, 10), (-2 ** 40, -2 ** 39), (2, 2 ** 521 - 1), (-7, 300)]:
            for _ in range(300):
                n = random_range(low, high, rng)
                self.assertTrue(low <= n < high, f"{n} not in [{low}, {high})")

    def test_equal_bounds(self):
        def no_bytes(n):
            raise AssertionError("should not draw")

        for boundary in (0, 1, -5, 2 ** 100):
            self.assertEqual(random_range(boundary, boundary, no_bytes), boundary)

    def test_inverted_bounds(self):
        with self.assertRaises(InvalidArgument):
            random_range(10, 9, os.urandom)

    def test_rejection(self):
        # upper bound 9 -> one byte masked to 4 bits; 15 is rejected, 3 accepted
        rng = ScriptedBytes(b'\x0f\x03')
        self.assertEqual(random_range(0, 10, rng), 3)
        self.assertEqual(rng.pos, 2)
        self.assertEqual(random_range(100, 110, ScriptedBytes(b'\xf9')), 109)

    def test_uniformity(self):
        rng = seeded(4)
        samples = 20000
        counts = Counter(random_range(0, 10, rng) for _ in range(samples))
        expected = samples / 10
        chi_square = sum((counts[i] - expected) ** 2 / expected for i in range(10))
        # 99.9th percentile of chi-square with 9 degrees of freedom
        self.assertLess(chi_square, 27.88)

    def test_every_value_reached(self):
        rng = seeded(5)
        seen = {random_range(-3, 4, rng) for _ in range(1000)}
        self.assertEqual(seen, set(range(-3, 4)))


if __name__ == '__main__':
    unittest.main()
