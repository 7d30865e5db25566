import math
import unittest

import numpy as np

import gen_sinusize_lut as lut


class TestGenerateSamples(unittest.TestCase):

    def test_endpoints_are_exact(self):
        samples = lut.generate_samples(512)
        self.assertEqual(samples[0], 0.0)
        self.assertEqual(samples[-1], 1.0)

    def test_midpoint_of_odd_grid(self):
        # Not a valid table size, but t=0 lands exactly on the middle sample
        samples = lut.generate_samples(5)
        self.assertAlmostEqual(samples[2], 0.5)

    def test_matches_scalar_formula(self):
        n = 16
        samples = lut.generate_samples(n)
        for i in range(n):
            t = -1.0 + i * 2 / (n - 1)
            expected = (math.asin(t) * 2 / math.pi + 1) / 2
            self.assertAlmostEqual(samples[i], expected, places=12)


class TestEncoder(unittest.TestCase):

    def test_round_half_up(self):
        self.assertEqual(int(lut.to_fix16(0.5)), 32768)
        self.assertEqual(int(lut.to_fix16(1.5 / 65536)), 2)
        self.assertEqual(int(lut.to_fix16(0.4 / 65536)), 0)

    def test_one_is_clamped(self):
        self.assertEqual(int(lut.to_fix16(1.0)), 65536)
        self.assertEqual(list(lut.encode_samples([1.0])), [65535])

    def test_no_lower_clamp(self):
        self.assertEqual(list(lut.encode_samples([-1.0 / 65536])), [-1])

    def test_custom_scale(self):
        self.assertEqual(list(lut.encode_samples([0.0, 0.5, 1.0], scale=256, max_value=255)),
                         [0, 128, 255])


class TestBuildTable(unittest.TestCase):

    def setUp(self):
        self.table = lut.build_table()

    def test_length(self):
        self.assertEqual(len(self.table), 512)

    def test_range(self):
        self.assertTrue(np.all(self.table >= 0))
        self.assertTrue(np.all(self.table <= 65535))

    def test_monotonic(self):
        self.assertTrue(np.all(np.diff(self.table) >= 0))

    def test_boundaries(self):
        self.assertEqual(int(self.table[0]), 0)
        self.assertEqual(int(self.table[-1]), 65535)

    def test_roughly_symmetric(self):
        for i in range(1, 511):
            self.assertLessEqual(abs(int(self.table[i]) + int(self.table[511 - i]) - 65536), 1)

    def test_golden_size_4(self):
        table = lut.build_table(lut.TableConfig(table_size=4))
        self.assertEqual([int(v) for v in table], [0, 25679, 39857, 65535])

    def test_size_2(self):
        table = lut.build_table(lut.TableConfig(table_size=2))
        self.assertEqual([int(v) for v in table], [0, 65535])


class TestTableConfig(unittest.TestCase):

    def test_defaults(self):
        config = lut.TableConfig()
        self.assertEqual(config.table_size, 512)
        self.assertEqual(config.scale, 65536)
        self.assertEqual(config.max_value, 65535)

    def test_rejects_non_power_of_two(self):
        for size in (0, 1, 3, 500, -4):
            with self.assertRaises(ValueError):
                lut.TableConfig(table_size=size)
