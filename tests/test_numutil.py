"""Test numutil."""

import unittest

from .context import commitsize  # noqa: F401

from commitsize import numutil  # noqa: I100


class TestParseCount(unittest.TestCase):
    """Test numutil.parse_count."""

    def test_valid(self):
        self.assertEqual(numutil.parse_count('42'), 42)
        self.assertEqual(numutil.parse_count(' 7\n'), 7)
        self.assertEqual(numutil.parse_count(b'13\n'), 13)
        self.assertEqual(numutil.parse_count(0), 0)
        self.assertEqual(numutil.parse_count(5), 5)

    def test_invalid(self):
        for value in ('', 'abc', '-3', '1.5', '12 34', None, b'', -5, True):
            with self.subTest(value=value):
                self.assertEqual(numutil.parse_count(value), 0)

    def test_default(self):
        self.assertEqual(numutil.parse_count('oops', default=9), 9)
        self.assertEqual(numutil.parse_count('3', default=9), 3)


class TestSafeAdd(unittest.TestCase):
    """Test numutil.safe_add."""

    def test_safe_add(self):
        self.assertEqual(numutil.safe_add(), 0)
        self.assertEqual(numutil.safe_add(1, '2', b'3'), 6)
        self.assertEqual(numutil.safe_add('1', None, 'x', -10, 2), 3)


class TestFormatSize(unittest.TestCase):
    """Test numutil.format_size."""

    def test_bytes(self):
        self.assertEqual(numutil.format_size(0), '0 B')
        self.assertEqual(numutil.format_size(1), '1 B')
        self.assertEqual(numutil.format_size(1023), '1023 B')

    def test_units(self):
        self.assertEqual(numutil.format_size(1024), '1.00 KB')
        self.assertEqual(numutil.format_size(1536), '1.50 KB')
        self.assertEqual(numutil.format_size(10240), '10.00 KB')
        self.assertEqual(numutil.format_size(1024 * 1024), '1.00 MB')
        self.assertEqual(numutil.format_size(5 * 1024 * 1024 + 512 * 1024), '5.50 MB')
        self.assertEqual(numutil.format_size(3 * 1024 ** 3), '3.00 GB')
        # GB is the largest unit
        self.assertEqual(numutil.format_size(1024 ** 4), '1024.00 GB')

    def test_truncated(self):
        self.assertEqual(numutil.format_size(1048575), '1023.99 KB')
        self.assertEqual(numutil.format_size(1024 ** 3 - 1), '1023.99 MB')
        self.assertEqual(numutil.format_size(4000), '3.90 KB')
        self.assertEqual(numutil.format_size(2047), '1.99 KB')

    def test_largest_unit(self):
        for k, unit in ((1, 'KB'), (2, 'MB'), (3, 'GB')):
            with self.subTest(unit=unit):
                self.assertTrue(numutil.format_size(1024 ** k).endswith(' ' + unit))
                self.assertFalse(numutil.format_size(1024 ** k - 1).endswith(' ' + unit))

    def test_not_a_number(self):
        self.assertEqual(numutil.format_size('junk'), '0 B')
        self.assertEqual(numutil.format_size(None), '0 B')
