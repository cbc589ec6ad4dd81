import unittest

import numpy as np

from keyopt.domain._errors import DimensionMismatchError
from keyopt.domain.utils._size_checks import (
    check_same_dimensionality,
    check_same_sizes,
)


class TestCheckSameSizes(unittest.TestCase):
    def test_matching_int_size_passes(self):
        check_same_sizes(np.zeros((2, 3)), 6, "caller")

    def test_matching_array_size_passes(self):
        check_same_sizes(np.zeros(6), np.ones((3, 2)), "caller")

    def test_numpy_integer_size_is_accepted(self):
        check_same_sizes(np.zeros(4), np.int64(4), "caller")

    def test_mismatch_raises_with_message_and_attributes(self):
        with self.assertRaises(DimensionMismatchError) as ctx:
            check_same_sizes(np.zeros(3), 2, "IQN", "iterate elements")

        err = ctx.exception
        self.assertEqual(err.expected, 2)
        self.assertEqual(err.actual, 3)
        self.assertIn("IQN: number of elements (3)", str(err))
        self.assertIn("iterate elements (2)", str(err))

    def test_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            check_same_sizes(np.zeros(3), 4, "caller")


class TestCheckSameDimensionality(unittest.TestCase):
    def test_matching_rows_pass(self):
        check_same_dimensionality(np.zeros((3, 10)), 3, "caller")

    def test_matching_array_rows_pass(self):
        check_same_dimensionality(np.zeros((3, 10)), np.zeros((3, 1)), "caller")

    def test_mismatch_raises(self):
        with self.assertRaises(DimensionMismatchError) as ctx:
            check_same_dimensionality(np.zeros((4, 10)), 3, "Model", "predictors")

        self.assertIn("dimensionality of predictors (4)", str(ctx.exception))
        self.assertIn("the model (3)", str(ctx.exception))
        self.assertEqual(ctx.exception.expected, 3)
        self.assertEqual(ctx.exception.actual, 4)


if __name__ == "__main__":
    unittest.main()
