import unittest
import warnings

import numpy as np
import pytest

from pyadjtrans import (
    Adjoint,
    DimensionMismatch,
    PyAdjTransPerformanceWarning,
    Transpose,
    adjoint,
    broadcast,
    hcat,
    map_elements,
    transpose,
    typed_hcat,
    vcat,
)


class TestConcatenation(unittest.TestCase):
    def test_hcat_of_rows_is_vcat_of_parents(self):
        p1 = np.array([1, 2])
        p2 = np.array([3])
        h = hcat(transpose(p1), transpose(p2))
        self.assertIsInstance(h, Transpose)
        self.assertEqual(h.shape, (1, 3))
        np.testing.assert_array_equal(h.parent, np.concatenate([p1, p2]))

    def test_hcat_mixes_in_numbers(self):
        h = hcat(transpose(np.array([1, 2])), 5)
        self.assertIsInstance(h, Transpose)
        np.testing.assert_array_equal(h.parent, [1, 2, 5])

    def test_hcat_adjoint_rows_keep_numbers_unchanged(self):
        c = np.array([1 + 1j, 2])
        h = hcat(adjoint(c), 3j)
        self.assertIsInstance(h, Adjoint)
        self.assertEqual(h[0, 0], 1 - 1j)
        self.assertEqual(h[0, 2], 3j)
        np.testing.assert_array_equal(h.parent, [1 + 1j, 2, -3j])

    def test_hcat_of_mixed_kinds_is_plain(self):
        with pytest.warns(PyAdjTransPerformanceWarning):
            h = hcat(transpose(np.array([1, 2])), adjoint(np.array([3])))
        self.assertIsInstance(h, np.ndarray)
        np.testing.assert_array_equal(h, [[1, 2, 3]])

    def test_hcat_of_plain_matrices(self):
        h = hcat(np.eye(2), np.ones((2, 1)))
        self.assertEqual(h.shape, (2, 3))

    def test_hcat_requires_arguments(self):
        with self.assertRaises(ValueError):
            hcat()

    def test_typed_hcat_fixes_element_type(self):
        h = typed_hcat(np.float64, transpose(np.array([1, 2])), transpose(np.array([3])))
        self.assertIsInstance(h, Transpose)
        self.assertEqual(h.dtype, np.dtype(np.float64))
        np.testing.assert_array_equal(h.parent, [1.0, 2.0, 3.0])

    def test_typed_hcat_rejects_unknown_element_type(self):
        with self.assertRaises(TypeError):
            typed_hcat("bogus", transpose(np.array([1, 2])))
        with self.assertRaises(TypeError):
            typed_hcat("bogus", np.eye(2), np.ones((2, 1)))

    def test_vcat_rejects_unknown_element_type(self):
        with self.assertRaises(TypeError):
            vcat(np.array([1]), dtype="bogus")
        with self.assertRaises(TypeError):
            vcat(np.eye(2), np.ones((1, 2)), dtype="bogus")

    def test_vcat_of_vectors_and_numbers(self):
        np.testing.assert_array_equal(vcat(np.array([1, 2]), 4), [1, 2, 4])

    def test_vcat_of_matrix_and_row(self):
        with pytest.warns(PyAdjTransPerformanceWarning):
            out = vcat(np.eye(2), transpose(np.array([5.0, 6.0])))
        np.testing.assert_array_equal(out, [[1, 0], [0, 1], [5, 6]])

    def test_vcat_mismatch(self):
        with self.assertRaises(DimensionMismatch):
            vcat(np.eye(2), np.ones((1, 3)))


class TestMapElements(unittest.TestCase):
    def test_map_keeps_transpose_row(self):
        r = map_elements(lambda x: x * 2, transpose(np.array([1, 2])))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [2, 4])

    def test_map_sees_logical_adjoint_values(self):
        c = np.array([1 + 1j, 2j])
        seen = []

        def f(x):
            seen.append(x)
            return x * 1j

        r = map_elements(f, adjoint(c))
        self.assertIsInstance(r, Adjoint)
        self.assertEqual(seen, [1 - 1j, -2j])
        self.assertEqual(r[0, 0], 1 + 1j)
        self.assertEqual(r[0, 1], 2)

    def test_map_over_two_rows(self):
        r = map_elements(
            lambda a, b: a + b, transpose(np.array([1, 2])), transpose(np.array([10, 20]))
        )
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [11, 22])

    def test_map_length_mismatch(self):
        with self.assertRaises(DimensionMismatch):
            map_elements(lambda a, b: a + b, transpose(np.arange(2)), transpose(np.arange(3)))

    def test_map_over_plain_vector(self):
        r = map_elements(lambda x: x + 1, np.array([1, 2]))
        self.assertIsInstance(r, np.ndarray)
        np.testing.assert_array_equal(r, [2, 3])


class TestBroadcast(unittest.TestCase):
    def test_ufunc_keeps_row(self):
        r = broadcast(np.multiply, transpose(np.array([1, 2])), 3)
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [3, 6])

    def test_python_callable_keeps_row(self):
        r = broadcast(lambda x: x + 1, transpose(np.array([1, 2])))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [2, 3])

    def test_adjoint_row_with_number(self):
        c = np.array([1 + 1j, 2])
        r = broadcast(np.add, adjoint(c), 1j)
        self.assertIsInstance(r, Adjoint)
        self.assertEqual(r[0, 0], 1)
        self.assertEqual(r[0, 1], 2 + 1j)

    def test_adjoint_row_with_python_callable(self):
        c = np.array([1 + 1j, 2])
        r = broadcast(lambda x, y: x * y, adjoint(c), 2)
        self.assertIsInstance(r, Adjoint)
        self.assertEqual(r[0, 0], 2 - 2j)
        self.assertEqual(r[0, 1], 4)

    def test_python_operators(self):
        u = np.array([1, 2])
        t = transpose(u)
        np.testing.assert_array_equal((t * 2).parent, [2, 4])
        np.testing.assert_array_equal((2 * t).parent, [2, 4])
        np.testing.assert_array_equal((t + t).parent, [2, 4])
        np.testing.assert_array_equal((-t).parent, [-1, -2])
        np.testing.assert_array_equal((2 - t).parent, [1, 0])
        np.testing.assert_allclose((t / 2).parent, [0.5, 1.0])
        self.assertIsInstance(t + 1, Transpose)

    def test_numpy_ufuncs_route_through_broadcast(self):
        r = np.sqrt(transpose(np.array([4.0, 9.0])))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_allclose(r.parent, [2.0, 3.0])
        self.assertIsInstance(np.multiply(transpose(np.array([1, 2])), 2), Transpose)

    def test_column_times_row_is_outer(self):
        with pytest.warns(PyAdjTransPerformanceWarning):
            r = broadcast(np.multiply, np.array([1, 2]), transpose(np.array([3, 4])))
        np.testing.assert_array_equal(r, [[3, 4], [6, 8]])

    def test_mixed_kinds_fall_back(self):
        u = np.array([1, 2])
        with pytest.warns(PyAdjTransPerformanceWarning):
            r = broadcast(np.add, transpose(u), adjoint(u))
        self.assertIsInstance(r, np.ndarray)
        np.testing.assert_array_equal(r, [[2, 4]])

    def test_plain_vectors_stay_one_dimensional(self):
        r = broadcast(np.add, np.array([1, 2]), np.array([10, 20]))
        self.assertEqual(r.shape, (2,))

    def test_length_mismatch(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", PyAdjTransPerformanceWarning)
            with self.assertRaises(DimensionMismatch):
                broadcast(np.add, transpose(np.arange(2)), transpose(np.arange(3)))


class TestComparison(unittest.TestCase):
    def test_rows_compare_element_wise(self):
        r = transpose(np.array([1, 2])) == transpose(np.array([1, 3]))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [True, False])

    def test_not_equal(self):
        u = np.array([1, 2])
        r = transpose(u) != transpose(u.copy())
        self.assertIsInstance(r, Transpose)
        self.assertFalse(r.parent.any())

    def test_compare_with_number(self):
        r = transpose(np.array([2, 5])) == 5
        np.testing.assert_array_equal(r.parent, [False, True])

    def test_array_on_the_left(self):
        with pytest.warns(PyAdjTransPerformanceWarning):
            r = np.array([[1, 2]]) == transpose(np.array([1, 2]))
        np.testing.assert_array_equal(r, [[True, True]])

    def test_unrelated_objects_are_not_equal(self):
        t = transpose(np.array([1, 2]))
        self.assertFalse(t == None)  # noqa: E711
        self.assertTrue(t != "row")

    def test_views_are_unhashable(self):
        with self.assertRaises(TypeError):
            hash(transpose(np.array([1, 2])))
