import unittest
import warnings

import numpy as np
import pytest

from pyadjtrans import (
    Adjoint,
    InvalidOperandShape,
    PyAdjTransPerformanceWarning,
    Transpose,
    adjoint,
    ldiv,
    matmul,
    pinv,
    rdiv,
    transpose,
)


@pytest.fixture(autouse=True)
def _quiet_fallbacks():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", PyAdjTransPerformanceWarning)
        yield


class TestDotProducts(unittest.TestCase):
    def test_transpose_row_times_column(self):
        u = np.array([1, 2, 3])
        v = np.array([4, 5, 6])
        self.assertEqual(transpose(u) @ v, 32)
        self.assertEqual(matmul(transpose(u), v), 32)

    def test_adjoint_row_conjugates(self):
        u = np.array([1 + 1j, 2])
        self.assertEqual(adjoint(u) @ np.array([1, 1]), 3 - 1j)

    def test_transpose_row_does_not_conjugate(self):
        u = np.array([1 + 1j, 2])
        self.assertEqual(transpose(u) @ np.array([1, 1j]), 1 + 3j)
        self.assertEqual(adjoint(u) @ np.array([1, 1j]), 1 + 1j)

    def test_row_times_row_is_rejected(self):
        u = np.array([1, 2, 3])
        v = np.array([4, 5, 6])
        with self.assertRaises(InvalidOperandShape) as ctx:
            transpose(u) @ transpose(v)
        self.assertEqual(ctx.exception.left, "Transpose vector")
        self.assertEqual(ctx.exception.right, "Transpose vector")
        self.assertIsInstance(ctx.exception, TypeError)
        with self.assertRaises(InvalidOperandShape):
            adjoint(u) @ transpose(v)

    def test_column_times_column_is_rejected(self):
        with self.assertRaises(InvalidOperandShape):
            matmul(np.array([1, 2]), np.array([3, 4]))


class TestProducts(unittest.TestCase):
    def setUp(self):
        self.A = np.array([[1, 2], [3, 4]])
        self.u = np.array([1, 2])

    def test_column_times_row_is_outer_product(self):
        out = np.array([1, 2]) @ transpose(np.array([3, 4]))
        np.testing.assert_array_equal(out, [[3, 4], [6, 8]])
        out = np.array([1, 2]) @ adjoint(np.array([1j, 1]))
        np.testing.assert_array_equal(out, [[-1j, 1], [-2j, 2]])

    def test_row_times_matrix_stays_row(self):
        r = transpose(self.u) @ self.A
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [7, 10])

    def test_adjoint_row_times_complex_matrix(self):
        u = np.array([1j, 1])
        C = np.array([[1, 0], [0, 1j]])
        r = adjoint(u) @ C
        self.assertIsInstance(r, Adjoint)
        self.assertEqual(r[0, 0], -1j)
        self.assertEqual(r[0, 1], 1j)

    def test_row_times_same_kind_matrix(self):
        r = transpose(self.u) @ transpose(self.A)
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [5, 11])

    def test_row_times_other_kind_matrix(self):
        with pytest.warns(PyAdjTransPerformanceWarning):
            r = transpose(self.u) @ adjoint(self.A)
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [5, 11])

    def test_matrix_view_times_row_is_rejected(self):
        with self.assertRaises(InvalidOperandShape):
            adjoint(self.A) @ transpose(self.u)
        with self.assertRaises(InvalidOperandShape):
            transpose(self.A) @ adjoint(self.u)

    def test_matrix_view_times_column(self):
        np.testing.assert_array_equal(transpose(self.A) @ self.u, [7, 10])
        C = np.array([[1j, 2], [0, 1]])
        np.testing.assert_allclose(adjoint(C) @ np.array([1, 1]), C.conj().T @ [1, 1])

    def test_same_kind_matrix_views(self):
        B = np.array([[0, 1], [1, 0]])
        r = transpose(self.A) @ transpose(B)
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, B @ self.A)

    def test_plain_matrix_times_matrix_view(self):
        B = np.array([[0, 1], [2, 0]])
        np.testing.assert_array_equal(self.A @ transpose(B), self.A @ B.T)
        C = np.array([[1j, 2], [0, 1]])
        np.testing.assert_allclose(self.A @ adjoint(C), self.A @ C.conj().T)

    def test_scalar_times_views(self):
        r = matmul(2, transpose(self.u))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_array_equal(r.parent, [2, 4])

        C = np.array([[1 + 1j, 2], [3, 4j]])
        s = matmul(adjoint(C), 1j)
        self.assertIsInstance(s, Adjoint)
        self.assertEqual(s[0, 1], 3j)
        self.assertEqual(s[1, 1], 4)

    def test_plain_column_matrix_times_row(self):
        out = matmul(np.array([[1], [2]]), transpose(np.array([3, 4])))
        np.testing.assert_array_equal(out, [[3, 4], [6, 8]])

    def test_plain_operands_use_host_product(self):
        np.testing.assert_array_equal(matmul(self.A, self.u), [5, 11])
        self.assertEqual(matmul(2, 3), 6)

    def test_unsupported_operand(self):
        with self.assertRaises(TypeError):
            matmul(transpose(self.u), "abc")


class TestPseudoInverse(unittest.TestCase):
    def test_plain_vector(self):
        p = pinv(np.array([3.0, 4.0]))
        self.assertIsInstance(p, Adjoint)
        np.testing.assert_allclose(p.parent, [0.12, 0.16])

    def test_zero_vector(self):
        p = pinv(np.zeros(2))
        self.assertIsInstance(p, Adjoint)
        np.testing.assert_array_equal(p.parent, [0.0, 0.0])

    def test_tolerance_at_or_above_one_gives_zeros(self):
        p = pinv(np.array([3.0, 4.0]), tol=1.0)
        np.testing.assert_array_equal(p.parent, [0.0, 0.0])

    def test_row_views(self):
        np.testing.assert_allclose(pinv(transpose(np.array([3.0, 4.0]))), [0.12, 0.16])
        np.testing.assert_allclose(pinv(transpose(np.array([1j, 0]))), [-1j, 0])
        np.testing.assert_allclose(pinv(adjoint(np.array([1j, 0]))), [1j, 0])

    def test_row_times_its_pinv_is_one(self):
        u = np.array([1 + 2j, 3, -1j])
        for w in (transpose(u), adjoint(u)):
            self.assertAlmostEqual(w @ pinv(w), 1.0)

    def test_matrices(self):
        A = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        np.testing.assert_allclose(pinv(A), np.linalg.pinv(A))
        p = pinv(transpose(A))
        self.assertIsInstance(p, Transpose)
        np.testing.assert_allclose(p.parent, np.linalg.pinv(A))

    def test_scalars(self):
        self.assertEqual(pinv(2.0), 0.5)
        self.assertEqual(pinv(0), 0)


class TestDivision(unittest.TestCase):
    def test_ldiv_of_rows(self):
        out = ldiv(transpose(np.array([3.0, 4.0])), transpose(np.array([1.0, 2.0])))
        np.testing.assert_allclose(out, [[0.12, 0.24], [0.16, 0.32]])

    def test_ldiv_square_and_least_squares(self):
        D = np.array([[2.0, 0.0], [0.0, 4.0]])
        np.testing.assert_allclose(ldiv(D, np.array([2.0, 4.0])), [1.0, 1.0])
        np.testing.assert_allclose(ldiv(np.array([[1.0], [1.0]]), np.array([1.0, 3.0])), [2.0])

    def test_ldiv_through_matrix_view(self):
        A = np.array([[1.0, 2.0], [0.0, 1.0]])
        np.testing.assert_allclose(ldiv(transpose(A), np.array([1.0, 4.0])), [1.0, 2.0])
        C = np.array([[1.0, 1j], [0.0, 2.0]])
        b = np.array([1.0, 1.0])
        np.testing.assert_allclose(ldiv(adjoint(C), b), np.linalg.solve(C.conj().T, b))

    def test_ldiv_by_scalar(self):
        r = ldiv(2, transpose(np.array([2.0, 4.0])))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_allclose(r.parent, [1.0, 2.0])

    def test_rdiv_row_by_matrix(self):
        A = np.array([[1.0, 2.0], [0.0, 1.0]])
        r = transpose(np.array([1.0, 2.0])) / A
        self.assertIsInstance(r, Transpose)
        np.testing.assert_allclose(r.parent, [1.0, 0.0])

    def test_rdiv_row_by_same_kind_matrix(self):
        A = np.array([[1.0, 2.0], [0.0, 1.0]])
        r = rdiv(transpose(np.array([1.0, 2.0])), transpose(A))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_allclose(r.parent, [-3.0, 2.0])

    def test_rdiv_row_by_other_kind_matrix(self):
        u = np.array([1.0, 1j])
        P = np.array([[1.0, 1j], [0.0, 1.0]])
        r = rdiv(transpose(u), adjoint(P))
        self.assertIsInstance(r, Transpose)
        np.testing.assert_allclose(r.parent, np.linalg.solve(P.conj(), u))
        # x @ P^H reproduces the row
        np.testing.assert_allclose(r.parent @ P.conj().T, u)

    def test_rdiv_adjoint_row_by_transpose_matrix(self):
        u = np.array([1.0, 1j])
        P = np.array([[2.0, 1j], [0.0, 1.0]])
        r = rdiv(adjoint(u), transpose(P))
        self.assertIsInstance(r, Adjoint)
        logical = np.array([r[0, 0], r[0, 1]])
        np.testing.assert_allclose(logical @ P.T, u.conj())

    def test_rdiv_matrix_by_matrix_view(self):
        A = np.array([[1.0, 2.0], [0.0, 1.0]])
        a = 2 * np.eye(2)
        np.testing.assert_allclose(rdiv(a, transpose(A)), a @ np.linalg.inv(A.T))
        np.testing.assert_allclose(rdiv(a, A), a @ np.linalg.inv(A))

    def test_rdiv_by_scalar_and_row(self):
        r = rdiv(transpose(np.array([1.0, 2.0])), 2)
        self.assertIsInstance(r, Transpose)
        np.testing.assert_allclose(r.parent, [0.5, 1.0])
        u = np.array([1.0, 2.0])
        self.assertAlmostEqual(rdiv(transpose(u), transpose(u)), 1.0)

    def test_rdiv_scalar_by_matrix_is_rejected(self):
        with self.assertRaises(InvalidOperandShape):
            rdiv(2, np.eye(2))


def test_rule_table_shorthands_stay_private():
    from pyadjtrans._internal import operators

    public = {name for name in vars(operators) if not name.startswith("_")}
    assert public.isdisjoint({"S", "V", "M", "WV", "WM", "T", "A"})
    assert operators._WV is operators.OperandClass.WRAPPED_VECTOR
