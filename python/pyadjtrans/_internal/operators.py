"""Algebraic operators on views: products, pseudo-inverse and division.

Products are resolved by an ordered rule table over operand classes. The
first matching rule wins; a rule without a handler marks a combination that
has no algebraic meaning (a row times a row, say) and raises
InvalidOperandShape instead of letting NumPy guess. Combinations no rule
names go to the host kernels on materialized operands.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from . import kernels
from .config import logger
from .dtypes import is_scalar
from .errors import InvalidOperandShape
from .protocols import shape_of
from .vector_semantics import broadcast
from .wrappers import AdjOrTrans, WrapperKind, adjoint, wrap, wrapperop


class OperandClass(enum.Enum):
    SCALAR = "scalar"
    VECTOR = "vector"
    MATRIX = "matrix"
    WRAPPED_VECTOR = "wrapped vector"
    WRAPPED_MATRIX = "wrapped matrix"


@dataclass(frozen=True)
class Operand:
    cls: OperandClass
    kind: WrapperKind | None = None

    @property
    def label(self) -> str:
        if self.kind is None:
            if self.cls is OperandClass.SCALAR:
                return "scalar"
            return f"plain {self.cls.value}"
        noun = "vector" if self.cls is OperandClass.WRAPPED_VECTOR else "matrix"
        return f"{self.kind.value.capitalize()} {noun}"


def classify(x: Any) -> Operand:
    if isinstance(x, AdjOrTrans):
        cls = OperandClass.WRAPPED_VECTOR if x.is_vector else OperandClass.WRAPPED_MATRIX
        return Operand(cls, x.kind)
    if is_scalar(x):
        return Operand(OperandClass.SCALAR)
    shape = shape_of(x)
    if shape is not None and len(shape) == 1:
        return Operand(OperandClass.VECTOR)
    if shape is not None and len(shape) == 2:
        return Operand(OperandClass.MATRIX)
    raise TypeError(f"expected a number, vector or matrix, got {type(x).__name__}")


_S = OperandClass.SCALAR
_V = OperandClass.VECTOR
_M = OperandClass.MATRIX
_WV = OperandClass.WRAPPED_VECTOR
_WM = OperandClass.WRAPPED_MATRIX
_T = WrapperKind.TRANSPOSE
_A = WrapperKind.ADJOINT


@dataclass(frozen=True)
class _Rule:
    name: str
    left: tuple[OperandClass, ...]
    right: tuple[OperandClass, ...]
    handler: Callable[[Any, Any], Any] | None = None
    left_kind: WrapperKind | None = None
    right_kind: WrapperKind | None = None
    same_kind: bool | None = None
    reason: str | None = None

    def matches(self, left: Operand, right: Operand) -> bool:
        if left.cls not in self.left or right.cls not in self.right:
            return False
        if self.left_kind is not None and left.kind is not self.left_kind:
            return False
        if self.right_kind is not None and right.kind is not self.right_kind:
            return False
        if self.same_kind is not None and (left.kind is right.kind) is not self.same_kind:
            return False
        return True


def _is_adjoint(x: AdjOrTrans) -> bool:
    return x.kind is WrapperKind.ADJOINT


def _scale(w: AdjOrTrans, s: Any) -> Any:
    if w.is_vector:
        return broadcast(np.multiply, w, s)
    op = wrapperop(w)
    return op(kernels.scale(op(s), w.parent))


def _row_times_matrix(u: AdjOrTrans, b: Any) -> Any:
    op = wrapperop(u)
    return op(matmul(op(b), u.parent))


_MUL_RULES: tuple[_Rule, ...] = (
    _Rule("transpose-dot", (_WV,), (_V,), lambda u, v: kernels.dotu(u.parent, v), left_kind=_T),
    _Rule("adjoint-dot", (_WV,), (_V,), lambda u, v: kernels.vdot(u.parent, v), left_kind=_A),
    _Rule(
        "outer",
        (_V,),
        (_WV,),
        lambda v, u: kernels.outer(v, u.parent, conjugate=_is_adjoint(u)),
    ),
    _Rule("row-times-row", (_WV,), (_WV,), reason="cannot multiply two row vectors"),
    _Rule("row-times-matrix", (_WV,), (_M,), _row_times_matrix),
    _Rule("row-times-same-kind-matrix", (_WV,), (_WM,), _row_times_matrix, same_kind=True),
    _Rule(
        "row-times-other-kind-matrix",
        (_WV,),
        (_WM,),
        lambda u, b: matmul(u, kernels.to_host(b)),
        same_kind=False,
    ),
    _Rule(
        "adjoint-matrix-times-row",
        (_WM,),
        (_WV,),
        left_kind=_A,
        reason="a matrix times a row vector is only defined for a single-column matrix",
    ),
    _Rule(
        "transpose-matrix-times-adjoint-row",
        (_WM,),
        (_WV,),
        left_kind=_T,
        right_kind=_A,
        reason="a matrix times a row vector is only defined for a single-column matrix",
    ),
    _Rule(
        "wrapped-matrix-times-plain",
        (_WM,),
        (_V, _M),
        lambda a, b: kernels.transposed_matmul(a.parent, b, conjugate=_is_adjoint(a)),
    ),
    _Rule(
        "same-kind-matrices",
        (_WM,),
        (_WM,),
        lambda a, b: wrap(a.kind, matmul(b.parent, a.parent)),
        same_kind=True,
    ),
    _Rule(
        "plain-times-wrapped-matrix",
        (_M,),
        (_WM,),
        lambda a, b: kernels.matmul_transposed(a, b.parent, conjugate=_is_adjoint(b)),
    ),
    _Rule(
        "column-times-column",
        (_V,),
        (_V,),
        reason="cannot multiply two column vectors; put a row view on the left",
    ),
    _Rule("scalar-times-wrapper", (_S,), (_WV, _WM), lambda s, w: _scale(w, s)),
    _Rule("wrapper-times-scalar", (_WV, _WM), (_S,), _scale),
)


def matmul(a: Any, b: Any) -> Any:
    """Algebraic product ``a @ b`` of numbers, vectors, matrices and views.

    A row view times a column is a number (conjugating for Adjoint), a
    column times a row view is a matrix, and a row view times a matrix stays
    a row view. Row times row raises InvalidOperandShape.
    """
    left, right = classify(a), classify(b)
    for rule in _MUL_RULES:
        if rule.matches(left, right):
            logger.debug("matmul: (%s, %s) -> %s", left.label, right.label, rule.name)
            if rule.handler is None:
                raise InvalidOperandShape("matmul", left.label, right.label, rule.reason)
            return rule.handler(a, b)
    logger.debug("matmul: (%s, %s) -> host kernels", left.label, right.label)
    return kernels.matmul(a, b)


def _vector_pinv(v: Any, tol: float) -> Any:
    host = kernels.to_host(v)
    den = kernels.sum_abs2(host)
    # A vector's only singular value is sqrt(den), and tol is relative to it.
    if den == 0 or tol >= 1:
        return adjoint(np.zeros_like(host / 1.0))
    return adjoint(host / den)


def pinv(x: Any, tol: float = 0.0) -> Any:
    """Moore-Penrose pseudo-inverse.

    The pseudo-inverse of a column is a row and vice versa. `tol` is relative
    to the largest singular value.
    """
    operand = classify(x)
    if operand.cls is OperandClass.SCALAR:
        return 0 * x if x == 0 else 1 / x
    if operand.cls is OperandClass.VECTOR:
        return _vector_pinv(x, tol)
    if operand.cls is OperandClass.WRAPPED_VECTOR:
        if operand.kind is WrapperKind.TRANSPOSE:
            # Conjugate first: the pseudo-inverse of a row is its adjoint, scaled.
            return _vector_pinv(kernels.conj(x.parent), tol).parent
        return _vector_pinv(x.parent, tol).parent
    if operand.cls is OperandClass.WRAPPED_MATRIX:
        return wrap(operand.kind, pinv(x.parent, tol))
    return kernels.pinv_matrix(x, tol)


def _divide_by_scalar(x: Any, s: Any) -> Any:
    if isinstance(x, AdjOrTrans):
        if x.is_vector:
            return broadcast(np.true_divide, x, s)
        op = wrapperop(x)
        return op(kernels.to_host(x.parent) / op(s))
    return kernels.to_host(x) / s


def ldiv(a: Any, b: Any) -> Any:
    """Left division ``a \\ b``: the x minimizing ``|a @ x - b|``.

    Square matrices are solved directly, others in the least-squares sense.
    Matrix views are solved through their parents without a copy.
    """
    left, right = classify(a), classify(b)
    logger.debug("ldiv: (%s, %s)", left.label, right.label)
    if left.cls is OperandClass.SCALAR:
        if right.cls is OperandClass.SCALAR:
            return b / a
        return _divide_by_scalar(b, a)
    if left.cls is OperandClass.WRAPPED_VECTOR:
        if right.cls is OperandClass.WRAPPED_VECTOR:
            return matmul(pinv(a), b)
        return kernels.solve(a, b)
    if left.cls is OperandClass.VECTOR:
        return matmul(pinv(a), b)
    if left.cls is OperandClass.WRAPPED_MATRIX and right.cls in (_V, _M):
        return kernels.transposed_solve(a.parent, b, conjugate=_is_adjoint(a))
    if right.cls is OperandClass.SCALAR:
        raise InvalidOperandShape("ldiv", left.label, right.label)
    return kernels.solve(a, b)


def rdiv(a: Any, b: Any) -> Any:
    """Right division ``a / b``: the x with ``x @ b == a``.

    A row view divided by a matrix stays a row view of the same kind. When
    `b` is a view of the other kind, only its parent's conjugate is taken
    instead of copying `b`; the result is the same for numeric elements but
    array-valued elements are not transposed.
    """
    left, right = classify(a), classify(b)
    logger.debug("rdiv: (%s, %s)", left.label, right.label)
    if right.cls is OperandClass.SCALAR:
        if left.cls is OperandClass.SCALAR:
            return a / b
        return _divide_by_scalar(a, b)
    if left.cls is OperandClass.WRAPPED_VECTOR:
        op = wrapperop(a)
        if right.cls is OperandClass.WRAPPED_VECTOR:
            return matmul(a, pinv(b))
        if right.cls is OperandClass.WRAPPED_MATRIX and right.kind is not left.kind:
            return op(ldiv(kernels.conj(b.parent), a.parent))
        if right.cls in (_M, _WM):
            return op(ldiv(op(b), a.parent))
        raise InvalidOperandShape("rdiv", left.label, right.label)
    if left.cls is OperandClass.SCALAR:
        raise InvalidOperandShape("rdiv", left.label, right.label)
    if right.cls is OperandClass.WRAPPED_MATRIX and left.cls in (_V, _M):
        return kernels.right_transposed_solve(a, b.parent, conjugate=_is_adjoint(b))
    return kernels.right_solve(a, b)
