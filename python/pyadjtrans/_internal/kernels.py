"""Host numeric layer.

Every function here takes already-unwrapped operands. NumPy arrays go straight
to NumPy; any other container satisfying the capability interface is read
element by element into a host array first (slow, warned about).

Vectors follow column semantics: a 1-D operand on the left of a matrix
product is an n x 1 column.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable

import numpy as np

from . import config
from .dtypes import conj_scalar, is_scalar, require_dtype
from .errors import DimensionMismatch
from .protocols import element_dtype, read, shape_of


def _wrapper_types() -> tuple[Any, Any]:
    from .wrappers import AdjOrTrans, WrapperKind

    return AdjOrTrans, WrapperKind


def _read_all(obj: Any, shape: tuple[int, ...]) -> list[Any]:
    if len(shape) == 1:
        return [read(obj, i) for i in range(shape[0])]
    return [[read(obj, i, j) for j in range(shape[1])] for i in range(shape[0])]


def from_values(values: list[Any], dtype: Any = None) -> np.ndarray:
    """Build a 1-D host array from computed element values."""
    if all(is_scalar(v) for v in values):
        return np.asarray(values, dtype=require_dtype(dtype))
    # Array-valued elements stay boxed so the result keeps one axis.
    out = np.empty(len(values), dtype=object)
    for i, v in enumerate(values):
        out[i] = v
    return out


def to_host(obj: Any) -> np.ndarray:
    """Return a NumPy array holding the logical contents of `obj`.

    NumPy arrays are returned as-is. Views and other containers are copied.
    """
    if isinstance(obj, np.ndarray):
        return obj
    if is_scalar(obj):
        return np.asarray(obj)

    AdjOrTrans, WrapperKind = _wrapper_types()
    if isinstance(obj, AdjOrTrans):
        config.report_fallback("materialize", f"copying {obj!r} into a host array", stacklevel=4)
        parent = to_host(obj.parent)
        logical = parent.reshape(1, -1) if obj.is_vector else parent.T
        if obj.kind is WrapperKind.ADJOINT:
            return np.conj(logical)
        return np.array(logical)

    shape = shape_of(obj)
    if shape is None or len(shape) not in (1, 2):
        raise TypeError(f"expected a vector or matrix-like object, got {type(obj).__name__}")
    config.report_fallback(
        "to_host", f"reading {type(obj).__name__} element by element", stacklevel=4
    )
    return np.array(_read_all(obj, shape), dtype=element_dtype(obj))


def _as_column(array: np.ndarray) -> np.ndarray:
    return array.reshape(-1, 1) if array.ndim == 1 else array


def _check_inner(op: str, left: int, right: int) -> None:
    if left != right:
        raise DimensionMismatch(
            f"{op}: inner dimensions differ ({left} vs {right})", expected=left, actual=right
        )


def _check_lengths(op: str, x: np.ndarray, y: np.ndarray) -> None:
    if x.shape != y.shape:
        raise DimensionMismatch(
            f"{op}: vector lengths differ ({x.shape[0]} vs {y.shape[0]})",
            expected=x.shape,
            actual=y.shape,
        )


def dotu(x: Any, y: Any) -> Any:
    """Inner product of two vectors without conjugating either side."""
    xh, yh = to_host(x), to_host(y)
    _check_lengths("dot", xh, yh)
    return np.dot(xh, yh)


def vdot(x: Any, y: Any) -> Any:
    """Inner product conjugating the left vector."""
    xh, yh = to_host(x), to_host(y)
    _check_lengths("dot", xh, yh)
    return np.vdot(xh, yh)


def scale(s: Any, x: Any) -> Any:
    if is_scalar(x):
        return s * x
    return s * to_host(x)


def conj(x: Any) -> Any:
    if is_scalar(x):
        return conj_scalar(x)
    return np.conj(to_host(x))


def sum_abs2(x: Any) -> float:
    h = to_host(x)
    return float(np.vdot(h, h).real)


def matmul(a: Any, b: Any) -> Any:
    """Plain product a @ b, column semantics for a 1-D left operand."""
    if is_scalar(a) or is_scalar(b):
        return scale(a, b) if is_scalar(a) else scale(b, a)
    ah, bh = to_host(a), to_host(b)
    if ah.ndim == 1 and bh.ndim == 2:
        ah = _as_column(ah)
    _check_inner("matmul", ah.shape[-1], bh.shape[0])
    return ah @ bh


def transposed_matmul(a: Any, b: Any, *, conjugate: bool) -> np.ndarray:
    """op(a) @ b where op is transpose, or adjoint when `conjugate` is set.

    Only a transposed view of `a` is used; `a` itself is never copied.
    """
    ah, bh = to_host(a), to_host(b)
    _check_inner("matmul", ah.shape[0], bh.shape[0])
    if conjugate:
        return np.conj(ah.T @ np.conj(bh))
    return ah.T @ bh


def matmul_transposed(a: Any, b: Any, *, conjugate: bool) -> np.ndarray:
    """a @ op(b) where op is transpose, or adjoint when `conjugate` is set."""
    ah, bh = to_host(a), to_host(b)
    if ah.ndim == 1:
        ah = _as_column(ah)
    _check_inner("matmul", ah.shape[-1], bh.shape[1])
    if conjugate:
        return np.conj(np.conj(ah) @ bh.T)
    return ah @ bh.T


def solve(a: Any, b: Any) -> np.ndarray:
    """Solve a @ x = b; least squares when `a` is not square."""
    ah, bh = to_host(a), to_host(b)
    _check_inner("solve", ah.shape[0], bh.shape[0])
    if ah.shape[0] == ah.shape[1]:
        return np.linalg.solve(ah, bh)
    return np.linalg.lstsq(ah, bh, rcond=None)[0]


def transposed_solve(a: Any, b: Any, *, conjugate: bool) -> np.ndarray:
    """Solve op(a) @ x = b through a transposed view of `a`."""
    ah, bh = to_host(a), to_host(b)
    if conjugate:
        return np.conj(solve(ah.T, np.conj(bh)))
    return solve(ah.T, bh)


def right_solve(a: Any, b: Any) -> np.ndarray:
    """Solve x @ b = a."""
    ah, bh = to_host(a), to_host(b)
    return solve(bh.T, ah.T).T


def right_transposed_solve(a: Any, b: Any, *, conjugate: bool) -> np.ndarray:
    """Solve x @ op(b) = a by solving against `b` itself."""
    ah, bh = to_host(a), to_host(b)
    if conjugate:
        return np.conj(solve(bh, np.conj(ah).T)).T
    return solve(bh, ah.T).T


def outer(x: Any, y: Any, *, conjugate: bool) -> np.ndarray:
    """Outer product of two vectors, conjugating `y` when asked."""
    xh, yh = to_host(x), to_host(y)
    return np.multiply.outer(xh, np.conj(yh) if conjugate else yh)


def pinv_matrix(a: Any, tol: float = 0.0) -> np.ndarray:
    ah = to_host(a)
    if tol:
        return np.linalg.pinv(ah, rcond=tol)
    return np.linalg.pinv(ah)


def empty_like(parent: Any, dtype: Any = None, shape: tuple[int, ...] | None = None) -> Any:
    """Fresh uninitialised container resembling `parent`."""
    similar_fn = getattr(parent, "similar", None)
    if callable(similar_fn):
        return similar_fn(dtype, shape)
    target_dtype = require_dtype(dtype)
    if target_dtype is None:
        target_dtype = element_dtype(parent)
    target_shape = shape_of(parent) if shape is None else tuple(shape)
    return np.empty(target_shape, dtype=target_dtype)


def astype(parent: Any, dtype: Any) -> Any:
    astype_fn = getattr(parent, "astype", None)
    if callable(astype_fn):
        return astype_fn(dtype)
    return to_host(parent).astype(dtype)


def copy_container(parent: Any) -> Any:
    copy_fn = getattr(parent, "copy", None)
    if callable(copy_fn):
        return copy_fn()
    return copy.deepcopy(parent)


def vcat_vectors(parts: Iterable[Any], dtype: Any = None) -> np.ndarray:
    """Stack scalars and vectors into one column vector."""
    target = require_dtype(dtype)
    pieces = [np.atleast_1d(to_host(p)) for p in parts]
    if not pieces:
        raise ValueError("vcat requires at least one argument")
    out = np.concatenate(pieces)
    return out if target is None else out.astype(target)
