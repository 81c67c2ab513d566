from __future__ import annotations

import enum
import operator
from typing import Any, Callable, Iterator

import numpy as np

from . import formatting as _formatting
from . import kernels
from . import layouts as _layouts
from .config import logger
from .dtypes import (
    REAL,
    adjoint_dtype,
    conj_scalar,
    element_kind,
    is_scalar,
    normalize_dtype,
    require_dtype,
    transpose_dtype,
)
from .errors import ElementTypeMismatch
from .protocols import element_dtype, is_vector_like, read, shape_of, supports, write


class WrapperKind(enum.Enum):
    TRANSPOSE = "transpose"
    ADJOINT = "adjoint"

    @property
    def other(self) -> WrapperKind:
        if self is WrapperKind.TRANSPOSE:
            return WrapperKind.ADJOINT
        return WrapperKind.TRANSPOSE

    def element_dtype(self, dtype: Any) -> np.dtype | None:
        """Element type seen through a view of this kind over `dtype` elements."""
        if self is WrapperKind.TRANSPOSE:
            return transpose_dtype(dtype)
        return adjoint_dtype(dtype)


def _operators() -> Any:
    from . import operators

    return operators


def _vector_semantics() -> Any:
    from . import vector_semantics

    return vector_semantics


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def _is_full_slice(value: Any) -> bool:
    return isinstance(value, slice) and value == slice(None)


def _transpose_element(value: Any) -> Any:
    if is_scalar(value) or shape_of(value) is None:
        return value
    return transpose(value)


def _adjoint_element(value: Any) -> Any:
    if is_scalar(value):
        return conj_scalar(value)
    if shape_of(value) is None:
        conj_fn = getattr(value, "conjugate", None)
        return conj_fn() if callable(conj_fn) else value
    return adjoint(value)


class AdjOrTrans:
    """Lazy transpose or adjoint of a vector or matrix.

    The view holds a reference to its parent and forwards every read and
    write after swapping the two indices and, for Adjoint, conjugating the
    value. Vectors are columns, so the view of a length-n vector is a 1 x n
    row that keeps behaving like a row through concatenation, mapping and
    broadcasting.
    """

    kind: WrapperKind

    def __init__(self, parent: Any, dtype: Any = None):
        name = type(self).__name__
        if type(self) is AdjOrTrans:
            raise TypeError("AdjOrTrans cannot be instantiated; use Transpose or Adjoint")

        shape = shape_of(parent)
        if shape is None or len(shape) not in (1, 2):
            raise TypeError(
                f"{name} requires a vector or matrix-like parent, got {type(parent).__name__}"
            )
        parent_dtype = element_dtype(parent)
        if parent_dtype is None:
            raise TypeError(f"{name} parent must report its element type via `dtype`")

        expected = self.kind.element_dtype(parent_dtype)
        if dtype is not None:
            actual = normalize_dtype(dtype)
            if actual != expected:
                raise ElementTypeMismatch(
                    name, expected, dtype if actual is None else actual, parent_dtype
                )

        self._parent = parent
        self._dtype = expected
        self._is_vector = len(shape) == 1

    # --- container protocol ---

    @property
    def parent(self) -> Any:
        return self._parent

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def is_vector(self) -> bool:
        return self._is_vector

    @property
    def shape(self) -> tuple[int, int]:
        parent_shape = shape_of(self._parent)
        if self._is_vector:
            return (1, parent_shape[0])
        return (parent_shape[1], parent_shape[0])

    @property
    def ndim(self) -> int:
        return 2

    @property
    def size(self) -> int:
        rows, cols = self.shape
        return rows * cols

    def __len__(self) -> int:
        return self.size

    @property
    def index_style(self) -> str:
        # Swapped axes defeat linear traversal for matrices.
        return "linear" if self._is_vector else "cartesian"

    @property
    def T(self) -> Any:
        return transpose(self)

    @property
    def H(self) -> Any:
        return adjoint(self)

    def _transform(self, value: Any) -> Any:
        if self.kind is WrapperKind.ADJOINT:
            return _adjoint_element(value)
        return _transpose_element(value)

    def _vector_index(self, indices: tuple[Any, ...]) -> int:
        if len(indices) == 1:
            return operator.index(indices[0])
        if len(indices) == 2:
            row = operator.index(indices[0])
            if row not in (0, -1):
                raise IndexError(f"row index {row} is out of range for a {self.shape} row view")
            return operator.index(indices[1])
        raise TypeError(f"a row view takes one or two indices, got {len(indices)}")

    def _matrix_index(self, indices: tuple[Any, ...]) -> tuple[int, int]:
        if len(indices) != 2:
            raise TypeError("matrix indices must be provided as [row, col]")
        return operator.index(indices[0]), operator.index(indices[1])

    def get(self, *indices: Any) -> Any:
        if self._is_vector:
            return self._transform(read(self._parent, self._vector_index(indices)))
        i, j = self._matrix_index(indices)
        return self._transform(read(self._parent, j, i))

    def set(self, *args: Any) -> AdjOrTrans:
        """Assign through the view: ``set(j, value)`` or ``set(i, j, value)``.

        Returns the view itself so calls can be chained.
        """
        if len(args) < 2:
            raise TypeError("set expects one or two indices followed by a value")
        *indices, value = args
        stored = self._transform(value)
        if self._is_vector:
            write(self._parent, stored, self._vector_index(tuple(indices)))
        else:
            i, j = self._matrix_index(tuple(indices))
            write(self._parent, stored, j, i)
        return self

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, tuple):
            if (
                self._is_vector
                and len(key) == 2
                and _is_full_slice(key[0])
                and not _is_integer(key[1])
            ):
                return self._subrow(key[1])
            return self.get(*key)
        if not self._is_vector:
            raise TypeError("matrix indices must be provided as [row, col]")
        if not _is_integer(key):
            raise TypeError("row views take integer indices; use view[:, idx] to select entries")
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, tuple):
            self.set(*key, value)
            return
        if not self._is_vector:
            raise TypeError("matrix indices must be provided as [row, col]")
        self.set(key, value)

    def _subrow(self, cols: Any) -> AdjOrTrans:
        if _is_full_slice(cols):
            return type(self)(self._parent[:])
        return type(self)(self._parent[cols])

    def __iter__(self) -> Iterator[Any]:
        rows, cols = self.shape
        if self._is_vector:
            for j in range(cols):
                yield self.get(j)
            return
        for i in range(rows):
            for j in range(cols):
                yield self.get(i, j)

    def __lt__(self, other: Any) -> Any:
        if not (isinstance(other, AdjOrTrans) and self._is_vector and other.is_vector):
            return NotImplemented
        return _entries(self._parent) < _entries(other.parent)

    def _compare(self, ufunc: Any, other: Any) -> Any:
        if not (is_scalar(other) or isinstance(other, AdjOrTrans) or shape_of(other) is not None):
            return NotImplemented
        return _vector_semantics().broadcast(ufunc, self, other)

    def __eq__(self, other: Any) -> Any:  # type: ignore[override]
        return self._compare(np.equal, other)

    def __ne__(self, other: Any) -> Any:  # type: ignore[override]
        return self._compare(np.not_equal, other)

    # Element-wise equality leaves views unhashable, as with ndarray.
    __hash__ = None  # type: ignore[assignment]

    # --- optional capabilities ---

    def supports(self, capability: str) -> bool:
        if capability == "memory_layout":
            return True
        return supports(self._parent, capability)

    @property
    def data_pointer(self) -> int:
        """Address of the parent's storage; views add no indirection."""
        iface = getattr(self._parent, "__array_interface__", None)
        if iface is not None:
            return int(iface["data"][0])
        ptr = getattr(self._parent, "data_pointer", None)
        if ptr is None:
            raise AttributeError(f"{type(self._parent).__name__} parent exposes no raw storage")
        return ptr() if callable(ptr) else ptr

    @property
    def strides(self) -> tuple[int, int]:
        parent_strides = getattr(self._parent, "strides", None)
        if parent_strides is None:
            raise AttributeError(f"{type(self._parent).__name__} parent exposes no strides")
        if self._is_vector:
            (stride,) = parent_strides
            return (stride * shape_of(self._parent)[0], stride)
        return (parent_strides[1], parent_strides[0])

    def memory_layout(self) -> _layouts.Layout:
        parent_layout = _layouts.memory_layout(self._parent)
        if self.kind is WrapperKind.TRANSPOSE:
            return _layouts.transpose_layout(parent_layout)
        return _layouts.adjoint_layout(element_kind(self._dtype), parent_layout)

    def similar(self, dtype: Any = None, shape: tuple[int, ...] | None = None) -> Any:
        """Allocate an uninitialised container like this view.

        Row views stay wrapped so the result still behaves like a row; the
        parent is allocated with the element type that makes the wrapped
        result come out as `dtype`. Matrix views (or an explicit `shape`)
        give a plain buffer of the logical shape.
        """
        if self._is_vector and shape is None:
            parent_dtype = None
            if dtype is not None:
                parent_dtype = self.kind.element_dtype(require_dtype(dtype))
            return type(self)(kernels.empty_like(self._parent, parent_dtype, None))
        target_dtype = self._dtype if dtype is None else require_dtype(dtype)
        target_shape = self.shape if shape is None else tuple(shape)
        return kernels.empty_like(self._parent, target_dtype, target_shape)

    def astype(self, dtype: Any) -> AdjOrTrans:
        parent_dtype = self.kind.element_dtype(require_dtype(dtype))
        return type(self)(kernels.astype(self._parent, parent_dtype))

    def unalias_copy(self) -> AdjOrTrans:
        return type(self)(kernels.copy_container(self._parent))

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        if copy is False:
            raise ValueError(
                f"a {type(self).__name__} view cannot be converted to an array without copying"
            )
        out = kernels.to_host(self)
        return out if dtype is None else out.astype(dtype)

    # --- operators ---

    def __array_ufunc__(self, ufunc: Any, method: str, *inputs: Any, **kwargs: Any) -> Any:
        from .ufunc import handle_array_ufunc

        return handle_array_ufunc(self, ufunc, method, *inputs, **kwargs)

    def __matmul__(self, other: Any) -> Any:
        return _operators().matmul(self, other)

    def __rmatmul__(self, other: Any) -> Any:
        return _operators().matmul(other, self)

    def __mul__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.multiply, self, other)

    def __rmul__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.multiply, other, self)

    def __add__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.add, self, other)

    def __radd__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.add, other, self)

    def __sub__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.subtract, self, other)

    def __rsub__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.subtract, other, self)

    def __neg__(self) -> Any:
        return _vector_semantics().broadcast(np.negative, self)

    def __truediv__(self, other: Any) -> Any:
        if is_scalar(other) or (isinstance(other, AdjOrTrans) and other.is_vector):
            return _vector_semantics().broadcast(np.true_divide, self, other)
        return _operators().rdiv(self, other)

    def __rtruediv__(self, other: Any) -> Any:
        return _vector_semantics().broadcast(np.true_divide, other, self)

    # --- printing (repr is structure-only; must not access elements) ---

    def __repr__(self) -> str:
        return _formatting.view_repr(self)

    def __str__(self) -> str:
        return _formatting.view_str(self)


class Transpose(AdjOrTrans):
    """Lazy transpose. Writes through the view land in the parent."""

    kind = WrapperKind.TRANSPOSE


class Adjoint(AdjOrTrans):
    """Lazy adjoint (conjugate transpose). Elements are conjugated on the way in and out."""

    kind = WrapperKind.ADJOINT


def _entries(vector: Any) -> list[Any]:
    return [read(vector, i) for i in range(shape_of(vector)[0])]


def transpose(x: Any) -> Any:
    """Lazy transpose of a vector or matrix.

    Transposing a Transpose (or an Adjoint of real elements) returns the
    original object rather than a new view. Scalars are returned unchanged.

    Example:
        >>> A = np.array([[1, 2], [3, 4]])
        >>> transpose(A)[0, 1]
        3
        >>> transpose(transpose(A)) is A
        True
    """
    if isinstance(x, Transpose):
        logger.debug("transpose: unwrapping %r", x)
        return x.parent
    if isinstance(x, Adjoint) and element_kind(x.dtype) == REAL:
        logger.debug("transpose: unwrapping real %r", x)
        return x.parent
    if is_scalar(x):
        return x
    return Transpose(x)


def adjoint(x: Any) -> Any:
    """Lazy adjoint (conjugate transpose) of a vector or matrix.

    The adjoint is applied recursively to array-valued elements. Adjoint of
    an Adjoint (or of a Transpose of real elements) returns the original
    object. Scalars are conjugated.

    Example:
        >>> A = np.array([[3 + 2j, 9 + 2j], [8 + 7j, 4 + 6j]])
        >>> adjoint(A)[0, 1]
        (8-7j)
    """
    if isinstance(x, Adjoint):
        logger.debug("adjoint: unwrapping %r", x)
        return x.parent
    if isinstance(x, Transpose) and element_kind(x.dtype) == REAL:
        logger.debug("adjoint: unwrapping real %r", x)
        return x.parent
    if is_scalar(x):
        return conj_scalar(x)
    return Adjoint(x)


_WRAPPER_OPS: dict[WrapperKind, Callable[[Any], Any]] = {
    WrapperKind.TRANSPOSE: transpose,
    WrapperKind.ADJOINT: adjoint,
}


def wrapperop(kind: WrapperKind | AdjOrTrans) -> Callable[[Any], Any]:
    """The quasi-constructor matching a kind (or the kind of a view)."""
    if isinstance(kind, AdjOrTrans):
        kind = kind.kind
    return _WRAPPER_OPS[kind]


def wrap(kind: WrapperKind, x: Any) -> Any:
    return _WRAPPER_OPS[kind](x)


def parent(x: Any) -> Any:
    return x.parent if isinstance(x, AdjOrTrans) else x


def vec(x: Any) -> Any:
    """The column vector behind a row view (or the vector itself)."""
    if isinstance(x, AdjOrTrans):
        if not x.is_vector:
            raise TypeError("vec expects a row view of a vector")
        return x.parent
    if is_vector_like(x):
        return x
    raise TypeError(f"vec expects a vector or a row view, got {type(x).__name__}")


def _storage_root(x: Any) -> Any:
    while isinstance(x, AdjOrTrans):
        x = x.parent
    return x


def shares_memory(a: Any, b: Any) -> bool:
    """Whether two containers (or views of them) may alias the same storage."""
    root_a, root_b = _storage_root(a), _storage_root(b)
    if isinstance(root_a, np.ndarray) and isinstance(root_b, np.ndarray):
        return bool(np.may_share_memory(root_a, root_b))
    return root_a is root_b
