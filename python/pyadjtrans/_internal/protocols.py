"""
Capability interface for containers a view can wrap.

We use Protocol (structural typing) rather than ABC (nominal typing) so that
NumPy arrays and user-defined containers qualify without registration.

Required of every parent:
    - shape: a 1-tuple (vector) or 2-tuple (matrix)
    - __getitem__ (or a get(*indices) method)
    - dtype: the element type

Optional, probed with supports():
    'write'         __setitem__ (or set(*indices, value)); absent makes views read-only
    'raw_storage'   __array_interface__ or a data_pointer attribute
    'strides'       a strides tuple
    'similar'       similar(dtype, shape) factory, or a NumPy array
    'memory_layout' memory_layout() method, or a NumPy array
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np

from .dtypes import is_scalar, normalize_dtype


CAPABILITIES = ("write", "raw_storage", "strides", "similar", "memory_layout")


@runtime_checkable
class VecOrMatLike(Protocol):
    """Minimal protocol for a vector or matrix container."""

    @property
    def shape(self) -> tuple[int, ...]:
        ...

    @property
    def dtype(self) -> Any:
        ...

    def __getitem__(self, key: Any) -> Any:
        ...


def shape_of(obj: Any) -> tuple[int, ...] | None:
    shape = getattr(obj, "shape", None)
    if isinstance(shape, tuple):
        try:
            return tuple(int(n) for n in shape)
        except (TypeError, ValueError):
            return None
    rows = getattr(obj, "rows", None)
    cols = getattr(obj, "cols", None)
    if callable(rows) and callable(cols):
        return int(rows()), int(cols())
    return None


def ndim_of(obj: Any) -> int | None:
    shape = shape_of(obj)
    return None if shape is None else len(shape)


def element_dtype(obj: Any) -> np.dtype | None:
    return normalize_dtype(getattr(obj, "dtype", None))


def is_vector_like(obj: Any) -> bool:
    return not is_scalar(obj) and ndim_of(obj) == 1


def is_matrix_like(obj: Any) -> bool:
    return not is_scalar(obj) and ndim_of(obj) == 2


def read(obj: Any, *indices: int) -> Any:
    get_fn = getattr(obj, "get", None)
    if callable(get_fn) and not isinstance(obj, dict):
        return get_fn(*indices)
    return obj[indices[0] if len(indices) == 1 else indices]


def write(obj: Any, value: Any, *indices: int) -> None:
    set_fn = getattr(obj, "set", None)
    if callable(set_fn) and not hasattr(obj, "__setitem__"):
        set_fn(*indices, value)
        return
    if not hasattr(obj, "__setitem__"):
        raise TypeError(f"{type(obj).__name__} does not support element assignment")
    obj[indices[0] if len(indices) == 1 else indices] = value


def supports(obj: Any, capability: str) -> bool:
    """Check whether `obj` offers an optional capability.

    Unknown capabilities return False, never raise.
    """
    fn = getattr(obj, "supports", None)
    if callable(fn):
        return bool(fn(capability))
    if capability == "write":
        if isinstance(obj, np.ndarray):
            return bool(obj.flags.writeable)
        return hasattr(obj, "__setitem__") or callable(getattr(obj, "set", None))
    if capability == "raw_storage":
        return hasattr(obj, "__array_interface__") or hasattr(obj, "data_pointer")
    if capability == "strides":
        return getattr(obj, "strides", None) is not None
    if capability == "similar":
        return isinstance(obj, np.ndarray) or callable(getattr(obj, "similar", None))
    if capability == "memory_layout":
        return isinstance(obj, np.ndarray) or callable(getattr(obj, "memory_layout", None))
    return False
