from __future__ import annotations

import numbers
from typing import Any

import numpy as np


REAL = "real"
COMPLEX = "complex"
OTHER = "other"

# Spellings accepted on top of everything numpy.dtype() understands.
_ALIASES = {
    "bit": "bool",
    "complex_float32": "complex64",
    "complex_float64": "complex128",
    "float": "float64",
    "int": "int64",
}


def normalize_dtype(dtype: Any) -> np.dtype | None:
    """Normalize user-provided dtype tokens into a numpy.dtype.

    Accepted inputs include:
    - None (returned unchanged)
    - Python builtins: int, float, complex, bool, object
    - Case-insensitive strings: "float64", "complex_float32", "bit", ...
    - NumPy dtypes and scalar types: np.int16, np.dtype("int16"), ...

    Returns None when the token is not understood.
    """

    if dtype is None:
        return None
    if isinstance(dtype, str):
        token = dtype.strip().lower()
        dtype = _ALIASES.get(token, token)
    try:
        return np.dtype(dtype)
    except TypeError:
        return None


def require_dtype(dtype: Any) -> np.dtype | None:
    """Like normalize_dtype, but an unrecognised token raises TypeError."""
    if dtype is None:
        return None
    np_dtype = normalize_dtype(dtype)
    if np_dtype is None:
        raise TypeError(f"unrecognised dtype {dtype!r}")
    return np_dtype


def element_kind(dtype: Any) -> str:
    """Classify an element type as REAL, COMPLEX or OTHER."""
    np_dtype = normalize_dtype(dtype)
    if np_dtype is None:
        return OTHER
    if np_dtype.kind in ("b", "i", "u", "f"):
        return REAL
    if np_dtype.kind == "c":
        return COMPLEX
    return OTHER


def transpose_dtype(dtype: Any) -> np.dtype | None:
    """Element type produced by transposing elements of type `dtype`."""
    return normalize_dtype(dtype)


def adjoint_dtype(dtype: Any) -> np.dtype | None:
    """Element type produced by conjugate-transposing elements of type `dtype`.

    Conjugation is closed over every numeric dtype, and object arrays defer to
    their elements. Strings, bytes, dates and structured records have no
    conjugate.
    """
    np_dtype = normalize_dtype(dtype)
    if np_dtype is None:
        return None
    if np_dtype.kind in ("b", "i", "u", "f", "c", "O"):
        return np_dtype
    raise TypeError(f"conjugation is not defined for elements of dtype {np_dtype}")


def is_scalar(value: Any) -> bool:
    if isinstance(value, (numbers.Number, np.generic)):
        return True
    return isinstance(value, np.ndarray) and value.ndim == 0


def conj_scalar(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return np.conj(value)
    if isinstance(value, numbers.Complex) and not isinstance(value, numbers.Real):
        return value.conjugate()
    return value
