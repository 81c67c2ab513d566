"""Lazy transpose and adjoint views over vectors and matrices."""
from __future__ import annotations

__version__ = "0.1.0"

from ._internal.config import configure, logger, setup_console_logger
from ._internal.dtypes import COMPLEX, OTHER, REAL, element_kind, normalize_dtype
from ._internal.errors import (
    DimensionMismatch,
    ElementTypeMismatch,
    IndexOutOfRange,
    InvalidOperandShape,
    PyAdjTransError,
)
from ._internal.layouts import (
    COLUMN_MAJOR,
    DENSE_COLUMN_MAJOR,
    DENSE_ROW_MAJOR,
    ROW_MAJOR,
    STRIDED_LAYOUT,
    UNKNOWN_LAYOUT,
    Layout,
    LayoutTag,
    adjoint_layout,
    conj_layout,
    conjugated,
    is_strided,
    memory_layout,
    transpose_layout,
)
from ._internal.operators import ldiv, matmul, pinv, rdiv
from ._internal.protocols import VecOrMatLike, supports
from ._internal.vector_semantics import broadcast, hcat, map_elements, typed_hcat, vcat
from ._internal.warnings import PyAdjTransPerformanceWarning, PyAdjTransWarning
from ._internal.wrappers import (
    AdjOrTrans,
    Adjoint,
    Transpose,
    WrapperKind,
    adjoint,
    parent,
    shares_memory,
    transpose,
    vec,
    wrap,
    wrapperop,
)

__all__ = [
    "AdjOrTrans",
    "Adjoint",
    "COLUMN_MAJOR",
    "COMPLEX",
    "DENSE_COLUMN_MAJOR",
    "DENSE_ROW_MAJOR",
    "DimensionMismatch",
    "ElementTypeMismatch",
    "IndexOutOfRange",
    "InvalidOperandShape",
    "Layout",
    "LayoutTag",
    "OTHER",
    "PyAdjTransError",
    "PyAdjTransPerformanceWarning",
    "PyAdjTransWarning",
    "REAL",
    "ROW_MAJOR",
    "STRIDED_LAYOUT",
    "Transpose",
    "UNKNOWN_LAYOUT",
    "VecOrMatLike",
    "WrapperKind",
    "adjoint",
    "adjoint_layout",
    "broadcast",
    "configure",
    "conj_layout",
    "conjugated",
    "element_kind",
    "hcat",
    "is_strided",
    "ldiv",
    "logger",
    "map_elements",
    "matmul",
    "memory_layout",
    "normalize_dtype",
    "parent",
    "pinv",
    "rdiv",
    "setup_console_logger",
    "shares_memory",
    "supports",
    "transpose",
    "transpose_layout",
    "typed_hcat",
    "vcat",
    "vec",
    "wrap",
    "wrapperop",
]
