"""Memory-layout descriptors and their transpose/conjugate algebra.

Layouts are plain frozen values drawn from a closed set of tags. The two
transforms below are total: anything they do not recognise maps to
``UNKNOWN_LAYOUT`` rather than raising.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

import numpy as np

from .dtypes import COMPLEX, REAL


class LayoutTag(enum.Enum):
    UNKNOWN = "unknown"
    STRIDED = "strided"
    ROW_MAJOR = "row_major"
    COLUMN_MAJOR = "column_major"
    DENSE_ROW_MAJOR = "dense_row_major"
    DENSE_COLUMN_MAJOR = "dense_column_major"
    CONJ = "conj"


_STRIDED_TAGS = frozenset(
    {
        LayoutTag.STRIDED,
        LayoutTag.ROW_MAJOR,
        LayoutTag.COLUMN_MAJOR,
        LayoutTag.DENSE_ROW_MAJOR,
        LayoutTag.DENSE_COLUMN_MAJOR,
    }
)


@dataclass(frozen=True)
class Layout:
    tag: LayoutTag
    inner: Layout | None = None

    def __post_init__(self) -> None:
        if self.tag is LayoutTag.CONJ:
            if not isinstance(self.inner, Layout):
                raise ValueError("a conjugated layout must wrap another layout")
        elif self.inner is not None:
            raise ValueError(f"{self.tag.value} layout takes no inner layout")

    def __repr__(self) -> str:
        if self.tag is LayoutTag.CONJ:
            return f"ConjLayout({self.inner!r})"
        return "".join(part.capitalize() for part in self.tag.value.split("_")) + "Layout"


UNKNOWN_LAYOUT = Layout(LayoutTag.UNKNOWN)
STRIDED_LAYOUT = Layout(LayoutTag.STRIDED)
ROW_MAJOR = Layout(LayoutTag.ROW_MAJOR)
COLUMN_MAJOR = Layout(LayoutTag.COLUMN_MAJOR)
DENSE_ROW_MAJOR = Layout(LayoutTag.DENSE_ROW_MAJOR)
DENSE_COLUMN_MAJOR = Layout(LayoutTag.DENSE_COLUMN_MAJOR)


def conjugated(inner: Layout) -> Layout:
    return Layout(LayoutTag.CONJ, inner)


_TRANSPOSED_TAG = {
    LayoutTag.UNKNOWN: LayoutTag.UNKNOWN,
    LayoutTag.STRIDED: LayoutTag.STRIDED,
    LayoutTag.ROW_MAJOR: LayoutTag.COLUMN_MAJOR,
    LayoutTag.COLUMN_MAJOR: LayoutTag.ROW_MAJOR,
    LayoutTag.DENSE_ROW_MAJOR: LayoutTag.DENSE_COLUMN_MAJOR,
    LayoutTag.DENSE_COLUMN_MAJOR: LayoutTag.DENSE_ROW_MAJOR,
}


def is_strided(layout: Any) -> bool:
    return isinstance(layout, Layout) and layout.tag in _STRIDED_TAGS


def transpose_layout(layout: Any) -> Layout:
    """Layout of the transpose of a container laid out as `layout`."""
    if not isinstance(layout, Layout):
        return UNKNOWN_LAYOUT
    if layout.tag is LayoutTag.CONJ:
        return conjugated(transpose_layout(layout.inner))
    return Layout(_TRANSPOSED_TAG[layout.tag])


def conj_layout(element_kind: str, layout: Any) -> Layout:
    """Layout of the element-wise conjugate of a container.

    Real elements leave the layout untouched. Complex elements gain a
    conjugation marker on strided layouts, and a second conjugation cancels
    the first. Every other combination is unknown.
    """
    if not isinstance(layout, Layout):
        return UNKNOWN_LAYOUT
    if element_kind == REAL:
        return layout
    if element_kind == COMPLEX:
        if layout.tag is LayoutTag.CONJ:
            return layout.inner  # type: ignore[return-value]
        if is_strided(layout):
            return conjugated(layout)
    return UNKNOWN_LAYOUT


def adjoint_layout(element_kind: str, layout: Any) -> Layout:
    return transpose_layout(conj_layout(element_kind, layout))


def _ndarray_layout(array: np.ndarray) -> Layout:
    if array.ndim == 1:
        if array.flags.c_contiguous:
            return DENSE_COLUMN_MAJOR
        return STRIDED_LAYOUT
    if array.ndim == 2:
        if array.flags.c_contiguous:
            return DENSE_ROW_MAJOR
        if array.flags.f_contiguous:
            return DENSE_COLUMN_MAJOR
        row_stride, col_stride = array.strides
        if col_stride == array.itemsize:
            return ROW_MAJOR
        if row_stride == array.itemsize:
            return COLUMN_MAJOR
        return STRIDED_LAYOUT
    return UNKNOWN_LAYOUT


def memory_layout(obj: Any) -> Layout:
    """Best-effort layout descriptor for any container."""
    fn = getattr(obj, "memory_layout", None)
    if callable(fn):
        layout = fn()
        return layout if isinstance(layout, Layout) else UNKNOWN_LAYOUT
    if isinstance(obj, np.ndarray):
        return _ndarray_layout(obj)
    return UNKNOWN_LAYOUT
