from __future__ import annotations

from typing import Any

import numpy as np

from . import config
from .protocols import shape_of


def _edge_indices(length: int) -> tuple[list[int], list[int], bool]:
    edge = config.edge_items
    if length <= edge * 2:
        return list(range(length)), [], False
    head = list(range(edge))
    tail = list(range(length - edge, length))
    return head, tail, True


def _format_value(value: Any) -> str:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, complex):
        return f"{value.real:g}{value.imag:+g}j"
    return str(value)


def _format_row(view: Any, row_index: int, col_head: list[int], col_tail: list[int], truncated: bool) -> str:
    entries = [_format_value(view.get(row_index, col)) for col in col_head]
    if truncated:
        entries.append("...")
    entries.extend(_format_value(view.get(row_index, col)) for col in col_tail)
    return " ".join(entries)


def _shape_label(obj: Any) -> str:
    shape = shape_of(obj)
    if shape is None:
        return "?"
    return "x".join(str(n) for n in shape)


def view_repr(view: Any) -> str:
    """Structure-only description; never reads elements."""
    parent = view.parent
    return (
        f"{type(view).__name__}(shape={view.shape}, dtype={view.dtype}, "
        f"parent={type(parent).__name__}({_shape_label(parent)}))"
    )


def view_str(view: Any) -> str:
    rows, cols = view.shape
    header = f"{type(view).__name__}(shape=({rows}, {cols}), dtype={view.dtype})"

    if rows == 0 or cols == 0:
        return header + "\n[]"

    row_head, row_tail, rows_truncated = _edge_indices(rows)
    col_head, col_tail, cols_truncated = _edge_indices(cols)

    lines = [header, "["]
    for row_index in row_head:
        lines.append(f" [{_format_row(view, row_index, col_head, col_tail, cols_truncated)}]")
    if rows_truncated:
        lines.append(" ...")
    for row_index in row_tail:
        lines.append(f" [{_format_row(view, row_index, col_head, col_tail, cols_truncated)}]")
    lines.append("]")
    return "\n".join(lines)
