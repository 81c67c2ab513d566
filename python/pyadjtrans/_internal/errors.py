"""
Exception hierarchy for pyadjtrans.

All exceptions inherit from PyAdjTransError so callers can catch any
library-specific error. Each one also inherits from the builtin exception a
caller would reach for without knowing this library (TypeError for operand
problems, ValueError for size disagreements).

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages state the expected and the actual value
    - Index errors raised by a parent container are never translated
"""

from __future__ import annotations

from typing import Any


class PyAdjTransError(Exception):
    """Base exception for all pyadjtrans errors."""
    pass


class ElementTypeMismatch(PyAdjTransError, TypeError):
    """
    A wrapper was declared with an element type its parent cannot produce.

    Attributes:
        kind: Wrapper kind name ('Transpose' or 'Adjoint')
        expected: Element type derived from the parent's element type
        actual: Element type supplied by the caller
        parent_dtype: Element type reported by the parent
    """

    def __init__(self, kind: str, expected: Any, actual: Any, parent_dtype: Any):
        article = "an" if kind[:1] in "AEIOU" else "a"
        super().__init__(
            f"Element type mismatch. Tried to create {article} `{kind}` with dtype "
            f"`{actual}` from an object with dtype `{parent_dtype}`, but the element "
            f"type of the {kind.lower()} of an object with dtype `{parent_dtype}` "
            f"must be `{expected}`."
        )
        self.kind = kind
        self.expected = expected
        self.actual = actual
        self.parent_dtype = parent_dtype


class InvalidOperandShape(PyAdjTransError, TypeError):
    """
    An operator was applied to an algebraically undefined operand combination.

    Raised instead of falling through to a generic numeric routine, e.g. for
    a row vector times a row vector.

    Attributes:
        op: Operation name ('matmul', 'ldiv', 'rdiv', ...)
        left: Description of the left operand
        right: Description of the right operand
    """

    def __init__(self, op: str, left: str, right: str, reason: str | None = None):
        message = f"{op}: no product is defined for ({left}, {right})"
        if reason:
            message += f"; {reason}"
        super().__init__(message)
        self.op = op
        self.left = left
        self.right = right


class DimensionMismatch(PyAdjTransError, ValueError):
    """
    Operand lengths or shapes disagree.

    Attributes:
        expected: Expected length or shape, if known
        actual: Actual length or shape, if known
    """

    def __init__(self, message: str, expected: Any = None, actual: Any = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


# Parents raise IndexError themselves; wrappers let it propagate unchanged.
IndexOutOfRange = IndexError
