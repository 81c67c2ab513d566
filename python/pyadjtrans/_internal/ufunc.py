"""
Internal module routing NumPy ufunc calls on views.
"""
from __future__ import annotations

from typing import Any

import numpy as np

from .config import logger


def handle_array_ufunc(self: Any, ufunc: Any, method: str, *inputs: Any, **kwargs: Any) -> Any:
    """
    Implementation of __array_ufunc__ for Transpose/Adjoint views.

    np.matmul goes to the algebraic operator layer; every other ufunc is an
    element-wise broadcast, which keeps row views wrapped where it can.
    Reductions, out= arguments and other ufunc methods are declined so NumPy
    raises its usual TypeError.
    """
    if method != "__call__" or kwargs:
        return NotImplemented

    if ufunc is np.matmul:
        if len(inputs) != 2:
            return NotImplemented
        from .operators import matmul

        return matmul(inputs[0], inputs[1])

    if ufunc.nout != 1:
        return NotImplemented

    logger.debug("ufunc %s on %s routed to broadcast", ufunc.__name__, type(self).__name__)
    from .vector_semantics import broadcast

    return broadcast(ufunc, *inputs)
