"""Row-preserving concatenation, mapping and broadcasting.

Generic container operations would work on the raw parents and hand back a
plain column or matrix. When every operand is a row view of one kind (numbers
may be mixed in), the functions here run the operation on the parents and
re-wrap the result, so a row stays a row. The user's function still only
ever sees logical values: inputs are passed through the view's transform
and the result is transformed back before it is stored.

Mixed kinds (a Transpose next to an Adjoint) take the generic path.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

from . import kernels
from .config import logger
from .dtypes import conj_scalar, is_scalar, require_dtype
from .errors import DimensionMismatch
from .protocols import is_vector_like, read, shape_of
from .wrappers import AdjOrTrans, WrapperKind, wrapperop


def _row_kind(args: Sequence[Any]) -> WrapperKind | None:
    kind: WrapperKind | None = None
    for arg in args:
        if isinstance(arg, AdjOrTrans):
            if not arg.is_vector:
                return None
            if kind is None:
                kind = arg.kind
            elif arg.kind is not kind:
                return None
        elif not is_scalar(arg):
            return None
    return kind


def _conj(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return np.conj(value) if value.dtype.kind in ("c", "O") else value
    return conj_scalar(value)


def _as_block(arg: Any) -> np.ndarray:
    if is_scalar(arg):
        return np.asarray(arg).reshape(1, 1)
    host = kernels.to_host(arg)
    return host.reshape(-1, 1) if host.ndim == 1 else host


def _generic_cat(op: str, args: Sequence[Any], axis: int, dtype: Any) -> np.ndarray:
    logger.debug("%s: generic concatenation of %d operands", op, len(args))
    target = require_dtype(dtype)
    blocks = [_as_block(a) for a in args]
    try:
        out = np.concatenate(blocks, axis=axis)
    except ValueError as exc:
        raise DimensionMismatch(f"{op}: {exc}") from exc
    return out if target is None else out.astype(target)


def vcat(*args: Any, dtype: Any = None) -> np.ndarray:
    """Vertical concatenation. Vectors are columns and numbers are 1-element columns."""
    if not args:
        raise ValueError("vcat requires at least one argument")
    if all(is_scalar(a) or is_vector_like(a) for a in args):
        return kernels.vcat_vectors(args, dtype)
    return _generic_cat("vcat", args, 0, dtype)


def hcat(*args: Any) -> Any:
    """Horizontal concatenation.

    Row views of one kind (and numbers) concatenate to a row view of that
    kind: laying rows side by side is stacking their parent columns.
    """
    if not args:
        raise ValueError("hcat requires at least one argument")
    kind = _row_kind(args)
    if kind is not None:
        op = wrapperop(kind)
        return op(vcat(*(op(a) for a in args)))
    return _generic_cat("hcat", args, 1, None)


def typed_hcat(dtype: Any, *args: Any) -> Any:
    """hcat with the result's element type fixed to `dtype`."""
    if not args:
        raise ValueError("typed_hcat requires at least one argument")
    kind = _row_kind(args)
    if kind is not None:
        op = wrapperop(kind)
        return op(vcat(*(op(a) for a in args), dtype=dtype))
    return _generic_cat("typed_hcat", args, 1, dtype)


def _common_length(op: str, vectors: Sequence[Any]) -> int:
    lengths = [shape_of(v)[0] for v in vectors]
    if len(set(lengths)) != 1:
        raise DimensionMismatch(
            f"{op}: all arguments must have the same length, got {lengths}",
            expected=lengths[0],
            actual=lengths,
        )
    return lengths[0]


def _apply_elementwise(op: str, f: Callable[..., Any], operands: Sequence[Any]) -> Any:
    try:
        out = np.frompyfunc(f, len(operands), 1)(*operands)
    except ValueError as exc:
        raise DimensionMismatch(f"{op}: {exc}") from exc
    if not isinstance(out, np.ndarray):
        return out
    return kernels.from_values(list(out.ravel())).reshape(out.shape)


def map_elements(f: Callable[..., Any], *args: Any) -> Any:
    """Apply `f` to corresponding elements of equally sized containers.

    Row views of one kind give a row view of that kind; anything else gives
    a plain host array shaped like the (logical) inputs.
    """
    if not args:
        raise TypeError("map_elements requires at least one container")

    kind = _row_kind(args)
    if kind is not None and all(isinstance(a, AdjOrTrans) for a in args):
        op = wrapperop(kind)
        parents = [a.parent for a in args]
        n = _common_length("map_elements", parents)

        def g(*xs: Any) -> Any:
            return op(f(*(op(x) for x in xs)))

        values = [g(*(read(p, i) for p in parents)) for i in range(n)]
        return op(kernels.from_values(values))

    hosts = [kernels.to_host(a) for a in args]
    shapes = [h.shape for h in hosts]
    if len(set(shapes)) != 1:
        raise DimensionMismatch(
            f"map_elements: all arguments must have the same shape, got {shapes}",
            expected=shapes[0],
            actual=shapes,
        )
    values = [f(*xs) for xs in zip(*(h.ravel() for h in hosts))]
    return kernels.from_values(values).reshape(shapes[0])


def broadcast(f: Callable[..., Any], *args: Any) -> Any:
    """Element-wise `f` over containers and numbers with broadcasting.

    Row views of one kind mixed with numbers stay a row view of that kind.
    Otherwise operands are broadcast as host arrays, with plain vectors
    taken as columns whenever a 2-D operand is present, so a column times
    a row view is an outer product.
    """
    if not args:
        raise TypeError("broadcast requires at least one argument")

    kind = _row_kind(args)
    if kind is not None:
        op = wrapperop(kind)
        # Numbers are pre-transformed so that `f` sees them unchanged.
        operands = [a.parent if isinstance(a, AdjOrTrans) else op(a) for a in args]
        hosts = [o if is_scalar(o) else kernels.to_host(o) for o in operands]
        if isinstance(f, np.ufunc):
            try:
                if kind is WrapperKind.ADJOINT:
                    result = _conj(f(*(_conj(h) for h in hosts)))
                else:
                    result = f(*hosts)
            except ValueError as exc:
                raise DimensionMismatch(f"broadcast: {exc}") from exc
        else:

            def g(*xs: Any) -> Any:
                return op(f(*(op(x) for x in xs)))

            result = _apply_elementwise("broadcast", g, hosts)
        return op(result)

    return _generic_broadcast(f, args)


def _generic_broadcast(f: Callable[..., Any], args: Sequence[Any]) -> Any:
    hosts = [a if is_scalar(a) else kernels.to_host(a) for a in args]
    if any(getattr(h, "ndim", 0) == 2 for h in hosts):
        hosts = [h.reshape(-1, 1) if getattr(h, "ndim", 0) == 1 else h for h in hosts]
    if isinstance(f, np.ufunc):
        try:
            return f(*hosts)
        except ValueError as exc:
            raise DimensionMismatch(f"broadcast: {exc}") from exc
    return _apply_elementwise("broadcast", f, hosts)
