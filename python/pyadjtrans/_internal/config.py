from __future__ import annotations

import logging
import os
import warnings

from .warnings import PyAdjTransPerformanceWarning, PyAdjTransWarning


logger = logging.getLogger("pyadjtrans")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


def _env_log_level(raw: str) -> int | str:
    token = raw.strip().upper()
    if token.isdigit():
        return int(token)
    if isinstance(logging.getLevelName(token), int):
        return token
    warnings.warn(
        f"PYADJTRANS_LOG_LEVEL={raw!r} is not a logging level; using WARNING",
        PyAdjTransWarning,
        stacklevel=2,
    )
    return "WARNING"


# Global config variables
# If True, emit PyAdjTransPerformanceWarning whenever an operation reads
# elements one by one instead of forwarding to the parent.
warn_on_fallback: bool = _env_flag("PYADJTRANS_WARN_FALLBACK", True)

# Number of leading/trailing rows and columns shown by str() on a view.
edge_items: int = 4

log_level: int | str = _env_log_level(os.environ.get("PYADJTRANS_LOG_LEVEL", "WARNING"))


def setup_console_logger(
    logger: logging.Logger,
    log_level: int | str,
    fmt: str = "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    handler_cls: type[logging.Handler] = logging.StreamHandler,
) -> logging.Logger:
    logger.setLevel(log_level)
    formatter = logging.Formatter(fmt)
    for handler in logger.handlers:
        if isinstance(handler, handler_cls):
            handler.setFormatter(formatter)
            return logger
    handler = handler_cls()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def configure(
    *,
    warn_on_fallback: bool | None = None,
    edge_items: int | None = None,
    log_level: int | str | None = None,
) -> None:
    """Update global settings. Arguments left as None keep their current value."""
    # Parameter names shadow the module globals they update.
    module = globals()
    if warn_on_fallback is not None:
        module["warn_on_fallback"] = bool(warn_on_fallback)
    if edge_items is not None:
        if int(edge_items) < 1:
            raise ValueError("edge_items must be a positive integer")
        module["edge_items"] = int(edge_items)
    if log_level is not None:
        if isinstance(log_level, str):
            log_level = log_level.strip().upper()
        logger.setLevel(log_level)
        module["log_level"] = log_level


def report_fallback(op: str, detail: str, *, stacklevel: int = 3) -> None:
    """Record that `op` left the lazy fast path."""
    logger.debug("%s: generic fallback (%s)", op, detail)
    if warn_on_fallback:
        warnings.warn(
            f"{op}: {detail}; falling back to element-wise evaluation",
            PyAdjTransPerformanceWarning,
            stacklevel=stacklevel,
        )


if "PYADJTRANS_LOG_LEVEL" in os.environ:
    logger.setLevel(log_level)
