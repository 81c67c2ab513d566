"""Warning categories raised by pyadjtrans.

PyAdjTransWarning is the common base. PyAdjTransPerformanceWarning marks an
operation that left the lazy path: a view was copied into a host array, or a
container without NumPy storage was read one element at a time. Filter it
with ``warnings.filterwarnings`` or turn it off via
``configure(warn_on_fallback=False)``.
"""


class PyAdjTransWarning(UserWarning):
    """Base warning category for all pyadjtrans user-facing warnings."""


class PyAdjTransPerformanceWarning(PyAdjTransWarning):
    """An operation left the lazy fast path and read elements one by one."""
