"""Domain errors raised by the scheduling and order lifecycle modules.

Route handlers in ``main`` translate these into HTTP responses:
PermissionDenied -> 403, InvalidTransition / OrderLocked -> 409,
SchedulingError -> 400.
"""


class OrderError(Exception):
    """Base class for order workflow failures."""


class PermissionDenied(OrderError):
    """The acting user's role or identity does not allow the operation."""


class InvalidTransition(OrderError):
    """The order is not in a status the requested transition starts from."""


class OrderLocked(OrderError):
    """The order can no longer be edited in its current status."""


class SchedulingError(OrderError, ValueError):
    """A task list cannot be scheduled (bad dependency or duration)."""
