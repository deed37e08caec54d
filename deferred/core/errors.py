"""
Exception types for the deferred value engine.
"""

from typing import Any, Tuple


class DeferredError(Exception):
    """Base class for all deferred engine errors."""
    pass


class SettlementTimeout(DeferredError):
    """Raised when a blocking wait elapses before the value settles."""
    pass


class RejectedError(DeferredError):
    """
    Raised when a blocking result() is taken from a rejected value.

    Fields:
        reasons: Rejection reasons exactly as passed to reject()
    """

    def __init__(self, reasons: Tuple[Any, ...]) -> None:
        self.reasons = tuple(reasons)
        if not self.reasons:
            message = "deferred value rejected"
        else:
            message = "deferred value rejected: " + ", ".join(repr(r) for r in self.reasons)
        super().__init__(message)


class TransportError(DeferredError):
    """Raised when request options are invalid or a request cannot be issued."""
    pass
