"""
Deferred Value Engine

Settle-once deferred values with chaining, combinators and a threaded HTTP transport.
"""

__version__ = "0.1.0"

from .core import (
    DeferredValue,
    Handler,
    SettleState,
    Settlement,
    wait,
    result,
    DeferredError,
    SettlementTimeout,
    RejectedError,
    TransportError,
)
from .transport import FileField, RequestOptions, Response, fetch, request

__all__ = [
    "DeferredValue",
    "Handler",
    "SettleState",
    "Settlement",
    "wait",
    "result",
    "DeferredError",
    "SettlementTimeout",
    "RejectedError",
    "TransportError",
    "FileField",
    "RequestOptions",
    "Response",
    "fetch",
    "request",
]
