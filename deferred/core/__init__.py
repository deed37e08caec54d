"""
Core deferred value primitives.

This module provides the settle-once engine:
- DeferredValue: Eventual outcome of an operation, with then/catch/all/race
- SettleState / Settlement: State enum and immutable snapshot
- Handler: Continuation pair registered on a pending value
- wait / result: Block the calling thread until a value settles
"""

from .state import SettleState, Settlement
from .handler import Handler
from .value import DeferredValue
from .wait import wait, result
from .errors import DeferredError, SettlementTimeout, RejectedError, TransportError

__all__ = [
    "SettleState",
    "Settlement",
    "Handler",
    "DeferredValue",
    "wait",
    "result",
    "DeferredError",
    "SettlementTimeout",
    "RejectedError",
    "TransportError",
]
