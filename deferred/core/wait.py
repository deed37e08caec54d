"""
Blocking bridge for synchronous callers.

These helpers block the calling thread, never the engine: they attach a
handler with then() and wait on a threading.Event.
"""

import threading
from typing import Any, Optional, Tuple

from .errors import RejectedError, SettlementTimeout
from .state import Settlement, SettleState
from .value import DeferredValue


def wait(value: DeferredValue, timeout: Optional[float] = None) -> Settlement:
    """
    Block until value settles.

    Args:
        value: Value to wait on
        timeout: Seconds to wait (None = forever)

    Returns:
        Settlement snapshot of the settled value

    Raises:
        SettlementTimeout: If timeout elapses first

    Each call registers a handler on value. There is no cancellation, so a
    call that times out leaves its handler (and derived value) on a value
    that never settles; polling such a value in a loop grows its handler list.
    """
    settled = threading.Event()

    def done(*_):
        settled.set()

    value.then(done, done)

    if not settled.wait(timeout):
        raise SettlementTimeout(f"value still pending after {timeout}s")
    return value.settlement()


def result(value: DeferredValue, timeout: Optional[float] = None) -> Tuple[Any, ...]:
    """
    Block until value settles and return its payload.

    Raises:
        SettlementTimeout: If timeout elapses first
        RejectedError: If the value was rejected (reasons on .reasons)
    """
    snap = wait(value, timeout)
    if snap.state is SettleState.FULFILLED:
        return snap.payload

    first = snap.payload[0] if snap.payload else None
    if isinstance(first, BaseException):
        raise RejectedError(snap.payload) from first
    raise RejectedError(snap.payload)
