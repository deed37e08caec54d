"""
DeferredValue: settle-once container for an eventually-available result.

A value starts PENDING and transitions exactly once to FULFILLED or REJECTED.
Producers settle it from any thread through the resolve/reject functions
passed to the executor; consumers chain continuations with then()/catch().

Dispatch is inline: handlers run on the thread that settles the value, or on
the thread calling then() when the value is already settled. There is no
scheduler and then() never blocks. A settlement made from inside a running
handler queues its own handlers on that thread's drain loop, so they run
after the current handler returns and before the outermost settle returns.
"""

import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Iterable, List, Optional, Tuple

from .handler import Handler
from .state import SettleState, Settlement

logger = logging.getLogger(__name__)

# Executor signature: (resolve, reject) -> None
Executor = Callable[[Callable[..., None], Callable[..., None]], None]
Callback = Optional[Callable[..., Any]]


class DeferredValue:
    """
    Eventual outcome of an operation.

    Usage:
        dv = DeferredValue(lambda resolve, reject: resolve(1, "a"))
        dv.then(lambda n, s: print(n, s))
        DeferredValue.all([dv, DeferredValue.resolve(2)]).then(print)

    Payloads are tuples: resolve(1, "a") stores (1, "a") and continuations
    receive the values spread as positional arguments.
    """

    def __init__(self, executor: Executor) -> None:
        """
        Create a pending value and run executor synchronously.

        Args:
            executor: Called once with (resolve, reject). If it raises, the
                value is rejected with the exception as the sole reason.
        """
        self._lock = threading.Lock()
        self._state = SettleState.PENDING
        self._payload: Tuple[Any, ...] = ()
        self._handlers: List[Handler] = []

        try:
            executor(self._resolve, self._reject)
        except Exception as ex:
            logger.debug("Executor raised, rejecting: %r", ex)
            self._reject(ex)

    # Settlement

    def _resolve(self, *values: Any) -> None:
        self._settle(SettleState.FULFILLED, values)

    def _reject(self, *reasons: Any) -> None:
        self._settle(SettleState.REJECTED, reasons)

    def _settle(self, state: SettleState, payload: Tuple[Any, ...]) -> bool:
        """
        Transition out of PENDING and dispatch waiting handlers.

        The check-and-transition and the handler list swap are one critical
        section. Handlers run after the lock is released.

        Returns:
            True if this call settled the value, False if it was already settled
        """
        with self._lock:
            if self._state is not SettleState.PENDING:
                ignored = True
            else:
                ignored = False
                self._state = state
                self._payload = tuple(payload)
                handlers, self._handlers = self._handlers, []

        if ignored:
            logger.debug("Ignoring %s settlement of already settled value", state.value)
            return False

        _dispatch((handler, state, self._payload) for handler in handlers)
        return True

    # Inspection

    @property
    def state(self) -> SettleState:
        with self._lock:
            return self._state

    @property
    def payload(self) -> Tuple[Any, ...]:
        with self._lock:
            return self._payload

    @property
    def is_pending(self) -> bool:
        return self.state is SettleState.PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self.state is SettleState.FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self.state is SettleState.REJECTED

    def settlement(self) -> Settlement:
        """Return a consistent (state, payload) snapshot."""
        with self._lock:
            return Settlement(state=self._state, payload=self._payload)

    def __repr__(self) -> str:
        snap = self.settlement()
        if snap.state is SettleState.PENDING:
            return "<DeferredValue pending>"
        return f"<DeferredValue {snap.state.value} {snap.payload!r}>"

    # Chaining

    def then(self, on_fulfilled: Callback = None, on_rejected: Callback = None) -> "DeferredValue":
        """
        Register continuations and return a derived value.

        Args:
            on_fulfilled: Called with the payload spread as arguments
            on_rejected: Called with the reasons spread as arguments

        Returns:
            Derived value that:
            - follows the callback's return value if it is a DeferredValue
            - is rejected with the exception if the callback raises
            - otherwise settles the same way as this value, with the same payload
        """

        def executor(resolve, reject):
            handler = Handler(
                on_fulfilled=_link(on_fulfilled, resolve, resolve, reject),
                on_rejected=_link(on_rejected, reject, resolve, reject),
            )
            with self._lock:
                if self._state is SettleState.PENDING:
                    self._handlers.append(handler)
                    return
                state, payload = self._state, self._payload
            handler.dispatch(state, payload)

        return DeferredValue(executor)

    def catch(self, on_rejected: Callback = None) -> "DeferredValue":
        """Shorthand for then(None, on_rejected)."""
        return self.then(None, on_rejected)

    # Constructors and combinators

    @staticmethod
    def resolve(*values: Any) -> "DeferredValue":
        """Create a value already fulfilled with values."""
        return DeferredValue(lambda resolve, _: resolve(*values))

    @staticmethod
    def reject(*reasons: Any) -> "DeferredValue":
        """Create a value already rejected with reasons."""
        return DeferredValue(lambda _, reject: reject(*reasons))

    @staticmethod
    def all(values: Iterable["DeferredValue"]) -> "DeferredValue":
        """
        Fulfill with a list of every input's first payload value, in input order.

        Rejects with the reasons of the first input to reject. Inputs still in
        flight are left running. An empty input fulfills with [].
        """
        values = list(values)

        def executor(resolve, reject):
            if not values:
                resolve([])
                return

            results: List[Any] = [None] * len(values)
            remaining = len(values)
            lock = threading.Lock()

            def collect(idx):
                def on_fulfilled(*payload):
                    nonlocal remaining
                    with lock:
                        results[idx] = payload[0] if payload else None
                        remaining -= 1
                        done = remaining == 0
                    if done:
                        resolve(list(results))

                return on_fulfilled

            for idx, value in enumerate(values):
                value.then(collect(idx), reject)

        return DeferredValue(executor)

    @staticmethod
    def race(values: Iterable["DeferredValue"]) -> "DeferredValue":
        """
        Settle with the outcome of whichever input settles first.

        An empty input never settles.
        """
        values = list(values)

        def executor(resolve, reject):
            for value in values:
                value.then(resolve, reject)

        return DeferredValue(executor)


def _link(callback: Callback, passthrough, resolve, reject):
    """
    Build the continuation driving a derived value from one side of its parent.

    passthrough is the derived value's resolve or reject, used when the
    callback is absent or returns something other than a DeferredValue.
    """

    def run(payload: Tuple[Any, ...]) -> None:
        try:
            returned = callback(*payload) if callback is not None else None
        except Exception as ex:
            reject(ex)
            return

        if isinstance(returned, DeferredValue):
            returned.then(resolve, reject)
        else:
            passthrough(*payload)

    return run


class _DispatchQueue(threading.local):
    """Per-thread FIFO of (handler, state, payload) awaiting dispatch."""

    def __init__(self) -> None:
        self.pending: Deque[Tuple[Handler, SettleState, Tuple[Any, ...]]] = deque()
        self.draining = False


_dispatch_queue = _DispatchQueue()


def _dispatch(batch: Iterable[Tuple[Handler, SettleState, Tuple[Any, ...]]]) -> None:
    """
    Run handlers iteratively on the calling thread.

    A settlement made while this thread is already draining only queues its
    handlers; the outermost call runs them, so chain depth never grows the stack.
    """
    queue = _dispatch_queue
    queue.pending.extend(batch)
    if queue.draining:
        return

    queue.draining = True
    try:
        while queue.pending:
            handler, state, payload = queue.pending.popleft()
            handler.dispatch(state, payload)
    finally:
        queue.draining = False
