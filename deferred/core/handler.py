"""
Handler: continuation pair attached to a pending deferred value.
"""

from dataclasses import dataclass
from typing import Any, Callable, Tuple

from .state import SettleState

# Continuation signature: (payload tuple) -> None
Continuation = Callable[[Tuple[Any, ...]], None]


@dataclass(frozen=True)
class Handler:
    """
    Registered pair of continuations.

    Exactly one side runs, once, when the owning value settles.
    """
    on_fulfilled: Continuation
    on_rejected: Continuation

    def dispatch(self, state: SettleState, payload: Tuple[Any, ...]) -> None:
        """
        Invoke the side matching state.

        Raises:
            ValueError: If state is PENDING
        """
        if state is SettleState.FULFILLED:
            self.on_fulfilled(payload)
        elif state is SettleState.REJECTED:
            self.on_rejected(payload)
        else:
            raise ValueError("cannot dispatch a pending value")
