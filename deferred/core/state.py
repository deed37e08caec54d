"""
State model for deferred values.

A deferred value is either pending or settled (fulfilled / rejected).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple


class SettleState(Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Settlement:
    """
    Immutable snapshot of a deferred value.

    Fields:
        state: SettleState at the time of the snapshot
        payload: Values (fulfilled) or reasons (rejected); empty while pending
    """
    state: SettleState
    payload: Tuple[Any, ...] = ()

    @property
    def settled(self) -> bool:
        return self.state is not SettleState.PENDING
