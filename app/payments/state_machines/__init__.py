"""
State enums for payment records.
"""

from payments.state_machines.states import (
    PayoutStatus,
    RefundAction,
    RefundRequester,
    RefundRequestStatus,
)

__all__ = [
    "PayoutStatus",
    "RefundAction",
    "RefundRequestStatus",
    "RefundRequester",
]
