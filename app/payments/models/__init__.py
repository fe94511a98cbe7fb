"""
Payment domain models.

This module contains all payment-related models:
- SettlementRecord: Money split of a settled booking
- SplitOrder: Razorpay order created with a transfer to the owner
- RefundRequest: Customer refund request reviewed by an admin

Bookings and theatres live in the movies app.
"""

from payments.models.refund_request import RefundRequest
from payments.models.settlement import SettlementRecord, SplitOrder

__all__ = [
    "RefundRequest",
    "SettlementRecord",
    "SplitOrder",
]
