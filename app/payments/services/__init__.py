"""
Payment services for booking settlement and refunds.

This module provides:
- PayoutService: Settles a booking's owner share through Razorpay Route
- SplitOrderService: Creates checkout orders that split automatically
- RefundService: Customer refund requests and admin processing
- AccountResolver: Finds a theatre owner's linked account id
- SettlementCalculator: Owner share and platform profit arithmetic

Usage:
    from payments.services import PayoutService

    result = PayoutService.process_booking(booking_id)

    from payments.services import RefundService

    result = RefundService.process_request(refund_request_id, "approve")
"""

from payments.services.account_resolver import AccountResolver
from payments.services.order_service import (
    CreateSplitOrderParams,
    SplitOrderResult,
    SplitOrderService,
)
from payments.services.payout_service import PayoutOutcome, PayoutService
from payments.services.refund_service import (
    CreateRefundRequestParams,
    ProcessRefundResult,
    RefundBreakdown,
    RefundRequestCreated,
    RefundService,
)
from payments.services.settlement_calculator import SettlementCalculator

__all__ = [
    "AccountResolver",
    "CreateRefundRequestParams",
    "CreateSplitOrderParams",
    "PayoutOutcome",
    "PayoutService",
    "ProcessRefundResult",
    "RefundBreakdown",
    "RefundRequestCreated",
    "RefundService",
    "SettlementCalculator",
    "SplitOrderResult",
    "SplitOrderService",
]
