"""
Payment adapters for external services.

All Razorpay API calls go through RazorpayAdapter to get consistent error
handling, timeouts and structured logging.

Usage:
    from payments.adapters import RazorpayAdapter, TransferLeg

    RazorpayAdapter.refund_payment("pay_Y", amount_minor=11200, notes={...})
"""

from payments.adapters.razorpay_adapter import (
    OrderResult,
    RazorpayAdapter,
    RefundResult,
    TransferLeg,
    TransferResult,
)

__all__ = [
    "OrderResult",
    "RazorpayAdapter",
    "RefundResult",
    "TransferLeg",
    "TransferResult",
]
