"""
Checkout orders with an automatic split to the theatre owner.

The app asks for a Razorpay order before taking the customer's payment.
The order is created for the full amount with one Route transfer of the
owner share, so Razorpay settles the owner as soon as the payment is
captured. The split is recorded as a SplitOrder.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings

from core.services import BaseService

from payments.adapters import RazorpayAdapter, TransferLeg
from payments.exceptions import (
    PaymentPreconditionError,
    PaymentProcessingError,
    PaymentValidationError,
    RazorpayError,
)
from payments.models import SplitOrder
from payments.services.account_resolver import is_connected_account_id
from payments.services.settlement_calculator import (
    SettlementCalculator,
    from_minor_units,
    to_amount,
    to_minor_units,
)


@dataclass
class CreateSplitOrderParams:
    actual_ticket_price: Decimal | str | float | None
    total_amount: Decimal | str | float | None
    owner_account_id: str | None
    booking_id: str | None
    theatre_id: str | None = None
    currency: str | None = None


@dataclass
class SplitOrderResult:
    order_id: str
    owner_share: Decimal
    platform_profit: Decimal
    actual_ticket_price: Decimal
    amount: Decimal
    split_order: SplitOrder


class SplitOrderService(BaseService):
    """Create Razorpay orders that pay the owner share automatically."""

    _razorpay_adapter: type | None = None

    @classmethod
    def get_razorpay_adapter(cls) -> type:
        return cls._razorpay_adapter or RazorpayAdapter

    @classmethod
    def set_razorpay_adapter(cls, adapter: type | None) -> None:
        cls._razorpay_adapter = adapter

    @classmethod
    def create_order(cls, params: CreateSplitOrderParams) -> SplitOrderResult:
        """
        Create the order and record the split.

        Raises:
            PaymentValidationError: A required field is missing or invalid
            PaymentPreconditionError: owner_account_id is not an acc_ id
            PaymentProcessingError: Razorpay rejected or failed the call
        """
        if not (
            params.actual_ticket_price
            and params.total_amount
            and params.owner_account_id
            and params.booking_id
        ):
            raise PaymentValidationError("Missing required parameters")

        if not is_connected_account_id(params.owner_account_id):
            raise PaymentPreconditionError("Theatre Owner Razorpay Account ID is invalid")

        total = to_amount(params.total_amount, "total amount")
        ticket_price = to_amount(params.actual_ticket_price, "ticket price")
        currency = params.currency or getattr(settings, "PAYMENT_CURRENCY", "INR")
        split = SettlementCalculator.split(total, ticket_price)

        adapter = cls.get_razorpay_adapter()
        try:
            order = adapter.create_order_with_transfers(
                amount_minor=to_minor_units(total),
                currency=currency,
                transfers=[
                    TransferLeg(
                        account=params.owner_account_id,
                        amount_minor=to_minor_units(split.owner_share),
                        currency=currency,
                        notes={
                            "booking_id": str(params.booking_id),
                            "owner_share": str(split.owner_share),
                        },
                    )
                ],
                notes={
                    "booking_id": str(params.booking_id),
                    "owner_share": str(split.owner_share),
                    "platform_profit": str(split.platform_profit),
                    "actual_ticket_price": str(ticket_price),
                },
            )
        except RazorpayError as e:
            cls.get_logger().error(
                "Error creating movie booking Razorpay order with transfer",
                extra={"booking_id": str(params.booking_id), "error_code": e.error_code},
            )
            raise PaymentProcessingError(e.message, details=e.details) from e

        split_order = SplitOrder.objects.create(
            razorpay_order_id=order.id,
            booking_id=str(params.booking_id),
            theatre_id=str(params.theatre_id) if params.theatre_id else None,
            total_paid=total,
            actual_ticket_price=ticket_price,
            owner_share=split.owner_share,
            platform_profit=split.platform_profit,
            owner_account_id=params.owner_account_id,
            currency=currency,
        )

        cls.get_logger().info(
            "Split order created",
            extra={"order_id": order.id, "booking_id": str(params.booking_id)},
        )

        return SplitOrderResult(
            order_id=order.id,
            owner_share=split.owner_share,
            platform_profit=split.platform_profit,
            actual_ticket_price=ticket_price,
            amount=from_minor_units(order.amount_minor),
            split_order=split_order,
        )
