"""
Serializers for the payments API.

Request serializers accept the camelCase keys the mobile app sends and
expose snake_case attributes through source= so views can pass
validated_data straight into the service parameter dataclasses.

Serializers:
    CreateSplitOrderSerializer: POST /payments/orders/
    SplitOrderResponseSerializer: Order creation response
    CreateRefundRequestSerializer: POST /payments/refund-requests/
    ProcessRefundRequestSerializer: POST /payments/refund-requests/process/
    RefundRequestSerializer: Read-only refund request details
"""

from __future__ import annotations

from rest_framework import serializers

from payments.models import RefundRequest


class CreateSplitOrderSerializer(serializers.Serializer):
    """
    Order-with-split input.

    Every field is optional here: missing values are reported by the
    service as "Missing required parameters".
    """

    actualTicketPrice = serializers.DecimalField(
        source="actual_ticket_price",
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
    )
    totalAmount = serializers.DecimalField(
        source="total_amount",
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
    )
    ownerAccountId = serializers.CharField(
        source="owner_account_id", required=False, allow_blank=True, allow_null=True
    )
    bookingId = serializers.CharField(
        source="booking_id", required=False, allow_blank=True, allow_null=True
    )
    theatreId = serializers.CharField(
        source="theatre_id", required=False, allow_blank=True, allow_null=True
    )
    currency = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=3
    )


class SplitOrderResponseSerializer(serializers.Serializer):
    orderId = serializers.CharField(source="order_id")
    ownerShare = serializers.DecimalField(
        source="owner_share", max_digits=12, decimal_places=2
    )
    platformProfit = serializers.DecimalField(
        source="platform_profit", max_digits=12, decimal_places=2
    )
    actualTicketPrice = serializers.DecimalField(
        source="actual_ticket_price", max_digits=12, decimal_places=2
    )
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class CreateRefundRequestSerializer(serializers.Serializer):
    """Customer refund request input."""

    bookingId = serializers.CharField(
        source="booking_id", required=False, allow_blank=True, allow_null=True
    )
    userId = serializers.CharField(
        source="user_id", required=False, allow_blank=True, allow_null=True
    )
    theatreId = serializers.CharField(
        source="theatre_id", required=False, allow_blank=True, allow_null=True
    )
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    paymentId = serializers.CharField(
        source="payment_id", required=False, allow_blank=True, allow_null=True
    )
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    showDate = serializers.CharField(source="show_date", required=False, allow_blank=True)
    movieTitle = serializers.CharField(
        source="movie_title", required=False, allow_blank=True
    )
    theatreName = serializers.CharField(
        source="theatre_name", required=False, allow_blank=True
    )
    selectedSeats = serializers.ListField(
        source="selected_seats",
        child=serializers.CharField(),
        required=False,
    )


class ProcessRefundRequestSerializer(serializers.Serializer):
    """
    Admin decision on a refund request.

    action is validated by the service so that an unknown action is an
    invalid-argument error like the other input errors.
    """

    refundRequestId = serializers.CharField(
        source="refund_request_id", required=False, allow_blank=True, allow_null=True
    )
    action = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    adminNotes = serializers.CharField(
        source="admin_notes", required=False, allow_blank=True, default=""
    )

    def validate_action(self, value):
        return value.lower() if value else value


class RefundRequestSerializer(serializers.ModelSerializer):
    """Read-only refund request for the customer's request history."""

    class Meta:
        model = RefundRequest
        fields = [
            "id",
            "booking",
            "amount",
            "actual_ticket_price",
            "estimated_ticket_price",
            "ticket_price_is_estimated",
            "reason",
            "movie_title",
            "theatre_name",
            "show_date",
            "selected_seats",
            "status",
            "admin_notes",
            "refund_id",
            "refund_breakdown",
            "processed_at",
            "created_at",
        ]
        read_only_fields = fields
