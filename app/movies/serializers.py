"""
Serializers for movies app endpoints.

Request keys are camelCase to match the mobile app.
"""

from rest_framework import serializers


class BookingConfirmationEmailSerializer(serializers.Serializer):
    """Booking details for the confirmation email. Only `to` is checked by the service."""

    to = serializers.CharField(required=False, allow_blank=True, default="")
    userName = serializers.CharField(
        source="user_name", required=False, allow_blank=True, default="Customer"
    )
    bookingId = serializers.CharField(
        source="booking_id", required=False, allow_blank=True, default=""
    )
    movieTitle = serializers.CharField(
        source="movie_title", required=False, allow_blank=True, default=""
    )
    theatreName = serializers.CharField(
        source="theatre_name", required=False, allow_blank=True, default=""
    )
    showDate = serializers.CharField(
        source="show_date", required=False, allow_blank=True, default=""
    )
    showTime = serializers.CharField(
        source="show_time", required=False, allow_blank=True, default=""
    )
    selectedSeats = serializers.ListField(
        source="selected_seats", child=serializers.CharField(), required=False, default=list
    )
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default=0
    )
    paymentMethod = serializers.CharField(
        source="payment_method", required=False, allow_blank=True, default="Online"
    )


class BookingConfirmationEmailResponseSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    id = serializers.CharField()
