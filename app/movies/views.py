"""
DRF views for movies app.

Endpoints:
    POST /api/v1/movies/bookings/confirmation-email/ - Mail the booking summary
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from movies.serializers import (
    BookingConfirmationEmailResponseSerializer,
    BookingConfirmationEmailSerializer,
)
from movies.services import BookingConfirmation, BookingConfirmationEmailService


class BookingConfirmationEmailView(APIView):
    """
    Send the booking confirmation email.

    POST /api/v1/movies/bookings/confirmation-email/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="send_booking_confirmation_email",
        summary="Send booking confirmation email",
        request=BookingConfirmationEmailSerializer,
        responses={
            200: BookingConfirmationEmailResponseSerializer,
            400: OpenApiResponse(description="Valid recipient email (to) is required"),
            500: OpenApiResponse(description="Email could not be sent"),
        },
        tags=["Movies"],
    )
    def post(self, request):
        serializer = BookingConfirmationEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message_id = BookingConfirmationEmailService.send(
            BookingConfirmation(**serializer.validated_data)
        )
        return Response({"ok": True, "id": message_id})
