"""
DRF views for payments app.

Endpoints:
    POST /api/v1/payments/orders/ - Create a Razorpay order with owner split
    GET  /api/v1/payments/refund-requests/ - Caller's refund requests
    POST /api/v1/payments/refund-requests/ - Request a refund for a booking
    POST /api/v1/payments/refund-requests/process/ - Approve or reject (admin)

Errors raised by the services are rendered by core.exception_handler:
invalid-argument 400, not-found 404, failed-precondition 409, internal 500.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.models import RefundRequest
from payments.serializers import (
    CreateRefundRequestSerializer,
    CreateSplitOrderSerializer,
    ProcessRefundRequestSerializer,
    RefundRequestSerializer,
    SplitOrderResponseSerializer,
)
from payments.services import (
    CreateRefundRequestParams,
    CreateSplitOrderParams,
    RefundService,
    SplitOrderService,
)
from payments.state_machines import RefundAction


class SplitOrderView(APIView):
    """
    Create a checkout order that pays the theatre owner on capture.

    POST /api/v1/payments/orders/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_split_order",
        summary="Create order with owner split",
        request=CreateSplitOrderSerializer,
        responses={
            200: SplitOrderResponseSerializer,
            400: OpenApiResponse(description="Missing required parameters"),
            409: OpenApiResponse(description="Owner account id is invalid"),
            500: OpenApiResponse(description="Razorpay error"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = CreateSplitOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = SplitOrderService.create_order(
            CreateSplitOrderParams(
                actual_ticket_price=data.get("actual_ticket_price"),
                total_amount=data.get("total_amount"),
                owner_account_id=data.get("owner_account_id"),
                booking_id=data.get("booking_id"),
                theatre_id=data.get("theatre_id"),
                currency=data.get("currency"),
            )
        )
        return Response(SplitOrderResponseSerializer(result).data)


class RefundRequestView(APIView):
    """
    Customer refund requests.

    GET  /api/v1/payments/refund-requests/
    POST /api/v1/payments/refund-requests/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_refund_requests",
        summary="List my refund requests",
        responses={200: RefundRequestSerializer(many=True)},
        tags=["Payments - Refunds"],
    )
    def get(self, request):
        queryset = RefundRequest.objects.filter(user=request.user).order_by("-created_at")
        return Response(RefundRequestSerializer(queryset, many=True).data)

    @extend_schema(
        operation_id="create_refund_request",
        summary="Request a refund",
        description=(
            "Cancel a booking and ask for a refund. The admin reviews the "
            "request; nothing is refunded until it is approved."
        ),
        request=CreateRefundRequestSerializer,
        responses={
            201: OpenApiResponse(description="{success, refundRequestId, message}"),
            400: OpenApiResponse(description="Missing required parameters"),
            404: OpenApiResponse(description="Booking or user not found"),
            409: OpenApiResponse(description="Booking already has a refund request"),
        },
        tags=["Payments - Refunds"],
    )
    def post(self, request):
        serializer = CreateRefundRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        # Only staff may file on behalf of another user
        user_id = request.user.id
        if request.user.is_staff and data.get("user_id"):
            user_id = data["user_id"]

        result = RefundService.create_request(
            CreateRefundRequestParams(
                booking_id=data.get("booking_id"),
                user_id=user_id,
                amount=data.get("amount"),
                payment_id=data.get("payment_id"),
                theatre_id=data.get("theatre_id") or None,
                reason=data.get("reason"),
                show_date=data.get("show_date", ""),
                movie_title=data.get("movie_title", ""),
                theatre_name=data.get("theatre_name", ""),
                selected_seats=data.get("selected_seats", []),
            )
        )
        return Response(
            {
                "success": True,
                "refundRequestId": str(result.refund_request.id),
                "message": result.message,
            },
            status=status.HTTP_201_CREATED,
        )


class ProcessRefundRequestView(APIView):
    """
    Admin approval or rejection of a refund request.

    POST /api/v1/payments/refund-requests/process/
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="process_refund_request",
        summary="Approve or reject a refund request",
        request=ProcessRefundRequestSerializer,
        responses={
            200: OpenApiResponse(
                description="{success, message} or, when approved, "
                "{success, refundId, message, refundBreakdown}"
            ),
            400: OpenApiResponse(description="Missing parameters or invalid action"),
            404: OpenApiResponse(description="Refund request not found"),
            409: OpenApiResponse(description="Refund request already processed"),
            500: OpenApiResponse(description="Refund processing failed"),
        },
        tags=["Payments - Refunds"],
    )
    def post(self, request):
        serializer = ProcessRefundRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = RefundService.process_request(
            data.get("refund_request_id"),
            data.get("action"),
            data.get("admin_notes", ""),
        )

        body = {"success": True, "message": result.message}
        if data.get("action") == RefundAction.APPROVE:
            body["refundId"] = result.refund_id
            body["refundBreakdown"] = result.breakdown.to_dict()
        return Response(body)
