"""
DRF views for support app.

Endpoints:
    POST /api/v1/support/acknowledgements/ - Email a ticket acknowledgement (admin)
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from support.serializers import SupportAcknowledgementSerializer
from support.services import EMAIL_SENT_MESSAGE, SupportAcknowledgementService


class SupportAcknowledgementView(APIView):
    """
    Acknowledge or answer a support ticket by email.

    POST /api/v1/support/acknowledgements/
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="acknowledge_support_ticket",
        summary="Send support ticket acknowledgement",
        request=SupportAcknowledgementSerializer,
        responses={
            200: OpenApiResponse(description="Email sent!"),
            400: OpenApiResponse(description="Missing ticketId"),
            404: OpenApiResponse(description="Support ticket or user not found"),
            500: OpenApiResponse(description="Failed to send email"),
        },
        tags=["Support"],
    )
    def post(self, request):
        serializer = SupportAcknowledgementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        SupportAcknowledgementService.acknowledge(data["ticket_id"], data["message"])
        return Response({"success": True, "message": EMAIL_SENT_MESSAGE})
