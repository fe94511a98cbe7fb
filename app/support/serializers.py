"""
Serializers for support endpoints.
"""

from rest_framework import serializers


class SupportAcknowledgementSerializer(serializers.Serializer):
    ticketId = serializers.CharField(
        source="ticket_id", required=False, allow_blank=True, default=""
    )
    message = serializers.CharField(required=False, allow_blank=True, default="")
