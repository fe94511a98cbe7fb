"""
Notifications app for push notification delivery.

This app provides:
- NotificationType model for notification templates and Android channels
- Notification model for storing user notifications
- NotificationService for centralized notification creation
- Celery task for async push delivery through Firebase Cloud Messaging
- Signal handlers that alert the admin and theatre owners

Usage:
    from notifications.services import NotificationService

    NotificationService.send_to_user(
        user_id,
        type_key="refund_rejected",
        title="Refund Request Rejected",
        body="Your refund request has been rejected.",
        data={"refundRequestId": str(refund_request.id)},
    )
"""
