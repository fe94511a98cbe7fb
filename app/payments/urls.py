"""
URL configuration for the payments app.

Routes:
    - POST /orders/ - Create order with owner split
    - GET/POST /refund-requests/ - Customer refund requests
    - POST /refund-requests/process/ - Admin approve/reject

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
"""

from django.urls import path

from payments.views import ProcessRefundRequestView, RefundRequestView, SplitOrderView

app_name = "payments"

urlpatterns = [
    path("orders/", SplitOrderView.as_view(), name="split_order"),
    path("refund-requests/", RefundRequestView.as_view(), name="refund_requests"),
    path(
        "refund-requests/process/",
        ProcessRefundRequestView.as_view(),
        name="process_refund_request",
    ),
]
