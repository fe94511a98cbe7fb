"""
Tests for payments API views.

Services run for real against the test database with the Razorpay adapter
mocked, so these cover serializer key mapping and error-to-status mapping.
"""

import uuid

import pytest

from authentication.tests.factories import UserFactory
from movies.tests.factories import MovieBookingFactory
from payments.adapters import OrderResult
from payments.exceptions import RazorpayAPIUnavailableError
from payments.models import RefundRequest
from payments.state_machines import RefundRequestStatus
from payments.tests.factories import RefundRequestFactory


@pytest.fixture(autouse=True)
def no_notifications(mocker):
    mocker.patch("payments.services.refund_service.NotificationService")


@pytest.mark.django_db
class TestSplitOrderView:
    url = "/api/v1/payments/orders/"

    def test_create_order(self, authenticated_client, mock_razorpay_adapter):
        mock_razorpay_adapter.create_order_with_transfers.return_value = OrderResult(
            id="order_view1", amount_minor=50000, currency="INR", status="created"
        )

        response = authenticated_client.post(
            self.url,
            {
                "actualTicketPrice": "440",
                "totalAmount": "500",
                "ownerAccountId": "acc_owner00001",
                "bookingId": "booking-1",
                "theatreId": "theatre-1",
                "currency": "INR",
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data == {
            "orderId": "order_view1",
            "ownerShare": "440.00",
            "platformProfit": "60.00",
            "actualTicketPrice": "440.00",
            "amount": "500.00",
        }

    def test_missing_parameters_is_400(self, authenticated_client, mock_razorpay_adapter):
        response = authenticated_client.post(
            self.url, {"totalAmount": "500"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error"] == "Missing required parameters"

    def test_invalid_account_is_409(self, authenticated_client, mock_razorpay_adapter):
        response = authenticated_client.post(
            self.url,
            {
                "actualTicketPrice": "440",
                "totalAmount": "500",
                "ownerAccountId": "owner_placeholder",
                "bookingId": "booking-1",
            },
            format="json",
        )

        assert response.status_code == 409
        assert response.data["error"] == "Theatre Owner Razorpay Account ID is invalid"

    def test_requires_authentication(self, api_client):
        response = api_client.post(self.url, {}, format="json")

        assert response.status_code in (401, 403)


@pytest.mark.django_db
class TestRefundRequestView:
    url = "/api/v1/payments/refund-requests/"

    def test_create_refund_request(self, authenticated_client, theatre):
        booking = MovieBookingFactory(user=authenticated_client.user, theatre=theatre)

        response = authenticated_client.post(
            self.url,
            {
                "bookingId": str(booking.id),
                "userId": str(authenticated_client.user.id),
                "theatreId": str(theatre.id),
                "amount": "112",
                "paymentId": booking.razorpay_payment_id,
                "reason": "Plans changed",
                "showDate": "2026-10-20",
                "movieTitle": "Interstellar",
                "theatreName": theatre.name,
                "selectedSeats": ["A1", "A2"],
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["success"] is True
        refund_request = RefundRequest.objects.get(id=response.data["refundRequestId"])
        assert refund_request.reason == "Plans changed"
        assert refund_request.selected_seats == ["A1", "A2"]
        assert response.data["message"].startswith("BookMyBiz movie booking refund request")

    def test_user_defaults_to_caller(self, authenticated_client, theatre):
        booking = MovieBookingFactory(user=authenticated_client.user, theatre=theatre)

        response = authenticated_client.post(
            self.url,
            {
                "bookingId": str(booking.id),
                "amount": "112",
                "paymentId": booking.razorpay_payment_id,
            },
            format="json",
        )

        assert response.status_code == 201
        refund_request = RefundRequest.objects.get(id=response.data["refundRequestId"])
        assert refund_request.user == authenticated_client.user

    def test_missing_booking_is_400(self, authenticated_client):
        response = authenticated_client.post(
            self.url, {"amount": "112", "paymentId": "pay_x"}, format="json"
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("theatre_id", ["__unknown__", "theatre_abc"])
    def test_theatre_not_matching_booking_is_400(self, authenticated_client, theatre, theatre_id):
        booking = MovieBookingFactory(user=authenticated_client.user, theatre=theatre)
        if theatre_id == "__unknown__":
            theatre_id = str(uuid.uuid4())

        response = authenticated_client.post(
            self.url,
            {
                "bookingId": str(booking.id),
                "theatreId": theatre_id,
                "amount": "112",
                "paymentId": booking.razorpay_payment_id,
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"] == "Theatre does not match booking"
        assert not RefundRequest.objects.exists()

    def test_theatre_taken_from_booking(self, authenticated_client, theatre):
        booking = MovieBookingFactory(user=authenticated_client.user, theatre=theatre)

        response = authenticated_client.post(
            self.url,
            {
                "bookingId": str(booking.id),
                "amount": "112",
                "paymentId": booking.razorpay_payment_id,
            },
            format="json",
        )

        assert response.status_code == 201
        refund_request = RefundRequest.objects.get(id=response.data["refundRequestId"])
        assert refund_request.theatre_id == theatre.id

    def test_user_id_ignored_for_customers(self, authenticated_client, theatre):
        other = UserFactory()
        booking = MovieBookingFactory(user=other, theatre=theatre)

        response = authenticated_client.post(
            self.url,
            {
                "bookingId": str(booking.id),
                "userId": str(other.id),
                "amount": "112",
                "paymentId": booking.razorpay_payment_id,
            },
            format="json",
        )

        assert response.status_code == 201
        refund_request = RefundRequest.objects.get(id=response.data["refundRequestId"])
        assert refund_request.user == authenticated_client.user

    def test_staff_can_file_for_another_user(self, admin_client, theatre):
        customer = UserFactory()
        booking = MovieBookingFactory(user=customer, theatre=theatre)

        response = admin_client.post(
            self.url,
            {
                "bookingId": str(booking.id),
                "userId": str(customer.id),
                "amount": "112",
                "paymentId": booking.razorpay_payment_id,
            },
            format="json",
        )

        assert response.status_code == 201
        refund_request = RefundRequest.objects.get(id=response.data["refundRequestId"])
        assert refund_request.user == customer

    def test_list_own_requests(self, authenticated_client, theatre):
        mine = RefundRequestFactory(
            booking__user=authenticated_client.user, booking__theatre=theatre
        )
        RefundRequestFactory(booking__theatre=theatre)

        response = authenticated_client.get(self.url)

        assert response.status_code == 200
        assert [item["id"] for item in response.data] == [str(mine.id)]


@pytest.mark.django_db
class TestProcessRefundRequestView:
    url = "/api/v1/payments/refund-requests/process/"

    def test_approve(self, admin_client, refund_request, mock_razorpay_adapter):
        response = admin_client.post(
            self.url,
            {"refundRequestId": str(refund_request.id), "action": "approve", "adminNotes": "ok"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["success"] is True
        assert response.data["refundId"] == "rfnd_test123"
        assert response.data["message"] == "Refund processed successfully"
        assert response.data["refundBreakdown"]["totalAmount"] == "112.00"
        assert response.data["refundBreakdown"]["theatreOwnerRecovered"] is True

    def test_reject(self, admin_client, refund_request, mock_razorpay_adapter):
        response = admin_client.post(
            self.url,
            {"refundRequestId": str(refund_request.id), "action": "reject"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data == {"success": True, "message": "Refund request rejected"}

    def test_already_processed_is_409(self, admin_client, theatre, mock_razorpay_adapter):
        refund_request = RefundRequestFactory(
            booking__theatre=theatre, status=RefundRequestStatus.PROCESSED
        )

        response = admin_client.post(
            self.url,
            {"refundRequestId": str(refund_request.id), "action": "approve"},
            format="json",
        )

        assert response.status_code == 409
        assert response.data["error"] == "Refund request already processed"
        mock_razorpay_adapter.refund_payment.assert_not_called()

    def test_unknown_request_is_404(self, admin_client, mock_razorpay_adapter):
        response = admin_client.post(
            self.url,
            {
                "refundRequestId": "00000000-0000-0000-0000-000000000000",
                "action": "approve",
            },
            format="json",
        )

        assert response.status_code == 404

    def test_invalid_action_is_400(self, admin_client, refund_request):
        response = admin_client.post(
            self.url,
            {"refundRequestId": str(refund_request.id), "action": "cancel"},
            format="json",
        )

        assert response.status_code == 400

    def test_refund_failure_is_500(self, admin_client, refund_request, mock_razorpay_adapter):
        mock_razorpay_adapter.refund_payment.side_effect = RazorpayAPIUnavailableError(
            "Razorpay is unavailable"
        )

        response = admin_client.post(
            self.url,
            {"refundRequestId": str(refund_request.id), "action": "approve"},
            format="json",
        )

        assert response.status_code == 500
        assert response.data["error"] == "Refund processing failed: Razorpay is unavailable"
        assert RefundRequest.objects.get(id=refund_request.id).status == RefundRequestStatus.FAILED

    def test_customer_cannot_process(self, authenticated_client, refund_request):
        response = authenticated_client.post(
            self.url,
            {"refundRequestId": str(refund_request.id), "action": "approve"},
            format="json",
        )

        assert response.status_code == 403
