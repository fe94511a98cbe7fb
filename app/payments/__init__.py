"""
Payments app for Razorpay settlement and refunds.

This app handles:
- Payout of the owner share when a booking is created
- Checkout orders with an automatic owner split
- Customer refund requests and admin approval
- Best-effort recovery of refunded ticket prices from owners

Related apps:
    - movies: Theatre and MovieBooking
    - notifications: Refund notifications

Usage:
    from payments.services import PayoutService, RefundService

    PayoutService.process_booking(booking_id)
    RefundService.process_request(refund_request_id, "approve")
"""
