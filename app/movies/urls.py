"""
URL configuration for movies app.
"""

from django.urls import path

from movies.views import BookingConfirmationEmailView

app_name = "movies"

urlpatterns = [
    path(
        "bookings/confirmation-email/",
        BookingConfirmationEmailView.as_view(),
        name="booking_confirmation_email",
    ),
]
