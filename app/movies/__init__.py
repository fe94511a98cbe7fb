"""
Movies app: theatres and customer bookings.

Bookings are written by the mobile app. Creating an Online, confirmed
booking starts the owner payout (payments.signals); this app also sends the
booking confirmation email.
"""
