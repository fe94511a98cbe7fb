"""
Support app: customer and theatre owner support tickets.

Tickets are opened from the app. Operators acknowledge or answer them by
email through POST /api/v1/support/acknowledgements/.
"""
