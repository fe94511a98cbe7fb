"""
Authentication application.

Accounts for customers, theatre owners and the platform operator, all
identified by email. API clients authenticate with simplejwt tokens from
/api/v1/auth/token/.

Key components:
    - User: email login, user type, FCM device token, payment details
    - VerificationDocument: identity documents submitted for review
"""
