"""
Tests for authentication app.

- factories.py: UserFactory, OwnerFactory, AdminUserFactory, VerificationDocumentFactory
- test_models.py: User manager and model tests
"""
