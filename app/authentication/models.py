"""
Authentication models.

This module defines the account models shared by customers, theatre owners
and the platform operator:
- User: Custom user model with email-based authentication
- VerificationDocument: Identity document a user submits for manual review

Related files:
    - managers.py: Custom user manager for email-based creation
    - notifications/handlers.py: Admin alert when a document is submitted

Payment details:
    Theatre owners register a Razorpay linked account id ("acc_...").
    Several generations of the mobile app stored it under different keys,
    so the raw map is kept as-is in User.payment_details and read through
    payments.services.account_resolver.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from authentication.managers import UserManager


class UserType(models.TextChoices):
    """Kind of account; decides which support mailbox answers the user."""

    USER = "User", "User"
    OWNER = "Owner", "Theatre Owner"
    ADMIN = "Admin", "Admin"


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        name: Display name used in notifications and emails
        user_type: Customer, theatre owner or admin
        fcm_token: Firebase Cloud Messaging device token (latest device)
        payment_details: Raw payment settings map as written by the app
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created

    Usage:
        owner = User.objects.create_user(
            email="owner@example.com",
            password="securepassword",
            user_type=UserType.OWNER,
            payment_details={"razorpayAccountId": "acc_Hx1"},
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name shown in notifications and emails",
    )

    user_type = models.CharField(
        max_length=20,
        choices=UserType.choices,
        default=UserType.USER,
        help_text="Customer, theatre owner or platform admin",
    )

    fcm_token = models.CharField(
        max_length=512,
        blank=True,
        default="",
        help_text="Firebase Cloud Messaging token of the user's latest device",
    )

    payment_details = models.JSONField(
        default=dict,
        blank=True,
        help_text="Payment settings map; holds the Razorpay linked account id",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]

    @property
    def display_name(self) -> str:
        """Name for notification copy, falling back to a neutral label."""
        return self.name or "User"


class VerificationStatus(models.TextChoices):
    PENDING = "pending", "Pending Review"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class VerificationDocument(UUIDPrimaryKeyMixin, BaseModel):
    """
    Identity document submitted by a user (usually a theatre owner).

    One document per user; resubmission replaces the file and resets the
    status. Creating the record alerts the admin through a push notification.
    """

    user = models.OneToOneField(
        "authentication.User",
        on_delete=models.CASCADE,
        related_name="verification_document",
        help_text="User who submitted the document",
    )

    document_type = models.CharField(
        max_length=50,
        help_text="Kind of document (PAN, Aadhaar, GST certificate, ...)",
    )

    document_url = models.URLField(
        max_length=500,
        help_text="Storage URL of the uploaded document",
    )

    status = models.CharField(
        max_length=20,
        choices=VerificationStatus.choices,
        default=VerificationStatus.PENDING,
        db_index=True,
        help_text="Review status",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Verification Document"
        verbose_name_plural = "Verification Documents"

    def __str__(self) -> str:
        return f"VerificationDocument({self.user_id}, {self.status})"
