"""Tests for toolkit: EmailService and log masking helpers."""
