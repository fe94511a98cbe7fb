"""
Core Application - Infrastructure & Base Classes

Shared building blocks for the domain apps (movies, payments,
notifications, support). Nothing here knows about bookings or money.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError and its typed subclasses

API (core.exception_handler):
    - application_exception_handler: DRF handler for domain errors
"""
