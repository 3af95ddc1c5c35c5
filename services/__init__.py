"""
Services module for Aasha Backend.

Contains business logic and external service integrations.
"""

# Expose commonly used services for convenient imports
from .sms_service import sms_service  # noqa: F401
