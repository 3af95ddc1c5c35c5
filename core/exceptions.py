"""
Domain errors raised by the service layer.

Each error carries the HTTP status the API answers with; the handler in
``main.py`` renders them. Nothing below the API layer imports FastAPI.
"""


class AashaError(Exception):
    """Base class for service errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AashaError):
    status_code = 404


class ConflictError(AashaError):
    status_code = 409


class AuthenticationError(AashaError):
    status_code = 401


class RegistrationError(AashaError):
    status_code = 400


class ValidationFailedError(AashaError):
    """Carries the per-field errors collected during validation."""

    status_code = 422

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []
