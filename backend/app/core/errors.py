from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures reported to API callers as typed errors."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.error_code.replace("_", " ")
        super().__init__(self.message)


class NotFoundError(ServiceError):
    status_code = 404
    error_code = "not_found"


class InvalidInputError(ServiceError):
    status_code = 400
    error_code = "invalid_input"


class UnauthorizedError(ServiceError):
    status_code = 401
    error_code = "unauthorized"


class ForbiddenError(ServiceError):
    status_code = 403
    error_code = "forbidden"


class SessionCompletedError(ServiceError):
    status_code = 409
    error_code = "evaluation_completed"


class NoExercisesError(ServiceError):
    status_code = 409
    error_code = "no_exercises"


class AIServiceError(ServiceError):
    status_code = 502
    error_code = "ai_unavailable"
