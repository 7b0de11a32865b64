# dietbuddy/errors.py
"""
Error taxonomy shared by the services and routes.

Every ApiError is rendered by the app-level error handler as
{"message": ...} with its status code.
"""


class ApiError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400
    message = "Invalid request"


class InsufficientBalanceError(ApiError):
    status_code = 400
    message = "Not enough coins"


class ForbiddenError(ApiError):
    status_code = 403
    message = "Access denied"


class NotFoundError(ApiError):
    status_code = 404
    message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    message = "Concurrent update, please retry"


class UpstreamError(ApiError):
    status_code = 502
    message = "Payment gateway error"


class PersistenceError(ApiError):
    status_code = 500
    message = "Internal server error"


class StoreUnavailableError(PersistenceError):
    status_code = 503
    message = "Database unavailable. Please try again later."
