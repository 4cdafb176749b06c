"""HTTP error taxonomy. Every error reaches the client as {"error": detail}."""
from fastapi import HTTPException


class AppError(HTTPException):
    status_code = 500

    def __init__(self, detail: str, headers: dict[str, str] | None = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class ValidationError(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


class RateLimited(AppError):
    status_code = 429


class UpstreamFailure(AppError):
    """AI service or sandbox answered with an error."""

    status_code = 500


class UpstreamTimeout(AppError):
    status_code = 504
