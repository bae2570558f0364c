from __future__ import annotations

from typing import Optional


class StorefrontError(Exception):
    """Base error. `message` is safe to return to the client."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None) -> None:
        if message:
            self.message = message
        # Internal detail for server logs only
        self.detail = detail
        super().__init__(detail or self.message)


class ConfigurationError(StorefrontError):
    status_code = 500
    message = "Email configuration is missing"


class OriginDenied(StorefrontError):
    status_code = 403
    message = "Forbidden"


class RateLimited(StorefrontError):
    status_code = 429
    message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int = 0, message: Optional[str] = None) -> None:
        super().__init__(message)
        self.retry_after = max(0, int(retry_after))


class ValidationError(StorefrontError):
    status_code = 400
    message = "Invalid form data"


class AbuseSuspected(StorefrontError):
    """Bot signal. Never shown to the caller: answered with a normal success."""

    status_code = 200
    message = ""

    def __init__(self, reason: str) -> None:
        super().__init__(detail=reason)
        self.reason = reason


class NotificationError(StorefrontError):
    status_code = 500
    message = "Failed to send order email"
