"""Exceptions raised while configuring the provider."""

from typing import Optional


class ProviderError(Exception):
    """Base class for all provider errors."""


class ConfigurationError(ProviderError):
    """Raised when a required option is missing or cannot be parsed."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class ValidationError(ProviderError):
    """Raised when an option value is outside its allowed set or range."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class ExchangeError(ProviderError):
    """Raised when the AssumeRole token exchange fails."""


class RateLimitExceeded(ExchangeError):
    """Raised when the rate limiter refuses to dispatch an action."""

    def __init__(self, action: str, timeout: float):
        self.action = action
        self.timeout = timeout
        super().__init__(f"Rate limit for action '{action}' not granted within {timeout}s")


class ApiError(ProviderError):
    """Error envelope returned by a TencentCloud API call."""

    def __init__(self, code: str, message: str, request_id: Optional[str] = None):
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message} (RequestId: {request_id or 'unknown'})")
