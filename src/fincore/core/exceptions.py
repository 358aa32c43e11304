"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class AssetNotFoundError(NotFoundError):
    """Raised when a ticker has no corresponding asset."""

    def __init__(self, ticker: str):
        super().__init__("Asset", ticker)
        self.ticker = ticker


class UpstreamUnavailableError(AppError):
    """Raised when a backing store or cache cannot serve a request."""

    def __init__(self, message: str):
        super().__init__(message, code="UPSTREAM_UNAVAILABLE")


class CircuitOpenError(UpstreamUnavailableError):
    """Raised when a call is rejected by an open circuit breaker."""

    def __init__(self, name: str):
        super().__init__(f"Circuit '{name}' is open; call not permitted")
        self.name = name
