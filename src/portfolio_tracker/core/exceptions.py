"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    status_code = 400

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

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class LedgerReadError(AppError):
    """Raised when assets or transactions cannot be loaded from the store."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="LEDGER_UNAVAILABLE")


class ProviderError(AppError):
    """
    Raised by a price provider that could not produce data.

    Covers network errors, timeouts, unparseable payloads, empty results and
    symbol-mapping misses. Never surfaced to API callers: the price resolver
    catches it and moves on to the next provider in the chain.
    """

    status_code = 502

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}", code="PROVIDER_UNAVAILABLE")
