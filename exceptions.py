"""Custom exceptions for the session-summary service."""


class ConfigurationError(Exception):
    """Raised when the service is missing required configuration."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class ValidationError(Exception):
    """Raised when the incoming request is malformed or incomplete."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class UpstreamError(Exception):
    """Raised when an external AI service call fails."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class TranscriptionError(UpstreamError):
    """Raised when audio transcription fails."""


class LLMServiceError(UpstreamError):
    """Raised when the summary completion call fails."""
