"""
Custom exception classes for the QA API.
"""


class APIException(Exception):
    """Base exception for API errors."""

    error: str = "Request failed"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidQuestionError(APIException):
    """Raised when the question is missing, not a string, or blank."""

    error = "Invalid request"

    def __init__(self, message: str = "Question field is required and must be a string"):
        super().__init__(message, 400)


class ConfigurationError(APIException):
    """Raised when required configuration is absent."""

    error = "Internal server error"

    def __init__(self, message: str = "Application is not configured"):
        super().__init__(message, 500)


class FetchError(APIException):
    """Raised when the upstream message fetch fails with nothing to keep."""

    error = "Internal server error"

    def __init__(self, message: str = "Failed to fetch messages", fatal: bool = True):
        self.fatal = fatal
        super().__init__(message, 500)


class ConcurrentFetchError(APIException):
    """Raised when a cache population is requested while one is in flight."""

    error = "Service unavailable"

    def __init__(self, message: str = "Already fetching messages, retry shortly"):
        super().__init__(message, 503)
