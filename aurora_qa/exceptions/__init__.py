"""
Custom exceptions for the application.
"""

from .exceptions import (
    APIException,
    ConcurrentFetchError,
    ConfigurationError,
    FetchError,
    InvalidQuestionError,
)

__all__ = [
    "APIException",
    "ConcurrentFetchError",
    "ConfigurationError",
    "FetchError",
    "InvalidQuestionError",
]
