"""
Error taxonomy and failure classification for qdrant-harness.

Only errors on the explicit backend allow-list are eligible for retry.
Everything else is treated as a test failure and surfaces immediately.
"""

from enum import Enum

from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse


class HarnessError(Exception):
    """Base class for harness errors"""
    pass


class BackendError(HarnessError):
    """Failure surfaced by the Qdrant backend (timeout, unavailability, bad status)"""

    def __init__(self, message: str, operation: str = "", collection_name: str = ""):
        super().__init__(message)
        self.operation = operation
        self.collection_name = collection_name


class ConfigurationError(HarnessError, ValueError):
    """Harness or manager misconfiguration, never retried"""
    pass


class FailureKind(Enum):
    """Classification of a failed test attempt"""
    BACKEND = "backend"
    ASSERTION = "assertion"
    CONFIGURATION = "configuration"


# Exception types raised by the backend stack. Test bodies that talk to
# the raw client can raise the qdrant_client types directly.
BACKEND_ERRORS = (BackendError, UnexpectedResponse, ResponseHandlingException)


def classify_failure(error: BaseException) -> FailureKind:
    """Map an exception to its failure kind"""
    if isinstance(error, ConfigurationError):
        return FailureKind.CONFIGURATION
    if isinstance(error, BACKEND_ERRORS):
        return FailureKind.BACKEND
    return FailureKind.ASSERTION


def is_backend_error(error: BaseException) -> bool:
    """Check whether an exception is eligible for retry"""
    return classify_failure(error) is FailureKind.BACKEND
