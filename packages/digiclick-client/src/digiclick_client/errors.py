"""Failure taxonomy for outbound API calls.

These exceptions are raised and caught inside the client only. Every one of
them converts to an ``ApiFailure`` at the client boundary so callers branch
on ``result.success`` instead of exception types.
"""

from digiclick_client.schemas.result import ApiFailure

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
TIMEOUT_MESSAGE = "Request timeout. Please try again."
NETWORK_MESSAGE = "Network error. Please try again."
CANCELLED_MESSAGE = "Request cancelled."


class ClientError(Exception):
    """Base class for expected request failures."""

    status: int = 0
    message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_result(self) -> ApiFailure:
        return ApiFailure(error=self.message, status=self.status)


class RateLimitExceeded(ClientError):
    """Local, pre-flight rejection: the endpoint's window is full."""

    status = 429
    message = RATE_LIMIT_MESSAGE

    def __init__(self, endpoint: str, retry_after: float) -> None:
        self.endpoint = endpoint
        self.retry_after = retry_after
        super().__init__()


class RequestTimeout(ClientError):
    status = 408
    message = TIMEOUT_MESSAGE


class NetworkError(ClientError):
    """DNS failure, refused connection, reset, offline."""

    status = 0
    message = NETWORK_MESSAGE

    def __init__(self, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__()


class RequestCancelled(ClientError):
    status = 0
    message = CANCELLED_MESSAGE


class MaxRetriesExceeded(ClientError):
    """All attempts failed; reports the last attempt's failure to the caller."""

    def __init__(self, last_error: ClientError, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        self.status = last_error.status
        super().__init__(last_error.message)
