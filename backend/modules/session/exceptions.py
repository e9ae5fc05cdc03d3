"""
Session module exceptions.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError

# Message used when the server gives no usable error body
NETWORK_ERROR_MESSAGE = "Network error occurred"


class AuthRequestError(ExternalServiceError):
    """
    Raised by the API client when an auth call does not succeed.

    Carries the server's message and code when the response had an error
    envelope, otherwise a generic message. http_status is None when no
    response was received at all.
    """

    def __init__(
        self,
        message: str = NETWORK_ERROR_MESSAGE,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        super().__init__(message, service="identity", code=code or "NETWORK_ERROR")
        self.http_status = http_status
        if http_status is not None:
            self.details["http_status"] = http_status
