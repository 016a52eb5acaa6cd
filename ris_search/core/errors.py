"""Error taxonomy of the RIS client layer.

Every failure is classified exactly once, at the place it is first detected,
into one of three kinds:

- ``RISAPIError``: non-success HTTP status or any transport failure
- ``RISTimeoutError``: the per-call deadline expired before the transfer completed
- ``RISParsingError``: the response body is not valid JSON

Already classified errors pass through every outer layer unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import httpx


class ErrorKind(str, Enum):
    """Discriminator of the error taxonomy"""

    api = "api"
    timeout = "timeout"
    parsing = "parsing"


class RISAPIError(Exception):
    """Base exception for RIS API errors"""

    kind: ErrorKind = ErrorKind.api

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RISTimeoutError(RISAPIError):
    """Raised when a request to the RIS API times out"""

    kind = ErrorKind.timeout

    def __init__(self, message: str = "Request to RIS API timed out"):
        super().__init__(message)


class RISParsingError(RISAPIError):
    """Raised when a response body cannot be parsed as JSON"""

    kind = ErrorKind.parsing

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error


class DocumentUrlNotAllowedError(ValueError):
    """Raised before fetching an external URL outside the RIS host allow-list"""

    def __init__(self, url: str):
        super().__init__(f"URL not allowed for document fetching: {url}")
        self.url = url


def is_timeout(exc: BaseException) -> bool:
    """True for deadline expiry from the anyio scope or from httpx itself"""
    return isinstance(exc, (TimeoutError, httpx.TimeoutException))


def classify_transport_error(
    exc: BaseException,
    target: str,
    timeout_ms: int,
) -> RISAPIError:
    """
    Map a failure of one transfer to its error kind

    Args:
        exc: The exception raised while performing the transfer
        target: Endpoint or URL description used in the message
        timeout_ms: Deadline that applied to the transfer

    Returns:
        ``exc`` itself if it is already classified, otherwise a new
        ``RISTimeoutError`` or ``RISAPIError`` (without status code)
    """
    if isinstance(exc, RISAPIError):
        return exc

    if is_timeout(exc):
        return RISTimeoutError(f"Request to {target} timed out after {timeout_ms}ms")

    detail = str(exc) or exc.__class__.__name__
    return RISAPIError(f"Request failed for {target}: {detail}")
