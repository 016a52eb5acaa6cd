"""Core Package for RIS Search Service

This package holds the pieces of the client layer that do not perform I/O:
the error taxonomy, response normalization and direct document URL resolution.
"""

from .errors import (
    DocumentUrlNotAllowedError,
    ErrorKind,
    RISAPIError,
    RISParsingError,
    RISTimeoutError,
    classify_transport_error,
)
from .normalizer import (
    extract,
    extract_search_results,
    parse_json_response,
)
from .url_resolver import (
    DOCUMENT_URL_PATTERNS,
    construct_document_url,
    is_allowed_url,
    is_valid_dokumentnummer,
)

__all__ = [
    # Errors
    "DocumentUrlNotAllowedError",
    "ErrorKind",
    "RISAPIError",
    "RISParsingError",
    "RISTimeoutError",
    "classify_transport_error",
    # Normalization
    "extract",
    "extract_search_results",
    "parse_json_response",
    # URL resolution
    "DOCUMENT_URL_PATTERNS",
    "construct_document_url",
    "is_allowed_url",
    "is_valid_dokumentnummer",
]
