"""Response normalization

RIS responses are a JSON re-encoding of the OGD XML schema: attributes are
keyed ``@name``, text content lives under ``#text`` and fields that can occur
once or many times are emitted either as an object or as a list. This module
turns such a body into a `NormalizedSearchResult`.

Only a body that is not JSON at all is an error. Every parsed value yields a
fully populated result.
"""

from __future__ import annotations

import json
import math
from typing import Any

from ris_search.core.errors import RISParsingError
from ris_search.models.search import NormalizedSearchResult

TEXT_KEY = "#text"
PAGE_NUMBER_KEY = "@pageNumber"
PAGE_SIZE_KEY = "@pageSize"

DEFAULT_HITS = 0
DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10


def parse_json_response(body_text: str) -> Any:
    """Parse a response body, raising RISParsingError with the cause attached"""
    try:
        return json.loads(body_text)
    # ValueError covers JSONDecodeError and integers past the int digit limit
    except (ValueError, TypeError, RecursionError) as e:
        raise RISParsingError(f"Failed to parse JSON response: {e}", e) from e


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _to_int(value: Any, default: int, minimum: int) -> int:
    """Integer from a number or numeric string; default when absent, malformed or below minimum"""
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, int):
        result = value
    else:
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return default
        if not math.isfinite(number):
            return default
        result = int(number)

    return result if result >= minimum else default


def normalize_hits(hits_info: Any) -> tuple[int, int, int]:
    """
    Reconcile the Hits field into (hits, page_number, page_size)

    - absent / null: (0, 1, 10)
    - object: ``#text`` count plus ``@pageNumber`` / ``@pageSize`` attributes,
      each falling back to its default when missing
    - bare number or numeric string: the count; paging attributes do not exist
      in this shape, so page number and size keep their defaults
    """
    if hits_info is None:
        return DEFAULT_HITS, DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE

    if isinstance(hits_info, dict):
        return (
            _to_int(hits_info.get(TEXT_KEY), DEFAULT_HITS, 0),
            _to_int(hits_info.get(PAGE_NUMBER_KEY), DEFAULT_PAGE_NUMBER, 1),
            _to_int(hits_info.get(PAGE_SIZE_KEY), DEFAULT_PAGE_SIZE, 1),
        )

    if isinstance(hits_info, list):
        return DEFAULT_HITS, DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE

    return _to_int(hits_info, DEFAULT_HITS, 0), DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE


def normalize_documents(doc_refs: Any) -> list[Any]:
    """
    Reconcile the OgdDocumentReference field into a list

    - absent / null: empty list
    - single object: one-element list
    - list: kept as is, order preserved (it is the ranking of the source)
    """
    if doc_refs is None:
        return []
    if isinstance(doc_refs, list):
        return list(doc_refs)
    if isinstance(doc_refs, dict):
        return [doc_refs]
    # A bare scalar is not a document reference
    return []


def extract_search_results(parsed_response: Any) -> NormalizedSearchResult:
    """Reshape a parsed search response into a NormalizedSearchResult"""
    search_result = _as_dict(_as_dict(parsed_response).get("OgdSearchResult"))
    document_results = _as_dict(search_result.get("OgdDocumentResults"))

    hits, page_number, page_size = normalize_hits(document_results.get("Hits"))
    documents = normalize_documents(document_results.get("OgdDocumentReference"))

    return NormalizedSearchResult(
        hits=hits,
        page_number=page_number,
        page_size=page_size,
        documents=documents,
    )


def extract(body_text: str) -> NormalizedSearchResult:
    """Parse and normalize a search response body"""
    return extract_search_results(parse_json_response(body_text))
