"""
RIS OGD API collector

Issues search requests against the RIS API v2.6 and fetches document content.

- One HTTP GET per call, no retries, no state kept between calls
- Each call runs under its own deadline; expiry cancels only that transfer
- Failures are classified once (see `ris_search.core.errors`) and then
  propagate unchanged

API documentation: https://data.bka.gv.at/ris/api/v2.6/
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union
from urllib.parse import urljoin

import anyio
import httpx

from ris_search.config.settings import settings
from ris_search.core.errors import (
    DocumentUrlNotAllowedError,
    RISAPIError,
    classify_transport_error,
)
from ris_search.core.normalizer import extract
from ris_search.core.url_resolver import (
    construct_document_url,
    is_allowed_url,
    is_valid_dokumentnummer,
)
from ris_search.models.search import (
    DirectDocumentResult,
    DocumentLookupError,
    DocumentLookupResult,
    FindDocumentError,
    LookupSource,
    NormalizedSearchResult,
    SearchCategory,
)
from ris_search.pipeline.parsers.document_parser import find_document_by_dokumentnummer
from ris_search.utils.logger import get_logger

logger = get_logger(__name__)


SEARCH_HEADERS = {"Accept": "application/json"}

# Dokumentnummer prefix -> search used when the direct URL fetch fails
_FALLBACK_ROUTES: dict[str, tuple[SearchCategory, str]] = {
    "NOR": (SearchCategory.bundesrecht, "BrKons"),
    "LBG": (SearchCategory.landesrecht, "LrKons"),
    "LKT": (SearchCategory.landesrecht, "LrKons"),
    "LNO": (SearchCategory.landesrecht, "LrKons"),
    "LOO": (SearchCategory.landesrecht, "LrKons"),
    "LSB": (SearchCategory.landesrecht, "LrKons"),
    "LST": (SearchCategory.landesrecht, "LrKons"),
    "LTI": (SearchCategory.landesrecht, "LrKons"),
    "LVB": (SearchCategory.landesrecht, "LrKons"),
    "LWI": (SearchCategory.landesrecht, "LrKons"),
    "JFR": (SearchCategory.judikatur, "Vfgh"),
    "JFT": (SearchCategory.judikatur, "Vfgh"),
    "JWR": (SearchCategory.judikatur, "Vwgh"),
    "JWT": (SearchCategory.judikatur, "Vwgh"),
    "BVWG": (SearchCategory.judikatur, "Bvwg"),
    "LVWG": (SearchCategory.judikatur, "Lvwg"),
    "DSB": (SearchCategory.judikatur, "Dsk"),
    "GBK": (SearchCategory.judikatur, "Gbk"),
    "PVAK": (SearchCategory.judikatur, "Pvak"),
    "ASYLGH": (SearchCategory.judikatur, "AsylGH"),
    "BGBLA": (SearchCategory.bundesrecht, "BgblAuth"),
    "BGBL": (SearchCategory.bundesrecht, "BgblAlt"),
    "REGV": (SearchCategory.bundesrecht, "RegV"),
    "MRP": (SearchCategory.sonstige, "Mrp"),
    "ERL": (SearchCategory.sonstige, "Erlaesse"),
}
FALLBACK_SEARCH_ROUTES: tuple[tuple[str, tuple[SearchCategory, str]], ...] = tuple(
    sorted(_FALLBACK_ROUTES.items(), key=lambda item: len(item[0]), reverse=True)
)
DEFAULT_FALLBACK_ROUTE = (SearchCategory.judikatur, "Justiz")


def _stringify(value: Any) -> str:
    # RIS flag parameters expect lowercase booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_params(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """
    Query parameters for a request

    Keys whose value is None are dropped entirely; every other value is
    converted to a string.
    """
    if not params:
        return {}
    return {key: _stringify(value) for key, value in params.items() if value is not None}


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    return str(httpx.QueryParams(build_params(params)))


async def _check_allowed_hop(request: httpx.Request) -> None:
    url = str(request.url)
    if not is_allowed_url(url):
        logger.warning(f"Rejected document URL outside allow-list: {url}")
        raise DocumentUrlNotAllowedError(url)


def route_fallback_search(dokumentnummer: str) -> tuple[SearchCategory, str]:
    """(category, Applikation) to search a Dokumentnummer in"""
    for prefix, route in FALLBACK_SEARCH_ROUTES:
        if dokumentnummer.startswith(prefix):
            return route
    return DEFAULT_FALLBACK_ROUTE


class RISClient:
    """
    RIS API client

    Holds configuration only. Every call opens and closes its own
    ``httpx.AsyncClient``, so concurrent calls share nothing.

    Args:
        base_url: API base address (defaults to settings)
        default_timeout_ms: deadline used when a call passes none
        transport: optional httpx transport (tests inject ``httpx.MockTransport``)
        error_body_limit: response body characters kept in HTTP error messages
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        default_timeout_ms: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        error_body_limit: Optional[int] = None,
    ):
        self.base_url = base_url or settings.ris_api_base_url
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.default_timeout_ms = (
            default_timeout_ms if default_timeout_ms is not None else settings.ris_timeout_ms
        )
        self.error_body_limit = (
            error_body_limit if error_body_limit is not None else settings.ris_error_body_limit
        )
        self._transport = transport

    def _resolve_timeout(self, timeout_ms: Optional[int]) -> int:
        return timeout_ms if timeout_ms is not None else self.default_timeout_ms

    def _client(self, timeout_ms: int, guard_hosts: bool = False) -> httpx.AsyncClient:
        # Request hooks run for every redirect hop, not only the first URL
        event_hooks = {"request": [_check_allowed_hop]} if guard_hosts else None
        return httpx.AsyncClient(
            timeout=timeout_ms / 1000.0,
            follow_redirects=True,
            transport=self._transport,
            event_hooks=event_hooks,
        )

    async def _get_text(
        self,
        url: str,
        *,
        target: str,
        timeout_ms: int,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
        guard_hosts: bool = False,
    ) -> str:
        """
        Perform one GET under a deadline and return the body text

        Raises:
            DocumentUrlNotAllowedError: guard_hosts is set and a redirect left the allow-list
            RISTimeoutError: the deadline expired first
            RISAPIError: non-success status (with status code) or transport failure
        """
        try:
            with anyio.fail_after(timeout_ms / 1000.0):
                async with self._client(timeout_ms, guard_hosts) as client:
                    response = await client.get(url, params=params, headers=headers)
        except DocumentUrlNotAllowedError:
            raise
        except Exception as e:
            error = classify_transport_error(e, target, timeout_ms)
            logger.warning(f"{error.kind.value} error for {target}: {error.message}")
            if error is e:
                raise
            raise error from e

        text = response.text
        if not response.is_success:
            body = text[: self.error_body_limit]
            logger.error(f"HTTP error {response.status_code} for {target}: {body}")
            raise RISAPIError(
                f"HTTP error {response.status_code} for {target}: {body}",
                response.status_code,
            )

        return text

    async def request(
        self,
        category: Union[SearchCategory, str],
        params: Optional[Mapping[str, Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> NormalizedSearchResult:
        """
        Search one document category

        Args:
            category: Document category (URL path segment)
            params: Flat search parameters; None values are not sent
            timeout_ms: Deadline in milliseconds

        Returns:
            Normalized search result

        Raises:
            RISAPIError, RISTimeoutError, RISParsingError
        """
        endpoint = SearchCategory(category).value
        timeout_ms = self._resolve_timeout(timeout_ms)
        query = build_params(params)

        logger.debug(f"Searching {endpoint} with params: {query}")

        body = await self._get_text(
            urljoin(self.base_url, endpoint),
            target=endpoint,
            timeout_ms=timeout_ms,
            params=query,
            headers=SEARCH_HEADERS,
        )

        try:
            result = extract(body)
        except RISAPIError as e:
            logger.error(f"Unparseable response from {endpoint}: {e.message}")
            raise

        logger.info(
            f"Fetched {len(result.documents)} documents from {endpoint} "
            f"(hits={result.hits}, page={result.page_number})"
        )
        return result

    async def search_bundesrecht(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search federal law (Bundesrecht)"""
        return await self.request(SearchCategory.bundesrecht, params, timeout_ms)

    async def search_landesrecht(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search state law (Landesrecht)"""
        return await self.request(SearchCategory.landesrecht, params, timeout_ms)

    async def search_judikatur(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search case law (Judikatur)"""
        return await self.request(SearchCategory.judikatur, params, timeout_ms)

    async def search_bezirke(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search district administrative authorities (Bezirke)"""
        return await self.request(SearchCategory.bezirke, params, timeout_ms)

    async def search_gemeinden(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search municipal law (Gemeinden)"""
        return await self.request(SearchCategory.gemeinden, params, timeout_ms)

    async def search_sonstige(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search miscellaneous collections (Sonstige)"""
        return await self.request(SearchCategory.sonstige, params, timeout_ms)

    async def search_history(self, params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
        """Search document change history (History)"""
        return await self.request(SearchCategory.history, params, timeout_ms)

    async def get_document_content(
        self,
        url: str,
        timeout_ms: Optional[int] = None,
        *,
        trusted: bool = False,
    ) -> str:
        """
        Fetch the raw content (usually HTML) of a document URL

        Args:
            url: Document URL
            timeout_ms: Deadline in milliseconds
            trusted: True only for URLs built by `construct_document_url`;
                any other URL must pass the https + host allow-list check

        Raises:
            DocumentUrlNotAllowedError: untrusted URL outside the allow-list (no
                request is made), or a redirect hop leaving it
            RISAPIError, RISTimeoutError
        """
        if not trusted and not is_allowed_url(url):
            logger.warning(f"Rejected document URL outside allow-list: {url}")
            raise DocumentUrlNotAllowedError(url)

        return await self._get_text(
            url,
            target="document URL",
            timeout_ms=self._resolve_timeout(timeout_ms),
            guard_hosts=not trusted,
        )

    async def get_document_by_number(
        self,
        dokumentnummer: str,
        timeout_ms: Optional[int] = None,
    ) -> DirectDocumentResult:
        """
        Fetch a document through its constructed URL, bypassing the search API

        Failures are returned in the result instead of raised.
        """
        if not is_valid_dokumentnummer(dokumentnummer):
            return DirectDocumentResult(
                success=False,
                error=(
                    f'Invalid Dokumentnummer: "{dokumentnummer}". Only uppercase letters, '
                    "digits and underscores are allowed (5-50 characters, starting with a letter)."
                ),
            )

        url = construct_document_url(dokumentnummer)
        if url is None:
            return DirectDocumentResult(
                success=False,
                error=f"Unknown Dokumentnummer prefix: {dokumentnummer[:4]}",
            )

        try:
            html = await self.get_document_content(url, timeout_ms, trusted=True)
        except RISAPIError as e:
            return DirectDocumentResult(
                success=False,
                url=url,
                error=e.message,
                status_code=e.status_code,
            )

        return DirectDocumentResult(success=True, html=html, url=url)

    async def fetch_document(
        self,
        dokumentnummer: Optional[str] = None,
        url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> DocumentLookupResult:
        """
        Retrieve a document by URL or by Dokumentnummer

        A Dokumentnummer is first fetched through its constructed URL; if that
        fails, the matching category is searched for the exact Dokumentnummer
        and the HTML content URL of that hit is fetched.

        Raises:
            DocumentUrlNotAllowedError: a supplied or returned URL is outside the allow-list
            RISAPIError, RISTimeoutError, RISParsingError: from the search fallback
                or the content fetch
        """
        if not dokumentnummer and not url:
            return DocumentLookupResult(
                success=False,
                error=DocumentLookupError.missing_reference,
                message="Either a dokumentnummer or a url is required",
            )

        if url:
            html = await self.get_document_content(url, timeout_ms)
            return DocumentLookupResult(
                success=True,
                source=LookupSource.url,
                dokumentnummer=dokumentnummer,
                url=url,
                html=html,
            )

        if not is_valid_dokumentnummer(dokumentnummer):
            return DocumentLookupResult(
                success=False,
                dokumentnummer=dokumentnummer,
                error=DocumentLookupError.invalid_dokumentnummer,
                message=f"Invalid Dokumentnummer: {dokumentnummer}",
            )

        direct = await self.get_document_by_number(dokumentnummer, timeout_ms)
        if direct.success:
            return DocumentLookupResult(
                success=True,
                source=LookupSource.direct,
                dokumentnummer=dokumentnummer,
                url=direct.url,
                html=direct.html,
            )

        category, applikation = route_fallback_search(dokumentnummer)
        logger.info(
            f"Direct fetch failed for {dokumentnummer} ({direct.error}), "
            f"searching {category.value}/{applikation}"
        )

        search_result = await self.request(
            category,
            {
                "Applikation": applikation,
                "Dokumentnummer": dokumentnummer,
                "DokumenteProSeite": "Ten",
            },
            timeout_ms,
        )

        found = find_document_by_dokumentnummer(search_result.documents, dokumentnummer)
        if not found.success:
            if found.error == FindDocumentError.no_documents:
                error = DocumentLookupError.no_documents
                search_note = "no results"
            else:
                error = DocumentLookupError.not_found
                search_note = f"{found.total_results} results, none with this Dokumentnummer"
            return DocumentLookupResult(
                success=False,
                dokumentnummer=dokumentnummer,
                error=error,
                message=f"Direct fetch: {direct.error}; search: {search_note}",
                total_results=found.total_results,
            )

        document = found.document
        content_url = document.content_urls.html
        if not content_url:
            return DocumentLookupResult(
                success=False,
                dokumentnummer=dokumentnummer,
                document=document,
                error=DocumentLookupError.no_content_url,
                message=f"No content URL available for {dokumentnummer}",
            )

        html = await self.get_document_content(content_url, timeout_ms)
        return DocumentLookupResult(
            success=True,
            source=LookupSource.search,
            dokumentnummer=dokumentnummer,
            url=content_url,
            html=html,
            document=document,
        )


# Default client configured from settings
ris_client = RISClient()


async def request(
    category: Union[SearchCategory, str],
    params: Optional[Mapping[str, Any]] = None,
    timeout_ms: Optional[int] = None,
) -> NormalizedSearchResult:
    return await ris_client.request(category, params, timeout_ms)


async def search_bundesrecht(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_bundesrecht(params, timeout_ms)


async def search_landesrecht(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_landesrecht(params, timeout_ms)


async def search_judikatur(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_judikatur(params, timeout_ms)


async def search_bezirke(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_bezirke(params, timeout_ms)


async def search_gemeinden(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_gemeinden(params, timeout_ms)


async def search_sonstige(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_sonstige(params, timeout_ms)


async def search_history(params, timeout_ms: Optional[int] = None) -> NormalizedSearchResult:
    return await ris_client.search_history(params, timeout_ms)


async def get_document_content(url: str, timeout_ms: Optional[int] = None) -> str:
    return await ris_client.get_document_content(url, timeout_ms)


async def get_document_by_number(
    dokumentnummer: str,
    timeout_ms: Optional[int] = None,
) -> DirectDocumentResult:
    return await ris_client.get_document_by_number(dokumentnummer, timeout_ms)


async def fetch_document(
    dokumentnummer: Optional[str] = None,
    url: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> DocumentLookupResult:
    return await ris_client.fetch_document(dokumentnummer, url, timeout_ms)
