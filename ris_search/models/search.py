"""Search and document models.

Shapes produced by the client layer:
- `NormalizedSearchResult`: uniform envelope around one search response
- `Document` / `SearchResult`: parsed metadata of the document hits
- `DirectDocumentResult` / `DocumentLookupResult`: result channels of the
  document fetch paths (failures are carried, not raised)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchCategory(str, Enum):
    """Search partitions of the RIS API. The value is the URL path segment."""

    bundesrecht = "Bundesrecht"
    landesrecht = "Landesrecht"
    judikatur = "Judikatur"
    bezirke = "Bezirke"
    gemeinden = "Gemeinden"
    sonstige = "Sonstige"
    history = "History"


class NormalizedSearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    hits: int = Field(default=0, ge=0)
    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    # Raw OgdDocumentReference entries in ranking order
    documents: list[Any] = Field(default_factory=list)


class ContentUrls(BaseModel):
    html: Optional[str] = None
    xml: Optional[str] = None
    pdf: Optional[str] = None
    rtf: Optional[str] = None


class Citation(BaseModel):
    kurztitel: Optional[str] = None
    langtitel: Optional[str] = None
    kundmachungsorgan: Optional[str] = None
    paragraph: Optional[str] = None
    eli: Optional[str] = None
    inkrafttreten: Optional[str] = None
    ausserkrafttreten: Optional[str] = None


class Document(BaseModel):
    dokumentnummer: str
    applikation: str
    titel: str
    kurztitel: Optional[str] = None
    citation: Citation = Field(default_factory=Citation)
    content_urls: ContentUrls = Field(default_factory=ContentUrls)
    dokument_url: Optional[str] = None
    gesamte_rechtsvorschrift_url: Optional[str] = None


class SearchResult(BaseModel):
    total_hits: int
    page: int
    page_size: int
    has_more: bool
    documents: list[Document]


class FindDocumentError(str, Enum):
    no_documents = "no_documents"
    not_found = "not_found"


class FindDocumentResult(BaseModel):
    success: bool
    document: Optional[Document] = None
    error: Optional[FindDocumentError] = None
    total_results: Optional[int] = None


class DirectDocumentResult(BaseModel):
    """Outcome of fetching a document through its constructed URL."""

    success: bool
    html: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class LookupSource(str, Enum):
    url = "url"
    direct = "direct"
    search = "search"


class DocumentLookupError(str, Enum):
    invalid_dokumentnummer = "invalid_dokumentnummer"
    missing_reference = "missing_reference"
    no_documents = "no_documents"
    not_found = "not_found"
    no_content_url = "no_content_url"


class DocumentLookupResult(BaseModel):
    """Outcome of the fetch-by-identifier-else-search flow."""

    success: bool
    source: Optional[LookupSource] = None
    dokumentnummer: Optional[str] = None
    url: Optional[str] = None
    html: Optional[str] = None
    document: Optional[Document] = None
    error: Optional[DocumentLookupError] = None
    message: Optional[str] = None
    total_results: Optional[int] = None
