from __future__ import annotations

from typing import Any, Optional

import httpx
import pytest

from ris_search.pipeline.collectors.ris_collector import RISClient

BASE_URL = "https://data.bka.gv.at/ris/api/v2.6/"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_client():
    def _make(handler, **kwargs) -> RISClient:
        return RISClient(base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)

    return _make


def search_body(documents: Any = None, hits: Any = None) -> dict:
    document_results: dict[str, Any] = {}
    if hits is not None:
        document_results["Hits"] = hits
    if documents is not None:
        document_results["OgdDocumentReference"] = documents
    return {"OgdSearchResult": {"OgdDocumentResults": document_results}}


def doc_ref(
    dokumentnummer: str,
    applikation: str = "BrKons",
    kurztitel: str = "ABGB",
    html_url: Optional[str] = None,
) -> dict:
    data: dict[str, Any] = {
        "Metadaten": {
            "Technisch": {"ID": dokumentnummer, "Applikation": applikation},
            "Bundesrecht": {"Kurztitel": kurztitel},
        }
    }
    if html_url:
        data["Dokumentliste"] = {
            "ContentReference": {
                "ContentType": "MainDocument",
                "Urls": {"ContentUrl": [{"DataType": "Html", "Url": html_url}]},
            }
        }
    return {"Data": data}
