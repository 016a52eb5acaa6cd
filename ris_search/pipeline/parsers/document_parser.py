"""
RIS document reference parser

Reads the metadata envelope of OgdDocumentReference entries into `Document`
models. Every level of the nested structure may be missing, and fields that
occur once or many times may be an object or a list.
"""
from __future__ import annotations

from typing import Any, Optional

from ris_search.models.search import (
    Citation,
    ContentUrls,
    Document,
    FindDocumentError,
    FindDocumentResult,
    NormalizedSearchResult,
    SearchResult,
)


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _ensure_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


def extract_text(elem: Any) -> Optional[str]:
    """
    Text of a field that is either a string or an object with ``#text`` / ``item``
    """
    if elem is None:
        return None

    if isinstance(elem, str):
        return elem.strip() or None

    if isinstance(elem, dict):
        text = elem.get("#text")
        if text is None:
            text = elem.get("item")
        if isinstance(text, str):
            return text.strip() or None
        if isinstance(text, list):
            return ", ".join(str(t) for t in text)

    return None


def _url_by_type(content_urls: list, data_type: str) -> Optional[str]:
    for item in content_urls:
        if isinstance(item, dict) and item.get("DataType") == data_type:
            url = extract_text(item.get("Url"))
            if url:
                return url
    return None


def extract_content_urls(content_ref: Any) -> ContentUrls:
    """Html/Xml/Pdf/Rtf URLs of a ContentReference"""
    urls = _as_dict(_as_dict(content_ref).get("Urls"))
    content_urls = _ensure_list(urls.get("ContentUrl"))
    if not content_urls:
        return ContentUrls()

    return ContentUrls(
        html=_url_by_type(content_urls, "Html"),
        xml=_url_by_type(content_urls, "Xml"),
        pdf=_url_by_type(content_urls, "Pdf"),
        rtf=_url_by_type(content_urls, "Rtf"),
    )


def _select_content_reference(raw: Any) -> Optional[dict]:
    if isinstance(raw, list):
        refs = [ref for ref in raw if isinstance(ref, dict)]
        for ref in refs:
            if ref.get("ContentType") == "MainDocument":
                return ref
        return refs[0] if refs else None
    return raw if isinstance(raw, dict) else None


def _geschaeftszahl(elem: Any) -> str:
    if isinstance(elem, dict):
        item = elem.get("item")
        if isinstance(item, list):
            return ", ".join(str(i) for i in item)
        if isinstance(item, str):
            return item
        return ""
    if isinstance(elem, str):
        return elem
    return ""


def _consolidated_fields(section: dict, nested_key: str) -> dict[str, Any]:
    nested = _as_dict(section.get(nested_key))
    return {
        "kurztitel": section.get("Kurztitel"),
        "langtitel": section.get("Langtitel") or section.get("Titel"),
        "kundmachungsorgan": nested.get("Kundmachungsorgan"),
        "paragraph": nested.get("ArtikelParagraphAnlage"),
        "inkrafttreten": nested.get("Inkrafttretensdatum"),
        "ausserkrafttreten": nested.get("Ausserkrafttretensdatum"),
        "eli": section.get("Eli"),
        "gesamte_rechtsvorschrift_url": nested.get("GesamteRechtsvorschriftUrl"),
    }


def parse_document_from_api_response(doc_ref: Any) -> Document:
    """
    Parse one OgdDocumentReference into a Document

    Metadata is taken from whichever of Bundesrecht (BrKons), Landesrecht
    (LrKons) or Judikatur is present, in that order.
    """
    data = _as_dict(_as_dict(doc_ref).get("Data"))
    metadaten = _as_dict(data.get("Metadaten"))
    dokumentliste = _as_dict(data.get("Dokumentliste"))
    technisch = _as_dict(metadaten.get("Technisch"))
    allgemein = _as_dict(metadaten.get("Allgemein"))

    content_ref = _select_content_reference(dokumentliste.get("ContentReference"))
    content_urls = extract_content_urls(content_ref)

    fields: dict[str, Any] = {}
    geschaeftszahl = ""
    entscheidungsdatum: Any = None

    bundesrecht = metadaten.get("Bundesrecht")
    landesrecht = metadaten.get("Landesrecht")
    judikatur = metadaten.get("Judikatur")

    if isinstance(bundesrecht, dict):
        fields = _consolidated_fields(bundesrecht, "BrKons")
    elif isinstance(landesrecht, dict):
        fields = _consolidated_fields(landesrecht, "LrKons")
    elif isinstance(judikatur, dict):
        geschaeftszahl = _geschaeftszahl(judikatur.get("Geschaeftszahl"))
        entscheidungsdatum = judikatur.get("Entscheidungsdatum")

        court = None
        for court_key in ("Vfgh", "Vwgh", "Justiz", "Bvwg"):
            if judikatur.get(court_key) is not None:
                court = judikatur[court_key]
                break

        # Case law has no titles; Geschaeftszahl and Leitsatz take their place
        fields = {
            "kurztitel": geschaeftszahl,
            "langtitel": _as_dict(court).get("Leitsatz"),
        }

    kurztitel = extract_text(fields.get("kurztitel"))

    citation = Citation(
        kurztitel=kurztitel,
        langtitel=extract_text(fields.get("langtitel")),
        kundmachungsorgan=extract_text(fields.get("kundmachungsorgan")),
        paragraph=extract_text(fields.get("paragraph")),
        eli=extract_text(fields.get("eli")),
        inkrafttreten=extract_text(fields.get("inkrafttreten")) or extract_text(entscheidungsdatum),
        ausserkrafttreten=extract_text(fields.get("ausserkrafttreten")),
    )

    titel = kurztitel or ""
    if not titel and geschaeftszahl:
        titel = f"GZ {geschaeftszahl}"
    if not titel and content_ref is not None:
        name = content_ref.get("Name")
        if isinstance(name, str):
            titel = name
        elif isinstance(name, dict):
            titel = extract_text(name) or ""

    return Document(
        dokumentnummer=extract_text(technisch.get("ID")) or "",
        applikation=extract_text(technisch.get("Applikation")) or "",
        titel=titel,
        kurztitel=kurztitel,
        citation=citation,
        content_urls=content_urls,
        dokument_url=extract_text(allgemein.get("DokumentUrl")),
        gesamte_rechtsvorschrift_url=extract_text(fields.get("gesamte_rechtsvorschrift_url")),
    )


def find_document_by_dokumentnummer(
    raw_documents: Optional[list[Any]],
    dokumentnummer: str,
) -> FindDocumentResult:
    """
    Find the document with exactly this Dokumentnummer among search hits

    The API may return several hits for a Dokumentnummer search, so the first
    hit is not necessarily the requested document.
    """
    if not raw_documents:
        return FindDocumentResult(success=False, error=FindDocumentError.no_documents)

    for raw in raw_documents:
        document = parse_document_from_api_response(raw)
        if document.dokumentnummer == dokumentnummer:
            return FindDocumentResult(success=True, document=document)

    return FindDocumentResult(
        success=False,
        error=FindDocumentError.not_found,
        total_results=len(raw_documents),
    )


def parse_search_results(normalized: NormalizedSearchResult) -> SearchResult:
    """Parse every hit of a normalized search response"""
    documents = [parse_document_from_api_response(doc) for doc in normalized.documents]
    has_more = normalized.page_number * normalized.page_size < normalized.hits

    return SearchResult(
        total_hits=normalized.hits,
        page=normalized.page_number,
        page_size=normalized.page_size,
        has_more=has_more,
        documents=documents,
    )
