"""Direct document URL resolution

Maps a Dokumentnummer to the canonical HTML URL of the document using a static
prefix table, so a document can be fetched without going through the search
API. Also holds the host allow-list guard for externally supplied URLs.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

from ris_search.config.settings import settings

DOKUMENTNUMMER_MIN_LENGTH = 5
DOKUMENTNUMMER_MAX_LENGTH = 50

# Uppercase letter first, then uppercase letters, digits and underscores
_DOKUMENTNUMMER_RE = re.compile(r"[A-Z][A-Z0-9_]+")

PLACEHOLDER = "{dokumentnummer}"

_RIS_DOCUMENT_BASE = "https://ris.bka.gv.at/Dokumente"


def _template(application_path: str) -> str:
    return f"{_RIS_DOCUMENT_BASE}/{application_path}/{PLACEHOLDER}/{PLACEHOLDER}.html"


_URL_PATTERNS: dict[str, str] = {
    # Bundesrecht
    "NOR": _template("Bundesnormen"),
    # Landesrecht, one prefix per state
    "LBG": _template("LrBgld"),
    "LKT": _template("LrK"),
    "LNO": _template("LrNO"),
    "LOO": _template("LrOO"),
    "LSB": _template("LrSbg"),
    "LST": _template("LrStmk"),
    "LTI": _template("LrT"),
    "LVB": _template("LrVbg"),
    "LWI": _template("LrW"),
    # Judikatur
    "JWR": _template("Vwgh"),
    "JFR": _template("Vfgh"),
    "JFT": _template("Vfgh"),
    "JWT": _template("Justiz"),
    "JJR": _template("Justiz"),
    "BVWG": _template("Bvwg"),
    "LVWG": _template("Lvwg"),
    "DSB": _template("Dsk"),
    "GBK": _template("Gbk"),
    "PVAK": _template("Pvak"),
    "ASYLGH": _template("AsylGH"),
    # Bundesgesetzblaetter
    "BGBLA": _template("BgblAuth"),
    "BGBL": _template("BgblAlt"),
    "BGBLPDF": _template("BgblPdf"),
    # Regierungsvorlagen
    "REGV": _template("RegV"),
    # Bezirke
    "BVB": _template("Bvb"),
    # Verordnungsblaetter
    "VBL": _template("Vbl"),
    # Sonstige
    "MRP": _template("Mrp"),
    "ERL": _template("Erlaesse"),
    "PRUEF": _template("PruefGewO"),
    "AVSV": _template("Avsv"),
    "SPG": _template("Spg"),
    "KMGER": _template("KmGer"),
}

# Longest prefix first so BGBLA is tried before BGBL
DOCUMENT_URL_PATTERNS: tuple[tuple[str, str], ...] = tuple(
    sorted(_URL_PATTERNS.items(), key=lambda item: len(item[0]), reverse=True)
)


def is_valid_dokumentnummer(dokumentnummer: str) -> bool:
    """
    Check that a Dokumentnummer only contains safe characters

    Valid numbers are 5-50 characters long, start with an uppercase letter and
    contain only uppercase letters, digits and underscores
    (e.g. ``NOR40052761``, ``BVWG_W123_2000000_1_00``).
    """
    if not isinstance(dokumentnummer, str):
        return False
    if not DOKUMENTNUMMER_MIN_LENGTH <= len(dokumentnummer) <= DOKUMENTNUMMER_MAX_LENGTH:
        return False
    return _DOKUMENTNUMMER_RE.fullmatch(dokumentnummer) is not None


def match_prefix(dokumentnummer: str) -> Optional[tuple[str, str]]:
    """Longest (prefix, template) entry whose prefix starts the Dokumentnummer"""
    for prefix, template in DOCUMENT_URL_PATTERNS:
        if dokumentnummer.startswith(prefix):
            return prefix, template
    return None


def construct_document_url(dokumentnummer: str) -> Optional[str]:
    """
    Construct the direct document URL for a Dokumentnummer

    Args:
        dokumentnummer: RIS document number (e.g. "NOR40052761")

    Returns:
        The document URL, or None if the number is invalid or its prefix is
        unknown (the caller should fall back to the search API)
    """
    # Validated here as well as upstream
    if not is_valid_dokumentnummer(dokumentnummer):
        return None

    match = match_prefix(dokumentnummer)
    if match is None:
        return None

    _, template = match
    return template.replace(PLACEHOLDER, dokumentnummer)


def is_allowed_url(url: str, allowed_hosts: Optional[list[str]] = None) -> bool:
    """True if the URL uses https and points to an allow-listed RIS host"""
    hosts = settings.ris_allowed_document_hosts if allowed_hosts is None else allowed_hosts
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except (TypeError, ValueError, AttributeError):
        return False

    return parsed.scheme == "https" and hostname is not None and hostname in hosts
