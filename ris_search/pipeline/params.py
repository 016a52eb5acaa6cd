"""
Search parameter helpers

Builders for the flat key/value parameters the RIS search endpoints accept.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

# Page sizes supported by DokumenteProSeite
DOKUMENTE_PRO_SEITE: dict[int, str] = {
    10: "Ten",
    20: "Twenty",
    50: "Fifty",
    100: "OneHundred",
}
DEFAULT_DOKUMENTE_PRO_SEITE = "Twenty"

# Landesrecht expects one Bundesland.SucheIn<State>=true flag per state
BUNDESLAND_MAPPING: dict[str, str] = {
    "Wien": "SucheInWien",
    "Niederoesterreich": "SucheInNiederoesterreich",
    "Oberoesterreich": "SucheInOberoesterreich",
    "Salzburg": "SucheInSalzburg",
    "Tirol": "SucheInTirol",
    "Vorarlberg": "SucheInVorarlberg",
    "Kaernten": "SucheInKaernten",
    "Steiermark": "SucheInSteiermark",
    "Burgenland": "SucheInBurgenland",
}


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def limit_to_dokumente_pro_seite(limit: int) -> str:
    return DOKUMENTE_PRO_SEITE.get(limit, DEFAULT_DOKUMENTE_PRO_SEITE)


def build_base_params(applikation: str, limit: int, seite: int) -> dict[str, Any]:
    """Parameters shared by every search request"""
    return {
        "Applikation": applikation,
        "DokumenteProSeite": limit_to_dokumente_pro_seite(limit),
        "Seitennummer": seite,
    }


def add_optional_params(
    params: dict[str, Any],
    mappings: Iterable[tuple[Any, str]],
) -> dict[str, Any]:
    """
    Add (value, key) pairs whose value is neither None nor an empty string

    Args:
        params: Parameters to extend in place
        mappings: (value, API parameter name) pairs

    Returns:
        The same params dict
    """
    for value, key in mappings:
        if _has_value(value):
            params[key] = value
    return params


def has_any_param(args: Mapping[str, Any], keys: Iterable[str]) -> bool:
    return any(_has_value(args.get(key)) for key in keys)


def bundesland_params(bundeslaender: Iterable[str]) -> dict[str, bool]:
    """
    ``Bundesland.SucheIn<State>`` flags for the given states

    Raises:
        ValueError: for a state name not in BUNDESLAND_MAPPING
    """
    params: dict[str, bool] = {}
    for name in bundeslaender:
        suffix = BUNDESLAND_MAPPING.get(name)
        if suffix is None:
            raise ValueError(f"Unknown Bundesland: {name}")
        params[f"Bundesland.{suffix}"] = True
    return params
