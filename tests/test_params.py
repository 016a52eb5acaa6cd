import pytest

from ris_search.pipeline.params import (
    add_optional_params,
    build_base_params,
    bundesland_params,
    has_any_param,
    limit_to_dokumente_pro_seite,
)


@pytest.mark.parametrize(
    "limit, expected",
    [(10, "Ten"), (20, "Twenty"), (50, "Fifty"), (100, "OneHundred"), (15, "Twenty"), (0, "Twenty")],
)
def test_limit_to_dokumente_pro_seite(limit, expected):
    assert limit_to_dokumente_pro_seite(limit) == expected


def test_build_base_params():
    assert build_base_params("BrKons", 50, 3) == {
        "Applikation": "BrKons",
        "DokumenteProSeite": "Fifty",
        "Seitennummer": 3,
    }


def test_add_optional_params_skips_none_and_empty():
    params = {"Applikation": "BrKons"}
    result = add_optional_params(params, [("Datenschutz", "Suchworte"), (None, "Titel"), ("", "Index"), (0, "Nummer")])
    assert result is params
    assert params == {"Applikation": "BrKons", "Suchworte": "Datenschutz", "Nummer": 0}


def test_has_any_param():
    assert has_any_param({"suchworte": "x", "titel": None}, ["suchworte", "titel"])
    assert not has_any_param({"suchworte": "", "titel": None}, ["suchworte", "titel"])
    assert not has_any_param({}, ["suchworte"])


def test_bundesland_params():
    assert bundesland_params(["Wien", "Tirol"]) == {
        "Bundesland.SucheInWien": True,
        "Bundesland.SucheInTirol": True,
    }


def test_bundesland_params_unknown_state():
    with pytest.raises(ValueError):
        bundesland_params(["Bayern"])
