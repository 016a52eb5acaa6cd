import pytest

from ris_search.core.url_resolver import (
    DOCUMENT_URL_PATTERNS,
    construct_document_url,
    is_allowed_url,
    is_valid_dokumentnummer,
    match_prefix,
)


class TestIsValidDokumentnummer:
    @pytest.mark.parametrize(
        "dokumentnummer",
        ["NOR40052761", "BVWG_W123_2000000_1_00", "JWT_2020010001_20200101X00", "ABCDE", "A" * 50],
    )
    def test_valid(self, dokumentnummer):
        assert is_valid_dokumentnummer(dokumentnummer)

    @pytest.mark.parametrize(
        "dokumentnummer",
        [
            "AB12",
            "nor12345",
            "1NOR2345",
            "_NOR2345",
            "NOR-12345",
            "NOR 12345",
            "NOR12345/../x",
            "A" * 51,
            "",
            "NOR12345\n",
        ],
    )
    def test_invalid(self, dokumentnummer):
        assert not is_valid_dokumentnummer(dokumentnummer)

    def test_non_string(self):
        assert not is_valid_dokumentnummer(None)


class TestConstructDocumentUrl:
    def test_federal_law(self):
        assert (
            construct_document_url("NOR40052761")
            == "https://ris.bka.gv.at/Dokumente/Bundesnormen/NOR40052761/NOR40052761.html"
        )

    def test_lowercase_is_rejected(self):
        assert construct_document_url("nor12345") is None

    def test_too_short_is_rejected(self):
        assert construct_document_url("AB12") is None

    def test_unknown_prefix(self):
        assert construct_document_url("ZZZ99999") is None

    def test_longest_prefix_wins(self):
        url = construct_document_url("BGBLA1234567")
        assert url == "https://ris.bka.gv.at/Dokumente/BgblAuth/BGBLA1234567/BGBLA1234567.html"

    def test_shorter_prefix_still_matches(self):
        url = construct_document_url("BGBL1234567")
        assert url == "https://ris.bka.gv.at/Dokumente/BgblAlt/BGBL1234567/BGBL1234567.html"

    def test_bgblpdf_prefix(self):
        assert "/BgblPdf/" in construct_document_url("BGBLPDF123456")

    @pytest.mark.parametrize(
        "dokumentnummer, application_path",
        [
            ("LWI40012345", "LrW"),
            ("JFR_20201001_19G00123_01", "Vfgh"),
            ("BVWG_W123_2000000_1_00", "Bvwg"),
            ("LVWG_T_2020_1", "Lvwg"),
            ("ASYLGH_E1_123", "AsylGH"),
            ("MRP_20200101_1", "Mrp"),
        ],
    )
    def test_prefix_table(self, dokumentnummer, application_path):
        url = construct_document_url(dokumentnummer)
        assert url == (
            f"https://ris.bka.gv.at/Dokumente/{application_path}/{dokumentnummer}/{dokumentnummer}.html"
        )

    def test_every_placeholder_is_substituted(self):
        url = construct_document_url("NOR40052761")
        assert "{" not in url
        assert url.count("NOR40052761") == 2


class TestPatternTable:
    def test_sorted_longest_prefix_first(self):
        lengths = [len(prefix) for prefix, _ in DOCUMENT_URL_PATTERNS]
        assert lengths == sorted(lengths, reverse=True)

    def test_table_is_immutable(self):
        assert isinstance(DOCUMENT_URL_PATTERNS, tuple)

    def test_match_prefix(self):
        assert match_prefix("BGBLA1234567")[0] == "BGBLA"
        assert match_prefix("LVWG_T_1")[0] == "LVWG"
        assert match_prefix("ZZZ99999") is None


class TestIsAllowedUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://data.bka.gv.at/ris/api/v2.6/Bundesrecht",
            "https://www.ris.bka.gv.at/Dokumente/Bundesnormen/NOR1/NOR1.html",
            "https://ris.bka.gv.at/Dokumente/Bundesnormen/NOR1/NOR1.html",
        ],
    )
    def test_allowed(self, url):
        assert is_allowed_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "http://ris.bka.gv.at/Dokumente/x.html",
            "http://169.254.169.254/latest/meta-data/",
            "https://localhost/admin",
            "https://127.0.0.1/",
            "file:///etc/passwd",
            "https://ris.bka.gv.at.evil.com/x.html",
            "https://evil.com/ris.bka.gv.at/x.html",
            "https://example.com/",
            "not a url",
            "",
        ],
    )
    def test_rejected(self, url):
        assert not is_allowed_url(url)

    def test_custom_allow_list(self):
        assert is_allowed_url("https://example.org/doc", allowed_hosts=["example.org"])
        assert not is_allowed_url("https://ris.bka.gv.at/doc", allowed_hosts=["example.org"])
