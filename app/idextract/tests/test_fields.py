from __future__ import annotations

from dataclasses import replace

import pytest

from idextract.pipeline.fields import (
    accept_name,
    extract_country,
    extract_document_number,
    extract_full_name,
    is_document_number,
)
from idextract.pipeline.tables import KENYAN_PASSPORT_TABLES, NAME_DENYLIST, ExtractorTables
from idextract.pipeline.trace import ExtractionTrace

PLAIN_TABLES = ExtractorTables()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("PASSPORT NO AK1626595", "AK1626595"),
        ("Passport No. A1234567 issued", "A1234567"),
        ("DOCUMENT NUMBER: X9876543", "X9876543"),
        ("KEN AK1626595", "AK1626595"),
        ("HOLDER AB123456 SIGNED", "AB123456"),
        ("ID 12345678", "12345678"),
    ],
)
def test_extract_document_number(text: str, expected: str) -> None:
    assert extract_document_number(text, PLAIN_TABLES) == expected


@pytest.mark.parametrize("text", ["", "SERIAL 12345", "PASSPORT JOHN SMITH", "DATE 15/01/1990"])
def test_no_document_number(text: str) -> None:
    assert extract_document_number(text, PLAIN_TABLES) is None


def test_is_document_number() -> None:
    assert is_document_number("AK1626595")
    assert is_document_number("12345678")
    assert not is_document_number("AB123")
    assert not is_document_number("1234567")
    assert not is_document_number("ABCDEFGH")


def test_name_between_passport_and_nationality(kenyan_passport_text: str) -> None:
    assert extract_full_name(kenyan_passport_text, PLAIN_TABLES) == "JOHN SMITH"


def test_labelled_given_names_and_surname_are_composed() -> None:
    text = "SURNAME: SMITH GIVEN NAMES: JOHN PETER NATIONALITY KEN"
    assert extract_full_name(text, PLAIN_TABLES) == "JOHN PETER SMITH"


def test_mixed_case_name_keeps_casing() -> None:
    assert extract_full_name("Holder: Jane Doe", PLAIN_TABLES) == "Jane Doe"


def test_marker_span_fallback() -> None:
    trace = ExtractionTrace()
    name = extract_full_name("PASSPORT JOHN SMITH 123 NATIONALITY KEN", PLAIN_TABLES, trace)
    assert name == "JOHN SMITH"
    assert trace.stage("full_name")[-1].data["strategy"] == "marker_span"


def test_boilerplate_is_not_a_name() -> None:
    assert extract_full_name("PASSPORT REPUBLIC OF KENYA NATIONALITY", PLAIN_TABLES) is None


def test_custom_denylist_is_honoured(kenyan_passport_text: str) -> None:
    tables = replace(PLAIN_TABLES, name_denylist=NAME_DENYLIST | {"SMITH"})
    assert extract_full_name(kenyan_passport_text, tables) is None


@pytest.mark.parametrize(
    "candidate, expected",
    [
        ("JOHN  SMITH", "JOHN SMITH"),
        ("JOHN", None),
        ("JOHN SMITH KAMAU WANJIKU OTIENO ODHIAMBO", None),
        ("REPUBLIC OF KENYA", None),
        ("JOHN AK1626595", None),
        (None, None),
    ],
)
def test_accept_name(candidate, expected) -> None:
    assert accept_name(candidate, PLAIN_TABLES) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("NATIONALITY KEN", "KEN"),
        ("ISSUING COUNTRY: USA", "USA"),
        ("NATIONALITY UNITED STATES", "USA"),
        ("Place of issue: United Kingdom", "UK"),
        ("Country of birth: Kenya", "KEN"),
        ("REPUBLIC OF KENYA", "KEN"),
    ],
)
def test_extract_country(text: str, expected: str) -> None:
    assert extract_country(text, PLAIN_TABLES) == expected


def test_three_letter_code_needs_context() -> None:
    assert extract_country("X" * 120 + " USA", PLAIN_TABLES) is None


def test_bare_ken_only_with_kenyan_tables() -> None:
    text = "PASSPORT " + "REMARKS " * 15 + "KEN AK1626595"
    assert extract_country(text, PLAIN_TABLES) is None
    assert extract_country(text, KENYAN_PASSPORT_TABLES) == "KEN"


def test_issuing_office_is_not_a_name() -> None:
    assert extract_full_name("Issued by Immigration Department Nairobi", PLAIN_TABLES) is None


def test_country_synonyms_are_read_only() -> None:
    with pytest.raises(TypeError):
        PLAIN_TABLES.country_synonyms["CANADA"] = "CAN"
    assert "CANADA" not in ExtractorTables().country_synonyms
