from __future__ import annotations

import datetime as dt

import pytest

from idextract.pipeline.dates import ParsedDate
from idextract.pipeline.errors import ExtractionError, MissingBirthdateError, MissingDocumentNumberError
from idextract.pipeline.extract import extract_document_fields, failure_payload, parse_document_data
from idextract.pipeline.tables import KENYAN_PASSPORT_TABLES
from idextract.pipeline.trace import ExtractionTrace
from idextract.schemas import DocumentType


def test_kenyan_passport_end_to_end(kenyan_passport_text: str, today: dt.date) -> None:
    fields = extract_document_fields(kenyan_passport_text, "passport", today=today)
    assert fields.birthdate == "1990-01-15"
    assert fields.document_number == "AK1626595"
    assert fields.full_name == "JOHN SMITH"
    assert fields.country == "KEN"
    assert fields.document_type is DocumentType.PASSPORT
    assert fields.raw_text == kenyan_passport_text


def test_noisy_multiline_passport(noisy_passport_text: str, today: dt.date) -> None:
    fields = extract_document_fields(noisy_passport_text, DocumentType.PASSPORT, today=today)
    assert fields.birthdate == "2001-10-17"
    assert fields.document_number == "AK1626595"
    assert fields.full_name == "WANJIKU MARY AKINYI"
    assert fields.country == "KEN"


def test_kenyan_tables_are_accepted(kenyan_passport_text: str, today: dt.date) -> None:
    fields = extract_document_fields(kenyan_passport_text, tables=KENYAN_PASSPORT_TABLES, today=today)
    assert fields.country == "KEN"


def test_missing_birthdate(no_date_text: str, today: dt.date) -> None:
    with pytest.raises(MissingBirthdateError) as excinfo:
        extract_document_fields(no_date_text, "national_id", today=today)
    error = excinfo.value
    assert error.code == "missing_birthdate"
    assert error.rejected == ()
    assert "No dates were found in the extracted text." in error.message


def test_missing_birthdate_keeps_rejections(today: dt.date) -> None:
    with pytest.raises(MissingBirthdateError) as excinfo:
        extract_document_fields("DOB 31/02/1990 PASSPORT NO AK1626595", today=today)
    assert [item.text for item in excinfo.value.rejected] == ["31/02/1990"]


def test_missing_document_number(today: dt.date) -> None:
    text = "DATE OF BIRTH 15 JAN 1990 HOLDER JOHN SMITH REF 12345"
    with pytest.raises(MissingDocumentNumberError) as excinfo:
        extract_document_fields(text, today=today)
    assert excinfo.value.code == "missing_document_number"
    assert excinfo.value.near_misses == ("12345",)


def test_birthdate_is_reported_before_document_number(today: dt.date) -> None:
    with pytest.raises(MissingBirthdateError):
        extract_document_fields("HELLO WORLD", today=today)


def test_extraction_errors_share_a_base() -> None:
    assert issubclass(MissingBirthdateError, ExtractionError)
    assert issubclass(MissingDocumentNumberError, ExtractionError)


def test_unknown_document_type_is_rejected(kenyan_passport_text: str) -> None:
    with pytest.raises(ValueError):
        extract_document_fields(kenyan_passport_text, "library_card")


def test_parse_document_data_leaves_missing_fields_empty(no_date_text: str, today: dt.date) -> None:
    parsed = parse_document_data(no_date_text, "national_id", today=today)
    assert parsed.birthdate is None
    assert parsed.document_number == "X12345678"
    assert parsed.document_type is DocumentType.NATIONAL_ID


def test_parse_document_data_returns_parsed_date(kenyan_passport_text: str, today: dt.date) -> None:
    parsed = parse_document_data(kenyan_passport_text, today=today)
    assert parsed.birthdate == ParsedDate(1990, 1, 15)
    assert parsed.resolution.keyword == "DATE OF BIRTH"


def test_failure_payload(today: dt.date) -> None:
    with pytest.raises(MissingBirthdateError) as excinfo:
        extract_document_fields("DOB 01/01/2090 PASSPORT NO AK1626595", today=today)
    payload = failure_payload(excinfo.value)
    assert payload.code == "missing_birthdate"
    assert payload.rejected_candidates[0].reason == "future_date"
    assert payload.rejected_candidates[0].parsed == "2090-01-01"


def test_trace_covers_each_stage(kenyan_passport_text: str, today: dt.date) -> None:
    trace = ExtractionTrace()
    extract_document_fields(kenyan_passport_text, trace=trace, today=today)
    stages = {event["stage"] for event in trace.to_list()}
    assert {"input", "birthdate", "document_number", "full_name", "country"} <= stages
