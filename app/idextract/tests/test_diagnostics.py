from __future__ import annotations

import datetime as dt

from idextract.pipeline.birthdate import RejectedCandidate
from idextract.pipeline.dates import RejectionReason
from idextract.pipeline.diagnostics import (
    build_failure_report,
    collect_rejected_candidates,
    find_document_number_near_misses,
)

BAD_DATES_TEXT = "DOB 31/02/1990 ISSUED 01/01/2090"


def test_report_without_dates(no_date_text: str, today: dt.date) -> None:
    report = build_failure_report(no_date_text, "birthdate", today=today)
    assert report.startswith("Could not extract birthdate from document.")
    assert "No dates were found in the extracted text." in report
    assert "Please check:" in report
    assert "1. The document image is clear and in focus" in report


def test_report_lists_each_rejected_date(today: dt.date) -> None:
    report = build_failure_report(BAD_DATES_TEXT, "birthdate", today=today)
    assert "Found 2 potential date(s):" in report
    assert "31/02/1990 -> could not parse (invalid_date)" in report
    assert "01/01/2090 -> 2090-01-01 (rejected: future_date)" in report


def test_collect_rejected_candidates(today: dt.date) -> None:
    assert collect_rejected_candidates(BAD_DATES_TEXT, today) == [
        RejectedCandidate("31/02/1990", RejectionReason.INVALID_DATE),
        RejectedCandidate("01/01/2090", RejectionReason.FUTURE_DATE, "2090-01-01"),
    ]
    assert collect_rejected_candidates("", today) == []


def test_document_number_near_misses() -> None:
    text = "REF AB1234 SERIAL 56789"
    assert find_document_number_near_misses(text) == ["AB1234", "56789"]
    report = build_failure_report(text, "missing_document_number")
    assert "Found 2 potential document number(s):" in report
    assert "  1. AB1234" in report


def test_document_number_report_without_near_misses() -> None:
    report = build_failure_report("NOTHING USEFUL", "document_number")
    assert "No potential document numbers were found." in report


def test_unknown_field_gets_generic_message() -> None:
    assert build_failure_report("text", "country") == "Could not extract country from document."
