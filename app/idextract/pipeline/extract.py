from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ..schemas import DocumentType, ExtractedFields, ExtractionFailure, RejectedCandidateModel
from .birthdate import BirthdateResolution, resolve_birthdate
from .dates import ParsedDate
from .diagnostics import (
    FIELD_BIRTHDATE,
    FIELD_DOCUMENT_NUMBER,
    build_failure_report,
    collect_rejected_candidates,
    find_document_number_near_misses,
)
from .errors import ExtractionError, MissingBirthdateError, MissingDocumentNumberError
from .fields import extract_country, extract_document_number, extract_full_name
from .normalize import preprocess_text
from .tables import ExtractorTables
from .trace import ExtractionTrace, ensure_trace

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedDocument:
    raw_text: str
    document_type: DocumentType
    birthdate: Optional[ParsedDate] = None
    document_number: Optional[str] = None
    full_name: Optional[str] = None
    country: Optional[str] = None
    resolution: BirthdateResolution = field(default_factory=BirthdateResolution)


def _document_type(value: Union[DocumentType, str]) -> DocumentType:
    return value if isinstance(value, DocumentType) else DocumentType(str(value).strip().lower())


def parse_document_data(
    raw_text: str,
    document_type: Union[DocumentType, str] = DocumentType.PASSPORT,
    tables: Optional[ExtractorTables] = None,
    trace: Optional[ExtractionTrace] = None,
    today: Optional[dt.date] = None,
) -> ParsedDocument:
    """Run every extractor over ``raw_text``; missing fields stay None."""
    trace = ensure_trace(trace)
    doc_type = _document_type(document_type)
    text = preprocess_text(raw_text or "")
    trace.record("input", "parsing document", document_type=doc_type.value, length=len(raw_text or ""))

    resolution = resolve_birthdate(text, today=today, trace=trace)
    parsed = ParsedDocument(
        raw_text=raw_text or "",
        document_type=doc_type,
        birthdate=resolution.birthdate,
        document_number=extract_document_number(text, tables, trace),
        full_name=extract_full_name(text, tables, trace),
        country=extract_country(text, tables, trace),
        resolution=resolution,
    )
    LOGGER.debug(
        "Parsed %s document: birthdate=%s number=%s name=%s country=%s",
        doc_type.value,
        parsed.birthdate,
        parsed.document_number,
        parsed.full_name,
        parsed.country,
    )
    return parsed


def extract_document_fields(
    raw_text: str,
    document_type: Union[DocumentType, str] = DocumentType.PASSPORT,
    tables: Optional[ExtractorTables] = None,
    trace: Optional[ExtractionTrace] = None,
    today: Optional[dt.date] = None,
) -> ExtractedFields:
    """Extract identity fields, raising when a mandatory one is missing.

    The birthdate is checked before the document number, so a document
    missing both reports the birthdate.
    """
    trace = ensure_trace(trace)
    parsed = parse_document_data(raw_text, document_type, tables=tables, trace=trace, today=today)

    if parsed.birthdate is None:
        report = build_failure_report(parsed.raw_text, FIELD_BIRTHDATE, today=today)
        rejected = collect_rejected_candidates(parsed.raw_text, today=today)
        LOGGER.warning("Birthdate missing; %d date candidates rejected", len(rejected))
        trace.record("failure", "birthdate missing", rejected=len(rejected))
        raise MissingBirthdateError(report, rejected=rejected)

    if parsed.document_number is None:
        report = build_failure_report(parsed.raw_text, FIELD_DOCUMENT_NUMBER)
        near_misses = find_document_number_near_misses(parsed.raw_text)
        LOGGER.warning("Document number missing; %d near misses", len(near_misses))
        trace.record("failure", "document number missing", near_misses=near_misses)
        raise MissingDocumentNumberError(report, near_misses=near_misses)

    return ExtractedFields(
        birthdate=parsed.birthdate.iso,
        document_number=parsed.document_number,
        document_type=parsed.document_type,
        full_name=parsed.full_name,
        country=parsed.country,
        raw_text=parsed.raw_text,
    )


def failure_payload(error: ExtractionError) -> ExtractionFailure:
    return ExtractionFailure(
        code=error.code,
        message=error.message,
        rejected_candidates=[
            RejectedCandidateModel(text=item.text, reason=item.reason.value, parsed=item.parsed)
            for item in error.rejected
        ],
        near_misses=list(error.near_misses),
    )
