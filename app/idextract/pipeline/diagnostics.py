from __future__ import annotations

import datetime as dt
import re
from typing import List, Optional, Set

from .birthdate import RejectedCandidate, evaluate_candidate
from .candidates import DateCandidate, find_all_dates
from .errors import MISSING_BIRTHDATE, MISSING_DOCUMENT_NUMBER
from .normalize import preprocess_text

FIELD_BIRTHDATE = "birthdate"
FIELD_DOCUMENT_NUMBER = "document_number"

NEAR_MISS_PATTERNS = (
    re.compile(r"\b([A-Z]{1,4}[0-9]{4,15})\b"),
    re.compile(r"\b([0-9]{5,15})\b"),
)

BIRTHDATE_CHECKLIST = (
    "The document image is clear and in focus",
    "The birthdate field is clearly visible",
    "The text is not rotated or skewed",
    "The image has sufficient resolution",
)


def _all_date_candidates(text: str) -> List[DateCandidate]:
    seen: Set[str] = set()
    out: List[DateCandidate] = []
    for candidate in find_all_dates(text) + find_all_dates(preprocess_text(text)):
        if candidate.text in seen:
            continue
        seen.add(candidate.text)
        out.append(candidate)
    return out


def collect_rejected_candidates(text: str, today: Optional[dt.date] = None) -> List[RejectedCandidate]:
    rejected: List[RejectedCandidate] = []
    for candidate in _all_date_candidates(text or ""):
        _, rejection = evaluate_candidate(candidate, today)
        if rejection is not None:
            rejected.append(rejection)
    return rejected


def find_document_number_near_misses(text: str) -> List[str]:
    upper = preprocess_text(text or "").upper()
    found: List[str] = []
    for pattern in NEAR_MISS_PATTERNS:
        for match in pattern.finditer(upper):
            value = match.group(1)
            if value not in found:
                found.append(value)
    return found


def _describe(candidate: DateCandidate, today: Optional[dt.date]) -> str:
    parsed, rejection = evaluate_candidate(candidate, today)
    if rejection is None:
        return f"{candidate.text} -> {parsed.iso} (accepted)"
    if rejection.parsed:
        return f"{candidate.text} -> {rejection.parsed} (rejected: {rejection.reason.value})"
    return f"{candidate.text} -> could not parse ({rejection.reason.value})"


def _birthdate_report(text: str, today: Optional[dt.date]) -> str:
    candidates = _all_date_candidates(text)
    lines = ["Could not extract birthdate from document.", ""]
    lines.append(f"OCR extracted {len(text)} characters of text.")
    if candidates:
        lines.append(f"Found {len(candidates)} potential date(s):")
        for index, candidate in enumerate(candidates, start=1):
            lines.append(f"  {index}. {_describe(candidate, today)}")
        lines.append("")
        lines.append(
            "These dates were found but did not pass validation "
            "(must be a real date between 1900 and today)."
        )
    else:
        lines.append("No dates were found in the extracted text.")
    lines.append("")
    lines.append("Please check:")
    for index, item in enumerate(BIRTHDATE_CHECKLIST, start=1):
        lines.append(f"{index}. {item}")
    return "\n".join(lines)


def _document_number_report(text: str) -> str:
    near_misses = find_document_number_near_misses(text)
    lines = ["Could not extract document number from document.", ""]
    if near_misses:
        lines.append(f"Found {len(near_misses)} potential document number(s):")
        for index, value in enumerate(near_misses, start=1):
            lines.append(f"  {index}. {value}")
        lines.append("")
        lines.append("These were found but did not match expected patterns.")
    else:
        lines.append("No potential document numbers were found.")
    lines.append("")
    lines.append("Please ensure the document number is clearly visible.")
    return "\n".join(lines)


def build_failure_report(text: str, missing_field: str, today: Optional[dt.date] = None) -> str:
    """Explain, for a person, why ``missing_field`` could not be extracted."""
    text = text or ""
    if missing_field in {FIELD_BIRTHDATE, MISSING_BIRTHDATE}:
        return _birthdate_report(text, today)
    if missing_field in {FIELD_DOCUMENT_NUMBER, MISSING_DOCUMENT_NUMBER}:
        return _document_number_report(text)
    return f"Could not extract {missing_field} from document."
