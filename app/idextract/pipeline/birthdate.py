from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from ..config import CONFIG
from .candidates import DateCandidate, find_all_dates
from .dates import ParsedDate, RejectionReason, explain_date
from .normalize import normalize_ocr_text
from .trace import ExtractionTrace, ensure_trace

LOGGER = logging.getLogger(__name__)

# Priority order: the first keyword with a plausible nearby date wins.
BIRTHDATE_KEYWORDS = (
    "DATE OF BIRTH",
    "DOB",
    "BIRTH DATE",
    "BORN",
    "BIRTH",
    "DATE OF BIRTH:",
    "DOB:",
    "BIRTHDATE",
    "BIRTH DATE:",
    "BORN:",
)
EARLIEST_BIRTHDATE = dt.date(1900, 1, 1)
MAX_AGE_YEARS = 150
FUTURE_TOLERANCE = dt.timedelta(days=1)


@dataclass(frozen=True)
class RejectedCandidate:
    text: str
    reason: RejectionReason
    parsed: Optional[str] = None


@dataclass(frozen=True)
class BirthdateResolution:
    birthdate: Optional[ParsedDate] = None
    source: Optional[str] = None
    keyword: Optional[str] = None
    rejected: Tuple[RejectedCandidate, ...] = field(default_factory=tuple)


def _today(today: Optional[dt.date]) -> dt.date:
    return today or dt.date.today()


def age_on(birthdate: dt.date, today: dt.date) -> int:
    # A birthdate inside the skew tolerance counts as age 0, not -1.
    if birthdate > today:
        return 0
    return relativedelta(today, birthdate).years


def check_birthdate(
    parsed: Union[ParsedDate, dt.date], today: Optional[dt.date] = None
) -> Optional[RejectionReason]:
    """Return why ``parsed`` cannot be a birthdate, or None when it can.

    Plain ``datetime.date`` values are accepted as well, so dates outside the
    parser's supported range can still be classified.
    """
    current = _today(today)
    try:
        value = dt.date(parsed.year, parsed.month, parsed.day)
    except ValueError:
        return RejectionReason.INVALID_DATE
    if value > current + FUTURE_TOLERANCE:
        return RejectionReason.FUTURE_DATE
    if value < EARLIEST_BIRTHDATE:
        return RejectionReason.TOO_OLD
    age = age_on(value, current)
    if age < 0 or age > MAX_AGE_YEARS:
        return RejectionReason.AGE_OUT_OF_RANGE
    return None


def is_valid_birthdate(parsed: Union[ParsedDate, dt.date], today: Optional[dt.date] = None) -> bool:
    return check_birthdate(parsed, today) is None


def evaluate_candidate(
    candidate: DateCandidate, today: Optional[dt.date] = None
) -> Tuple[Optional[ParsedDate], Optional[RejectedCandidate]]:
    parsed, reason = explain_date(candidate.text)
    if parsed is None:
        return None, RejectedCandidate(candidate.text, reason or RejectionReason.UNPARSABLE)
    reason = check_birthdate(parsed, today)
    if reason is not None:
        return None, RejectedCandidate(candidate.text, reason, parsed.iso)
    return parsed, None


def _keyword_positions(haystack: str, keyword: str) -> Iterable[int]:
    for match in re.finditer(re.escape(keyword), haystack, re.IGNORECASE):
        yield match.start()


def resolve_birthdate(
    text: str,
    today: Optional[dt.date] = None,
    trace: Optional[ExtractionTrace] = None,
) -> BirthdateResolution:
    """Pick the single most likely birthdate in ``text``.

    Dates close to a birthdate keyword win outright. Failing that, every
    plausible date in the document is considered and the earliest is taken,
    since issue and expiry dates come after the holder's birth.
    """
    trace = ensure_trace(trace)
    if not text:
        return BirthdateResolution()
    current = _today(today)
    # normalize_ocr_text keeps offsets, so indexes found here slice ``text``.
    # Upper-casing can change length ("ß" -> "SS"); keywords match case-blind.
    haystack = normalize_ocr_text(text)
    before = CONFIG.extraction.keyword_window_before
    after = CONFIG.extraction.keyword_window_after
    rejected: List[RejectedCandidate] = []
    seen_rejections = set()

    def remember(item: RejectedCandidate) -> None:
        key = (item.text, item.reason)
        if key not in seen_rejections:
            seen_rejections.add(key)
            rejected.append(item)

    for keyword in BIRTHDATE_KEYWORDS:
        for index in _keyword_positions(haystack, keyword):
            start = max(0, index - before)
            end = min(len(text), index + len(keyword) + after)
            window = text[start:end]
            for candidate in find_all_dates(window):
                parsed, rejection = evaluate_candidate(candidate, current)
                if rejection is not None:
                    remember(rejection)
                    continue
                trace.record(
                    "birthdate",
                    "birthdate found near keyword",
                    keyword=keyword,
                    candidate=candidate.text,
                    birthdate=parsed.iso,
                )
                return BirthdateResolution(parsed, "keyword", keyword, tuple(rejected))

    valid: List[ParsedDate] = []
    all_candidates = find_all_dates(text)
    trace.record("birthdate", "scanning whole document", candidates=[c.text for c in all_candidates])
    for candidate in all_candidates:
        parsed, rejection = evaluate_candidate(candidate, current)
        if rejection is not None:
            remember(rejection)
            trace.record(
                "birthdate",
                "candidate rejected",
                candidate=rejection.text,
                reason=rejection.reason.value,
                parsed=rejection.parsed,
            )
            continue
        valid.append(parsed)

    if valid:
        best = min(valid, key=lambda item: item.iso)
        trace.record("birthdate", "earliest plausible date chosen", birthdate=best.iso, valid=[v.iso for v in valid])
        return BirthdateResolution(best, "document", None, tuple(rejected))

    LOGGER.debug("No plausible birthdate among %d candidates", len(all_candidates))
    trace.record("birthdate", "no plausible birthdate", rejected=len(rejected))
    return BirthdateResolution(None, None, None, tuple(rejected))


def find_birthdate(text: str, today: Optional[dt.date] = None) -> Optional[ParsedDate]:
    return resolve_birthdate(text, today).birthdate
