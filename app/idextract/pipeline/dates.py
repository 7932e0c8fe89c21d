from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .normalize import fix_month_token, normalize_ocr_text

LOGGER = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100
TWO_DIGIT_YEAR_PIVOT = 50

MONTH_ABBREVIATIONS = (
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
)
MONTH_NAMES = (
    "JANUARY",
    "FEBRUARY",
    "MARCH",
    "APRIL",
    "MAY",
    "JUNE",
    "JULY",
    "AUGUST",
    "SEPTEMBER",
    "OCTOBER",
    "NOVEMBER",
    "DECEMBER",
)
MONTH_LOOKUP = {
    **{abbr: index for index, abbr in enumerate(MONTH_ABBREVIATIONS, start=1)},
    **{name: index for index, name in enumerate(MONTH_NAMES, start=1)},
    "SEPT": 9,
}

SPACED_TEXT_DATE_RE = re.compile(r"^(\d{1,2})\s+([A-Z0-9]{3,9})\s+(\d{2,4})$", re.IGNORECASE)
YEAR_FIRST_RE = re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})$")
DAY_MONTH_RE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})$")
SEPARATED_TEXT_DATE_RE = re.compile(r"^(\d{1,2})[/\-.]+([A-Z0-9]{3,9})[/\-.]+(\d{2,4})$", re.IGNORECASE)


class RejectionReason(str, Enum):
    INVALID_DATE = "invalid_date"
    FUTURE_DATE = "future_date"
    TOO_OLD = "too_old"
    AGE_OUT_OF_RANGE = "age_out_of_range"
    UNPARSABLE = "unparsable"


@dataclass(frozen=True, order=True)
class ParsedDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not is_valid_date_components(self.year, self.month, self.day):
            raise ValueError(f"not a calendar date: {self.year}-{self.month}-{self.day}")

    @property
    def iso(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.iso


def is_valid_date_components(year: int, month: int, day: int) -> bool:
    if year < MIN_YEAR or year > MAX_YEAR:
        return False
    if month < 1 or month > 12:
        return False
    return 1 <= day <= calendar.monthrange(year, month)[1]


def build_date(year: int, month: int, day: int) -> Optional[ParsedDate]:
    try:
        return ParsedDate(year, month, day)
    except ValueError:
        return None


def expand_year(year: int) -> int:
    if year < 100:
        return 2000 + year if year < TWO_DIGIT_YEAR_PIVOT else 1900 + year
    return year


def month_from_token(token: str) -> Optional[int]:
    return MONTH_LOOKUP.get(fix_month_token(token))


def _text_month_date(match: re.Match) -> Tuple[bool, Optional[ParsedDate]]:
    month = month_from_token(match.group(2))
    if month is None:
        return False, None
    year = expand_year(int(match.group(3)))
    return True, build_date(year, month, int(match.group(1)))


def _day_month_date(match: re.Match) -> Optional[ParsedDate]:
    first = int(match.group(1))
    second = int(match.group(2))
    year = expand_year(int(match.group(3)))
    if first > 12:
        return build_date(year, second, first)
    if second > 12:
        return build_date(year, first, second)
    # Ambiguous: day-first (international convention) wins ties.
    return build_date(year, second, first) or build_date(year, first, second)


def explain_date(candidate: str) -> Tuple[Optional[ParsedDate], Optional[RejectionReason]]:
    """Parse one raw candidate, reporting why it failed when it does.

    ``unparsable`` means no notation matched the text; ``invalid_date`` means a
    (year, month, day) triple was formed but is not a real calendar date in
    the supported range.
    """
    if not candidate or not candidate.strip():
        return None, RejectionReason.UNPARSABLE
    normalized = normalize_ocr_text(candidate.strip())
    formed_triple = False

    match = SPACED_TEXT_DATE_RE.match(normalized)
    if match:
        formed, parsed = _text_month_date(match)
        if parsed:
            return parsed, None
        formed_triple = formed_triple or formed

    compact = re.sub(r"\s+", "", normalized)

    match = YEAR_FIRST_RE.match(compact)
    if match:
        parsed = build_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if parsed:
            return parsed, None
        formed_triple = True

    match = DAY_MONTH_RE.match(compact)
    if match:
        parsed = _day_month_date(match)
        if parsed:
            return parsed, None
        formed_triple = True

    match = SEPARATED_TEXT_DATE_RE.match(compact)
    if match:
        formed, parsed = _text_month_date(match)
        if parsed:
            return parsed, None
        formed_triple = formed_triple or formed

    LOGGER.debug("Failed to parse date %r (normalized %r)", candidate, normalized)
    if formed_triple:
        return None, RejectionReason.INVALID_DATE
    return None, RejectionReason.UNPARSABLE


def parse_date(candidate: str) -> Optional[ParsedDate]:
    parsed, _ = explain_date(candidate)
    return parsed
