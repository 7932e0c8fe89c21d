from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Set

from .dates import MONTH_NAMES
from .normalize import normalize_ocr_text

DATE_TEMPLATES = (
    # DD/MM/YYYY or MM/DD/YYYY
    re.compile(r"\b(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})\b"),
    # YYYY/MM/DD
    re.compile(r"\b(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})\b"),
    # DD-MMM-YYYY, 17-0CT-2001
    re.compile(r"\b(\d{1,2})[/\-.\s]+([A-Z0-9]{3})[/\-.\s]+(\d{2,4})\b", re.IGNORECASE),
    # DD MMM YYYY, 17 0CT 2001
    re.compile(r"\b(\d{1,2})\s+([A-Z0-9]{3})\s+(\d{2,4})\b", re.IGNORECASE),
    # DD MONTH YYYY
    re.compile(r"\b(\d{1,2})\s+(" + "|".join(MONTH_NAMES) + r")\s+(\d{2,4})\b", re.IGNORECASE),
)


@dataclass(frozen=True)
class DateCandidate:
    text: str
    start: int
    end: int
    source: str = "normalized"


def _scan(text: str, source: str, seen: Set[str], out: List[DateCandidate]) -> None:
    for pattern in DATE_TEMPLATES:
        for match in pattern.finditer(text):
            raw = match.group(0).strip()
            if not raw or raw in seen:
                continue
            seen.add(raw)
            out.append(DateCandidate(raw, match.start(), match.end(), source))


def find_all_dates(text: str) -> List[DateCandidate]:
    """Return every date-shaped substring, normalized reading first.

    The original text is scanned as well so an uncorrected spelling survives
    next to its corrected one. Nothing here checks that a candidate is a real
    date.
    """
    if not text:
        return []
    candidates: List[DateCandidate] = []
    seen: Set[str] = set()
    normalized = normalize_ocr_text(text)
    _scan(normalized, "normalized", seen, candidates)
    if normalized != text:
        _scan(text, "raw", seen, candidates)
    return candidates
