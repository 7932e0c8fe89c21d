from __future__ import annotations

import re
from typing import Mapping, Optional


# Whole-token month fixes for common digit/letter confusions. The upper-casing
# entries fold "Feb" and friends so later matching sees one spelling.
MONTH_TOKEN_FIXES = (
    (re.compile(r"\b0CT\b", re.IGNORECASE), "OCT"),
    (re.compile(r"\b1AN\b", re.IGNORECASE), "JAN"),
    (re.compile(r"\bFEB\b", re.IGNORECASE), "FEB"),
    (re.compile(r"\bMAR\b", re.IGNORECASE), "MAR"),
    (re.compile(r"\bAPR\b", re.IGNORECASE), "APR"),
    (re.compile(r"\bMAY\b", re.IGNORECASE), "MAY"),
    (re.compile(r"\b1UN\b", re.IGNORECASE), "JUN"),
    (re.compile(r"\b1UL\b", re.IGNORECASE), "JUL"),
    (re.compile(r"\bAUG\b", re.IGNORECASE), "AUG"),
    (re.compile(r"\bSEP\b", re.IGNORECASE), "SEP"),
    (re.compile(r"\bN0V\b", re.IGNORECASE), "NOV"),
    (re.compile(r"\bDEC\b", re.IGNORECASE), "DEC"),
)
# Month tokens seen inside a single candidate (no word boundaries needed).
MONTH_TOKEN_OCR = {
    "0CT": "OCT",
    "1AN": "JAN",
    "1UN": "JUN",
    "1UL": "JUL",
    "N0V": "NOV",
}
STRAY_ZERO_RE = re.compile(r"\b0\b")
ONE_BEFORE_VOWEL_RE = re.compile(r"1([AEOU])")
WHITESPACE_RE = re.compile(r"\s+")
NON_DOCUMENT_CHARS_RE = re.compile(r"[^\w\s/\-.:]")


def normalize_ocr_text(text: str) -> str:
    """Fix systematic OCR confusions ahead of pattern matching.

    Every rule swaps one character for one character, so offsets into the
    result line up with the input. Applying it twice changes nothing.
    """
    if not text:
        return ""
    out = text
    for pattern, replacement in MONTH_TOKEN_FIXES:
        out = pattern.sub(replacement, out)
    out = STRAY_ZERO_RE.sub("O", out)
    return ONE_BEFORE_VOWEL_RE.sub(r"I\1", out)


def fix_month_token(token: str) -> str:
    upper = token.upper()
    return MONTH_TOKEN_OCR.get(upper, upper)


def preprocess_text(text: str) -> str:
    """Collapse whitespace and drop characters no document field uses."""
    if not text:
        return ""
    collapsed = WHITESPACE_RE.sub(" ", text)
    return NON_DOCUMENT_CHARS_RE.sub("", collapsed).strip()


def normalize_document_number(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return re.sub(r"\s+", "", value.strip()).upper()


def normalize_country(value: Optional[str], synonyms: Mapping[str, str]) -> Optional[str]:
    if not value:
        return None
    key = WHITESPACE_RE.sub(" ", value.strip()).upper()
    return synonyms.get(key, key)
