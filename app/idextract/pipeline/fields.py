from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from .normalize import normalize_country, normalize_document_number
from .tables import DEFAULT_TABLES, ExtractorTables
from .trace import ExtractionTrace, ensure_trace

LOGGER = logging.getLogger(__name__)

DATE_SHAPED_RE = re.compile(r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}")
DOCUMENT_NUMBER_WORD_RE = re.compile(r"^[A-Z]{1,3}[0-9]{6,}")
NAME_WORD_RE = re.compile(r"[A-Z]{3,}")
MIXED_CASE_NAME_RE = re.compile(r"\b([A-Z][a-z]{2,}\s+[A-Z][a-z]{2,}(?:\s+[A-Z][a-z]{2,})?)\b")
NAME_KEYWORD_RE = re.compile(r"\b(?:SURNAME|GIVEN\s+NAMES?|FULL\s+NAME|NAME)\b[\s:]*([A-Z][A-Z\s]{4,50})")
SURNAME_RE = re.compile(r"\bSURNAME\b[\s:]*([A-Z][A-Z\s]{2,40})")
GIVEN_NAMES_RE = re.compile(r"\bGIVEN\s+NAMES?\b[\s:]*([A-Z][A-Z\s]{2,40})")
COUNTRY_CONTEXT_RADIUS = 20
COUNTRY_START_WINDOW = 100
MIN_DOCUMENT_NUMBER_LENGTH = 6


def _alternation(items: Iterable[str]) -> str:
    return "|".join(items)


@lru_cache(maxsize=8)
def _document_number_patterns(keywords: Tuple[str, ...]) -> Tuple[re.Pattern, ...]:
    return (
        # After keywords (PASSPORT NO, DOCUMENT NUMBER, ...)
        re.compile(rf"\b(?:{_alternation(keywords)})\b[\s:.]*([A-Z0-9]{{6,15}})"),
        # Country code ahead of the number, e.g. KEN AK1626595
        re.compile(r"\b[A-Z]{2,4}\s+([A-Z]{1,3}[0-9]{6,12})\b"),
        # Standalone letter-prefixed codes
        re.compile(r"\b([A-Z]{1,3}[0-9]{6,12})\b"),
        # Long digit runs
        re.compile(r"\b([0-9]{8,12})\b"),
        # Anything after a bare NO / NUMBER
        re.compile(r"\b(?:NO|NUMBER)\b[\s:.]*([A-Z0-9]{6,15})"),
    )


def is_document_number(value: str) -> bool:
    if len(value) < MIN_DOCUMENT_NUMBER_LENGTH:
        return False
    if DATE_SHAPED_RE.search(value):
        return False
    has_alpha = bool(re.search(r"[A-Z]", value))
    has_digit = bool(re.search(r"[0-9]", value))
    return (has_alpha and has_digit) or bool(re.fullmatch(r"[0-9]{8,}", value))


def extract_document_number(
    text: str,
    tables: Optional[ExtractorTables] = None,
    trace: Optional[ExtractionTrace] = None,
) -> Optional[str]:
    tables = tables or DEFAULT_TABLES
    trace = ensure_trace(trace)
    upper = text.upper()
    patterns = _document_number_patterns(tuple(tables.document_number_keywords))
    for index, pattern in enumerate(patterns):
        for match in pattern.finditer(upper):
            candidate = normalize_document_number(match.group(1))
            if candidate and is_document_number(candidate):
                trace.record("document_number", "document number found", value=candidate, pattern=index)
                return candidate
            trace.record("document_number", "candidate rejected", value=candidate, pattern=index)
    return None


def _name_word_rejected(word: str, tables: ExtractorTables) -> bool:
    return word in tables.name_denylist or len(word) < 3 or bool(DOCUMENT_NUMBER_WORD_RE.match(word))


def accept_name(candidate: Optional[str], tables: Optional[ExtractorTables] = None) -> Optional[str]:
    """Return the cleaned name, or None when it looks like boilerplate."""
    if not candidate:
        return None
    tables = tables or DEFAULT_TABLES
    name = " ".join(candidate.split())
    words = name.upper().split()
    if len(words) < 2 or len(words) > 5:
        return None
    if len(name) < 5 or len(name) > 60:
        return None
    if not re.search(r"[A-Za-z]", name):
        return None
    if any(_name_word_rejected(word, tables) for word in words):
        return None
    return name


def _trim_at_labels(value: str, tables: ExtractorTables) -> str:
    kept: List[str] = []
    for word in value.split():
        if word in tables.name_label_stops:
            break
        kept.append(word)
    return " ".join(kept)


def _labelled_name(upper: str, tables: ExtractorTables) -> Optional[str]:
    given = GIVEN_NAMES_RE.search(upper)
    surname = SURNAME_RE.search(upper)
    if given and surname:
        combined = accept_name(
            f"{_trim_at_labels(given.group(1), tables)} {_trim_at_labels(surname.group(1), tables)}",
            tables,
        )
        if combined:
            return combined
    for match in NAME_KEYWORD_RE.finditer(upper):
        name = accept_name(_trim_at_labels(match.group(1), tables), tables)
        if name:
            return name
    return None


def _name_from_words(words: List[str], tables: ExtractorTables, starts: Iterable[int]) -> Optional[str]:
    for index in starts:
        for size in (3, 2):
            span = words[index : index + size]
            if len(span) != size or not all(NAME_WORD_RE.fullmatch(word) for word in span):
                continue
            name = accept_name(" ".join(span), tables)
            if name:
                return name
    return None


def _marked_name(upper: str, tables: ExtractorTables) -> Optional[str]:
    # The name sits right before the nearest nationality/country marker.
    start_re = re.compile(rf"\b(?:{_alternation(tables.name_start_markers)})\b")
    end_re = re.compile(rf"\b(?:{_alternation(tables.name_end_markers)})\b")
    for start in start_re.finditer(upper):
        for end in end_re.finditer(upper, start.end()):
            words = upper[start.end() : end.start()].replace("/", " ").split()
            for size in (3, 2):
                span = words[-size:]
                if len(span) != size or not all(NAME_WORD_RE.fullmatch(word) for word in span):
                    continue
                name = accept_name(" ".join(span), tables)
                if name:
                    return name
    return None


def _mixed_case_name(text: str, tables: ExtractorTables) -> Optional[str]:
    for match in MIXED_CASE_NAME_RE.finditer(text):
        name = accept_name(match.group(1), tables)
        if name:
            return name
    return None


def _marker_span_name(upper: str, tables: ExtractorTables) -> Optional[str]:
    for marker in tables.name_start_markers:
        start = upper.find(marker)
        if start == -1:
            continue
        start += len(marker)
        ends = [upper.find(end, start) for end in tables.name_fallback_end_markers]
        ends = [end for end in ends if end != -1]
        if not ends:
            continue
        words = upper[start : min(ends)].split()
        name = _name_from_words(words, tables, range(len(words)))
        if name:
            return name
    return None


def extract_full_name(
    text: str,
    tables: Optional[ExtractorTables] = None,
    trace: Optional[ExtractionTrace] = None,
) -> Optional[str]:
    """Find the holder's name.

    Labelled fields are tried first, then an all-caps span after a passport
    marker, then a mixed-case span in the original casing. When all of those
    fail the text between the passport marker and the nationality marker is
    scanned on its own.
    """
    tables = tables or DEFAULT_TABLES
    trace = ensure_trace(trace)
    upper = text.upper()
    strategies = (
        ("label", lambda: _labelled_name(upper, tables)),
        ("marker", lambda: _marked_name(upper, tables)),
        ("mixed_case", lambda: _mixed_case_name(text, tables)),
        ("marker_span", lambda: _marker_span_name(upper, tables)),
    )
    for strategy, run in strategies:
        name = run()
        if name:
            trace.record("full_name", "name found", value=name, strategy=strategy)
            return name
    trace.record("full_name", "no name found")
    return None


def _in_country_context(upper: str, position: int, length: int, tables: ExtractorTables) -> bool:
    if position < COUNTRY_START_WINDOW:
        return True
    context = upper[max(0, position - COUNTRY_CONTEXT_RADIUS) : position + length + COUNTRY_CONTEXT_RADIUS]
    return any(keyword in context for keyword in tables.country_context_keywords)


def _accept_country(upper: str, raw: str, position: int, tables: ExtractorTables) -> Optional[str]:
    if raw in tables.country_stopwords:
        return None
    country = normalize_country(raw, tables.country_synonyms)
    if not country:
        return None
    if len(country) == 3 and not _in_country_context(upper, position, len(raw), tables):
        return None
    return country


def extract_country(
    text: str,
    tables: Optional[ExtractorTables] = None,
    trace: Optional[ExtractionTrace] = None,
) -> Optional[str]:
    tables = tables or DEFAULT_TABLES
    trace = ensure_trace(trace)
    upper = text.upper()
    keyword_re = re.compile(rf"\b(?:{_alternation(tables.country_keywords)})\b[\s:]*([A-Z]{{2,3}})\b")
    names = sorted(tables.known_country_names, key=len, reverse=True)
    names_re = re.compile(r"\b(" + _alternation(re.escape(n).replace(r"\ ", r"\s+") for n in names) + r")\b")

    for strategy, pattern in (("keyword", keyword_re), ("known_name", names_re)):
        for match in pattern.finditer(upper):
            raw = " ".join(match.group(1).split())
            country = _accept_country(upper, raw, match.start(1), tables)
            if country:
                trace.record("country", "country found", value=country, strategy=strategy)
                return country

    for code in tables.fallback_country_codes:
        if re.search(rf"\b{re.escape(code)}\b", upper):
            trace.record("country", "country found", value=code, strategy="fallback")
            return code
    trace.record("country", "no country found")
    return None
