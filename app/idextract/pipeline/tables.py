from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Tuple

from ..config import CONFIG

NAME_DENYLIST = frozenset(
    {
        # Boilerplate seen on passport data pages.
        "REPUBLIC",
        "GOVERNMENT",
        "PASSPORT",
        "PASIPASSEPORT",
        "JAMHURI",
        "REPUBLIQUE",
        "KENYA",
        "KENYAN",
        "KEN",
        "COUNTRY",
        "NATIONALITY",
        "ISSUING",
        "AUTHORITY",
        "OF",
        "THE",
        # OCR debris from security printing.
        "BEADS",
        "PAR",
        "BONE",
        "NEER",
        "MR",
        "PRD",
        "STN",
        "PACE",
        "HUH",
        "PE",
        "KI",
        "NET",
        "RUIRU",
        "GTR",
        "BN",
        "RIES",
        "PT",
        # Month abbreviations.
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
        # Field labels.
        "DATE",
        "BIRTH",
        "PLACE",
        "ISSUE",
        "EXPIRY",
        "SURNAME",
        "GIVEN",
        "NAMES",
        "NAME",
        "SEX",
        "TYPE",
        "CODE",
        "NUMBER",
        "DOCUMENT",
        "NATIONAL",
        "IDENTITY",
        "CARD",
        "DRIVER",
        "DRIVERS",
        "LICENSE",
        "LICENCE",
        "SIGNATURE",
        "HOLDER",
        # Issuing-office boilerplate, often printed in mixed case.
        "IMMIGRATION",
        "DEPARTMENT",
        "MINISTRY",
        "INTERIOR",
        "AFFAIRS",
        "SERVICE",
        "SERVICES",
        "OFFICE",
        "BUREAU",
        "REGISTRATION",
        "REGISTRAR",
        "ISSUED",
        "UNITED",
        "STATES",
        "KINGDOM",
        "NAIROBI",
        "MOMBASA",
        "KISUMU",
    }
)
NAME_LABEL_STOPS = (
    "NATIONALITY",
    "SEX",
    "DATE",
    "COUNTRY",
    "PASSPORT",
    "PLACE",
    "BIRTH",
    "DOB",
    "ID",
    "DOCUMENT",
    "NO",
    "NUMBER",
    "SURNAME",
    "GIVEN",
)
NAME_START_MARKERS = ("PASSPORT",)
NAME_END_MARKERS = ("NATIONALITY", "KENYAN", "COUNTRY", "SEX", "DATE")
# The span fallback stops only at these.
NAME_FALLBACK_END_MARKERS = ("NATIONALITY", "KENYAN")

DOCUMENT_NUMBER_KEYWORDS = (
    r"PASSPORT\s+NO",
    r"PASSPORT\s+NUMBER",
    r"DOCUMENT\s+NUMBER",
    r"DOCUMENT\s+NO",
    r"DOC\s+NO",
    r"ID\s+NUMBER",
    r"ID\s+NO",
    r"PASSPORT",
)

COUNTRY_KEYWORDS = (
    r"COUNTRY\s+CODE",
    r"NATIONALITY",
    r"ISSUING\s+COUNTRY",
    r"COUNTRY\s+OF\s+ISSUE",
    r"COUNTRY",
)
COUNTRY_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "KENYA": "KEN",
        "UNITED STATES": "USA",
        "USA": "USA",
        "UNITED KINGDOM": "UK",
        "UK": "UK",
    }
)
KNOWN_COUNTRY_NAMES = (
    "USA",
    "UNITED STATES",
    "UK",
    "UNITED KINGDOM",
    "CANADA",
    "GERMANY",
    "FRANCE",
    "SPAIN",
    "ITALY",
    "AUSTRALIA",
    "JAPAN",
    "CHINA",
    "INDIA",
    "BRAZIL",
    "MEXICO",
    "RUSSIA",
    "SOUTH KOREA",
    "NETHERLANDS",
    "BELGIUM",
    "SWITZERLAND",
    "AUSTRIA",
    "SWEDEN",
    "NORWAY",
    "DENMARK",
    "FINLAND",
    "POLAND",
    "PORTUGAL",
    "GREECE",
    "TURKEY",
    "SAUDI ARABIA",
    "UAE",
    "UNITED ARAB EMIRATES",
    "KENYA",
)
COUNTRY_CONTEXT_KEYWORDS = ("COUNTRY", "NATIONALITY", "REPUBLIC", "ISSUING")
# Words the keyword pattern can pick up that are never a country.
COUNTRY_STOPWORDS = frozenset({"OF", "THE", "NO", "ID", "CODE", "AND", "FOR", "SEX", "DOB"})


@dataclass(frozen=True)
class ExtractorTables:
    """Data tables the field extractors read.

    Swap these out to tune the extractors for another document population
    without touching code.
    """

    name_denylist: frozenset = NAME_DENYLIST
    name_label_stops: Tuple[str, ...] = NAME_LABEL_STOPS
    name_start_markers: Tuple[str, ...] = NAME_START_MARKERS
    name_end_markers: Tuple[str, ...] = NAME_END_MARKERS
    name_fallback_end_markers: Tuple[str, ...] = NAME_FALLBACK_END_MARKERS
    document_number_keywords: Tuple[str, ...] = DOCUMENT_NUMBER_KEYWORDS
    country_keywords: Tuple[str, ...] = COUNTRY_KEYWORDS
    country_synonyms: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(COUNTRY_SYNONYMS)))
    known_country_names: Tuple[str, ...] = KNOWN_COUNTRY_NAMES
    country_context_keywords: Tuple[str, ...] = COUNTRY_CONTEXT_KEYWORDS
    country_stopwords: frozenset = COUNTRY_STOPWORDS
    fallback_country_codes: Tuple[str, ...] = ()

    def with_fallback_codes(self, *codes: str) -> "ExtractorTables":
        return replace(self, fallback_country_codes=tuple(code.upper() for code in codes))


def default_tables() -> ExtractorTables:
    return ExtractorTables(fallback_country_codes=CONFIG.extraction.country_fallback_codes)


DEFAULT_TABLES = default_tables()
# Tuning the engine was first built against: bare "KEN" tokens count as Kenya.
KENYAN_PASSPORT_TABLES = ExtractorTables().with_fallback_codes("KEN")
