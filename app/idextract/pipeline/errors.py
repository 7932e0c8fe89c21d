from __future__ import annotations

from typing import Sequence, Tuple

from .birthdate import RejectedCandidate

MISSING_BIRTHDATE = "missing_birthdate"
MISSING_DOCUMENT_NUMBER = "missing_document_number"


class ExtractionError(Exception):
    """A mandatory field could not be extracted from the document text.

    ``message`` is the multi-line report meant for people; ``code`` is what
    callers should branch on.
    """

    code = "extraction_failed"

    def __init__(
        self,
        message: str,
        rejected: Sequence[RejectedCandidate] = (),
        near_misses: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.rejected: Tuple[RejectedCandidate, ...] = tuple(rejected)
        self.near_misses: Tuple[str, ...] = tuple(near_misses)


class MissingBirthdateError(ExtractionError):
    code = MISSING_BIRTHDATE


class MissingDocumentNumberError(ExtractionError):
    code = MISSING_DOCUMENT_NUMBER


class OCRError(Exception):
    """The OCR engine could not turn an image into text."""
